import logging

from app.config import settings
from app.core.email.email import Mailer
from app.core.response.outcome import SideEffectOutcome

logger = logging.getLogger(__name__)


def send_password_reset_email(
    mailer: Mailer, email: str, name: str | None, reset_token: str
) -> SideEffectOutcome:
    logger.info(f"Sending password reset code to {email}")
    return mailer.send_best_effort(
        to=email,
        subject=f"{settings.APP_NAME} password reset code",
        template_path="email/password_reset.html",
        context={
            "app_name": settings.APP_NAME,
            "name": name,
            "reset_token": reset_token,
            "expires_minutes": settings.RESET_TOKEN_EXPIRE_MINUTES,
        },
    )
