import logging

from app.config import settings
from app.core.email.email import Mailer
from app.core.response.outcome import SideEffectOutcome

logger = logging.getLogger(__name__)


def send_verification_email(
    mailer: Mailer, email: str, name: str, title: str, verify_url: str
) -> SideEffectOutcome:
    logger.info(f"Sending crowdfunding verification link to {email}")
    outcome = mailer.send_best_effort(
        to=email,
        subject=f"Verify your email for {title}",
        template_path="email/crowdfunding_verification.html",
        context={
            "app_name": settings.APP_NAME,
            "name": name,
            "title": title,
            "verify_url": verify_url,
            "expires_hours": settings.VERIFICATION_TOKEN_EXPIRE_HOURS,
        },
    )
    if not outcome.succeeded:
        logger.warning(f"Verification email for '{title}' was not sent")
    return outcome
