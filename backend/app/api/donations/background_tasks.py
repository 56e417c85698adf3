import logging

from app.config import settings
from app.core.email.email import Mailer
from app.core.response.outcome import SideEffectOutcome

logger = logging.getLogger(__name__)


def send_donation_receipt(
    mailer: Mailer,
    email: str,
    name: str,
    amount: float,
    cadence: str,
    transaction_id: str,
    campaign_title: str | None = None,
) -> SideEffectOutcome:
    outcome = mailer.send_best_effort(
        to=email,
        subject=f"Thank you for your donation to {settings.APP_NAME}",
        template_path="email/donation_receipt.html",
        context={
            "app_name": settings.APP_NAME,
            "name": name,
            "amount": f"{amount:,.2f}",
            "cadence": cadence,
            "transaction_id": transaction_id,
            "campaign_title": campaign_title,
        },
    )
    if not outcome.succeeded:
        logger.warning(f"Receipt for {transaction_id} was not sent")
    return outcome
