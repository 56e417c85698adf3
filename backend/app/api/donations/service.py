import logging
from datetime import datetime
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from app.api.campaigns.models import Campaigns
from app.api.campaigns.service import increment_current_amount
from app.api.donations.models import Donations
from app.api.users.models import Users
from app.core.response.outcome import OperationResult, SideEffectOutcome
from app.core.validations.schema import validate_relations

logger = logging.getLogger(__name__)


def transaction_id(donation: Donations) -> str:
    return f"TXN-{donation.id:08d}"


async def record_donation(
    session: AsyncSession, donor: Users, **fields
) -> OperationResult[Donations]:
    """
    Persist a donation and bump the campaign's running total.

    The total is updated in its own statement after the donation is committed;
    if that fails the donation still stands and the failure is only logged.
    """
    campaign_id = fields.get("campaign_id")
    await validate_relations(session, {"campaign_id": (Campaigns, campaign_id)})

    donation = Donations(**fields, user_id=donor.id)
    session.add(donation)
    await session.commit()
    result = OperationResult(value=donation)
    logger.info(f"Donation {donation.id} of {donation.amount} recorded for user {donor.id}")

    if campaign_id is not None:
        try:
            if await increment_current_amount(session, campaign_id, donation.amount):
                result.add(SideEffectOutcome.ok("campaign_total"))
            else:
                result.add(
                    SideEffectOutcome(
                        name="campaign_total", succeeded=False, error="campaign not found"
                    )
                )
        except SQLAlchemyError as e:
            await session.rollback()
            result.add(SideEffectOutcome.failed("campaign_total", e))

    result.log(logger, f"donation {donation.id}")
    return result


async def get_donation(session: AsyncSession, donation_id: int) -> Donations:
    return await session.scalar(
        select(Donations)
        .where(Donations.id == donation_id)
        .execution_options(populate_existing=True)
    )


async def list_user_donations(
    session: AsyncSession,
    user_id: int,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> List[Donations]:
    query = select(Donations).where(Donations.user_id == user_id)
    if start_date:
        query = query.where(Donations.date >= start_date)
    if end_date:
        query = query.where(Donations.date <= end_date)
    return list(await session.scalars(query.order_by(Donations.date.desc(), Donations.id.desc())))


async def list_donations(session: AsyncSession) -> List[Donations]:
    return list(
        await session.scalars(
            select(Donations).order_by(Donations.date.desc(), Donations.id.desc())
        )
    )
