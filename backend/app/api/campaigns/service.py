import logging
from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.campaigns.models import CampaignStatus, CampaignTypes, Campaigns
from app.api.users.models import Users
from app.core.validations.exceptions import NotFoundError
from app.core.validations.schema import validate_relations

logger = logging.getLogger(__name__)

publicly_visible = or_(
    Campaigns.type != CampaignTypes.crowdfunding,
    Campaigns.status == CampaignStatus.approved,
)


async def list_public_campaigns(session: AsyncSession) -> list[Campaigns]:
    query = (
        select(Campaigns).where(publicly_visible).order_by(Campaigns.created_at.desc())
    )
    return list(await session.scalars(query))


async def get_public_campaign(session: AsyncSession, campaign_id: int) -> Campaigns:
    campaign = await session.scalar(
        select(Campaigns).where(Campaigns.id == campaign_id, publicly_visible)
    )
    if not campaign:
        raise NotFoundError("Campaign not found")
    return campaign


async def get_campaign_or_404(
    session: AsyncSession,
    campaign_id: int,
    campaign_type: CampaignTypes | None = None,
    message: str = "Campaign not found",
) -> Campaigns:
    query = (
        select(Campaigns)
        .where(Campaigns.id == campaign_id)
        .execution_options(populate_existing=True)
    )
    if campaign_type is not None:
        query = query.where(Campaigns.type == campaign_type)
    campaign = await session.scalar(query)
    if not campaign:
        raise NotFoundError(message)
    return campaign


async def create_campaign(session: AsyncSession, **fields) -> Campaigns:
    """
    Create a campaign record. Plain campaigns are live immediately, so their
    status defaults to approved.
    """
    await validate_relations(session, {"organizer_id": (Users, fields.get("organizer_id"))})
    if fields.get("status") is None:
        fields["status"] = CampaignStatus.approved
    fields = {key: value for key, value in fields.items() if value is not None}

    campaign = Campaigns(**fields)
    session.add(campaign)
    await session.commit()
    return await get_campaign_or_404(session, campaign.id)


async def update_campaign(
    session: AsyncSession,
    campaign_id: int,
    fields: dict,
    campaign_type: CampaignTypes | None = None,
    message: str = "Campaign not found",
) -> Campaigns:
    campaign = await get_campaign_or_404(session, campaign_id, campaign_type, message)
    if "organizer_id" in fields:
        await validate_relations(session, {"organizer_id": (Users, fields["organizer_id"])})
    for key, value in fields.items():
        setattr(campaign, key, value)
    await session.commit()
    await session.refresh(campaign)
    return campaign


async def delete_campaign(
    session: AsyncSession,
    campaign_id: int,
    campaign_type: CampaignTypes | None = None,
    message: str = "Campaign not found",
) -> None:
    query = delete(Campaigns).where(Campaigns.id == campaign_id)
    if campaign_type is not None:
        query = query.where(Campaigns.type == campaign_type)
    result = await session.execute(query)
    if not result.rowcount:
        raise NotFoundError(message)
    await session.commit()


async def increment_current_amount(
    session: AsyncSession, campaign_id: int, amount: float
) -> bool:
    """
    Add ``amount`` to the running total in a single UPDATE statement.

    Returns False when the campaign no longer exists.
    """
    result = await session.execute(
        update(Campaigns)
        .where(Campaigns.id == campaign_id)
        .values(current_amount=Campaigns.current_amount + amount)
        .execution_options(synchronize_session=False)
    )
    await session.commit()
    return bool(result.rowcount)
