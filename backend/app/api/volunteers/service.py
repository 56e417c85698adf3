import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.campaigns.models import Campaigns
from app.api.users.models import UserRoles, Users
from app.api.volunteers.models import VolunteerStatus, Volunteers
from app.core.validations.exceptions import NotFoundError, PermissionDeniedError
from app.core.validations.schema import validate_relations

logger = logging.getLogger(__name__)


async def add_volunteer(session: AsyncSession, user: Users, **fields) -> Volunteers:
    """Sign the caller up as a volunteer, optionally for one campaign."""
    await validate_relations(session, {"campaign_id": (Campaigns, fields.get("campaign_id"))})
    volunteer = Volunteers(**fields, user_id=user.id, status=VolunteerStatus.active)
    session.add(volunteer)
    await session.commit()
    logger.info(f"Volunteer {volunteer.id} registered by user {user.id}")
    return await get_volunteer_or_404(session, volunteer.id)


async def get_volunteer_or_404(session: AsyncSession, volunteer_id: int) -> Volunteers:
    volunteer = await session.scalar(
        select(Volunteers)
        .where(Volunteers.id == volunteer_id)
        .execution_options(populate_existing=True)
    )
    if not volunteer:
        raise NotFoundError("Volunteer not found")
    return volunteer


async def get_manageable_volunteer(
    session: AsyncSession, volunteer_id: int, user: Users
) -> Volunteers:
    volunteer = await get_volunteer_or_404(session, volunteer_id)
    if user.role != UserRoles.admin and volunteer.user_id != user.id:
        raise PermissionDeniedError()
    return volunteer


async def list_user_volunteers(session: AsyncSession, user_id: int) -> List[Volunteers]:
    query = (
        select(Volunteers)
        .where(Volunteers.user_id == user_id)
        .order_by(Volunteers.created_at.desc(), Volunteers.id.desc())
    )
    return list(await session.scalars(query))


async def list_volunteers(session: AsyncSession) -> List[Volunteers]:
    query = select(Volunteers).order_by(Volunteers.created_at.desc(), Volunteers.id.desc())
    return list(await session.scalars(query))


async def update_status(
    session: AsyncSession, volunteer_id: int, user: Users, status: VolunteerStatus
) -> Volunteers:
    volunteer = await get_manageable_volunteer(session, volunteer_id, user)
    volunteer.status = status
    await session.commit()
    return volunteer


async def remove_volunteer(session: AsyncSession, volunteer_id: int, user: Users) -> None:
    volunteer = await get_manageable_volunteer(session, volunteer_id, user)
    await session.delete(volunteer)
    await session.commit()
