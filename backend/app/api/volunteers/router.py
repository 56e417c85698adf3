from typing import List
from fastapi import APIRouter, status

from app.api.volunteers import service
from app.api.volunteers.schemas import (
    VolunteerCreate,
    VolunteerResponse,
    VolunteerStatusUpdate,
)
from app.core.auth.dependencies import AdminAuth, DependsAuth
from app.core.response.base_model import MessageResponse
from app.db.core import SessionDep

router = APIRouter(prefix="/volunteers")


@router.post("", status_code=status.HTTP_201_CREATED, summary="Sign up as a volunteer")
async def add_volunteer(
    body: VolunteerCreate, session: SessionDep, user: DependsAuth
) -> VolunteerResponse:
    return await service.add_volunteer(session, user, **body.model_dump())


@router.get("", summary="List all volunteers")
async def list_volunteers(session: SessionDep, admin: AdminAuth) -> List[VolunteerResponse]:
    return await service.list_volunteers(session)


@router.get("/my", summary="List own volunteer signups")
async def list_my_volunteers(session: SessionDep, user: DependsAuth) -> List[VolunteerResponse]:
    return await service.list_user_volunteers(session, user.id)


@router.put("/{volunteer_id}/status", summary="Activate or archive a volunteer")
async def update_volunteer_status(
    volunteer_id: int, body: VolunteerStatusUpdate, session: SessionDep, user: DependsAuth
) -> VolunteerResponse:
    return await service.update_status(session, volunteer_id, user, body.status)


@router.delete("/{volunteer_id}", summary="Remove a volunteer")
async def remove_volunteer(
    volunteer_id: int, session: SessionDep, user: DependsAuth
) -> MessageResponse:
    await service.remove_volunteer(session, volunteer_id, user)
    return MessageResponse(message="Volunteer removed successfully")
