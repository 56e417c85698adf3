from typing import List
from fastapi import APIRouter, status

from app.api.users.schemas import UserCreate, UserPublic, UserUpdate
from app.api.users import service
from app.core.auth.dependencies import AdminAuth
from app.core.response.base_model import MessageResponse
from app.db.core import SessionDep

router = APIRouter(prefix="/users")


@router.get("", summary="List all users")
async def list_users(session: SessionDep, admin: AdminAuth) -> List[UserPublic]:
    return await service.list_users(session)


@router.get("/{user_id}", summary="Get a user")
async def get_user(user_id: int, session: SessionDep, admin: AdminAuth) -> UserPublic:
    return await service.get_user_or_404(session, user_id)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a user")
async def create_user(
    body: UserCreate, session: SessionDep, admin: AdminAuth
) -> UserPublic:
    return await service.create_user(
        session,
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
    )


@router.put("/{user_id}", summary="Update a user, including role and block flag")
async def update_user(
    user_id: int, body: UserUpdate, session: SessionDep, admin: AdminAuth
) -> UserPublic:
    return await service.update_user(
        session,
        user_id,
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
        is_blocked=body.is_blocked,
    )


@router.delete("/{user_id}", summary="Delete a user")
async def delete_user(user_id: int, session: SessionDep, admin: AdminAuth) -> MessageResponse:
    await service.delete_user(session, user_id)
    return MessageResponse(message="User deleted successfully")
