from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from app.api.users.models import SigninProviders, UserRoles, Users
from app.core.auth.authentication import get_password_hash, is_oauth_only
from app.core.validations.exceptions import NotFoundError, RequestValidationError
from app.core.validations.schema import validate_unique
from app.response import CustomHTTPException


async def ensure_email_available(
    session: AsyncSession, email: str, exclude_id: int | None = None
):
    await validate_unique(
        session,
        unique={"email": (Users, email)},
        exclude_id=exclude_id,
        message="User already exists",
        error_code="DUPLICATE_EMAIL",
    )


async def create_user(
    session: AsyncSession,
    name: str,
    email: str,
    password: str | None = None,
    provider: SigninProviders = SigninProviders.local,
    role: UserRoles = UserRoles.user,
    google_id: str | None = None,
    facebook_id: str | None = None,
    avatar: str = "",
) -> Users:
    await ensure_email_available(session, email)

    user = Users(
        name=name,
        email=email,
        provider=provider,
        role=role,
        google_id=google_id,
        facebook_id=facebook_id,
        avatar=avatar or "",
    )
    if provider == SigninProviders.local:
        if not password:
            raise RequestValidationError("Password is required")
        user.password = get_password_hash(password)
    elif not (google_id or facebook_id):
        raise RequestValidationError("A provider id is required for social accounts")

    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        # a concurrent signup took the email after the availability check
        await session.rollback()
        raise CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            message="User already exists",
            errors={"email": "email already exists"},
            error_code="DUPLICATE_EMAIL",
        )
    await session.refresh(user)
    return user


async def get_user_or_404(session: AsyncSession, user_id: int) -> Users:
    user = await session.get(Users, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


async def list_users(session: AsyncSession) -> list[Users]:
    return list(await session.scalars(select(Users).order_by(Users.created_at.desc())))


def set_password(user: Users, password: str) -> None:
    if is_oauth_only(user):
        raise RequestValidationError(
            "This account signs in with Google or Facebook and has no password"
        )
    user.password = get_password_hash(password)


async def update_user(
    session: AsyncSession,
    user_id: int,
    name: str | None = None,
    email: str | None = None,
    password: str | None = None,
    role: UserRoles | None = None,
    is_blocked: bool | None = None,
) -> Users:
    user = await get_user_or_404(session, user_id)

    if email is not None and email != user.email:
        await ensure_email_available(session, email, exclude_id=user.id)
        user.email = email
    if name is not None:
        user.name = name
    if role is not None:
        user.role = role
    if is_blocked is not None:
        user.is_blocked = is_blocked
    if password:
        set_password(user, password)

    await session.commit()
    await session.refresh(user)
    return user


async def delete_user(session: AsyncSession, user_id: int) -> None:
    result = await session.execute(delete(Users).where(Users.id == user_id))
    if not result.rowcount:
        raise NotFoundError("User not found")
    await session.commit()
