import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.auth.schemas import AuthTokenData, Token
from app.api.users import service as user_service
from app.api.users.models import SigninProviders, Users
from app.config import settings
from app.core.auth.authentication import (
    SOCIAL_LOGIN_REQUIRED,
    get_user,
    is_oauth_only,
    verify_password,
)
from app.core.auth.jwt import create_access_token
from app.core.auth.oauth import OAuthError, OAuthIdentity, OAuthProviders
from app.core.utils.keys import generate_reset_code
from app.core.validations.exceptions import NotFoundError, RequestValidationError

logger = logging.getLogger(__name__)

PROVIDER_COLUMNS = {
    OAuthProviders.google: "google_id",
    OAuthProviders.facebook: "facebook_id",
}


def create_user_token(user: Users) -> Token:
    token_data = AuthTokenData(user_id=user.id, token_type="access_token")
    access_token = create_access_token(
        data=token_data.model_dump(),
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    return Token(token=access_token, user_id=user.id, name=user.name)


async def register(session: AsyncSession, name: str, email: str, password: str) -> Users:
    return await user_service.create_user(
        session, name=name, email=email, password=password
    )


async def update_profile(
    session: AsyncSession,
    user: Users,
    name: str,
    email: str,
    current_password: str | None = None,
    new_password: str | None = None,
    avatar: str | None = None,
) -> Users:
    if new_password:
        if is_oauth_only(user):
            raise RequestValidationError(SOCIAL_LOGIN_REQUIRED)
        if not current_password:
            raise RequestValidationError("Current password is required")
        if not verify_password(current_password, user.password):
            raise RequestValidationError("Current password is incorrect")
        user_service.set_password(user, new_password)

    if email != user.email:
        await user_service.ensure_email_available(session, email, exclude_id=user.id)
        user.email = email
    user.name = name
    if avatar is not None:
        user.avatar = avatar

    await session.commit()
    await session.refresh(user)
    return user


async def delete_account(session: AsyncSession, user: Users) -> None:
    await user_service.delete_user(session, user.id)


async def issue_reset_token(session: AsyncSession, email: str) -> tuple[Users, str]:
    user = await get_user(session, email)
    if not user:
        raise NotFoundError("No account with that email exists")
    if is_oauth_only(user):
        raise RequestValidationError(SOCIAL_LOGIN_REQUIRED)

    reset_token = generate_reset_code()
    user.reset_token = reset_token
    user.reset_token_expiry = datetime.now(timezone.utc) + timedelta(
        minutes=settings.RESET_TOKEN_EXPIRE_MINUTES
    )
    await session.commit()
    return user, reset_token


async def reset_password(
    session: AsyncSession, email: str, token: str, new_password: str
) -> Users:
    """Consume a reset code. The code is single use and must not be expired."""
    user = await get_user(session, email)
    if (
        not user
        or not user.reset_token
        or user.reset_token != token
        or not user.reset_token_expiry
        or user.reset_token_expiry <= datetime.now(timezone.utc)
    ):
        raise RequestValidationError("Invalid or expired reset token")

    user_service.set_password(user, new_password)
    user.reset_token = None
    user.reset_token_expiry = None
    await session.commit()
    return user


async def link_or_create_oauth_identity(
    session: AsyncSession, identity: OAuthIdentity
) -> Users:
    """
    Find or create the local account for a provider identity.

    A provider id match wins. Otherwise an account with the same email is
    taken over by the provider: the id is attached and the local password is
    dropped, so the account signs in through the provider from then on.
    Otherwise a new password-less account is created.
    """
    column = getattr(Users, PROVIDER_COLUMNS[identity.provider])

    user = await session.scalar(select(Users).where(column == identity.provider_id))
    if user:
        return user

    if not identity.email:
        raise OAuthError(f"{identity.provider.value} did not share an email address")

    user = await get_user(session, identity.email)
    if user:
        setattr(user, column.key, identity.provider_id)
        user.password = None
        user.provider = SigninProviders(identity.provider.value)
        user.avatar = user.avatar or identity.avatar or ""
        await session.commit()
        await session.refresh(user)
        logger.info(f"Linked {identity.provider.value} identity to user {user.id}")
        return user

    return await user_service.create_user(
        session,
        name=identity.name or identity.email.split("@")[0],
        email=identity.email,
        provider=SigninProviders(identity.provider.value),
        avatar=identity.avatar,
        **{column.key: identity.provider_id},
    )
