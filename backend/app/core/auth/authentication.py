from passlib.context import CryptContext
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.users.models import Users
from app.core.validations.exceptions import PermissionDeniedError
from app.response import CustomHTTPException

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

INVALID_CREDENTIALS = "Invalid credentials"
SOCIAL_LOGIN_REQUIRED = (
    "This account was created with social login. "
    "Please use Google or Facebook to sign in."
)


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def is_oauth_only(user: Users) -> bool:
    return not user.password and bool(user.google_id or user.facebook_id)


async def get_user(session: AsyncSession, email_or_id: str | int) -> Users | None:
    query = select(Users)
    if isinstance(email_or_id, int):
        query = query.where(Users.id == email_or_id)
    else:
        query = query.where(Users.email == email_or_id)
    return await session.scalar(query)


async def authenticate_user(session: AsyncSession, email: str, password: str) -> Users:
    """
    Resolve an email/password pair to a user.

    Unknown email and wrong password raise the same error. Accounts created
    through a social provider get a hint to use it, and blocked accounts are
    refused only after the password checked out.
    """
    user = await get_user(session, email)
    if not user:
        raise CustomHTTPException(400, INVALID_CREDENTIALS, error_code="INVALID_CREDENTIALS")
    if is_oauth_only(user):
        raise CustomHTTPException(400, SOCIAL_LOGIN_REQUIRED, error_code="SOCIAL_LOGIN_REQUIRED")
    if not user.password or not verify_password(password, user.password):
        raise CustomHTTPException(400, INVALID_CREDENTIALS, error_code="INVALID_CREDENTIALS")
    if user.is_blocked:
        raise PermissionDeniedError("Account is blocked", error_code="ACCOUNT_BLOCKED")
    return user
