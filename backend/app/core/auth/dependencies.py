from typing import Annotated, List, Optional, Union
from fastapi import Depends
from jwt.exceptions import InvalidTokenError, ExpiredSignatureError
from pydantic import ValidationError

from app.core.auth.authentication import get_user, oauth2_scheme
from app.api.users.models import Users
from app.api.auth.schemas import AuthTokenData
from app.core.auth.jwt import decode_jwt_token
from app.core.validations.exceptions import (
    NotAuthenticatedError,
    PermissionDeniedError,
)
from app.db.core import SessionDep


def read_access_token(token: str) -> AuthTokenData:
    """Decode a bearer token, raising 401 when it is expired or malformed."""
    try:
        token_data = AuthTokenData(**decode_jwt_token(token))
    except ExpiredSignatureError:
        raise NotAuthenticatedError("Token has expired", error_code="TOKEN_EXPIRED")
    except (InvalidTokenError, ValidationError):
        raise NotAuthenticatedError("Invalid or expired token")
    if token_data.token_type != "access_token":
        raise NotAuthenticatedError("Invalid or expired token")
    return token_data


async def get_current_user(
    token: Annotated[Optional[str], Depends(oauth2_scheme)], session: SessionDep
) -> Optional[Users]:
    if not token:
        return None
    token_data = read_access_token(token)
    user = await get_user(session, token_data.user_id)
    if user is None:
        raise NotAuthenticatedError("Invalid or expired token")
    return user


def check_user_role(required_roles: Union[str, List[str]], optional=False):
    """
    Creates a dependency that checks if the current user has the required role(s).

    Args:
        required_roles: Single role string or list of role strings that are allowed
        optional: let anonymous requests through with ``None`` as the user

    Returns:
        Dependency function that validates user roles
    """
    if isinstance(required_roles, str):
        required_roles = [required_roles]

    async def role_checker(
        current_user: Annotated[Optional[Users], Depends(get_current_user)],
    ) -> Optional[Users]:
        if not current_user:
            if optional:
                return None
            raise NotAuthenticatedError()
        if current_user.is_blocked:
            raise PermissionDeniedError("Account is blocked", error_code="ACCOUNT_BLOCKED")
        if current_user.role.value not in required_roles:
            raise PermissionDeniedError("Admin access required")
        return current_user

    return role_checker


DependsAuth = Annotated[Users, Depends(check_user_role(["user", "admin"]))]
AdminAuth = Annotated[Users, Depends(check_user_role(["admin"]))]
