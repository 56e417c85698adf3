from datetime import datetime
from pydantic import EmailStr, Field

from app.api.users.models import SigninProviders, UserRoles
from app.core.response.base_model import CustomBaseModel


class UserPublic(CustomBaseModel):
    id: int
    name: str
    email: str
    avatar: str
    provider: SigninProviders
    role: UserRoles
    is_blocked: bool
    created_at: datetime


class UserCreate(CustomBaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: UserRoles = UserRoles.user


class UserUpdate(CustomBaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
    password: str | None = None
    role: UserRoles | None = None
    is_blocked: bool | None = None


class OrganizerPublic(CustomBaseModel):
    id: int
    name: str


class OrganizerDetail(OrganizerPublic):
    email: str
    avatar: str
