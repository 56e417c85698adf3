from pydantic import EmailStr, Field

from app.api.users.models import UserRoles
from app.core.response.base_model import CustomBaseModel


class AuthTokenData(CustomBaseModel):
    user_id: int
    token_type: str


class Token(CustomBaseModel):
    token: str
    token_type: str = "Bearer"
    user_id: int
    name: str


class SignupRequest(CustomBaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginRequest(CustomBaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthUser(CustomBaseModel):
    user_id: int = Field(..., validation_alias="id")
    name: str
    email: str
    avatar: str
    role: UserRoles


class ProfileUpdateRequest(CustomBaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    current_password: str | None = None
    new_password: str | None = None
    avatar: str | None = None


class ProfileUpdateResponse(CustomBaseModel):
    message: str = "Profile updated successfully"
    token: str
    user: AuthUser


class ResetRequest(CustomBaseModel):
    email: EmailStr


class ResetRequestResponse(CustomBaseModel):
    success: bool = True
    message: str
    reset_token: str | None = None


class ResetPasswordRequest(CustomBaseModel):
    email: EmailStr
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class OAuthStatus(CustomBaseModel):
    google_configured: bool
    facebook_configured: bool


class CheckAuthResponse(CustomBaseModel):
    is_authenticated: bool
    user_id: int | None = None
