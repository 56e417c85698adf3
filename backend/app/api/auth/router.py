import logging
from urllib.parse import urlencode

from fastapi import APIRouter, BackgroundTasks, Request, status
from fastapi.responses import RedirectResponse

from app.api.auth import service
from app.api.auth.background_tasks import send_password_reset_email
from app.api.auth.schemas import (
    AuthUser,
    LoginRequest,
    OAuthStatus,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    ResetPasswordRequest,
    ResetRequest,
    ResetRequestResponse,
    SignupRequest,
    Token,
)
from app.config import settings
from app.core.auth import oauth
from app.core.auth.authentication import authenticate_user
from app.core.auth.dependencies import DependsAuth
from app.core.auth.oauth import OAuthError, OAuthProviders
from app.core.email.dependencies import MailerDep
from app.core.rate_limit import auth_limit
from app.core.response.base_model import MessageResponse
from app.db.core import SessionDep
from app.response import CustomHTTPException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")


@router.post("/signup", status_code=status.HTTP_201_CREATED, summary="Create a local account")
@auth_limit
async def signup(request: Request, body: SignupRequest, session: SessionDep) -> Token:
    user = await service.register(
        session, name=body.name, email=body.email, password=body.password
    )
    return service.create_user_token(user)


@router.post("/login", summary="Sign in with email and password")
@auth_limit
async def login(request: Request, body: LoginRequest, session: SessionDep) -> Token:
    user = await authenticate_user(session, body.email, body.password)
    return service.create_user_token(user)


@router.get("/me", summary="Get the signed in user")
async def read_users_me(current_user: DependsAuth) -> AuthUser:
    return current_user


@router.put("/update", summary="Update own profile")
async def update_profile(
    body: ProfileUpdateRequest, session: SessionDep, current_user: DependsAuth
) -> ProfileUpdateResponse:
    user = await service.update_profile(
        session,
        current_user,
        name=body.name,
        email=body.email,
        current_password=body.current_password,
        new_password=body.new_password,
        avatar=body.avatar,
    )
    return ProfileUpdateResponse(
        token=service.create_user_token(user).token,
        user=AuthUser.model_validate(user),
    )


@router.delete("/delete", summary="Delete own account")
async def delete_account(session: SessionDep, current_user: DependsAuth) -> MessageResponse:
    await service.delete_account(session, current_user)
    return MessageResponse(message="Account deleted successfully")


@router.post("/request-reset", summary="Email a password reset code")
@auth_limit
async def request_reset(
    request: Request,
    body: ResetRequest,
    session: SessionDep,
    mailer: MailerDep,
    background_tasks: BackgroundTasks,
) -> ResetRequestResponse:
    user, reset_token = await service.issue_reset_token(session, body.email)
    background_tasks.add_task(
        send_password_reset_email, mailer, user.email, user.name, reset_token
    )
    return ResetRequestResponse(
        message="If an account exists for this email, a reset code has been sent",
        reset_token=reset_token if settings.DEBUG else None,
    )


@router.post("/reset-password", summary="Set a new password with a reset code")
@auth_limit
async def reset_password(
    request: Request, body: ResetPasswordRequest, session: SessionDep
) -> MessageResponse:
    await service.reset_password(
        session, email=body.email, token=body.token, new_password=body.new_password
    )
    return MessageResponse(message="Password reset successful")


@router.get("/oauth-status", summary="Which social providers are configured")
async def oauth_status() -> OAuthStatus:
    return OAuthStatus(
        google_configured=oauth.is_configured(OAuthProviders.google),
        facebook_configured=oauth.is_configured(OAuthProviders.facebook),
    )


def frontend_redirect(path: str, **params) -> RedirectResponse:
    url = f"{settings.FRONTEND_URL.rstrip('/')}{path}"
    if params:
        url = f"{url}?{urlencode(params)}"
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.get("/{provider}", summary="Start social sign in")
async def oauth_initiate(provider: OAuthProviders):
    if not oauth.is_configured(provider):
        raise CustomHTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            message=f"{provider.value.capitalize()} OAuth not configured",
            error_code="OAUTH_NOT_CONFIGURED",
        )
    return RedirectResponse(
        oauth.authorization_url(provider), status_code=status.HTTP_302_FOUND
    )


@router.get("/{provider}/callback", summary="Finish social sign in")
async def oauth_callback(
    provider: OAuthProviders,
    session: SessionDep,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
):
    if error or not code:
        return frontend_redirect("/login", error="oauth_failed")
    try:
        oauth.check_state(provider, state)
        identity = await oauth.fetch_identity(provider, code)
        user = await service.link_or_create_oauth_identity(session, identity)
    except OAuthError as e:
        logger.warning(f"{provider.value} sign in failed: {e}")
        return frontend_redirect("/login", error="oauth_failed")
    except CustomHTTPException as e:
        logger.warning(f"{provider.value} sign in rejected: {e.message}")
        return frontend_redirect("/login", error="oauth_failed")

    if user.is_blocked:
        return frontend_redirect("/login", error="account_blocked")
    token = service.create_user_token(user)
    return frontend_redirect("/", token=token.token, name=user.name)
