"""
Authorization-code flow for the social sign-in providers.

Only the provider side lives here: building the consent URL and turning the
callback ``code`` into an :class:`OAuthIdentity`. Matching the identity to a
local account is done in ``app.api.auth.service``.
"""

import enum
import logging
from dataclasses import dataclass
from datetime import timedelta
from urllib.parse import urlencode

import httpx
from fastapi.concurrency import run_in_threadpool
from jwt.exceptions import InvalidTokenError
from google.oauth2 import id_token
from google.auth.transport import requests

from app.config import settings
from app.core.auth.jwt import create_access_token, decode_jwt_token

logger = logging.getLogger(__name__)

STATE_TOKEN_TYPE = "oauth_state"
STATE_EXPIRE_MINUTES = 10

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
FACEBOOK_AUTHORIZE_URL = "https://www.facebook.com/v19.0/dialog/oauth"
FACEBOOK_TOKEN_URL = "https://graph.facebook.com/v19.0/oauth/access_token"
FACEBOOK_PROFILE_URL = "https://graph.facebook.com/me"


class OAuthProviders(str, enum.Enum):
    google = "google"
    facebook = "facebook"


class OAuthError(Exception):
    pass


@dataclass
class OAuthIdentity:
    provider: OAuthProviders
    provider_id: str
    email: str | None
    name: str
    avatar: str = ""


def _credentials(provider: OAuthProviders) -> tuple[str | None, str | None]:
    if provider == OAuthProviders.google:
        return settings.GOOGLE_CLIENT_ID, settings.GOOGLE_CLIENT_SECRET
    return settings.FACEBOOK_CLIENT_ID, settings.FACEBOOK_CLIENT_SECRET


def is_configured(provider: OAuthProviders) -> bool:
    client_id, client_secret = _credentials(provider)
    return bool(client_id and client_secret)


def redirect_uri(provider: OAuthProviders) -> str:
    return f"{settings.api_public_url}/api/auth/{provider.value}/callback"


def create_state(provider: OAuthProviders) -> str:
    return create_access_token(
        {"token_type": STATE_TOKEN_TYPE, "provider": provider.value},
        expires_delta=timedelta(minutes=STATE_EXPIRE_MINUTES),
    )


def check_state(provider: OAuthProviders, state: str | None) -> None:
    if not state:
        raise OAuthError("Missing state")
    try:
        payload = decode_jwt_token(state)
    except InvalidTokenError as e:
        raise OAuthError(f"Invalid state: {e}")
    if payload.get("token_type") != STATE_TOKEN_TYPE or payload.get("provider") != provider.value:
        raise OAuthError("State does not match provider")


def authorization_url(provider: OAuthProviders) -> str:
    client_id, _ = _credentials(provider)
    params = {
        "client_id": client_id,
        "redirect_uri": redirect_uri(provider),
        "response_type": "code",
        "state": create_state(provider),
    }
    if provider == OAuthProviders.google:
        params["scope"] = "openid profile email"
        return f"{GOOGLE_AUTHORIZE_URL}?{urlencode(params)}"
    params["scope"] = "email"
    return f"{FACEBOOK_AUTHORIZE_URL}?{urlencode(params)}"


async def _fetch_google_identity(client: httpx.AsyncClient, code: str) -> OAuthIdentity:
    response = await client.post(
        GOOGLE_TOKEN_URL,
        data={
            "code": code,
            "client_id": settings.GOOGLE_CLIENT_ID,
            "client_secret": settings.GOOGLE_CLIENT_SECRET,
            "redirect_uri": redirect_uri(OAuthProviders.google),
            "grant_type": "authorization_code",
        },
    )
    response.raise_for_status()
    token = response.json().get("id_token")
    if not token:
        raise OAuthError("Google did not return an id_token")

    # google-auth fetches the signing certs with a blocking request
    idinfo = await run_in_threadpool(
        id_token.verify_oauth2_token,
        token,
        requests.Request(),
        settings.GOOGLE_CLIENT_ID,
    )
    return OAuthIdentity(
        provider=OAuthProviders.google,
        provider_id=idinfo["sub"],
        email=idinfo.get("email"),
        name=idinfo.get("name", ""),
        avatar=idinfo.get("picture", ""),
    )


async def _fetch_facebook_identity(client: httpx.AsyncClient, code: str) -> OAuthIdentity:
    response = await client.get(
        FACEBOOK_TOKEN_URL,
        params={
            "code": code,
            "client_id": settings.FACEBOOK_CLIENT_ID,
            "client_secret": settings.FACEBOOK_CLIENT_SECRET,
            "redirect_uri": redirect_uri(OAuthProviders.facebook),
        },
    )
    response.raise_for_status()
    access_token = response.json()["access_token"]

    response = await client.get(
        FACEBOOK_PROFILE_URL,
        params={"fields": "id,name,email,picture", "access_token": access_token},
    )
    response.raise_for_status()
    profile = response.json()
    picture = profile.get("picture", {}).get("data", {}).get("url", "")
    return OAuthIdentity(
        provider=OAuthProviders.facebook,
        provider_id=str(profile["id"]),
        email=profile.get("email"),
        name=profile.get("name", ""),
        avatar=picture,
    )


async def fetch_identity(provider: OAuthProviders, code: str) -> OAuthIdentity:
    """Exchange a callback code for the provider's view of the user."""
    try:
        async with httpx.AsyncClient(timeout=10) as client:
            if provider == OAuthProviders.google:
                return await _fetch_google_identity(client, code)
            return await _fetch_facebook_identity(client, code)
    except OAuthError:
        raise
    except (httpx.HTTPError, KeyError, ValueError) as e:
        logger.warning(f"{provider.value} code exchange failed: {e}")
        raise OAuthError(str(e))
