from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette import status
from starlette.requests import Request

from app.config import settings
from app.response import ErrorResponse

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."

# per client address, in process memory
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.API_RATE_LIMIT],
    enabled=settings.ENABLE_RATE_LIMITING,
)

# signup, login and both reset steps draw from one bucket
auth_limit = limiter.shared_limit(settings.AUTH_RATE_LIMIT, scope="auth")
upload_limit = limiter.limit(settings.UPLOAD_RATE_LIMIT)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Sync on purpose: SlowAPIMiddleware cannot await an exception handler."""
    return ErrorResponse(
        message=RATE_LIMIT_MESSAGE,
        error_code="RATE_LIMITED",
        errors={"limit": str(exc.detail)},
    ).get_response(status.HTTP_429_TOO_MANY_REQUESTS)
