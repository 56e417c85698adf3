import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.api.auth.schemas import CheckAuthResponse
from app.api.router import api_router
from app.config import settings
from app.core.auth.authentication import get_user, oauth2_scheme
from app.core.auth.dependencies import read_access_token
from app.core.email.email import build_mailer
from app.core.logging import configure_logging
from app.core.middlewares.process_time_middleware import ProcessingTimeMiddleware
from app.core.middlewares.security_headers_middleware import SecurityHeadersMiddleware
from app.core.rate_limit import limiter, rate_limit_exceeded_handler
from app.core.storage.files import CachedStaticFiles
from app.core.utils.discord import notify_error
from app.db.core import SessionDep
from app.response import CustomHTTPException, ErrorResponse

logger = logging.getLogger("app")

STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings)
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)

    mailer = build_mailer(settings)
    await run_in_threadpool(mailer.verify)
    app.state.mailer = mailer
    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} started")
    try:
        yield
    finally:
        await run_in_threadpool(mailer.close)


application = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)

application.state.limiter = limiter
application.include_router(router=api_router)
application.mount(
    "/uploads",
    CachedStaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)
application.add_middleware(SlowAPIMiddleware)
application.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
application.add_middleware(SecurityHeadersMiddleware)
application.add_middleware(ProcessingTimeMiddleware)
application.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


@application.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    track_id = str(uuid.uuid4())
    logger.exception(f"Unhandled error {track_id} on {request.method} {request.url.path}")
    await notify_error(request, exc, track_id)
    errors = {"error": "An error occurred while processing the request"}
    if settings.DEBUG:
        errors["detail"] = f"{type(exc).__name__}: {exc}"
    return ErrorResponse(
        message="Internal Server Error",
        errors=errors,
        track_id=track_id,
    ).get_response(status.HTTP_500_INTERNAL_SERVER_ERROR)


@application.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = {}

    for error in exc.errors():
        # drop the leading "body"/"query"/"path" segment
        keys = [str(loc) for loc in error["loc"][1:]] or [str(error["loc"][0])]
        current = errors
        for loc in keys[:-1]:
            current = current.setdefault(loc, {})
        current[keys[-1]] = error["msg"]

    return ErrorResponse(
        message="Invalid request",
        error_code="INVALID_REQUEST",
        errors=errors,
    ).get_response(status.HTTP_400_BAD_REQUEST)


@application.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc, CustomHTTPException):
        return exc.render()
    error_code = "NOT_FOUND" if exc.status_code == status.HTTP_404_NOT_FOUND else None
    return ErrorResponse(message=str(exc.detail), error_code=error_code).get_response(
        exc.status_code, headers=getattr(exc, "headers", None)
    )


@application.get("/health", tags=["status"])
@limiter.exempt
async def health():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 2),
        "version": settings.APP_VERSION,
    }


@application.get("/api/status", tags=["status"])
async def api_status():
    return {
        "status": "ok",
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "debug": settings.DEBUG,
    }


@application.get("/api/check-auth", tags=["status"])
async def check_auth(
    session: SessionDep, token: Annotated[Optional[str], Depends(oauth2_scheme)]
) -> CheckAuthResponse:
    if not token:
        return CheckAuthResponse(is_authenticated=False)
    try:
        token_data = read_access_token(token)
    except CustomHTTPException:
        return CheckAuthResponse(is_authenticated=False)
    user = await get_user(session, token_data.user_id)
    if not user or user.is_blocked:
        return CheckAuthResponse(is_authenticated=False)
    return CheckAuthResponse(is_authenticated=True, user_id=user.id)


@application.head("/ping")
@limiter.exempt
async def ping():
    return Response(status_code=status.HTTP_204_NO_CONTENT)
