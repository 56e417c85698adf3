from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.config import settings


def content_security_policy(frontend_url: str) -> str:
    directives = {
        "default-src": ["'self'"],
        "style-src": ["'self'", "'unsafe-inline'", "https://fonts.googleapis.com"],
        "font-src": ["'self'", "https://fonts.gstatic.com"],
        "img-src": ["'self'", "data:", "https:"],
        "script-src": ["'self'"],
        "connect-src": ["'self'", frontend_url.rstrip("/")],
    }
    return "; ".join(f"{name} {' '.join(values)}" for name, values in directives.items())


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds the usual hardening headers unless ``ENABLE_SECURITY_HEADERS`` is off."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        if not settings.ENABLE_SECURITY_HEADERS:
            return response

        headers = {
            "Content-Security-Policy": content_security_policy(settings.FRONTEND_URL),
            "X-Content-Type-Options": "nosniff",
            "X-Frame-Options": "SAMEORIGIN",
            "Referrer-Policy": "no-referrer",
            "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
            "Cross-Origin-Opener-Policy": "same-origin",
        }
        for name, value in headers.items():
            response.headers.setdefault(name, value)
        return response
