import logging
import traceback
from datetime import datetime, timezone

import httpx
from fastapi import Request

from app.config import settings

logger = logging.getLogger(__name__)


def format_error_report(request: Request, exc: Exception, track_id: str) -> str:
    timestamp = datetime.now(timezone.utc).isoformat()
    trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return f"""
============================ ERROR DETAILS ============================

Timestamp: {timestamp}
Track ID: {track_id}
Path: {request.url.path}
Method: {request.method}

============================== TRACEBACK ==============================

{trace}
=======================================================================
"""


async def notify_error(request: Request, exc: Exception, track_id: str) -> bool:
    """
    Post the traceback of an unhandled error to the Discord webhook.

    One attempt only; returns whether the webhook accepted it.
    """
    if not settings.DISCORD_ERROR_WEBHOOK:
        return False

    files = {
        "file": (
            "traceback.txt",
            format_error_report(request, exc, track_id).encode("utf-8"),
            "text/plain",
        ),
    }
    try:
        async with httpx.AsyncClient(timeout=5) as client:
            response = await client.post(
                settings.DISCORD_ERROR_WEBHOOK,
                data={"content": f"Internal Server Error {track_id}"},
                files=files,
            )
            response.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning(f"Discord error notification for {track_id} failed: {e}")
        return False
    return True
