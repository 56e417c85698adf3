from datetime import datetime, timezone
from sqlalchemy import Column

from app.core.utils.db_fields import TZAwareDateTime


def utcnow():
    return datetime.now(timezone.utc)


class TimestampsMixin:
    created_at = Column(TZAwareDateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(
        TZAwareDateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )
