from datetime import datetime, timezone
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, field_validator, field_serializer


class CustomBaseModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    @field_validator("*", mode="before")
    @classmethod
    def ensure_utc_timezone(cls, value: Any) -> Any:
        """
        Naive datetimes are taken to be UTC; aware ones are converted to UTC.
        """
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)

        return value

    @field_serializer("*")
    def serialize_datetime(self, value: Any, _info: Any) -> Union[str, Any]:
        if isinstance(value, datetime):
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc).isoformat()
        return value


class MessageResponse(CustomBaseModel):
    success: bool = True
    message: str
