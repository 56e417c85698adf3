from datetime import datetime
from pydantic import Field, field_validator

from app.api.campaigns.models import CampaignStatus, CampaignTypes
from app.api.users.schemas import OrganizerDetail, OrganizerPublic
from app.core.response.base_model import CustomBaseModel


class CampaignBase(CustomBaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    target_amount: float = Field(..., gt=0)
    start_date: datetime | None = None
    end_date: datetime | None = None
    image_url: str | None = None
    category: str | None = None


class CampaignCreate(CampaignBase):
    type: CampaignTypes = CampaignTypes.campaign
    status: CampaignStatus | None = None
    organizer_id: int | None = None


class CampaignUpdate(CustomBaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, min_length=1)
    target_amount: float | None = Field(None, gt=0)
    start_date: datetime | None = None
    end_date: datetime | None = None
    image_url: str | None = None
    category: str | None = None
    organizer_id: int | None = None

    @field_validator("title", "description", "target_amount", "start_date")
    @classmethod
    def not_null(cls, value):
        # omitted is fine, an explicit null is not: the columns are NOT NULL
        if value is None:
            raise ValueError("may not be null")
        return value


class CampaignListResponse(CustomBaseModel):
    id: int
    title: str
    description: str
    target_amount: float
    current_amount: float
    start_date: datetime
    end_date: datetime | None = None
    image_url: str | None = None
    type: CampaignTypes
    category: str | None = None
    status: CampaignStatus
    organizer: OrganizerPublic | None = None
    created_at: datetime


class CampaignDetailResponse(CampaignListResponse):
    organizer: OrganizerDetail | None = None
    documents: list[str] = []
    rejection_reason: str | None = None
    email_verified: bool


class CampaignMin(CustomBaseModel):
    id: int
    title: str
