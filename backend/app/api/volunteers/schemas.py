from datetime import datetime
from typing import List
from pydantic import EmailStr, Field

from app.api.campaigns.schemas import CampaignMin
from app.api.volunteers.models import VolunteerAvailability, VolunteerStatus
from app.core.response.base_model import CustomBaseModel


class VolunteerCreate(CustomBaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=30)
    campaign_id: int | None = None
    availability: VolunteerAvailability = VolunteerAvailability.any
    skills: List[str] = []
    message: str = ""


class VolunteerStatusUpdate(CustomBaseModel):
    status: VolunteerStatus


class VolunteerResponse(CustomBaseModel):
    id: int
    name: str
    email: str
    phone: str
    user_id: int | None = None
    campaign_id: int | None = None
    campaign: CampaignMin | None = None
    availability: VolunteerAvailability
    skills: List[str]
    message: str
    status: VolunteerStatus
    created_at: datetime
