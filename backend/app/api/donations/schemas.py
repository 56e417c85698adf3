from datetime import datetime
from pydantic import EmailStr, Field

from app.api.campaigns.schemas import CampaignMin
from app.api.donations.models import DonationTypes
from app.core.response.base_model import CustomBaseModel


class DonationCreate(CustomBaseModel):
    amount: float = Field(..., gt=0)
    type: DonationTypes = DonationTypes.once
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=30)
    payment_method: str = Field(..., min_length=1, max_length=50)
    reminder: bool = False
    campaign_id: int | None = None


class DonationResponse(CustomBaseModel):
    id: int
    amount: float
    type: DonationTypes
    name: str
    email: str
    phone: str
    payment_method: str
    reminder: bool
    date: datetime
    status: str
    user_id: int | None = None
    campaign_id: int | None = None
    campaign: CampaignMin | None = None


class DonationCreateResponse(DonationResponse):
    transaction_id: str
