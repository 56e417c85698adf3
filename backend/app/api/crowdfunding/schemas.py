from pydantic import Field

from app.api.campaigns.schemas import CampaignBase
from app.api.campaigns.models import CampaignStatus
from app.core.response.base_model import CustomBaseModel


class CrowdfundingCreate(CampaignBase):
    status: CampaignStatus | None = None
    organizer_id: int | None = None


class RejectRequest(CustomBaseModel):
    reason: str | None = Field(None, max_length=1000)


class VerificationTokenData(CustomBaseModel):
    token_type: str
    campaign_id: int
    user_id: int
