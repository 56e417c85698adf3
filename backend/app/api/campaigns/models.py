import enum
from sqlalchemy import JSON, Boolean, Column, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.base import AbstractSQLModel
from app.db.mixins import TimestampsMixin, utcnow
from app.core.utils.db_fields import TZAwareDateTime


class CampaignTypes(str, enum.Enum):
    campaign = "campaign"
    crowdfunding = "crowdfunding"


class CampaignStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class Campaigns(AbstractSQLModel, TimestampsMixin):
    __tablename__ = "campaigns"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    target_amount = Column(Float, nullable=False)
    current_amount = Column(Float, nullable=False, default=0)
    start_date = Column(TZAwareDateTime(timezone=True), nullable=False, default=utcnow)
    end_date = Column(TZAwareDateTime(timezone=True), nullable=True)
    image_url = Column(String, nullable=True)
    type = Column(
        Enum(CampaignTypes), nullable=False, default=CampaignTypes.campaign, index=True
    )
    category = Column(String(100), nullable=True)
    organizer_id = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    status = Column(
        Enum(CampaignStatus), nullable=False, default=CampaignStatus.pending, index=True
    )
    # public paths such as "/uploads/crowdfunding/<file>"
    documents = Column(JSON, nullable=False, default=list)
    rejection_reason = Column(String, nullable=True)
    email_verified = Column(Boolean, nullable=False, default=False)

    organizer = relationship("Users", lazy="joined")
