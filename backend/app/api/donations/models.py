import enum
from sqlalchemy import Boolean, Column, Enum, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import AbstractSQLModel
from app.db.mixins import TimestampsMixin, utcnow
from app.core.utils.db_fields import TZAwareDateTime


class DonationTypes(str, enum.Enum):
    once = "once"
    monthly = "monthly"


class Donations(AbstractSQLModel, TimestampsMixin):
    __tablename__ = "donations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    amount = Column(Float, nullable=False)
    type = Column(Enum(DonationTypes), nullable=False)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=False)
    payment_method = Column(String(50), nullable=False)
    reminder = Column(Boolean, nullable=False, default=False)
    date = Column(TZAwareDateTime(timezone=True), nullable=False, default=utcnow, index=True)
    status = Column(String(50), nullable=False, default="completed")
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    campaign_id = Column(
        Integer, ForeignKey("campaigns.id", ondelete="SET NULL"), nullable=True, index=True
    )

    campaign = relationship("Campaigns", lazy="joined")
