import enum
from sqlalchemy import JSON, Column, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.base import AbstractSQLModel
from app.db.mixins import TimestampsMixin


class VolunteerAvailability(str, enum.Enum):
    weekdays = "weekdays"
    weekends = "weekends"
    any = "any"


class VolunteerStatus(str, enum.Enum):
    active = "active"
    archived = "archived"


class Volunteers(AbstractSQLModel, TimestampsMixin):
    __tablename__ = "volunteers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=False)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    campaign_id = Column(
        Integer, ForeignKey("campaigns.id", ondelete="SET NULL"), nullable=True
    )
    availability = Column(
        Enum(VolunteerAvailability), nullable=False, default=VolunteerAvailability.any
    )
    skills = Column(JSON, nullable=False, default=list)
    message = Column(Text, nullable=False, default="")
    status = Column(
        Enum(VolunteerStatus), nullable=False, default=VolunteerStatus.active
    )

    campaign = relationship("Campaigns", lazy="joined")
