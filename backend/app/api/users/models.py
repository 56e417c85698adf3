import enum
from sqlalchemy import Boolean, Column, Enum, Integer, String

from app.db.base import AbstractSQLModel
from app.db.mixins import TimestampsMixin
from app.core.utils.db_fields import TZAwareDateTime


class UserRoles(str, enum.Enum):
    user = "user"
    admin = "admin"


class SigninProviders(str, enum.Enum):
    local = "local"
    google = "google"
    facebook = "facebook"


class Users(AbstractSQLModel, TimestampsMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    # bcrypt hash; empty for accounts that sign in through a provider
    password = Column(String(100), nullable=True)
    google_id = Column(String(100), nullable=True, unique=True)
    facebook_id = Column(String(100), nullable=True, unique=True)
    avatar = Column(String, nullable=False, default="")
    provider = Column(Enum(SigninProviders), nullable=False, default=SigninProviders.local)
    role = Column(Enum(UserRoles), nullable=False, default=UserRoles.user)
    is_blocked = Column(Boolean, nullable=False, default=False)
    reset_token = Column(String(20), nullable=True)
    reset_token_expiry = Column(TZAwareDateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Users {self.id} {self.email}>"
