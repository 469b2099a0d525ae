"""SQLAlchemy model for the users table."""

from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, DateTime, String

from takurabid.infrastructure.database import Base
from takurabid.utils import now_utc_naive


class UserProfileModel(Base):
    """Database representation of a marketplace profile."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("type IN ('client', 'driver')", name="ck_users_type"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    auth_id = Column(String(64), nullable=False, unique=True, index=True)
    type = Column(String(10), nullable=False)
    name = Column(String(120), nullable=False)
    avatar = Column(String(4), nullable=False)
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_utc_naive)


__all__ = ["UserProfileModel"]
