"""Group model."""
from datetime import datetime, timezone as tz
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from groupshare.db.base import Base


class Group(Base):
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(6), unique=True, nullable=False, index=True)  # 6-digit join code
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    expires_at = Column(DateTime(timezone=True), nullable=True)  # Season end, informational

    # Relationships
    checkins = relationship("Checkin", back_populates="group", cascade="all, delete-orphan")
