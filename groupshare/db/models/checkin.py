"""Checkin model."""
from datetime import datetime, timezone as tz
from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
)
from sqlalchemy.orm import relationship

from groupshare.db.base import Base


class Checkin(Base):
    """One "device D declared itself at place P in group G" ledger row.

    Timestamps are epoch milliseconds. Accommodation columns live on the same
    row but are independent of ``is_active``/``place_id``: hiding them from the
    group only flips ``display_accommodation_to_group``.
    """

    __tablename__ = "checkins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    group_code = Column(String(6), ForeignKey("groups.code", ondelete="CASCADE"), nullable=False)

    # Anonymous identity, supplied by the client
    device_id = Column(String(255), nullable=False)
    user_name = Column(String(100), nullable=False)

    # Place details (denormalized so history survives directory changes)
    place_id = Column(String(255), nullable=False)
    place_name = Column(String(255), nullable=False)
    place_coords = Column(JSON, nullable=True)  # [lng, lat]

    checked_in_at = Column(BigInteger, nullable=False)
    checked_out_at = Column(BigInteger, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    accommodation_place_id = Column(String(255), nullable=True)
    accommodation_coords = Column(JSON, nullable=True)  # [lng, lat]
    accommodation_name = Column(String(255), nullable=True)
    display_accommodation_to_group = Column(Boolean, nullable=False, default=False)

    # Meetups: NULL = check-in now, value = planned time (epoch ms)
    scheduled_for = Column(BigInteger, nullable=True)
    meetup_note = Column(String(200), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))

    # Relationships
    group = relationship("Group", back_populates="checkins")

    __table_args__ = (
        Index("idx_checkins_group_active", "group_code", "is_active"),
        Index("idx_checkins_group_device_time", "group_code", "device_id", "checked_in_at"),
        Index("idx_checkins_time", "checked_in_at"),
    )

    @property
    def has_accommodation(self) -> bool:
        return self.accommodation_place_id is not None

    def is_meetup(self, now: int) -> bool:
        """True for an active row announcing a future meetup."""
        return self.is_active and self.scheduled_for is not None and self.scheduled_for > now
