from typing import Optional

from sqlalchemy.orm import Session

from groupshare.core.constants import MS_PER_MINUTE
from groupshare.core.utils import now_ms
from groupshare.db.models import Checkin
from groupshare.services import PlaceDirectory


class FakePlaceDirectory(PlaceDirectory):
    """In-memory places directory; ``available=False`` simulates an outage."""

    def __init__(self, places=None, available=True):
        self.places = places or {}
        self.available = available
        self.lookups = []

    def get_place(self, place_id):
        self.lookups.append(place_id)
        if not self.available:
            return None
        return self.places.get(place_id)


def minutes_ago(minutes: int) -> int:
    """Epoch ms ``minutes`` before now."""
    return now_ms() - minutes * MS_PER_MINUTE


def add_checkin(
    session: Session,
    group_code: str,
    device_id: str,
    place_id: str = "101",
    checked_in_at: Optional[int] = None,
    **fields,
) -> Checkin:
    """Insert a ledger row directly, bypassing the ledger's rules.

    Used to build histories the API cannot produce on its own, such as rows
    older than the TTL or several active rows for one device.
    """
    record = Checkin(
        group_code=group_code,
        device_id=device_id,
        user_name=fields.pop("user_name", device_id.title()),
        place_id=place_id,
        place_name=fields.pop("place_name", f"Place {place_id}"),
        checked_in_at=checked_in_at if checked_in_at is not None else now_ms(),
        is_active=fields.pop("is_active", True),
        display_accommodation_to_group=fields.pop("display_accommodation_to_group", False),
        **fields,
    )
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def active_count(session: Session, group_code: str, device_id: str) -> int:
    return session.query(Checkin).filter(
        Checkin.group_code == group_code,
        Checkin.device_id == device_id,
        Checkin.is_active.is_(True),
    ).count()
