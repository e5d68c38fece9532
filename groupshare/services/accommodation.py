"""Accommodation sharing business logic.

Accommodation belongs to the device's current stay, not to whichever outing
is active, so updates always target the device's latest ledger row. Stored
values are never cleared to hide them: ``display_accommodation_to_group`` is
the only visibility switch, and reads apply it.
"""
from typing import List, Optional

from groupshare.core.errors import NotFoundError
from groupshare.core.logging_config import get_logger
from groupshare.core.utils import now_ms
from groupshare.db.models import Checkin
from groupshare.db.store import CheckinStore

logger = get_logger(__name__)


class AccommodationService:

    def __init__(self, store: CheckinStore):
        self.store = store

    def update_accommodation(
        self,
        group_code: str,
        device_id: str,
        share: bool,
        place_id: Optional[str] = None,
        coords: Optional[List[float]] = None,
        name: Optional[str] = None,
    ) -> Checkin:
        """
        Set the device's accommodation and whether the group may see it.

        When ``place_id`` is given, place id, coords and name are overwritten
        with the supplied values. A toggle-only request (no ``place_id``)
        keeps the stored values; if the latest row has none, the device's most
        recent accommodation is copied onto it so the flag and the data live
        on the same row.

        Other still-active rows of the device are closed so no two active
        rows disagree about accommodation.

        Raises:
            NotFoundError: If the group does not exist or the device has no rows
        """
        now = now_ms()

        with self.store.transaction():
            if self.store.lock_group(group_code) is None:
                raise NotFoundError(f"Group {group_code} not found")

            record = self.store.latest_checkin(group_code, device_id, for_update=True)
            if record is None:
                raise NotFoundError(f"Device {device_id} has no check-ins in group {group_code}")

            if place_id is not None:
                record.accommodation_place_id = place_id
                record.accommodation_coords = coords
                record.accommodation_name = name
            elif not record.has_accommodation:
                previous = self.store.latest_checkin_with_accommodation(group_code, device_id)
                if previous is not None:
                    record.accommodation_place_id = previous.accommodation_place_id
                    record.accommodation_coords = previous.accommodation_coords
                    record.accommodation_name = previous.accommodation_name

            record.display_accommodation_to_group = share
            self.store.flush()

            stale = self.store.deactivate_active(
                group_code, device_id, checked_out_at=now, exclude_id=record.id
            )

        logger.info(
            "accommodation_updated",
            group_code=group_code,
            device_id=device_id,
            checkin_id=record.id,
            share=share,
            stale_rows_closed=stale,
        )
        return record
