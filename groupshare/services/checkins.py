"""Check-in ledger business logic."""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from groupshare.core.config import settings
from groupshare.core.constants import CHECKOUT_MODE_FULL, CHECKOUT_MODE_TARGETED, MS_PER_DAY
from groupshare.core.errors import NotFoundError, ValidationError
from groupshare.core.logging_config import get_logger
from groupshare.core.utils import datetime_to_ms, now_ms, resolve_timestamp
from groupshare.db.models import Checkin
from groupshare.db.store import CheckinStore
from groupshare.services.places import PlaceDirectory

logger = get_logger(__name__)


@dataclass
class AccommodationInput:
    place_id: str
    coords: Optional[List[float]] = None
    name: Optional[str] = None


@dataclass
class CheckoutResult:
    mode: str
    rows_affected: int


class CheckinLedger:
    """Writes to the check-in ledger: check-in, targeted checkout, full leave."""

    def __init__(self, store: CheckinStore, places: Optional[PlaceDirectory] = None):
        self.store = store
        self.places = places or PlaceDirectory()

    def check_in(
        self,
        group_code: str,
        device_id: str,
        user_name: str,
        place_id: str,
        place_name: Optional[str] = None,
        place_coords: Optional[List[float]] = None,
        accommodation: Optional[AccommodationInput] = None,
        display_accommodation: bool = False,
        timestamp: Optional[int] = None,
        scheduled_for: Optional[datetime] = None,
        meetup_note: Optional[str] = None,
    ) -> Checkin:
        """
        Record that a device is at a place, superseding its previous check-in.

        The deactivate-previous and insert steps run in one transaction under
        the group row lock, so a device never has two active rows even when
        its requests race.

        Accommodation is stored only when ``display_accommodation`` is true; a
        check-in without sharing starts from a clean accommodation slate. The
        dedicated accommodation update never clears stored values.

        Args:
            timestamp: Client-supplied epoch ms overriding "now" (offline replay).
                Moved to just after the device's latest row when it is older.
            scheduled_for: Turns the check-in into a meetup announcement

        Returns:
            The new active record

        Raises:
            NotFoundError: If the group does not exist
            ValidationError: If the timestamp, meetup, or place name is invalid
        """
        now = now_ms()
        checked_in_at = resolve_timestamp(timestamp, now=now)
        scheduled_ms = self._resolve_meetup(scheduled_for, meetup_note, now)

        # Network lookup happens before the transaction opens
        if not place_name or place_coords is None:
            place = self.places.get_place(place_id)
            if place is not None:
                place_name = place_name or place.name
                place_coords = place_coords if place_coords is not None else place.coords

        if not place_name:
            raise ValidationError("Place name is required")

        share = bool(display_accommodation and accommodation is not None)

        with self.store.transaction():
            if self.store.lock_group(group_code) is None:
                raise NotFoundError(f"Group {group_code} not found")

            # The new row becomes the device's latest, so it must sort after every older row
            latest = self.store.latest_checkin(group_code, device_id)
            if latest is not None and checked_in_at <= latest.checked_in_at:
                logger.info(
                    "checkin_timestamp_clamped",
                    group_code=group_code,
                    device_id=device_id,
                    requested=checked_in_at,
                    latest=latest.checked_in_at,
                )
                checked_in_at = latest.checked_in_at + 1

            superseded = self.store.deactivate_active(group_code, device_id, checked_out_at=now)

            record = self.store.add_checkin(Checkin(
                group_code=group_code,
                device_id=device_id,
                user_name=user_name,
                place_id=place_id,
                place_name=place_name,
                place_coords=place_coords,
                checked_in_at=checked_in_at,
                is_active=True,
                accommodation_place_id=accommodation.place_id if share else None,
                accommodation_coords=accommodation.coords if share else None,
                accommodation_name=accommodation.name if share else None,
                display_accommodation_to_group=share,
                scheduled_for=scheduled_ms,
                meetup_note=meetup_note if scheduled_ms is not None else None,
            ))

        if superseded:
            logger.info("checkins_superseded", group_code=group_code, device_id=device_id, count=superseded)
        logger.info(
            "checkin_created",
            group_code=group_code,
            device_id=device_id,
            place_id=place_id,
            checkin_id=record.id,
            meetup=scheduled_ms is not None,
        )
        return record

    def check_out(self, group_code: str, device_id: str, place_id: Optional[str] = None) -> CheckoutResult:
        """
        Deactivate a device's check-ins.

        With ``place_id`` only the active row at that place is closed, and
        finding none is a ``NotFoundError``. Without it every active row for
        the device is closed ("leave group"); zero rows is a valid result.
        """
        now = now_ms()
        mode = CHECKOUT_MODE_TARGETED if place_id is not None else CHECKOUT_MODE_FULL

        with self.store.transaction():
            if self.store.lock_group(group_code) is None:
                raise NotFoundError(f"Group {group_code} not found")

            rows = self.store.deactivate_active(group_code, device_id, checked_out_at=now, place_id=place_id)

            if mode == CHECKOUT_MODE_TARGETED and rows == 0:
                raise NotFoundError(f"No active check-in at place {place_id}")

        logger.info("checkout", group_code=group_code, device_id=device_id, mode=mode, rows_affected=rows)
        return CheckoutResult(mode=mode, rows_affected=rows)

    def _resolve_meetup(self, scheduled_for: Optional[datetime], note: Optional[str], now: int) -> Optional[int]:
        if scheduled_for is None:
            if note:
                raise ValidationError("meetupNote requires scheduledFor")
            return None

        scheduled_ms = datetime_to_ms(scheduled_for)
        if scheduled_ms <= now:
            raise ValidationError("scheduledFor must be in the future")
        if scheduled_ms > now + settings.MEETUP_MAX_DAYS_AHEAD * MS_PER_DAY:
            raise ValidationError(
                f"scheduledFor must be within {settings.MEETUP_MAX_DAYS_AHEAD} days"
            )
        return scheduled_ms
