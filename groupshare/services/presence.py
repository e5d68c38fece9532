"""Presence read models: active check-ins, history, and group members."""
from typing import Dict, List, Optional

from groupshare.core.config import settings
from groupshare.core.constants import MS_PER_DAY
from groupshare.core.errors import NotFoundError
from groupshare.core.utils import now_ms, time_ago
from groupshare.db.models import Checkin
from groupshare.db.store import CheckinStore
from groupshare.services.status import CheckinState
from groupshare.services.sweeper import ExpirySweeper


def accommodation_view(record: Optional[Checkin]) -> Optional[Dict]:
    if record is None or not record.has_accommodation:
        return None
    return {
        "place_id": record.accommodation_place_id,
        "name": record.accommodation_name,
        "coords": record.accommodation_coords,
    }


def serialize_checkin(record: Checkin, now: int, hide_private: bool = True) -> Dict:
    """
    Render a ledger row for the API, with derived status and age.

    Args:
        hide_private: Null accommodation fields when the row's owner has not
            shared them. Visibility is applied here, never in storage.
    """
    state = CheckinState.of(record)
    hidden = hide_private and not record.display_accommodation_to_group

    return {
        "id": record.id,
        "group_code": record.group_code,
        "device_id": record.device_id,
        "user_name": record.user_name,
        "place_id": record.place_id,
        "place_name": record.place_name,
        "place_coords": record.place_coords,
        "checked_in_at": record.checked_in_at,
        "checked_out_at": record.checked_out_at,
        "is_active": record.is_active,
        "accommodation_place_id": None if hidden else record.accommodation_place_id,
        "accommodation_coords": None if hidden else record.accommodation_coords,
        "accommodation_name": None if hidden else record.accommodation_name,
        "display_accommodation_to_group": record.display_accommodation_to_group,
        "scheduled_for": record.scheduled_for,
        "meetup_note": record.meetup_note,
        "status": state.status.value,
        "time_ago": time_ago(record.checked_in_at, now=now),
    }


class PresenceAggregator:
    """Derives who is where from the ledger. Every read sweeps first."""

    def __init__(
        self,
        store: CheckinStore,
        sweeper: Optional[ExpirySweeper] = None,
        window_days: Optional[int] = None,
    ):
        self.store = store
        self.sweeper = sweeper or ExpirySweeper(store)
        self.window_days = window_days if window_days is not None else settings.HISTORY_WINDOW_DAYS

    def _prepare(self, group_code: str) -> int:
        if self.store.get_group(group_code) is None:
            raise NotFoundError(f"Group {group_code} not found")
        now = now_ms()
        self.sweeper.sweep(group_code, now=now)
        return now

    def get_active_checkins(self, group_code: str) -> List[Dict]:
        now = self._prepare(group_code)
        return [serialize_checkin(row, now) for row in self.store.active_checkins(group_code)]

    def get_checkin_history(self, group_code: str, window_days: Optional[int] = None) -> List[Dict]:
        """All rows in the window, newest first, each with status and time_ago."""
        now = self._prepare(group_code)
        days = window_days if window_days is not None else self.window_days
        rows = self.store.checkins_since(group_code, now - days * MS_PER_DAY)
        return [serialize_checkin(row, now) for row in rows]

    def get_members(self, group_code: str) -> Dict:
        """
        One entry per device seen in the window, plus upcoming meetups.

        Identity comes from the device's latest row. Accommodation comes from
        its latest row that has accommodation data, which may be an older
        row, and is shown only when the latest row allows it.
        """
        now = self._prepare(group_code)
        since = now - self.window_days * MS_PER_DAY

        latest_rows = self.store.latest_checkins_by_device(group_code, since)
        accommodations = self.store.latest_accommodations_by_device(
            group_code, [row.device_id for row in latest_rows]
        )

        current: Dict[str, Checkin] = {}
        meetups: List[Checkin] = []
        for row in self.store.active_checkins(group_code):
            if row.is_meetup(now):
                meetups.append(row)
            elif row.device_id not in current:
                current[row.device_id] = row

        members = []
        for latest in latest_rows:
            active = current.get(latest.device_id)
            visible = latest.display_accommodation_to_group
            members.append({
                "device_id": latest.device_id,
                "user_name": latest.user_name,
                "last_seen_at": latest.checked_in_at,
                "last_seen_ago": time_ago(latest.checked_in_at, now=now),
                "is_checked_in": active is not None,
                "currently_at": {
                    "checkin_id": active.id,
                    "place_id": active.place_id,
                    "place_name": active.place_name,
                    "place_coords": active.place_coords,
                    "checked_in_at": active.checked_in_at,
                    "time_ago": time_ago(active.checked_in_at, now=now),
                } if active is not None else None,
                "display_accommodation_to_group": visible,
                "accommodation": accommodation_view(accommodations.get(latest.device_id)) if visible else None,
            })

        meetups.sort(key=lambda row: (row.scheduled_for, row.id))

        return {
            "group_code": group_code,
            "count": len(members),
            "members": members,
            "meetup_count": len(meetups),
            "meetups": [
                {
                    "checkin_id": row.id,
                    "device_id": row.device_id,
                    "user_name": row.user_name,
                    "place": {"id": row.place_id, "name": row.place_name, "coords": row.place_coords},
                    "scheduled_for": row.scheduled_for,
                    "note": row.meetup_note,
                }
                for row in meetups
            ],
        }
