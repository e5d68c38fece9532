"""Derived check-in state.

A row's lifecycle is encoded in two columns (``is_active`` and
``checked_out_at``). ``CheckinState.of`` is the one place that decodes them.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from groupshare.db.models import Checkin


class CheckinStatus(str, Enum):
    ACTIVE = "active"
    CHECKED_OUT = "checked_out"
    EXPIRED = "expired"


@dataclass(frozen=True)
class CheckinState:
    status: CheckinStatus
    checked_out_at: Optional[int] = None

    @classmethod
    def of(cls, record: Checkin) -> "CheckinState":
        if record.is_active:
            return cls(CheckinStatus.ACTIVE)
        if record.checked_out_at is not None:
            return cls(CheckinStatus.CHECKED_OUT, record.checked_out_at)
        # Inactive without a checkout stamp: the sweeper expired it
        return cls(CheckinStatus.EXPIRED)
