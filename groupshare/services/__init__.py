from .accommodation import AccommodationService
from .checkins import AccommodationInput, CheckinLedger, CheckoutResult
from .groups import GroupRegistry
from .places import HttpPlaceDirectory, PlaceDirectory, PlaceInfo, build_place_directory
from .presence import PresenceAggregator, serialize_checkin
from .status import CheckinState, CheckinStatus
from .sweeper import ExpirySweeper

__all__ = [
    # groups
    "GroupRegistry",
    # ledger
    "AccommodationInput",
    "CheckinLedger",
    "CheckoutResult",
    # accommodation
    "AccommodationService",
    # presence
    "CheckinState",
    "CheckinStatus",
    "ExpirySweeper",
    "PresenceAggregator",
    "serialize_checkin",
    # places
    "HttpPlaceDirectory",
    "PlaceDirectory",
    "PlaceInfo",
    "build_place_directory",
]
