"""Pydantic schemas for request/response validation."""
from groupshare.schemas.group import GroupResponse, GroupLookupResponse
from groupshare.schemas.checkin import (
    CheckinRequest,
    CheckoutRequest,
    CheckoutResponse,
    CheckinRecord,
    CheckinListResponse,
)
from groupshare.schemas.member import (
    AccommodationRequest,
    AccommodationView,
    CurrentPlace,
    MemberView,
    MeetupView,
    MembersResponse,
)
from groupshare.schemas.common import ErrorResponse, ErrorDetail

__all__ = [
    "GroupResponse",
    "GroupLookupResponse",
    "CheckinRequest",
    "CheckoutRequest",
    "CheckoutResponse",
    "CheckinRecord",
    "CheckinListResponse",
    "AccommodationRequest",
    "AccommodationView",
    "CurrentPlace",
    "MemberView",
    "MeetupView",
    "MembersResponse",
    "ErrorResponse",
    "ErrorDetail",
]
