"""Check-in endpoints."""
from fastapi import APIRouter, Depends, Request

from groupshare.api.deps import get_ledger, get_presence, valid_group_code
from groupshare.core.rate_limit import limiter, RATE_LIMITS
from groupshare.core.utils import now_ms
from groupshare.schemas import (
    CheckinListResponse,
    CheckinRecord,
    CheckinRequest,
    CheckoutRequest,
    CheckoutResponse,
    ErrorResponse,
)
from groupshare.services import (
    AccommodationInput,
    CheckinLedger,
    PresenceAggregator,
    serialize_checkin,
)

router = APIRouter()


@router.post(
    "/{code}/checkin",
    response_model=CheckinRecord,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
@limiter.limit(RATE_LIMITS["check_in"])
async def checkin_endpoint(
    request: Request,
    checkin_request: CheckinRequest,
    code: str = Depends(valid_group_code),
    ledger: CheckinLedger = Depends(get_ledger),
):
    """
    Check a device in at a place, replacing its previous check-in.

    Example:
        Request:
            POST /api/v1/groups/482913/checkin
            {
                "deviceId": "dave2",
                "userName": "Dave",
                "placeId": "123",
                "placeName": "Yamabiko Restaurant",
                "accommodationPlaceId": "acc-9",
                "accommodationName": "Pension Schnee",
                "accommodationCoords": [138.44, 36.92],
                "displayAccommodationToGroup": true
            }

        Response (201): the new check-in record, status "active".

    Notes:
        - ``placeName`` may be omitted when the places directory knows the place
        - ``timestamp`` (epoch ms) replays an offline check-in; it must be
          within 24 hours in the past and 5 minutes in the future
        - ``scheduledFor`` turns the check-in into a meetup announcement
        - Accommodation is stored only when ``displayAccommodationToGroup`` is true
    """
    accommodation = None
    if checkin_request.accommodation_place_id is not None:
        accommodation = AccommodationInput(
            place_id=checkin_request.accommodation_place_id,
            coords=checkin_request.accommodation_coords,
            name=checkin_request.accommodation_name,
        )

    record = ledger.check_in(
        group_code=code,
        device_id=checkin_request.device_id,
        user_name=checkin_request.user_name,
        place_id=checkin_request.place_id,
        place_name=checkin_request.place_name,
        place_coords=checkin_request.place_coords,
        accommodation=accommodation,
        display_accommodation=checkin_request.display_accommodation_to_group,
        timestamp=checkin_request.timestamp,
        scheduled_for=checkin_request.scheduled_for,
        meetup_note=checkin_request.meetup_note,
    )
    return serialize_checkin(record, now_ms(), hide_private=False)


@router.post(
    "/{code}/checkout",
    response_model=CheckoutResponse,
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit(RATE_LIMITS["check_out"])
async def checkout_endpoint(
    request: Request,
    checkout_request: CheckoutRequest,
    code: str = Depends(valid_group_code),
    ledger: CheckinLedger = Depends(get_ledger),
):
    """
    Check a device out.

    With ``placeId`` only the active check-in at that place is closed
    (404 if there is none). Without it the device leaves the group: every
    active check-in is closed.

    Example:
        Request:
            POST /api/v1/groups/482913/checkout
            {"deviceId": "dave2"}

        Response (200):
            {"mode": "full", "rows_affected": 1}
    """
    result = ledger.check_out(code, checkout_request.device_id, checkout_request.place_id)
    return CheckoutResponse(mode=result.mode, rows_affected=result.rows_affected)


@router.get(
    "/{code}/checkins",
    response_model=CheckinListResponse,
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit(RATE_LIMITS["read"])
async def list_checkins_endpoint(
    request: Request,
    code: str = Depends(valid_group_code),
    presence: PresenceAggregator = Depends(get_presence),
):
    """
    Check-in history for the last 7 days, newest first.

    Stale check-ins are expired before reading. Each entry carries a
    ``status`` of active, checked_out or expired, and a ``time_ago``.
    """
    checkins = presence.get_checkin_history(code)
    return CheckinListResponse(group_code=code, count=len(checkins), checkins=checkins)


@router.get(
    "/{code}/checkins/active",
    response_model=CheckinListResponse,
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit(RATE_LIMITS["read"])
async def list_active_checkins_endpoint(
    request: Request,
    code: str = Depends(valid_group_code),
    presence: PresenceAggregator = Depends(get_presence),
):
    """Currently active check-ins (after expiring stale ones)."""
    checkins = presence.get_active_checkins(code)
    return CheckinListResponse(group_code=code, count=len(checkins), checkins=checkins)
