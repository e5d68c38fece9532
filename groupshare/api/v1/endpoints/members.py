"""Member endpoints."""
from fastapi import APIRouter, Depends, Request

from groupshare.api.deps import get_accommodation_service, get_presence, valid_group_code
from groupshare.core.rate_limit import limiter, RATE_LIMITS
from groupshare.core.sanitization import sanitize_device_id
from groupshare.core.utils import now_ms
from groupshare.schemas import AccommodationRequest, CheckinRecord, ErrorResponse, MembersResponse
from groupshare.services import AccommodationService, PresenceAggregator, serialize_checkin

router = APIRouter()


@router.get(
    "/{code}/members",
    response_model=MembersResponse,
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit(RATE_LIMITS["read"])
async def list_members_endpoint(
    request: Request,
    code: str = Depends(valid_group_code),
    presence: PresenceAggregator = Depends(get_presence),
):
    """
    Members seen in the last 7 days with where they are and where they stay.

    Example:
        Response (200):
            {
                "group_code": "482913",
                "count": 1,
                "members": [
                    {
                        "device_id": "dave2",
                        "user_name": "Dave",
                        "is_checked_in": true,
                        "currently_at": {"place_id": "123", "place_name": "Yamabiko Restaurant", ...},
                        "display_accommodation_to_group": true,
                        "accommodation": {"place_id": "acc-9", "name": "Pension Schnee", "coords": [138.44, 36.92]},
                        ...
                    }
                ],
                "meetup_count": 0,
                "meetups": []
            }

    Accommodation is null for members who are not sharing it.
    """
    return presence.get_members(code)


@router.put(
    "/{code}/members/{device_id}/accommodation",
    response_model=CheckinRecord,
    responses={404: {"model": ErrorResponse}},
)
@limiter.limit(RATE_LIMITS["accommodation"])
async def update_accommodation_endpoint(
    request: Request,
    device_id: str,
    accommodation_request: AccommodationRequest,
    code: str = Depends(valid_group_code),
    service: AccommodationService = Depends(get_accommodation_service),
):
    """
    Set a device's accommodation and whether the group can see it.

    Example:
        Request:
            PUT /api/v1/groups/482913/members/dave2/accommodation
            {"share": false}

        Response (200): the device's latest check-in record. The stored
        accommodation is unchanged; only display_accommodation_to_group flips.

    Returns 404 when the device has never checked in to the group.
    """
    record = service.update_accommodation(
        group_code=code,
        device_id=sanitize_device_id(device_id),
        share=accommodation_request.share,
        place_id=accommodation_request.accommodation_place_id,
        coords=accommodation_request.accommodation_coords,
        name=accommodation_request.accommodation_name,
    )
    return serialize_checkin(record, now_ms(), hide_private=False)
