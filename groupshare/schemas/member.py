"""Member and accommodation schemas."""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from groupshare.core.constants import MAX_PLACE_ID_LENGTH, MAX_PLACE_NAME_LENGTH
from groupshare.core.sanitization import sanitize_identifier, sanitize_text, validate_coords


class AccommodationRequest(BaseModel):
    """
    Accommodation update. ``share`` alone toggles visibility and keeps the
    stored accommodation; sending ``accommodationPlaceId`` replaces it.
    """
    model_config = ConfigDict(populate_by_name=True)

    share: bool
    accommodation_place_id: Optional[str] = Field(None, alias="accommodationPlaceId")
    accommodation_coords: Optional[List[float]] = Field(None, alias="accommodationCoords")
    accommodation_name: Optional[str] = Field(None, alias="accommodationName")

    @field_validator('accommodation_place_id')
    @classmethod
    def sanitize_place_id_field(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return sanitize_identifier(v, "Accommodation place ID", MAX_PLACE_ID_LENGTH)

    @field_validator('accommodation_name')
    @classmethod
    def sanitize_name_field(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return sanitize_text(v, max_length=MAX_PLACE_NAME_LENGTH) or None

    @field_validator('accommodation_coords')
    @classmethod
    def validate_coords_field(cls, v: Optional[List[float]]) -> Optional[List[float]]:
        if v is None:
            return v
        return validate_coords(v)

    @model_validator(mode='after')
    def check_payload_complete(self) -> "AccommodationRequest":
        if self.accommodation_place_id is None and (
            self.accommodation_coords is not None or self.accommodation_name is not None
        ):
            raise ValueError("accommodationPlaceId is required when sending accommodation details")
        return self


class AccommodationView(BaseModel):
    place_id: str
    name: Optional[str] = None
    coords: Optional[List[float]] = None


class CurrentPlace(BaseModel):
    checkin_id: int
    place_id: str
    place_name: str
    place_coords: Optional[List[float]] = None
    checked_in_at: int
    time_ago: str


class MemberView(BaseModel):
    device_id: str
    user_name: str
    last_seen_at: int
    last_seen_ago: str
    is_checked_in: bool
    currently_at: Optional[CurrentPlace] = None
    display_accommodation_to_group: bool
    accommodation: Optional[AccommodationView] = None


class MeetupPlace(BaseModel):
    id: str
    name: str
    coords: Optional[List[float]] = None


class MeetupView(BaseModel):
    checkin_id: int
    device_id: str
    user_name: str
    place: MeetupPlace
    scheduled_for: int
    note: Optional[str] = None


class MembersResponse(BaseModel):
    group_code: str
    count: int
    members: List[MemberView]
    meetup_count: int
    meetups: List[MeetupView]
