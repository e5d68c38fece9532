"""Check-in schemas."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from groupshare.core.constants import MAX_PLACE_ID_LENGTH, MAX_PLACE_NAME_LENGTH
from groupshare.core.sanitization import (
    sanitize_device_id,
    sanitize_identifier,
    sanitize_meetup_note,
    sanitize_place_id,
    sanitize_place_name,
    sanitize_text,
    sanitize_user_name,
    validate_coords,
)


class CheckinRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    device_id: str = Field(..., alias="deviceId")
    user_name: str = Field(..., alias="userName")
    place_id: str = Field(..., alias="placeId")
    place_name: Optional[str] = Field(None, alias="placeName")  # Looked up in the places directory when absent
    place_coords: Optional[List[float]] = Field(None, alias="placeCoords")
    accommodation_place_id: Optional[str] = Field(None, alias="accommodationPlaceId")
    accommodation_coords: Optional[List[float]] = Field(None, alias="accommodationCoords")
    accommodation_name: Optional[str] = Field(None, alias="accommodationName")
    display_accommodation_to_group: bool = Field(False, alias="displayAccommodationToGroup")
    timestamp: Optional[int] = Field(None, ge=0)  # Epoch ms, client clock
    scheduled_for: Optional[datetime] = Field(None, alias="scheduledFor")
    meetup_note: Optional[str] = Field(None, alias="meetupNote")

    @field_validator('device_id')
    @classmethod
    def sanitize_device_id_field(cls, v: str) -> str:
        return sanitize_device_id(v)

    @field_validator('user_name')
    @classmethod
    def sanitize_user_name_field(cls, v: str) -> str:
        return sanitize_user_name(v)

    @field_validator('place_id')
    @classmethod
    def sanitize_place_id_field(cls, v: str) -> str:
        return sanitize_place_id(v)

    @field_validator('place_name')
    @classmethod
    def sanitize_place_name_field(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return sanitize_place_name(v)

    @field_validator('accommodation_place_id')
    @classmethod
    def sanitize_accommodation_place_id_field(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return sanitize_identifier(v, "Accommodation place ID", MAX_PLACE_ID_LENGTH)

    @field_validator('accommodation_name')
    @classmethod
    def sanitize_accommodation_name_field(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return sanitize_text(v, max_length=MAX_PLACE_NAME_LENGTH) or None

    @field_validator('place_coords', 'accommodation_coords')
    @classmethod
    def validate_coords_field(cls, v: Optional[List[float]]) -> Optional[List[float]]:
        if v is None:
            return v
        return validate_coords(v)

    @field_validator('meetup_note')
    @classmethod
    def sanitize_meetup_note_field(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return sanitize_meetup_note(v) or None

    @model_validator(mode='after')
    def check_accommodation_payload(self) -> "CheckinRequest":
        """Sharing on check-in needs something to share."""
        if self.display_accommodation_to_group and self.accommodation_place_id is None:
            raise ValueError("accommodationPlaceId is required when displayAccommodationToGroup is true")
        return self


class CheckoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    device_id: str = Field(..., alias="deviceId")
    place_id: Optional[str] = Field(None, alias="placeId")  # Absent = leave group

    @field_validator('device_id')
    @classmethod
    def sanitize_device_id_field(cls, v: str) -> str:
        return sanitize_device_id(v)

    @field_validator('place_id')
    @classmethod
    def sanitize_place_id_field(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return sanitize_place_id(v)


class CheckoutResponse(BaseModel):
    mode: str
    rows_affected: int


class CheckinRecord(BaseModel):
    id: int
    group_code: str
    device_id: str
    user_name: str
    place_id: str
    place_name: str
    place_coords: Optional[List[float]] = None
    checked_in_at: int
    checked_out_at: Optional[int] = None
    is_active: bool
    accommodation_place_id: Optional[str] = None
    accommodation_coords: Optional[List[float]] = None
    accommodation_name: Optional[str] = None
    display_accommodation_to_group: bool
    scheduled_for: Optional[int] = None
    meetup_note: Optional[str] = None
    status: str
    time_ago: str


class CheckinListResponse(BaseModel):
    group_code: str
    count: int
    checkins: List[CheckinRecord]
