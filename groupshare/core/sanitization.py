"""Input sanitization utilities."""
import math
import re
from typing import List, Optional, Sequence

from groupshare.core.constants import (
    GROUP_CODE_LENGTH,
    MAX_DEVICE_ID_LENGTH,
    MAX_MEETUP_NOTE_LENGTH,
    MAX_PLACE_ID_LENGTH,
    MAX_PLACE_NAME_LENGTH,
    MAX_USER_NAME_LENGTH,
)
from groupshare.core.errors import ValidationError


GROUP_CODE_PATTERN = re.compile(rf'^\d{{{GROUP_CODE_LENGTH}}}$')


def sanitize_text(text: str, max_length: Optional[int] = None, strip_html: bool = True) -> str:
    """
    Sanitize free text (names, notes) shown to other group members.

    HTML tags are stripped and whitespace is normalized. Entities are not
    escaped; the client escapes on render.

    Args:
        text: The input text to sanitize
        max_length: Optional maximum length to enforce
        strip_html: Whether to strip HTML tags (default True)

    Returns:
        Sanitized text with HTML tags removed and whitespace normalized

    Raises:
        ValidationError: If text exceeds max_length or contains dangerous patterns
    """
    if not isinstance(text, str):
        raise ValidationError("Input must be a string")

    sanitized = text.strip()

    # Enforce maximum length before processing to prevent length-based attacks
    if max_length and len(sanitized) > max_length:
        raise ValidationError(f"Input exceeds maximum length of {max_length} characters")

    if strip_html:
        sanitized = re.sub(r'<[^>]*>', '', sanitized)

    # Reject inputs that still contain HTML-like patterns after stripping
    if '<' in sanitized or '>' in sanitized:
        raise ValidationError("Input contains invalid HTML-like patterns")

    sanitized = re.sub(r'\s+', ' ', sanitized)

    return sanitized


def sanitize_group_code(code: str) -> str:
    """
    Sanitize a join code supplied by a client.

    Raises:
        ValidationError: If the code is not exactly six digits
    """
    if not isinstance(code, str):
        raise ValidationError("Group code must be a string")

    sanitized = code.strip()
    if not GROUP_CODE_PATTERN.match(sanitized):
        raise ValidationError(f"Group code must be {GROUP_CODE_LENGTH} digits")

    return sanitized


def sanitize_identifier(value: str, field: str, max_length: int) -> str:
    """Trim an opaque identifier (device id, place id) and enforce presence and length."""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")

    sanitized = value.strip()
    if not sanitized:
        raise ValidationError(f"{field} is required")
    if len(sanitized) > max_length:
        raise ValidationError(f"{field} too long")

    return sanitized


def sanitize_device_id(device_id: str) -> str:
    return sanitize_identifier(device_id, "Device ID", MAX_DEVICE_ID_LENGTH)


def sanitize_place_id(place_id: str) -> str:
    return sanitize_identifier(place_id, "Place ID", MAX_PLACE_ID_LENGTH)


def sanitize_user_name(user_name: str) -> str:
    """Sanitize the display name a device shows to its group."""
    sanitized = sanitize_text(user_name, max_length=MAX_USER_NAME_LENGTH)
    if not sanitized:
        raise ValidationError("User name is required")
    return sanitized


def sanitize_place_name(place_name: str) -> str:
    sanitized = sanitize_text(place_name, max_length=MAX_PLACE_NAME_LENGTH)
    if not sanitized:
        raise ValidationError("Place name cannot be empty")
    return sanitized


def sanitize_meetup_note(note: str) -> str:
    return sanitize_text(note, max_length=MAX_MEETUP_NOTE_LENGTH)


def validate_coords(coords: Sequence) -> List[float]:
    """
    Validate a ``[lng, lat]`` pair.

    Returns:
        The pair as a list of floats

    Raises:
        ValidationError: If the value is not two finite numbers in range
    """
    if isinstance(coords, (str, bytes)) or not isinstance(coords, Sequence) or len(coords) != 2:
        raise ValidationError("Coordinates must be a [lng, lat] pair")

    if any(isinstance(value, bool) for value in coords):
        raise ValidationError("Coordinates must be numbers")

    try:
        lng, lat = (float(value) for value in coords)
    except (TypeError, ValueError):
        raise ValidationError("Coordinates must be numbers")

    if not (math.isfinite(lng) and math.isfinite(lat)):
        raise ValidationError("Coordinates must be finite")

    if not -180.0 <= lng <= 180.0:
        raise ValidationError("Longitude must be between -180 and 180")

    if not -90.0 <= lat <= 90.0:
        raise ValidationError("Latitude must be between -90 and 90")

    return [lng, lat]
