"""
Place lookup against the places directory service.

The directory is an external collaborator: check-ins only use it to fill in
a place name or coordinates the client did not send. It may be slow, down,
or not configured at all, so every failure degrades to ``None`` and the
caller falls back to client-supplied values.
"""
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

import httpx

from groupshare.core.config import settings
from groupshare.core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PlaceInfo:
    name: str
    lat: Optional[float] = None
    lng: Optional[float] = None

    @property
    def coords(self) -> Optional[list]:
        if self.lat is None or self.lng is None:
            return None
        return [self.lng, self.lat]


class PlaceDirectory:
    """Null directory: knows no places. Used when PLACES_API_URL is unset."""

    def get_place(self, place_id: str) -> Optional[PlaceInfo]:
        return None


class HttpPlaceDirectory(PlaceDirectory):
    """Looks places up with ``GET {base_url}/api/places/{id}``."""

    def __init__(self, base_url: str, timeout: float = 2.0, client: Optional[httpx.Client] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    def get_place(self, place_id: str) -> Optional[PlaceInfo]:
        url = f"{self.base_url}/api/places/{quote(place_id, safe='')}"
        try:
            if self._client is not None:
                response = self._client.get(url, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.get(url)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.warning("place_lookup_failed", place_id=place_id, error=str(e))
            return None

        return _parse_place(place_id, payload)


def _parse_place(place_id: str, payload) -> Optional[PlaceInfo]:
    """Accept ``{name, lat, lng}`` or ``{name, coordinates: [lng, lat]}``."""
    if not isinstance(payload, dict):
        logger.warning("place_lookup_malformed", place_id=place_id)
        return None

    name = payload.get("name")
    lat, lng = payload.get("lat"), payload.get("lng")
    coordinates = payload.get("coordinates")
    if (lat is None or lng is None) and isinstance(coordinates, (list, tuple)) and len(coordinates) == 2:
        lng, lat = coordinates

    if not name:
        logger.warning("place_lookup_malformed", place_id=place_id)
        return None

    try:
        lat = float(lat) if lat is not None else None
        lng = float(lng) if lng is not None else None
    except (TypeError, ValueError):
        lat = lng = None

    return PlaceInfo(name=str(name), lat=lat, lng=lng)


def build_place_directory() -> PlaceDirectory:
    """Directory for the current settings."""
    if settings.PLACES_API_URL:
        return HttpPlaceDirectory(settings.PLACES_API_URL, timeout=settings.PLACES_API_TIMEOUT_SECONDS)
    return PlaceDirectory()
