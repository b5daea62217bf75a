"""Reverse geocoding with a coordinate-string fallback"""

from typing import Optional

import requests

from ..core.config import Settings, get_settings
from ..core.logging import get_logger

logger = get_logger(__name__)


def format_coordinates(latitude: float, longitude: float) -> str:
    return f"{latitude:.6f}, {longitude:.6f}"


class Geocoder:
    """Nominatim-compatible reverse geocoder. Never raises."""

    def __init__(self, settings: Optional[Settings] = None, http: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.http = http or requests.Session()

    def reverse_geocode(self, latitude: float, longitude: float) -> str:
        fallback = format_coordinates(latitude, longitude)
        try:
            response = self.http.get(
                self.settings.geocoder_url,
                params={"format": "json", "lat": latitude, "lon": longitude},
                headers={"User-Agent": self.settings.geocoder_user_agent},
                timeout=self.settings.geocoder_timeout_seconds,
            )
            response.raise_for_status()
            address = response.json().get("display_name")
        except (requests.RequestException, ValueError, AttributeError) as e:
            logger.warning(f"[GEOCODE] Reverse geocoding failed for {fallback}: {e}")
            return fallback

        return address or fallback


_geocoder: Optional[Geocoder] = None


def get_geocoder() -> Geocoder:
    global _geocoder
    if _geocoder is None:
        _geocoder = Geocoder()
    return _geocoder
