"""
Client configuration loaded from environment variables.

``PLACES_API_KEY`` has no default; ``validate`` raises when it is
missing so the client fails at startup rather than on the first search.
"""

import os
from dataclasses import dataclass


@dataclass
class ClientSettings:
    """Settings for the API client, place search and local storage."""

    api_base_url: str = os.getenv("BAZAAR_API_BASE_URL", "http://localhost:8000")
    places_api_key: str = os.getenv("PLACES_API_KEY", "")
    places_base_url: str = os.getenv("PLACES_BASE_URL", "https://maps.googleapis.com/maps/api/place")
    # Radius in metres used to bias place search around the current location.
    places_radius: int = int(os.getenv("PLACES_RADIUS", "10000"))
    storage_path: str = os.getenv("BAZAAR_STORAGE_PATH", os.path.join(os.path.expanduser("~"), ".bazaar_ramadhan.json"))
    http_timeout: float = float(os.getenv("HTTP_TIMEOUT", "30"))

    def validate(self) -> None:
        if not self.places_api_key:
            raise RuntimeError("PLACES_API_KEY must be set to search for places")
