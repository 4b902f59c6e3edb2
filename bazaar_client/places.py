"""
External place search.

``PlaceSearchProvider`` queries the Google Places Text Search endpoint
and converts each result into a :class:`~bazaar_client.models.Place`.
The place type is inferred from the query text: queries mentioning
"bazaar" yield bazaars, "mosque" yields mosques, anything else is
treated as transport.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from .models import Place, maps_search_uri


logger = logging.getLogger(__name__)


class PlaceSearchError(Exception):
    """The place search service answered with an error status."""


def place_type_for_query(query: str) -> str:
    lowered = query.lower()
    if "bazaar" in lowered:
        return "bazaar"
    if "mosque" in lowered:
        return "mosque"
    return "transport"


def _slug(name: str) -> str:
    return re.sub(r"\s+", "-", name).lower()


class PlaceSearchProvider:
    """Text search for places near an optional coordinate."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = "https://maps.googleapis.com/maps/api/place",
        radius: int = 10000,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.radius = radius
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def search(self, query: str, lat: Optional[float] = None, lng: Optional[float] = None) -> List[Place]:
        """Find places matching ``query``, biased towards ``lat``/``lng`` when given.

        Raises:
            PlaceSearchError: The service returned a status other than
                ``OK`` or ``ZERO_RESULTS``.
            httpx.HTTPStatusError: The HTTP request itself failed.
        """
        params: Dict[str, Any] = {"query": query, "key": self.api_key}
        if lat is not None and lng is not None:
            params["location"] = f"{lat},{lng}"
            params["radius"] = self.radius
        response = await self.client.get(f"{self.base_url}/textsearch/json", params=params)
        response.raise_for_status()
        data = response.json()
        status = data.get("status")
        if status not in ("OK", "ZERO_RESULTS"):
            raise PlaceSearchError(f"Place search for {query!r} failed: {status} {data.get('error_message', '')}".strip())

        place_type = place_type_for_query(query)
        places: List[Place] = []
        for index, result in enumerate(data.get("results", [])):
            name = result.get("name") or "Unknown Place"
            place_id = result.get("place_id")
            if place_id:
                maps_uri = maps_search_uri(name) + "&query_place_id=" + quote(place_id, safe="")
            else:
                maps_uri = maps_search_uri(name)
            places.append(
                Place(
                    id=f"place-{_slug(name)}-{index}",
                    name=name,
                    address=result.get("formatted_address", ""),
                    maps_uri=maps_uri,
                    type=place_type,
                    rating=result.get("rating"),
                )
            )
        logger.debug("Place search %r returned %d result(s)", query, len(places))
        return places
