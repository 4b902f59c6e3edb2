"""
Client-side data types and the seeded bazaar list.

A place is identified by its display ``name``: votes, reviews, favorites
and subscriptions all use the name as the key, so two entries that share
a name are the same place as far as the application is concerned.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import quote


PLACE_TYPES = ("bazaar", "mosque", "transport")


@dataclass(frozen=True)
class Place:
    """A place shown in one of the three lists.

    Attributes:
        id: Client-side identifier, unique within one list.
        name: Display name; also the key used by the API.
        address: Street address, may be empty for search results.
        maps_uri: Link opening the place in a maps application.
        type: One of ``bazaar``, ``mosque`` or ``transport``.
        council: Local council for official bazaars.
    """

    id: str
    name: str
    address: str
    maps_uri: str
    type: str
    council: Optional[str] = None
    rating: Optional[float] = None
    distance: Optional[str] = None


@dataclass(frozen=True)
class Location:
    lat: float
    lng: float


# Bazaars published by the local councils; shown before any search.
OFFICIAL_BAZAARS = [
    {"council": "MPKj", "location": "Bandar Seri Putra", "address": "Jalan Seri Putra 1/3"},
    {"council": "MPKj", "location": "Semenyih", "address": "Jalan TPS 1/1, Taman Pelangi Semenyih"},
    {"council": "DBKL", "location": "TTDI", "address": "Jalan Tun Mohd Fuad 2"},
    {"council": "DBKL", "location": "Kampong Bharu", "address": "Jalan Raja Alang"},
    {"council": "MBSA", "location": "Section 13", "address": "Stadium Shah Alam Parking"},
    {"council": "MBSJ", "location": "USJ 4", "address": "Jalan USJ 4/5 Subang Jaya"},
    {"council": "MBPJ", "location": "Kelana Jaya", "address": "Jalan SS 6/1 Petaling Jaya"},
    {"council": "PPj", "location": "Putrajaya Presint 3", "address": "Dataran Putrajaya"},
]


def maps_search_uri(query: str) -> str:
    return "https://www.google.com/maps/search/?api=1&query=" + quote(query, safe="")


def official_bazaars() -> List[Place]:
    """Build the seeded bazaar list from ``OFFICIAL_BAZAARS``."""
    return [
        Place(
            id=f"official-{index}",
            name=f"Bazaar Ramadhan {entry['location']}",
            address=entry["address"],
            maps_uri=maps_search_uri(f"{entry['address']} {entry['location']}"),
            type="bazaar",
            council=entry["council"],
        )
        for index, entry in enumerate(OFFICIAL_BAZAARS)
    ]
