"""
Client state container.

All view state lives in an immutable :class:`AppState` made of named
slices (``auth``, ``places``, ``votes``, ``favorites``, ``ui``).  The
functions in this module are pure: they take a slice (or the pieces
they need) and return a new value, never mutating their arguments.
``ClientController`` performs the I/O and swaps slices in.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .models import Location, Place


Tally = Mapping[str, int]


@dataclass(frozen=True)
class AuthState:
    user: Optional[Dict[str, Any]] = None
    notifications: Tuple[Dict[str, Any], ...] = ()
    # Inline error text for the sign-in form.
    error: Optional[str] = None


@dataclass(frozen=True)
class PlacesState:
    location: Optional[Location] = None
    bazaars: Tuple[Place, ...] = ()
    mosques: Tuple[Place, ...] = ()
    transports: Tuple[Place, ...] = ()
    selected: Optional[Place] = None
    reviews: Tuple[Dict[str, Any], ...] = ()


@dataclass(frozen=True)
class UiState:
    loading: bool = False
    submitting_review: bool = False
    active_tab: str = "all"
    dark_mode: bool = False
    show_auth_modal: bool = False


@dataclass(frozen=True)
class AppState:
    auth: AuthState = field(default_factory=AuthState)
    places: PlacesState = field(default_factory=PlacesState)
    votes: Mapping[str, Tally] = field(default_factory=dict)
    favorites: Tuple[str, ...] = ()
    ui: UiState = field(default_factory=UiState)


# -- places ------------------------------------------------------------

def merge_by_name(existing: Sequence[Place], incoming: Iterable[Place]) -> Tuple[Place, ...]:
    """Append places whose name is not already present.

    Matching is exact on ``name``; the first occurrence wins and the
    order of ``existing`` is preserved.
    """
    merged = list(existing)
    seen = {place.name for place in merged}
    for place in incoming:
        if place.name not in seen:
            merged.append(place)
            seen.add(place.name)
    return tuple(merged)


def apply_search_results(
    places: PlacesState,
    bazaars: Iterable[Place],
    mosques: Iterable[Place],
    transports: Iterable[Place],
) -> PlacesState:
    """Merge searched bazaars into the list and replace mosques and transports."""
    return replace(
        places,
        bazaars=merge_by_name(places.bazaars, bazaars),
        mosques=tuple(mosques),
        transports=tuple(transports),
    )


def select_place(places: PlacesState, place: Optional[Place]) -> PlacesState:
    """Change the inspected place, clearing the previous place's reviews."""
    return replace(places, selected=place, reviews=())


def apply_place_details(
    places: PlacesState,
    reviews: Iterable[Dict[str, Any]],
    transports: Sequence[Place],
) -> PlacesState:
    """Store reviews and, when the nearby search found any, the new transports."""
    if transports:
        return replace(places, reviews=tuple(reviews), transports=tuple(transports))
    return replace(places, reviews=tuple(reviews))


# -- votes -------------------------------------------------------------

def names_without_tally(bazaars: Iterable[Place], votes: Mapping[str, Tally]) -> List[str]:
    return [place.name for place in bazaars if place.name not in votes]


def set_tally(votes: Mapping[str, Tally], name: str, tally: Tally) -> Dict[str, Tally]:
    updated = dict(votes)
    updated[name] = {"up": int(tally.get("up", 0)), "down": int(tally.get("down", 0))}
    return updated


# -- favorites ---------------------------------------------------------

def toggle_favorite(favorites: Sequence[str], name: str) -> Tuple[str, ...]:
    if name in favorites:
        return tuple(f for f in favorites if f != name)
    return tuple(favorites) + (name,)


def visible_bazaars(state: AppState) -> Tuple[Place, ...]:
    """Bazaars for the active tab: all of them, or only favorites."""
    if state.ui.active_tab == "favorites":
        return tuple(b for b in state.places.bazaars if b.name in state.favorites)
    return state.places.bazaars


# -- auth and notifications -------------------------------------------

def signed_in(auth: AuthState, user: Dict[str, Any]) -> AuthState:
    return replace(auth, user=user, error=None)


def auth_failed(auth: AuthState, message: str) -> AuthState:
    return replace(auth, error=message)


def mark_all_read(notifications: Iterable[Dict[str, Any]]) -> Tuple[Dict[str, Any], ...]:
    return tuple({**n, "is_read": 1} for n in notifications)


def has_unread(notifications: Iterable[Dict[str, Any]]) -> bool:
    return any(not n.get("is_read") for n in notifications)
