"""
Client state orchestration.

``ClientController`` owns the :class:`~bazaar_client.state.AppState`
and performs every network call.  Independent requests are issued
concurrently with ``asyncio.gather`` and joined before the state is
updated:

* a search fetches bazaars, mosques and transport stations at once,
  merges the bazaars into the current list by exact name, then fetches
  vote tallies for names that have none yet;
* opening a place fetches its reviews together with a transport search
  near its address, and the non-empty transport results replace the
  sidebar list.

Voting submits the vote and then re-reads the tally from the server;
nothing is incremented locally.  Favorites, the theme, the vote
fingerprint and the session token are kept in :class:`LocalStorage`.

Search, detail and review failures are logged and never retried.
"""

from __future__ import annotations

import asyncio
import json
import logging
import secrets
from dataclasses import replace
from typing import Any, Dict, Iterable, Optional, Tuple

from .api import ApiError, BazaarAPI
from .config import ClientSettings
from .models import Location, Place, official_bazaars
from .places import PlaceSearchProvider
from .state import (
    AppState,
    AuthState,
    UiState,
    apply_place_details,
    apply_search_results,
    auth_failed,
    has_unread,
    mark_all_read,
    names_without_tally,
    select_place,
    set_tally,
    signed_in,
    toggle_favorite,
    visible_bazaars,
)
from .storage import LocalStorage


logger = logging.getLogger(__name__)

BAZAAR_QUERY = "Bazaar Ramadhan"
MOSQUE_QUERY = "Mosque"
TRANSPORT_QUERY = "Public Transport Station"

FAVORITES_KEY = "favorites"
THEME_KEY = "theme"
FINGERPRINT_KEY = "user_fp"
TOKEN_KEY = "token"


class LocationRequired(RuntimeError):
    """A nearby search was requested before the location is known."""


class ClientController:
    """Coordinates the API, place search and local storage for one user."""

    def __init__(self, api: BazaarAPI, places: PlaceSearchProvider, storage: LocalStorage) -> None:
        self.api = api
        self.places = places
        self.storage = storage
        self.fingerprint = self._load_fingerprint()
        self.api.token = storage.get_item(TOKEN_KEY)
        self.state = AppState(
            favorites=self._load_favorites(),
            ui=UiState(dark_mode=storage.get_item(THEME_KEY) == "dark"),
        )

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "ClientController":
        settings.validate()
        api = BazaarAPI(base_url=settings.api_base_url, timeout=settings.http_timeout)
        places = PlaceSearchProvider(
            api_key=settings.places_api_key,
            base_url=settings.places_base_url,
            radius=settings.places_radius,
            timeout=settings.http_timeout,
        )
        return cls(api, places, LocalStorage(settings.storage_path))

    async def aclose(self) -> None:
        await asyncio.gather(self.api.aclose(), self.places.aclose())

    # -- persistence ------------------------------------------------------

    def _load_fingerprint(self) -> str:
        fingerprint = self.storage.get_item(FINGERPRINT_KEY)
        if not fingerprint:
            fingerprint = secrets.token_hex(8)
            self.storage.set_item(FINGERPRINT_KEY, fingerprint)
        return fingerprint

    def _load_favorites(self) -> Tuple[str, ...]:
        raw = self.storage.get_item(FAVORITES_KEY)
        if not raw:
            return ()
        try:
            names = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable favorites: %r", raw)
            return ()
        return tuple(str(name) for name in names) if isinstance(names, list) else ()

    # -- state helpers ----------------------------------------------------

    def _update(self, **slices: Any) -> None:
        self.state = replace(self.state, **slices)

    def _update_ui(self, **fields: Any) -> None:
        self._update(ui=replace(self.state.ui, **fields))

    @property
    def visible_bazaars(self) -> Tuple[Place, ...]:
        return visible_bazaars(self.state)

    @property
    def has_unread(self) -> bool:
        return has_unread(self.state.auth.notifications)

    # -- startup ----------------------------------------------------------

    async def start(self) -> None:
        """Seed the official bazaars, load their tallies and restore the session."""
        seeded = official_bazaars()
        self._update(places=replace(self.state.places, bazaars=tuple(seeded)))
        await asyncio.gather(
            self.refresh_votes(place.name for place in seeded),
            self.restore_session(),
        )

    def set_location(self, lat: float, lng: float) -> None:
        self._update(places=replace(self.state.places, location=Location(lat=lat, lng=lng)))

    # -- places -----------------------------------------------------------

    async def search(self) -> None:
        """Search the three categories near the current location.

        Raises:
            LocationRequired: No location has been set yet.
        """
        location = self.state.places.location
        if location is None:
            raise LocationRequired("Allow location access to find the nearest bazaars")
        self._update_ui(loading=True)
        try:
            bazaars, mosques, transports = await asyncio.gather(
                self.places.search(BAZAAR_QUERY, location.lat, location.lng),
                self.places.search(MOSQUE_QUERY, location.lat, location.lng),
                self.places.search(TRANSPORT_QUERY, location.lat, location.lng),
            )
            self._update(places=apply_search_results(self.state.places, bazaars, mosques, transports))
            await self.refresh_votes(names_without_tally(self.state.places.bazaars, self.state.votes))
        except Exception:
            logger.exception("Search failed")
        finally:
            self._update_ui(loading=False)

    async def open_place(self, place: Place) -> None:
        """Inspect a place: load its reviews and the transport options near it."""
        self._update(places=select_place(self.state.places, place))
        self._update_ui(loading=True)
        location = self.state.places.location
        try:
            reviews, nearby = await asyncio.gather(
                self.api.get_reviews(place.name),
                self.places.search(
                    f"Public transport near {place.address or place.name}",
                    location.lat if location else None,
                    location.lng if location else None,
                ),
            )
            self._update(places=apply_place_details(self.state.places, reviews, nearby))
        except Exception:
            logger.exception("Failed to load details for %r", place.name)
        finally:
            self._update_ui(loading=False)

    def close_place(self) -> None:
        self._update(places=select_place(self.state.places, None))

    # -- votes ------------------------------------------------------------

    async def refresh_votes(self, names: Iterable[str]) -> None:
        names = list(names)
        if not names:
            return
        results = await asyncio.gather(*(self.api.get_votes(name) for name in names), return_exceptions=True)
        votes = self.state.votes
        for name, result in zip(names, results):
            if isinstance(result, Exception):
                logger.error("Could not load votes for %r: %s", name, result)
                continue
            votes = set_tally(votes, name, result)
        self._update(votes=votes)

    async def vote(self, name: str, vote_type: int) -> None:
        """Submit an anonymous vote, then re-read the tally."""
        try:
            await self.api.submit_vote(name, vote_type, self.fingerprint)
            tally = await self.api.get_votes(name)
        except Exception:
            logger.exception("Vote on %r failed", name)
            return
        self._update(votes=set_tally(self.state.votes, name, tally))

    # -- preferences ------------------------------------------------------

    def toggle_favorite(self, name: str) -> None:
        favorites = toggle_favorite(self.state.favorites, name)
        self._update(favorites=favorites)
        self.storage.set_item(FAVORITES_KEY, json.dumps(list(favorites)))

    def set_dark_mode(self, enabled: bool) -> None:
        self._update_ui(dark_mode=enabled)
        self.storage.set_item(THEME_KEY, "dark" if enabled else "light")

    def toggle_theme(self) -> None:
        self.set_dark_mode(not self.state.ui.dark_mode)

    def set_active_tab(self, tab: str) -> None:
        if tab not in ("all", "favorites"):
            raise ValueError(f"Unknown tab {tab!r}")
        self._update_ui(active_tab=tab)

    # -- auth -------------------------------------------------------------

    def request_sign_in(self) -> None:
        self._update_ui(show_auth_modal=True)

    async def login(self, email: str, password: str) -> bool:
        """Log in; on failure the server's message is kept in ``state.auth.error``."""
        try:
            data = await self.api.login(email, password)
        except ApiError as e:
            self._update(auth=auth_failed(self.state.auth, e.message))
            return False
        await self._complete_sign_in(data)
        return True

    async def signup(self, username: str, email: str, password: str) -> bool:
        try:
            data = await self.api.signup(username, email, password)
        except ApiError as e:
            self._update(auth=auth_failed(self.state.auth, e.message))
            return False
        await self._complete_sign_in(data)
        return True

    async def _complete_sign_in(self, data: Dict[str, Any]) -> None:
        token = data["token"]
        self.storage.set_item(TOKEN_KEY, token)
        self.api.token = token
        self._update(auth=signed_in(self.state.auth, data["user"]))
        self._update_ui(show_auth_modal=False)
        await self.fetch_notifications()

    async def restore_session(self) -> None:
        """Resume a stored session if the token is still accepted."""
        if not self.api.token:
            return
        user = await self.api.get_me()
        if user:
            self._update(auth=signed_in(self.state.auth, user))
            await self.fetch_notifications()

    def logout(self) -> None:
        self.storage.remove_item(TOKEN_KEY)
        self.api.token = None
        self._update(auth=AuthState())

    # -- notifications and subscriptions ---------------------------------

    async def fetch_notifications(self) -> None:
        notifications = await self.api.get_notifications()
        self._update(auth=replace(self.state.auth, notifications=tuple(notifications)))

    async def mark_notifications_read(self) -> None:
        await self.api.mark_notifications_read()
        self._update(auth=replace(self.state.auth, notifications=mark_all_read(self.state.auth.notifications)))

    async def subscribe(self) -> bool:
        """Subscribe to the inspected place; asks for sign-in when anonymous."""
        if self.state.auth.user is None:
            self.request_sign_in()
            return False
        selected: Optional[Place] = self.state.places.selected
        if selected is None:
            return False
        await self.api.subscribe(selected.name)
        return True

    async def submit_review(self, rating: int, comment: str) -> bool:
        """Post a review for the inspected place and reload its reviews."""
        selected = self.state.places.selected
        if selected is None:
            return False
        if self.state.auth.user is None:
            self.request_sign_in()
            return False
        self._update_ui(submitting_review=True)
        try:
            await self.api.add_review(selected.name, rating, comment)
            reviews = await self.api.get_reviews(selected.name)
        except Exception:
            logger.exception("Failed to add review for %r", selected.name)
            return False
        finally:
            self._update_ui(submitting_review=False)
        self._update(places=replace(self.state.places, reviews=tuple(reviews)))
        return True
