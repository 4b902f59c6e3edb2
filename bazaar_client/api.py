"""
Async client for the Bazaar Ramadhan HTTP API.

The client wraps ``httpx.AsyncClient`` and exposes one coroutine per
API route.  When ``token`` is set, it is sent as ``Authorization:
Bearer <token>`` on every request.

Error handling follows what each caller needs:

* :meth:`login` and :meth:`signup` raise :class:`ApiError` so the
  message can be shown next to the form.
* :meth:`get_me` returns ``None`` and :meth:`get_notifications` returns
  ``[]`` on any non-success status, since both run on page load with a
  possibly stale token.
* Everything else calls ``raise_for_status``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx


logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A non-success response from the API."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return response.text


class BazaarAPI:
    """Client for the Bazaar Ramadhan API."""

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the API server, e.g. ``http://localhost:8000``.
            token: Optional bearer token from a previous login.
            client: Optional ``httpx.AsyncClient``.  If not supplied one
                is created and closed by :meth:`aclose`.
            timeout: Request timeout in seconds for the created client.
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api{path}"

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        headers = {**self._headers(), **kwargs.pop("headers", {})}
        logger.debug("%s %s", method, path)
        return await self.client.request(method, self._url(path), headers=headers, **kwargs)

    # -- auth -----------------------------------------------------------

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        """Return ``{"token", "user"}`` or raise :class:`ApiError`."""
        response = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        return response.json()

    async def signup(self, username: str, email: str, password: str) -> Dict[str, Any]:
        """Return ``{"token", "user"}`` or raise :class:`ApiError`."""
        response = await self._request(
            "POST",
            "/auth/signup",
            json={"username": username, "email": email, "password": password},
        )
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        return response.json()

    async def get_me(self) -> Optional[Dict[str, Any]]:
        response = await self._request("GET", "/auth/me")
        if response.is_error:
            return None
        return response.json()

    # -- subscriptions and notifications -------------------------------

    async def subscribe(self, place_id: str) -> Dict[str, Any]:
        response = await self._request("POST", "/subscribe", json={"place_id": place_id})
        response.raise_for_status()
        return response.json()

    async def get_notifications(self) -> List[Dict[str, Any]]:
        response = await self._request("GET", "/notifications")
        if response.is_error:
            return []
        return response.json()

    async def mark_notifications_read(self) -> Dict[str, Any]:
        response = await self._request("POST", "/notifications/read")
        response.raise_for_status()
        return response.json()

    # -- votes ----------------------------------------------------------

    async def get_votes(self, place_id: str) -> Dict[str, int]:
        response = await self._request("GET", f"/votes/{quote(place_id, safe='')}")
        response.raise_for_status()
        return response.json()

    async def submit_vote(self, place_id: str, vote_type: int, fingerprint: str) -> Dict[str, Any]:
        response = await self._request(
            "POST",
            "/votes",
            json={"place_id": place_id, "vote_type": vote_type, "user_fingerprint": fingerprint},
        )
        response.raise_for_status()
        return response.json()

    # -- reviews --------------------------------------------------------

    async def get_reviews(self, place_id: str) -> List[Dict[str, Any]]:
        response = await self._request("GET", f"/reviews/{quote(place_id, safe='')}")
        response.raise_for_status()
        return response.json()

    async def add_review(self, place_id: str, rating: int, comment: str) -> Dict[str, Any]:
        response = await self._request(
            "POST",
            "/reviews",
            json={"place_id": place_id, "rating": rating, "comment": comment},
        )
        response.raise_for_status()
        return response.json()
