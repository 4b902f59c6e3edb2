"""
Client for the Bazaar Ramadhan directory.

``ClientController`` is the entry point: it holds the view state and
talks to the API (:class:`BazaarAPI`) and the external place search
(:class:`PlaceSearchProvider`).
"""

from .api import ApiError, BazaarAPI
from .controller import ClientController, LocationRequired
from .places import PlaceSearchProvider

__all__ = ["ApiError", "BazaarAPI", "ClientController", "LocationRequired", "PlaceSearchProvider"]
