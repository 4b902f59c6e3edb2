"""
Service-level exceptions.

Services raise these instead of ``HTTPException`` so they stay usable
outside a request.  Endpoints translate them: every ``ValueError``
subclass becomes a 400, ``NotFoundError`` a 404.  Authentication
failures (401/403) are raised directly by the bearer dependency in
``core.security``.
"""


class ValidationError(ValueError):
    """Missing or malformed input."""


class ConflictError(ValueError):
    """A uniqueness constraint would be violated."""


class InvalidCredentials(ValueError):
    """Email/password pair does not match a stored user."""


class NotFoundError(LookupError):
    """The requested record does not exist."""
