"""
Authentication endpoints.

Signup and login both answer with ``{"token", "user"}``.  Missing
fields, duplicate usernames/emails and bad credentials are all reported
as 400 with a message in ``detail``.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from bazaar_api.app.core.errors import NotFoundError
from bazaar_api.app.core.security import get_current_user
from bazaar_api.app.schemas.user import AuthResponse, UserLogin, UserRead, UserSignup
from bazaar_api.app.services.auth_service import AuthService


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/signup", response_model=AuthResponse, summary="Create an account")
async def signup(data: UserSignup) -> AuthResponse:
    try:
        return await AuthService.signup(data.username, data.email, data.password)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Signup failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


@router.post("/login", response_model=AuthResponse, summary="Log in with email and password")
async def login(data: UserLogin) -> AuthResponse:
    try:
        return await AuthService.login(data.email, data.password)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/me", response_model=UserRead, summary="Current user")
async def me(current_user: dict = Depends(get_current_user)) -> UserRead:
    """Return the stored record of the token's user.

    404 when the account behind a still-valid token no longer exists.
    """
    try:
        return await AuthService.get_user(current_user["id"])
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
