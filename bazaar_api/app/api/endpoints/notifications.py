"""
Subscription and notification endpoints.

All routes require a bearer token.  ``POST /subscribe`` answers
``{"success": true}`` whether or not the user was already subscribed;
only a missing ``place_id`` is rejected.  Storage errors are logged and
suppressed so that the client's subscribe button never fails.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from bazaar_api.app.core.errors import ValidationError
from bazaar_api.app.core.security import get_current_user
from bazaar_api.app.schemas.notification import NotificationRead, SubscriptionCreate, SuccessResponse
from bazaar_api.app.services.notification_service import NotificationService


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/subscribe", response_model=SuccessResponse, summary="Subscribe to a place")
async def subscribe(
    data: SubscriptionCreate,
    current_user: dict = Depends(get_current_user),
) -> SuccessResponse:
    try:
        await NotificationService.subscribe(current_user["id"], data.place_id)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Subscribe of user %s to %r failed", current_user["id"], data.place_id)
    return SuccessResponse()


@router.get("/notifications", response_model=List[NotificationRead], summary="List notifications")
async def list_notifications(current_user: dict = Depends(get_current_user)) -> List[NotificationRead]:
    return await NotificationService.list_notifications(current_user["id"])


@router.post("/notifications/read", response_model=SuccessResponse, summary="Mark all notifications read")
async def mark_all_read(current_user: dict = Depends(get_current_user)) -> SuccessResponse:
    await NotificationService.mark_all_read(current_user["id"])
    return SuccessResponse()
