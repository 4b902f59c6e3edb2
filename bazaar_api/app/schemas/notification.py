"""
Pydantic schemas for subscriptions and the notification inbox.

``is_read`` is kept as the integer SQLite stores (0 or 1) so that the
JSON shape matches what clients already render.
"""

from typing import Optional

from pydantic import BaseModel, Field


class SubscriptionCreate(BaseModel):
    """Schema for subscribing to a place."""

    place_id: Optional[str] = Field(None, description="Display name of the place")


class NotificationRead(BaseModel):
    """Schema for reading a notification."""

    id: int
    user_id: int
    message: str
    is_read: int
    created_at: str

    model_config = {
        "from_attributes": True,
    }


class SuccessResponse(BaseModel):
    success: bool = True
