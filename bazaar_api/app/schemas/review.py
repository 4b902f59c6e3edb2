"""
Pydantic schemas for place reviews.

A review is keyed by the place's display name (``place_id``), which is
an opaque string shared with votes and subscriptions.  The rating is
expected to be 1-5 but only its presence is enforced.
"""

from pydantic import BaseModel, Field
from typing import Optional


class ReviewCreate(BaseModel):
    """Schema for creating a new review."""

    place_id: Optional[str] = Field(None, description="Display name of the place being reviewed")
    rating: Optional[int] = Field(None, description="Rating, expected 1 to 5")
    comment: Optional[str] = Field(None, description="Optional textual comment")


class ReviewCreated(BaseModel):
    """Response for a newly created review."""

    id: int
    user_name: str


class ReviewRead(BaseModel):
    """Schema for reading a review from the API.

    ``user_name`` is the reviewer's current username when the account
    still exists, otherwise the name stored with the review.
    """

    id: int
    place_id: str
    user_id: Optional[int]
    user_name: str
    rating: int
    comment: Optional[str]
    created_at: str

    model_config = {
        "from_attributes": True,
    }
