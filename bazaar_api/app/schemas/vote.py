"""Pydantic schemas for anonymous place votes."""

from typing import Optional

from pydantic import BaseModel, Field


class VoteCreate(BaseModel):
    """Schema for submitting a vote."""

    place_id: Optional[str] = Field(None, description="Display name of the place")
    vote_type: Optional[int] = Field(None, description="1 for an upvote, -1 for a downvote")
    user_fingerprint: Optional[str] = Field(None, description="Client-generated anonymous identifier")


class VoteTally(BaseModel):
    """Up and down vote counts for a place."""

    up: int = 0
    down: int = 0
