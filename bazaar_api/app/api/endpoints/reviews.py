"""
API endpoints for place reviews.

Anyone can read the reviews of a place; posting one requires a bearer
token.  The author's name is taken from the token, never from the body.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from bazaar_api.app.core.security import get_current_user
from bazaar_api.app.schemas.review import ReviewCreate, ReviewCreated, ReviewRead
from bazaar_api.app.services.review_service import ReviewService


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/reviews/{place_id:path}",
    response_model=List[ReviewRead],
    summary="List reviews for a place",
)
async def list_reviews(place_id: str) -> List[ReviewRead]:
    """Return the reviews of a place, newest first.  Unknown places yield ``[]``."""
    return await ReviewService.list_reviews(place_id)


@router.post(
    "/reviews",
    response_model=ReviewCreated,
    summary="Submit a review",
)
async def create_review(
    data: ReviewCreate,
    current_user: dict = Depends(get_current_user),
) -> ReviewCreated:
    """Create a review and notify the place's subscribers."""
    try:
        return await ReviewService.create_review(
            user_id=current_user["id"],
            user_name=current_user["username"],
            place_id=data.place_id,
            rating=data.rating,
            comment=data.comment,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Failed to create review")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")
