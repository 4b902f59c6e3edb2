"""
Top-level API router.

Aggregates the domain routers; ``main.create_app`` mounts it under
``/api``.  Endpoint modules that declare full paths (``/reviews/...``,
``/votes/...``) are included without a prefix.
"""

from fastapi import APIRouter

from .endpoints import auth, notifications, reviews, votes


router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(reviews.router, tags=["reviews"])
router.include_router(votes.router, tags=["votes"])
router.include_router(notifications.router, tags=["notifications"])


@router.get("/health", tags=["health"])
async def health() -> dict:
    return {"status": "ok"}
