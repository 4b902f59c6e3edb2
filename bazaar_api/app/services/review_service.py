"""
Business logic for place reviews.

Reviews are stored in the ``reviews`` table keyed by the place's
display name.  Creating a review also notifies every subscriber of the
place except the author.  The notification fan-out runs after the
review has been committed and is best-effort: a failure there is logged
and the review still counts as created.
"""

import logging
from typing import List, Optional

from bazaar_api.app.core.db import get_connection
from bazaar_api.app.core.errors import ValidationError
from bazaar_api.app.schemas.review import ReviewCreated, ReviewRead


logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 50


def review_excerpt(comment: Optional[str], limit: int = EXCERPT_LENGTH) -> str:
    """Shorten a comment for notification text, marking truncation with ``...``."""
    comment = comment or ""
    if len(comment) > limit:
        return comment[:limit] + "..."
    return comment


class ReviewService:
    """Service for listing and creating reviews."""

    @classmethod
    async def list_reviews(cls, place_id: str) -> List[ReviewRead]:
        """Return all reviews for a place, newest first.

        The reviewer's current username is preferred over the name stored
        with the review; the stored name is used when the account no
        longer exists.  Comments are returned exactly as stored.
        """
        conn = get_connection()
        try:
            rows = conn.execute(
                """
                SELECT r.id, r.place_id, r.user_id, r.rating, r.comment, r.created_at,
                       COALESCE(u.username, r.user_name) AS user_name
                FROM reviews r
                LEFT JOIN users u ON r.user_id = u.id
                WHERE r.place_id = ?
                ORDER BY r.created_at DESC, r.id DESC
                """,
                (place_id,),
            ).fetchall()
        finally:
            conn.close()
        return [
            ReviewRead(
                id=row["id"],
                place_id=row["place_id"],
                user_id=row["user_id"],
                user_name=row["user_name"],
                rating=row["rating"],
                comment=row["comment"],
                created_at=row["created_at"],
            )
            for row in rows
        ]

    @classmethod
    async def create_review(
        cls,
        user_id: int,
        user_name: str,
        place_id: Optional[str],
        rating: Optional[int],
        comment: Optional[str],
    ) -> ReviewCreated:
        """Persist a review and notify the place's other subscribers.

        Raises ``ValidationError`` when ``place_id`` or ``rating`` is
        missing.  A rating of ``0`` is treated as missing.
        """
        if not place_id or not rating:
            raise ValidationError("Missing required fields")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO reviews (place_id, user_id, user_name, rating, comment) VALUES (?, ?, ?, ?, ?)",
                (place_id, user_id, user_name, rating, comment),
            )
            review_id = cursor.lastrowid
            conn.commit()
            logger.info("User %s reviewed %r (review %s)", user_id, place_id, review_id)

            try:
                notified = cls._notify_subscribers(conn, user_id, place_id, comment)
            except Exception:
                conn.rollback()
                logger.warning("Could not notify subscribers of %r", place_id, exc_info=True)
            else:
                if notified:
                    logger.info("Notified %s subscriber(s) of %r", notified, place_id)
        finally:
            conn.close()
        return ReviewCreated(id=review_id, user_name=user_name)

    @staticmethod
    def _notify_subscribers(conn, author_id: int, place_id: str, comment: Optional[str]) -> int:
        cursor = conn.cursor()
        subscribers = cursor.execute(
            "SELECT user_id FROM subscriptions WHERE place_id = ? AND user_id != ?",
            (place_id, author_id),
        ).fetchall()
        message = f'New review for {place_id}: "{review_excerpt(comment)}"'
        for sub in subscribers:
            cursor.execute(
                "INSERT INTO notifications (user_id, message) VALUES (?, ?)",
                (sub["user_id"], message),
            )
        conn.commit()
        return len(subscribers)
