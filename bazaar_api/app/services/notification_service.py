"""
Business logic for place subscriptions and the notification inbox.

A user holds at most one subscription per place (``UNIQUE(user_id,
place_id)``).  Subscribing twice is not an error: the duplicate insert
is ignored and no second welcome notification is written, because the
welcome message is only inserted after the subscription row itself was
created.  The two inserts are committed separately; a failure between
them leaves a subscription without its welcome message.
"""

import logging
import sqlite3
from typing import List, Optional

from bazaar_api.app.core.db import get_connection
from bazaar_api.app.core.errors import ValidationError
from bazaar_api.app.schemas.notification import NotificationRead


logger = logging.getLogger(__name__)


class NotificationService:
    """Service for subscriptions and per-user notifications."""

    @classmethod
    async def subscribe(cls, user_id: int, place_id: Optional[str]) -> bool:
        """Subscribe a user to a place.

        Returns ``True`` when a new subscription was created and
        ``False`` when the user was already subscribed.
        """
        if not place_id:
            raise ValidationError("Missing required fields")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    "INSERT INTO subscriptions (user_id, place_id) VALUES (?, ?)",
                    (user_id, place_id),
                )
                conn.commit()
            except sqlite3.IntegrityError as e:
                conn.rollback()
                if "UNIQUE" not in str(e):
                    raise
                logger.debug("User %s already subscribed to %r", user_id, place_id)
                return False
            cursor.execute(
                "INSERT INTO notifications (user_id, message) VALUES (?, ?)",
                (user_id, f"You are now subscribed to updates for {place_id}"),
            )
            conn.commit()
        finally:
            conn.close()
        logger.info("User %s subscribed to %r", user_id, place_id)
        return True

    @classmethod
    async def list_notifications(cls, user_id: int) -> List[NotificationRead]:
        """Return the user's notifications, newest first."""
        conn = get_connection()
        try:
            rows = conn.execute(
                "SELECT id, user_id, message, is_read, created_at FROM notifications "
                "WHERE user_id = ? ORDER BY created_at DESC, id DESC",
                (user_id,),
            ).fetchall()
        finally:
            conn.close()
        return [
            NotificationRead(
                id=row["id"],
                user_id=row["user_id"],
                message=row["message"],
                is_read=row["is_read"],
                created_at=row["created_at"],
            )
            for row in rows
        ]

    @classmethod
    async def mark_all_read(cls, user_id: int) -> int:
        """Mark every notification of the user as read; returns the row count."""
        conn = get_connection()
        try:
            cursor = conn.execute(
                "UPDATE notifications SET is_read = 1 WHERE user_id = ?",
                (user_id,),
            )
            conn.commit()
            return cursor.rowcount
        finally:
            conn.close()
