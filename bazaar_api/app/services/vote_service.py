"""
Business logic for anonymous votes.

Votes are deduplicated per (place, fingerprint) by looking up an
existing row and overwriting its ``vote_type``; otherwise a new row is
inserted.  A vote without a fingerprint never matches an existing row
and is always inserted.

The lookup and the write are separate statements without a surrounding
transaction, so two concurrent first votes from the same fingerprint can
both insert.  That race is accepted behaviour.
"""

import logging
from typing import Optional

from bazaar_api.app.core.db import get_connection
from bazaar_api.app.core.errors import ValidationError
from bazaar_api.app.schemas.vote import VoteTally


logger = logging.getLogger(__name__)

VOTE_TYPES = (1, -1)


class VoteService:
    """Service for vote tallies and submissions."""

    @classmethod
    async def get_votes(cls, place_id: str) -> VoteTally:
        """Return up and down counts for a place."""
        conn = get_connection()
        try:
            row = conn.execute(
                """
                SELECT
                    COALESCE(SUM(CASE WHEN vote_type = 1 THEN 1 ELSE 0 END), 0) AS up,
                    COALESCE(SUM(CASE WHEN vote_type = -1 THEN 1 ELSE 0 END), 0) AS down
                FROM votes
                WHERE place_id = ?
                """,
                (place_id,),
            ).fetchone()
        finally:
            conn.close()
        return VoteTally(up=row["up"], down=row["down"])

    @classmethod
    async def submit_vote(
        cls,
        place_id: Optional[str],
        vote_type: Optional[int],
        fingerprint: Optional[str],
    ) -> None:
        """Record or overwrite a vote.

        Raises ``ValidationError`` when ``place_id`` or ``vote_type`` is
        missing, or ``vote_type`` is neither ``1`` nor ``-1``.
        """
        if not place_id or not vote_type:
            raise ValidationError("Missing required fields")
        if vote_type not in VOTE_TYPES:
            raise ValidationError("vote_type must be 1 or -1")
        conn = get_connection()
        try:
            cursor = conn.cursor()
            existing = cursor.execute(
                "SELECT id FROM votes WHERE place_id = ? AND user_fingerprint = ?",
                (place_id, fingerprint),
            ).fetchone()
            if existing:
                cursor.execute(
                    "UPDATE votes SET vote_type = ? WHERE id = ?",
                    (vote_type, existing["id"]),
                )
            else:
                cursor.execute(
                    "INSERT INTO votes (place_id, vote_type, user_fingerprint) VALUES (?, ?, ?)",
                    (place_id, vote_type, fingerprint),
                )
            conn.commit()
        finally:
            conn.close()
        logger.debug("Vote %s on %r from %s", vote_type, place_id, fingerprint)
