"""Reputation changes driven by content events.

There is no standalone API: posting and liking adjust scores as side effects.
Scores have no floor, so removals alone can push them negative.
"""

from __future__ import annotations

from sqlalchemy import update
from sqlalchemy.orm import Session

from threadline.models import ReactionType, User

POST_CREATED = 2
LIKE_RECEIVED = 1


class ReputationLedger:
    """Applies reputation deltas with atomic in-database arithmetic."""

    @staticmethod
    def adjust(db: Session, user_id: int, delta: int) -> None:
        """Add ``delta`` (possibly negative) to a user's reputation."""
        if delta == 0:
            return
        db.execute(
            update(User)
            .where(User.id == user_id)
            .values(reputation=User.reputation + delta)
            .execution_options(synchronize_session="fetch")
        )

    def reward_post(self, db: Session, author_id: int) -> None:
        """Credit a new post to its author, including replies in their own thread."""
        self.adjust(db, author_id, POST_CREATED)

    def like_added(
        self,
        db: Session,
        reaction_type: ReactionType,
        actor_id: int,
        author_id: int,
    ) -> bool:
        """Credit the author of liked content. Returns True if a change was made."""
        if reaction_type != ReactionType.LIKE or actor_id == author_id:
            return False
        self.adjust(db, author_id, LIKE_RECEIVED)
        return True

    def like_removed(
        self,
        db: Session,
        reaction_type: ReactionType,
        actor_id: int,
        author_id: int,
    ) -> bool:
        """Reverse ``like_added``. Returns True if a change was made."""
        if reaction_type != ReactionType.LIKE or actor_id == author_id:
            return False
        self.adjust(db, author_id, -LIKE_RECEIVED)
        return True


reputation_ledger = ReputationLedger()
