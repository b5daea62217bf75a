"""Upvote counter"""

from typing import Optional

from sqlalchemy import update

from ..core.security import ANONYMOUS_ACTOR
from ..errors import IssueNotFoundError
from ..models import Issue, Event, EventType
from .database import get_db_session


class UpvoteService:
    """Open, non-deduplicated popularity counter.

    Anyone may upvote any issue any number of times. Each call is one atomic
    `upvotes = upvotes + 1` in the database, so concurrent calls never
    overwrite each other.
    """

    def increment(self, issue_id: int, actor: Optional[str] = None) -> int:
        """Add one upvote and return the new count"""
        with get_db_session() as session:
            result = session.execute(
                update(Issue)
                .where(Issue.id == issue_id)
                .values(upvotes=Issue.upvotes + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise IssueNotFoundError(issue_id)

            # Same transaction: the row is still write-locked by our update
            count = session.query(Issue.upvotes).filter(Issue.id == issue_id).scalar()

            session.add(Event(
                issue_id=issue_id,
                event_type=EventType.UPVOTED,
                actor=actor or ANONYMOUS_ACTOR,
                new_value=str(count),
            ))

        return count


# Global service instance
upvote_service = UpvoteService()
