"""Issue store: identity, persistence and audit trail for issues"""

from typing import List, Optional, Dict, Any
from sqlalchemy.orm import Session
from sqlalchemy import desc

from ..core.logging import get_logger
from ..errors import ValidationError
from ..models import Issue, Event, EventType, IssueStatus, utcnow
from .database import get_db_session
from .id_generator import generate_tracking_id
from .submission_validator import NewIssue

logger = get_logger(__name__)

# Fields a patch may touch; id, tracking_id, upvotes and created_at are never patched
MUTABLE_FIELDS = frozenset({
    "title",
    "description",
    "category",
    "priority",
    "status",
    "location",
    "address",
    "latitude",
    "longitude",
    "image_urls",
    "video_urls",
})


class IssueService:
    """Service class for issue storage operations"""

    def create_issue(self, record: NewIssue, actor: str = "system") -> Issue:
        """Admit a validated record, assigning id and tracking id"""

        with get_db_session() as session:
            tracking_id = generate_tracking_id(session)
            now = utcnow()

            issue = Issue(
                tracking_id=tracking_id,
                title=record.title,
                description=record.description,
                category=record.category,
                priority=record.priority,
                status=IssueStatus.PENDING,
                location=record.location,
                address=record.address,
                latitude=record.latitude,
                longitude=record.longitude,
                image_urls=list(record.image_urls),
                video_urls=list(record.video_urls),
                upvotes=0,
                user_id=record.user_id,
                created_at=now,
                updated_at=now,
            )

            session.add(issue)
            session.flush()  # Get the issue ID

            self._log_event(
                session=session,
                issue_id=issue.id,
                event_type=EventType.CREATED,
                actor=actor,
                new_value=issue.tracking_id,
            )

            session.commit()
            session.refresh(issue)
            # Make issue accessible outside session
            session.expunge(issue)

        logger.info(f"[CREATE_ISSUE] Created issue {issue.id} ({issue.tracking_id})")
        return issue

    def get_issue(self, issue_id: int) -> Optional[Issue]:
        """Get issue by ID"""
        with get_db_session() as session:
            issue = session.query(Issue).filter(Issue.id == issue_id).first()
            if issue:
                session.expunge(issue)
            return issue

    def get_issue_by_tracking_id(self, tracking_id: str) -> Optional[Issue]:
        """Get issue by its public tracking ID (case-insensitive)"""
        with get_db_session() as session:
            issue = (
                session.query(Issue)
                .filter(Issue.tracking_id == tracking_id.strip().upper())
                .first()
            )
            if issue:
                session.expunge(issue)
            return issue

    def list_issues(self) -> List[Issue]:
        """All issues, newest first"""

        with get_db_session() as session:
            issues = (
                session.query(Issue)
                .order_by(desc(Issue.created_at), desc(Issue.id))
                .all()
            )

            # Expunge issues to make them accessible outside session
            for issue in issues:
                session.expunge(issue)

            return issues

    def update_issue(
        self,
        issue_id: int,
        updates: Dict[str, Any],
        actor: str = "system"
    ) -> Optional[Issue]:
        """Apply a patch and refresh updated_at.

        Only the lifecycle engine patches `status`; a status change is
        recorded in the audit trail.
        """
        illegal = set(updates) - MUTABLE_FIELDS
        if illegal:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(illegal))}")

        with get_db_session() as session:
            issue = session.query(Issue).filter(Issue.id == issue_id).first()
            if not issue:
                return None

            old_status = issue.status

            for field, value in updates.items():
                setattr(issue, field, value)

            # Refreshed even when nothing changed
            issue.updated_at = max(utcnow(), issue.created_at)

            session.flush()

            if "status" in updates:
                self._log_event(
                    session=session,
                    issue_id=issue.id,
                    event_type=EventType.STATUS_CHANGED,
                    actor=actor,
                    old_value=old_status.value,
                    new_value=issue.status.value,
                )

            session.commit()
            session.refresh(issue)
            # Make issue accessible outside session
            session.expunge(issue)
            return issue

    def get_issue_events(self, issue_id: int, limit: int = 50) -> List[Event]:
        """Get events for an issue, newest first"""

        with get_db_session() as session:
            events = (
                session.query(Event)
                .filter(Event.issue_id == issue_id)
                .order_by(desc(Event.created_at), desc(Event.id))
                .limit(limit)
                .all()
            )

            # Make events accessible outside session
            for event in events:
                session.expunge(event)

            return events

    def _log_event(
        self,
        session: Session,
        issue_id: int,
        event_type: EventType,
        actor: str,
        old_value: Optional[str] = None,
        new_value: Optional[str] = None,
    ):
        """Log an event (internal method)"""

        event = Event(
            issue_id=issue_id,
            event_type=event_type,
            actor=actor,
            old_value=old_value,
            new_value=new_value,
        )
        session.add(event)

    def delete_issue(self, issue_id: int) -> bool:
        """Delete an issue permanently

        Returns True if deleted, False if the issue was not found. The issue's
        events go with it; nothing is kept behind.
        """

        with get_db_session() as session:
            issue = session.query(Issue).filter(Issue.id == issue_id).first()
            if not issue:
                return False

            events_deleted = (
                session.query(Event)
                .filter(Event.issue_id == issue_id)
                .delete(synchronize_session=False)
            )
            logger.info(f"[DELETE_ISSUE] Deleting {events_deleted} events for issue {issue_id}")

            session.delete(issue)
            session.commit()

        logger.info(f"[DELETE_ISSUE] Deleted issue {issue_id}")
        return True


# Global service instance
issue_service = IssueService()
