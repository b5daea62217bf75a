"""CivicTrack models package"""

from .base import (
    Base,
    IssueStatus,
    IssuePriority,
    IssueCategory,
    Role,
    EventType,
    utcnow,
)
from .issue import Issue
from .event import Event
from .role import UserRole
from .tracking_id import IssuedTrackingId

__all__ = [
    "Base",
    "IssueStatus",
    "IssuePriority",
    "IssueCategory",
    "Role",
    "EventType",
    "utcnow",
    "Issue",
    "Event",
    "UserRole",
    "IssuedTrackingId",
]
