"""Base SQLAlchemy models and configuration"""

from sqlalchemy import Enum
from sqlalchemy.orm import declarative_base
from datetime import datetime, timezone
import enum

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def literal_enum(enum_cls, name: str) -> Enum:
    """Column type storing enum values (the wire literals) rather than member names"""
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )


class IssueStatus(enum.Enum):
    """Issue lifecycle states"""
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    REJECTED = "Rejected"


class IssuePriority(enum.Enum):
    """Issue priority levels"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class IssueCategory(enum.Enum):
    """Fixed set of civic issue categories"""
    ROAD_TRANSPORTATION = "Road & Transportation"
    WATER_SANITATION = "Water & Sanitation"
    PUBLIC_SAFETY = "Public Safety"
    PARKS_RECREATION = "Parks & Recreation"
    UTILITIES = "Utilities"
    WASTE_MANAGEMENT = "Waste Management"
    STREET_LIGHTING = "Street Lighting"
    PUBLIC_BUILDINGS = "Public Buildings"
    OTHER = "Other"


class Role(enum.Enum):
    """Role bindings; absence of a binding means ordinary user"""
    ADMIN = "admin"


class EventType(enum.Enum):
    """Event type enumeration"""
    CREATED = "created"
    STATUS_CHANGED = "status_changed"
    UPVOTED = "upvoted"
