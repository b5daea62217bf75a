"""Event model for audit trail"""

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base, EventType, literal_enum, utcnow


class Event(Base):
    """Audit trail entry for an issue"""

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    issue_id = Column(Integer, ForeignKey("issues.id"), nullable=False, index=True)

    event_type = Column(literal_enum(EventType, "event_type"), nullable=False)
    actor = Column(String(100), nullable=False)  # identity id, or "anonymous"

    old_value = Column(Text, nullable=True)
    new_value = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)

    issue = relationship("Issue", backref="events")

    def __repr__(self):
        return f"<Event(id={self.id}, issue={self.issue_id}, type='{self.event_type.value}', actor='{self.actor}')>"

    def to_dict(self):
        """Convert to dictionary for JSON serialization"""
        return {
            "id": self.id,
            "issue_id": self.issue_id,
            "event_type": self.event_type.value,
            "actor": self.actor,
            "old_value": self.old_value,
            "new_value": self.new_value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
