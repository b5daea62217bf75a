"""Ledger of every tracking ID ever handed out"""

from sqlalchemy import Column, String, DateTime

from .base import Base, utcnow


class IssuedTrackingId(Base):
    """A tracking ID that has been assigned to an issue.

    Rows outlive the issue they were issued for, so a deleted issue's
    tracking ID is never assigned again.
    """

    __tablename__ = "issued_tracking_ids"

    tracking_id = Column(String(32), primary_key=True)
    issued_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<IssuedTrackingId('{self.tracking_id}')>"
