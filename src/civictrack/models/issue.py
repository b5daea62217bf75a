"""Issue model"""

from sqlalchemy import Column, Integer, String, DateTime, Text, Float, JSON, CheckConstraint

from .base import Base, IssueStatus, IssuePriority, IssueCategory, literal_enum, utcnow


class Issue(Base):
    """Civic issue report"""

    __tablename__ = "issues"
    __table_args__ = (
        CheckConstraint("upvotes >= 0", name="ck_issues_upvotes_non_negative"),
        CheckConstraint("created_at <= updated_at", name="ck_issues_updated_after_created"),
        # AUTOINCREMENT keeps ids of deleted issues from being reused
        {"sqlite_autoincrement": True},
    )

    # Identity
    id = Column(Integer, primary_key=True, autoincrement=True)
    tracking_id = Column(String(32), nullable=False, unique=True, index=True)  # e.g. "CIV-7KQ2XM"

    # Report content
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(literal_enum(IssueCategory, "issue_category"), nullable=False, index=True)
    priority = Column(
        literal_enum(IssuePriority, "issue_priority"),
        nullable=False,
        default=IssuePriority.MEDIUM,
    )
    status = Column(
        literal_enum(IssueStatus, "issue_status"),
        nullable=False,
        default=IssueStatus.PENDING,
        index=True,
    )

    # Location; coordinates are optional and independent of the text fields
    location = Column(Text, nullable=False, default="")
    address = Column(Text, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # Media references held by the external blob store
    image_urls = Column(JSON, nullable=False, default=list)
    video_urls = Column(JSON, nullable=False, default=list)

    upvotes = Column(Integer, nullable=False, default=0)
    user_id = Column(String(100), nullable=True)  # absent for anonymous reports

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<Issue(id={self.id}, tracking_id='{self.tracking_id}', status='{self.status.value}')>"

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def to_dict(self):
        """Convert to dictionary for JSON serialization"""
        return {
            "id": self.id,
            "tracking_id": self.tracking_id,
            "title": self.title,
            "description": self.description,
            "category": self.category.value,
            "priority": self.priority.value,
            "status": self.status.value,
            "location": self.location,
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "image_urls": list(self.image_urls or []),
            "video_urls": list(self.video_urls or []),
            "upvotes": self.upvotes,
            "user_id": self.user_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
