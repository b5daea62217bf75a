"""Pydantic schemas for API requests and responses"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from ..models import IssueCategory, IssuePriority, IssueStatus, EventType


# Issue schemas
class IssueResponse(BaseModel):
    """Issue record as presented to clients; field names are the wire contract"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    tracking_id: str
    title: str
    description: str
    category: IssueCategory
    priority: IssuePriority
    status: IssueStatus
    location: str = ""
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    image_urls: List[str] = []
    video_urls: List[str] = []
    upvotes: int = 0
    user_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class IssueListResponse(BaseModel):
    """Schema for issue list responses"""
    issues: List[IssueResponse]
    total: int
    offset: int
    limit: int


class StatusTransition(BaseModel):
    """Schema for lifecycle transitions"""
    status: str = Field(..., description="Target status: Pending, In Progress, Resolved or Rejected")


class UpvoteResponse(BaseModel):
    id: int
    upvotes: int


class StatsResponse(BaseModel):
    """Dashboard statistics"""
    total: int
    pending: int
    in_progress: int
    resolved: int
    critical: int


# Event schemas
class EventResponse(BaseModel):
    """Schema for event responses"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    issue_id: int
    event_type: EventType
    actor: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    created_at: datetime


# Identity / geocoding
class IdentityResponse(BaseModel):
    identity_id: Optional[str] = None
    email: Optional[str] = None
    is_admin: bool = False


class AddressResponse(BaseModel):
    latitude: float
    longitude: float
    address: str


# Common response schemas
class SuccessResponse(BaseModel):
    """Schema for success responses"""
    message: str
    id: Optional[int] = None


class ErrorResponse(BaseModel):
    """Schema for error responses"""
    error: str
    detail: Optional[str] = None
