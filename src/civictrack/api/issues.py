"""Issues API endpoints"""

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from starlette.concurrency import run_in_threadpool
from typing import List, Optional

from ..core.security import RequestContext, get_request_context
from ..errors import IssueNotFoundError
from ..models import IssueCategory, IssuePriority, IssueStatus
from ..storage.issue_service import issue_service
from ..storage.lifecycle_service import lifecycle_service
from ..storage.query_engine import (
    ALL,
    IssueFilter,
    aggregate_issues,
    filter_issues,
    mappable_issues,
)
from ..storage.submission_service import submission_service
from ..storage.submission_validator import (
    MAX_MEDIA_BYTES,
    IssueSubmission,
    MediaFile,
    validate_media_files,
)
from ..storage.upvote_service import upvote_service
from .schemas import (
    EventResponse,
    IssueListResponse,
    IssueResponse,
    StatsResponse,
    StatusTransition,
    SuccessResponse,
    UpvoteResponse,
)

router = APIRouter()


def _check_choice(enum_cls, value: Optional[str], name: str) -> Optional[str]:
    """Reject filter values outside the enumerated set; "all" passes through"""
    if value is None or value == "" or value == ALL:
        return value
    try:
        enum_cls(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {name}: {value}")
    return value


def issue_filter(
    search: Optional[str] = Query(None, description="Search in title, description or tracking ID"),
    category: Optional[str] = Query(None, description="Filter by category, or 'all'"),
    status: Optional[str] = Query(None, description="Filter by status, or 'all'"),
    priority: Optional[str] = Query(None, description="Filter by priority, or 'all'"),
) -> IssueFilter:
    return IssueFilter(
        search_term=search,
        category=_check_choice(IssueCategory, category, "category"),
        status=_check_choice(IssueStatus, status, "status"),
        priority=_check_choice(IssuePriority, priority, "priority"),
    )


@router.get("/", response_model=IssueListResponse)
def list_issues(
    criteria: IssueFilter = Depends(issue_filter),
    offset: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(100, ge=1, le=500, description="Pagination limit"),
):
    """List issues, newest first, with filtering and pagination"""

    issues = filter_issues(issue_service.list_issues(), criteria)

    return IssueListResponse(
        issues=[IssueResponse.model_validate(issue) for issue in issues[offset:offset + limit]],
        total=len(issues),
        offset=offset,
        limit=limit,
    )


@router.post("/", response_model=IssueResponse, status_code=201)
async def create_issue(
    title: str = Form(""),
    description: str = Form(""),
    category: str = Form(""),
    priority: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    latitude: Optional[float] = Form(None),
    longitude: Optional[float] = Form(None),
    files: List[UploadFile] = File(default=[]),
    context: RequestContext = Depends(get_request_context),
):
    """Submit a new issue report with optional photo/video attachments"""

    submission = IssueSubmission(
        title=title,
        description=description,
        category=category,
        priority=priority,
        location=location,
        address=address,
        latitude=latitude,
        longitude=longitude,
    )

    # Count limit before reading anything; one byte past the size limit is enough to reject
    validate_media_files([MediaFile(upload.filename or "", b"", upload.content_type) for upload in files])
    media = [
        MediaFile(
            filename=upload.filename or "",
            content=await upload.read(MAX_MEDIA_BYTES + 1),
            content_type=upload.content_type,
        )
        for upload in files
    ]

    issue = await run_in_threadpool(submission_service.submit, submission, media, context)
    return IssueResponse.model_validate(issue)


@router.get("/stats", response_model=StatsResponse)
def get_stats(criteria: IssueFilter = Depends(issue_filter)):
    """Dashboard counts over all issues, or over the filtered subset"""

    stats = aggregate_issues(filter_issues(issue_service.list_issues(), criteria))
    return StatsResponse(**stats.to_dict())


@router.get("/map", response_model=List[IssueResponse])
def get_map_issues(criteria: IssueFilter = Depends(issue_filter)):
    """Issues with coordinates, for the map view"""

    issues = mappable_issues(filter_issues(issue_service.list_issues(), criteria))
    return [IssueResponse.model_validate(issue) for issue in issues]


@router.get("/track/{tracking_id}", response_model=IssueResponse)
def track_issue(tracking_id: str):
    """Look up an issue by its public tracking ID"""

    issue = issue_service.get_issue_by_tracking_id(tracking_id)
    if not issue:
        raise HTTPException(status_code=404, detail=f"No issue with tracking ID {tracking_id}")

    return IssueResponse.model_validate(issue)


@router.get("/{issue_id}", response_model=IssueResponse)
def get_issue(issue_id: int):
    """Get issue by ID"""

    issue = issue_service.get_issue(issue_id)
    if not issue:
        raise IssueNotFoundError(issue_id)

    return IssueResponse.model_validate(issue)


@router.patch("/{issue_id}/status", response_model=IssueResponse)
def transition_issue(
    issue_id: int,
    transition: StatusTransition,
    context: RequestContext = Depends(get_request_context),
):
    """Change an issue's status (admin only)"""

    issue = lifecycle_service.transition(issue_id, transition.status, context)
    return IssueResponse.model_validate(issue)


@router.post("/{issue_id}/upvote", response_model=UpvoteResponse)
def upvote_issue(issue_id: int, context: RequestContext = Depends(get_request_context)):
    """Add one upvote; open to anyone, repeat votes count"""

    count = upvote_service.increment(issue_id, actor=context.actor)
    return UpvoteResponse(id=issue_id, upvotes=count)


@router.delete("/{issue_id}", response_model=SuccessResponse)
def delete_issue(issue_id: int, context: RequestContext = Depends(get_request_context)):
    """Delete issue permanently (admin only)"""

    lifecycle_service.delete(issue_id, context)
    return SuccessResponse(message=f"Issue {issue_id} deleted", id=issue_id)


@router.get("/{issue_id}/events", response_model=List[EventResponse])
def get_issue_events(
    issue_id: int,
    limit: int = Query(50, ge=1, le=200, description="Maximum number of events to return"),
):
    """Get events/history for an issue"""

    if not issue_service.get_issue(issue_id):
        raise IssueNotFoundError(issue_id)

    events = issue_service.get_issue_events(issue_id, limit=limit)
    return [EventResponse.model_validate(event) for event in events]
