"""Submission validation for new issue reports"""

import posixpath
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union
from urllib.parse import urlparse

from ..core.logging import get_logger
from ..errors import ValidationError
from ..models import IssueCategory, IssuePriority, IssueStatus

logger = get_logger(__name__)

MAX_MEDIA_ITEMS = 5
MAX_MEDIA_BYTES = 10 * 1024 * 1024  # 10 MB per item

IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "webp"})
VIDEO_EXTENSIONS = frozenset({"mp4", "webm", "ogg", "mov"})


@dataclass
class MediaFile:
    """A media attachment not yet handed to the blob store"""
    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class IssueSubmission:
    """Candidate issue payload as supplied by a resident"""
    title: str
    description: str
    category: Union[str, IssueCategory, None]
    priority: Union[str, IssuePriority, None] = None
    location: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    user_id: Optional[str] = None


@dataclass
class NewIssue:
    """Normalized record ready to be admitted to the issue store"""
    title: str
    description: str
    category: IssueCategory
    priority: IssuePriority = IssuePriority.MEDIUM
    status: IssueStatus = IssueStatus.PENDING
    upvotes: int = 0
    location: str = ""
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    image_urls: List[str] = field(default_factory=list)
    video_urls: List[str] = field(default_factory=list)
    user_id: Optional[str] = None
    # References whose extension is neither image nor video; kept out of both lists
    dropped_media: List[str] = field(default_factory=list)

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


def file_extension(name: str) -> str:
    """Lower-cased extension of a file name or URL, without the dot"""
    path = urlparse(name).path if "://" in name else name
    _, ext = posixpath.splitext(path)
    return ext[1:].lower()


def media_kind(name: str, content_type: Optional[str] = None) -> Optional[str]:
    """Classify media as "image" or "video"; None when neither"""
    if content_type:
        major = content_type.split("/", 1)[0].strip().lower()
        if major in ("image", "video"):
            return major

    ext = file_extension(name)
    if ext in IMAGE_EXTENSIONS:
        return "image"
    if ext in VIDEO_EXTENSIONS:
        return "video"
    return None


def validate_media_files(files: Sequence[MediaFile]) -> None:
    """Check attachment limits before anything is uploaded"""
    if len(files) > MAX_MEDIA_ITEMS:
        raise ValidationError(
            f"At most {MAX_MEDIA_ITEMS} media files are allowed, got {len(files)}"
        )

    for media in files:
        if media.size > MAX_MEDIA_BYTES:
            raise ValidationError(
                f"File '{media.filename}' is {media.size} bytes; the limit is {MAX_MEDIA_BYTES} bytes"
            )
        if media_kind(media.filename, media.content_type) is None:
            raise ValidationError(
                f"File '{media.filename}' is neither an image nor a video"
            )


def partition_media(urls: Sequence[str]):
    """Split media references into (image_urls, video_urls, dropped) by extension"""
    image_urls, video_urls, dropped = [], [], []
    for url in urls:
        ext = file_extension(url)
        if ext in IMAGE_EXTENSIONS:
            image_urls.append(url)
        elif ext in VIDEO_EXTENSIONS:
            video_urls.append(url)
        else:
            dropped.append(url)
    return image_urls, video_urls, dropped


def _parse_enum(enum_cls, value, field_name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {field_name}: {value!r}. Expected one of: {allowed}")


def _validate_coordinates(latitude, longitude) -> None:
    if (latitude is None) != (longitude is None):
        raise ValidationError("latitude and longitude must be supplied together")
    if latitude is None:
        return
    if not -90.0 <= latitude <= 90.0:
        raise ValidationError(f"latitude out of range: {latitude}")
    if not -180.0 <= longitude <= 180.0:
        raise ValidationError(f"longitude out of range: {longitude}")


def validate_submission(
    submission: IssueSubmission,
    media_urls: Sequence[str] = (),
) -> NewIssue:
    """Validate a submission and return the normalized record.

    `media_urls` are the references returned by the blob store for the
    submission's attachments. References with an unrecognized extension are
    dropped from both media lists and reported in `NewIssue.dropped_media`.
    """
    title = (submission.title or "").strip()
    description = (submission.description or "").strip()
    if not title:
        raise ValidationError("title is required")
    if not description:
        raise ValidationError("description is required")

    if submission.category in (None, ""):
        raise ValidationError("category is required")
    category = _parse_enum(IssueCategory, submission.category, "category")

    if submission.priority in (None, ""):
        priority = IssuePriority.MEDIUM
    else:
        priority = _parse_enum(IssuePriority, submission.priority, "priority")

    _validate_coordinates(submission.latitude, submission.longitude)
    location = (submission.location or "").strip()
    if submission.latitude is None and not location:
        raise ValidationError("location is required when no coordinates are given")

    if len(media_urls) > MAX_MEDIA_ITEMS:
        raise ValidationError(
            f"At most {MAX_MEDIA_ITEMS} media references are allowed, got {len(media_urls)}"
        )

    image_urls, video_urls, dropped = partition_media(media_urls)
    for url in dropped:
        logger.warning(f"[SUBMISSION] Dropping media reference with unrecognized type: {url}")

    return NewIssue(
        title=title,
        description=description,
        category=category,
        priority=priority,
        location=location,
        address=submission.address or None,
        latitude=submission.latitude,
        longitude=submission.longitude,
        image_urls=image_urls,
        video_urls=video_urls,
        user_id=submission.user_id,
        dropped_media=dropped,
    )
