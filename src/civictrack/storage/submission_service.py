"""Submission flow: validate, upload media, geocode, then admit to the store"""

import dataclasses
from concurrent.futures import ThreadPoolExecutor, FIRST_EXCEPTION, wait
from typing import Callable, List, Optional, Sequence

from ..core.config import get_settings
from ..core.logging import get_logger
from ..core.security import RequestContext
from ..errors import UploadError
from ..models import Issue
from ..services.blob_store import BlobStore, get_blob_store
from ..services.geocoder import Geocoder, get_geocoder
from .issue_service import IssueService, issue_service
from .submission_validator import (
    IssueSubmission,
    MediaFile,
    validate_media_files,
    validate_submission,
)

logger = get_logger(__name__)


class SubmissionService:
    """Admits new issue reports.

    All checks that can fail without talking to the blob store run before
    the first upload. Uploads run concurrently, one task per file; if any of
    them fails the whole submission is aborted and no issue is created.
    """

    def __init__(
        self,
        issues: IssueService = issue_service,
        blob_store: Callable[[], BlobStore] = get_blob_store,
        geocoder: Callable[[], Geocoder] = get_geocoder,
        max_workers: Optional[int] = None,
    ):
        self.issues = issues
        self._blob_store = blob_store
        self._geocoder = geocoder
        self.max_workers = max_workers

    def submit(
        self,
        submission: IssueSubmission,
        files: Sequence[MediaFile],
        context: RequestContext,
    ) -> Issue:
        submission = dataclasses.replace(submission, user_id=context.identity_id)

        # Fail fast on the payload and attachment limits before any upload
        validate_media_files(files)
        validate_submission(submission)

        media_urls = self.upload_media(files)

        if submission.latitude is not None and not submission.address:
            address = self._geocoder().reverse_geocode(submission.latitude, submission.longitude)
            submission = dataclasses.replace(submission, address=address)

        record = validate_submission(submission, media_urls)
        return self.issues.create_issue(record, actor=context.actor)

    def upload_media(self, files: Sequence[MediaFile]) -> List[str]:
        """Upload every file; public URLs come back in input order"""
        if not files:
            return []

        store = self._blob_store()
        workers = self.max_workers or get_settings().upload_max_workers

        with ThreadPoolExecutor(max_workers=min(workers, len(files))) as pool:
            futures = [
                pool.submit(store.upload, media.content, media.filename, media.content_type)
                for media in files
            ]
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)

            for future in pending:
                future.cancel()

            for future in futures:
                if future in done and future.exception() is not None:
                    error = future.exception()
                    logger.error(f"[SUBMISSION] Aborting submission, media upload failed: {error}")
                    if isinstance(error, UploadError):
                        raise error
                    raise UploadError(f"Media upload failed: {error}") from error

            return [future.result() for future in futures]


# Global service instance
submission_service = SubmissionService()
