"""Error taxonomy shared by the service layer and the API"""


class CivicTrackError(Exception):
    """Base class for all service errors"""


class ValidationError(CivicTrackError):
    """Submission fields missing/malformed or attachment limits exceeded"""


class AuthorizationError(CivicTrackError):
    """Actor lacks the role required for the operation"""


class IssueNotFoundError(CivicTrackError):
    """Operation referenced an issue that does not exist"""

    def __init__(self, issue_id):
        self.issue_id = issue_id
        super().__init__(f"Issue {issue_id} not found")


class UploadError(CivicTrackError):
    """External blob store rejected or failed an upload"""


class StoreError(CivicTrackError):
    """Persistence failure, including an exhausted tracking-id retry limit"""
