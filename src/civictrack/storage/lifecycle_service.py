"""Lifecycle engine: admin-only status transitions and deletion"""

from typing import Union

from ..core.logging import get_logger
from ..core.security import RequestContext
from ..errors import AuthorizationError, IssueNotFoundError, ValidationError
from ..models import Issue, IssueStatus
from .issue_service import IssueService, issue_service
from .role_service import RoleService, role_service

logger = get_logger(__name__)


def parse_status(value: Union[str, IssueStatus]) -> IssueStatus:
    if isinstance(value, IssueStatus):
        return value
    try:
        return IssueStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in IssueStatus)
        raise ValidationError(f"Invalid status: {value!r}. Expected one of: {allowed}")


class LifecycleService:
    """Validates and applies status transitions on behalf of an actor"""

    def __init__(self, issues: IssueService = issue_service, roles: RoleService = role_service):
        self.issues = issues
        self.roles = roles

    def _require_admin(self, context: RequestContext, operation: str):
        if context.is_anonymous or not self.roles.is_admin(context.identity_id):
            logger.warning(f"[LIFECYCLE] {context.actor} denied {operation}")
            raise AuthorizationError(f"Admin role required to {operation}")

    def transition(
        self,
        issue_id: int,
        target: Union[str, IssueStatus],
        context: RequestContext,
    ) -> Issue:
        """Move an issue to `target`; refreshes updated_at even when unchanged.

        Every status may move to every status, itself included, so only the
        actor's role and the target value are checked.
        """
        self._require_admin(context, f"change status of issue {issue_id}")
        target_status = parse_status(target)

        current = self.issues.get_issue(issue_id)
        if current is None:
            raise IssueNotFoundError(issue_id)

        issue = self.issues.update_issue(issue_id, {"status": target_status}, actor=context.actor)
        if issue is None:
            # Deleted between the read and the write
            raise IssueNotFoundError(issue_id)

        logger.info(
            f"[LIFECYCLE] Issue {issue_id} {current.status.value} -> {target_status.value} by {context.actor}"
        )
        return issue

    def delete(self, issue_id: int, context: RequestContext) -> None:
        """Permanently delete an issue"""
        self._require_admin(context, f"delete issue {issue_id}")

        if not self.issues.delete_issue(issue_id):
            raise IssueNotFoundError(issue_id)

        logger.info(f"[LIFECYCLE] Issue {issue_id} deleted by {context.actor}")


# Global service instance
lifecycle_service = LifecycleService()
