"""Tests for admin-only lifecycle transitions"""

import itertools
import time

import pytest

from civictrack.core.security import RequestContext
from civictrack.errors import AuthorizationError, IssueNotFoundError, ValidationError
from civictrack.models import EventType, IssueStatus
from civictrack.storage.issue_service import issue_service
from civictrack.storage.lifecycle_service import lifecycle_service, parse_status
from civictrack.storage.role_service import role_service


@pytest.fixture
def issue(temp_db, make_record):
    return issue_service.create_issue(make_record())


def test_admin_transition(issue, admin_context):
    time.sleep(0.01)
    updated = lifecycle_service.transition(issue.id, "In Progress", admin_context)

    assert updated.status == IssueStatus.IN_PROGRESS
    assert updated.updated_at > issue.updated_at
    assert updated.created_at == issue.created_at


def test_transition_accepts_enum(issue, admin_context):
    updated = lifecycle_service.transition(issue.id, IssueStatus.REJECTED, admin_context)
    assert updated.status == IssueStatus.REJECTED


@pytest.mark.parametrize(
    "source,target",
    list(itertools.product(list(IssueStatus), list(IssueStatus))),
)
def test_every_edge_allowed(issue, admin_context, source, target):
    lifecycle_service.transition(issue.id, source, admin_context)
    updated = lifecycle_service.transition(issue.id, target, admin_context)
    assert updated.status == target


def test_noop_transition_refreshes_updated_at(issue, admin_context):
    time.sleep(0.01)
    updated = lifecycle_service.transition(issue.id, "Pending", admin_context)

    assert updated.status == IssueStatus.PENDING
    assert updated.updated_at > issue.updated_at


def test_resolved_can_be_reopened(issue, admin_context):
    lifecycle_service.transition(issue.id, "Resolved", admin_context)
    reopened = lifecycle_service.transition(issue.id, "Pending", admin_context)
    assert reopened.status == IssueStatus.PENDING


def test_non_admin_transition_rejected(issue, resident_context):
    with pytest.raises(AuthorizationError):
        lifecycle_service.transition(issue.id, "Resolved", resident_context)

    unchanged = issue_service.get_issue(issue.id)
    assert unchanged.status == IssueStatus.PENDING
    assert unchanged.updated_at == issue.updated_at


def test_anonymous_transition_rejected(issue):
    with pytest.raises(AuthorizationError):
        lifecycle_service.transition(issue.id, "Resolved", RequestContext.anonymous())


def test_revoked_admin_rejected(issue, admin_context):
    role_service.revoke_role(admin_context.identity_id)

    with pytest.raises(AuthorizationError):
        lifecycle_service.transition(issue.id, "Resolved", admin_context)


def test_invalid_target_status(issue, admin_context):
    with pytest.raises(ValidationError, match="Invalid status"):
        lifecycle_service.transition(issue.id, "Closed", admin_context)


def test_non_admin_invalid_status_rejected_as_unauthorized(issue, resident_context):
    with pytest.raises(AuthorizationError):
        lifecycle_service.transition(issue.id, "Closed", resident_context)


def test_transition_missing_issue(admin_context):
    with pytest.raises(IssueNotFoundError):
        lifecycle_service.transition(99999, "Resolved", admin_context)


def test_transition_logged_with_actor(issue, admin_context):
    lifecycle_service.transition(issue.id, "Resolved", admin_context)

    event = issue_service.get_issue_events(issue.id)[0]
    assert event.event_type == EventType.STATUS_CHANGED
    assert event.actor == admin_context.identity_id
    assert event.new_value == "Resolved"


def test_admin_delete(issue, admin_context):
    lifecycle_service.delete(issue.id, admin_context)

    assert issue_service.get_issue(issue.id) is None


def test_delete_twice_yields_not_found(issue, admin_context):
    lifecycle_service.delete(issue.id, admin_context)

    with pytest.raises(IssueNotFoundError):
        lifecycle_service.delete(issue.id, admin_context)


def test_delete_nonexistent(admin_context):
    with pytest.raises(IssueNotFoundError):
        lifecycle_service.delete(424242, admin_context)


def test_non_admin_delete_rejected(issue, resident_context):
    with pytest.raises(AuthorizationError):
        lifecycle_service.delete(issue.id, resident_context)

    assert issue_service.get_issue(issue.id) is not None


def test_parse_status_literals():
    assert parse_status("In Progress") == IssueStatus.IN_PROGRESS
    with pytest.raises(ValidationError):
        parse_status("in_progress")
