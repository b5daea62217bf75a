"""Derived views over a snapshot of issues: filtering and statistics

Everything here is a pure function of its inputs. Callers pass the store's
`list_issues()` output (newest first) and get new sequences back; nothing is
cached between calls.
"""

from dataclasses import dataclass, asdict
from typing import Iterable, List, Optional, Sequence, Union

from ..models import Issue, IssueCategory, IssuePriority, IssueStatus

ALL = "all"


@dataclass(frozen=True)
class IssueFilter:
    """Filter criteria; None, "" or "all" leaves a dimension unfiltered"""
    search_term: Optional[str] = None
    category: Union[str, IssueCategory, None] = None
    status: Union[str, IssueStatus, None] = None
    priority: Union[str, IssuePriority, None] = None


@dataclass(frozen=True)
class IssueStats:
    """Dashboard counts; status and priority counts are independent"""
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    resolved: int = 0
    critical: int = 0

    def to_dict(self):
        return asdict(self)


def _is_active(value) -> bool:
    return value is not None and value != "" and value != ALL


def _literal(value) -> str:
    """Wire literal of an enum member or plain string"""
    return value.value if hasattr(value, "value") else str(value)


def matches_search(issue: Issue, term: str) -> bool:
    """Case-insensitive substring match on title, description or tracking id"""
    needle = term.lower()
    return any(
        needle in (text or "").lower()
        for text in (issue.title, issue.description, issue.tracking_id)
    )


def matches(issue: Issue, criteria: IssueFilter) -> bool:
    if _is_active(criteria.search_term) and not matches_search(issue, criteria.search_term):
        return False
    if _is_active(criteria.category) and issue.category.value != _literal(criteria.category):
        return False
    if _is_active(criteria.status) and issue.status.value != _literal(criteria.status):
        return False
    if _is_active(criteria.priority) and issue.priority.value != _literal(criteria.priority):
        return False
    return True


def filter_issues(issues: Iterable[Issue], criteria: Optional[IssueFilter] = None) -> List[Issue]:
    """Issues matching every active criterion, in input order"""
    if criteria is None:
        return list(issues)
    return [issue for issue in issues if matches(issue, criteria)]


def aggregate_issues(issues: Sequence[Issue]) -> IssueStats:
    """Exact counts by status and priority"""
    pending = in_progress = resolved = critical = 0
    total = 0
    for issue in issues:
        total += 1
        if issue.status == IssueStatus.PENDING:
            pending += 1
        elif issue.status == IssueStatus.IN_PROGRESS:
            in_progress += 1
        elif issue.status == IssueStatus.RESOLVED:
            resolved += 1
        if issue.priority == IssuePriority.CRITICAL:
            critical += 1

    return IssueStats(
        total=total,
        pending=pending,
        in_progress=in_progress,
        resolved=resolved,
        critical=critical,
    )


def mappable_issues(issues: Iterable[Issue]) -> List[Issue]:
    """Issues carrying both coordinates, for the map view"""
    return [issue for issue in issues if issue.has_coordinates]
