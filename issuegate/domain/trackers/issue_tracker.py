"""Abstract base class for issue trackers.

The gate only needs four operations from the collaboration platform: open an
issue, read its comments oldest-first, post a comment, and close it.
"""

from abc import ABC, abstractmethod

from issuegate.domain.models.comment import Comment
from issuegate.domain.models.gate_request import GateIssue, RepoCoordinates


class IssueTracker(ABC):
    """Abstract interface for the platform hosting gate issues.

    Implementations raise IssueTrackerError on transport or API failures.
    Retries, if any, are an implementation concern.
    """

    @abstractmethod
    def create_issue(
        self,
        repo: RepoCoordinates,
        *,
        title: str,
        body: str,
        assignees: list[str],
    ) -> GateIssue:
        """Create the tracking issue and return a reference to it."""
        ...

    @abstractmethod
    def list_comments(self, repo: RepoCoordinates, issue_number: int) -> list[Comment]:
        """Return the full comment history, oldest first.

        Each Comment's ``order`` is its zero-based position in the history.
        """
        ...

    @abstractmethod
    def add_comment(self, repo: RepoCoordinates, issue_number: int, body: str) -> None:
        """Post a comment on the issue."""
        ...

    @abstractmethod
    def close_issue(self, repo: RepoCoordinates, issue_number: int) -> None:
        """Close the issue."""
        ...
