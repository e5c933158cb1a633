"""GateService - opens, checks and closes approval gates on an issue tracker.

Glue between the pure core (request builder, comment resolver) and the
IssueTracker collaborator. Emits gate events for each step.
"""

import logging
from dataclasses import dataclass

from issuegate.application.comment_resolver import resolve
from issuegate.application.gate_request_builder import build_gate_request
from issuegate.domain.constants import (
    APPROVED_CLOSING_COMMENT,
    DENIED_CLOSING_COMMENT,
    DENIED_CONTINUE_CLOSING_COMMENT,
)
from issuegate.domain.events.emitter import GateEventEmitter
from issuegate.domain.events.event_types import GateEventType
from issuegate.domain.models.approval_status import ApprovalStatus
from issuegate.domain.models.gate_config import GateConfig
from issuegate.domain.models.gate_request import (
    GateIssue,
    GateRequest,
    GateRequestParams,
    RepoCoordinates,
)
from issuegate.domain.trackers.issue_tracker import IssueTracker

logger = logging.getLogger(__name__)


@dataclass
class GateService:
    """Service for the issue-facing steps of a gate.

    Attributes:
        tracker: Issue tracker hosting the gate issue
        event_emitter: Receives gate events; a private emitter is created if None
    """

    tracker: IssueTracker
    event_emitter: GateEventEmitter | None = None

    def __post_init__(self) -> None:
        if self.event_emitter is None:
            self.event_emitter = GateEventEmitter()

    def open_gate(
        self, params: GateRequestParams, config: GateConfig
    ) -> tuple[GateRequest, GateIssue]:
        """Validate config, build the request and create the tracking issue.

        Raises:
            ConfigError: If config cannot resolve a gate (checked before any I/O)
            FormatError: If params.repository is malformed
            IssueTrackerError: If issue creation fails
        """
        config.check()
        request = build_gate_request(params)

        logger.info(
            f"Creating issue in repo {request.repo.full_name}: "
            f"title={request.title!r} assignees={request.assignees}"
        )
        issue = self.tracker.create_issue(
            request.repo,
            title=request.title,
            body=request.body,
            assignees=request.assignees,
        )
        self.event_emitter.publish(
            GateEventType.GATE_OPENED, request.repo, issue_number=issue.number, url=issue.url
        )
        return request, issue

    def check_gate(
        self, repo: RepoCoordinates, issue_number: int, config: GateConfig
    ) -> ApprovalStatus:
        """Fetch the comment history once and resolve it."""
        comments = self.tracker.list_comments(repo, issue_number)
        status = resolve(comments, config)
        self.event_emitter.publish(
            GateEventType.COMMENTS_EVALUATED,
            repo,
            issue_number=issue_number,
            status=status,
            comment_count=len(comments),
        )
        return status

    def close_gate(
        self,
        repo: RepoCoordinates,
        issue_number: int,
        status: ApprovalStatus,
        *,
        fail_on_denial: bool = True,
    ) -> None:
        """Post the outcome comment and close the issue.

        The denial comment only announces a failing workflow when
        fail_on_denial is set.

        Raises:
            ValueError: If status is not terminal
        """
        if not status.is_terminal:
            raise ValueError(f"Cannot close gate with non-terminal status: {status.value}")

        if status == ApprovalStatus.APPROVED:
            message = APPROVED_CLOSING_COMMENT
        elif fail_on_denial:
            message = DENIED_CLOSING_COMMENT
        else:
            message = DENIED_CONTINUE_CLOSING_COMMENT
        self.tracker.add_comment(repo, issue_number, message)
        self.tracker.close_issue(repo, issue_number)
        self.event_emitter.publish(
            GateEventType.GATE_CLOSED, repo, issue_number=issue_number, status=status
        )
