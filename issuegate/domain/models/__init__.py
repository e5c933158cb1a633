"""Domain models for the approval gate."""

from .approval_status import ApprovalStatus
from .comment import Comment
from .gate_config import GateConfig
from .gate_request import GateIssue, GateRequest, GateRequestParams, RepoCoordinates
from .wait_result import WaitResult


__all__ = [
    "ApprovalStatus",
    "Comment",
    "GateConfig",
    "GateIssue",
    "GateRequest",
    "GateRequestParams",
    "RepoCoordinates",
    "WaitResult",
]
