"""Approval status of a gate.

PENDING is the only non-terminal status; callers keep polling while it holds.
"""

from enum import Enum


class ApprovalStatus(str, Enum):
    """Status of a gate after replaying its comment history."""

    PENDING = "pending"      # Not enough approvals yet, no denial
    APPROVED = "approved"    # Effective threshold reached
    DENIED = "denied"        # An eligible commenter denied

    @property
    def is_terminal(self) -> bool:
        return self is not ApprovalStatus.PENDING
