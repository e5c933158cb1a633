"""Result of waiting on a gate."""

from pydantic import BaseModel

from issuegate.domain.models.approval_status import ApprovalStatus


class WaitResult(BaseModel):
    """Final status after polling, with how it ended.

    ``timed_out`` is only ever True with a PENDING status.
    """

    status: ApprovalStatus
    polls: int = 0
    timed_out: bool = False
