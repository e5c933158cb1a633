"""Gate event payload model."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from issuegate.domain.events.event_types import GateEventType
from issuegate.domain.models.approval_status import ApprovalStatus


class GateEvent(BaseModel):
    """Immutable event payload for gate notifications."""

    model_config = {"frozen": True}

    event_type: GateEventType
    repository: str
    timestamp: datetime
    issue_number: int | None = None
    status: ApprovalStatus | None = None
    comment_count: int | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
