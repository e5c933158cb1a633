"""Gate event types for observer pattern notifications."""

from enum import Enum


class GateEventType(str, Enum):
    """Typed gate lifecycle events."""

    # Issue lifecycle
    GATE_OPENED = "gate_opened"
    GATE_CLOSED = "gate_closed"

    # Polling
    COMMENTS_EVALUATED = "comments_evaluated"

    # Outcomes
    GATE_APPROVED = "gate_approved"
    GATE_DENIED = "gate_denied"
    GATE_TIMED_OUT = "gate_timed_out"
