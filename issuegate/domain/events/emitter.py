"""Gate event emitter.

Builds events from gate coordinates and dispatches them to observers. An
observer that raises is logged and skipped; it never interrupts the gate.
"""

import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Callable, Protocol

from issuegate.domain.events.event import GateEvent
from issuegate.domain.events.event_types import GateEventType
from issuegate.domain.models.approval_status import ApprovalStatus
from issuegate.domain.models.gate_request import RepoCoordinates

logger = logging.getLogger(__name__)

_OUTCOME_EVENTS = {
    ApprovalStatus.APPROVED: GateEventType.GATE_APPROVED,
    ApprovalStatus.DENIED: GateEventType.GATE_DENIED,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GateObserver(Protocol):
    """Protocol for gate event observers."""

    def on_event(self, event: GateEvent) -> None:
        """Handle a gate event. Must not block."""
        ...


class GateEventEmitter:
    """Central event dispatcher for gate events.

    Args:
        now: Timestamp source for published events (injected by tests)
    """

    def __init__(self, now: Callable[[], datetime] = _utcnow) -> None:
        self._now = now
        self._observers: dict[GateEventType, list[GateObserver]] = defaultdict(list)
        self._global_observers: list[GateObserver] = []

    def subscribe(
        self,
        observer: GateObserver,
        event_types: list[GateEventType] | None = None,
    ) -> None:
        """Subscribe to specific event types, or all events if None."""
        if event_types is None:
            self._global_observers.append(observer)
        else:
            for event_type in event_types:
                self._observers[event_type].append(observer)

    def publish(
        self,
        event_type: GateEventType,
        repo: RepoCoordinates,
        *,
        issue_number: int | None = None,
        status: ApprovalStatus | None = None,
        comment_count: int | None = None,
        **metadata: Any,
    ) -> GateEvent:
        """Build a timestamped event for one gate step and dispatch it."""
        event = GateEvent(
            event_type=event_type,
            repository=repo.full_name,
            timestamp=self._now(),
            issue_number=issue_number,
            status=status,
            comment_count=comment_count,
            metadata=metadata,
        )
        self.emit(event)
        return event

    def publish_outcome(
        self,
        repo: RepoCoordinates,
        issue_number: int,
        status: ApprovalStatus,
        *,
        timed_out: bool = False,
        **metadata: Any,
    ) -> GateEvent:
        """Publish the event that ends a wait on a gate.

        APPROVED and DENIED map to their outcome events; a wait that gave up
        publishes GATE_TIMED_OUT with the last observed status.

        Raises:
            ValueError: If status is PENDING and the wait did not time out
        """
        if timed_out:
            event_type = GateEventType.GATE_TIMED_OUT
        elif status in _OUTCOME_EVENTS:
            event_type = _OUTCOME_EVENTS[status]
        else:
            raise ValueError(f"No outcome event for status: {status.value}")
        return self.publish(
            event_type, repo, issue_number=issue_number, status=status, **metadata
        )

    def emit(self, event: GateEvent) -> None:
        """Dispatch event to all relevant observers, each at most once."""
        notified: list[GateObserver] = []
        for observer in [*self._global_observers, *self._observers.get(event.event_type, [])]:
            if any(observer is seen for seen in notified):
                continue
            notified.append(observer)
            self._safe_notify(observer, event)

    def _safe_notify(self, observer: GateObserver, event: GateEvent) -> None:
        try:
            observer.on_event(event)
        except Exception as e:
            logger.warning(f"Observer {observer} failed on {event.event_type.value}: {e}")
