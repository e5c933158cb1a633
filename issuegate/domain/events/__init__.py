"""Gate event system for observer pattern notifications."""

from issuegate.domain.events.event_types import GateEventType
from issuegate.domain.events.event import GateEvent
from issuegate.domain.events.emitter import GateEventEmitter, GateObserver
from issuegate.domain.events.stderr_observer import StderrEventObserver

__all__ = [
    "GateEventType",
    "GateEvent",
    "GateObserver",
    "GateEventEmitter",
    "StderrEventObserver",
]
