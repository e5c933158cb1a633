"""Stderr event observer for CLI integration."""

import click

from issuegate.domain.events.event import GateEvent


class StderrEventObserver:
    """Emits events as structured lines to stderr."""

    def on_event(self, event: GateEvent) -> None:
        """Emit event as structured line to stderr."""
        parts = [f"[EVENT] {event.event_type.value}", f"repo={event.repository}"]
        if event.issue_number is not None:
            parts.append(f"issue={event.issue_number}")
        if event.status is not None:
            parts.append(f"status={event.status.name}")
        if event.comment_count is not None:
            parts.append(f"comments={event.comment_count}")
        click.echo(" ".join(parts), err=True)
