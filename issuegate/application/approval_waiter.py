"""ApprovalWaiter - polls a gate until it reaches a terminal status.

The resolver has no notion of time; spacing polls and giving up belongs here.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from issuegate.application.gate_service import GateService
from issuegate.domain.constants import DEFAULT_POLLING_INTERVAL_SECONDS
from issuegate.domain.models.gate_config import GateConfig
from issuegate.domain.models.gate_request import RepoCoordinates
from issuegate.domain.models.wait_result import WaitResult

logger = logging.getLogger(__name__)


@dataclass
class ApprovalWaiter:
    """Repeatedly resolves a gate's comment history.

    Attributes:
        service: Gate service used to fetch and resolve comments
        interval: Seconds to sleep between polls
        timeout: Overall limit in seconds; None waits indefinitely
        sleep: Sleep function (injected by tests)
        clock: Monotonic clock (injected by tests)
    """

    service: GateService
    interval: float = DEFAULT_POLLING_INTERVAL_SECONDS
    timeout: float | None = None
    sleep: Callable[[float], None] = field(default=time.sleep)
    clock: Callable[[], float] = field(default=time.monotonic)

    def wait(self, repo: RepoCoordinates, issue_number: int, config: GateConfig) -> WaitResult:
        """Poll until APPROVED, DENIED or timeout.

        Errors from the tracker or resolver propagate; the waiter does not
        retry them.
        """
        # Surface configuration errors before the first request.
        config.check()

        started = self.clock()
        polls = 0

        while True:
            status = self.service.check_gate(repo, issue_number, config)
            polls += 1
            logger.info(f"Issue {issue_number} poll {polls}: {status.value}")

            if status.is_terminal:
                self.service.event_emitter.publish_outcome(repo, issue_number, status)
                return WaitResult(status=status, polls=polls)

            sleep_for = self.interval
            if self.timeout is not None:
                remaining = self.timeout - (self.clock() - started)
                if remaining <= 0:
                    logger.warning(
                        f"Issue {issue_number} still pending after {self.timeout}s; giving up"
                    )
                    self.service.event_emitter.publish_outcome(
                        repo, issue_number, status, timed_out=True
                    )
                    return WaitResult(status=status, polls=polls, timed_out=True)
                # The last poll lands on the deadline, not an interval past it.
                sleep_for = min(sleep_for, remaining)

            self.sleep(sleep_for)
