"""Domain-level exceptions for the approval gate."""


class GateError(Exception):
    """Base class for every error the gate surfaces to its caller."""

    pass


class ConfigError(GateError):
    """Raised when a GateConfig is self-contradictory.

    Example: a zero minimum-approval threshold with no named approvers, or
    a phrase that appears in both the approve and deny vocabularies.
    """

    pass


class FormatError(GateError):
    """Raised when repository coordinates are not in ``owner/name`` form."""

    pass


class PatternError(GateError):
    """Raised when a phrase vocabulary entry cannot be compiled into a matcher."""

    def __init__(self, message: str, *, phrase: str | None = None) -> None:
        super().__init__(message)
        self.phrase = phrase


class IssueTrackerError(GateError):
    """Raised when the issue tracker fails (network, auth, unexpected status)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        message = super().__str__()
        if self.status_code is None:
            return message
        return f"{message} (HTTP {self.status_code})"
