"""Gate settings model.

Validated view of the merged configuration mapping. Produces the GateConfig
used for resolution and the GateRequestParams used to open the issue.

Config structure:
    approvers: [alice, bob]          # or "alice, bob"
    minimum_approvals: 1
    disallowed_users: [mallory]
    exclude_workflow_initiator_as_approver: false
    additional_approved_words: [ship it]
    additional_denied_words: [stop]
    issue_title: Deploy to production
    issue_body: ""
    fail_on_denial: true
    polling_interval_seconds: 10
    timeout_seconds: 3600
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from issuegate.domain.constants import (
    DEFAULT_API_URL,
    DEFAULT_APPROVE_PHRASES,
    DEFAULT_DENY_PHRASES,
    DEFAULT_POLLING_INTERVAL_SECONDS,
    DEFAULT_SERVER_URL,
)
from issuegate.domain.errors import ConfigError
from issuegate.domain.models.gate_config import GateConfig
from issuegate.domain.models.gate_request import GateRequestParams, RepoCoordinates


class GateSettings(BaseModel):
    """Complete configuration for one gate run."""

    model_config = ConfigDict(extra="forbid")

    approvers: list[str] = Field(default_factory=list)
    minimum_approvals: int = Field(default=0, ge=0)
    disallowed_users: list[str] = Field(default_factory=list)
    exclude_workflow_initiator_as_approver: bool = False
    additional_approved_words: list[str] = Field(default_factory=list)
    additional_denied_words: list[str] = Field(default_factory=list)

    issue_title: str = ""
    issue_body: str = ""
    fail_on_denial: bool = True

    polling_interval_seconds: float = Field(default=DEFAULT_POLLING_INTERVAL_SECONDS, gt=0)
    timeout_seconds: float | None = Field(default=None, gt=0)

    # Run coordinates, normally supplied by the workflow runner's environment
    repository: str | None = None
    run_id: int | None = None
    workflow_initiator: str | None = None
    server_url: str = DEFAULT_SERVER_URL
    api_url: str = DEFAULT_API_URL

    @field_validator(
        "approvers",
        "disallowed_users",
        "additional_approved_words",
        "additional_denied_words",
        mode="before",
    )
    @classmethod
    def _split_comma_separated(cls, value: Any) -> Any:
        """Accept "a, b" as well as [a, b]; blank and repeated entries are dropped."""
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            items = (str(item).strip() for item in value)
            return list(dict.fromkeys(item for item in items if item))
        return value

    @property
    def approve_phrases(self) -> tuple[str, ...]:
        return DEFAULT_APPROVE_PHRASES + tuple(self.additional_approved_words)

    @property
    def deny_phrases(self) -> tuple[str, ...]:
        return DEFAULT_DENY_PHRASES + tuple(self.additional_denied_words)

    def repo(self) -> RepoCoordinates:
        """Parse the configured repository.

        Raises:
            ConfigError: If no repository is configured
            FormatError: If the repository is not ``owner/name``
        """
        if not self.repository:
            raise ConfigError("Repository is required (set 'repository' or GITHUB_REPOSITORY)")
        return RepoCoordinates.parse(self.repository)

    def gate_config(self) -> GateConfig:
        """Build the resolver configuration.

        Raises:
            ConfigError: If the threshold cannot be determined or reached, or
                the vocabularies overlap
        """
        disallowed = list(self.disallowed_users)
        if (
            self.exclude_workflow_initiator_as_approver
            and self.workflow_initiator
            and self.workflow_initiator not in disallowed
        ):
            disallowed.append(self.workflow_initiator)

        config = GateConfig(
            required_approvers=tuple(self.approvers),
            minimum_approvals=self.minimum_approvals,
            disallowed_users=tuple(disallowed),
            approve_phrases=self.approve_phrases,
            deny_phrases=self.deny_phrases,
        )
        # Fail before any issue is opened rather than on the first poll.
        config.check()
        return config

    def request_params(self) -> GateRequestParams:
        """Build the gate request builder input.

        Raises:
            ConfigError: If a run coordinate is missing
        """
        missing = [
            name
            for name in ("repository", "run_id", "workflow_initiator")
            if getattr(self, name) in (None, "")
        ]
        if missing:
            raise ConfigError(f"Missing required run settings: {', '.join(missing)}")

        return GateRequestParams(
            run_id=self.run_id,
            repository=self.repository,
            approvers=list(self.approvers),
            issue_title=self.issue_title,
            issue_body=self.issue_body,
            approve_phrases=self.approve_phrases,
            deny_phrases=self.deny_phrases,
            workflow_initiator=self.workflow_initiator,
            server_url=self.server_url,
        )
