"""Gate request models: builder input and output."""

from pydantic import BaseModel, ConfigDict, Field

from issuegate.domain.constants import (
    DEFAULT_APPROVE_PHRASES,
    DEFAULT_DENY_PHRASES,
    DEFAULT_SERVER_URL,
)
from issuegate.domain.errors import FormatError


class RepoCoordinates(BaseModel):
    """Owner and name of a repository."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @classmethod
    def parse(cls, repository: str) -> "RepoCoordinates":
        """Parse ``owner/name`` coordinates.

        Raises:
            FormatError: If the string does not split into exactly a
                non-empty owner and a non-empty name
        """
        parts = repository.split("/")
        if len(parts) != 2 or not all(part.strip() for part in parts):
            raise FormatError(f"Repo owner and name in unexpected format: {repository!r}")
        owner, name = (part.strip() for part in parts)
        return cls(owner=owner, name=name)


class GateRequestParams(BaseModel):
    """Everything needed to describe a new approval gate."""

    run_id: int
    repository: str
    approvers: list[str] = Field(default_factory=list)
    issue_title: str = ""
    issue_body: str = ""
    approve_phrases: tuple[str, ...] = DEFAULT_APPROVE_PHRASES
    deny_phrases: tuple[str, ...] = DEFAULT_DENY_PHRASES
    workflow_initiator: str
    server_url: str = DEFAULT_SERVER_URL


class GateRequest(BaseModel):
    """Issue content for a new gate, ready to hand to an issue tracker."""

    model_config = ConfigDict(frozen=True)

    repo: RepoCoordinates
    title: str
    body: str
    assignees: list[str]


class GateIssue(BaseModel):
    """Reference to a tracking issue created for a gate."""

    model_config = ConfigDict(frozen=True)

    number: int
    url: str | None = None
