"""Gate configuration model.

Holds who may approve, how many approvals are needed, who is excluded, and
the phrase vocabularies used to classify comments.
"""

from pydantic import BaseModel, ConfigDict, Field

from issuegate.domain.constants import DEFAULT_APPROVE_PHRASES, DEFAULT_DENY_PHRASES
from issuegate.domain.errors import ConfigError
from issuegate.domain.phrases import compile_phrases


class GateConfig(BaseModel):
    """Resolution settings for one gate.

    Attributes:
        required_approvers: Users whose comments count. Empty means anyone.
        minimum_approvals: Distinct approvals needed. 0 means all of
            required_approvers.
        disallowed_users: Users whose comments are always ignored.
        approve_phrases: Phrases that classify a comment as an approval.
        deny_phrases: Phrases that classify a comment as a denial.

    A zero threshold with no required approvers is accepted at construction
    but raises ConfigError as soon as the threshold is needed.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    required_approvers: tuple[str, ...] = ()
    minimum_approvals: int = Field(default=0, ge=0)
    disallowed_users: tuple[str, ...] = ()
    approve_phrases: tuple[str, ...] = DEFAULT_APPROVE_PHRASES
    deny_phrases: tuple[str, ...] = DEFAULT_DENY_PHRASES

    @property
    def effective_threshold(self) -> int:
        """Number of distinct eligible approvals required to approve.

        Raises:
            ConfigError: If minimum_approvals is 0 and no approvers are named
        """
        if self.minimum_approvals:
            return self.minimum_approvals
        if not self.required_approvers:
            raise ConfigError(
                "No required approvers or minimum approvals set: "
                "cannot determine how many approvals are needed"
            )
        return len(set(self.required_approvers))

    def check(self) -> None:
        """Ensure the configuration can be used to resolve a gate.

        Raises:
            ConfigError: If the threshold cannot be determined or exceeds the
                number of eligible approvers, or a phrase of one vocabulary
                would also be matched by the other
            PatternError: If a phrase is blank
        """
        threshold = self.effective_threshold

        if self.required_approvers:
            eligible = set(self.required_approvers) - set(self.disallowed_users)
            if threshold > len(eligible):
                raise ConfigError(
                    f"{threshold} approvals required but only {len(eligible)} "
                    f"eligible approver(s) configured: {', '.join(sorted(eligible)) or 'none'}"
                )

        approve = compile_phrases(self.approve_phrases)
        deny = compile_phrases(self.deny_phrases)
        overlap = sorted(
            {p.strip() for p in self.deny_phrases if approve.matches(p)}
            | {p.strip() for p in self.approve_phrases if deny.matches(p)}
        )
        if overlap:
            raise ConfigError(
                f"Approve and deny phrases overlap: {', '.join(overlap)}"
            )
