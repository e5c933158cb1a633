"""Tests for the comment resolver."""

import pytest

from issuegate.application.comment_resolver import resolve
from issuegate.domain.errors import ConfigError, PatternError
from issuegate.domain.models.approval_status import ApprovalStatus
from issuegate.domain.models.comment import Comment
from issuegate.domain.models.gate_config import GateConfig


def _comments(*pairs: tuple[str, str]) -> list[Comment]:
    return [Comment(author=author, body=body, order=i) for i, (author, body) in enumerate(pairs)]


class TestThreshold:
    """Tests for effective threshold handling."""

    def test_zero_threshold_without_approvers_is_config_error(self) -> None:
        config = GateConfig(required_approvers=(), minimum_approvals=0)

        with pytest.raises(ConfigError):
            resolve(_comments(("alice", "approve")), config)

    def test_config_error_raised_even_without_comments(self) -> None:
        with pytest.raises(ConfigError):
            resolve([], GateConfig())

    def test_zero_threshold_means_all_required_approvers(self) -> None:
        config = GateConfig(required_approvers=("alice", "bob"))

        assert resolve(_comments(("alice", "lgtm")), config) == ApprovalStatus.PENDING
        assert resolve(_comments(("alice", "lgtm"), ("bob", "yes")), config) == ApprovalStatus.APPROVED

    def test_single_named_approver(self) -> None:
        config = GateConfig(required_approvers=("alice",), minimum_approvals=0)

        assert resolve(_comments(("alice", "lgtm")), config) == ApprovalStatus.APPROVED

    def test_two_of_three_approves_after_second(self) -> None:
        config = GateConfig(required_approvers=("A", "B", "C"), minimum_approvals=2)

        assert resolve(_comments(("A", "approve")), config) == ApprovalStatus.PENDING
        assert resolve(_comments(("A", "approve"), ("B", "approve")), config) == ApprovalStatus.APPROVED

    def test_no_comments_is_pending(self) -> None:
        config = GateConfig(minimum_approvals=1)

        assert resolve([], config) == ApprovalStatus.PENDING


class TestShortCircuit:
    """Nothing after the first terminal comment affects the result."""

    def test_denial_after_threshold_is_ignored(self) -> None:
        config = GateConfig(required_approvers=("A", "B", "C"), minimum_approvals=2)
        comments = _comments(("A", "approve"), ("B", "approve"), ("C", "deny"))

        assert resolve(comments, config) == ApprovalStatus.APPROVED

    def test_approvals_after_denial_are_ignored(self) -> None:
        config = GateConfig(minimum_approvals=1)
        comments = _comments(("bob", "no"), ("alice", "approve"), ("carol", "approve"))

        assert resolve(comments, config) == ApprovalStatus.DENIED

    def test_single_denial_is_terminal_regardless_of_threshold(self) -> None:
        config = GateConfig(required_approvers=("A", "B", "C"), minimum_approvals=2)
        comments = _comments(("A", "approve"), ("B", "deny"))

        assert resolve(comments, config) == ApprovalStatus.DENIED

    def test_comments_replayed_in_order_field(self) -> None:
        config = GateConfig(minimum_approvals=1)
        comments = [
            Comment(author="alice", body="approve", order=1),
            Comment(author="bob", body="deny", order=0),
        ]

        assert resolve(comments, config) == ApprovalStatus.DENIED


class TestEligibility:
    """Tests for disallowed, duplicate and unauthorized commenters."""

    def test_duplicate_approval_counts_once(self) -> None:
        config = GateConfig(minimum_approvals=2)
        comments = _comments(("alice", "approve"), ("alice", "approved"))

        assert resolve(comments, config) == ApprovalStatus.PENDING

    def test_approver_cannot_deny_after_approving(self) -> None:
        config = GateConfig(minimum_approvals=2)
        comments = _comments(("alice", "approve"), ("alice", "deny"))

        assert resolve(comments, config) == ApprovalStatus.PENDING

    def test_disallowed_user_approval_ignored(self) -> None:
        config = GateConfig(minimum_approvals=1, disallowed_users=("mallory",))

        assert resolve(_comments(("mallory", "approve")), config) == ApprovalStatus.PENDING

    def test_disallowed_user_denial_ignored(self) -> None:
        config = GateConfig(minimum_approvals=1, disallowed_users=("mallory",))
        comments = _comments(("mallory", "deny"), ("alice", "approve"))

        assert resolve(comments, config) == ApprovalStatus.APPROVED

    def test_disallowed_wins_over_required(self) -> None:
        config = GateConfig(required_approvers=("alice",), disallowed_users=("alice",))

        assert resolve(_comments(("alice", "approve")), config) == ApprovalStatus.PENDING

    def test_unauthorized_commenter_ignored(self) -> None:
        config = GateConfig(required_approvers=("alice",))
        comments = _comments(("eve", "approve"), ("eve", "deny"))

        assert resolve(comments, config) == ApprovalStatus.PENDING

    def test_anyone_can_approve_when_no_required_approvers(self) -> None:
        config = GateConfig(minimum_approvals=1)

        assert resolve(_comments(("random-user", "yes")), config) == ApprovalStatus.APPROVED


class TestClassification:
    """Tests for lexical approve/deny matching."""

    @pytest.mark.parametrize("body", ["approve", "Approve!", "APPROVED.\n", "  lgtm  ", "yes!!!", "Approved.!\n\n"])
    def test_approve_variants(self, body: str) -> None:
        config = GateConfig(minimum_approvals=1)

        assert resolve(_comments(("alice", body)), config) == ApprovalStatus.APPROVED

    @pytest.mark.parametrize("body", ["deny", "Denied!", "NO.", "reject\n"])
    def test_deny_variants(self, body: str) -> None:
        config = GateConfig(minimum_approvals=1)

        assert resolve(_comments(("bob", body)), config) == ApprovalStatus.DENIED

    @pytest.mark.parametrize(
        "body",
        ["I approve of this", "approve?", "not approved", "lgtm, but wait", "no thanks", "", "yes-ish"],
    )
    def test_noise_is_ignored(self, body: str) -> None:
        config = GateConfig(minimum_approvals=1)

        assert resolve(_comments(("alice", body)), config) == ApprovalStatus.PENDING

    def test_no_thanks_then_no(self) -> None:
        config = GateConfig(minimum_approvals=1)

        assert resolve(_comments(("bob", "no thanks")), config) == ApprovalStatus.PENDING
        assert resolve(_comments(("bob", "no")), config) == ApprovalStatus.DENIED

    def test_phrases_are_literal_text(self) -> None:
        config = GateConfig(minimum_approvals=1, approve_phrases=("ship.it",), deny_phrases=("stop",))

        assert resolve(_comments(("alice", "shipXit")), config) == ApprovalStatus.PENDING
        assert resolve(_comments(("alice", "ship.it")), config) == ApprovalStatus.APPROVED

    def test_custom_vocabulary_replaces_defaults(self) -> None:
        config = GateConfig(minimum_approvals=1, approve_phrases=("ship it",), deny_phrases=("halt",))

        assert resolve(_comments(("alice", "approve")), config) == ApprovalStatus.PENDING
        assert resolve(_comments(("alice", "Ship it!")), config) == ApprovalStatus.APPROVED
        assert resolve(_comments(("alice", "HALT")), config) == ApprovalStatus.DENIED

    def test_approve_checked_before_deny(self) -> None:
        config = GateConfig(minimum_approvals=1, approve_phrases=("ok",), deny_phrases=("ok",))

        assert resolve(_comments(("alice", "ok")), config) == ApprovalStatus.APPROVED

    def test_blank_phrase_raises_pattern_error(self) -> None:
        config = GateConfig(minimum_approvals=1, approve_phrases=("approve", "  "))

        with pytest.raises(PatternError):
            resolve(_comments(("alice", "approve")), config)
