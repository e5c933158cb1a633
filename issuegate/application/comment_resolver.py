"""Comment resolver - turns a comment history into an approval status.

Resolution is a single pass over comments, oldest first:

- Comments from disallowed users are ignored.
- A user who already approved is not counted again.
- When required approvers are named, everyone else is ignored.
- A body that is exactly an approve phrase (case-insensitive, optionally
  followed by ``.``/``!`` and whitespace) counts as an approval; the first
  approval that reaches the effective threshold approves the gate.
- A body that is exactly a deny phrase denies the gate at once.
- Anything else is noise.

Nothing after the first terminal comment is considered. The resolver keeps
no state between calls; callers pass the full history every time.
"""

import logging
from collections.abc import Iterable

from issuegate.domain.models.approval_status import ApprovalStatus
from issuegate.domain.models.comment import Comment
from issuegate.domain.models.gate_config import GateConfig
from issuegate.domain.phrases import compile_phrases

logger = logging.getLogger(__name__)


def resolve(comments: Iterable[Comment], config: GateConfig) -> ApprovalStatus:
    """Compute the gate status from its comment history.

    Args:
        comments: Comment history; replayed in ascending ``order``
        config: Approvers, threshold, exclusions and phrase vocabularies

    Returns:
        APPROVED, DENIED, or PENDING if the history holds no terminal comment

    Raises:
        ConfigError: If minimum_approvals is 0 and no approvers are named
        PatternError: If a vocabulary phrase cannot be compiled
    """
    threshold = config.effective_threshold
    approve = compile_phrases(config.approve_phrases)
    deny = compile_phrases(config.deny_phrases)

    approvals: list[str] = []

    for comment in sorted(comments, key=lambda c: c.order):
        author = comment.author

        if author in config.disallowed_users:
            logger.debug(f"Ignoring comment {comment.order} from disallowed user '{author}'")
            continue
        if author in approvals:
            continue
        if config.required_approvers and author not in config.required_approvers:
            logger.debug(f"Ignoring comment {comment.order} from non-approver '{author}'")
            continue

        if approve.matches(comment.body):
            approvals.append(author)
            logger.debug(f"Approval from '{author}' ({len(approvals)}/{threshold})")
            if len(approvals) >= threshold:
                return ApprovalStatus.APPROVED
            continue

        if deny.matches(comment.body):
            logger.debug(f"Denial from '{author}'")
            return ApprovalStatus.DENIED

    return ApprovalStatus.PENDING
