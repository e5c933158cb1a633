"""Gate request builder - issue title, body and assignees for a new gate."""

from issuegate.domain.models.gate_request import GateRequest, GateRequestParams, RepoCoordinates
from issuegate.domain.phrases import format_phrases


def run_url(server_url: str, repo: RepoCoordinates, run_id: int) -> str:
    return f"{server_url.rstrip('/')}/{repo.full_name}/actions/runs/{run_id}"


def build_gate_request(params: GateRequestParams) -> GateRequest:
    """Build the tracking issue content for a gate.

    The body links back to the workflow run, lists the required approvers
    ("Anyone can approve." when none are named) and tells reviewers which
    phrases approve or deny. When no approvers are named the issue is
    assigned to the workflow initiator so it is never left unassigned.

    Raises:
        FormatError: If params.repository is not ``owner/name``
    """
    repo = RepoCoordinates.parse(params.repository)

    if params.approvers:
        approvers_text = ", ".join(params.approvers)
        assignees = list(params.approvers)
    else:
        approvers_text = "Anyone can approve."
        assignees = [params.workflow_initiator]

    body = (
        "Workflow is pending manual review.\n"
        f"URL: {run_url(params.server_url, repo, params.run_id)}\n"
        "\n"
        f"Required approvers: {approvers_text}\n"
        "\n"
        f"Respond {format_phrases(params.approve_phrases)} to continue workflow "
        f"or {format_phrases(params.deny_phrases)} to cancel."
    )
    if params.issue_body:
        body = f"{params.issue_body}\n\n{body}"

    return GateRequest(
        repo=repo,
        title=f"Manual approval required for: {params.issue_title} (run {params.run_id})",
        body=body,
        assignees=assignees,
    )
