import logging
import os
from pathlib import Path
from typing import Any, Callable

import click
from pydantic import BaseModel, ValidationError

from issuegate.application.config_loader import load_settings
from issuegate.application.settings import GateSettings
from issuegate.domain.models.approval_status import ApprovalStatus
from issuegate.domain.trackers.issue_tracker import IssueTracker
from issuegate.interface.cli.output_models import (
    CheckOutput,
    OpenOutput,
    PreviewOutput,
    RunOutput,
    WaitOutput,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PENDING = 2
EXIT_DENIED = 3


def _json_emit(model: BaseModel) -> None:
    # Single-line JSON, omit None fields (e.g., OpenOutput.issue_number on error).
    click.echo(model.model_dump_json(exclude_none=True), nl=True)


def _get_json_mode(ctx: click.Context) -> bool:
    obj = ctx.obj or {}
    return bool(obj.get("json", False))


def _format_error(e: Exception) -> str:
    """Format exception into user-friendly message."""
    if isinstance(e, FileNotFoundError):
        return f"File not found: {e.filename}" if e.filename else str(e)
    if isinstance(e, ValidationError):
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        return f"Invalid configuration: {fields}"
    return str(e)


def _make_tracker(settings: GateSettings) -> IssueTracker:
    """Build the issue tracker. Patched by tests."""
    from issuegate.domain.trackers.github_tracker import GitHubIssueTracker

    return GitHubIssueTracker(os.environ.get("GITHUB_TOKEN"), api_url=settings.api_url)


def _load_settings(ctx: click.Context, overrides: dict[str, Any]) -> GateSettings:
    obj = ctx.obj or {}
    config_file = obj.get("config_file")
    if config_file:
        logger.debug(f"Using config file: {config_file}")
    return load_settings(
        # Multi-value options arrive as empty tuples when unset.
        {k: (list(v) if isinstance(v, tuple) else v) for k, v in overrides.items() if v != ()},
        project_root=Path.cwd(),
        user_home=Path.home(),
        config_file=Path(config_file) if config_file else None,
        environ=os.environ,
    )


def _status_exit_code(status: ApprovalStatus, settings: GateSettings, timed_out: bool = False) -> int:
    if timed_out or status == ApprovalStatus.PENDING:
        return EXIT_PENDING
    if status == ApprovalStatus.DENIED and settings.fail_on_denial:
        return EXIT_DENIED
    return EXIT_OK


def _build_emitter(events: bool):
    from issuegate.domain.events.emitter import GateEventEmitter

    emitter = GateEventEmitter()
    if events:
        from issuegate.domain.events.stderr_observer import StderrEventObserver

        emitter.subscribe(StderrEventObserver())
    return emitter


def gate_options(func: Callable) -> Callable:
    """Options shared by every command that needs gate settings."""
    options = [
        click.option("--approver", "approvers", multiple=True, help="Required approver (repeatable)."),
        click.option("--minimum-approvals", type=click.IntRange(min=0), default=None),
        click.option("--disallowed-user", "disallowed_users", multiple=True, help="Ignored user (repeatable)."),
        click.option("--repository", type=str, default=None, help="owner/name (default: GITHUB_REPOSITORY)."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def request_options(func: Callable) -> Callable:
    """Options that only matter when the issue is built."""
    options = [
        click.option("--issue-title", type=str, default=None),
        click.option("--issue-body", type=str, default=None),
        click.option("--run-id", type=int, default=None, help="Workflow run id (default: GITHUB_RUN_ID)."),
        click.option("--initiator", "workflow_initiator", type=str, default=None, help="Default: GITHUB_ACTOR."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group(help="Manual approval gates for workflow runs, decided by issue comments.")
@click.option("--json", "json_output", is_flag=True, help="Emit machine-readable JSON on stdout.")
@click.option("--config", "config_file", type=click.Path(dir_okay=False), default=None, help="Extra YAML config file.")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def cli(ctx: click.Context, json_output: bool, config_file: str | None, verbose: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj["json"] = bool(json_output)
    ctx.obj["config_file"] = config_file
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@cli.command("preview")
@gate_options
@request_options
@click.pass_context
def preview_cmd(ctx: click.Context, **options: Any) -> None:
    """Print the issue that would be opened, without contacting the tracker."""
    try:
        from issuegate.application.gate_request_builder import build_gate_request

        settings = _load_settings(ctx, options)
        settings.gate_config()
        request = build_gate_request(settings.request_params())

        if _get_json_mode(ctx):
            _json_emit(
                PreviewOutput(
                    exit_code=EXIT_OK,
                    title=request.title,
                    body=request.body,
                    assignees=request.assignees,
                )
            )
            raise click.exceptions.Exit(EXIT_OK)

        click.echo(f"title={request.title}")
        click.echo(f"assignees={','.join(request.assignees)}")
        click.echo("")
        click.echo(request.body)
    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(PreviewOutput(exit_code=EXIT_ERROR, error=_format_error(e)))
            raise click.exceptions.Exit(EXIT_ERROR)
        raise click.ClickException(_format_error(e)) from e


@cli.command("open")
@gate_options
@request_options
@click.option("--events", is_flag=True, help="Emit gate events to stderr.")
@click.pass_context
def open_cmd(ctx: click.Context, events: bool, **options: Any) -> None:
    """Open the gate issue and print its number."""
    try:
        from issuegate.application.gate_service import GateService

        settings = _load_settings(ctx, options)
        service = GateService(tracker=_make_tracker(settings), event_emitter=_build_emitter(events))
        _, issue = service.open_gate(settings.request_params(), settings.gate_config())

        if _get_json_mode(ctx):
            _json_emit(OpenOutput(exit_code=EXIT_OK, issue_number=issue.number, issue_url=issue.url))
            raise click.exceptions.Exit(EXIT_OK)

        click.echo(str(issue.number))
    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(OpenOutput(exit_code=EXIT_ERROR, error=_format_error(e)))
            raise click.exceptions.Exit(EXIT_ERROR)
        raise click.ClickException(_format_error(e)) from e


@cli.command("check")
@click.argument("issue_number", type=int)
@gate_options
@click.pass_context
def check_cmd(ctx: click.Context, issue_number: int, **options: Any) -> None:
    """Resolve the gate once from the current comment history.

    Exit code 0 when approved, 2 when pending, 3 when denied.
    """
    try:
        from issuegate.application.gate_service import GateService

        settings = _load_settings(ctx, options)
        service = GateService(tracker=_make_tracker(settings))
        status = service.check_gate(settings.repo(), issue_number, settings.gate_config())
        exit_code = _status_exit_code(status, settings)

        if _get_json_mode(ctx):
            _json_emit(CheckOutput(exit_code=exit_code, issue_number=issue_number, status=status.name))
            raise click.exceptions.Exit(exit_code)

        click.echo(f"status={status.name}")
        if exit_code != EXIT_OK:
            raise click.exceptions.Exit(exit_code)
    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(CheckOutput(exit_code=EXIT_ERROR, issue_number=issue_number, error=_format_error(e)))
            raise click.exceptions.Exit(EXIT_ERROR)
        raise click.ClickException(_format_error(e)) from e


@cli.command("wait")
@click.argument("issue_number", type=int)
@gate_options
@click.option("--interval", "polling_interval_seconds", type=click.FloatRange(min=0, min_open=True), default=None)
@click.option("--timeout", "timeout_seconds", type=click.FloatRange(min=0, min_open=True), default=None)
@click.option("--close/--no-close", default=False, help="Comment and close the issue once decided.")
@click.option("--events", is_flag=True, help="Emit gate events to stderr.")
@click.pass_context
def wait_cmd(ctx: click.Context, issue_number: int, close: bool, events: bool, **options: Any) -> None:
    """Poll the gate until it is approved, denied or the timeout expires."""
    try:
        from issuegate.application.approval_waiter import ApprovalWaiter
        from issuegate.application.gate_service import GateService

        settings = _load_settings(ctx, options)
        repo = settings.repo()
        service = GateService(tracker=_make_tracker(settings), event_emitter=_build_emitter(events))
        waiter = ApprovalWaiter(
            service=service,
            interval=settings.polling_interval_seconds,
            timeout=settings.timeout_seconds,
        )
        result = waiter.wait(repo, issue_number, settings.gate_config())
        if close and result.status.is_terminal:
            service.close_gate(
                repo, issue_number, result.status, fail_on_denial=settings.fail_on_denial
            )

        exit_code = _status_exit_code(result.status, settings, result.timed_out)

        if _get_json_mode(ctx):
            _json_emit(
                WaitOutput(
                    exit_code=exit_code,
                    issue_number=issue_number,
                    status=result.status.name,
                    polls=result.polls,
                    timed_out=result.timed_out,
                )
            )
            raise click.exceptions.Exit(exit_code)

        click.echo(f"status={result.status.name} polls={result.polls} timed_out={'true' if result.timed_out else 'false'}")
        if exit_code != EXIT_OK:
            raise click.exceptions.Exit(exit_code)
    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(WaitOutput(exit_code=EXIT_ERROR, issue_number=issue_number, error=_format_error(e)))
            raise click.exceptions.Exit(EXIT_ERROR)
        raise click.ClickException(_format_error(e)) from e


@cli.command("run")
@gate_options
@request_options
@click.option("--interval", "polling_interval_seconds", type=click.FloatRange(min=0, min_open=True), default=None)
@click.option("--timeout", "timeout_seconds", type=click.FloatRange(min=0, min_open=True), default=None)
@click.option("--events", is_flag=True, help="Emit gate events to stderr.")
@click.pass_context
def run_cmd(ctx: click.Context, events: bool, **options: Any) -> None:
    """Open the gate, wait for a decision, then comment and close the issue.

    Exit code 0 when approved, 2 on timeout, 3 when denied (unless
    fail_on_denial is false).
    """
    issue_number: int | None = None
    issue_url: str | None = None
    try:
        from issuegate.application.approval_waiter import ApprovalWaiter
        from issuegate.application.gate_service import GateService

        settings = _load_settings(ctx, options)
        config = settings.gate_config()
        service = GateService(tracker=_make_tracker(settings), event_emitter=_build_emitter(events))

        request, issue = service.open_gate(settings.request_params(), config)
        issue_number, issue_url = issue.number, issue.url
        if not _get_json_mode(ctx):
            click.echo(f"issue={issue.number}" + (f" url={issue.url}" if issue.url else ""), err=True)

        waiter = ApprovalWaiter(
            service=service,
            interval=settings.polling_interval_seconds,
            timeout=settings.timeout_seconds,
        )
        result = waiter.wait(request.repo, issue.number, config)
        if result.status.is_terminal:
            service.close_gate(
                request.repo, issue.number, result.status, fail_on_denial=settings.fail_on_denial
            )

        exit_code = _status_exit_code(result.status, settings, result.timed_out)

        if _get_json_mode(ctx):
            _json_emit(
                RunOutput(
                    exit_code=exit_code,
                    issue_number=issue.number,
                    issue_url=issue.url,
                    status=result.status.name,
                    polls=result.polls,
                    timed_out=result.timed_out,
                )
            )
            raise click.exceptions.Exit(exit_code)

        click.echo(f"status={result.status.name}")
        if exit_code != EXIT_OK:
            raise click.exceptions.Exit(exit_code)
    except click.exceptions.Exit:
        raise
    except Exception as e:
        if _get_json_mode(ctx):
            _json_emit(
                RunOutput(
                    exit_code=EXIT_ERROR,
                    issue_number=issue_number,
                    issue_url=issue_url,
                    error=_format_error(e),
                )
            )
            raise click.exceptions.Exit(EXIT_ERROR)
        raise click.ClickException(_format_error(e)) from e
