from typing import Literal

from pydantic import BaseModel, Field


class BaseOutput(BaseModel):
    schema_version: int = 1
    command: Literal["preview", "open", "check", "wait", "run"]
    exit_code: int
    error: str | None = None


class PreviewOutput(BaseOutput):
    command: Literal["preview"] = "preview"
    title: str | None = None
    body: str | None = None
    assignees: list[str] = Field(default_factory=list)


class OpenOutput(BaseOutput):
    command: Literal["open"] = "open"
    # On open errors the issue may not exist; omit it from JSON via exclude_none.
    issue_number: int | None = None
    issue_url: str | None = None


class CheckOutput(BaseOutput):
    command: Literal["check"] = "check"
    issue_number: int
    status: str | None = None


class WaitOutput(BaseOutput):
    command: Literal["wait"] = "wait"
    issue_number: int
    status: str | None = None
    polls: int = 0
    timed_out: bool = False


class RunOutput(BaseOutput):
    command: Literal["run"] = "run"
    issue_number: int | None = None
    issue_url: str | None = None
    status: str | None = None
    polls: int = 0
    timed_out: bool = False
