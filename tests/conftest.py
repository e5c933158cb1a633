from pathlib import Path

import pytest

from issuegate.domain.models.comment import Comment
from issuegate.domain.models.gate_request import GateIssue, RepoCoordinates
from issuegate.domain.trackers.issue_tracker import IssueTracker


_ENV_VARS = (
    "GITHUB_TOKEN",
    "GITHUB_REPOSITORY",
    "GITHUB_RUN_ID",
    "GITHUB_ACTOR",
    "GITHUB_SERVER_URL",
    "GITHUB_API_URL",
    "ISSUEGATE_APPROVERS",
    "ISSUEGATE_MINIMUM_APPROVALS",
    "ISSUEGATE_DISALLOWED_USERS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prevent tests from accidentally using the runner's environment.

    If a test needs an env var, it should set it explicitly via monkeypatch.
    """
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point Path.home() at an empty directory so user config is never read."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))
    return home


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from an empty directory so no project config is picked up."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


class FakeIssueTracker(IssueTracker):
    """In-memory issue tracker for tests.

    ``comment_batches`` lets a test script what each successive
    list_comments() call sees; the last batch repeats once exhausted.
    """

    def __init__(self) -> None:
        self.created: list[dict] = []
        self.comments: dict[int, list[Comment]] = {}
        self.comment_batches: list[list[tuple[str, str]]] = []
        self.posted: list[tuple[int, str]] = []
        self.closed: list[int] = []
        self.list_calls = 0
        self._next_number = 1

    def create_issue(
        self,
        repo: RepoCoordinates,
        *,
        title: str,
        body: str,
        assignees: list[str],
    ) -> GateIssue:
        number = self._next_number
        self._next_number += 1
        self.created.append(
            {"repo": repo, "title": title, "body": body, "assignees": assignees, "number": number}
        )
        self.comments[number] = []
        return GateIssue(number=number, url=f"https://github.test/{repo.full_name}/issues/{number}")

    def add_user_comment(self, issue_number: int, author: str, body: str) -> None:
        history = self.comments.setdefault(issue_number, [])
        history.append(Comment(author=author, body=body, order=len(history)))

    def list_comments(self, repo: RepoCoordinates, issue_number: int) -> list[Comment]:
        self.list_calls += 1
        if self.comment_batches:
            batch = self.comment_batches.pop(0) if len(self.comment_batches) > 1 else self.comment_batches[0]
            return [Comment(author=a, body=b, order=i) for i, (a, b) in enumerate(batch)]
        return list(self.comments.get(issue_number, []))

    def add_comment(self, repo: RepoCoordinates, issue_number: int, body: str) -> None:
        self.posted.append((issue_number, body))

    def close_issue(self, repo: RepoCoordinates, issue_number: int) -> None:
        self.closed.append(issue_number)


@pytest.fixture
def fake_tracker() -> FakeIssueTracker:
    return FakeIssueTracker()


@pytest.fixture
def repo() -> RepoCoordinates:
    return RepoCoordinates(owner="acme", name="deploy")
