"""Tests for GitHubIssueTracker."""

from unittest.mock import MagicMock

import pytest
import requests

from issuegate.domain.errors import IssueTrackerError
from issuegate.domain.models.gate_request import RepoCoordinates
from issuegate.domain.trackers.github_tracker import GitHubIssueTracker, _build_session
from issuegate.domain.trackers.issue_tracker import IssueTracker

API = "https://api.github.com"


def _response(status_code: int = 200, json_data=None, links=None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.json.return_value = json_data
    response.links = links or {}
    response.text = text
    return response


@pytest.fixture
def session() -> MagicMock:
    return MagicMock()


@pytest.fixture
def tracker(session) -> GitHubIssueTracker:
    return GitHubIssueTracker(session=session, timeout=5)


@pytest.fixture
def repo() -> RepoCoordinates:
    return RepoCoordinates(owner="acme", name="deploy")


def test_is_issue_tracker() -> None:
    assert issubclass(GitHubIssueTracker, IssueTracker)


def test_session_headers() -> None:
    session = _build_session("tok123", retries=2)

    assert session.headers["Authorization"] == "Bearer tok123"
    assert session.headers["Accept"] == "application/vnd.github+json"


def test_session_without_token_is_anonymous() -> None:
    session = _build_session(None, retries=2)

    assert "Authorization" not in session.headers


def test_create_issue(tracker, session, repo) -> None:
    session.request.return_value = _response(
        201, {"number": 17, "html_url": "https://github.com/acme/deploy/issues/17"}
    )

    issue = tracker.create_issue(repo, title="T", body="B", assignees=["alice"])

    assert issue.number == 17
    assert issue.url == "https://github.com/acme/deploy/issues/17"
    session.request.assert_called_once_with(
        "POST",
        f"{API}/repos/acme/deploy/issues",
        timeout=5,
        json={"title": "T", "body": "B", "assignees": ["alice"]},
    )


def test_list_comments_follows_pagination(tracker, session, repo) -> None:
    next_url = f"{API}/repositories/1/issues/3/comments?per_page=100&page=2"
    session.request.side_effect = [
        _response(
            200,
            [{"user": {"login": "alice"}, "body": "hmm"}, {"user": {"login": "bob"}, "body": "lgtm"}],
            links={"next": {"url": next_url}},
        ),
        _response(200, [{"user": {"login": "carol"}, "body": None}]),
    ]

    comments = tracker.list_comments(repo, 3)

    assert [(c.author, c.body, c.order) for c in comments] == [
        ("alice", "hmm", 0),
        ("bob", "lgtm", 1),
        ("carol", "", 2),
    ]
    first, second = session.request.call_args_list
    assert first.args == ("GET", f"{API}/repos/acme/deploy/issues/3/comments")
    assert first.kwargs["params"] == {"per_page": 100}
    assert second.args == ("GET", next_url)
    assert second.kwargs["params"] is None


def test_add_comment(tracker, session, repo) -> None:
    session.request.return_value = _response(201, {})

    tracker.add_comment(repo, 3, "done")

    session.request.assert_called_once_with(
        "POST", f"{API}/repos/acme/deploy/issues/3/comments", timeout=5, json={"body": "done"}
    )


def test_close_issue(tracker, session, repo) -> None:
    session.request.return_value = _response(200, {})

    tracker.close_issue(repo, 3)

    session.request.assert_called_once_with(
        "PATCH", f"{API}/repos/acme/deploy/issues/3", timeout=5, json={"state": "closed"}
    )


def test_error_status_raises_with_message(tracker, session, repo) -> None:
    session.request.return_value = _response(404, {"message": "Not Found"})

    with pytest.raises(IssueTrackerError) as exc_info:
        tracker.list_comments(repo, 3)

    assert exc_info.value.status_code == 404
    assert "Not Found" in str(exc_info.value)
    assert "(HTTP 404)" in str(exc_info.value)


def test_error_with_non_json_body(tracker, session, repo) -> None:
    response = _response(502, text="Bad gateway")
    response.json.side_effect = ValueError("no json")
    session.request.return_value = response

    with pytest.raises(IssueTrackerError, match="Bad gateway"):
        tracker.close_issue(repo, 3)


def test_transport_error_wrapped(tracker, session, repo) -> None:
    session.request.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(IssueTrackerError, match="connection refused") as exc_info:
        tracker.list_comments(repo, 3)

    assert exc_info.value.status_code is None


def test_custom_api_url(session, repo) -> None:
    tracker = GitHubIssueTracker(session=session, api_url="https://ghe.example.com/api/v3/")
    session.request.return_value = _response(200, [])

    tracker.list_comments(repo, 1)

    assert session.request.call_args.args[1] == "https://ghe.example.com/api/v3/repos/acme/deploy/issues/1/comments"
