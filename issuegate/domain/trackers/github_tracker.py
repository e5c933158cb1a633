"""GitHub issue tracker - REST v3 API over requests."""

import logging
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from issuegate.domain.constants import COMMENTS_PAGE_SIZE, DEFAULT_API_URL
from issuegate.domain.errors import IssueTrackerError
from issuegate.domain.models.comment import Comment
from issuegate.domain.models.gate_request import GateIssue, RepoCoordinates
from issuegate.domain.trackers.issue_tracker import IssueTracker

logger = logging.getLogger(__name__)

_RETRY_STATUSES = (429, 500, 502, 503, 504)


def _build_session(token: str | None, retries: int) -> requests.Session:
    session = requests.Session()
    session.headers.update(
        {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
    )
    if token:
        session.headers["Authorization"] = f"Bearer {token}"

    # Only reads are retried; creating issues or comments twice is visible.
    retry = Retry(
        total=retries,
        backoff_factor=1.0,
        status_forcelist=_RETRY_STATUSES,
        allowed_methods=frozenset({"GET"}),
        raise_on_status=False,
    )
    session.mount("https://", HTTPAdapter(max_retries=retry))
    session.mount("http://", HTTPAdapter(max_retries=retry))
    return session


def _error_detail(response: requests.Response) -> str:
    """Extract GitHub's error message, falling back to the raw body."""
    try:
        data = response.json()
    except ValueError:
        return response.text[:200].strip()
    if isinstance(data, dict):
        return str(data.get("message", ""))
    return ""


class GitHubIssueTracker(IssueTracker):
    """Issue tracker backed by the GitHub REST API.

    Args:
        token: API token (GITHUB_TOKEN). Anonymous access only works for reads
            on public repositories.
        api_url: API base URL; GitHub Enterprise uses ``https://host/api/v3``.
        timeout: Per-request timeout in seconds.
        retries: Retry budget for transient read failures.
        session: Pre-built session (tests inject a mock here).
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        retries: int = 3,
        session: requests.Session | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._session = session if session is not None else _build_session(token, retries)

    def _issues_url(self, repo: RepoCoordinates) -> str:
        return f"{self._api_url}/repos/{repo.owner}/{repo.name}/issues"

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        logger.debug(f"{method} {url}")
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as e:
            raise IssueTrackerError(f"{method} {url} failed: {e}") from e

        if not response.ok:
            message = f"{method} {url} failed"
            detail = _error_detail(response)
            if detail:
                message = f"{message}: {detail}"
            raise IssueTrackerError(message, status_code=response.status_code)
        return response

    def create_issue(
        self,
        repo: RepoCoordinates,
        *,
        title: str,
        body: str,
        assignees: list[str],
    ) -> GateIssue:
        response = self._request(
            "POST",
            self._issues_url(repo),
            json={"title": title, "body": body, "assignees": assignees},
        )
        data = response.json()
        issue = GateIssue(number=data["number"], url=data.get("html_url"))
        logger.info(f"Issue created: {issue.url or issue.number}")
        return issue

    def list_comments(self, repo: RepoCoordinates, issue_number: int) -> list[Comment]:
        url: str | None = f"{self._issues_url(repo)}/{issue_number}/comments"
        params: dict[str, Any] | None = {"per_page": COMMENTS_PAGE_SIZE}
        comments: list[Comment] = []

        while url:
            response = self._request("GET", url, params=params)
            for item in response.json():
                user = item.get("user") or {}
                comments.append(
                    Comment(
                        author=user.get("login", ""),
                        body=item.get("body") or "",
                        order=len(comments),
                    )
                )
            # The next link already carries the query string.
            url = response.links.get("next", {}).get("url")
            params = None

        return comments

    def add_comment(self, repo: RepoCoordinates, issue_number: int, body: str) -> None:
        self._request(
            "POST",
            f"{self._issues_url(repo)}/{issue_number}/comments",
            json={"body": body},
        )

    def close_issue(self, repo: RepoCoordinates, issue_number: int) -> None:
        self._request(
            "PATCH",
            f"{self._issues_url(repo)}/{issue_number}",
            json={"state": "closed"},
        )
