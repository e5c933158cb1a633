from issuegate.domain.trackers.issue_tracker import IssueTracker
from issuegate.domain.trackers.github_tracker import GitHubIssueTracker

__all__ = [
    "IssueTracker",
    "GitHubIssueTracker",
]
