import copy
import sys
import os
import threading

import pytest

# Add project root to sys.path so tests can import top-level modules like 'ingest', 'scoring', 'report', etc.
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from ingest.github import GitHubHTTPError  # noqa: E402


class FakeFetcher:
    """Serves canned JSON keyed by path (or absolute URL); unknown paths answer 404."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []
        self._lock = threading.Lock()

    def fetch(self, path_or_url, params=None):
        with self._lock:
            self.calls.append((path_or_url, dict(params or {})))
        if path_or_url not in self.responses:
            raise GitHubHTTPError(404, path_or_url, {"message": "Not Found"})
        return copy.deepcopy(self.responses[path_or_url])

    def paths(self):
        return [p for p, _ in self.calls]


def gh_user(login, name=None):
    return {"login": login, "name": name, "html_url": f"https://github.com/{login}"}


def embedded(login):
    return {"login": login, "html_url": f"https://github.com/{login}"}


def repo_responses(repo="org/repo"):
    """A small but complete API surface for one repository."""
    base = f"/repos/{repo}"
    commit_url = f"https://api.github.com{base}/commits/abc123"
    return {
        f"{base}/issues": [
            {"number": 5, "title": "Bug A", "html_url": f"https://github.com/{repo}/issues/5", "user": embedded("alice")},
            {"number": 6, "title": "Closed by hand", "html_url": f"https://github.com/{repo}/issues/6", "user": embedded("alice")},
            {"number": 7, "title": "A pull", "html_url": f"https://github.com/{repo}/pull/7", "user": embedded("bob"), "pull_request": {"url": "x"}},
        ],
        f"{base}/issues/5/events": [
            {"event": "labeled", "actor": embedded("alice")},
            {"event": "referenced", "actor": embedded("bob"), "commit_url": commit_url},
            {"event": "closed", "actor": embedded("bob")},
        ],
        f"{base}/issues/6/events": [{"event": "closed", "actor": embedded("alice")}],
        commit_url: {"sha": "abc123", "commit": {"message": "Fix bug A\n\nDetails"}},
        f"{base}/pulls": [
            {"title": "Add feature", "html_url": f"https://github.com/{repo}/pull/8", "user": embedded("carol"), "merged_at": "2024-01-03T10:00:00Z"},
            {"title": "Rejected", "html_url": f"https://github.com/{repo}/pull/9", "user": embedded("carol"), "merged_at": None},
        ],
        f"{base}/releases": [
            {"name": "v1.0", "tag_name": "v1.0", "html_url": f"https://github.com/{repo}/releases/v1.0", "published_at": "2024-01-04T00:00:00Z"},
        ],
        f"{base}/commits": [
            {"sha": "1", "author": embedded("carol")},
            {"sha": "2", "author": None},
            {"sha": "3", "author": embedded("dave")},
        ],
        "/users/alice": gh_user("alice"),
        "/users/bob": gh_user("bob"),
        "/users/carol": gh_user("carol", "Carol"),
    }


@pytest.fixture
def api():
    return repo_responses()


@pytest.fixture
def fetcher(api):
    return FakeFetcher(api)
