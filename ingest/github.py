"""
GitHub API fetcher shared by every resolver.
Performs authenticated GET requests and returns the decoded JSON body, or raises GitHubHTTPError.
"""
import logging
from typing import Any, Dict, Optional
import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 30.0


class GitHubHTTPError(RuntimeError):
    """Raised when the API answers with a non-success status. Carries the status, URL and raw body."""

    def __init__(self, status: int, url: str, response_body: Any):
        self.status = status
        self.url = url
        self.response_body = response_body
        super().__init__(f"GitHub API request failed with status {status}: {url}")


class GitHubFetcher:
    """
    Thin requests wrapper for the GitHub REST API.

    Pass a path relative to the base URL with a leading slash (e.g. /repos/owner/name/issues)
    or an absolute URL (e.g. the commit_url of an issue event).
    """

    def __init__(self, token: Optional[str] = None, base_url: str = None, timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        self.token = token
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            self.headers["Authorization"] = f"token {self.token}"

    def url_for(self, path_or_url: str) -> str:
        if path_or_url.startswith("/"):
            return f"{self.base_url}{path_or_url}"
        return path_or_url

    def fetch(self, path_or_url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET a resource and return its JSON body. Non-2xx responses raise GitHubHTTPError."""
        url = self.url_for(path_or_url)
        logger.debug("GET %s params=%s", url, params or {})
        resp = self.session.get(url, headers=self.headers, params=params or {}, timeout=self.timeout)
        if not 200 <= resp.status_code < 300:
            try:
                body = resp.json()
            except ValueError:
                body = resp.text
            raise GitHubHTTPError(resp.status_code, url, body)
        return resp.json()

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def repo_path(repository_path: str, *parts: str) -> str:
    """Build an API path below /repos/{owner}/{name}."""
    suffix = "/".join(str(p) for p in parts)
    return f"/repos/{repository_path}/{suffix}" if suffix else f"/repos/{repository_path}"
