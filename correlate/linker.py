"""
Issue-to-fix linking.
A closed issue counts as fixed when its timeline holds a "referenced" event, i.e. a commit mentioned it.
The first such event wins; issues closed without one are dropped.
"""
import logging
from datetime import datetime
from typing import List, Dict, Optional, Iterable
from normalize.models import ResolvedIssue
from normalize.util import first_line, format_timestamp, login_of
from ingest.github import repo_path

logger = logging.getLogger(__name__)

REFERENCED_EVENT = "referenced"


def find_referenced_event(events: List[Dict]) -> Optional[Dict]:
    """Return the first event recording a commit reference, or None.

    Events without a commit or without an actor (deleted account) cannot be resolved and are skipped.
    """
    for ev in events:
        if ev.get("event") == REFERENCED_EVENT and ev.get("commit_url") and login_of(ev.get("actor")):
            return ev
    return None


def _is_candidate(issue: Dict, blacklist: set) -> bool:
    # the issues listing also returns pull requests
    if "pull_request" in issue:
        return False
    reporter = login_of(issue.get("user"))
    return reporter is not None and reporter not in blacklist


def resolve_issue(fetcher, users, repository_path: str, issue: Dict) -> Optional[ResolvedIssue]:
    """Resolve one closed issue to its fix, or None when nothing referenced it."""
    events = fetcher.fetch(repo_path(repository_path, "issues", issue["number"], "events"))
    referenced = find_referenced_event(events)
    if referenced is None:
        logger.debug("%s#%s closed without a referencing commit", repository_path, issue["number"])
        return None

    commit = fetcher.fetch(referenced["commit_url"])
    return ResolvedIssue(
        title=issue.get("title") or "",
        url=issue["html_url"],
        reporter=users.resolve_embedded(issue["user"]),
        fix_title=first_line(commit["commit"]["message"]),
        fix_author=users.resolve_embedded(referenced["actor"]),
    )


def resolve_issues(
    fetcher,
    users,
    repository_path: str,
    since: datetime,
    labels: Iterable[str] = (),
    user_blacklist: Iterable[str] = (),
    executor=None,
) -> List[ResolvedIssue]:
    """
    Return the closed issues in the window that were fixed by a referencing commit.

    Parameters:
        fetcher: GitHubFetcher (or anything with a compatible fetch()).
        users: UserResolver used for reporters and fix authors.
        repository_path: 'owner/name'.
        since: lower bound of the window, passed to the API.
        labels: issue labels to whitelist.
        user_blacklist: reporters whose issues are ignored.
        executor: optional concurrent.futures executor; per-issue lookups then run concurrently.

    Output keeps the order of the issues listing regardless of executor.
    """
    blacklist = set(user_blacklist)
    params = {"state": "closed", "since": format_timestamp(since), "labels": ",".join(labels)}
    raw_issues = fetcher.fetch(repo_path(repository_path, "issues"), params=params)
    candidates = [i for i in raw_issues if _is_candidate(i, blacklist)]

    def _resolve(issue: Dict) -> Optional[ResolvedIssue]:
        return resolve_issue(fetcher, users, repository_path, issue)

    mapper = executor.map if executor is not None else map
    resolved = [r for r in mapper(_resolve, candidates) if r is not None]
    logger.debug("%s: %d of %d closed issues linked to a fix", repository_path, len(resolved), len(candidates))
    return resolved
