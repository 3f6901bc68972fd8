"""
Commit counting per author within the time window.
"""
import logging
from datetime import datetime
from typing import List, Dict, Any, Iterable
from normalize.models import AuthorCount
from normalize.util import format_timestamp, login_of
from ingest.github import repo_path
from .utils import bucket_for, rank_author_counts

logger = logging.getLogger(__name__)


def tally_commits(commits: List[Dict[str, Any]], important_users: Iterable[str], user_blacklist: Iterable[str]) -> Dict[str, int]:
    """Count commits per bucket.

    A commit is dropped only when its author login is blacklisted; blacklisted authors never
    fall back into the others bucket. Commits without an associated account are never blacklisted.
    """
    important = set(important_users)
    blacklist = set(user_blacklist)
    tally: Dict[str, int] = {}
    for commit in commits:
        login = login_of(commit.get("author"))
        if login is not None and login in blacklist:
            continue
        bucket = bucket_for(login, important)
        tally[bucket] = tally.get(bucket, 0) + 1
    return tally


def count_commits(
    fetcher,
    repository_path: str,
    since: datetime,
    important_users: Iterable[str] = (),
    user_blacklist: Iterable[str] = (),
) -> List[AuthorCount]:
    """Fetch the commits made since `since` and return the ranked per-author counts."""
    commits = fetcher.fetch(repo_path(repository_path, "commits"), params={"since": format_timestamp(since)})
    tally = tally_commits(commits, important_users, user_blacklist)
    ranked = rank_author_counts(tally)
    logger.debug("%s: %d commits counted in %d buckets", repository_path, sum(tally.values()), len(ranked))
    return ranked
