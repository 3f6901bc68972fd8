"""
Merged pull requests within the time window.
Only the first page of closed pulls is read; very active repositories may be truncated.
"""
import logging
from datetime import datetime
from typing import List, Dict, Any, Iterable
from normalize.models import ResolvedPull
from normalize.util import is_after, login_of
from ingest.github import repo_path

logger = logging.getLogger(__name__)


def _pull_passes_filters(pull: Dict[str, Any], since: datetime, user_blacklist: Iterable[str]) -> bool:
    author = login_of(pull.get("user"))
    if author is None or author in user_blacklist:
        return False
    return is_after(pull.get("merged_at"), since)


def resolve_pulls(fetcher, users, repository_path: str, since: datetime, user_blacklist: Iterable[str] = (), executor=None) -> List[ResolvedPull]:
    """Return pulls merged strictly after `since` whose author is not blacklisted, in API order."""
    blacklist = set(user_blacklist)
    raw_pulls = fetcher.fetch(repo_path(repository_path, "pulls"), params={"state": "closed"})
    kept = [p for p in raw_pulls if _pull_passes_filters(p, since, blacklist)]
    logger.debug("%s: %d of %d closed pulls merged in window", repository_path, len(kept), len(raw_pulls))

    def _resolve(pull: Dict[str, Any]) -> ResolvedPull:
        return ResolvedPull(
            title=pull.get("title") or "",
            url=pull["html_url"],
            author=users.resolve_embedded(pull["user"]),
        )

    mapper = executor.map if executor is not None else map
    return list(mapper(_resolve, kept))
