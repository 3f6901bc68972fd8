"""
Releases published within the time window.
"""
import logging
from datetime import datetime
from typing import List
from normalize.models import ResolvedRelease
from normalize.util import is_after
from ingest.github import repo_path

logger = logging.getLogger(__name__)


def resolve_releases(fetcher, repository_path: str, since: datetime) -> List[ResolvedRelease]:
    """Return releases with `published_at` strictly after `since`. Drafts have no publish date and are skipped."""
    raw_releases = fetcher.fetch(repo_path(repository_path, "releases"))
    releases = [
        ResolvedRelease(name=r.get("name") or r.get("tag_name") or "", url=r["html_url"])
        for r in raw_releases
        if is_after(r.get("published_at"), since)
    ]
    logger.debug("%s: %d of %d releases published in window", repository_path, len(releases), len(raw_releases))
    return releases
