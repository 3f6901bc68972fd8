"""
Aggregation pipeline: run every resolver for each configured repository and build the aggregate report.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Optional
from config import DigestConfig
from correlate.linker import resolve_issues
from ingest.github import GitHubFetcher
from ingest.pulls import resolve_pulls
from ingest.releases import resolve_releases
from ingest.users import UserResolver
from normalize.models import AggregateReport, RepositoryActivity
from scoring.metrics import count_commits

logger = logging.getLogger(__name__)


def build_repository_activity(
    fetcher,
    users: UserResolver,
    config: DigestConfig,
    repository_path: str,
    since: datetime,
    item_pool: Optional[ThreadPoolExecutor] = None,
    stage_pool: Optional[ThreadPoolExecutor] = None,
) -> RepositoryActivity:
    """Resolve issues, pulls, releases and commit counts for one repository.

    With pools supplied, issue and pull resolution run side by side on `stage_pool` and their
    per-item lookups on `item_pool`. Items never submit further work, so the pools cannot starve.
    """
    def _issues():
        return resolve_issues(fetcher, users, repository_path, since, config.labels, config.user_blacklist, executor=item_pool)

    def _pulls():
        return resolve_pulls(fetcher, users, repository_path, since, config.user_blacklist, executor=item_pool)

    if stage_pool is not None:
        issues_future = stage_pool.submit(_issues)
        pulls_future = stage_pool.submit(_pulls)
        issues = issues_future.result()
        pulls = pulls_future.result()
    else:
        issues = _issues()
        pulls = _pulls()

    releases = resolve_releases(fetcher, repository_path, since)
    commit_counts = count_commits(
        fetcher, repository_path, since, config.important_users, config.effective_commit_blacklist
    )
    return RepositoryActivity(issues=issues, pulls=pulls, releases=releases, commit_counts=commit_counts)


def aggregate(config: DigestConfig, since: datetime, fetcher=None, workers: int = 1, users: Optional[UserResolver] = None) -> AggregateReport:
    """
    Build the AggregateReport for every configured repository.

    Repositories are processed one at a time in configuration order, which keeps the report
    order stable and makes progress reporting meaningful. `workers > 1` enables concurrent
    lookups inside each repository. The first failure aborts the run; no partial report is returned.
    """
    owned_fetcher = GitHubFetcher(token=config.access_token) if fetcher is None else None
    fetcher = fetcher or owned_fetcher
    users = users or UserResolver(fetcher)
    report: AggregateReport = {}
    total = len(config.repositories)

    item_pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="digest-item") if workers > 1 else None
    stage_pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="digest-stage") if workers > 1 else None
    try:
        for index, repository_path in enumerate(config.repositories, start=1):
            logger.info("[%d/%d] Resolving activity for %s", index, total, repository_path)
            activity = build_repository_activity(fetcher, users, config, repository_path, since, item_pool, stage_pool)
            logger.info(
                "%s: %d issues, %d pulls, %d releases, %d commits",
                repository_path, len(activity.issues), len(activity.pulls), len(activity.releases), activity.commit_total,
            )
            report[repository_path] = activity
    finally:
        for pool in (stage_pool, item_pool):
            if pool is not None:
                pool.shutdown(wait=True, cancel_futures=True)
        if owned_fetcher is not None:
            owned_fetcher.close()
    return report
