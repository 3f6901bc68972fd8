"""
Scoring utility functions.
Bucketing and ranking helpers used by scoring.metrics.
"""
from typing import Dict, Iterable, List, Optional
from normalize.models import AuthorCount, OTHERS_BUCKET


def bucket_for(login: Optional[str], important_users: Iterable[str]) -> str:
    """Return the login itself for important users, otherwise the collective others bucket.

    Unassociated commits (no login) always land in the others bucket.
    """
    if login is not None and login in important_users:
        return login
    return OTHERS_BUCKET


def rank_author_counts(tally: Dict[str, int]) -> List[AuthorCount]:
    """
    Turn an author -> count mapping into the ranked output:
    the others bucket first (only when it has commits), then the named authors by count descending.
    Ties keep the mapping's insertion order.
    """
    ranked: List[AuthorCount] = []
    others = tally.get(OTHERS_BUCKET, 0)
    if others > 0:
        ranked.append(AuthorCount(OTHERS_BUCKET, others))
    named = [(author, count) for author, count in tally.items() if author != OTHERS_BUCKET and count > 0]
    named.sort(key=lambda item: item[1], reverse=True)
    ranked.extend(AuthorCount(author, count) for author, count in named)
    return ranked
