from datetime import datetime, timezone

from conftest import FakeFetcher, embedded
from normalize.models import AuthorCount, OTHERS_BUCKET
from scoring.metrics import count_commits, tally_commits
from scoring.utils import bucket_for, rank_author_counts

SINCE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _commits(*logins):
    return [{'sha': str(i), 'author': embedded(l) if l else None} for i, l in enumerate(logins)]


def test_bucket_for():
    assert bucket_for('dave', {'dave'}) == 'dave'
    assert bucket_for('carol', {'dave'}) == OTHERS_BUCKET
    assert bucket_for(None, {'dave'}) == OTHERS_BUCKET


def test_commit_count_scenario(fetcher):
    counts = count_commits(fetcher, 'org/repo', SINCE, important_users=['dave'])
    assert [c.to_dict() for c in counts] == [{'author': '[others]', 'count': 2}, {'author': 'dave', 'count': 1}]
    assert fetcher.calls[0] == ('/repos/org/repo/commits', {'since': '2024-01-01T00:00:00Z'})


def test_blacklisted_authors_are_dropped_not_folded_into_others():
    tally = tally_commits(_commits('bot', 'bot', 'carol', 'dave'), ['dave'], ['bot'])
    assert tally == {OTHERS_BUCKET: 1, 'dave': 1}


def test_bucketing_is_a_partition():
    commits = _commits('a', 'b', None, 'c', 'a', 'bot', None, 'b', 'b')
    tally = tally_commits(commits, ['a', 'b'], ['bot'])
    assert sum(tally.values()) == len(commits) - 1
    assert tally == {'a': 2, 'b': 3, OTHERS_BUCKET: 3}


def test_no_others_entry_when_everyone_is_important():
    ranked = rank_author_counts(tally_commits(_commits('a', 'b', 'b'), ['a', 'b'], []))
    assert ranked == [AuthorCount('b', 2), AuthorCount('a', 1)]


def test_ranking_others_first_then_descending():
    ranked = rank_author_counts({'x': 1, OTHERS_BUCKET: 1, 'y': 5, 'z': 3})
    assert [c.author for c in ranked] == [OTHERS_BUCKET, 'y', 'z', 'x']


def test_ranking_ties_are_stable():
    ranked = rank_author_counts({'x': 2, 'y': 2, 'z': 2})
    assert [c.author for c in ranked] == ['x', 'y', 'z']


def test_empty_commit_list():
    fetcher = FakeFetcher({'/repos/org/repo/commits': []})
    assert count_commits(fetcher, 'org/repo', SINCE, ['dave']) == []
