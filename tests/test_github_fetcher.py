import unittest
from unittest.mock import Mock

from ingest.github import GitHubFetcher, GitHubHTTPError, repo_path


def _session(status=200, body=None, text=''):
    resp = Mock()
    resp.status_code = status
    resp.text = text
    if isinstance(body, Exception):
        resp.json.side_effect = body
    else:
        resp.json.return_value = body
    session = Mock()
    session.get.return_value = resp
    return session


class TestGitHubFetcher(unittest.TestCase):
    def test_relative_path_joins_base_url(self):
        session = _session(body=[{'a': 1}])
        fetcher = GitHubFetcher(token='secret', session=session)
        self.assertEqual(fetcher.fetch('/repos/org/repo/issues', params={'state': 'closed'}), [{'a': 1}])
        args, kwargs = session.get.call_args
        self.assertEqual(args[0], 'https://api.github.com/repos/org/repo/issues')
        self.assertEqual(kwargs['params'], {'state': 'closed'})
        self.assertEqual(kwargs['headers']['Authorization'], 'token secret')

    def test_absolute_url_is_used_verbatim(self):
        session = _session(body={})
        GitHubFetcher(session=session).fetch('https://api.github.com/repos/o/r/commits/abc')
        self.assertEqual(session.get.call_args[0][0], 'https://api.github.com/repos/o/r/commits/abc')

    def test_no_token_no_authorization_header(self):
        session = _session(body={})
        GitHubFetcher(token=None, session=session).fetch('/users/alice')
        self.assertNotIn('Authorization', session.get.call_args[1]['headers'])

    def test_error_status_raises_with_body(self):
        session = _session(status=404, body={'message': 'Not Found'})
        with self.assertRaises(GitHubHTTPError) as ctx:
            GitHubFetcher(session=session).fetch('/repos/org/missing/issues')
        self.assertEqual(ctx.exception.status, 404)
        self.assertEqual(ctx.exception.url, 'https://api.github.com/repos/org/missing/issues')
        self.assertEqual(ctx.exception.response_body, {'message': 'Not Found'})

    def test_error_with_non_json_body(self):
        session = _session(status=502, body=ValueError('no json'), text='Bad gateway')
        with self.assertRaises(GitHubHTTPError) as ctx:
            GitHubFetcher(session=session).fetch('/users/x')
        self.assertEqual(ctx.exception.response_body, 'Bad gateway')

    def test_repo_path(self):
        self.assertEqual(repo_path('org/repo', 'issues', 5, 'events'), '/repos/org/repo/issues/5/events')
        self.assertEqual(repo_path('org/repo'), '/repos/org/repo')


if __name__ == '__main__':
    unittest.main()
