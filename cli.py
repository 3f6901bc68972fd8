"""
CLI entry point for the activity digest. Wires the pipeline: config -> aggregate -> render -> output
"""

import argparse
import logging
import sys
from config import load_config, ConfigError
from aggregator import aggregate
from ingest.github import GitHubFetcher, GitHubHTTPError
from normalize.util import window_start
from report.renderer import render, read_template, write_outputs

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2


def setup_logging(verbose: bool = False):
    """Configure the root logger once; logs go to stderr so stdout stays pure JSON."""
    root = logging.getLogger()
    for h in root.handlers[:]:
        root.removeHandler(h)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(name)s - %(message)s', datefmt='%Y-%m-%d %H:%M:%S'))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    # keep urllib3 connection chatter out of verbose output
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Digest of recent fixes, merged pulls, releases and commits across GitHub repositories")
    parser.add_argument("-d", "--days", type=_positive_int, default=7, help="Interval in days (default: 7)")
    parser.add_argument("-c", "--config", type=str, default=None, help="Path to config.json (default: $DIGEST_CONFIG or ./config.json)")
    parser.add_argument("--json-out", type=str, default="", help="Also write the raw aggregate JSON to this file")
    parser.add_argument("--markdown-out", type=str, default="", help="Write the rendered Markdown digest to this file")
    parser.add_argument("--template", type=str, default="", help="Markdown file prepended to the rendered digest")
    parser.add_argument("-w", "--workers", type=_positive_int, default=1, help="Concurrent lookups per repository (default: 1, sequential)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every API call")
    return parser


def _report_failure(exc: Exception):
    """Full detail to the log, a short explanation (and the API response body, if any) to stderr."""
    logger.error("Digest run failed", exc_info=exc)
    print(f"Error: {exc}", file=sys.stderr)
    if isinstance(exc, GitHubHTTPError):
        print("The GitHub API rejected a request; check the access token and repository names.", file=sys.stderr)
        print(f"Response body: {exc.response_body}", file=sys.stderr)
    else:
        print("The digest could not be generated; no output was written.", file=sys.stderr)


def run(args) -> int:
    """Execute config -> aggregate -> render -> output and return the process exit status."""
    try:
        config = load_config(args.config)
        template = read_template(args.template) if args.template else ""
    except (ConfigError, OSError) as exc:
        logger.error("Invalid configuration: %s", exc)
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIG

    since = window_start(args.days)
    logger.info("Collecting activity since %s for %d repositories", since.isoformat(), len(config.repositories))
    try:
        with GitHubFetcher(token=config.access_token) as fetcher:
            report = aggregate(config, since, fetcher=fetcher, workers=args.workers)
        raw_json, markdown = render(report, template)
        for path in write_outputs(raw_json, markdown, args.json_out, args.markdown_out):
            logger.info("Wrote %s", path)
    except Exception as exc:
        _report_failure(exc)
        return EXIT_FAILURE

    print(raw_json)
    return EXIT_OK


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
