"""Argument handling shared by every ghtools command."""
from __future__ import annotations
from typing import Tuple
import argparse
import logging
import sys

from ..core.client import GitHubClient
from ..core.config import load_settings
from ..core.errors import ConfigurationError, GitHubError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def build_parser(prog: str, description: str) -> argparse.ArgumentParser:
    """Return a parser carrying the connection and logging flags."""
    p = argparse.ArgumentParser(prog=prog, description=description)
    conn = p.add_argument_group("connection")
    conn.add_argument("--host", help="GitHub host, e.g. github.com or github.example.com (env: GITHUB_HOST)")
    conn.add_argument("--token", help="Personal access token (env: GITHUB_TOKEN)")
    conn.add_argument("--user", help="Username for basic auth; password from GITHUB_PASSWORD")
    conn.add_argument("--accept", help="Accept header (default: application/vnd.github+json)")
    conn.add_argument("--timeout", type=float, help="Request timeout in seconds (default: 20)")
    conn.add_argument("--config", help="Path to config.toml (env: GHTOOLS_CONFIG)")
    p.add_argument("-v", "--verbose", action="store_true", help="Log requests to stderr")
    return p


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format=LOG_FORMAT, stream=sys.stderr)


def make_client(parser: argparse.ArgumentParser, args: argparse.Namespace) -> GitHubClient:
    """Build a client from settings overlaid with command-line flags.

    Missing host or credentials end the program with a usage error.
    """
    try:
        s = load_settings(args.config)
    except ConfigurationError as e:
        parser.error(str(e))

    # CLI > env/config > code defaults
    s.host = args.host or s.host
    if args.token:
        s.token = args.token
    if args.user:
        s.user = args.user
    s.accept = args.accept or s.accept
    if args.timeout is not None:
        s.timeout = args.timeout

    if not s.host:
        parser.error("no GitHub host given (use --host or GITHUB_HOST)")
    if not s.token and not (s.user and s.password):
        parser.error("no credentials given (use --token or GITHUB_TOKEN, or --user with GITHUB_PASSWORD)")
    try:
        return GitHubClient.from_settings(s)
    except ConfigurationError as e:
        parser.error(str(e))


def split_repo(parser: argparse.ArgumentParser, value: str) -> Tuple[str, str]:
    """Split an ``OWNER/REPO`` argument, exiting with a usage error if malformed."""
    owner, sep, repo = value.strip().partition("/")
    if not sep or not owner or not repo or "/" in repo:
        parser.error(f"repository must look like OWNER/REPO, got {value!r}")
    return owner, repo


def report_error(err: GitHubError) -> int:
    """Print `err` to stderr and return the failure exit status."""
    print(f"error: {err}", file=sys.stderr)
    return 1
