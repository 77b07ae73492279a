"""`github_api`: issue a raw request against the GitHub REST API.

Usage:
    ```bash
    # GET with every page concatenated
    github_api /orgs/octo/repos --all -f per_page=100

    # JSON body from the command line, a file, or stdin
    github_api -X POST /user/repos -d '{"name": "scratch"}'
    github_api -X PATCH /repos/octo/scratch -d @settings.json
    echo '{"body": "hi"}' | github_api -X POST /repos/octo/app/issues/1/comments -d -

    # Individual fields; true/false/null and integers are typed
    github_api -X PUT /repos/octo/app/topics -d '{"names": ["cli"]}' -f private=true
    ```
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional
import json
import sys

from ..core.client import METHODS
from ..core.errors import GitHubError
from ..core.output import print_json
from .common import build_parser, make_client, report_error, setup_logging

_LITERALS = {"true": True, "false": False, "null": None}


def parse_field(text: str) -> tuple:
    """Split a ``key=value`` field, converting JSON literals and integers."""
    key, sep, raw = text.partition("=")
    if not sep or not key:
        raise ValueError(f"field must look like key=value, got {text!r}")
    if raw in _LITERALS:
        return key, _LITERALS[raw]
    try:
        return key, int(raw)
    except ValueError:
        return key, raw


def read_data(value: str) -> Dict[str, Any]:
    """Load a JSON object from a literal string, ``@file`` or ``-`` (stdin)."""
    if value == "-":
        text = sys.stdin.read()
    elif value.startswith("@"):
        with open(value[1:], "r", encoding="utf-8") as f:
            text = f.read()
    else:
        text = value
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("request data must be a JSON object")
    return data


def build_params(data: Optional[str], fields: List[str]) -> Optional[Dict[str, Any]]:
    """Merge ``--data`` and ``--field`` values; fields win on key clashes."""
    if data is None and not fields:
        return None
    params: Dict[str, Any] = read_data(data) if data is not None else {}
    for f in fields:
        key, value = parse_field(f)
        params[key] = value
    return params


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for `github_api`.

    Returns:
        0 on success, 1 on API or response errors. Usage errors exit with 2.
    """
    p = build_parser("github_api", "Send a request to the GitHub REST API and print the JSON result.")
    p.add_argument("path", help="API path, e.g. /user/repos, or a full URL")
    p.add_argument("-X", "--method", default="GET", help="HTTP method (default: GET)")
    p.add_argument("-d", "--data", help="JSON object body/params: literal, @file, or - for stdin")
    p.add_argument("-f", "--field", action="append", default=[], metavar="KEY=VALUE",
                   help="Add a parameter (repeatable)")
    p.add_argument("-a", "--all", action="store_true", help="Follow Link pagination and concatenate results")
    p.add_argument("--max-pages", type=int, help="Stop following after this many pages (requires --all)")

    args = p.parse_args(argv)
    setup_logging(args.verbose)

    method = (args.method or "").strip().upper()
    if not method:
        p.error("no HTTP method given")
    if method not in METHODS:
        p.error(f"unsupported HTTP method: {args.method}")
    if args.max_pages is not None and not args.all:
        p.error("--max-pages requires --all")
    if args.max_pages is not None and args.max_pages < 1:
        p.error("--max-pages must be at least 1")

    try:
        params = build_params(args.data, args.field)
    except (OSError, ValueError) as e:
        p.error(f"bad request data: {e}")

    gh = make_client(p, args)
    try:
        result = gh.command(method, args.path, params, follow=args.all, max_pages=args.max_pages)
    except GitHubError as e:
        return report_error(e)

    print_json(result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
