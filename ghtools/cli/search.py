"""`github_search`: search code, repositories or issues.

Usage:
    ```bash
    github_search --org octo --language python "requests.get"
    github_search --type repositories --owner octocat
    github_search --type issues --repo octo/app "is:open label:bug" --limit 20
    ```
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional
import math
import sys

from ..core.errors import GitHubError
from ..core.output import print_json
from .common import build_parser, make_client, report_error, setup_logging

SEARCH_TYPES = ("code", "repositories", "issues")
QUALIFIERS = ("org", "repo", "user", "language", "path", "filename", "extension")
PER_PAGE = 100


def _quote(value: str) -> str:
    return f'"{value}"' if any(c.isspace() for c in value) else value


def build_query(terms: List[str], qualifiers: Dict[str, Optional[str]]) -> str:
    """Join free-text terms and ``name:value`` qualifiers into a search query.

    Args:
        terms: Free-text search terms, passed through as given.
        qualifiers: Qualifier values keyed by name; None values are skipped.

    Returns:
        The ``q`` parameter for the search API.

    Example:
        ```python
        build_query(["TODO"], {"org": "octo", "language": "python"})
        # 'TODO org:octo language:python'
        ```
    """
    parts = [t for t in terms if t.strip()]
    for name in QUALIFIERS:
        value = qualifiers.get(name)
        if value:
            parts.append(f"{name}:{_quote(value)}")
    return " ".join(parts)


def format_item(kind: str, item: Dict[str, Any]) -> str:
    """Return the one-line rendering of a search hit."""
    if kind == "code":
        repo = (item.get("repository") or {}).get("full_name", "")
        return f"{repo}:{item.get('path', '')}"
    if kind == "repositories":
        return item.get("full_name", "")
    return f"{item.get('html_url', '')} {item.get('title', '')}".strip()


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for `github_search`."""
    p = build_parser("github_search", "Search GitHub code, repositories or issues.")
    p.add_argument("terms", nargs="*", help="Free-text search terms")
    p.add_argument("-t", "--type", choices=SEARCH_TYPES, default="code", help="What to search (default: code)")
    p.add_argument("-o", "--org", help="Restrict to an organization")
    p.add_argument("-r", "--repo", help="Restrict to a repository (OWNER/REPO)")
    p.add_argument("--owner", help="Restrict to a user's repositories (user: qualifier)")
    p.add_argument("-l", "--language", help="Restrict to a language")
    p.add_argument("--path", help="Restrict code search to a path")
    p.add_argument("--filename", help="Restrict code search to a filename")
    p.add_argument("--extension", help="Restrict code search to a file extension")
    p.add_argument("--limit", type=int, help="Print at most this many results")
    p.add_argument("--json", action="store_true", help="Print the raw JSON items")

    args = p.parse_args(argv)
    setup_logging(args.verbose)

    query = build_query(args.terms, {
        "org": args.org,
        "repo": args.repo,
        "user": args.owner,
        "language": args.language,
        "path": args.path,
        "filename": args.filename,
        "extension": args.extension,
    })
    if not query:
        p.error("no search terms or qualifiers given")
    if args.limit is not None and args.limit < 1:
        p.error("--limit must be at least 1")

    gh = make_client(p, args)
    max_pages = math.ceil(args.limit / PER_PAGE) if args.limit else None
    try:
        result = gh.get(f"/search/{args.type}", {"q": query, "per_page": PER_PAGE},
                        follow=True, max_pages=max_pages)
    except GitHubError as e:
        return report_error(e)

    items = (result or {}).get("items", [])
    if args.limit:
        items = items[:args.limit]
    if args.json:
        print_json(items)
    else:
        for item in items:
            print(format_item(args.type, item))
    if (result or {}).get("incomplete_results"):
        print("warning: GitHub reported incomplete results", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
