"""`github_approve_pr`: list a pull request's commits and approve it.

Usage:
    ```bash
    github_approve_pr octo/app 42
    github_approve_pr octo/app 42 -m "Reviewed, ship it"
    github_approve_pr octo/app 42 --dry-run
    ```
"""
from __future__ import annotations
from typing import Any, Dict, List, Optional
import sys

from pydantic import ValidationError

from ..core.errors import GitHubError
from ..core.models import PullRequestReview
from ..core.output import print_json
from .common import build_parser, make_client, report_error, setup_logging, split_repo


def format_commit(commit: Dict[str, Any]) -> str:
    """Return ``<short sha> <author>: <subject>`` for a pull request commit."""
    sha = (commit.get("sha") or "")[:7]
    info = commit.get("commit") or {}
    author = (commit.get("author") or {}).get("login") or (info.get("author") or {}).get("name") or "unknown"
    subject = (info.get("message") or "").splitlines()[0] if info.get("message") else ""
    return f"{sha} {author}: {subject}"


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for `github_approve_pr`."""
    p = build_parser("github_approve_pr", "Show a pull request's commits and submit an approving review.")
    p.add_argument("repo", help="Repository as OWNER/REPO")
    p.add_argument("number", type=int, help="Pull request number")
    p.add_argument("-m", "--message", default="", help="Review comment")
    p.add_argument("-n", "--dry-run", action="store_true", help="Print the review instead of submitting it")

    args = p.parse_args(argv)
    setup_logging(args.verbose)
    owner, repo = split_repo(p, args.repo)
    if args.number < 1:
        p.error("pull request number must be positive")

    gh = make_client(p, args)
    base = f"/repos/{owner}/{repo}/pulls/{args.number}"
    try:
        pr = gh.get(base)
        commits = gh.get(f"{base}/commits", {"per_page": 100}, follow=True) or []

        print(f"#{pr.get('number', args.number)} {pr.get('title', '')}")
        print(f"{pr.get('html_url', '')}")
        print(f"{len(commits)} commit(s):")
        for c in commits:
            print(f"  {format_commit(c)}")

        if pr.get("merged") or pr.get("state") != "open":
            print(f"error: pull request #{args.number} is not open", file=sys.stderr)
            return 1

        try:
            review = PullRequestReview(event="APPROVE", body=args.message,
                                       commit_id=(pr.get("head") or {}).get("sha"))
        except ValidationError as e:
            p.error(str(e))

        if args.dry_run:
            print_json({"url": gh.url_for(f"{base}/reviews"), "payload": review.payload()})
            return 0

        result = gh.post(f"{base}/reviews", review.payload())
    except GitHubError as e:
        return report_error(e)

    print(f"approved #{args.number} (review {(result or {}).get('id', '?')})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
