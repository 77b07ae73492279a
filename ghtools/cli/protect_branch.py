"""`github_protect_branch`: set, show or remove branch protection.

Usage:
    ```bash
    # Protect the default branch: CI must pass, two approvals, admins included
    github_protect_branch octo/app --status-check ci/build --strict --reviews 2 --enforce-admins

    # Only allow the release team to push to a branch
    github_protect_branch octo/app release --reviews 0 --restrict-team release-eng

    github_protect_branch octo/app main --show
    github_protect_branch octo/app main --remove
    ```
"""
from __future__ import annotations
from typing import List, Optional
from urllib.parse import quote
import argparse

from pydantic import ValidationError

from ..core.errors import GitHubError
from ..core.models import (
    BranchProtection,
    PushRestrictions,
    RequiredPullRequestReviews,
    RequiredStatusChecks,
)
from ..core.output import print_json
from .common import build_parser, make_client, report_error, setup_logging, split_repo


def build_protection(args: argparse.Namespace) -> BranchProtection:
    """Translate parsed flags into a `BranchProtection` payload.

    Status checks are only required when at least one context is given or
    `--strict` is set. Pull request reviews are disabled with ``--reviews -1``.
    Push restrictions are sent only when a user, team or app is named.
    """
    checks = None
    if args.status_check or args.strict:
        checks = RequiredStatusChecks(strict=args.strict, contexts=args.status_check)

    reviews = None
    if args.reviews >= 0:
        reviews = RequiredPullRequestReviews(
            dismiss_stale_reviews=args.dismiss_stale,
            require_code_owner_reviews=args.code_owners,
            required_approving_review_count=args.reviews,
        )

    restrictions = None
    if args.restrict_user or args.restrict_team or args.restrict_app:
        restrictions = PushRestrictions(users=args.restrict_user, teams=args.restrict_team,
                                        apps=args.restrict_app)

    return BranchProtection(
        required_status_checks=checks,
        enforce_admins=args.enforce_admins,
        required_pull_request_reviews=reviews,
        restrictions=restrictions,
        required_linear_history=args.linear_history,
        allow_force_pushes=args.allow_force_pushes,
        allow_deletions=args.allow_deletions,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for `github_protect_branch`."""
    p = build_parser("github_protect_branch", "Configure protection rules for a repository branch.")
    p.add_argument("repo", help="Repository as OWNER/REPO")
    p.add_argument("branch", nargs="?", help="Branch to protect (default: the repository's default branch)")

    rules = p.add_argument_group("rules")
    rules.add_argument("-s", "--status-check", action="append", default=[], metavar="CONTEXT",
                       help="Require this status check to pass (repeatable)")
    rules.add_argument("--strict", action="store_true", help="Require branches to be up to date before merging")
    rules.add_argument("-r", "--reviews", type=int, default=1,
                       help="Required approving reviews, 0-6; -1 disables review requirements (default: 1)")
    rules.add_argument("--dismiss-stale", action="store_true", help="Dismiss approvals when new commits are pushed")
    rules.add_argument("--code-owners", action="store_true", help="Require review from code owners")
    rules.add_argument("--enforce-admins", action="store_true", help="Apply the rules to administrators too")
    rules.add_argument("--linear-history", action="store_true", help="Forbid merge commits")
    rules.add_argument("--allow-force-pushes", action="store_true", help="Allow force pushes")
    rules.add_argument("--allow-deletions", action="store_true", help="Allow deleting the branch")
    rules.add_argument("--restrict-user", action="append", default=[], metavar="LOGIN",
                       help="Only allow this user to push (repeatable; organization repos only)")
    rules.add_argument("--restrict-team", action="append", default=[], metavar="SLUG",
                       help="Only allow this team to push (repeatable; organization repos only)")
    rules.add_argument("--restrict-app", action="append", default=[], metavar="SLUG",
                       help="Only allow this app to push (repeatable; organization repos only)")

    mode = p.add_mutually_exclusive_group()
    mode.add_argument("--show", action="store_true", help="Print the current protection and exit")
    mode.add_argument("--remove", action="store_true", help="Remove protection from the branch")
    mode.add_argument("-n", "--dry-run", action="store_true", help="Print the payload instead of sending it")

    args = p.parse_args(argv)
    setup_logging(args.verbose)
    owner, repo = split_repo(p, args.repo)
    protection = None
    if not (args.show or args.remove):
        if args.reviews < -1:
            p.error("--reviews must be -1 or between 0 and 6")
        try:
            protection = build_protection(args)
        except ValidationError as e:
            p.error(str(e))

    gh = make_client(p, args)
    try:
        branch = args.branch or (gh.get(f"/repos/{owner}/{repo}") or {}).get("default_branch")
        if not branch:
            p.error(f"could not determine the default branch of {owner}/{repo}")
        path = f"/repos/{owner}/{repo}/branches/{quote(branch, safe='')}/protection"

        if args.show:
            print_json(gh.get(path))
        elif args.remove:
            gh.delete(path)
            print(f"removed protection from {owner}/{repo}:{branch}")
        elif args.dry_run:
            print_json({"url": gh.url_for(path), "payload": protection.payload()})
        else:
            gh.put(path, protection.payload())
            print(f"protected {owner}/{repo}:{branch}")
    except GitHubError as e:
        return report_error(e)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
