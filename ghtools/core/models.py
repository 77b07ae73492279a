"""Pydantic models for the request bodies the ghtools front-ends send.

These only cover the handful of write payloads the bundled commands build.
`github_api` passes arbitrary bodies straight through without a model.
"""
from __future__ import annotations
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

MAX_REQUIRED_REVIEWS = 6


def _clean_names(values: List[str]) -> List[str]:
    seen: List[str] = []
    for v in values:
        v = v.strip()
        if v and v not in seen:
            seen.append(v)
    return seen


class RequiredStatusChecks(BaseModel):
    """Status checks that must pass before merging."""

    strict: bool = False
    contexts: List[str] = Field(default_factory=list)

    @field_validator("contexts")
    @classmethod
    def validate_contexts(cls, v):
        """Strip blanks and duplicates while keeping the given order."""
        return _clean_names(v)


class RequiredPullRequestReviews(BaseModel):
    """Review requirements for pull requests targeting the branch."""

    dismiss_stale_reviews: bool = False
    require_code_owner_reviews: bool = False
    required_approving_review_count: int = 1

    @field_validator("required_approving_review_count")
    @classmethod
    def validate_review_count(cls, v):
        if not 0 <= v <= MAX_REQUIRED_REVIEWS:
            raise ValueError(f"Required review count must be between 0 and {MAX_REQUIRED_REVIEWS}")
        return v


class PushRestrictions(BaseModel):
    """Users, teams and apps allowed to push. Only valid on organization repos."""

    users: List[str] = Field(default_factory=list)
    teams: List[str] = Field(default_factory=list)
    apps: List[str] = Field(default_factory=list)

    @field_validator("users", "teams", "apps")
    @classmethod
    def validate_names(cls, v):
        return _clean_names(v)


class BranchProtection(BaseModel):
    """Body of ``PUT /repos/{owner}/{repo}/branches/{branch}/protection``.

    The endpoint requires `required_status_checks`, `enforce_admins`,
    `required_pull_request_reviews` and `restrictions` to be present, so
    `payload()` keeps explicit nulls.
    """

    required_status_checks: Optional[RequiredStatusChecks] = None
    enforce_admins: bool = False
    required_pull_request_reviews: Optional[RequiredPullRequestReviews] = None
    restrictions: Optional[PushRestrictions] = None
    required_linear_history: bool = False
    allow_force_pushes: bool = False
    allow_deletions: bool = False

    def payload(self) -> dict:
        return self.model_dump()


class PullRequestReview(BaseModel):
    """Body of ``POST /repos/{owner}/{repo}/pulls/{number}/reviews``."""

    event: Literal["APPROVE", "COMMENT", "REQUEST_CHANGES"] = "APPROVE"
    body: str = ""
    commit_id: Optional[str] = None

    @model_validator(mode="after")
    def validate_body(self):
        if self.event != "APPROVE" and not self.body.strip():
            raise ValueError(f"A review body is required for {self.event}")
        return self

    def payload(self) -> dict:
        return self.model_dump(exclude_none=True)
