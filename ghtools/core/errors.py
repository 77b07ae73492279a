"""Exceptions raised by the ghtools client.

All library errors derive from `GitHubError`, so callers that only care about
"the call failed" can catch that one class. The CLI entry points are the only
place these are turned into exit codes.
"""
from __future__ import annotations
from typing import Any, List, Optional


class GitHubError(Exception):
    """Base exception for all ghtools errors."""
    pass


class ConfigurationError(GitHubError):
    """Raised when the client is missing a host, credentials or a valid verb."""
    pass


class GitHubConnectionError(GitHubError):
    """Raised when the HTTP transport fails before a response is received."""
    pass


class GitHubResponseError(GitHubError):
    """Raised when a successful response carries a body that is not valid JSON."""

    def __init__(self, message: str, body: str = ""):
        super().__init__(message)
        self.body = body


class GitHubAPIError(GitHubError):
    """Raised when the API answers with a non-2xx status.

    Attributes:
        status_code: HTTP status of the response.
        message: The API's `message` field, or the raw body when not JSON.
        documentation_url: Link to the relevant API docs, if provided.
        errors: The API's `errors` array, if provided.
    """

    def __init__(self, status_code: int, message: str,
                 documentation_url: Optional[str] = None,
                 errors: Optional[List[Any]] = None):
        self.status_code = status_code
        self.message = message
        self.documentation_url = documentation_url
        self.errors = errors or []
        super().__init__(self._format())

    def _format(self) -> str:
        text = f"{self.status_code}: {self.message}"
        details = [_describe_error(e) for e in self.errors]
        if details:
            text += " (" + "; ".join(details) + ")"
        return text


class GitHubRateLimitError(GitHubAPIError):
    """Raised when the rate limit for the current credentials is exhausted."""

    def __init__(self, status_code: int, message: str, reset_at: Optional[int] = None, **kwargs):
        self.reset_at = reset_at
        super().__init__(status_code, message, **kwargs)


def _describe_error(err: Any) -> str:
    # validation errors are either plain strings or {resource, field, code, message}
    if isinstance(err, dict):
        if err.get("message"):
            return str(err["message"])
        parts = [str(err[k]) for k in ("resource", "field", "code") if err.get(k)]
        return " ".join(parts)
    return str(err)
