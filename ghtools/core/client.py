"""GitHub REST API client shared by the ghtools command-line utilities.

This module provides a small synchronous client that builds authenticated
requests against github.com or a GitHub Enterprise host, decodes JSON
responses, normalizes API errors, and optionally follows `Link` pagination.

Authentication:
    A token is sent as ``Authorization: Bearer <token>``. When no token is
    configured, ``user``/``password`` are sent as HTTP basic auth.

Example:
    ```python
    from ghtools.core.client import GitHubClient

    gh = GitHubClient("github.com", token="ghp_...")

    # Single request
    repo = gh.get("/repos/octocat/Hello-World")

    # Every page of a list endpoint, concatenated
    repos = gh.get("/orgs/github/repos", {"per_page": 100}, follow=True)

    # JSON body for write verbs
    gh.post("/repos/octocat/Hello-World/issues", {"title": "Found a bug"})
    ```
"""
from __future__ import annotations
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urljoin
import logging
import httpx

from .config import DEFAULT_ACCEPT, DEFAULT_TIMEOUT, Settings, api_url
from .errors import (
    ConfigurationError,
    GitHubAPIError,
    GitHubConnectionError,
    GitHubRateLimitError,
    GitHubResponseError,
)
from .links import next_link

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"
USER_AGENT = "ghtools"
QUERY_METHODS = {"GET", "HEAD", "DELETE"}
BODY_METHODS = {"POST", "PUT", "PATCH"}
METHODS = QUERY_METHODS | BODY_METHODS


def encode_params(method: str, params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Return the `httpx` keyword arguments carrying `params` for `method`.

    GET, HEAD and DELETE send params as a query string. POST, PUT and PATCH
    send them as a JSON body (an empty dict still sends ``{}``).

    Args:
        method: Upper-case HTTP verb.
        params: Request parameters, or None.

    Returns:
        Either ``{"params": ...}``, ``{"json": ...}`` or ``{}``.
    """
    if method in BODY_METHODS:
        return {"json": params} if params is not None else {}
    if not params:
        return {}
    return {"params": {k: v for k, v in params.items() if v is not None}}


def _error_from_response(response: httpx.Response) -> GitHubAPIError:
    status = response.status_code
    text = response.text or ""
    message = text.strip() or response.reason_phrase or "HTTP error"
    documentation_url = None
    errors = None
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        message = data.get("message") or message
        documentation_url = data.get("documentation_url")
        errors = data.get("errors")

    remaining = response.headers.get("X-RateLimit-Remaining")
    if status in (403, 429) and remaining == "0":
        reset = response.headers.get("X-RateLimit-Reset")
        return GitHubRateLimitError(
            status, message,
            reset_at=int(reset) if reset and reset.isdigit() else None,
            documentation_url=documentation_url,
            errors=errors,
        )
    return GitHubAPIError(status, message, documentation_url=documentation_url, errors=errors)


def decode_response(response: httpx.Response) -> Any:
    """Decode a response body, raising for non-2xx statuses.

    Args:
        response: The HTTP response.

    Returns:
        Parsed JSON, or None for ``204 No Content`` and empty bodies.

    Raises:
        GitHubRateLimitError: For 403/429 responses with no remaining quota.
        GitHubAPIError: For any other non-2xx response.
        GitHubResponseError: If a 2xx body is not valid JSON.
    """
    if not 200 <= response.status_code < 300:
        raise _error_from_response(response)
    text = response.text
    if response.status_code == 204 or not text.strip():
        return None
    try:
        return response.json()
    except ValueError as e:
        raise GitHubResponseError(f"Malformed JSON in response: {e}", body=text) from e


def merge_page(result: Any, page: Any) -> bool:
    """Append `page` onto `result` in place.

    Arrays are concatenated. Search results (objects with an ``items`` array)
    have their items extended.

    Returns:
        True if the page was merged, False if the shapes are not compatible.
    """
    if isinstance(result, list) and isinstance(page, list):
        result.extend(page)
        return True
    if (isinstance(result, dict) and isinstance(page, dict)
            and isinstance(result.get("items"), list) and isinstance(page.get("items"), list)):
        result["items"].extend(page["items"])
        return True
    return False


class GitHubClient:
    """Authenticated client for the GitHub REST API (v3).

    Attributes:
        host: Host the client was configured with.
        base_url: REST API root derived from `host`.
        accept: Accept header sent with every request.
        timeout: Per-request timeout in seconds.
    """

    def __init__(self, host: str, token: str | None = None,
                 user: str | None = None, password: str | None = None,
                 accept: str = DEFAULT_ACCEPT, timeout: float = DEFAULT_TIMEOUT):
        """Initialize the client.

        Args:
            host: github.com, a GitHub Enterprise hostname, or an API root URL.
            token: Personal access token (preferred).
            user: Username for basic auth when no token is given.
            password: Password for basic auth.
            accept: Accept header value.
            timeout: Request timeout in seconds.

        Raises:
            ConfigurationError: If the host is empty or no credentials are given.
        """
        self.host = host
        self.base_url = api_url(host)
        if not token and not (user and password):
            raise ConfigurationError("No GitHub credentials configured (token, or user and password)")
        self._token = token
        self._basic = (user, password) if not token else None
        self.accept = accept or DEFAULT_ACCEPT
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "GitHubClient":
        """Build a client from merged `Settings`."""
        return cls(
            settings.host or "",
            token=settings.token,
            user=settings.user,
            password=settings.password,
            accept=settings.accept,
            timeout=settings.timeout,
        )

    def headers(self) -> Dict[str, str]:
        """Construct the headers sent with every request.

        Returns:
            Headers including Accept, API version, User-Agent and, for token
            auth, Authorization.
        """
        h = {
            "Accept": self.accept,
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": USER_AGENT,
        }
        if self._token:
            h["Authorization"] = f"Bearer {self._token}"
        return h

    def auth(self) -> Optional[Tuple[str, str]]:
        """Return basic auth credentials, or None when a token is used."""
        return self._basic

    def url_for(self, path: str) -> str:
        """Join `path` onto the API root. Absolute URLs are returned unchanged."""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(self, client: httpx.Client, method: str, url: str, **kwargs) -> httpx.Response:
        logger.debug("%s %s", method, url)
        try:
            response = client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise GitHubConnectionError(f"{method} {url} failed: {e}") from e
        remaining = response.headers.get("X-RateLimit-Remaining")
        if remaining is not None:
            logger.debug("rate limit remaining: %s", remaining)
        return response

    def _next_url(self, response: httpx.Response, current: str) -> Optional[str]:
        # relative targets resolve against the page that returned them
        url = next_link(response.headers.get("Link"))
        return urljoin(current, url) if url else None

    def command(self, method: str, path: str, params: Optional[Dict[str, Any]] = None,
                follow: bool = False, max_pages: Optional[int] = None) -> Any:
        """Issue a request and return the decoded JSON result.

        Args:
            method: HTTP verb (case-insensitive).
            path: API path such as ``/user/repos``, or an absolute URL.
            params: Query parameters (GET/HEAD/DELETE) or JSON body (POST/PUT/PATCH).
            follow: If True, follow ``rel="next"`` links and aggregate pages.
            max_pages: Upper bound on pages fetched when following.

        Returns:
            Parsed JSON result (aggregated when following), or None for empty
            responses.

        Raises:
            ConfigurationError: If `method` is not a supported verb.
            GitHubAPIError: For non-2xx responses.
            GitHubResponseError: For malformed JSON.
            GitHubConnectionError: For transport failures.
        """
        verb = (method or "").upper()
        if verb not in METHODS:
            raise ConfigurationError(f"Unsupported HTTP method: {method!r}")
        if max_pages is not None and max_pages < 1:
            raise ConfigurationError("max_pages must be at least 1")

        with httpx.Client(timeout=self.timeout, headers=self.headers(), auth=self.auth()) as client:
            response = self._send(client, verb, self.url_for(path), **encode_params(verb, params))
            result = decode_response(response)
            if not follow:
                return result

            pages = 1
            current = self.url_for(path)
            seen = {current}
            url = self._next_url(response, current)
            while url and (max_pages is None or pages < max_pages):
                if url in seen:
                    logger.warning("Page %d repeats %s; stopping pagination", pages + 1, url)
                    break
                seen.add(url)
                logger.debug("following page %d: %s", pages + 1, url)
                response = self._send(client, verb, url)
                page = decode_response(response)
                if not merge_page(result, page):
                    logger.warning("Cannot aggregate page %d from %s; stopping pagination", pages + 1, url)
                    break
                pages += 1
                current = url
                url = self._next_url(response, current)
            return result

    def get(self, path: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        return self.command("GET", path, params, **kwargs)

    def post(self, path: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        return self.command("POST", path, params, **kwargs)

    def put(self, path: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        return self.command("PUT", path, params, **kwargs)

    def patch(self, path: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        return self.command("PATCH", path, params, **kwargs)

    def delete(self, path: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        return self.command("DELETE", path, params, **kwargs)
