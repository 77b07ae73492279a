"""Core functionality shared by the ghtools commands.

This module contains:
- The GitHub REST client (request building, pagination, error handling)
- Configuration management
- Request payload models
"""

from .client import GitHubClient
from .config import Settings, load_settings, api_url
from .errors import (
    GitHubError,
    ConfigurationError,
    GitHubConnectionError,
    GitHubResponseError,
    GitHubAPIError,
    GitHubRateLimitError,
)
from .links import parse_link_header, next_link
from .output import to_json, print_json

__all__ = [
    "GitHubClient",
    "Settings",
    "load_settings",
    "api_url",
    "GitHubError",
    "ConfigurationError",
    "GitHubConnectionError",
    "GitHubResponseError",
    "GitHubAPIError",
    "GitHubRateLimitError",
    "parse_link_header",
    "next_link",
    "to_json",
    "print_json",
]
