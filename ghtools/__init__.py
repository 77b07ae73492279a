"""Command-line utilities for the GitHub REST API.

Works against github.com and GitHub Enterprise installations. The package can
be used from the shell through its console scripts or as a small Python SDK.

Quick Start:
    ```python
    import ghtools

    gh = ghtools.GitHubClient("github.com", token="ghp_...")
    repos = gh.get("/user/repos", {"per_page": 100}, follow=True)
    print(ghtools.to_json(repos))
    ```

CLI Usage:
    ```bash
    github_api /user/repos --all
    github_api -X POST /user/repos -f name=scratch -f private=true
    github_search --org octo --language python "TODO"
    github_approve_pr octo/app 42 -m "LGTM"
    github_protect_branch octo/app main --status-check ci/build --reviews 2
    ```
"""

__version__ = "0.1.0"

# Re-export main functionality for easy importing
from .core import (
    GitHubClient,
    Settings,
    load_settings,
    GitHubError,
    GitHubAPIError,
    GitHubRateLimitError,
    GitHubResponseError,
    GitHubConnectionError,
    ConfigurationError,
    parse_link_header,
    to_json,
)

__all__ = [
    "GitHubClient",
    "Settings",
    "load_settings",
    "GitHubError",
    "GitHubAPIError",
    "GitHubRateLimitError",
    "GitHubResponseError",
    "GitHubConnectionError",
    "ConfigurationError",
    "parse_link_header",
    "to_json",
]
