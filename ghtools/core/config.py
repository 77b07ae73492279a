"""Configuration management for ghtools.

This module handles loading and merging configuration from multiple sources:
1. Environment variables (highest priority)
2. TOML configuration file (medium priority)
3. Default values (lowest priority)

Command-line flags are applied on top of the result by the CLI front-ends.

Example config.toml:
    ```toml
    [github]
    host = "github.example.com"
    token = "ghp_..."
    timeout = 30
    ```

Environment Variables:
    GITHUB_HOST: API host (github.com or a GitHub Enterprise hostname)
    GITHUB_TOKEN: Personal access token, sent as a bearer token
    GITHUB_USER: Username for basic auth when no token is set
    GITHUB_PASSWORD: Password for basic auth (never read from the config file)
    GITHUB_ACCEPT: Override the default Accept header
    GITHUB_TIMEOUT: Request timeout in seconds
    GHTOOLS_CONFIG: Path to the TOML config file
"""
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit
import os
import tomllib  # Python 3.11+
from dotenv import load_dotenv

from .errors import ConfigurationError

load_dotenv()

DEFAULT_ACCEPT = "application/vnd.github+json"
DEFAULT_TIMEOUT = 20.0
DEFAULT_CONFIG = "config.toml"
PUBLIC_API_URL = "https://api.github.com"
_PUBLIC_HOSTS = {"github.com", "api.github.com", "www.github.com"}


@dataclass
class Settings:
    """Runtime configuration derived from `config.toml` and environment.

    Values are merged with precedence: environment > config file > defaults.

    Attributes:
        host: GitHub host. Required before a client can be built.
        token: Personal access token for bearer auth.
        user: Username for basic auth.
        password: Password for basic auth.
        accept: Accept header sent with every request.
        timeout: Request timeout in seconds.
    """

    host: str | None = None
    token: str | None = None
    user: str | None = None
    password: str | None = None
    accept: str = DEFAULT_ACCEPT
    timeout: float = DEFAULT_TIMEOUT


def load_config(path: str = DEFAULT_CONFIG) -> dict:
    """Load a TOML config file into a dictionary.

    Args:
        path: Path to the TOML configuration file.

    Returns:
        Dictionary containing configuration data, or empty dict if file missing.
    """
    p = Path(path).expanduser()
    if not p.exists():
        return {}
    with p.open("rb") as f:
        return tomllib.load(f)


def _env(name: str) -> str | None:
    # empty variables count as unset
    value = os.getenv(name)
    return value if value else None


def load_settings(config_path: str | None = None) -> Settings:
    """Create a `Settings` object from config file and environment variables.

    Args:
        config_path: Path to TOML config file. Defaults to `$GHTOOLS_CONFIG`
            or "config.toml".

    Returns:
        Settings object with merged configuration from all sources.

    Raises:
        ConfigurationError: If `GITHUB_TIMEOUT` or `github.timeout` is not a number.
    """
    cfg = load_config(config_path or _env("GHTOOLS_CONFIG") or DEFAULT_CONFIG)
    gh = cfg.get("github", {})

    s = Settings()
    s.host = _env("GITHUB_HOST") or gh.get("host", s.host)
    s.token = _env("GITHUB_TOKEN") or gh.get("token", s.token)
    s.user = _env("GITHUB_USER") or gh.get("user", s.user)
    s.password = _env("GITHUB_PASSWORD")
    s.accept = _env("GITHUB_ACCEPT") or gh.get("accept", s.accept)

    timeout = _env("GITHUB_TIMEOUT") or gh.get("timeout", s.timeout)
    try:
        s.timeout = float(timeout)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid timeout: {timeout!r}") from None

    return s


def api_url(host: str) -> str:
    """Return the REST API root for `host`.

    Args:
        host: ``github.com``, a GitHub Enterprise hostname, or a full URL.

    Returns:
        ``https://api.github.com`` for github.com, ``https://<host>/api/v3``
        for Enterprise hosts, or the URL itself (minus a trailing slash) when
        a scheme was given.

    Example:
        ```python
        api_url("github.com")           # "https://api.github.com"
        api_url("git.example.com")      # "https://git.example.com/api/v3"
        api_url("http://localhost:8080/api")  # unchanged
        ```
    """
    host = (host or "").strip()
    if not host:
        raise ConfigurationError("No GitHub host configured")
    if "://" in host:
        parts = urlsplit(host)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ConfigurationError(f"Invalid GitHub host URL: {host}")
        return host.rstrip("/")
    host = host.rstrip("/")
    if host.lower() in _PUBLIC_HOSTS:
        return PUBLIC_API_URL
    return f"https://{host}/api/v3"
