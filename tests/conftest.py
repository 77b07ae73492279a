"""Shared fixtures for the ghtools test suite."""

import httpx
import pytest

ENV_VARS = [
    "GITHUB_HOST",
    "GITHUB_TOKEN",
    "GITHUB_USER",
    "GITHUB_PASSWORD",
    "GITHUB_ACCEPT",
    "GITHUB_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the developer's environment and config.toml."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GHTOOLS_CONFIG", str(tmp_path / "missing.toml"))


def make_response(status=200, json=None, text=None, headers=None):
    """Build a real httpx response for feeding to a mocked client."""
    if json is not None:
        return httpx.Response(status, json=json, headers=headers)
    return httpx.Response(status, text=text or "", headers=headers)


def link(url, rel="next"):
    return {"Link": f'<{url}>; rel="{rel}"'}
