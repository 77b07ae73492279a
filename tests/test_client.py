"""Tests for the shared GitHub client."""

import pytest
import httpx
from unittest.mock import patch

from conftest import make_response, link
from ghtools.core.client import GitHubClient, decode_response, encode_params, merge_page
from ghtools.core.errors import (
    ConfigurationError,
    GitHubAPIError,
    GitHubConnectionError,
    GitHubRateLimitError,
    GitHubResponseError,
)


def _http(mock_client):
    return mock_client.return_value.__enter__.return_value


class TestClientSetup:
    """Test host resolution, headers and credentials."""

    def test_public_host(self):
        gh = GitHubClient("github.com", token="t")
        assert gh.base_url == "https://api.github.com"

    def test_enterprise_host(self):
        gh = GitHubClient("git.example.com", token="t")
        assert gh.url_for("/user") == "https://git.example.com/api/v3/user"

    def test_explicit_url_host(self):
        gh = GitHubClient("http://localhost:8080/api/", token="t")
        assert gh.url_for("repos/a/b") == "http://localhost:8080/api/repos/a/b"

    def test_absolute_path_passes_through(self):
        gh = GitHubClient("github.com", token="t")
        url = "https://api.github.com/user/repos?page=2"
        assert gh.url_for(url) == url

    def test_bearer_headers(self):
        gh = GitHubClient("github.com", token="secret")
        h = gh.headers()
        assert h["Authorization"] == "Bearer secret"
        assert h["Accept"] == "application/vnd.github+json"
        assert h["X-GitHub-Api-Version"] == "2022-11-28"
        assert gh.auth() is None

    def test_basic_auth_without_token(self):
        gh = GitHubClient("github.com", user="octo", password="pw")
        assert "Authorization" not in gh.headers()
        assert gh.auth() == ("octo", "pw")

    def test_custom_accept(self):
        gh = GitHubClient("github.com", token="t", accept="application/vnd.github.text-match+json")
        assert gh.headers()["Accept"] == "application/vnd.github.text-match+json"

    def test_missing_host(self):
        with pytest.raises(ConfigurationError, match="host"):
            GitHubClient("", token="t")

    def test_missing_credentials(self):
        with pytest.raises(ConfigurationError, match="credentials"):
            GitHubClient("github.com")
        with pytest.raises(ConfigurationError):
            GitHubClient("github.com", user="octo")


class TestEncodeParams:
    """Test verb-dependent serialization."""

    def test_get_uses_query_string(self):
        assert encode_params("GET", {"per_page": 100, "archived": False, "skip": None}) == {
            "params": {"per_page": 100, "archived": False}
        }

    def test_write_verbs_use_json(self):
        for verb in ("POST", "PUT", "PATCH"):
            assert encode_params(verb, {"name": "x"}) == {"json": {"name": "x"}}

    def test_empty_body_is_sent(self):
        assert encode_params("PUT", {}) == {"json": {}}

    def test_no_params(self):
        assert encode_params("GET", None) == {}
        assert encode_params("DELETE", {}) == {}
        assert encode_params("POST", None) == {}


class TestDecodeResponse:
    """Test response decoding and error normalization."""

    def test_json_body(self):
        assert decode_response(make_response(json={"login": "octo"})) == {"login": "octo"}

    def test_no_content(self):
        assert decode_response(make_response(204)) is None

    def test_malformed_json(self):
        with pytest.raises(GitHubResponseError) as exc:
            decode_response(make_response(200, text="{not json"))
        assert exc.value.body == "{not json"

    def test_api_error_message(self):
        body = {
            "message": "Validation Failed",
            "errors": [{"resource": "Repository", "field": "name", "code": "custom",
                        "message": "name already exists on this account"}],
            "documentation_url": "https://docs.github.com/rest",
        }
        with pytest.raises(GitHubAPIError) as exc:
            decode_response(make_response(422, json=body))
        err = exc.value
        assert err.status_code == 422
        assert err.message == "Validation Failed"
        assert err.documentation_url == "https://docs.github.com/rest"
        assert "name already exists" in str(err)

    def test_non_json_error_body(self):
        with pytest.raises(GitHubAPIError) as exc:
            decode_response(make_response(502, text="Bad gateway from proxy"))
        assert exc.value.message == "Bad gateway from proxy"

    def test_empty_error_body_uses_reason(self):
        with pytest.raises(GitHubAPIError) as exc:
            decode_response(make_response(404))
        assert exc.value.message == "Not Found"

    def test_rate_limit(self):
        resp = make_response(403, json={"message": "API rate limit exceeded"},
                             headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1700000000"})
        with pytest.raises(GitHubRateLimitError) as exc:
            decode_response(resp)
        assert exc.value.reset_at == 1700000000
        assert isinstance(exc.value, GitHubAPIError)

    def test_forbidden_is_not_rate_limit(self):
        resp = make_response(403, json={"message": "Must have admin rights"},
                             headers={"X-RateLimit-Remaining": "4999"})
        with pytest.raises(GitHubAPIError) as exc:
            decode_response(resp)
        assert not isinstance(exc.value, GitHubRateLimitError)


class TestMergePage:
    """Test page aggregation rules."""

    def test_lists_concatenate(self):
        result = [1, 2]
        assert merge_page(result, [3])
        assert result == [1, 2, 3]

    def test_search_items_extend(self):
        result = {"total_count": 3, "items": [{"id": 1}]}
        assert merge_page(result, {"total_count": 3, "items": [{"id": 2}, {"id": 3}]})
        assert [i["id"] for i in result["items"]] == [1, 2, 3]

    def test_incompatible_shapes(self):
        assert not merge_page([1], {"id": 2})
        assert not merge_page({"id": 1}, {"id": 2})


class TestCommand:
    """Test the request dispatcher against a mocked httpx client."""

    @patch("httpx.Client")
    def test_get_single_page(self, mock_client):
        http = _http(mock_client)
        http.request.return_value = make_response(json=[{"id": 1}], headers=link("https://api.github.com/x?page=2"))

        gh = GitHubClient("github.com", token="t")
        assert gh.get("/user/repos", {"per_page": 1}) == [{"id": 1}]

        http.request.assert_called_once_with(
            "GET", "https://api.github.com/user/repos", params={"per_page": 1}
        )
        kwargs = mock_client.call_args.kwargs
        assert kwargs["headers"]["Authorization"] == "Bearer t"
        assert kwargs["auth"] is None

    @patch("httpx.Client")
    def test_post_sends_json(self, mock_client):
        http = _http(mock_client)
        http.request.return_value = make_response(201, json={"number": 7})

        gh = GitHubClient("git.example.com", token="t")
        assert gh.post("repos/o/r/issues", {"title": "bug"}) == {"number": 7}
        http.request.assert_called_once_with(
            "POST", "https://git.example.com/api/v3/repos/o/r/issues", json={"title": "bug"}
        )

    @patch("httpx.Client")
    def test_method_is_case_insensitive(self, mock_client):
        _http(mock_client).request.return_value = make_response(204)
        gh = GitHubClient("github.com", token="t")
        assert gh.command("delete", "/repos/o/r") is None
        assert _http(mock_client).request.call_args.args[0] == "DELETE"

    def test_unsupported_method(self):
        gh = GitHubClient("github.com", token="t")
        with pytest.raises(ConfigurationError, match="Unsupported"):
            gh.command("TRACE", "/")

    @patch("httpx.Client")
    def test_follow_concatenates_pages(self, mock_client):
        http = _http(mock_client)
        http.request.side_effect = [
            make_response(json=[{"id": 1}, {"id": 2}], headers=link("https://api.github.com/user/repos?page=2")),
            make_response(json=[{"id": 3}], headers=link("https://api.github.com/user/repos?page=3")),
            make_response(json=[{"id": 4}]),
        ]

        gh = GitHubClient("github.com", token="t")
        repos = gh.get("/user/repos", {"per_page": 2}, follow=True)

        assert [r["id"] for r in repos] == [1, 2, 3, 4]
        assert http.request.call_count == 3
        second = http.request.call_args_list[1]
        assert second.args == ("GET", "https://api.github.com/user/repos?page=2")
        assert second.kwargs == {}

    @patch("httpx.Client")
    def test_follow_merges_search_items(self, mock_client):
        http = _http(mock_client)
        http.request.side_effect = [
            make_response(json={"total_count": 2, "incomplete_results": False, "items": [{"path": "a.py"}]},
                          headers=link("https://api.github.com/search/code?q=x&page=2")),
            make_response(json={"total_count": 2, "incomplete_results": False, "items": [{"path": "b.py"}]}),
        ]
        gh = GitHubClient("github.com", token="t")
        result = gh.get("/search/code", {"q": "x"}, follow=True)
        assert [i["path"] for i in result["items"]] == ["a.py", "b.py"]
        assert result["total_count"] == 2

    @patch("httpx.Client")
    def test_follow_respects_max_pages(self, mock_client):
        http = _http(mock_client)
        http.request.side_effect = [
            make_response(json=[1], headers=link("https://api.github.com/x?page=2")),
            make_response(json=[2], headers=link("https://api.github.com/x?page=3")),
            make_response(json=[3]),
        ]
        gh = GitHubClient("github.com", token="t")
        assert gh.get("/x", follow=True, max_pages=2) == [1, 2]
        assert http.request.call_count == 2

    @patch("httpx.Client")
    def test_follow_stops_on_unmergeable_page(self, mock_client, caplog):
        http = _http(mock_client)
        http.request.side_effect = [
            make_response(json=[1], headers=link("https://api.github.com/x?page=2")),
            make_response(json={"unexpected": True}, headers=link("https://api.github.com/x?page=3")),
        ]
        gh = GitHubClient("github.com", token="t")
        with caplog.at_level("WARNING"):
            assert gh.get("/x", follow=True) == [1]
        assert http.request.call_count == 2
        assert "stopping pagination" in caplog.text

    @patch("httpx.Client")
    def test_follow_stops_on_repeated_next_link(self, mock_client, caplog):
        http = _http(mock_client)
        http.request.side_effect = lambda *a, **kw: make_response(
            json=[1], headers=link("https://api.github.com/x?page=2"))
        gh = GitHubClient("github.com", token="t")
        with caplog.at_level("WARNING"):
            assert gh.get("/x", follow=True) == [1, 1]
        assert http.request.call_count == 2
        assert "repeats https://api.github.com/x?page=2" in caplog.text

    @patch("httpx.Client")
    def test_follow_resolves_relative_links(self, mock_client):
        http = _http(mock_client)
        http.request.side_effect = [
            make_response(json=[1], headers=link("/api/v3/x?page=2")),
            make_response(json=[2], headers=link("?page=3")),
            make_response(json=[3]),
        ]
        gh = GitHubClient("git.example.com", token="t")
        assert gh.get("/x", follow=True) == [1, 2, 3]
        urls = [c.args[1] for c in http.request.call_args_list]
        assert urls == [
            "https://git.example.com/api/v3/x",
            "https://git.example.com/api/v3/x?page=2",
            "https://git.example.com/api/v3/x?page=3",
        ]

    @patch("httpx.Client")
    def test_follow_raises_on_error_page(self, mock_client):
        http = _http(mock_client)
        http.request.side_effect = [
            make_response(json=[1], headers=link("https://api.github.com/x?page=2")),
            make_response(500, json={"message": "Server Error"}),
        ]
        gh = GitHubClient("github.com", token="t")
        with pytest.raises(GitHubAPIError, match="Server Error"):
            gh.get("/x", follow=True)

    @patch("httpx.Client")
    def test_transport_error(self, mock_client):
        _http(mock_client).request.side_effect = httpx.ConnectError("connection refused")
        gh = GitHubClient("git.example.com", token="t")
        with pytest.raises(GitHubConnectionError, match="connection refused"):
            gh.get("/user")

    @patch("httpx.Client")
    def test_token_is_not_logged(self, mock_client, caplog):
        _http(mock_client).request.return_value = make_response(json={}, headers={"X-RateLimit-Remaining": "10"})
        gh = GitHubClient("github.com", token="very-secret-token")
        with caplog.at_level("DEBUG"):
            gh.get("/user")
        assert "GET https://api.github.com/user" in caplog.text
        assert "very-secret-token" not in caplog.text
