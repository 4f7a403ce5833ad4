"""Tests for the HTTP fetch collaborator.

The network is never touched: sessions and responses are mocks.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from lenient_html_parser.network import BrowserClient, fetch
from lenient_html_parser.shared import FetchConfig, FetchError


def make_response(text="<p>hi</p>", status_code=200):
    response = Mock()
    response.text = text
    response.content = text.encode("utf-8")
    response.status_code = status_code
    response.raise_for_status.return_value = None
    return response


def make_session(response=None, error=None):
    session = Mock()
    session.headers = {}
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = response or make_response()
    return session


class TestBrowserClient:
    """Test BrowserClient retrieval and history."""

    def test_get_returns_body(self):
        session = make_session(make_response("<html></html>"))
        client = BrowserClient(session=session)

        assert client.get("http://example.com/") == "<html></html>"

    def test_get_uses_configured_timeout_and_user_agent(self):
        session = make_session()
        config = FetchConfig(timeout_seconds=3.5, user_agent="tester/1.0")

        BrowserClient(config, session=session).get("http://example.com/")

        session.get.assert_called_once_with(
            "http://example.com/",
            timeout=3.5,
            headers={"User-Agent": "tester/1.0"},
        )

    def test_page_history(self):
        client = BrowserClient(session=make_session())
        assert client.current_url is None

        client.get("http://example.com/a")
        client.get("http://example.com/b")

        assert client.page_stack == ["http://example.com/a", "http://example.com/b"]
        assert client.current_page_index == 1
        assert client.current_url == "http://example.com/b"

    def test_transport_error_becomes_fetch_error(self):
        """Test that the original exception is kept untouched."""
        error = requests.ConnectionError("refused")
        client = BrowserClient(session=make_session(error=error))

        with pytest.raises(FetchError) as exc_info:
            client.get("http://example.com/")

        assert exc_info.value.cause is error
        assert exc_info.value.__cause__ is error
        assert exc_info.value.url == "http://example.com/"
        assert client.page_stack == []

    def test_http_error_status_becomes_fetch_error(self):
        response = make_response(status_code=404)
        response.raise_for_status.side_effect = requests.HTTPError("404 Client Error")
        client = BrowserClient(session=make_session(response))

        with pytest.raises(FetchError, match="404 Client Error"):
            client.get("http://example.com/missing")

    def test_timeout_becomes_fetch_error(self):
        client = BrowserClient(session=make_session(error=requests.Timeout("slow")))

        with pytest.raises(FetchError):
            client.get("http://example.com/")

    def test_body_size_limit(self):
        session = make_session(make_response("x" * 100))
        client = BrowserClient(FetchConfig(max_body_bytes=10), session=session)

        with pytest.raises(FetchError, match="exceeds limit of 10"):
            client.get("http://example.com/")

    def test_context_manager_closes_session(self):
        session = make_session()

        with BrowserClient(session=session):
            pass

        session.close.assert_called_once_with()


class TestFetch:
    """Test the module-level fetch helper."""

    def test_fetch_uses_throwaway_client(self):
        session = make_session(make_response("<b>x</b>"))

        with patch("lenient_html_parser.network.client.requests.Session", return_value=session):
            body = fetch("http://example.com/")

        assert body == "<b>x</b>"
        session.close.assert_called_once_with()


class TestFetchConfig:
    """Test FetchConfig validation."""

    def test_defaults(self):
        config = FetchConfig()

        assert config.timeout_seconds == 10.0
        assert config.user_agent == "lenient-html-parser/0.1"
        assert config.max_body_bytes is None

    @pytest.mark.parametrize("kwargs, message", [
        ({"timeout_seconds": 0}, "timeout_seconds must be > 0"),
        ({"user_agent": ""}, "user_agent cannot be empty"),
        ({"max_body_bytes": 0}, "max_body_bytes must be > 0 or None"),
    ])
    def test_validation(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            FetchConfig(**kwargs)
