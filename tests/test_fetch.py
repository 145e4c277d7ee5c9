"""Tests for page fetching (urllib path only; the browser path needs Chromium)."""

from __future__ import annotations

import gzip
import zlib
from unittest.mock import MagicMock, patch
from urllib.error import HTTPError, URLError

import pytest

from termread import fetch
from termread.errors import FetchError
from termread.fetch import DEFAULT_USER_AGENT, browser_headers, fetch_page, fetch_page_rendered


def _fake_response(data: bytes, url: str, encoding: str | None = None):
    response = MagicMock()
    response.read.return_value = data
    response.geturl.return_value = url
    response.headers = {"Content-Encoding": encoding} if encoding else {}
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


class TestBrowserHeaders:

    def test_default_user_agent(self):
        headers = browser_headers()
        assert headers["User-Agent"] == DEFAULT_USER_AGENT
        assert "Googlebot" in headers["User-Agent"]
        assert headers["DNT"] == "1"
        assert headers["Accept-Language"] == "en-US,en;q=0.5"
        assert headers["Accept"].startswith("text/html")
        assert "Accept-Encoding" in headers

    def test_custom_user_agent(self):
        assert browser_headers("Custom/2.0")["User-Agent"] == "Custom/2.0"


class TestFetchPage:

    def test_returns_body_and_final_url(self):
        body = b"<html><title>x</title></html>"
        with patch.object(fetch, "urlopen", return_value=_fake_response(body, "https://x/final")) as urlopen:
            page = fetch_page("https://x/start", "UA/1", timeout=7.0)
        assert page.content == body
        assert page.url == "https://x/final"
        request = urlopen.call_args.args[0]
        assert request.get_header("User-agent") == "UA/1"
        assert request.get_header("Dnt") == "1"
        assert urlopen.call_args.kwargs["timeout"] == 7.0

    def test_gzip_body(self):
        body = b"<p>compressed</p>"
        response = _fake_response(gzip.compress(body), "https://x/", "gzip")
        with patch.object(fetch, "urlopen", return_value=response):
            assert fetch_page("https://x/").content == body

    @pytest.mark.parametrize("compress", [
        zlib.compress,
        lambda data: zlib.compress(data)[2:-4],
    ])
    def test_deflate_body(self, compress):
        body = b"<p>deflated</p>"
        response = _fake_response(compress(body), "https://x/", "deflate")
        with patch.object(fetch, "urlopen", return_value=response):
            assert fetch_page("https://x/").content == body

    def test_corrupt_gzip(self):
        response = _fake_response(b"not gzip", "https://x/", "gzip")
        with patch.object(fetch, "urlopen", return_value=response):
            with pytest.raises(FetchError):
                fetch_page("https://x/")

    def test_network_error(self):
        with patch.object(fetch, "urlopen", side_effect=URLError("no route")):
            with pytest.raises(FetchError, match="no route"):
                fetch_page("https://x/")

    def test_http_error(self):
        error = HTTPError("https://x/", 404, "Not Found", {}, None)
        with patch.object(fetch, "urlopen", side_effect=error):
            with pytest.raises(FetchError, match="404"):
                fetch_page("https://x/")

    @pytest.mark.parametrize("url", ["ftp://x/file", "file:///etc/passwd", "not a url"])
    def test_rejects_non_http(self, url):
        with patch.object(fetch, "urlopen") as urlopen:
            with pytest.raises(FetchError):
                fetch_page(url)
        urlopen.assert_not_called()

    def test_malformed_url_raises_fetch_error(self):
        with pytest.raises(FetchError):
            fetch_page("http://[bad/post")

    def test_rendered_rejects_non_http(self):
        with pytest.raises(FetchError):
            fetch_page_rendered("ftp://x/file")
