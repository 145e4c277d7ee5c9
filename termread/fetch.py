"""Download article pages, either directly or through headless Chromium."""

from __future__ import annotations

import asyncio
import gzip
import logging
import zlib
from dataclasses import dataclass
from http.client import HTTPException
from urllib.error import URLError
from urllib.request import Request, urlopen

from .errors import FetchError
from .spinner import run_with_spinner

logger = logging.getLogger("termread")

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 AppleWebKit/537.36 (KHTML, like Gecko; compatible; "
    "Googlebot/2.1; +http://www.google.com/bot.html)"
)
DEFAULT_TIMEOUT = 30.0
SCROLL_ROUNDS = 12


@dataclass
class FetchedPage:
    content: bytes
    url: str


def browser_headers(user_agent: str = DEFAULT_USER_AGENT) -> dict[str, str]:
    return {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
        "DNT": "1",
        "Accept-Encoding": "gzip, deflate",
    }


def _check_url(url: str) -> None:
    if not url.startswith(("http://", "https://")):
        raise FetchError(f"unsupported URL (expected http or https): {url}")


def _decode_body(data: bytes, encoding: str | None) -> bytes:
    encoding = (encoding or "").strip().lower()
    try:
        if encoding in ("gzip", "x-gzip"):
            return gzip.decompress(data)
        if encoding == "deflate":
            try:
                return zlib.decompress(data)
            except zlib.error:
                # some servers send raw deflate without the zlib header
                return zlib.decompress(data, -zlib.MAX_WBITS)
    except (OSError, EOFError, zlib.error) as exc:
        raise FetchError(f"cannot decode {encoding} response body: {exc}") from exc
    return data


def fetch_page(
    url: str,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: float = DEFAULT_TIMEOUT,
) -> FetchedPage:
    """GET *url* with browser-like headers and return the body and final URL."""
    _check_url(url)
    try:
        req = Request(url, headers=browser_headers(user_agent))
        with urlopen(req, timeout=timeout) as response:
            raw = response.read()
            final_url = response.geturl()
            content_encoding = response.headers.get("Content-Encoding")
    except (URLError, HTTPException, OSError, ValueError) as exc:
        raise FetchError(f"{url}: {exc}") from exc
    content = _decode_body(raw, content_encoding)
    logger.debug("fetched %d bytes from %s", len(content), final_url)
    return FetchedPage(content=content, url=final_url)


async def _render_html(url: str, user_agent: str, timeout: float) -> FetchedPage:
    from playwright.async_api import Error as PlaywrightError
    from playwright.async_api import async_playwright

    headers = browser_headers(user_agent)
    headers.pop("User-Agent")
    headers.pop("Accept-Encoding")
    try:
        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=True)
            try:
                context = await browser.new_context(
                    user_agent=user_agent, extra_http_headers=headers
                )
                page = await context.new_page()
                page.set_default_navigation_timeout(timeout * 1000)
                await page.goto(url, wait_until="domcontentloaded")
                previous_height = 0
                for _ in range(SCROLL_ROUNDS):
                    height = await page.evaluate("document.body.scrollHeight")
                    await page.evaluate("window.scrollTo(0, document.body.scrollHeight)")
                    await page.wait_for_timeout(1000)
                    if height == previous_height:
                        break
                    previous_height = height
                html = await page.content()
                final_url = page.url
            finally:
                await browser.close()
    except PlaywrightError as exc:
        raise FetchError(f"{url}: {exc}") from exc
    logger.debug("rendered html length %d for %s", len(html), final_url)
    return FetchedPage(content=html.encode("utf-8"), url=final_url)


def fetch_page_rendered(
    url: str,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: float = DEFAULT_TIMEOUT,
) -> FetchedPage:
    """Load *url* in headless Chromium so script-built pages have their content."""
    _check_url(url)
    return asyncio.run(run_with_spinner(_render_html(url, user_agent, timeout), "Fetching page"))
