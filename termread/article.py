"""Readable-article extraction on top of readability-lxml and BeautifulSoup."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag
from readability import Document
from readability.readability import Unparseable

from .errors import ExtractionError

logger = logging.getLogger("termread")

UNTITLED = "Untitled"
LAZY_SRC_ATTRS = (
    "data-src",
    "data-original",
    "data-lazy-src",
    "data-url",
    "data-image",
)
SRCSET_ATTRS = ("srcset", "data-srcset", "data-lazy-srcset")
BACKGROUND_RE = re.compile(r"background-image\s*:\s*url\(([^)]+)\)", re.I)


@dataclass
class Article:
    title: str
    content_html: str


def _best_from_srcset(srcset: str) -> str | None:
    """Pick the widest candidate, preferring anything that is not WebP."""
    best_any = (None, -1.0)
    best_plain = (None, -1.0)
    for part in srcset.split(","):
        bits = part.strip().split()
        if not bits:
            continue
        url = bits[0]
        score = 0.0
        if len(bits) > 1:
            descriptor = bits[-1]
            if descriptor.endswith("w") and descriptor[:-1].isdigit():
                score = float(descriptor[:-1])
            elif descriptor.endswith("x"):
                try:
                    score = float(descriptor[:-1]) * 1000.0
                except ValueError:
                    score = 0.0
        lowered = url.lower()
        is_webp = ".webp" in lowered or "format=webp" in lowered or "fm=webp" in lowered
        if score >= best_any[1]:
            best_any = (url, score)
        if not is_webp and score >= best_plain[1]:
            best_plain = (url, score)
    return best_plain[0] or best_any[0]


def pick_image_src(tag: Tag) -> str | None:
    """Return the most useful source URL of an ``<img>``, following lazy-load conventions."""
    for key in SRCSET_ATTRS:
        srcset = tag.get(key)
        if srcset:
            best = _best_from_srcset(srcset)
            if best:
                return best
    for key in LAZY_SRC_ATTRS:
        src = tag.get(key)
        if src:
            return src
    src = tag.get("src")
    if src:
        return src
    picture = tag.find_parent("picture")
    if picture is not None:
        for source in picture.find_all("source"):
            srcset = source.get("srcset") or source.get("data-srcset")
            if srcset:
                return _best_from_srcset(srcset)
    match = BACKGROUND_RE.search(tag.get("style") or "")
    if match:
        return match.group(1).strip(" \"'")
    return None


def resolve_image_url(src: str | None, base_url: str) -> str | None:
    if not src:
        return None
    src = src.strip()
    if not src:
        return None
    if src.startswith("data:"):
        return src
    if src.startswith("//"):
        return "https:" + src
    return urljoin(base_url, src)


def unwrap_noscript_images(soup: BeautifulSoup) -> None:
    for noscript in soup.find_all("noscript"):
        inner = BeautifulSoup(noscript.decode_contents(), "lxml")
        for node in inner.find_all(["img", "picture", "figure"]):
            noscript.insert_before(node)
        noscript.decompose()


def clean_article_html(html: str, base_url: str) -> BeautifulSoup:
    soup = BeautifulSoup(html, "lxml")
    unwrap_noscript_images(soup)
    for tag in soup(["script", "style", "iframe", "form"]):
        tag.decompose()
    for img in soup.find_all("img"):
        src = resolve_image_url(pick_image_src(img), base_url)
        if not src:
            img.decompose()
            continue
        img["src"] = src
        for key in SRCSET_ATTRS + LAZY_SRC_ATTRS:
            if key in img.attrs:
                del img[key]
    for source in soup.find_all("source"):
        source.decompose()
    return soup


def _meta_title(html: bytes) -> str | None:
    soup = BeautifulSoup(html, "lxml")
    for key in ("og:title", "twitter:title"):
        tag = soup.find("meta", attrs={"property": key}) or soup.find("meta", attrs={"name": key})
        if tag and tag.get("content"):
            return tag["content"].strip()
    return None


def extract_article(content: bytes, url: str) -> Article:
    """Find the readable part of a page and return its title and cleaned HTML."""
    try:
        doc = Document(content, url=url)
        summary = doc.summary(html_partial=True, keep_all_images=True)
        title = (doc.short_title() or doc.title() or "").strip()
    except Unparseable as exc:
        raise ExtractionError(f"no readable article found at {url}: {exc}") from exc

    soup = clean_article_html(summary, url)
    if not soup.get_text(strip=True) and not soup.find("img"):
        raise ExtractionError(f"no readable article found at {url}")

    # readability falls back to "[no-title]" when the page has no <title>
    if not title or title == "[no-title]":
        title = _meta_title(content) or UNTITLED
    body = soup.body or soup
    logger.debug("article %r: %d image(s)", title, len(body.find_all("img")))
    return Article(title=title, content_html=body.decode_contents())
