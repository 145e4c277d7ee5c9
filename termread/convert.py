"""HTML to Markdown conversion."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup
from markdownify import ATX, markdownify

from .errors import ConversionError

EXTRA_BLANK_LINES_RE = re.compile(r"\n{3,}")


def html_to_markdown(html: str) -> str:
    try:
        soup = BeautifulSoup(html, "lxml")
        for tag in soup(["script", "style", "noscript"]):
            tag.decompose()
        markdown = markdownify(
            str(soup),
            heading_style=ATX,
            bullets="-",
            keep_inline_images_in=["a", "td", "th", "li"],
        )
    except Exception as exc:
        raise ConversionError(f"cannot convert article to Markdown: {exc}") from exc
    return EXTRA_BLANK_LINES_RE.sub("\n\n", markdown).strip() + "\n"
