"""Pull image references out of Markdown and leave placeholders behind."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .placeholders import PLACEHOLDER

logger = logging.getLogger("termread")

# ![alt](url "title") optionally wrapped in a link: [![alt](url)](href)
MD_IMAGE_RE = re.compile(
    r"""
    (?P<link>\[)?
    !\[(?P<alt>[^\]]*)\]
    \(\s*
    (?:<(?P<angled>[^>]*)>|(?P<url>(?:[^()\s]|\([^()\s]*\))+))
    (?:\s+(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'))?
    \s*\)
    (?(link)\]\([^)]*\))
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class ImageDescriptor:
    url: str
    title: str


def extract_images(markdown: str) -> tuple[str, list[ImageDescriptor]]:
    """Replace every image reference with a placeholder token.

    Returns the rewritten Markdown and the images in the order they were
    found; the token for ``images[i]`` carries index ``i``.
    """
    images: list[ImageDescriptor] = []

    def _replace(match: re.Match[str]) -> str:
        url = match.group("angled") if match.group("angled") is not None else match.group("url")
        title = match.group("alt").strip() or (match.group("dq") or match.group("sq") or "").strip()
        token = PLACEHOLDER.encode(len(images))
        images.append(ImageDescriptor(url=url.strip(), title=title))
        return token

    rewritten = MD_IMAGE_RE.sub(_replace, markdown)
    logger.debug("extracted %d image reference(s)", len(images))
    return rewritten, images
