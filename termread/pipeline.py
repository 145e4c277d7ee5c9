"""End-to-end reader: page -> article -> Markdown -> terminal text."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .article import extract_article
from .convert import html_to_markdown
from .encoder import AnsiImageEncoder, ImageEncoder
from .errors import RenderError
from .fetch import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, fetch_page, fetch_page_rendered
from .images import extract_images
from .render import Theme, render_markdown, terminal_width, theme_from_env
from .resolve import DEFAULT_JOBS, resolve_placeholders

logger = logging.getLogger("termread")


@dataclass(frozen=True)
class ReaderOptions:
    """Settings for one reader invocation."""

    no_images: bool = False
    user_agent: str = DEFAULT_USER_AGENT
    width: int | None = None
    timeout: float = DEFAULT_TIMEOUT
    jobs: int = DEFAULT_JOBS
    browser: bool = False
    markdown_only: bool = False


def render_article(
    title: str,
    markdown: str,
    *,
    width: int,
    encoder: ImageEncoder | None = None,
    no_images: bool = False,
    theme: Theme | None = None,
    jobs: int = DEFAULT_JOBS,
) -> str:
    """Render *markdown* for a terminal *width* columns wide, with inline images.

    If the Markdown renderer fails its error message is returned as the whole
    output and no image is fetched.  Must not be called from a running event
    loop (see :func:`resolve_placeholders_async`).
    """
    theme = theme or theme_from_env()
    if no_images or encoder is None:
        rewritten, images = markdown, []
    else:
        rewritten, images = extract_images(markdown)

    try:
        output = render_markdown(title, rewritten, width, theme)
    except RenderError as exc:
        logger.debug("render failed: %s", exc)
        return str(exc)

    if not images:
        return output
    return resolve_placeholders(output, images, width, encoder, jobs=jobs)


def read_url(url: str, options: ReaderOptions | None = None) -> str:
    """Fetch *url* and return it ready to print.

    Raises FetchError, ExtractionError or ConversionError when the page
    itself cannot be turned into Markdown.
    """
    options = options or ReaderOptions()
    fetch = fetch_page_rendered if options.browser else fetch_page
    page = fetch(url, options.user_agent, options.timeout)
    article = extract_article(page.content, page.url)
    markdown = html_to_markdown(article.content_html)
    if options.markdown_only:
        return markdown

    width = options.width or terminal_width()
    encoder = None
    if not options.no_images:
        encoder = AnsiImageEncoder(options.user_agent, referer=page.url, timeout=options.timeout)
    return render_article(
        article.title,
        markdown,
        width=width,
        encoder=encoder,
        no_images=options.no_images,
        jobs=options.jobs,
    )
