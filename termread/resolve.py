"""Turn placeholder tokens in rendered text back into inline images."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from .encoder import Dithering, ImageEncoder, ScaleMode
from .errors import DecodeError, FetchError
from .images import ImageDescriptor
from .placeholders import PLACEHOLDER
from .spinner import run_with_spinner

logger = logging.getLogger("termread")

IMAGE_HEIGHT_RATIO = 0.75
CAPTION_INDENT = "  "
DEFAULT_JOBS = 4


def image_size(width: int) -> tuple[int, int]:
    """Target size in pixels: the full terminal width and three quarters of it in height."""
    return width, int(width * IMAGE_HEIGHT_RATIO)


def format_image_block(art: str, title: str) -> str:
    """Image on its own lines, then the indented caption.

    The block ends with a newline so text that followed the token in the
    same rendered line starts a new line instead of trailing the caption.
    """
    return f"\n{art}\n{CAPTION_INDENT}{title}\n"


async def _encode_all(
    wanted: Sequence[int],
    images: Sequence[ImageDescriptor],
    width: int,
    encoder: ImageEncoder,
    jobs: int,
) -> dict[int, str]:
    semaphore = asyncio.Semaphore(max(1, jobs))
    target_width, target_height = image_size(width)

    async def worker(index: int) -> tuple[int, str | None]:
        image = images[index]
        async with semaphore:
            try:
                art = await asyncio.to_thread(
                    encoder.encode,
                    image.url,
                    target_width,
                    target_height,
                    ScaleMode.RESIZE,
                    Dithering.NONE,
                    None,
                )
            except (FetchError, DecodeError) as exc:
                logger.warning("image %d left unresolved (%s): %s", index, image.url, exc)
                return index, None
            except Exception:
                logger.warning("image %d left unresolved (%s)", index, image.url, exc_info=True)
                return index, None
        logger.debug("image %d rendered: %s", index, image.url)
        return index, art

    results = await asyncio.gather(*(worker(index) for index in wanted))
    return {index: art for index, art in results if art is not None}


def _wanted_indices(text: str, images: Sequence[ImageDescriptor]) -> list[int]:
    wanted: list[int] = []
    for found in PLACEHOLDER.decode(text):
        if found.index is None or found.index >= len(images):
            logger.debug("ignoring placeholder %r", found.text)
            continue
        if found.index not in wanted:
            wanted.append(found.index)
    return wanted


def _splice(text: str, images: Sequence[ImageDescriptor], art: dict[int, str]) -> str:
    def _replace(index: int) -> str | None:
        if index not in art:
            return None
        return format_image_block(art[index], images[index].title)

    return PLACEHOLDER.substitute(text, _replace)


async def resolve_placeholders_async(
    text: str,
    images: Sequence[ImageDescriptor],
    width: int,
    encoder: ImageEncoder,
    jobs: int = DEFAULT_JOBS,
) -> str:
    """Coroutine form of :func:`resolve_placeholders` for callers already inside an event loop."""
    wanted = _wanted_indices(text, images)
    if not wanted:
        return text
    art = await run_with_spinner(
        _encode_all(wanted, images, width, encoder, jobs), "Rendering images"
    )
    return _splice(text, images, art)


def resolve_placeholders(
    text: str,
    images: Sequence[ImageDescriptor],
    width: int,
    encoder: ImageEncoder,
    jobs: int = DEFAULT_JOBS,
) -> str:
    """Replace each placeholder with its image and caption.

    Tokens that are malformed, point past the end of *images*, or whose image
    cannot be fetched or decoded are left in the text as they are.  Each
    distinct index is encoded once; ``jobs`` bounds how many encodes run at
    the same time.

    Runs its own event loop with ``asyncio.run``, so it raises RuntimeError
    when called while a loop is running; use
    :func:`resolve_placeholders_async` there.
    """
    if not _wanted_indices(text, images):
        return text
    return asyncio.run(resolve_placeholders_async(text, images, width, encoder, jobs))
