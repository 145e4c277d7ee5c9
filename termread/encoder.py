"""Fetch images and draw them with ANSI half-block characters."""

from __future__ import annotations

import base64
import binascii
import io
import logging
from enum import Enum
from http.client import HTTPException
from typing import Protocol
from urllib.error import URLError
from urllib.parse import unquote_to_bytes
from urllib.request import Request, urlopen

from PIL import Image, ImageOps, UnidentifiedImageError

from .errors import DecodeError, FetchError
from .fetch import DEFAULT_USER_AGENT

logger = logging.getLogger("termread")

HALF_BLOCK = "▀"
LOWER_HALF_BLOCK = "▄"
RESET = "\x1b[0m"
ALPHA_THRESHOLD = 128
IMAGE_TIMEOUT = 15.0

RGB = tuple[int, int, int]


class ScaleMode(str, Enum):
    RESIZE = "resize"
    FIT = "fit"
    FILL = "fill"


class Dithering(str, Enum):
    NONE = "none"
    FLOYD_STEINBERG = "floyd-steinberg"


class ImageEncoder(Protocol):
    def encode(
        self,
        url: str,
        width: int,
        height: int,
        scale_mode: ScaleMode = ScaleMode.RESIZE,
        dithering: Dithering = Dithering.NONE,
        background: RGB | None = None,
    ) -> str: ...


def _read_data_url(url: str) -> bytes:
    header, _, payload = url.partition(",")
    try:
        if header.endswith(";base64"):
            return base64.b64decode(payload, validate=False)
        return unquote_to_bytes(payload)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"invalid data URL: {exc}") from exc


def download(
    url: str,
    user_agent: str = DEFAULT_USER_AGENT,
    referer: str | None = None,
    timeout: float = IMAGE_TIMEOUT,
) -> bytes:
    if url.startswith("data:"):
        return _read_data_url(url)
    if not url.startswith(("http://", "https://")):
        raise FetchError(f"unsupported image URL: {url}")
    headers = {"User-Agent": user_agent}
    if referer:
        headers["Referer"] = referer
    try:
        req = Request(url, headers=headers)
        with urlopen(req, timeout=timeout) as response:
            data = response.read()
    except (URLError, HTTPException, OSError, ValueError) as exc:
        raise FetchError(f"{url}: {exc}") from exc
    logger.debug("downloaded %d bytes: %s", len(data), url)
    return data


def open_image(data: bytes) -> Image.Image:
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise DecodeError(f"cannot decode image: {exc}") from exc
    logger.debug("image format=%s size=%s", img.format, img.size)
    return img.convert("RGBA")


def scale_image(img: Image.Image, width: int, height: int, mode: ScaleMode) -> Image.Image:
    if mode is ScaleMode.FIT:
        return ImageOps.contain(img, (width, height))
    if mode is ScaleMode.FILL:
        return ImageOps.fit(img, (width, height))
    return img.resize((width, height))


def dither_image(img: Image.Image, dithering: Dithering) -> Image.Image:
    if dithering is Dithering.NONE:
        return img
    alpha = img.getchannel("A")
    quantized = img.convert("RGB").quantize(colors=256, dither=Image.Dither.FLOYDSTEINBERG)
    out = quantized.convert("RGBA")
    out.putalpha(alpha)
    return out


def _cell(upper, lower) -> str:
    top_clear = upper[3] < ALPHA_THRESHOLD
    bottom_clear = lower[3] < ALPHA_THRESHOLD
    if top_clear and bottom_clear:
        return f"{RESET} "
    if top_clear:
        r, g, b = lower[:3]
        return f"\x1b[49m\x1b[38;2;{r};{g};{b}m{LOWER_HALF_BLOCK}"
    r1, g1, b1 = upper[:3]
    if bottom_clear:
        return f"\x1b[49m\x1b[38;2;{r1};{g1};{b1}m{HALF_BLOCK}"
    r2, g2, b2 = lower[:3]
    return f"\x1b[38;2;{r1};{g1};{b1}m\x1b[48;2;{r2};{g2};{b2}m{HALF_BLOCK}"


def image_to_ansi(img: Image.Image, background: RGB | None = None) -> str:
    """Draw two pixel rows per text row; transparent pixels keep the terminal colours."""
    img = img.convert("RGBA")
    if background is not None:
        canvas = Image.new("RGBA", img.size, background + (255,))
        canvas.alpha_composite(img)
        img = canvas
    w, h = img.size
    if h % 2:
        padded = Image.new("RGBA", (w, h + 1), (0, 0, 0, 0))
        padded.paste(img, (0, 0))
        img = padded
        h += 1
    pixels = img.load()
    lines = []
    for y in range(0, h, 2):
        row = [_cell(pixels[x, y], pixels[x, y + 1]) for x in range(w)]
        row.append(RESET)
        lines.append("".join(row))
    return "\n".join(lines)


class AnsiImageEncoder:
    """Downloads an image and renders it at a fixed size in terminal cells."""

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        referer: str | None = None,
        timeout: float = IMAGE_TIMEOUT,
    ):
        self.user_agent = user_agent
        self.referer = referer
        self.timeout = timeout

    def encode(
        self,
        url: str,
        width: int,
        height: int,
        scale_mode: ScaleMode = ScaleMode.RESIZE,
        dithering: Dithering = Dithering.NONE,
        background: RGB | None = None,
    ) -> str:
        if width < 1 or height < 1:
            raise DecodeError(f"invalid target size {width}x{height}")
        data = download(url, self.user_agent, self.referer, self.timeout)
        img = open_image(data)
        img = scale_image(img, width, height, scale_mode)
        img = dither_image(img, dithering)
        return image_to_ansi(img, background)
