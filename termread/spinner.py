"""Progress spinner for the slow network phases (page render, image fetch)."""

from __future__ import annotations

import asyncio
import sys
from typing import Awaitable, TextIO, TypeVar

SPINNER_FRAMES = "|/-\\"
FRAME_DELAY = 0.1

T = TypeVar("T")


async def _spin(label: str, stop: asyncio.Event, stream: TextIO) -> None:
    frame = 0
    while not stop.is_set():
        stream.write(f"\r{label} {SPINNER_FRAMES[frame % len(SPINNER_FRAMES)]}")
        stream.flush()
        frame += 1
        try:
            await asyncio.wait_for(stop.wait(), FRAME_DELAY)
        except asyncio.TimeoutError:
            pass
    stream.write("\r" + " " * (len(label) + 2) + "\r")
    stream.flush()


async def run_with_spinner(
    coro: Awaitable[T],
    label: str,
    stream: TextIO | None = None,
) -> T:
    """Await *coro* while animating *label*; silent unless *stream* is a terminal."""
    stream = stream or sys.stderr
    if not stream.isatty():
        return await coro
    stop = asyncio.Event()
    task = asyncio.create_task(_spin(label, stop, stream))
    try:
        return await coro
    finally:
        stop.set()
        await task
