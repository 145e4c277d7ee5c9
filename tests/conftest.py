"""Shared test fixtures for termread tests."""

from __future__ import annotations

import threading

import pytest

from termread.errors import DecodeError, FetchError
from termread.render import THEMES


class FakeEncoder:
    """Image encoder that never touches the network.

    Returns ``ART[<url>]`` for every URL except those listed in *failing*,
    which raise the configured error instead.
    """

    def __init__(self, failing: dict[str, Exception] | None = None):
        self.failing = failing or {}
        self.calls: list[tuple] = []
        self._lock = threading.Lock()

    def encode(self, url, width, height, scale_mode=None, dithering=None, background=None):
        with self._lock:
            self.calls.append((url, width, height, scale_mode, dithering, background))
        if url in self.failing:
            raise self.failing[url]
        return f"ART[{url}]"


@pytest.fixture
def encoder() -> FakeEncoder:
    return FakeEncoder()


@pytest.fixture
def failing_encoder() -> FakeEncoder:
    return FakeEncoder(
        failing={
            "http://x/broken.png": FetchError("connection refused"),
            "http://x/corrupt.png": DecodeError("cannot identify image file"),
        }
    )


@pytest.fixture
def plain_theme():
    return THEMES["notty"]
