"""Placeholder tokens standing in for images while Markdown is rendered.

A token looks like ``$$$12$``: three dollar signs, a decimal index into the
extracted image list and a closing dollar sign.  The format was chosen so
that it survives the prose renderer untouched:

- ``$`` carries no meaning in CommonMark, so the renderer emits it verbatim;
- the token contains no whitespace, so word wrapping never splits it;
- readable prose does not put three dollar signs directly in front of a
  number terminated by another dollar sign.

Usage::

    token = PLACEHOLDER.encode(3)          # '$$$3$'
    PLACEHOLDER.decode(f"a {token} b")     # [PlaceholderMatch(index=3, ...)]
    PLACEHOLDER.substitute(text, lambda index: blocks.get(index))
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import cached_property
from typing import Callable, Optional


@dataclass(frozen=True)
class PlaceholderMatch:
    """One token occurrence; ``index`` is ``None`` when the payload is not a number."""

    index: Optional[int]
    start: int
    end: int
    text: str


@dataclass(frozen=True)
class Placeholder:
    """Delimiter pair wrapping a decimal image index."""

    opening: str = "$$$"
    closing: str = "$"

    @cached_property
    def pattern(self) -> re.Pattern[str]:
        # The payload is deliberately loose so malformed tokens are still
        # found (and then left alone) instead of half-matching.
        return re.compile(
            rf"{re.escape(self.opening)}([^\s$]*){re.escape(self.closing)}"
        )

    def encode(self, index: int) -> str:
        if index < 0:
            raise ValueError(f"placeholder index must be non-negative, got {index}")
        return f"{self.opening}{index}{self.closing}"

    def _parse(self, match: re.Match[str]) -> PlaceholderMatch:
        payload = match.group(1)
        index = int(payload) if payload.isascii() and payload.isdigit() else None
        return PlaceholderMatch(index, match.start(), match.end(), match.group(0))

    def decode(self, text: str) -> list[PlaceholderMatch]:
        return [self._parse(m) for m in self.pattern.finditer(text)]

    def substitute(
        self,
        text: str,
        replace: Callable[[int], Optional[str]],
    ) -> str:
        """Replace every well-formed token for which *replace* returns a string."""

        def _sub(match: re.Match[str]) -> str:
            found = self._parse(match)
            if found.index is None:
                return found.text
            replacement = replace(found.index)
            return found.text if replacement is None else replacement

        return self.pattern.sub(_sub, text)


PLACEHOLDER = Placeholder()


def encode(index: int) -> str:
    return PLACEHOLDER.encode(index)


def decode(text: str) -> list[PlaceholderMatch]:
    return PLACEHOLDER.decode(text)
