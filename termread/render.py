"""Styled terminal rendering of Markdown through rich."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping

from rich.console import Console
from rich.markdown import Markdown

from .errors import RenderError

logger = logging.getLogger("termread")

DEFAULT_WIDTH = 80
STYLE_ENV = "TERMREAD_STYLE"
CODE_THEME_ENV = "TERMREAD_CODE_THEME"


@dataclass(frozen=True)
class Theme:
    name: str
    color: bool
    code_theme: str
    hyperlinks: bool


THEMES = {
    "dark": Theme("dark", color=True, code_theme="monokai", hyperlinks=True),
    "light": Theme("light", color=True, code_theme="friendly", hyperlinks=True),
    "notty": Theme("notty", color=False, code_theme="default", hyperlinks=False),
}


def terminal_width(fallback: int = DEFAULT_WIDTH) -> int:
    for stream in (sys.stdout, sys.stdin):
        try:
            columns = os.get_terminal_size(stream.fileno()).columns
        except (AttributeError, OSError, ValueError):
            continue
        if columns > 0:
            return columns
    return fallback


def theme_from_env(environ: Mapping[str, str] | None = None, isatty: bool | None = None) -> Theme:
    """Pick the prose theme from ``TERMREAD_STYLE`` and friends.

    ``auto`` (the default) means ``dark`` on a terminal and ``notty`` when
    output is redirected.  ``NO_COLOR`` turns colour off whatever the style.
    """
    environ = os.environ if environ is None else environ
    if isatty is None:
        isatty = sys.stdout.isatty()

    name = environ.get(STYLE_ENV, "auto").strip().lower() or "auto"
    if name != "auto" and name not in THEMES:
        logger.warning("unknown %s %r, using auto", STYLE_ENV, name)
        name = "auto"
    if name == "auto":
        name = "dark" if isatty else "notty"
    theme = THEMES[name]

    code_theme = environ.get(CODE_THEME_ENV, "").strip()
    if code_theme:
        theme = Theme(theme.name, theme.color, code_theme, theme.hyperlinks)
    if environ.get("NO_COLOR") and theme.color:
        theme = Theme(theme.name, False, theme.code_theme, False)
    return theme


def render_markdown(title: str, markdown: str, width: int, theme: Theme) -> str:
    """Render the article under a level-one title heading.

    Placeholder tokens are plain text to the renderer and come out verbatim.
    """
    source = f"# {title}\n\n{markdown}"
    console = Console(
        width=width,
        force_terminal=theme.color,
        color_system="truecolor" if theme.color else None,
        no_color=not theme.color,
        highlight=False,
        emoji=False,
        legacy_windows=False,
    )
    try:
        with console.capture() as capture:
            console.print(Markdown(source, code_theme=theme.code_theme, hyperlinks=theme.hyperlinks))
    except Exception as exc:
        raise RenderError(f"cannot render article: {exc}") from exc
    return capture.get()
