"""Read web articles in the terminal, with images drawn as ANSI art."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("termread")
except PackageNotFoundError:
    __version__ = "0.0.0"
