"""Exception types raised by the reader pipeline."""


class ReaderError(Exception):
    pass


class FetchError(ReaderError):
    """A page or image could not be retrieved over the network."""


class ExtractionError(ReaderError):
    """No readable article could be identified in the page."""


class ConversionError(ReaderError):
    """The article HTML could not be converted to Markdown."""


class RenderError(ReaderError):
    """The Markdown renderer failed; the message is shown in place of the article."""


class DecodeError(ReaderError):
    """Image data is corrupt or in an unsupported format."""
