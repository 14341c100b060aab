class RenderError(Exception):
    """Raised when an upload cannot be rasterized into pages."""


class UnsupportedFormatError(RenderError):
    """Raised when no renderer exists for the document format."""
