class OcrError(Exception):
    """Raised when an OCR backend fails to produce text for a page."""


class OcrNetworkError(OcrError):
    """Raised when a remote OCR call fails due to network/infrastructure issues."""


class LocalOcrError(OcrError):
    """Raised when the local OCR engine cannot load or recognize a page."""
