from docrouter.config.settings import Settings
from docrouter.profiling.models import DocumentFormat
from docrouter.rendering.base import BasePageRenderer
from docrouter.rendering.exceptions import UnsupportedFormatError
from docrouter.rendering.pillow_adapter import PillowImageRenderer
from docrouter.rendering.pymupdf_adapter import PyMuPdfRenderer


class RendererFactory:
    """Creates the page renderer for a document format."""

    @classmethod
    def create(cls, document_format: DocumentFormat, settings: Settings) -> BasePageRenderer:
        if document_format is DocumentFormat.PDF:
            return PyMuPdfRenderer(scale=settings.render_scale)
        if document_format is DocumentFormat.IMAGE:
            return PillowImageRenderer()
        raise UnsupportedFormatError(
            f"No page renderer for '{document_format.value}' uploads. "
            f"Choose from: {[DocumentFormat.PDF.value, DocumentFormat.IMAGE.value]}"
        )
