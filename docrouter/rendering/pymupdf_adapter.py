import numpy as np
import pymupdf

from docrouter.analysis.page import PageImage
from docrouter.rendering.base import BasePageRenderer
from docrouter.rendering.exceptions import RenderError


class PyMuPdfRenderer(BasePageRenderer):
    """Rasterizes PDF pages using PyMuPDF."""

    DEFAULT_SCALE = 2.5

    def __init__(self, scale: float = DEFAULT_SCALE) -> None:
        if scale <= 0:
            raise ValueError(f"Render scale must be positive, got {scale}")
        self._scale = scale

    def render(self, data: bytes) -> list[PageImage]:
        matrix = pymupdf.Matrix(self._scale, self._scale)
        try:
            with pymupdf.open(stream=data, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                return [self._to_array(page.get_pixmap(matrix=matrix, alpha=False)) for page in doc]
        except Exception as exc:
            raise RenderError(f"pymupdf rendering failed: {exc}") from exc

    def page_count(self, data: bytes) -> int:
        try:
            with pymupdf.open(stream=data, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                return doc.page_count
        except Exception as exc:
            raise RenderError(f"pymupdf page count failed: {exc}") from exc

    @staticmethod
    def _to_array(pixmap: pymupdf.Pixmap) -> PageImage:
        # samples is packed RGB rows; stride may exceed width * 3
        buffer = np.frombuffer(pixmap.samples, dtype=np.uint8)
        rows = buffer.reshape(pixmap.height, pixmap.stride)
        return rows[:, : pixmap.width * pixmap.n].reshape(pixmap.height, pixmap.width, pixmap.n).copy()
