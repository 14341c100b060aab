import io
from collections.abc import Callable
from typing import Any

import numpy as np
import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from docrouter.profiling.models import (
    ContentType,
    DocumentFormat,
    DocumentProfile,
    UploadedFile,
)

INK = 210  # neither background nor "dark": stripes never count as images


def striped_page(period: int, periods: int = 10, height: int = 60) -> np.ndarray:
    """White page with one-pixel vertical ink lines; edge density is exactly 2 / period."""
    width = period * periods + 2
    page = np.full((height, width, 3), 255, dtype=np.uint8)
    page[:, ::period] = INK
    return page


@pytest.fixture()
def white_page() -> np.ndarray:
    return np.full((60, 92, 3), 255, dtype=np.uint8)


@pytest.fixture()
def free_page() -> np.ndarray:
    """Density 0.222: free in the balanced tier, below the table cut-off."""
    return striped_page(9)


@pytest.fixture()
def cheap_page() -> np.ndarray:
    """Density 0.167: cheap in the balanced tier."""
    return striped_page(12)


@pytest.fixture()
def table_page() -> np.ndarray:
    """Density 0.333: flagged as a table with 0.9 confidence."""
    return striped_page(6)


@pytest.fixture()
def sparse_page() -> np.ndarray:
    """Density 0.05: premium by density alone."""
    return striped_page(40)


@pytest.fixture()
def image_page() -> np.ndarray:
    page = np.full((60, 92, 3), 255, dtype=np.uint8)
    page[:, :46] = (255, 0, 0)
    return page


@pytest.fixture()
def make_profile() -> Callable[..., DocumentProfile]:
    def _make(**overrides: Any) -> DocumentProfile:
        values: dict[str, Any] = {
            "format": DocumentFormat.PDF,
            "file_size": 1024 * 1024,
            "file_name": "notes.pdf",
            "mime_type": "application/pdf",
            "page_count": 12,
            "content_type": ContentType.MIXED,
            "language": "en",
            "estimated_text_density": 0.5,
            "estimated_complexity": 0.5,
            "is_compressible": False,
            "has_embedded_images": True,
            "has_table_structures": False,
            "user_tier": None,
        }
        values.update(overrides)
        return DocumentProfile(**values)

    return _make


@pytest.fixture()
def make_upload() -> Callable[..., UploadedFile]:
    def _make(
        name: str = "notes.pdf",
        mime_type: str = "application/pdf",
        size: int = 1024,
    ) -> UploadedFile:
        return UploadedFile(name=name, mime_type=mime_type, data=b"\0" * size)

    return _make


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def blocks_pdf_bytes() -> bytes:
    """Three pages: a filled top half, a filled left half, and a blank page."""
    width, height = letter
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.rect(0, height / 2, width, height / 2, stroke=0, fill=1)
    c.showPage()
    c.rect(0, 0, width / 2, height, stroke=0, fill=1)
    c.showPage()
    c.showPage()
    c.save()
    return buf.getvalue()
