"""Example OCR backends.

No engine binaries and no network calls. Useful for local development,
tests, and as a template for real adapters: implement BaseLocalOcrEngine or
BaseRemoteOcrClient and register the name in OcrBackendFactory.
"""

from docrouter.analysis.page import PageImage
from docrouter.ocr.base import BaseLocalOcrEngine, BaseRemoteOcrClient


class ExampleLocalEngine(BaseLocalOcrEngine):
    """Returns fixed text describing the page size."""

    async def recognize(self, page: PageImage) -> str:
        height, width = page.shape[:2]
        return f"[local text {width}x{height}]"


class ExampleRemoteClient(BaseRemoteOcrClient):
    """Returns fixed text and remembers what it was asked to read."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, int]] = []

    async def extract_low_detail(self, image: str, page_num: int) -> str:
        self.calls.append(("low", page_num))
        return f"[low detail text page {page_num}]"

    async def extract_high_detail(self, images: list[str]) -> str:
        self.calls.append(("high", len(images)))
        return "\n\n".join(f"[high detail text image {i + 1}]" for i in range(len(images)))
