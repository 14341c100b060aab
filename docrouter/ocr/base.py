from abc import ABC, abstractmethod

from docrouter.analysis.page import PageImage


class BaseLocalOcrEngine(ABC):
    """Contract for free, on-host OCR engines."""

    @abstractmethod
    async def recognize(self, page: PageImage) -> str:
        """Extract plain text from a raw RGB pixel buffer.

        Raises:
            LocalOcrError: if the engine fails to load or recognize the page.
        """


class BaseRemoteOcrClient(ABC):
    """Contract for paid, vision-capable OCR services."""

    @abstractmethod
    async def extract_low_detail(self, image: str, page_num: int) -> str:
        """Extract text from one encoded page at low detail.

        Args:
            image: Base64 JPEG data URL produced by the image optimizer.
            page_num: 1-based page number, forwarded for provider-side logs.

        Raises:
            OcrError: on a rejected request or unusable response.
            OcrNetworkError: on connection failures and timeouts.
        """

    @abstractmethod
    async def extract_high_detail(self, images: list[str]) -> str:
        """Extract text from one or more encoded pages at high detail.

        Raises:
            OcrError: on a rejected request or unusable response.
            OcrNetworkError: on connection failures and timeouts.
        """
