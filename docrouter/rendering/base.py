from abc import ABC, abstractmethod

from docrouter.analysis.page import PageImage


class BasePageRenderer(ABC):
    """Contract for all page rasterization adapters."""

    @abstractmethod
    def render(self, data: bytes) -> list[PageImage]:
        """Rasterize every page of an upload.

        Args:
            data: Raw file content.

        Returns:
            One RGB pixel grid per page, in document order.

        Raises:
            RenderError: if the content cannot be decoded.
        """

    @abstractmethod
    def page_count(self, data: bytes) -> int:
        """Return the number of pages without rasterizing them."""
