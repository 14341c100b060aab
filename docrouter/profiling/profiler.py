"""Metadata-only document classification.

Nothing here renders or parses the file: format comes from MIME type and
extension, page count from a known value or byte-size ratios, and content
class from filename keywords with a bytes-per-page fallback.
"""

from typing import ClassVar

from docrouter.logging.logger import Log
from docrouter.profiling.models import (
    ContentType,
    DocumentFormat,
    DocumentProfile,
    UploadedFile,
    UserTier,
)

_PDF_BYTES_PER_PAGE = 102400
_AUDIO_BYTES_PER_MINUTE = 1048576
_IMAGE_HEAVY_BYTES_PER_PAGE = 150000
_TEXT_HEAVY_BYTES_PER_PAGE = 80000
_TABLE_COMPLEXITY = 0.5


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


class DocumentProfiler:
    """Builds a DocumentProfile from upload metadata. Never raises."""

    IMAGE_KEYWORDS: ClassVar[tuple[str, ...]] = ("scan", "image", "photo")
    TEXT_KEYWORDS: ClassVar[tuple[str, ...]] = ("text", "doc", "book", "article")

    # (content type, text density, complexity)
    _MIXED: ClassVar[tuple[ContentType, float, float]] = (ContentType.MIXED, 0.5, 0.5)
    _DEFAULTS: ClassVar[dict[DocumentFormat, tuple[ContentType, float, float]]] = {
        DocumentFormat.IMAGE: (ContentType.MIXED, 0.5, 0.5),
        DocumentFormat.AUDIO: (ContentType.TEXT_HEAVY, 1.0, 0.2),
        DocumentFormat.DOCUMENT: (ContentType.TEXT_HEAVY, 0.9, 0.2),
    }

    def analyze(
        self,
        upload: UploadedFile,
        user_tier: UserTier | None = None,
        page_count: int | None = None,
    ) -> DocumentProfile:
        """Classify *upload*.

        Args:
            upload: File name, declared MIME type and bytes.
            user_tier: Subscription tier of the uploader, if known.
            page_count: Exact page count when the caller already knows it;
                        otherwise it is estimated from the byte size.
        """
        mime_type = (upload.mime_type or "").lower()
        file_name = (upload.name or "").lower()

        doc_format = self.detect_format(mime_type, file_name)
        pages = self.estimate_page_count(doc_format, upload.size, page_count)
        content_type, density, complexity = self._classify_content(
            doc_format, file_name, upload.size, pages
        )
        density = _clamp(density)
        complexity = _clamp(complexity)

        profile = DocumentProfile(
            format=doc_format,
            file_size=upload.size,
            file_name=upload.name,
            mime_type=upload.mime_type,
            page_count=pages,
            content_type=content_type,
            language="en",
            estimated_text_density=density,
            estimated_complexity=complexity,
            is_compressible=doc_format is DocumentFormat.AUDIO,
            has_embedded_images=(
                doc_format is DocumentFormat.PDF
                and content_type is not ContentType.TEXT_HEAVY
            ),
            has_table_structures=(
                doc_format is DocumentFormat.PDF and complexity > _TABLE_COMPLEXITY
            ),
            user_tier=user_tier,
        )
        Log.info(
            f"Profiled '{upload.name}'",
            format=profile.format.value,
            size_mb=f"{profile.file_size / 1024 / 1024:.1f}",
            pages=profile.page_count,
            content_type=profile.content_type.value,
            text_density=f"{profile.estimated_text_density:.2f}",
            complexity=f"{profile.estimated_complexity:.2f}",
        )
        return profile

    @staticmethod
    def detect_format(mime_type: str, file_name: str) -> DocumentFormat:
        if mime_type == "application/pdf" or file_name.endswith(".pdf"):
            return DocumentFormat.PDF
        if mime_type.startswith("image/"):
            return DocumentFormat.IMAGE
        if mime_type.startswith("audio/"):
            return DocumentFormat.AUDIO
        return DocumentFormat.DOCUMENT

    @staticmethod
    def estimate_page_count(
        doc_format: DocumentFormat,
        file_size: int,
        known_page_count: int | None = None,
    ) -> int:
        """Known count if given, else ~100KB per PDF page or ~1MB per audio minute."""
        if known_page_count is not None and known_page_count >= 1:
            return known_page_count
        if doc_format is DocumentFormat.PDF:
            return max(1, round(file_size / _PDF_BYTES_PER_PAGE))
        if doc_format is DocumentFormat.AUDIO:
            return max(1, round(file_size / _AUDIO_BYTES_PER_MINUTE))
        return 1

    def _classify_content(
        self,
        doc_format: DocumentFormat,
        file_name: str,
        file_size: int,
        page_count: int,
    ) -> tuple[ContentType, float, float]:
        if doc_format is not DocumentFormat.PDF:
            return self._DEFAULTS.get(doc_format, self._MIXED)

        if any(keyword in file_name for keyword in self.IMAGE_KEYWORDS):
            return ContentType.IMAGE_HEAVY, 0.2, 0.7
        if any(keyword in file_name for keyword in self.TEXT_KEYWORDS):
            return ContentType.TEXT_HEAVY, 0.8, 0.3

        # No hint in the name: heavier pages usually carry images.
        bytes_per_page = file_size / max(page_count, 1)
        if bytes_per_page > _IMAGE_HEAVY_BYTES_PER_PAGE:
            return ContentType.IMAGE_HEAVY, 0.3, 0.6
        if bytes_per_page < _TEXT_HEAVY_BYTES_PER_PAGE:
            return ContentType.TEXT_HEAVY, 0.7, 0.4
        return self._MIXED
