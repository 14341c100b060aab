from dataclasses import dataclass
from enum import Enum


class DocumentFormat(str, Enum):
    PDF = "pdf"
    IMAGE = "image"
    AUDIO = "audio"
    DOCUMENT = "document"


class ContentType(str, Enum):
    TEXT_HEAVY = "text-heavy"
    IMAGE_HEAVY = "image-heavy"
    MIXED = "mixed"


class UserTier(str, Enum):
    FREE = "free"
    PLUS = "plus"
    PREMIUM = "premium"


@dataclass(frozen=True)
class UploadedFile:
    """An upload as received from the client, before any rendering."""

    name: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class DocumentProfile:
    """Whole-file classification used for tier routing."""

    format: DocumentFormat
    file_size: int
    file_name: str
    mime_type: str

    page_count: int
    content_type: ContentType
    language: str  # ISO 639-1

    estimated_text_density: float  # 0-1, higher = more text
    estimated_complexity: float  # 0-1, higher = tables, diagrams

    is_compressible: bool
    has_embedded_images: bool
    has_table_structures: bool

    user_tier: UserTier | None = None
