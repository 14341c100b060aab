from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class PageComplexity:
    """Visual complexity signal for a single rendered page."""

    has_images: bool
    has_tables: bool
    text_density: float  # 0-1, share of edge pixels
    is_handwritten: bool
    confidence: float  # 0-1


class SkipReason(str, Enum):
    BLANK = "blank"
    DUPLICATE = "duplicate"
