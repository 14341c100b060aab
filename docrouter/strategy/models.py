from enum import Enum


class OCRStrategy(str, Enum):
    """OCR backend class chosen for one page."""

    FREE = "free"
    CHEAP = "cheap"
    PREMIUM = "premium"


class QualityOverride(str, Enum):
    """Image-optimizer tier applied before a remote call."""

    CHEAP = "cheap"
    PREMIUM = "premium"
    PREMIUM_PIPELINE = "premium-pipeline"


class OCRStrategyLabel(str, Enum):
    """Backend that actually produced a page's text."""

    TESSERACT = "tesseract"
    VISION_LOW = "vision-low"
    VISION_HIGH = "vision-high"
    VISION_HIGH_PIPELINE = "vision-high-pipeline"
    SKIPPED = "skipped"
