"""Calibration table for the tier builders.

Every hand-tuned number the builders use lives here. Bump CONSTANTS_VERSION
whenever a value changes so recorded RouterDecisions can be grouped by the
table that produced them.
"""

from dataclasses import dataclass
from typing import Final

from docrouter.routing.models import PipelineTier

CONSTANTS_VERSION: Final = "2025.1"


@dataclass(frozen=True)
class TierConstants:
    free_threshold: float
    cheap_threshold: float
    image_compression_quality: float
    pages_per_batch: int
    parallel_batches: int

    compression_rate: float
    enable_semantic_compression: bool
    max_tokens_per_lesson: int
    max_batch_size: int
    temperature: float
    require_high_quality: bool

    ocr_cost_per_page: float
    generation_cost: float
    generation_cost_free_user: float
    processing_seconds_per_page: float
    generation_seconds: float
    generation_seconds_free_user: float

    confidence: float


TIER_CONSTANTS: Final[dict[PipelineTier, TierConstants]] = {
    PipelineTier.FAST: TierConstants(
        free_threshold=0.10,
        cheap_threshold=0.08,
        image_compression_quality=0.70,
        pages_per_batch=5,
        parallel_batches=4,
        compression_rate=0.60,
        enable_semantic_compression=True,
        max_tokens_per_lesson=1200,
        max_batch_size=5,
        temperature=0.5,
        require_high_quality=False,
        ocr_cost_per_page=0.000002,
        generation_cost=0.01,
        generation_cost_free_user=0.01,
        processing_seconds_per_page=3,
        generation_seconds=5,
        generation_seconds_free_user=5,
        confidence=0.85,
    ),
    PipelineTier.BALANCED: TierConstants(
        free_threshold=0.20,
        cheap_threshold=0.15,
        image_compression_quality=0.85,
        pages_per_batch=5,
        parallel_batches=3,
        compression_rate=0.65,
        enable_semantic_compression=True,
        max_tokens_per_lesson=1400,
        max_batch_size=4,
        temperature=0.4,
        require_high_quality=False,
        ocr_cost_per_page=0.00004,
        generation_cost=0.02,
        generation_cost_free_user=0.01,
        processing_seconds_per_page=4,
        generation_seconds=8,
        generation_seconds_free_user=5,
        confidence=0.90,
    ),
    PipelineTier.PREMIUM: TierConstants(
        free_threshold=0.30,
        cheap_threshold=0.25,
        image_compression_quality=0.95,
        pages_per_batch=5,
        parallel_batches=3,
        compression_rate=0.80,
        enable_semantic_compression=False,
        max_tokens_per_lesson=1800,
        max_batch_size=3,
        temperature=0.5,
        require_high_quality=True,
        ocr_cost_per_page=0.00008,
        generation_cost=0.03,
        generation_cost_free_user=0.03,
        processing_seconds_per_page=5,
        generation_seconds=12,
        generation_seconds_free_user=12,
        confidence=0.95,
    ),
}

# Thresholds used when a page is routed without an active pipeline config.
DEFAULT_FREE_THRESHOLD: Final = TIER_CONSTANTS[PipelineTier.BALANCED].free_threshold
DEFAULT_CHEAP_THRESHOLD: Final = TIER_CONSTANTS[PipelineTier.BALANCED].cheap_threshold

# Tier selection table.
FAST_MAX_FILE_SIZE: Final = 5 * 1024 * 1024
FAST_MAX_PAGES: Final = 10
FAST_MIN_TEXT_DENSITY: Final = 0.7
FAST_MAX_COMPLEXITY: Final = 0.4
PREMIUM_MIN_PAGES: Final = 20
PREMIUM_MIN_COMPLEXITY: Final = 0.6

# Fast-tier tables may go to cheap OCR above this analyzer confidence.
FAST_TABLE_MIN_CONFIDENCE: Final = 0.85
