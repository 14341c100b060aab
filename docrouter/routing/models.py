from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from docrouter.profiling.models import DocumentProfile


class PipelineTier(str, Enum):
    FAST = "fast"
    BALANCED = "balanced"
    PREMIUM = "premium"


@dataclass(frozen=True)
class OCRStrategyConfig:
    """Page-routing thresholds and batching shape for one tier."""

    free_threshold: float
    cheap_threshold: float
    image_compression_quality: float
    enable_blank_page_skip: bool
    enable_duplicate_skip: bool
    pages_per_batch: int
    parallel_batches: int

    def __post_init__(self) -> None:
        if self.free_threshold < self.cheap_threshold:
            raise ValueError(
                f"free_threshold ({self.free_threshold}) must be >= "
                f"cheap_threshold ({self.cheap_threshold})"
            )
        if self.pages_per_batch < 1 or self.parallel_batches < 1:
            raise ValueError("pages_per_batch and parallel_batches must be >= 1")

    @property
    def batch_size(self) -> int:
        return self.pages_per_batch * self.parallel_batches


@dataclass(frozen=True)
class GenerationHints:
    """Settings handed to the downstream lesson generator."""

    model_speed: str  # "fast" | "slow"
    enable_semantic_compression: bool
    compression_rate: float
    max_tokens_per_lesson: int
    enable_batch_generation: bool
    max_batch_size: int
    temperature: float
    require_high_quality: bool


@dataclass(frozen=True)
class CostEstimate:
    """Estimated spend in USD."""

    ocr: float
    generation: float
    total: float


@dataclass(frozen=True)
class TimeEstimate:
    """Estimated duration in seconds."""

    processing: float
    generation: float
    total: float


@dataclass(frozen=True)
class PipelineConfig:
    """Materialized, read-only policy for one document run."""

    tier: PipelineTier
    ocr: OCRStrategyConfig
    generation: GenerationHints
    estimated_cost: CostEstimate
    estimated_time: TimeEstimate
    routing_reason: str
    confidence: float


@dataclass(frozen=True)
class RouterDecision:
    """Routing decision plus observed outcome, kept for recalibration."""

    timestamp: datetime
    profile: DocumentProfile
    config: PipelineConfig
    actual_cost: float
    actual_time: float
    success: bool
    constants_version: str
