"""Per-tier PipelineConfig builders.

Each builder is a pure function of the profile; all numbers come from
routing.constants.TIER_CONSTANTS.
"""

from collections.abc import Callable

from docrouter.profiling.models import ContentType, DocumentProfile, UserTier
from docrouter.routing.constants import PREMIUM_MIN_PAGES, TIER_CONSTANTS, TierConstants
from docrouter.routing.models import (
    CostEstimate,
    GenerationHints,
    OCRStrategyConfig,
    PipelineConfig,
    PipelineTier,
    TimeEstimate,
)


def build_config(profile: DocumentProfile, tier: PipelineTier) -> PipelineConfig:
    """Materialize the full configuration for *tier*."""
    return _BUILDERS[tier](profile)


def build_fast_config(profile: DocumentProfile) -> PipelineConfig:
    constants = TIER_CONSTANTS[PipelineTier.FAST]
    size_mb = profile.file_size / 1024 / 1024
    return PipelineConfig(
        tier=PipelineTier.FAST,
        ocr=_ocr_config(constants),
        generation=_generation_hints(constants, model_speed="fast"),
        estimated_cost=_cost_estimate(constants, profile, free_user=False),
        estimated_time=_time_estimate(constants, profile, free_user=False),
        routing_reason=(
            f"Fast pipeline selected: text-heavy document with {profile.page_count} "
            f"pages and {size_mb:.1f}MB size. Using aggressive free OCR and fast "
            "models for maximum cost savings."
        ),
        confidence=constants.confidence,
    )


def build_balanced_config(profile: DocumentProfile) -> PipelineConfig:
    constants = TIER_CONSTANTS[PipelineTier.BALANCED]
    free_user = profile.user_tier is UserTier.FREE
    return PipelineConfig(
        tier=PipelineTier.BALANCED,
        ocr=_ocr_config(constants),
        generation=_generation_hints(
            constants, model_speed="fast" if free_user else "slow"
        ),
        estimated_cost=_cost_estimate(constants, profile, free_user=free_user),
        estimated_time=_time_estimate(constants, profile, free_user=free_user),
        routing_reason=(
            f"Balanced pipeline selected: standard document with {profile.page_count} "
            "pages. Using hybrid OCR strategy and tier-appropriate models for "
            "optimal cost-quality balance."
        ),
        confidence=constants.confidence,
    )


def build_premium_config(profile: DocumentProfile) -> PipelineConfig:
    constants = TIER_CONSTANTS[PipelineTier.PREMIUM]
    return PipelineConfig(
        tier=PipelineTier.PREMIUM,
        ocr=_ocr_config(constants),
        generation=_generation_hints(constants, model_speed="slow"),
        estimated_cost=_cost_estimate(constants, profile, free_user=False),
        estimated_time=_time_estimate(constants, profile, free_user=False),
        routing_reason=(
            f"Premium pipeline selected: {_premium_trigger(profile)} requiring "
            "high-quality processing. Using premium OCR with lower compression "
            "and better models for maximum quality."
        ),
        confidence=constants.confidence,
    )


_BUILDERS: dict[PipelineTier, Callable[[DocumentProfile], PipelineConfig]] = {
    PipelineTier.FAST: build_fast_config,
    PipelineTier.BALANCED: build_balanced_config,
    PipelineTier.PREMIUM: build_premium_config,
}


def _premium_trigger(profile: DocumentProfile) -> str:
    if profile.content_type is ContentType.IMAGE_HEAVY:
        return "image-heavy content"
    if profile.page_count > PREMIUM_MIN_PAGES:
        return "large document"
    if profile.user_tier is UserTier.PREMIUM:
        return "premium user"
    return "complex content"


def _ocr_config(constants: TierConstants) -> OCRStrategyConfig:
    return OCRStrategyConfig(
        free_threshold=constants.free_threshold,
        cheap_threshold=constants.cheap_threshold,
        image_compression_quality=constants.image_compression_quality,
        enable_blank_page_skip=True,
        enable_duplicate_skip=True,
        pages_per_batch=constants.pages_per_batch,
        parallel_batches=constants.parallel_batches,
    )


def _generation_hints(constants: TierConstants, *, model_speed: str) -> GenerationHints:
    return GenerationHints(
        model_speed=model_speed,
        enable_semantic_compression=constants.enable_semantic_compression,
        compression_rate=constants.compression_rate,
        max_tokens_per_lesson=constants.max_tokens_per_lesson,
        enable_batch_generation=True,
        max_batch_size=constants.max_batch_size,
        temperature=constants.temperature,
        require_high_quality=constants.require_high_quality,
    )


def _cost_estimate(
    constants: TierConstants, profile: DocumentProfile, *, free_user: bool
) -> CostEstimate:
    ocr = profile.page_count * constants.ocr_cost_per_page
    generation = (
        constants.generation_cost_free_user if free_user else constants.generation_cost
    )
    return CostEstimate(ocr=ocr, generation=generation, total=ocr + generation)


def _time_estimate(
    constants: TierConstants, profile: DocumentProfile, *, free_user: bool
) -> TimeEstimate:
    processing = profile.page_count * constants.processing_seconds_per_page
    generation = (
        constants.generation_seconds_free_user if free_user else constants.generation_seconds
    )
    return TimeEstimate(
        processing=processing, generation=generation, total=processing + generation
    )
