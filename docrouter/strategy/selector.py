from docrouter.analysis.models import PageComplexity
from docrouter.routing.constants import (
    DEFAULT_CHEAP_THRESHOLD,
    DEFAULT_FREE_THRESHOLD,
    FAST_TABLE_MIN_CONFIDENCE,
)
from docrouter.routing.models import PipelineConfig, PipelineTier
from docrouter.strategy.models import OCRStrategy


def select_strategy(
    complexity: PageComplexity,
    free_threshold: float = DEFAULT_FREE_THRESHOLD,
    cheap_threshold: float = DEFAULT_CHEAP_THRESHOLD,
) -> OCRStrategy:
    """Pick an OCR strategy for a page without tier context.

    Images, tables and handwriting always go to premium. Text-only pages go
    to free at or above *free_threshold*, to cheap at or above
    *cheap_threshold*, and to premium below that.
    """
    if complexity.has_images or complexity.has_tables or complexity.is_handwritten:
        return OCRStrategy.PREMIUM
    return _by_density(complexity.text_density, free_threshold, cheap_threshold)


def select_strategy_for_pipeline(
    complexity: PageComplexity,
    config: PipelineConfig,
) -> OCRStrategy:
    """Pick an OCR strategy using the active pipeline's thresholds.

    Images and handwriting go to premium in every tier. Tables may drop to
    cheap only in the fast tier when the analyzer is confident.
    """
    if complexity.has_images or complexity.is_handwritten:
        return OCRStrategy.PREMIUM

    if complexity.has_tables:
        if (
            config.tier is PipelineTier.FAST
            and complexity.confidence > FAST_TABLE_MIN_CONFIDENCE
        ):
            return OCRStrategy.CHEAP
        return OCRStrategy.PREMIUM

    return _by_density(
        complexity.text_density,
        config.ocr.free_threshold,
        config.ocr.cheap_threshold,
    )


def _by_density(density: float, free_threshold: float, cheap_threshold: float) -> OCRStrategy:
    if density >= free_threshold:
        return OCRStrategy.FREE
    if density >= cheap_threshold:
        return OCRStrategy.CHEAP
    return OCRStrategy.PREMIUM
