from collections.abc import Awaitable, Callable

from PIL import Image

from docrouter.analysis.complexity import PageComplexityAnalyzer
from docrouter.analysis.page import PageImage, as_rgb_array
from docrouter.analysis.page_filter import PageFilter, PageHashSet
from docrouter.logging.logger import Log
from docrouter.ocr.base import BaseLocalOcrEngine, BaseRemoteOcrClient
from docrouter.ocr.exceptions import OcrError
from docrouter.ocr.optimizer import ImageOptimizer
from docrouter.pipeline.costs import PAGE_COST_UNITS
from docrouter.pipeline.models import OCRResult
from docrouter.routing.models import PipelineConfig, PipelineTier
from docrouter.strategy.models import OCRStrategy, OCRStrategyLabel, QualityOverride
from docrouter.strategy.selector import select_strategy, select_strategy_for_pipeline

_PREMIUM_PIPELINE_MIN_QUALITY = 0.95

_Handler = Callable[[PageImage, int, QualityOverride | None], Awaitable[OCRResult]]


def pipeline_quality_override(config: PipelineConfig) -> QualityOverride | None:
    """Premium tier at maximum image quality upgrades remote calls to premium-pipeline."""
    if (
        config.tier is PipelineTier.PREMIUM
        and config.ocr.image_compression_quality >= _PREMIUM_PIPELINE_MIN_QUALITY
    ):
        return QualityOverride.PREMIUM_PIPELINE
    return None


class PageOrchestrator:
    """Runs filter -> analyze -> select -> dispatch for a single page.

    Backend failures are logged and re-raised; the batch executor decides
    what they mean for the document.
    """

    def __init__(
        self,
        *,
        local_engine: BaseLocalOcrEngine,
        remote_client: BaseRemoteOcrClient,
        analyzer: PageComplexityAnalyzer | None = None,
        optimizer: ImageOptimizer | None = None,
    ) -> None:
        self._local_engine = local_engine
        self._remote_client = remote_client
        self._analyzer = analyzer or PageComplexityAnalyzer()
        self._optimizer = optimizer or ImageOptimizer()
        self._handlers: dict[OCRStrategy, _Handler] = {
            OCRStrategy.FREE: self._run_free,
            OCRStrategy.CHEAP: self._run_cheap,
            OCRStrategy.PREMIUM: self._run_premium,
        }

    async def process_page(
        self,
        page: PageImage | Image.Image,
        page_num: int,
        total_pages: int,
        hash_set: PageHashSet | None = None,
        config: PipelineConfig | None = None,
        quality_override: QualityOverride | None = None,
    ) -> OCRResult:
        """OCR one page with the cheapest adequate backend.

        Everything up to backend dispatch is synchronous, so concurrent pages
        of a batch never interleave their reads and writes of *hash_set*.
        """
        pixels = as_rgb_array(page)

        page_filter = PageFilter(
            skip_blank=config.ocr.enable_blank_page_skip if config else True,
            skip_duplicates=config.ocr.enable_duplicate_skip if config else True,
        )
        skip_reason = page_filter.check(pixels, hash_set)
        if skip_reason is not None:
            Log.info(f"Page {page_num}/{total_pages}: SKIPPED ({skip_reason.value} page)")
            return OCRResult.skip(skip_reason)

        complexity = self._analyzer.analyze(pixels)
        if config is not None:
            strategy = select_strategy_for_pipeline(complexity, config)
            if quality_override is None:
                quality_override = pipeline_quality_override(config)
        else:
            strategy = select_strategy(complexity)

        Log.info(
            f"Page {page_num}/{total_pages}: {strategy.value} strategy selected",
            density=f"{complexity.text_density:.3f}",
            images=complexity.has_images,
            tables=complexity.has_tables,
        )

        try:
            return await self._handlers[strategy](pixels, page_num, quality_override)
        except OcrError as exc:
            Log.error(f"OCR failed for page {page_num}: {exc}")
            raise

    async def _run_free(
        self, pixels: PageImage, page_num: int, quality_override: QualityOverride | None
    ) -> OCRResult:
        _ = page_num, quality_override
        text = await self._local_engine.recognize(pixels)
        label = OCRStrategyLabel.TESSERACT
        return OCRResult(text=text, strategy=label, cost=PAGE_COST_UNITS[label])

    async def _run_cheap(
        self, pixels: PageImage, page_num: int, quality_override: QualityOverride | None
    ) -> OCRResult:
        _ = quality_override
        optimized = self._optimizer.optimize_for_tier(pixels, QualityOverride.CHEAP)
        text = await self._remote_client.extract_low_detail(optimized.payload, page_num)
        label = OCRStrategyLabel.VISION_LOW
        return OCRResult(text=text, strategy=label, cost=PAGE_COST_UNITS[label])

    async def _run_premium(
        self, pixels: PageImage, page_num: int, quality_override: QualityOverride | None
    ) -> OCRResult:
        if quality_override is QualityOverride.PREMIUM_PIPELINE:
            tier, label = QualityOverride.PREMIUM_PIPELINE, OCRStrategyLabel.VISION_HIGH_PIPELINE
        else:
            tier, label = QualityOverride.PREMIUM, OCRStrategyLabel.VISION_HIGH

        optimized = self._optimizer.optimize_for_tier(pixels, tier)
        text = await self._remote_client.extract_high_detail([optimized.payload])
        return OCRResult(text=text, strategy=label, cost=PAGE_COST_UNITS[label])
