from dataclasses import dataclass, field

from docrouter.analysis.models import SkipReason
from docrouter.strategy.models import OCRStrategyLabel


@dataclass(frozen=True)
class OCRResult:
    """Outcome of OCR for one page."""

    text: str
    strategy: OCRStrategyLabel
    cost: int  # cost units
    skipped: bool = False
    skip_reason: SkipReason | None = None

    @classmethod
    def skip(cls, reason: SkipReason) -> "OCRResult":
        """Zero-cost result for a page filtered out before OCR."""
        return cls(
            text="",
            strategy=OCRStrategyLabel.SKIPPED,
            cost=0,
            skipped=True,
            skip_reason=reason,
        )


@dataclass(frozen=True)
class PageResult:
    """Per-page entry of a pipeline run."""

    page_num: int
    strategy: str
    cost: int
    skipped: bool
    skip_reason: SkipReason | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class PipelineResult:
    """Aggregated outcome of one document run."""

    success: bool
    extracted_text: str = ""
    page_results: list[PageResult] = field(default_factory=list)
    total_cost: int = 0
    total_time_ms: float = 0.0
    error: str | None = None
