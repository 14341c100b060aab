"""Per-page cost units by backend and helpers to express them in USD."""

from dataclasses import dataclass
from typing import Final

from docrouter.strategy.models import OCRStrategyLabel

PAGE_COST_UNITS: Final[dict[OCRStrategyLabel, int]] = {
    OCRStrategyLabel.TESSERACT: 0,
    OCRStrategyLabel.VISION_LOW: 40,
    OCRStrategyLabel.VISION_HIGH: 800,
    OCRStrategyLabel.VISION_HIGH_PIPELINE: 1200,
    OCRStrategyLabel.SKIPPED: 0,
}

BASELINE_UNITS_PER_PAGE: Final = PAGE_COST_UNITS[OCRStrategyLabel.VISION_HIGH]
USD_PER_1000_UNITS: Final = 0.00013


def cost_units_to_usd(units: float) -> float:
    return units * USD_PER_1000_UNITS / 1000


@dataclass(frozen=True)
class CostSavings:
    baseline_cost: int
    hybrid_cost: int
    savings_units: int
    savings_percent: float
    savings_usd: float


def calculate_cost_savings(total_pages: int, total_cost: int) -> CostSavings:
    """Compare a run's cost with sending every page to high-detail OCR."""
    baseline = total_pages * BASELINE_UNITS_PER_PAGE
    saved = baseline - total_cost
    return CostSavings(
        baseline_cost=baseline,
        hybrid_cost=total_cost,
        savings_units=saved,
        savings_percent=saved / baseline * 100 if baseline > 0 else 0.0,
        savings_usd=cost_units_to_usd(saved),
    )
