"""Tier executors: drive the page orchestrator across a whole document.

Pages are processed in sequential batches of pages_per_batch * parallel_batches;
pages inside a batch run as concurrent tasks on the event loop. Results are
folded in page order. The first failing page (in page order) ends the run:
it is recorded as a failed entry and later pages are left out.
"""

import asyncio
import math
import time
from collections import Counter
from collections.abc import Sequence
from typing import ClassVar

from docrouter.analysis.page import PageImage
from docrouter.analysis.page_filter import PageHashSet
from docrouter.logging.logger import Log
from docrouter.pipeline.models import OCRResult, PageResult, PipelineResult
from docrouter.pipeline.orchestrator import PageOrchestrator
from docrouter.routing.models import PipelineConfig, PipelineTier

_FAILED_STRATEGY = "failed"


class BasePipelineExecutor:
    """Shared batching and folding logic for every tier."""

    tier: ClassVar[PipelineTier]

    def __init__(self, orchestrator: PageOrchestrator) -> None:
        self._orchestrator = orchestrator

    @property
    def _tag(self) -> str:
        return f"[pipeline:{self.tier.value}]"

    async def execute(
        self, pages: Sequence[PageImage], config: PipelineConfig
    ) -> PipelineResult:
        total_pages = len(pages)
        batch_size = config.ocr.batch_size
        total_batches = math.ceil(total_pages / batch_size)
        Log.info(
            f"{self._tag} Processing {total_pages} pages in batches of {batch_size}"
        )

        start = time.perf_counter()
        hash_set = PageHashSet()
        page_results: list[PageResult] = []
        fragments: list[str] = []
        total_cost = 0

        for batch_start in range(0, total_pages, batch_size):
            batch = pages[batch_start : batch_start + batch_size]
            Log.info(
                f"{self._tag} Processing batch {batch_start // batch_size + 1}/"
                f"{total_batches} ({len(batch)} pages)"
            )
            outcomes = await asyncio.gather(
                *(
                    self._orchestrator.process_page(
                        page,
                        batch_start + offset + 1,
                        total_pages,
                        hash_set=hash_set,
                        config=config,
                    )
                    for offset, page in enumerate(batch)
                ),
                return_exceptions=True,
            )

            for offset, outcome in enumerate(outcomes):
                page_num = batch_start + offset + 1
                if isinstance(outcome, Exception):
                    message = str(outcome) or type(outcome).__name__
                    page_results.append(
                        PageResult(
                            page_num=page_num,
                            strategy=_FAILED_STRATEGY,
                            cost=0,
                            skipped=False,
                            error=message,
                        )
                    )
                    elapsed_ms = (time.perf_counter() - start) * 1000
                    Log.error(f"{self._tag} Page {page_num} failed, aborting run: {message}")
                    return PipelineResult(
                        success=False,
                        extracted_text="\n\n".join(fragments),
                        page_results=page_results,
                        total_cost=total_cost,
                        total_time_ms=elapsed_ms,
                        error=message,
                    )
                if isinstance(outcome, BaseException):
                    raise outcome

                page_result = self._fold(outcome, page_num, fragments)
                page_results.append(page_result)
                total_cost += page_result.cost
                self._on_page(page_result)

        result = PipelineResult(
            success=True,
            extracted_text="\n\n".join(fragments),
            page_results=page_results,
            total_cost=total_cost,
            total_time_ms=(time.perf_counter() - start) * 1000,
        )
        self._on_complete(result, total_pages)
        return result

    @staticmethod
    def _fold(outcome: OCRResult, page_num: int, fragments: list[str]) -> PageResult:
        if not outcome.skipped and outcome.text:
            fragments.append(outcome.text)
        return PageResult(
            page_num=page_num,
            strategy=outcome.strategy.value,
            cost=outcome.cost,
            skipped=outcome.skipped,
            skip_reason=outcome.skip_reason,
        )

    def _on_page(self, page_result: PageResult) -> None:
        """Hook called after each page is folded into the result."""

    def _on_complete(self, result: PipelineResult, total_pages: int) -> None:
        skipped = sum(1 for p in result.page_results if p.skipped)
        avg_ms = result.total_time_ms / total_pages if total_pages else 0.0
        Log.info(
            f"{self._tag} Complete",
            pages=total_pages,
            skipped=skipped,
            total_cost=result.total_cost,
            time_ms=f"{result.total_time_ms:.0f}",
            avg_time_per_page=f"{avg_ms:.0f}ms",
        )


class FastPipelineExecutor(BasePipelineExecutor):
    """Aggressive free/cheap routing with the widest batches."""

    tier = PipelineTier.FAST


class BalancedPipelineExecutor(BasePipelineExecutor):
    """Default hybrid routing."""

    tier = PipelineTier.BALANCED


class PremiumPipelineExecutor(BasePipelineExecutor):
    """Quality-first routing with a per-page audit trail."""

    tier = PipelineTier.PREMIUM

    def _on_page(self, page_result: PageResult) -> None:
        suffix = " [SKIPPED]" if page_result.skipped else ""
        Log.info(
            f"{self._tag} Page {page_result.page_num}: {page_result.strategy} "
            f"({page_result.cost} units){suffix}"
        )

    def _on_complete(self, result: PipelineResult, total_pages: int) -> None:
        super()._on_complete(result, total_pages)
        breakdown = strategy_breakdown(result.page_results)
        avg_cost = result.total_cost / total_pages if total_pages else 0.0
        Log.info(
            f"{self._tag} Strategy breakdown",
            processed=sum(breakdown.values()),
            avg_cost_per_page=f"{avg_cost:.1f}",
            **breakdown,
        )


def strategy_breakdown(page_results: Sequence[PageResult]) -> dict[str, int]:
    """Count processed (non-skipped) pages per strategy label."""
    return dict(Counter(p.strategy for p in page_results if not p.skipped))


_EXECUTORS: dict[PipelineTier, type[BasePipelineExecutor]] = {
    PipelineTier.FAST: FastPipelineExecutor,
    PipelineTier.BALANCED: BalancedPipelineExecutor,
    PipelineTier.PREMIUM: PremiumPipelineExecutor,
}


async def execute_pipeline(
    pages: Sequence[PageImage],
    config: PipelineConfig,
    orchestrator: PageOrchestrator,
) -> PipelineResult:
    """Run *pages* through the executor matching the config's tier."""
    Log.info(
        f"[pipeline] Executing {config.tier.value.upper()} pipeline for {len(pages)} pages"
    )
    Log.info(f"[pipeline] {config.routing_reason}")
    executor = _EXECUTORS[config.tier](orchestrator)
    return await executor.execute(pages, config)
