"""Document-level routing: profile an upload, pick a tier, build its config.

Sits above the page-level strategy selector: the config produced here biases
every per-page decision of the run.
"""

from datetime import datetime, timezone

from docrouter.logging.logger import Log
from docrouter.profiling.models import DocumentProfile, UploadedFile, UserTier
from docrouter.profiling.profiler import DocumentProfiler
from docrouter.routing.builders import build_config
from docrouter.routing.constants import CONSTANTS_VERSION
from docrouter.routing.models import PipelineConfig, RouterDecision
from docrouter.routing.recorder import DecisionRecorder, LogDecisionRecorder
from docrouter.routing.selector import select_tier


def estimate_accuracy(estimate: float, actual: float) -> float | None:
    """1 - relative error of *estimate*; None when nothing was estimated."""
    if estimate <= 0:
        return None
    return 1 - abs(actual - estimate) / estimate


class UploadRouter:
    """Entry point for document-level routing decisions."""

    def __init__(
        self,
        profiler: DocumentProfiler | None = None,
        recorder: DecisionRecorder | None = None,
    ) -> None:
        self._profiler = profiler or DocumentProfiler()
        self._recorder = recorder or LogDecisionRecorder()

    def route(
        self,
        upload: UploadedFile,
        user_tier: UserTier | None = None,
        page_count: int | None = None,
    ) -> tuple[DocumentProfile, PipelineConfig]:
        profile = self._profiler.analyze(upload, user_tier=user_tier, page_count=page_count)

        tier = select_tier(profile)
        Log.info(f"Selected pipeline: {tier.value.upper()}")

        config = build_config(profile, tier)
        Log.info(
            "Pipeline config built",
            tier=config.tier.value,
            estimated_cost=f"${config.estimated_cost.total:.4f}",
            estimated_time=f"{config.estimated_time.total:.0f}s",
            reason=config.routing_reason,
        )
        return profile, config

    def record_decision(
        self,
        profile: DocumentProfile,
        config: PipelineConfig,
        actual_cost: float,
        actual_time: float,
        success: bool,
    ) -> RouterDecision:
        """Pair the routing decision with its observed outcome and store it.

        Args:
            actual_cost: Observed spend in USD.
            actual_time: Observed wall time in seconds.
        """
        decision = RouterDecision(
            timestamp=datetime.now(timezone.utc),
            profile=profile,
            config=config,
            actual_cost=actual_cost,
            actual_time=actual_time,
            success=success,
            constants_version=CONSTANTS_VERSION,
        )

        cost_accuracy = estimate_accuracy(config.estimated_cost.total, actual_cost)
        time_accuracy = estimate_accuracy(config.estimated_time.total, actual_time)
        Log.info(
            "Decision recorded",
            pipeline=config.tier.value,
            estimated_cost=f"${config.estimated_cost.total:.4f}",
            actual_cost=f"${actual_cost:.4f}",
            cost_accuracy=_percent(cost_accuracy),
            estimated_time=f"{config.estimated_time.total:.0f}s",
            actual_time=f"{actual_time:.1f}s",
            time_accuracy=_percent(time_accuracy),
            success=success,
        )

        self._recorder.record(decision)
        return decision


def _percent(value: float | None) -> str:
    return "n/a" if value is None else f"{value * 100:.1f}%"
