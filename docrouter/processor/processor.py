import functools
import time

from docrouter.config.settings import Settings
from docrouter.logging.logger import Log
from docrouter.ocr.factory import OcrBackendFactory
from docrouter.pipeline.orchestrator import PageOrchestrator
from docrouter.processor.pipeline import PipelineContext, PipelineStep
from docrouter.processor.steps import (
    CountPagesStep,
    ExecutePipelineStep,
    RecordDecisionStep,
    RenderPagesStep,
    RouteStep,
)
from docrouter.profiling.models import UploadedFile, UserTier
from docrouter.rendering.factory import RendererFactory
from docrouter.routing.factory import DecisionRecorderFactory
from docrouter.routing.router import UploadRouter


class UploadProcessor:
    """Runs an upload through count -> route -> render -> execute -> record.

    A step that raises before the pipeline produced a result is logged,
    recorded as a failed decision when routing already happened, and
    re-raised to the caller. Recording errors never mask the original one.
    """

    def __init__(self, steps: list[PipelineStep], router: UploadRouter) -> None:
        self._steps = steps
        self._router = router

    async def process(
        self,
        upload: UploadedFile,
        user_tier: UserTier | None = None,
    ) -> PipelineContext:
        Log.info(f"Processing {upload.name} ({upload.size} bytes, {upload.mime_type})")
        context = PipelineContext(upload=upload, user_tier=user_tier)
        start = time.perf_counter()
        try:
            for step in self._steps:
                context = await step.run(context)
        except Exception as exc:
            context.error_message = str(exc)
            Log.error(f"Processing {upload.name} failed: {exc}")
            self._record_failure(context, time.perf_counter() - start)
            raise
        return context

    def _record_failure(self, context: PipelineContext, elapsed_seconds: float) -> None:
        # A run with a result has already reached RecordDecisionStep.
        if (
            context.profile is None
            or context.config is None
            or context.decision is not None
            or context.result is not None
        ):
            return
        try:
            context.decision = self._router.record_decision(
                context.profile,
                context.config,
                actual_cost=0.0,
                actual_time=elapsed_seconds,
                success=False,
            )
        except Exception:
            Log.exception(f"Failed to record failed decision for {context.upload.name}")


def build_processor(settings: Settings) -> UploadProcessor:
    """Build an UploadProcessor with all required adapters."""
    router = UploadRouter(recorder=DecisionRecorderFactory.create(settings))
    orchestrator = PageOrchestrator(
        local_engine=OcrBackendFactory.create_local_engine(settings),
        remote_client=OcrBackendFactory.create_remote_client(settings),
    )
    renderer_provider = functools.partial(RendererFactory.create, settings=settings)
    steps: list[PipelineStep] = [
        CountPagesStep(renderer_provider),
        RouteStep(router),
        RenderPagesStep(renderer_provider),
        ExecutePipelineStep(orchestrator),
        RecordDecisionStep(router),
    ]
    return UploadProcessor(steps, router)
