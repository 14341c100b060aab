from collections.abc import Callable

from docrouter.logging.logger import Log
from docrouter.pipeline.costs import calculate_cost_savings, cost_units_to_usd
from docrouter.pipeline.executor import execute_pipeline
from docrouter.pipeline.orchestrator import PageOrchestrator
from docrouter.processor.exceptions import MissingContextError
from docrouter.processor.pipeline import PipelineContext, PipelineStep
from docrouter.profiling.models import DocumentFormat
from docrouter.profiling.profiler import DocumentProfiler
from docrouter.rendering.base import BasePageRenderer
from docrouter.rendering.exceptions import UnsupportedFormatError
from docrouter.routing.router import UploadRouter

RendererProvider = Callable[[DocumentFormat], BasePageRenderer]


class CountPagesStep(PipelineStep):
    """Reads the real page count so the profiler does not have to guess it from bytes."""

    def __init__(self, renderer_provider: RendererProvider) -> None:
        self._renderer_provider = renderer_provider

    async def run(self, context: PipelineContext) -> PipelineContext:
        upload = context.upload
        context.document_format = DocumentProfiler.detect_format(upload.mime_type, upload.name)
        try:
            renderer = self._renderer_provider(context.document_format)
        except UnsupportedFormatError:
            Log.warning(
                f"No renderer for {context.document_format.value}, page count will be estimated"
            )
            return context
        context.page_count = renderer.page_count(upload.data)
        Log.info(f"{upload.name} has {context.page_count} pages")
        return context


class RouteStep(PipelineStep):
    def __init__(self, router: UploadRouter) -> None:
        self._router = router

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.profile, context.config = self._router.route(
            context.upload,
            user_tier=context.user_tier,
            page_count=context.page_count,
        )
        return context


class RenderPagesStep(PipelineStep):
    def __init__(self, renderer_provider: RendererProvider) -> None:
        self._renderer_provider = renderer_provider

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.profile is None:
            raise MissingContextError("PipelineContext.profile must be set before rendering")
        renderer = self._renderer_provider(context.profile.format)
        context.pages = renderer.render(context.upload.data)
        Log.info(f"Rendered {len(context.pages)} pages from {context.upload.name}")
        return context


class ExecutePipelineStep(PipelineStep):
    def __init__(self, orchestrator: PageOrchestrator) -> None:
        self._orchestrator = orchestrator

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.config is None:
            raise MissingContextError("PipelineContext.config must be set before execution")
        result = await execute_pipeline(context.pages, context.config, self._orchestrator)
        context.result = result
        if result.success:
            savings = calculate_cost_savings(len(context.pages), result.total_cost)
            Log.info(
                f"Extracted {len(result.extracted_text)} chars from {context.upload.name}",
                cost_units=result.total_cost,
                savings=f"{savings.savings_percent:.1f}%",
            )
        else:
            context.error_message = result.error or ""
            Log.error(f"Pipeline failed for {context.upload.name}: {result.error}")
        return context


class RecordDecisionStep(PipelineStep):
    def __init__(self, router: UploadRouter) -> None:
        self._router = router

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.profile is None or context.config is None or context.result is None:
            raise MissingContextError(
                "PipelineContext.profile, config and result must be set before recording"
            )
        context.decision = self._router.record_decision(
            context.profile,
            context.config,
            actual_cost=cost_units_to_usd(context.result.total_cost),
            actual_time=context.result.total_time_ms / 1000,
            success=context.result.success,
        )
        return context
