from collections.abc import Callable
from unittest.mock import MagicMock

import numpy as np
import pytest

from docrouter.config.settings import Settings
from docrouter.pipeline.models import PipelineResult
from docrouter.processor.exceptions import MissingContextError
from docrouter.processor.pipeline import PipelineContext, PipelineStep
from docrouter.processor.processor import UploadProcessor, build_processor
from docrouter.processor.steps import (
    CountPagesStep,
    RecordDecisionStep,
    RenderPagesStep,
    RouteStep,
)
from docrouter.profiling.models import DocumentFormat, DocumentProfile, UploadedFile, UserTier
from docrouter.rendering.base import BasePageRenderer
from docrouter.rendering.exceptions import RenderError, UnsupportedFormatError
from docrouter.routing.builders import build_config
from docrouter.routing.models import PipelineTier, RouterDecision
from docrouter.routing.recorder import DecisionRecorder
from docrouter.routing.router import UploadRouter


class RecordingStep(PipelineStep):
    def __init__(self, name: str, order: list[str]) -> None:
        self._name = name
        self._order = order

    async def run(self, context: PipelineContext) -> PipelineContext:
        self._order.append(self._name)
        return context


class FailingStep(PipelineStep):
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise RenderError("corrupt page stream")


class RoutedStep(PipelineStep):
    """Fills profile and config the way RouteStep would."""

    def __init__(self, profile: DocumentProfile) -> None:
        self._profile = profile

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.profile = self._profile
        context.config = build_config(self._profile, PipelineTier.BALANCED)
        return context


class CompletedStep(PipelineStep):
    async def run(self, context: PipelineContext) -> PipelineContext:
        context.result = PipelineResult(success=True, total_cost=40, total_time_ms=10.0)
        return context


class UnavailableRecorder(DecisionRecorder):
    def __init__(self) -> None:
        self.calls = 0

    def record(self, decision: RouterDecision) -> None:
        self.calls += 1
        raise ConnectionError(f"db down #{self.calls}")


def _renderer(pages: int = 2) -> MagicMock:
    renderer = MagicMock(spec=BasePageRenderer)
    renderer.page_count.return_value = pages
    renderer.render.return_value = [np.zeros((4, 4, 3), dtype=np.uint8)] * pages
    return renderer


class TestUploadProcessor:
    @pytest.mark.asyncio
    async def test_runs_steps_in_order(self, make_upload: Callable[..., UploadedFile]) -> None:
        order: list[str] = []
        processor = UploadProcessor(
            [RecordingStep("a", order), RecordingStep("b", order)],
            MagicMock(spec=UploadRouter),
        )
        context = await processor.process(make_upload(), user_tier=UserTier.PLUS)
        assert order == ["a", "b"]
        assert context.user_tier is UserTier.PLUS

    @pytest.mark.asyncio
    async def test_failure_after_routing_records_failed_decision(
        self,
        make_upload: Callable[..., UploadedFile],
        make_profile: Callable[..., DocumentProfile],
    ) -> None:
        router = MagicMock(spec=UploadRouter)
        profile = make_profile()
        processor = UploadProcessor([RoutedStep(profile), FailingStep()], router)

        with pytest.raises(RenderError, match="corrupt page stream"):
            await processor.process(make_upload())

        router.record_decision.assert_called_once()
        args, kwargs = router.record_decision.call_args
        assert args[0] is profile
        assert kwargs["success"] is False
        assert kwargs["actual_cost"] == 0

    @pytest.mark.asyncio
    async def test_failure_before_routing_records_nothing(
        self, make_upload: Callable[..., UploadedFile]
    ) -> None:
        router = MagicMock(spec=UploadRouter)
        processor = UploadProcessor([FailingStep()], router)

        with pytest.raises(RenderError):
            await processor.process(make_upload())

        router.record_decision.assert_not_called()

    @pytest.mark.asyncio
    async def test_recorder_failure_is_not_recorded_again(
        self,
        make_upload: Callable[..., UploadedFile],
        make_profile: Callable[..., DocumentProfile],
    ) -> None:
        recorder = UnavailableRecorder()
        router = UploadRouter(recorder=recorder)
        processor = UploadProcessor(
            [RoutedStep(make_profile()), CompletedStep(), RecordDecisionStep(router)],
            router,
        )

        with pytest.raises(ConnectionError, match="db down #1"):
            await processor.process(make_upload())

        assert recorder.calls == 1

    @pytest.mark.asyncio
    async def test_failed_decision_error_does_not_mask_step_error(
        self,
        make_upload: Callable[..., UploadedFile],
        make_profile: Callable[..., DocumentProfile],
    ) -> None:
        recorder = UnavailableRecorder()
        processor = UploadProcessor(
            [RoutedStep(make_profile()), FailingStep()],
            UploadRouter(recorder=recorder),
        )

        with pytest.raises(RenderError, match="corrupt page stream"):
            await processor.process(make_upload())

        assert recorder.calls == 1


class TestCountPagesStep:
    @pytest.mark.asyncio
    async def test_reads_page_count_from_renderer(
        self, make_upload: Callable[..., UploadedFile]
    ) -> None:
        renderer = _renderer(pages=8)
        step = CountPagesStep(lambda document_format: renderer)
        context = await step.run(PipelineContext(upload=make_upload()))
        assert context.document_format is DocumentFormat.PDF
        assert context.page_count == 8

    @pytest.mark.asyncio
    async def test_unsupported_format_leaves_count_to_estimate(
        self, make_upload: Callable[..., UploadedFile]
    ) -> None:
        def provider(document_format: DocumentFormat) -> BasePageRenderer:
            raise UnsupportedFormatError("no renderer")

        upload = make_upload(name="lecture.mp3", mime_type="audio/mpeg")
        context = await CountPagesStep(provider).run(PipelineContext(upload=upload))
        assert context.document_format is DocumentFormat.AUDIO
        assert context.page_count is None


class TestRouteAndRenderSteps:
    @pytest.mark.asyncio
    async def test_route_uses_known_page_count(
        self, make_upload: Callable[..., UploadedFile]
    ) -> None:
        router = UploadRouter(recorder=MagicMock())
        context = PipelineContext(upload=make_upload(name="textbook.pdf"), page_count=8)
        context = await RouteStep(router).run(context)
        assert context.profile is not None
        assert context.profile.page_count == 8
        assert context.config is not None

    @pytest.mark.asyncio
    async def test_render_requires_profile(self, make_upload: Callable[..., UploadedFile]) -> None:
        step = RenderPagesStep(lambda document_format: _renderer())
        with pytest.raises(MissingContextError, match="profile"):
            await step.run(PipelineContext(upload=make_upload()))

    @pytest.mark.asyncio
    async def test_render_fills_pages(
        self,
        make_upload: Callable[..., UploadedFile],
        make_profile: Callable[..., DocumentProfile],
    ) -> None:
        step = RenderPagesStep(lambda document_format: _renderer(pages=3))
        context = PipelineContext(upload=make_upload(), profile=make_profile())
        context = await step.run(context)
        assert len(context.pages) == 3


class TestRecordDecisionStep:
    @pytest.mark.asyncio
    async def test_converts_units_and_milliseconds(
        self,
        make_upload: Callable[..., UploadedFile],
        make_profile: Callable[..., DocumentProfile],
    ) -> None:
        router = MagicMock(spec=UploadRouter)
        profile = make_profile()
        context = PipelineContext(
            upload=make_upload(),
            profile=profile,
            config=build_config(profile, PipelineTier.BALANCED),
            result=PipelineResult(success=True, total_cost=1000, total_time_ms=2500.0),
        )
        await RecordDecisionStep(router).run(context)

        kwargs = router.record_decision.call_args.kwargs
        assert kwargs["actual_cost"] == pytest.approx(0.00013)
        assert kwargs["actual_time"] == pytest.approx(2.5)
        assert kwargs["success"] is True

    @pytest.mark.asyncio
    async def test_requires_result(
        self,
        make_upload: Callable[..., UploadedFile],
        make_profile: Callable[..., DocumentProfile],
    ) -> None:
        profile = make_profile()
        context = PipelineContext(
            upload=make_upload(),
            profile=profile,
            config=build_config(profile, PipelineTier.BALANCED),
        )
        with pytest.raises(MissingContextError):
            await RecordDecisionStep(MagicMock(spec=UploadRouter)).run(context)


class TestBuildProcessor:
    def test_builds_with_example_backends(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OCR_LOCAL_ENGINE", "example")
        monkeypatch.setenv("OCR_REMOTE_PROVIDER", "example")
        processor = build_processor(Settings())
        assert isinstance(processor, UploadProcessor)

    def test_unknown_provider_fails_fast(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OCR_REMOTE_PROVIDER", "acme")
        with pytest.raises(ValueError, match="Unknown remote OCR provider"):
            build_processor(Settings())
