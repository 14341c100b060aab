from collections.abc import Callable
from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest

from docrouter.database.repositories.router_decision_repository import (
    RouterDecisionRepository,
)
from docrouter.profiling.models import DocumentProfile, UploadedFile, UserTier
from docrouter.routing.builders import build_config
from docrouter.routing.constants import CONSTANTS_VERSION
from docrouter.routing.factory import DecisionRecorderFactory
from docrouter.routing.models import PipelineTier, RouterDecision
from docrouter.routing.recorder import (
    DecisionRecorder,
    LogDecisionRecorder,
    PostgresDecisionRecorder,
)
from docrouter.routing.router import UploadRouter, estimate_accuracy

MB = 1024 * 1024


def _make_settings(decision_recorder: str):  # type: ignore[no-untyped-def]
    with patch("docrouter.config.settings.Settings") as mock_cls:
        settings = mock_cls.return_value
        settings.decision_recorder = decision_recorder
        return settings


class TestEstimateAccuracy:
    def test_exact_estimate(self) -> None:
        assert estimate_accuracy(10.0, 10.0) == 1.0

    def test_relative_error(self) -> None:
        assert estimate_accuracy(10.0, 12.0) == pytest.approx(0.8)

    def test_zero_estimate_has_no_accuracy(self) -> None:
        assert estimate_accuracy(0.0, 5.0) is None


class TestUploadRouterRoute:
    def test_routes_textbook_to_fast(
        self, make_upload: Callable[..., UploadedFile]
    ) -> None:
        router = UploadRouter(recorder=MagicMock(spec=DecisionRecorder))
        profile, config = router.route(
            make_upload(name="textbook.pdf", size=3 * MB), page_count=8
        )
        assert profile.page_count == 8
        assert config.tier is PipelineTier.FAST

    def test_routes_scan_to_premium(
        self, make_upload: Callable[..., UploadedFile]
    ) -> None:
        router = UploadRouter(recorder=MagicMock(spec=DecisionRecorder))
        _, config = router.route(
            make_upload(name="scan_notes.pdf", size=5 * MB), page_count=25
        )
        assert config.tier is PipelineTier.PREMIUM
        assert "image-heavy content" in config.routing_reason

    def test_passes_user_tier_to_profile(
        self, make_upload: Callable[..., UploadedFile]
    ) -> None:
        router = UploadRouter(recorder=MagicMock(spec=DecisionRecorder))
        profile, _ = router.route(make_upload(), user_tier=UserTier.FREE)
        assert profile.user_tier is UserTier.FREE


class TestUploadRouterRecordDecision:
    def test_builds_and_records_decision(
        self, make_profile: Callable[..., DocumentProfile]
    ) -> None:
        recorder = MagicMock(spec=DecisionRecorder)
        router = UploadRouter(recorder=recorder)
        profile = make_profile()
        config = build_config(profile, PipelineTier.BALANCED)

        decision = router.record_decision(
            profile, config, actual_cost=0.01, actual_time=30.0, success=True
        )

        recorder.record.assert_called_once_with(decision)
        assert decision.profile is profile
        assert decision.config is config
        assert decision.success is True
        assert decision.constants_version == CONSTANTS_VERSION
        assert isinstance(decision.timestamp, datetime)
        assert decision.timestamp.tzinfo is not None


def _decision(make_profile: Callable[..., DocumentProfile]) -> RouterDecision:
    profile = make_profile()
    return RouterDecision(
        timestamp=datetime(2025, 1, 1),
        profile=profile,
        config=build_config(profile, PipelineTier.PREMIUM),
        actual_cost=0.02,
        actual_time=12.0,
        success=False,
        constants_version=CONSTANTS_VERSION,
    )


class TestRecorders:
    def test_log_recorder_does_not_raise(
        self, make_profile: Callable[..., DocumentProfile]
    ) -> None:
        LogDecisionRecorder().record(_decision(make_profile))

    def test_postgres_recorder_inserts(
        self, make_profile: Callable[..., DocumentProfile]
    ) -> None:
        repository = MagicMock(spec=RouterDecisionRepository)
        repository.insert.return_value = 7
        decision = _decision(make_profile)
        PostgresDecisionRecorder(repository).record(decision)
        repository.insert.assert_called_once_with(decision)


class TestDecisionRecorderFactory:
    def test_creates_log_recorder(self) -> None:
        recorder = DecisionRecorderFactory.create(_make_settings("log"))
        assert isinstance(recorder, LogDecisionRecorder)

    def test_creates_postgres_recorder(self) -> None:
        recorder = DecisionRecorderFactory.create(_make_settings("Postgres"))
        assert isinstance(recorder, PostgresDecisionRecorder)

    def test_raises_for_unknown_recorder(self) -> None:
        with pytest.raises(ValueError, match="Unknown decision recorder"):
            DecisionRecorderFactory.create(_make_settings("kafka"))
