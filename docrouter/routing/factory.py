from docrouter.config.settings import Settings
from docrouter.database.repositories.router_decision_repository import (
    RouterDecisionRepository,
)
from docrouter.routing.recorder import (
    DecisionRecorder,
    LogDecisionRecorder,
    PostgresDecisionRecorder,
)


class DecisionRecorderFactory:
    """Creates the configured decision recorder."""

    @classmethod
    def create(cls, settings: Settings) -> DecisionRecorder:
        kind = settings.decision_recorder.lower()
        if kind == "log":
            return LogDecisionRecorder()
        if kind == "postgres":
            return PostgresDecisionRecorder(RouterDecisionRepository())
        raise ValueError(
            f"Unknown decision recorder '{kind}'. Choose from: ['log', 'postgres']"
        )
