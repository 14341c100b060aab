from abc import ABC, abstractmethod

from docrouter.database.repositories.router_decision_repository import (
    RouterDecisionRepository,
)
from docrouter.logging.logger import Log
from docrouter.routing.models import RouterDecision


class DecisionRecorder(ABC):
    """Contract for router decision sinks."""

    @abstractmethod
    def record(self, decision: RouterDecision) -> None:
        """Store a decision for offline calibration of the routing constants."""


class LogDecisionRecorder(DecisionRecorder):
    """Writes decisions to the application log only."""

    def record(self, decision: RouterDecision) -> None:
        Log.info(
            "Router decision",
            tier=decision.config.tier.value,
            constants_version=decision.constants_version,
            file_name=decision.profile.file_name,
            pages=decision.profile.page_count,
            success=decision.success,
        )


class PostgresDecisionRecorder(DecisionRecorder):
    """Persists decisions through RouterDecisionRepository."""

    def __init__(self, repository: RouterDecisionRepository) -> None:
        self._repository = repository

    def record(self, decision: RouterDecision) -> None:
        row_id = self._repository.insert(decision)
        Log.debug(f"Router decision stored as row {row_id}")
