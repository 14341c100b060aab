from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from docrouter.analysis.page import PageImage
from docrouter.pipeline.models import PipelineResult
from docrouter.profiling.models import DocumentFormat, DocumentProfile, UploadedFile, UserTier
from docrouter.routing.models import PipelineConfig, RouterDecision


@dataclass(slots=True)
class PipelineContext:
    upload: UploadedFile
    user_tier: UserTier | None = None
    document_format: DocumentFormat | None = None
    page_count: int | None = None
    profile: DocumentProfile | None = None
    config: PipelineConfig | None = None
    pages: list[PageImage] = field(default_factory=list)
    result: PipelineResult | None = None
    decision: RouterDecision | None = None
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
