from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from vatdoc.extraction.models import ExtractedContent
from vatdoc.figures.models import FigureCandidate, ReconciliationResult
from vatdoc.intake.models import RawDocument


@dataclass(slots=True)
class PipelineContext:
    document: RawDocument
    extension: str = ""
    content_hash: str = ""
    content: ExtractedContent | None = None
    ai_candidate: FigureCandidate | None = None
    heuristic_candidate: FigureCandidate | None = None
    reconciliation: ReconciliationResult | None = None
    warnings: list[str] = field(default_factory=list)


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
