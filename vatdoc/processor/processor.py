from vatdoc.config.pipeline_config import PipelineConfig
from vatdoc.config.settings import Settings
from vatdoc.extraction.factory import FormatExtractorFactory
from vatdoc.figures.ai.factory import AiFigureExtractorFactory
from vatdoc.figures.heuristic import HeuristicFigureExtractor
from vatdoc.figures.models import ConfidenceTier
from vatdoc.figures.reconciler import Reconciler
from vatdoc.intake.hasher import IntegrityHasher
from vatdoc.intake.models import RawDocument
from vatdoc.intake.validator import FileValidator
from vatdoc.logging.logger import Log
from vatdoc.processor.exceptions import FailureReason, PipelineError
from vatdoc.processor.models import ExtractionOutcome, OutcomeStatus
from vatdoc.processor.pipeline import PipelineContext, PipelineStep
from vatdoc.processor.steps import (
    ExtractContentStep,
    ExtractFiguresStep,
    HashStep,
    ReconcileStep,
    ValidateStep,
)


class DocumentProcessor:
    """Runs one document through the extraction pipeline.

    Pipeline: validate -> hash -> extract content -> extract figures -> reconcile.
    Every document ends in exactly one ExtractionOutcome; errors never escape.
    """

    def __init__(self, steps: list[PipelineStep]) -> None:
        self._steps = list(steps)

    def process(self, document: RawDocument) -> ExtractionOutcome:
        Log.info(f"Processing document {document.document_id} ({document.file_name})")
        context = PipelineContext(document=document)
        try:
            for step in self._steps:
                context = step.run(context)
        except PipelineError as exc:
            Log.warning(f"Document {document.document_id} failed: {exc.reason.value}: {exc}")
            return ExtractionOutcome.failed(
                document.document_id,
                exc.reason,
                str(exc),
                content_hash=context.content_hash,
                warnings=tuple(context.warnings),
            )
        except Exception as exc:
            Log.exception(f"Unexpected error while processing document {document.document_id}")
            return ExtractionOutcome.failed(
                document.document_id,
                FailureReason.INTERNAL_ERROR,
                f"{type(exc).__name__}: {exc}",
                content_hash=context.content_hash,
                warnings=tuple(context.warnings),
            )
        return self._outcome(context)

    @staticmethod
    def _outcome(context: PipelineContext) -> ExtractionOutcome:
        document_id = context.document.document_id
        result = context.reconciliation
        if result is None:
            return ExtractionOutcome.failed(
                document_id,
                FailureReason.NO_FIGURES_EXTRACTED,
                "Pipeline finished without reconciled figures",
                content_hash=context.content_hash,
                warnings=tuple(context.warnings),
            )

        warnings = tuple(context.warnings)
        if result.figures.has_vat:
            status = OutcomeStatus.SUCCEEDED
            tier = result.confidence_tier
        else:
            status = OutcomeStatus.PARTIAL_FAILURE
            tier = ConfidenceTier.LOW
            warnings += ("MissingVat: figures were found but no VAT amount could be assigned",)

        Log.info(
            f"Document {document_id} finished: {status.value}, tier {tier.value}, "
            f"{len(warnings)} warnings"
        )
        return ExtractionOutcome(
            document_id=document_id,
            status=status,
            confidence_tier=tier,
            figures=result.figures,
            warnings=warnings,
            content_hash=context.content_hash,
        )


def build_processor(
    settings: Settings,
    config: PipelineConfig | None = None,
) -> DocumentProcessor:
    """Build a DocumentProcessor with all required adapters."""
    config = config or settings.pipeline_config()
    ai_extractor = AiFigureExtractorFactory.create(settings) if config.ai_enabled else None
    steps: list[PipelineStep] = [
        ValidateStep(FileValidator(config)),
        HashStep(IntegrityHasher()),
        ExtractContentStep(FormatExtractorFactory.create(config, settings.pdf_engine)),
        ExtractFiguresStep(ai_extractor, HeuristicFigureExtractor()),
        ReconcileStep(Reconciler()),
    ]
    return DocumentProcessor(steps)
