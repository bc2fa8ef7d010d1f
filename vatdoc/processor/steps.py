from concurrent.futures import ThreadPoolExecutor

from vatdoc.extraction.factory import FormatExtractorFactory
from vatdoc.figures.ai.ai_extractor import AiFigureExtractor
from vatdoc.figures.checks import check_figures
from vatdoc.figures.heuristic import HeuristicFigureExtractor
from vatdoc.figures.reconciler import Reconciler
from vatdoc.intake.hasher import IntegrityHasher
from vatdoc.intake.validator import FileValidator
from vatdoc.logging.logger import Log
from vatdoc.processor.exceptions import (
    DocumentRejectedError,
    FailureReason,
    NoFiguresExtractedError,
    NoHeuristicPathError,
)
from vatdoc.processor.pipeline import PipelineContext, PipelineStep


class ValidateStep(PipelineStep):
    def __init__(self, validator: FileValidator) -> None:
        self._validator = validator

    def run(self, context: PipelineContext) -> PipelineContext:
        result = self._validator.validate(context.document)
        if not result.is_valid:
            raise DocumentRejectedError(
                result.failure_reason or FailureReason.INVALID_FORMAT,
                result.message,
            )
        context.extension = result.detected_extension
        Log.info(
            f"Validated document {context.document.document_id}: "
            f"{context.document.size_bytes} bytes, .{context.extension}"
        )
        return context


class HashStep(PipelineStep):
    def __init__(self, hasher: IntegrityHasher) -> None:
        self._hasher = hasher

    def run(self, context: PipelineContext) -> PipelineContext:
        context.content_hash = self._hasher.digest(context.document.content)
        return context


class ExtractContentStep(PipelineStep):
    def __init__(self, extractors: FormatExtractorFactory) -> None:
        self._extractors = extractors

    def run(self, context: PipelineContext) -> PipelineContext:
        extractor = self._extractors.for_extension(context.extension)
        context.content = extractor.extract(context.document.content, context.extension)
        context.warnings.extend(context.content.warnings)
        return context


class ExtractFiguresStep(PipelineStep):
    """Runs the AI and heuristic extractors side by side on the same content."""

    def __init__(
        self,
        ai_extractor: AiFigureExtractor | None,
        heuristic_extractor: HeuristicFigureExtractor,
    ) -> None:
        self._ai_extractor = ai_extractor
        self._heuristic_extractor = heuristic_extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        content = context.content
        if content is None:
            raise ValueError("PipelineContext.content must be set before figure extraction")
        category = context.document.category

        if content.is_image and self._ai_extractor is None:
            raise NoHeuristicPathError(
                "Images need the AI extractor, which is disabled by configuration"
            )

        if self._ai_extractor is None:
            context.heuristic_candidate = self._heuristic_extractor.extract(content, category)
            return context

        if content.is_image:
            context.ai_candidate = self._ai_extractor.extract(content, category)
            return context

        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="ai-figures") as executor:
            ai_future = executor.submit(self._ai_extractor.extract, content, category)
            context.heuristic_candidate = self._heuristic_extractor.extract(content, category)
            context.ai_candidate = ai_future.result()
        return context


class ReconcileStep(PipelineStep):
    def __init__(self, reconciler: Reconciler) -> None:
        self._reconciler = reconciler

    def run(self, context: PipelineContext) -> PipelineContext:
        result = self._reconciler.reconcile(context.ai_candidate, context.heuristic_candidate)
        if result is None:
            notes = [
                warning
                for candidate in (context.ai_candidate, context.heuristic_candidate)
                if candidate is not None
                for warning in candidate.warnings
            ]
            context.warnings.extend(notes)
            if context.content is not None and context.content.is_image:
                raise NoHeuristicPathError("The AI extractor could not read this image")
            raise NoFiguresExtractedError("Neither extractor found any VAT figures")
        context.reconciliation = result
        context.warnings.extend(result.warnings)
        context.warnings.extend(check_figures(result.figures))
        return context
