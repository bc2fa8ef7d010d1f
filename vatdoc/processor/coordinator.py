import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait

from vatdoc.config.pipeline_config import PipelineConfig
from vatdoc.config.settings import Settings
from vatdoc.intake.models import RawDocument
from vatdoc.logging.logger import Log
from vatdoc.processor.exceptions import BatchCancelledError, FailureReason
from vatdoc.processor.models import BatchResult, ExtractionOutcome
from vatdoc.processor.processor import DocumentProcessor, build_processor
from vatdoc.runtime.deadline import DeadlineExceededError, run_with_deadline

CANCEL_POLL_SECONDS = 0.05


class BatchCoordinator:
    """Drive a batch of documents through the processor with bounded parallelism.

    Each document gets its own deadline; a slow or failing document never
    blocks or fails its siblings. Outcomes are returned in input order.
    """

    def __init__(self, processor: DocumentProcessor, config: PipelineConfig) -> None:
        self._processor = processor
        self._config = config

    def run(
        self,
        documents: list[RawDocument],
        cancel_event: threading.Event | None = None,
    ) -> BatchResult:
        Log.info(
            f"Batch started: {len(documents)} documents, "
            f"up to {self._config.max_concurrent_documents} in parallel"
        )
        executor = ThreadPoolExecutor(
            max_workers=self._config.max_concurrent_documents,
            thread_name_prefix="vat-document",
        )
        try:
            futures = [executor.submit(self._process_one, document) for document in documents]
            self._wait_all(futures, cancel_event)
            outcomes = [future.result() for future in futures]
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        result = BatchResult.from_outcomes(self._flag_duplicates(outcomes, documents))
        summary = result.summary
        Log.info(
            f"Batch finished: {summary.processed} processed, {summary.succeeded} succeeded, "
            f"{summary.partial} partial, {summary.failed} failed; "
            f"sales VAT {result.total_sales_vat}, purchase VAT {result.total_purchase_vat}"
        )
        return result

    def _process_one(self, document: RawDocument) -> ExtractionOutcome:
        timeout = self._config.document_timeout_seconds
        try:
            return run_with_deadline(
                lambda: self._processor.process(document),
                timeout,
                name=f"document-{document.document_id[:8]}",
            )
        except DeadlineExceededError:
            Log.error(f"Document {document.document_id} exceeded the {timeout:g}s deadline")
            return ExtractionOutcome.failed(
                document.document_id,
                FailureReason.EXTRACTION_TIMEOUT,
                f"processing did not finish within {timeout:g}s",
            )

    @staticmethod
    def _wait_all(
        futures: list[Future[ExtractionOutcome]],
        cancel_event: threading.Event | None,
    ) -> None:
        pending = set(futures)
        while pending:
            if cancel_event is not None and cancel_event.is_set():
                for future in pending:
                    future.cancel()
                Log.warning(f"Batch cancelled with {len(pending)} documents unfinished")
                raise BatchCancelledError(
                    f"Batch cancelled with {len(pending)} of {len(futures)} documents unfinished"
                )
            timeout = CANCEL_POLL_SECONDS if cancel_event is not None else None
            _, pending = wait(pending, timeout=timeout, return_when=FIRST_COMPLETED)

    @staticmethod
    def _flag_duplicates(
        outcomes: list[ExtractionOutcome],
        documents: list[RawDocument],
    ) -> list[ExtractionOutcome]:
        first_seen: dict[str, RawDocument] = {}
        flagged: list[ExtractionOutcome] = []
        for outcome, document in zip(outcomes, documents):
            digest = outcome.content_hash
            original = first_seen.get(digest) if digest else None
            if original is not None:
                Log.warning(
                    f"Document {document.document_id} duplicates {original.document_id}"
                )
                outcome = outcome.downgraded(
                    f"DuplicateContent: identical to '{original.file_name}' "
                    f"({original.document_id})"
                )
            elif digest:
                first_seen[digest] = document
            flagged.append(outcome)
        return flagged


def build_coordinator(settings: Settings) -> BatchCoordinator:
    """Build a BatchCoordinator around a processor sharing one configuration snapshot."""
    config = settings.pipeline_config()
    return BatchCoordinator(build_processor(settings, config), config)
