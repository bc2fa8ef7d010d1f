from enum import Enum
from typing import ClassVar


class FailureReason(str, Enum):
    """Why a document ended without usable figures."""

    INVALID_FORMAT = "InvalidFormat"
    TOO_LARGE = "TooLarge"
    CORRUPT_CONTENT = "CorruptContent"
    EXTRACTION_TIMEOUT = "ExtractionTimeout"
    UNSUPPORTED_FORMAT = "UnsupportedFormat"
    NO_HEURISTIC_PATH_FOR_IMAGE = "NoHeuristicPathForImage"
    EXTRACTOR_CONFIGURATION = "ExtractorConfiguration"
    NO_FIGURES_EXTRACTED = "NoFiguresExtracted"
    INTERNAL_ERROR = "InternalError"


class PipelineError(Exception):
    """Base exception for errors that are terminal for a single document."""

    reason: ClassVar[FailureReason] = FailureReason.INTERNAL_ERROR


class DocumentRejectedError(PipelineError):
    """Raised when a document fails file validation."""

    def __init__(self, reason: FailureReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason  # type: ignore[misc]


class NoHeuristicPathError(PipelineError):
    """Raised when an image arrives while the AI path is disabled."""

    reason = FailureReason.NO_HEURISTIC_PATH_FOR_IMAGE


class NoFiguresExtractedError(PipelineError):
    """Raised when neither figure extractor produced a usable candidate."""

    reason = FailureReason.NO_FIGURES_EXTRACTED


class BatchCancelledError(Exception):
    """Raised when the caller aborts a batch before it completes."""
