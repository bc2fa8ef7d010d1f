from vatdoc.processor.exceptions import FailureReason, PipelineError


class ExtractionError(PipelineError):
    """Base exception for format extraction failures."""

    reason = FailureReason.CORRUPT_CONTENT


class UnsupportedFormatError(ExtractionError):
    """Raised when no extractor handles the document's extension."""

    reason = FailureReason.UNSUPPORTED_FORMAT


class CorruptContentError(ExtractionError):
    """Raised when the bytes cannot be parsed as the declared format."""

    reason = FailureReason.CORRUPT_CONTENT


class ExtractionTimeoutError(ExtractionError):
    """Raised when a parse call exceeds its deadline."""

    reason = FailureReason.EXTRACTION_TIMEOUT


class ExtractorConfigurationError(ExtractionError):
    """Raised when the parse library fails for environmental reasons.

    Some PDF engines report missing bundled resources as "file not found"
    while reading perfectly valid in-memory input. That is an operator
    problem, not bad user input, so it gets its own failure reason.
    """

    reason = FailureReason.EXTRACTOR_CONFIGURATION
