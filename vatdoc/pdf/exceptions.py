class PdfExtractionError(Exception):
    """Raised when a PDF engine cannot read the document."""


class PdfEngineConfigurationError(PdfExtractionError):
    """Raised when a PDF engine fails for reasons unrelated to the input bytes."""
