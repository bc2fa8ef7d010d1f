from abc import ABC, abstractmethod

from vatdoc.extraction.models import ExtractedContent


class BaseFormatExtractor(ABC):
    """Contract for all per-format content extractors."""

    @abstractmethod
    def extract(self, content: bytes, extension: str) -> ExtractedContent:
        """Turn raw document bytes into text or tabular content.

        Args:
            content: Raw file bytes, already validated.
            extension: Lower-case file extension without the dot.

        Returns:
            ExtractedContent of kind "text" or "table".

        Raises:
            UnsupportedFormatError: if the extension is not handled here.
            CorruptContentError: if the bytes cannot be parsed.
            ExtractionTimeoutError: if parsing exceeds its deadline.
            ExtractorConfigurationError: if the parse library is misconfigured.
        """
