import errno
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from vatdoc.pdf.exceptions import PdfEngineConfigurationError, PdfExtractionError


@dataclass(frozen=True)
class PdfPages:
    """Raw per-page text returned by a PDF engine."""

    pages: list[str] = field(default_factory=list)
    page_count: int = 0


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    engine_name = "pdf"

    @abstractmethod
    def read_pages(self, pdf_bytes: bytes, max_pages: int) -> PdfPages:
        """Read the text of at most ``max_pages`` leading pages.

        Args:
            pdf_bytes: Raw PDF file content.
            max_pages: Upper bound on the number of pages parsed.

        Returns:
            PdfPages with one string per parsed page and the total page count.

        Raises:
            PdfEngineConfigurationError: if the engine itself is misconfigured.
            PdfExtractionError: if the bytes cannot be parsed.
        """

    def _wrap_error(self, exc: Exception) -> PdfExtractionError:
        if isinstance(exc, FileNotFoundError) or (
            isinstance(exc, OSError) and exc.errno == errno.ENOENT
        ):
            return PdfEngineConfigurationError(
                f"{self.engine_name} looked for a file on disk while reading in-memory "
                f"input: {exc}"
            )
        return PdfExtractionError(f"{self.engine_name} extraction failed: {exc}")
