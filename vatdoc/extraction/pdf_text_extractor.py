import re

from vatdoc.extraction.base import BaseFormatExtractor
from vatdoc.extraction.exceptions import (
    CorruptContentError,
    ExtractionTimeoutError,
    ExtractorConfigurationError,
    UnsupportedFormatError,
)
from vatdoc.extraction.models import ExtractedContent
from vatdoc.logging.logger import Log
from vatdoc.pdf.base import BasePdfExtractor, PdfPages
from vatdoc.pdf.exceptions import PdfEngineConfigurationError, PdfExtractionError
from vatdoc.runtime.deadline import DeadlineExceededError, run_with_deadline

_INLINE_WHITESPACE = re.compile(r"[ \t\f\v\u00a0]+")


def normalize_whitespace(text: str) -> str:
    """Collapse inline whitespace runs and drop blank lines."""
    lines = (_INLINE_WHITESPACE.sub(" ", line).strip() for line in text.splitlines())
    return "\n".join(line for line in lines if line)


class PdfTextExtractor(BaseFormatExtractor):
    """Reads a bounded number of PDF pages under a hard deadline."""

    def __init__(
        self,
        engine: BasePdfExtractor,
        *,
        timeout_seconds: float,
        max_pages: int,
    ) -> None:
        self._engine = engine
        self._timeout_seconds = timeout_seconds
        self._max_pages = max_pages

    def extract(self, content: bytes, extension: str) -> ExtractedContent:
        if extension != "pdf":
            raise UnsupportedFormatError(f"PdfTextExtractor cannot read '{extension}' files")

        parsed = self._read_with_deadline(content)
        text = "\n".join(
            normalized
            for normalized in (normalize_whitespace(page) for page in parsed.pages)
            if normalized
        )

        warnings: list[str] = []
        if parsed.page_count > len(parsed.pages):
            warnings.append(
                f"PageLimit: only the first {len(parsed.pages)} of "
                f"{parsed.page_count} pages were read"
            )
        if not text:
            warnings.append("NoTextLayer: PDF has no extractable text, it may be scanned")

        Log.info(
            f"Extracted {len(text)} chars from {len(parsed.pages)} PDF pages "
            f"({self._engine.engine_name})"
        )
        return ExtractedContent(
            kind="text",
            text=text,
            page_count=parsed.page_count,
            warnings=tuple(warnings),
        )

    def _read_with_deadline(self, content: bytes) -> PdfPages:
        try:
            return run_with_deadline(
                lambda: self._engine.read_pages(content, self._max_pages),
                self._timeout_seconds,
                name="pdf-parse",
            )
        except DeadlineExceededError as exc:
            raise ExtractionTimeoutError(
                f"PDF parsing exceeded {self._timeout_seconds:g}s"
            ) from exc
        except PdfEngineConfigurationError as exc:
            Log.error(f"PDF engine misconfigured: {exc}")
            raise ExtractorConfigurationError(str(exc)) from exc
        except PdfExtractionError as exc:
            raise CorruptContentError(str(exc)) from exc
