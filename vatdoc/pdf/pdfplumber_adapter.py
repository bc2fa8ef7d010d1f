import io

import pdfplumber

from vatdoc.pdf.base import BasePdfExtractor, PdfPages
from vatdoc.pdf.exceptions import PdfExtractionError


class PdfPlumberAdapter(BasePdfExtractor):
    """Reads PDF pages using pdfplumber."""

    engine_name = "pdfplumber"

    def read_pages(self, pdf_bytes: bytes, max_pages: int) -> PdfPages:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                page_count = len(pdf.pages)
                pages = [page.extract_text() or "" for page in pdf.pages[:max_pages]]
            return PdfPages(pages=pages, page_count=page_count)
        except PdfExtractionError:
            raise
        except Exception as exc:
            raise self._wrap_error(exc) from exc
