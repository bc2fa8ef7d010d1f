import pymupdf

from vatdoc.pdf.base import BasePdfExtractor, PdfPages
from vatdoc.pdf.exceptions import PdfExtractionError


class PyMuPdfAdapter(BasePdfExtractor):
    """Reads PDF pages using PyMuPDF."""

    engine_name = "pymupdf"

    def read_pages(self, pdf_bytes: bytes, max_pages: int) -> PdfPages:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                page_count = doc.page_count
                pages = [doc[i].get_text() for i in range(min(page_count, max_pages))]
            return PdfPages(pages=pages, page_count=page_count)
        except PdfExtractionError:
            raise
        except Exception as exc:
            raise self._wrap_error(exc) from exc
