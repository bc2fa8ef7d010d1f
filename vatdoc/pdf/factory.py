from vatdoc.pdf.base import BasePdfExtractor
from vatdoc.pdf.pdfplumber_adapter import PdfPlumberAdapter
from vatdoc.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Creates the PDF engine adapter named by the ``pdf_engine`` setting."""

    ADAPTERS: dict[str, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, pdf_engine: str) -> BasePdfExtractor:
        name = pdf_engine.strip().lower()
        if name not in cls.ADAPTERS:
            known = ", ".join(sorted(cls.ADAPTERS))
            raise ValueError(f"Unknown PDF engine '{pdf_engine}' (known engines: {known})")
        return cls.ADAPTERS[name]()
