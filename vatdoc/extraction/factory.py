from vatdoc.config.pipeline_config import PipelineConfig
from vatdoc.extraction.base import BaseFormatExtractor
from vatdoc.extraction.exceptions import UnsupportedFormatError
from vatdoc.extraction.image_extractor import ImageExtractor
from vatdoc.extraction.pdf_text_extractor import PdfTextExtractor
from vatdoc.extraction.tabular_extractor import TabularExtractor
from vatdoc.pdf.factory import PdfExtractorFactory


class FormatExtractorFactory:
    """Maps file extensions to the extractor that reads them."""

    def __init__(self, extractors: dict[str, BaseFormatExtractor]) -> None:
        self._extractors = dict(extractors)

    @classmethod
    def create(cls, config: PipelineConfig, pdf_engine: str) -> "FormatExtractorFactory":
        pdf = PdfTextExtractor(
            PdfExtractorFactory.create(pdf_engine),
            timeout_seconds=config.pdf_timeout_seconds,
            max_pages=config.max_pdf_pages,
        )
        tabular = TabularExtractor()
        image = ImageExtractor()
        return cls(
            {
                "pdf": pdf,
                "csv": tabular,
                "xlsx": tabular,
                "xls": tabular,
                "jpg": image,
                "jpeg": image,
                "png": image,
            }
        )

    def for_extension(self, extension: str) -> BaseFormatExtractor:
        """Extractor for a validated extension.

        FileValidator rejects extensions without a MIME entry as InvalidFormat
        first, so inside the pipeline this only fails when the two tables
        drift apart.
        """
        extractor = self._extractors.get(extension)
        if extractor is None:
            raise UnsupportedFormatError(f"No extractor registered for '{extension}' files")
        return extractor
