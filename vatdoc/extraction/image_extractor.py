from typing import ClassVar

from vatdoc.extraction.base import BaseFormatExtractor
from vatdoc.extraction.exceptions import UnsupportedFormatError
from vatdoc.extraction.models import ExtractedContent, ImagePayload


class ImageExtractor(BaseFormatExtractor):
    """Packages image bytes for the AI vision path.

    No OCR happens here. The empty text tells downstream stages that only
    the AI extractor can read this document.
    """

    MIME_TYPES: ClassVar[dict[str, str]] = {
        "jpg": "image/jpeg",
        "jpeg": "image/jpeg",
        "png": "image/png",
    }

    def extract(self, content: bytes, extension: str) -> ExtractedContent:
        mime_type = self.MIME_TYPES.get(extension)
        if mime_type is None:
            raise UnsupportedFormatError(f"ImageExtractor cannot read '{extension}' files")
        return ExtractedContent(
            kind="text",
            text="",
            image=ImagePayload(content=content, mime_type=mime_type),
        )
