import pytest

from vatdoc.extraction.exceptions import UnsupportedFormatError
from vatdoc.extraction.image_extractor import ImageExtractor


class TestImageExtractor:
    def test_packages_image_for_ai(self, png_bytes: bytes) -> None:
        content = ImageExtractor().extract(png_bytes, "png")
        assert content.is_image
        assert content.text == ""
        assert content.image is not None
        assert content.image.mime_type == "image/png"
        assert content.image.content == png_bytes

    @pytest.mark.parametrize("extension", ["jpg", "jpeg"])
    def test_jpeg_mime(self, extension: str) -> None:
        content = ImageExtractor().extract(b"\xff\xd8\xff\xe0", extension)
        assert content.image is not None
        assert content.image.mime_type == "image/jpeg"

    def test_rejects_non_image(self) -> None:
        with pytest.raises(UnsupportedFormatError):
            ImageExtractor().extract(b"%PDF", "pdf")
