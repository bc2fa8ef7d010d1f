from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Literal

CellValue = str | int | float | Decimal | bool | date | datetime | None

ContentKind = Literal["text", "table"]


@dataclass(frozen=True)
class ImagePayload:
    """Image bytes packaged for the vision-capable AI path."""

    content: bytes = field(repr=False)
    mime_type: str


@dataclass(frozen=True)
class ExtractedContent:
    """Format-specific intermediate produced by a format extractor."""

    kind: ContentKind
    text: str = ""
    rows: tuple[tuple[CellValue, ...], ...] | None = None
    page_count: int | None = None
    header_row_index: int | None = None
    totals_row_indexes: tuple[int, ...] = ()
    image: ImagePayload | None = None
    warnings: tuple[str, ...] = ()

    @property
    def is_image(self) -> bool:
        return self.image is not None

    @property
    def header(self) -> tuple[CellValue, ...]:
        if self.rows is None or self.header_row_index is None:
            return ()
        return self.rows[self.header_row_index]
