"""Spreadsheet and CSV parsing into ordered rows."""

import csv
import io
import re
from collections.abc import Iterable, Sequence

import openpyxl
import xlrd

from vatdoc.extraction.base import BaseFormatExtractor
from vatdoc.extraction.exceptions import CorruptContentError, UnsupportedFormatError
from vatdoc.extraction.models import CellValue, ExtractedContent
from vatdoc.logging.logger import Log

HEADER_KEYWORDS = ("tax", "vat", "amount", "total")
HEADER_SEARCH_DEPTH = 20
HEADER_MIN_CELLS = 2

_TOTALS_LABEL = re.compile(r"total", re.IGNORECASE)

Row = tuple[CellValue, ...]


def find_header_row(rows: Sequence[Row]) -> int | None:
    """Index of the first row naming a tax, VAT, amount or total column.

    Single-cell rows are report titles ("Sales VAT report Q1"), never headers.
    """
    for index, row in enumerate(rows[:HEADER_SEARCH_DEPTH]):
        if sum(not _is_blank(cell) for cell in row) < HEADER_MIN_CELLS:
            continue
        if any(isinstance(c, str) and any(k in c.lower() for k in HEADER_KEYWORDS) for c in row):
            return index
    return None


def is_totals_row(row: Row) -> bool:
    return bool(row) and isinstance(row[0], str) and bool(_TOTALS_LABEL.search(row[0]))


def find_totals_rows(rows: Sequence[Row], header_row_index: int | None) -> tuple[int, ...]:
    start = 0 if header_row_index is None else header_row_index + 1
    return tuple(i for i in range(start, len(rows)) if is_totals_row(rows[i]))


def _clean_cell(value: CellValue) -> CellValue:
    if isinstance(value, str):
        return value.strip()
    return value


def _is_blank(value: CellValue) -> bool:
    return value is None or value == ""


def _clean_rows(raw_rows: Iterable[Iterable[CellValue]]) -> list[Row]:
    rows: list[Row] = []
    for raw in raw_rows:
        cells = [_clean_cell(v) for v in raw]
        while cells and _is_blank(cells[-1]):
            cells.pop()
        if cells:
            rows.append(tuple(cells))
    return rows


def render_rows(rows: Sequence[Row]) -> str:
    """Render rows as CSV text for the AI prompt."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    for row in rows:
        writer.writerow(["" if v is None else v for v in row])
    return buffer.getvalue().rstrip("\n")


class TabularExtractor(BaseFormatExtractor):
    """Parses CSV, xlsx and xls files into ordered rows of cell values."""

    def extract(self, content: bytes, extension: str) -> ExtractedContent:
        if extension == "csv":
            raw_rows = self._read_csv(content)
        elif extension == "xlsx":
            raw_rows = self._read_xlsx(content)
        elif extension == "xls":
            raw_rows = self._read_xls(content)
        else:
            raise UnsupportedFormatError(f"TabularExtractor cannot read '{extension}' files")

        rows = _clean_rows(raw_rows)
        header_index = find_header_row(rows)
        totals_indexes = find_totals_rows(rows, header_index)

        warnings: list[str] = []
        if not rows:
            warnings.append("EmptyTable: no rows found")
        elif header_index is None:
            warnings.append("NoHeaderRow: no tax, VAT, amount or total column found")

        Log.info(
            f"Extracted {len(rows)} rows from {extension} "
            f"(header={header_index}, totals rows={list(totals_indexes)})"
        )
        return ExtractedContent(
            kind="table",
            text=render_rows(rows),
            rows=tuple(rows),
            header_row_index=header_index,
            totals_row_indexes=totals_indexes,
            warnings=tuple(warnings),
        )

    @staticmethod
    def _decode(content: bytes) -> str:
        for encoding in ("utf-8-sig", "cp1252"):
            try:
                return content.decode(encoding)
            except UnicodeDecodeError:
                continue
        return content.decode("latin-1")

    def _read_csv(self, content: bytes) -> list[list[CellValue]]:
        text = self._decode(content)
        try:
            dialect: type[csv.Dialect] = csv.Sniffer().sniff(
                text[:4096], delimiters=",;\t|"
            )
        except csv.Error:
            dialect = csv.excel
        try:
            return [list(row) for row in csv.reader(io.StringIO(text), dialect)]
        except csv.Error as exc:
            raise CorruptContentError(f"CSV parsing failed: {exc}") from exc

    @staticmethod
    def _read_xlsx(content: bytes) -> list[list[CellValue]]:
        try:
            workbook = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
        except Exception as exc:
            raise CorruptContentError(f"openpyxl could not open workbook: {exc}") from exc
        try:
            if not workbook.worksheets:
                return []
            sheet = workbook.worksheets[0]
            return [list(row) for row in sheet.iter_rows(values_only=True)]
        except Exception as exc:
            raise CorruptContentError(f"openpyxl could not read worksheet: {exc}") from exc
        finally:
            workbook.close()

    @staticmethod
    def _read_xls(content: bytes) -> list[list[CellValue]]:
        try:
            book = xlrd.open_workbook(file_contents=content)
            if book.nsheets == 0:
                return []
            sheet = book.sheet_by_index(0)
            return [list(sheet.row_values(r)) for r in range(sheet.nrows)]
        except Exception as exc:
            raise CorruptContentError(f"xlrd could not read workbook: {exc}") from exc
