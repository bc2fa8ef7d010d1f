"""Deterministic VAT figure extraction from tables and plain text.

Tables: VAT money columns are summed over data rows and cross-checked
against the totals row. Rate, code and VAT-inclusive columns are ignored,
and a "Total tax" column is dropped when its component columns are present.
Text: amounts are matched by proximity to VAT keywords, preferring
"total VAT" phrases. Both paths report a fixed confidence: 0.6 when the
cross-check passed, 0.3 otherwise.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from vatdoc.extraction.models import CellValue, ExtractedContent
from vatdoc.figures.models import CandidateSource, FigureCandidate
from vatdoc.figures.money import parse_amount, to_cents, within_tolerance
from vatdoc.logging.logger import Log

VERIFIED_CONFIDENCE = 0.6
UNVERIFIED_CONFIDENCE = 0.3

_VAT_KEYWORD = re.compile(r"\b(?:vat|tax|c[aá]in\s+bhreisluacha)\b", re.IGNORECASE)
_VAT_IDENTIFIER = re.compile(
    r"\s*(?:no\b|no\.|number|reg|registration|id\b|code|rate)", re.IGNORECASE
)
_INCLUSIVE_PREFIX = re.compile(r"(?:incl|excl|inc\.|exc\.|ex\.|including|excluding)\W*$", re.IGNORECASE)
_TOTAL_NEARBY = re.compile(r"\btotal\b", re.IGNORECASE)

_TOTAL_KEYWORD = re.compile(
    r"\b(grand\s+total|amount\s+due|balance\s+due|total\s+due|total)\b", re.IGNORECASE
)
_TAX_WORD_FOLLOWS = re.compile(r"\s*(?:amount\s+)?(?:vat|tax)\b", re.IGNORECASE)
_TAX_WORD_PRECEDES = re.compile(r"(?:vat|tax)\s*$", re.IGNORECASE)

_NOT_TAX_AMOUNT = re.compile(
    r"\b(?:rates?|percent(?:age)?|number|no|codes?|class(?:es)?|id|type|status|"
    r"incl|excl|including|excluding|inclusive|exclusive|ex|inc)\b|%|#",
    re.IGNORECASE,
)
_VAT_EXCLUSIVE = re.compile(r"\b(?:excl|excluding|exclusive|ex)\b", re.IGNORECASE)
_NET_TOTAL_TAX = re.compile(r"\bnet\s+total\s+(?:tax|vat)\b", re.IGNORECASE)
_TOTAL_TAX = re.compile(r"\btotal\s+(?:tax|vat)\b|\b(?:tax|vat)\s+total\b", re.IGNORECASE)

_AMOUNT = re.compile(r"(€\s*)?(\d[\d,.]*\d|\d)(\s*%)?")
_RATE = re.compile(r"(?:vat|tax)[^\n%]{0,15}?(\d{1,2}(?:[.,]\d{1,2})?)\s*%", re.IGNORECASE)

_SAME_LINE_WINDOW = 60
_NEXT_LINE_WINDOW = 30
_NEXT_LINE_PENALTY = 100


@dataclass(frozen=True)
class _TextHit:
    amount: Decimal
    priority: int
    distance: int
    position: int

    def rank(self) -> tuple[int, int, int]:
        return (self.priority, self.distance, -self.position)


@dataclass
class _Figures:
    vat: Decimal | None = None
    total_amount: Decimal | None = None
    verified: bool = False
    warnings: list[str] = field(default_factory=list)


class HeuristicFigureExtractor:
    """Rule-based fallback extractor for tables and text."""

    def extract(self, content: ExtractedContent, category: str) -> FigureCandidate:
        if content.is_image:
            return FigureCandidate(
                source=CandidateSource.HEURISTIC,
                warnings=("NoHeuristicPath: images can only be read by the AI extractor",),
            )
        if content.kind == "table":
            figures = self._from_table(content)
        else:
            figures = self._from_text(content.text)
        candidate = self._build_candidate(figures, category)
        Log.info(
            f"Heuristic candidate: sales={candidate.sales_vat} purchase={candidate.purchase_vat} "
            f"total={candidate.total_amount} verified={candidate.totals_verified}"
        )
        return candidate

    def _build_candidate(self, figures: _Figures, category: str) -> FigureCandidate:
        sales_vat: Decimal | None = None
        purchase_vat: Decimal | None = None
        warnings = list(figures.warnings)
        normalized = category.upper()
        if figures.vat is not None:
            if "SALES" in normalized:
                sales_vat = figures.vat
            elif "PURCHASE" in normalized:
                purchase_vat = figures.vat
            else:
                warnings.append(
                    f"UnknownCategory: '{category}' is neither SALES nor PURCHASES, "
                    f"VAT of {figures.vat} was not assigned"
                )

        has_any = figures.vat is not None or figures.total_amount is not None
        if not has_any:
            confidence = 0.0
        elif figures.verified:
            confidence = VERIFIED_CONFIDENCE
        else:
            confidence = UNVERIFIED_CONFIDENCE
        return FigureCandidate(
            source=CandidateSource.HEURISTIC,
            sales_vat=sales_vat,
            purchase_vat=purchase_vat,
            total_amount=figures.total_amount,
            confidence=confidence,
            totals_verified=figures.verified,
            warnings=tuple(warnings),
        )

    # Table path

    def _from_table(self, content: ExtractedContent) -> _Figures:
        rows = content.rows or ()
        header = content.header
        figures = _Figures()
        if content.header_row_index is None:
            figures.warnings.append("NoTaxColumns: table has no recognizable header row")
            return figures

        tax_columns = _select_tax_columns(header)
        # "Total" columns win over "Net Amount" style columns
        total_columns = sorted(
            (i for i, cell in enumerate(header) if _is_total_header(cell)),
            key=lambda i: "total" not in str(header[i]).lower(),
        )
        if not tax_columns:
            figures.warnings.append("NoTaxColumns: no tax or VAT column in the header row")

        totals_rows = set(content.totals_row_indexes)
        data_rows = [
            rows[i]
            for i in range(content.header_row_index + 1, len(rows))
            if i not in totals_rows
        ]

        column_sums = {col: Decimal("0") for col in tax_columns}
        seen_tax_value = False
        for row in data_rows:
            for col in tax_columns:
                value = _cell_amount(row, col)
                if value is None:
                    continue
                seen_tax_value = True
                if value > 0:
                    column_sums[col] += value
        if seen_tax_value:
            figures.vat = to_cents(sum(column_sums.values(), Decimal("0")))

        if total_columns:
            totals = [_cell_amount(row, total_columns[0]) for row in data_rows]
            parsed = [v for v in totals if v is not None and v > 0]
            if parsed:
                figures.total_amount = to_cents(sum(parsed, Decimal("0")))

        if figures.vat is not None and totals_rows:
            checks = [
                _totals_row_matches(rows[i], column_sums, figures.vat) for i in sorted(totals_rows)
            ]
            figures.verified = any(checks)
            if not figures.verified:
                figures.warnings.append(
                    f"TotalsMismatch: computed VAT {figures.vat} does not match the totals row"
                )
                Log.warning(f"Totals row cross-check failed for computed VAT {figures.vat}")
        return figures

    # Text path

    def _from_text(self, text: str) -> _Figures:
        figures = _Figures()
        if not text.strip():
            figures.warnings.append("NoText: document has no text to scan")
            return figures

        vat_hit = self._best_vat_hit(text)
        total_hit = self._best_total_hit(text)
        rate = self._find_rate(text)
        figures.total_amount = total_hit.amount if total_hit else None

        if vat_hit is not None:
            figures.vat = vat_hit.amount
            if figures.total_amount is not None and rate is not None:
                expected = _vat_from_gross(figures.total_amount, rate)
                figures.verified = within_tolerance(expected, figures.vat)
        elif figures.total_amount is not None and rate is not None:
            figures.vat = _vat_from_gross(figures.total_amount, rate)
            figures.warnings.append(
                f"DerivedVat: VAT {figures.vat} computed from total {figures.total_amount} "
                f"at {rate}%"
            )
        return figures

    def _best_vat_hit(self, text: str) -> _TextHit | None:
        hits: list[_TextHit] = []
        for match in _VAT_KEYWORD.finditer(text):
            after = text[match.end():]
            if _VAT_IDENTIFIER.match(after):
                continue
            line_start = text.rfind("\n", 0, match.start()) + 1
            before = text[line_start:match.start()]
            if _INCLUSIVE_PREFIX.search(before):
                continue
            line_end = text.find("\n", match.end())
            line_end = len(text) if line_end == -1 else line_end
            context = text[max(line_start, match.start() - 20):min(line_end, match.end() + 15)]
            priority = 0 if _TOTAL_NEARBY.search(context) else 1
            hit = _nearest_amount(text, match.end(), priority)
            if hit is not None:
                hits.append(hit)
        return min(hits, key=_TextHit.rank) if hits else None

    def _best_total_hit(self, text: str) -> _TextHit | None:
        hits: list[_TextHit] = []
        for match in _TOTAL_KEYWORD.finditer(text):
            if _TAX_WORD_FOLLOWS.match(text, match.end()):
                continue
            line_start = text.rfind("\n", 0, match.start()) + 1
            if _TAX_WORD_PRECEDES.search(text[line_start:match.start()]):
                continue
            priority = 1 if match.group(1).lower() == "total" else 0
            hit = _nearest_amount(text, match.end(), priority)
            if hit is not None:
                hits.append(hit)
        return min(hits, key=_TextHit.rank) if hits else None

    @staticmethod
    def _find_rate(text: str) -> Decimal | None:
        match = _RATE.search(text)
        if match is None:
            return None
        return parse_amount(match.group(1))


def _nearest_amount(text: str, offset: int, priority: int) -> _TextHit | None:
    line_end = text.find("\n", offset)
    if line_end == -1:
        line_end = len(text)
    same_line = text[offset:min(line_end, offset + _SAME_LINE_WINDOW)]
    found = _first_amount(same_line)
    if found is not None:
        amount, distance = found
        return _TextHit(amount, priority, distance, offset + distance)

    # A label on its own line only takes a value that opens the next line
    next_line = text[line_end + 1:line_end + 1 + _NEXT_LINE_WINDOW].split("\n", 1)[0]
    found = _first_amount(next_line)
    if found is not None and not next_line[:found[1]].strip():
        amount, distance = found
        return _TextHit(amount, priority, distance + _NEXT_LINE_PENALTY, line_end + 1 + distance)
    return None


def _first_amount(window: str) -> tuple[Decimal, int] | None:
    for match in _AMOUNT.finditer(window):
        if match.group(3):
            continue
        raw = match.group(2)
        has_currency = match.group(1) is not None
        has_decimals = re.search(r"[.,]\d{2}$", raw) is not None
        if not (has_currency or has_decimals):
            continue
        amount = parse_amount(raw)
        if amount is not None and amount >= 0:
            return to_cents(amount), match.start()
    return None


def _vat_from_gross(gross: Decimal, rate: Decimal) -> Decimal:
    return to_cents(gross * rate / (Decimal("100") + rate))


def _mentions_tax(cell: CellValue) -> bool:
    return isinstance(cell, str) and any(k in cell.lower() for k in ("tax", "vat"))


def _is_tax_header(cell: CellValue) -> bool:
    """Header of a column holding VAT money, not a rate, code or VAT-inclusive amount."""
    return _mentions_tax(cell) and not _NOT_TAX_AMOUNT.search(str(cell))


def _select_tax_columns(header: Sequence[CellValue]) -> list[int]:
    """Tax columns whose values add up to the document's VAT.

    A "Net Total Tax" column already nets components and refunds, so it is
    used alone. Otherwise component columns (item, shipping, order tax) win
    and "Total tax" style columns that restate their sum are skipped.
    """
    columns = [i for i, cell in enumerate(header) if _is_tax_header(cell)]
    net_total = [i for i in columns if _NET_TOTAL_TAX.search(str(header[i]))]
    if net_total:
        return net_total[:1]
    components = [i for i in columns if not _TOTAL_TAX.search(str(header[i]))]
    if components and len(components) < len(columns):
        skipped = [header[i] for i in columns if i not in components]
        Log.info(f"Skipping tax total columns {skipped} in favour of component columns")
    return components or columns[:1]


def _is_total_header(cell: CellValue) -> bool:
    if not isinstance(cell, str) or _is_tax_header(cell):
        return False
    if _mentions_tax(cell) and _VAT_EXCLUSIVE.search(cell):
        return False
    lowered = cell.lower()
    return "total" in lowered or "amount" in lowered


def _cell_amount(row: Sequence[CellValue], column: int) -> Decimal | None:
    if column >= len(row):
        return None
    return parse_amount(row[column])


def _totals_row_matches(
    row: Sequence[CellValue],
    column_sums: dict[int, Decimal],
    combined: Decimal,
) -> bool:
    per_column = [_cell_amount(row, col) for col in column_sums]
    if per_column and all(
        value is not None and within_tolerance(value, to_cents(column_sums[col]))
        for col, value in zip(column_sums, per_column)
    ):
        return True
    return any(
        amount is not None and within_tolerance(amount, combined)
        for amount in (parse_amount(cell) for cell in row[1:])
    )
