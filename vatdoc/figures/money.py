"""Parsing and rounding of monetary amounts."""

import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")

_CURRENCY_NOISE = re.compile(r"[€$£\s]|EUR|GBP|USD", re.IGNORECASE)


def to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_amount(value: object) -> Decimal | None:
    """Parse a cell or text fragment into a Decimal amount.

    Accepts numbers and strings such as "€1,234.56", "1.234,56", "5,59" and
    "(12.00)". Returns None for blanks, dates, booleans and anything that is
    not a finite number.
    """
    if value is None or isinstance(value, (bool, date, datetime)):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float)):
        return _finite(Decimal(str(value)))
    if not isinstance(value, str):
        return None

    text = _CURRENCY_NOISE.sub("", value)
    if not text:
        return None
    negative = text.startswith("(") and text.endswith(")")
    if negative:
        text = text[1:-1]
    if text.startswith("-"):
        negative = not negative
        text = text[1:]

    text = _normalize_separators(text)
    if not re.fullmatch(r"\d+(\.\d+)?", text):
        return None
    amount = _finite(Decimal(text))
    if amount is None:
        return None
    return -amount if negative else amount


def _normalize_separators(text: str) -> str:
    if "," in text and "." in text:
        if text.rfind(",") > text.rfind("."):
            return text.replace(".", "").replace(",", ".")
        return text.replace(",", "")
    if "," in text:
        head, _, tail = text.rpartition(",")
        if len(tail) == 2 and head.count(",") == 0:
            return f"{head}.{tail}"
        return text.replace(",", "")
    return text


def _finite(value: Decimal) -> Decimal | None:
    try:
        return value if value.is_finite() else None
    except InvalidOperation:
        return None


def within_tolerance(a: Decimal, b: Decimal, tolerance: Decimal = CENT) -> bool:
    return abs(a - b) <= tolerance
