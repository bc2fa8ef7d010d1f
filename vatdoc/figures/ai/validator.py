"""Validates parsed AI JSON and builds an AI figure candidate."""

from decimal import Decimal
from typing import Any

from vatdoc.figures.ai.exceptions import AiValidationError
from vatdoc.figures.models import CandidateSource, FigureCandidate, LineItem
from vatdoc.figures.money import to_cents

_MAX_LINE_ITEMS = 200
_REQUIRED_FIELDS = ("sales_vat", "purchase_vat", "total_amount", "line_items", "confidence")


def validate_and_build(data: dict[str, Any]) -> FigureCandidate:
    """Validate raw parsed JSON and build a FigureCandidate.

    Raises:
        AiValidationError: on any validation failure.
    """
    for name in _REQUIRED_FIELDS:
        if name not in data:
            raise AiValidationError(f"Missing required top-level field: {name}")
    return FigureCandidate(
        source=CandidateSource.AI,
        sales_vat=_optional_amount(data["sales_vat"], "sales_vat"),
        purchase_vat=_optional_amount(data["purchase_vat"], "purchase_vat"),
        total_amount=_optional_amount(data["total_amount"], "total_amount"),
        line_items=_build_line_items(data["line_items"]),
        confidence=_build_confidence(data["confidence"]),
    )


def _is_number(raw: Any) -> bool:
    return isinstance(raw, (int, float)) and not isinstance(raw, bool)


def _optional_amount(raw: Any, name: str) -> Decimal | None:
    if raw is None:
        return None
    if not _is_number(raw):
        raise AiValidationError(f"'{name}' must be a number or null")
    value = Decimal(str(raw))
    if not value.is_finite():
        raise AiValidationError(f"'{name}' must be finite")
    return to_cents(value)


def _build_confidence(raw: Any) -> float:
    if not _is_number(raw):
        raise AiValidationError("'confidence' must be a number")
    confidence = float(raw)
    if not 0.0 <= confidence <= 1.0:
        raise AiValidationError(f"'confidence' must be between 0 and 1, got {confidence}")
    return confidence


def _build_line_items(raw: Any) -> tuple[LineItem, ...]:
    if not isinstance(raw, list):
        raise AiValidationError("'line_items' must be a list")
    if len(raw) > _MAX_LINE_ITEMS:
        raise AiValidationError(f"Too many line items: {len(raw)} (max {_MAX_LINE_ITEMS})")
    return tuple(_build_line_item(item, i) for i, item in enumerate(raw))


def _build_line_item(raw: Any, index: int) -> LineItem:
    if not isinstance(raw, dict):
        raise AiValidationError(f"Line item at index {index} must be an object")
    description = raw.get("description")
    if not isinstance(description, str):
        raise AiValidationError(f"Line item at index {index}: 'description' must be a string")
    amount = _optional_amount(raw.get("amount"), f"line_items[{index}].amount")
    if amount is None:
        raise AiValidationError(f"Line item at index {index}: 'amount' is required")
    vat_rate = raw.get("vat_rate")
    if vat_rate is not None and not _is_number(vat_rate):
        raise AiValidationError(f"Line item at index {index}: 'vat_rate' must be a number or null")
    return LineItem(
        description=description,
        amount=amount,
        vat_rate=Decimal(str(vat_rate)) if vat_rate is not None else None,
    )
