"""Sanity checks applied to the reconciled figures of a document."""

from decimal import Decimal

from vatdoc.figures.models import FigureCandidate

IRISH_VAT_RATES = frozenset(Decimal(r) for r in ("0", "4.8", "9", "13.5", "23"))
HIGH_VAT_AMOUNT = Decimal("100000")
LOW_CONFIDENCE = 0.3


def check_figures(candidate: FigureCandidate) -> list[str]:
    """Return review warnings for implausible figures; never raises."""
    warnings: list[str] = []
    vat_values = [v for v in (candidate.sales_vat, candidate.purchase_vat) if v is not None]

    for amount in vat_values:
        if amount < 0:
            warnings.append(f"NegativeVat: VAT amount {amount} is negative")
        if amount > HIGH_VAT_AMOUNT:
            warnings.append(f"HighVat: VAT amount {amount} is unusually high, please verify")

    for item in candidate.line_items:
        if item.vat_rate is not None and item.vat_rate not in IRISH_VAT_RATES:
            warnings.append(
                f"UnusualVatRate: {item.vat_rate}% on '{item.description}' is not an Irish VAT rate"
            )

    if candidate.total_amount is not None and vat_values:
        if sum(vat_values, Decimal("0")) > candidate.total_amount:
            warnings.append("VatExceedsTotal: VAT is larger than the document total")

    if candidate.confidence < LOW_CONFIDENCE:
        warnings.append(
            f"LowConfidence: {round(candidate.confidence * 100)}% confidence, manual review recommended"
        )
    return warnings
