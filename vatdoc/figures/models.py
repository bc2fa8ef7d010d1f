from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class CandidateSource(str, Enum):
    AI = "ai"
    HEURISTIC = "heuristic"


class ConfidenceTier(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


@dataclass(frozen=True)
class LineItem:
    """Single invoice line as reported by an extractor."""

    description: str
    amount: Decimal
    vat_rate: Decimal | None = None


@dataclass(frozen=True)
class FigureCandidate:
    """VAT figures proposed by one extractor for one document."""

    source: CandidateSource
    sales_vat: Decimal | None = None
    purchase_vat: Decimal | None = None
    total_amount: Decimal | None = None
    line_items: tuple[LineItem, ...] = ()
    confidence: float = 0.0
    totals_verified: bool = False
    warnings: tuple[str, ...] = field(default=(), compare=False)

    @property
    def has_figures(self) -> bool:
        return any(
            value is not None
            for value in (self.sales_vat, self.purchase_vat, self.total_amount)
        )

    @property
    def has_vat(self) -> bool:
        return self.sales_vat is not None or self.purchase_vat is not None


@dataclass(frozen=True)
class ReconciliationResult:
    """Candidate chosen by the reconciler, with its tier and notes."""

    figures: FigureCandidate
    confidence_tier: ConfidenceTier
    warnings: tuple[str, ...] = ()
