from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum

from vatdoc.figures.models import ConfidenceTier, FigureCandidate, LineItem
from vatdoc.figures.money import to_cents
from vatdoc.processor.exceptions import FailureReason


class OutcomeStatus(str, Enum):
    SUCCEEDED = "Succeeded"
    PARTIAL_FAILURE = "PartialFailure"
    FAILED = "Failed"


def _money(value: Decimal | None) -> float | None:
    return None if value is None else float(to_cents(value))


def _line_item_to_dict(item: LineItem) -> dict[str, object]:
    return {
        "description": item.description,
        "amount": _money(item.amount),
        "vatRate": None if item.vat_rate is None else float(item.vat_rate),
    }


@dataclass(frozen=True)
class ExtractionOutcome:
    """Final, reconciled result for one document."""

    document_id: str
    status: OutcomeStatus
    confidence_tier: ConfidenceTier
    figures: FigureCandidate | None = None
    warnings: tuple[str, ...] = ()
    content_hash: str = ""
    failure_reason: FailureReason | None = None

    @classmethod
    def failed(
        cls,
        document_id: str,
        reason: FailureReason,
        message: str,
        *,
        content_hash: str = "",
        warnings: tuple[str, ...] = (),
    ) -> "ExtractionOutcome":
        return cls(
            document_id=document_id,
            status=OutcomeStatus.FAILED,
            confidence_tier=ConfidenceTier.LOW,
            warnings=warnings + (f"{reason.value}: {message}",),
            content_hash=content_hash,
            failure_reason=reason,
        )

    def downgraded(self, warning: str) -> "ExtractionOutcome":
        """Copy of this outcome as a PartialFailure with one more warning."""
        status = self.status
        if status is OutcomeStatus.SUCCEEDED:
            status = OutcomeStatus.PARTIAL_FAILURE
        return replace(self, status=status, warnings=self.warnings + (warning,))

    def to_dict(self) -> dict[str, object]:
        figures: dict[str, object] | None = None
        if self.figures is not None:
            figures = {
                "salesVat": _money(self.figures.sales_vat),
                "purchaseVat": _money(self.figures.purchase_vat),
                "totalAmount": _money(self.figures.total_amount),
                "lineItems": [_line_item_to_dict(i) for i in self.figures.line_items],
                "source": self.figures.source.value,
                "confidence": self.figures.confidence,
            }
        return {
            "documentId": self.document_id,
            "status": self.status.value,
            "confidenceTier": self.confidence_tier.value,
            "figures": figures,
            "warnings": list(self.warnings),
            "contentHash": self.content_hash,
            "failureReason": None if self.failure_reason is None else self.failure_reason.value,
        }


@dataclass(frozen=True)
class BatchSummary:
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    partial: int = 0


@dataclass(frozen=True)
class BatchResult:
    """Per-document outcomes in input order plus return-ready totals."""

    outcomes: tuple[ExtractionOutcome, ...]
    total_sales_vat: Decimal
    total_purchase_vat: Decimal
    average_confidence: float
    summary: BatchSummary

    @property
    def net_vat(self) -> Decimal:
        return self.total_sales_vat - self.total_purchase_vat

    @classmethod
    def from_outcomes(cls, outcomes: list[ExtractionOutcome]) -> "BatchResult":
        succeeded = [o for o in outcomes if o.status is OutcomeStatus.SUCCEEDED]
        sales = Decimal("0")
        purchase = Decimal("0")
        confidences: list[float] = []
        for outcome in succeeded:
            if outcome.figures is None:
                continue
            sales += outcome.figures.sales_vat or Decimal("0")
            purchase += outcome.figures.purchase_vat or Decimal("0")
            confidences.append(outcome.figures.confidence)
        summary = BatchSummary(
            processed=len(outcomes),
            succeeded=len(succeeded),
            failed=sum(1 for o in outcomes if o.status is OutcomeStatus.FAILED),
            partial=sum(1 for o in outcomes if o.status is OutcomeStatus.PARTIAL_FAILURE),
        )
        average = round(sum(confidences) / len(confidences), 2) if confidences else 0.0
        return cls(
            outcomes=tuple(outcomes),
            total_sales_vat=to_cents(sales),
            total_purchase_vat=to_cents(purchase),
            average_confidence=average,
            summary=summary,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "documents": [o.to_dict() for o in self.outcomes],
            "totals": {
                "salesVat": _money(self.total_sales_vat),
                "purchaseVat": _money(self.total_purchase_vat),
                "netVat": _money(self.net_vat),
            },
            "averageConfidence": self.average_confidence,
            "summary": {
                "processed": self.summary.processed,
                "succeeded": self.summary.succeeded,
                "failed": self.summary.failed,
                "partial": self.summary.partial,
            },
        }
