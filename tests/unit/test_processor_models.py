from decimal import Decimal

from vatdoc.figures.models import CandidateSource, ConfidenceTier, FigureCandidate, LineItem
from vatdoc.processor.exceptions import FailureReason
from vatdoc.processor.models import BatchResult, ExtractionOutcome, OutcomeStatus


def _succeeded(
    document_id: str,
    sales: str | None = None,
    purchase: str | None = None,
    confidence: float = 0.9,
) -> ExtractionOutcome:
    return ExtractionOutcome(
        document_id=document_id,
        status=OutcomeStatus.SUCCEEDED,
        confidence_tier=ConfidenceTier.HIGH,
        figures=FigureCandidate(
            source=CandidateSource.AI,
            sales_vat=Decimal(sales) if sales else None,
            purchase_vat=Decimal(purchase) if purchase else None,
            confidence=confidence,
        ),
    )


class TestExtractionOutcome:
    def test_failed_outcome(self) -> None:
        outcome = ExtractionOutcome.failed("d1", FailureReason.TOO_LARGE, "File too big")
        assert outcome.status is OutcomeStatus.FAILED
        assert outcome.confidence_tier is ConfidenceTier.LOW
        assert outcome.figures is None
        assert outcome.warnings == ("TooLarge: File too big",)

    def test_downgraded_turns_success_into_partial(self) -> None:
        outcome = _succeeded("d1", sales="1.00").downgraded("DuplicateContent: x")
        assert outcome.status is OutcomeStatus.PARTIAL_FAILURE
        assert outcome.warnings[-1] == "DuplicateContent: x"

    def test_downgraded_keeps_failure(self) -> None:
        failed = ExtractionOutcome.failed("d1", FailureReason.CORRUPT_CONTENT, "bad")
        assert failed.downgraded("note").status is OutcomeStatus.FAILED

    def test_to_dict(self) -> None:
        outcome = ExtractionOutcome(
            document_id="d1",
            status=OutcomeStatus.SUCCEEDED,
            confidence_tier=ConfidenceTier.MEDIUM,
            figures=FigureCandidate(
                source=CandidateSource.HEURISTIC,
                sales_vat=Decimal("5518.20"),
                total_amount=Decimal("28000"),
                line_items=(LineItem("Desk", Decimal("100"), Decimal("23")),),
                confidence=0.6,
            ),
            content_hash="ab" * 32,
        )
        data = outcome.to_dict()
        assert data["documentId"] == "d1"
        assert data["status"] == "Succeeded"
        assert data["confidenceTier"] == "Medium"
        assert data["failureReason"] is None
        assert data["figures"] == {
            "salesVat": 5518.2,
            "purchaseVat": None,
            "totalAmount": 28000.0,
            "lineItems": [{"description": "Desk", "amount": 100.0, "vatRate": 23.0}],
            "source": "heuristic",
            "confidence": 0.6,
        }


class TestBatchResult:
    def test_aggregates_only_succeeded_outcomes(self) -> None:
        outcomes = [
            _succeeded("a", sales="100.10", confidence=0.9),
            _succeeded("b", purchase="40.05", confidence=0.6),
            _succeeded("c", sales="999.00").downgraded("DuplicateContent: a"),
            ExtractionOutcome.failed("d", FailureReason.CORRUPT_CONTENT, "bad"),
        ]
        result = BatchResult.from_outcomes(outcomes)
        assert result.total_sales_vat == Decimal("100.10")
        assert result.total_purchase_vat == Decimal("40.05")
        assert result.net_vat == Decimal("60.05")
        assert result.average_confidence == 0.75
        assert result.summary.processed == 4
        assert result.summary.succeeded == 2
        assert result.summary.partial == 1
        assert result.summary.failed == 1

    def test_empty_batch(self) -> None:
        result = BatchResult.from_outcomes([])
        assert result.total_sales_vat == Decimal("0.00")
        assert result.average_confidence == 0.0
        assert result.to_dict()["documents"] == []

    def test_to_dict_totals(self) -> None:
        result = BatchResult.from_outcomes([_succeeded("a", sales="10.00", purchase="4.00")])
        data = result.to_dict()
        assert data["totals"] == {"salesVat": 10.0, "purchaseVat": 4.0, "netVat": 6.0}
        assert data["summary"] == {"processed": 1, "succeeded": 1, "failed": 0, "partial": 0}
