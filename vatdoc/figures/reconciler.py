"""Merges AI and heuristic candidates into one result.

Rule order:
1. Both candidates present and disagreeing: heuristic wins, tier Low, one
   ReconciliationDiscrepancy warning. Checked first so a confident AI
   answer never hides a disagreeing deterministic one.
2. AI confidence >= 0.8: AI wins, tier High.
3. Both present and agreeing: AI wins (richer line items), tier Medium.
4. Single candidate: it wins; Medium for a heuristic whose totals
   cross-check passed, otherwise Low.
5. No usable candidate: no result.

Zero-confidence AI candidates (failed calls) and candidates without any
figure count as absent; their warnings are carried over. When only one of
two candidates found a VAT figure, the other one does not contest it.
"""

from decimal import Decimal

from vatdoc.figures.models import (
    CandidateSource,
    ConfidenceTier,
    FigureCandidate,
    ReconciliationResult,
)
from vatdoc.figures.money import CENT
from vatdoc.logging.logger import Log

HIGH_CONFIDENCE_THRESHOLD = 0.8
AGREEMENT_TOLERANCE = Decimal("0.01")


class Reconciler:
    """Applies the fallback rule table to the candidates of one document."""

    def __init__(
        self,
        *,
        high_confidence_threshold: float = HIGH_CONFIDENCE_THRESHOLD,
        agreement_tolerance: Decimal = AGREEMENT_TOLERANCE,
    ) -> None:
        self._threshold = high_confidence_threshold
        self._tolerance = agreement_tolerance

    def reconcile(
        self,
        ai: FigureCandidate | None,
        heuristic: FigureCandidate | None,
    ) -> ReconciliationResult | None:
        carried: list[str] = []
        for candidate in (ai, heuristic):
            if candidate is not None:
                carried.extend(candidate.warnings)

        ai = ai if self._usable(ai) else None
        heuristic = heuristic if self._usable(heuristic) else None
        if ai is not None and heuristic is not None and ai.has_vat != heuristic.has_vat:
            if ai.has_vat:
                heuristic = None
            else:
                ai = None

        if ai is not None and heuristic is not None:
            discrepancy = self._discrepancy(ai, heuristic)
            if discrepancy:
                Log.warning(discrepancy)
                return self._result(heuristic, ConfidenceTier.LOW, carried + [discrepancy])
            if ai.confidence >= self._threshold:
                return self._result(ai, ConfidenceTier.HIGH, carried)
            return self._result(ai, ConfidenceTier.MEDIUM, carried)

        if ai is not None:
            tier = ConfidenceTier.HIGH if ai.confidence >= self._threshold else ConfidenceTier.LOW
            return self._result(ai, tier, carried)

        if heuristic is not None:
            tier = ConfidenceTier.MEDIUM if heuristic.totals_verified else ConfidenceTier.LOW
            return self._result(heuristic, tier, carried)

        return None

    def agrees(self, first: Decimal | None, second: Decimal | None) -> bool:
        """True when two figures are within the relative tolerance (missing = zero)."""
        a = first if first is not None else Decimal("0")
        b = second if second is not None else Decimal("0")
        allowed = max(max(abs(a), abs(b)) * self._tolerance, CENT)
        return abs(a - b) <= allowed

    def _discrepancy(self, ai: FigureCandidate, heuristic: FigureCandidate) -> str:
        parts = [
            f"{label} AI {ai_value} vs heuristic {heuristic_value}"
            for label, ai_value, heuristic_value in (
                ("salesVat", ai.sales_vat, heuristic.sales_vat),
                ("purchaseVat", ai.purchase_vat, heuristic.purchase_vat),
            )
            if not self.agrees(ai_value, heuristic_value)
        ]
        if not parts:
            return ""
        return "ReconciliationDiscrepancy: " + "; ".join(parts) + ", using heuristic figures"

    @staticmethod
    def _usable(candidate: FigureCandidate | None) -> bool:
        if candidate is None or not candidate.has_figures:
            return False
        return not (candidate.source is CandidateSource.AI and candidate.confidence <= 0)

    @staticmethod
    def _result(
        candidate: FigureCandidate,
        tier: ConfidenceTier,
        warnings: list[str],
    ) -> ReconciliationResult:
        Log.info(f"Reconciled using {candidate.source.value} candidate, tier {tier.value}")
        return ReconciliationResult(
            figures=candidate,
            confidence_tier=tier,
            warnings=tuple(warnings),
        )
