"""
Rental history evaluation.

Two modes, selected by data availability:
    - detailed: each eviction filing contributes its outcome's base points,
      linearly decayed toward the eviction lookback boundary
    - summary: a flat penalty per eviction when no filings are supplied

Late payments above the configured threshold add a flat penalty in both modes.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence, Tuple

from ..application.models import EvictionFiling, EvictionOutcome, RentalHistory, TenantApplication
from ..config.models import EvictionOutcomePoints, RentalScoring, RentalThresholds, ScreeningConfig
from .base import FactorEvaluator, RiskFactor, classify_severity

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.25

DETAILED_MODE = "detailed"
SUMMARY_MODE = "summary"


@dataclass(frozen=True)
class FilingContribution:
    """Scoring of a single eviction filing."""
    filed_at: date
    outcome: EvictionOutcome
    years_since_filing: float
    base_points: float
    decay: float
    points: float

    @property
    def excluded(self) -> bool:
        return self.decay == 0


@dataclass(frozen=True)
class RentalHistoryAssessment:
    mode: str
    eviction_points: float
    late_payment_points: float
    filings: Tuple[FilingContribution, ...] = ()

    @property
    def risk(self) -> float:
        return self.eviction_points + self.late_payment_points


def years_between(start: date, end: date) -> float:
    """Elapsed years from start to end; dates in the future count as zero."""
    return max(0.0, (end - start).days / DAYS_PER_YEAR)


def eviction_decay(years_since_filing: float, lookback_years: float, floor: float) -> float:
    """
    Linear time-decay multiplier for an eviction filing.

    1.0 for a brand-new filing, never below floor inside the lookback window,
    and 0 once the filing is at or beyond the lookback boundary.
    """
    if years_since_filing >= lookback_years:
        return 0.0
    return max(floor, 1 - years_since_filing / lookback_years)


def outcome_base_points(outcome: EvictionOutcome, points: EvictionOutcomePoints) -> float:
    if outcome is EvictionOutcome.DISMISSED:
        return points.dismissed
    if outcome is EvictionOutcome.SETTLED:
        return points.settled
    if outcome is EvictionOutcome.JUDGMENT:
        return points.judgment
    return points.filing


def score_filings(
    filings: Sequence[EvictionFiling],
    outcome_points: EvictionOutcomePoints,
    lookback_years: float,
    floor: float,
    as_of: date,
) -> Tuple[FilingContribution, ...]:
    contributions = []
    for filing in filings:
        years = years_between(filing.filed_at, as_of)
        decay = eviction_decay(years, lookback_years, floor)
        base = outcome_base_points(filing.outcome, outcome_points)
        contributions.append(FilingContribution(
            filed_at=filing.filed_at,
            outcome=filing.outcome,
            years_since_filing=years,
            base_points=base,
            decay=decay,
            points=base * decay,
        ))
    return tuple(contributions)


def assess_rental_history(
    rental_history: RentalHistory,
    thresholds: RentalThresholds,
    scoring: RentalScoring,
    as_of: date,
) -> RentalHistoryAssessment:
    """Score eviction history and late-payment frequency."""
    late_payment_points = 0.0
    if rental_history.late_payments > scoring.late_payments_threshold:
        late_payment_points = scoring.late_payments_points

    if rental_history.eviction_filings and scoring.eviction_outcome_points is not None:
        filings = score_filings(
            rental_history.eviction_filings,
            scoring.eviction_outcome_points,
            thresholds.eviction_lookback_years,
            scoring.eviction_time_decay_floor,
            as_of,
        )
        logger.debug(
            "Rental history scored in detailed mode: %d filings, %d excluded",
            len(filings), sum(1 for f in filings if f.excluded),
        )
        return RentalHistoryAssessment(
            mode=DETAILED_MODE,
            eviction_points=sum(f.points for f in filings),
            late_payment_points=late_payment_points,
            filings=filings,
        )

    eviction_points = 0.0
    if rental_history.evictions > 0:
        eviction_points = scoring.eviction_points * rental_history.evictions
    return RentalHistoryAssessment(
        mode=SUMMARY_MODE,
        eviction_points=eviction_points,
        late_payment_points=late_payment_points,
    )


class RentalHistoryEvaluator(FactorEvaluator):
    """Scores evictions (with optional time decay) and late payments."""

    factor = "rental_history"
    data_source = "Prior landlord references and eviction court records"

    def evaluate(
        self,
        application: TenantApplication,
        config: ScreeningConfig,
        as_of: date,
    ) -> Optional[RiskFactor]:
        history = application.rental_history
        assessment = assess_rental_history(
            history, config.thresholds.rental, config.scoring.rental, as_of
        )

        parts = []
        actions = []
        if assessment.mode == DETAILED_MODE:
            active = [f for f in assessment.filings if not f.excluded]
            parts.append(
                f"{len(assessment.filings)} eviction filing(s), "
                f"{len(active)} within {config.thresholds.rental.eviction_lookback_years:g}-year lookback"
            )
            critical = any(
                f.outcome is EvictionOutcome.JUDGMENT and f.points > 0 for f in assessment.filings
            )
        else:
            parts.append(f"{history.evictions} eviction(s)")
            critical = assessment.eviction_points > 0
        parts.append(f"{history.late_payments} late payment(s)")

        if assessment.eviction_points > 0:
            actions.append("Request court records or a landlord statement to contextualize eviction history")
        if assessment.late_payment_points > 0:
            actions.append("Request a recent rent ledger or proof of on-time payments")

        points = assessment.risk
        return RiskFactor(
            factor=self.factor,
            label=f"Rental history: {', '.join(parts)}",
            points=points,
            severity=classify_severity(points, critical=critical),
            data_source=self.data_source,
            recommended_action="; ".join(actions) or None,
            details={
                "mode": assessment.mode,
                "evictions": history.evictions,
                "late_payments": history.late_payments,
                "eviction_points": assessment.eviction_points,
                "late_payment_points": assessment.late_payment_points,
                "filings": [
                    {
                        "filed_at": f.filed_at,
                        "outcome": f.outcome.value,
                        "years_since_filing": round(f.years_since_filing, 2),
                        "base_points": f.base_points,
                        "decay": round(f.decay, 4),
                        "points": round(f.points, 4),
                        "excluded": f.excluded,
                    }
                    for f in assessment.filings
                ],
            },
        )
