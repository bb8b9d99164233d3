"""
Alternative data evaluation.

Optional, additive offsets from supplemental signals: payment reliability
(utility payment score and/or rent payment history) and prior landlord
references. Offsets may be negative (risk reduction). Missing signals score
the configured missing-tier value, which defaults to zero.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from ..application.models import ReferenceRating, TenantApplication
from ..config.models import AlternativeDataScoring, AlternativeDataThresholds, ScreeningConfig
from .base import FactorEvaluator, RiskFactor, classify_severity

logger = logging.getLogger(__name__)


class PaymentReliabilityTier(Enum):
    STRONG = "strong"
    MODERATE = "moderate"
    NEUTRAL = "neutral"
    WEAK = "weak"
    MISSING = "missing"


@dataclass(frozen=True)
class AlternativeDataAssessment:
    payment_signal: Optional[float]
    payment_tier: PaymentReliabilityTier
    payment_points: float
    reference_rating: Optional[ReferenceRating]
    reference_verified: Optional[bool]
    reference_points: float

    @property
    def risk(self) -> float:
        return self.payment_points + self.reference_points

    @property
    def has_signals(self) -> bool:
        return self.payment_signal is not None or self.reference_rating is not None


def payment_signal_for(application: TenantApplication) -> Optional[float]:
    """The stronger of the supplied payment reliability signals."""
    signals = []
    if application.utility_payment_score is not None:
        signals.append(application.utility_payment_score)
    if application.payment_history is not None:
        signals.append(application.payment_history.on_time_rate)
    return max(signals) if signals else None


def classify_payment_signal(signal: Optional[float], thresholds: AlternativeDataThresholds) -> PaymentReliabilityTier:
    if signal is None:
        return PaymentReliabilityTier.MISSING
    tiers = thresholds.utility
    if signal >= tiers.strong:
        return PaymentReliabilityTier.STRONG
    if signal >= tiers.moderate:
        return PaymentReliabilityTier.MODERATE
    if signal < tiers.weak:
        return PaymentReliabilityTier.WEAK
    return PaymentReliabilityTier.NEUTRAL


def payment_tier_points(tier: PaymentReliabilityTier, scoring: AlternativeDataScoring) -> float:
    return {
        PaymentReliabilityTier.STRONG: scoring.utility_strong_offset,
        PaymentReliabilityTier.MODERATE: scoring.utility_moderate_offset,
        PaymentReliabilityTier.NEUTRAL: 0.0,
        PaymentReliabilityTier.WEAK: scoring.utility_weak_points,
        PaymentReliabilityTier.MISSING: scoring.payment_missing_points,
    }[tier]


def reference_rating_points(rating: ReferenceRating, scoring: AlternativeDataScoring) -> float:
    return {
        ReferenceRating.STRONG: scoring.reference_strong_offset,
        ReferenceRating.POSITIVE: scoring.reference_positive_offset,
        ReferenceRating.NEUTRAL: scoring.reference_neutral_points,
        ReferenceRating.CONCERN: scoring.reference_concern_points,
    }[rating]


def assess_alternative_data(
    application: TenantApplication,
    thresholds: AlternativeDataThresholds,
    scoring: AlternativeDataScoring,
) -> AlternativeDataAssessment:
    signal = payment_signal_for(application)
    tier = classify_payment_signal(signal, thresholds)

    reference = application.landlord_reference
    if reference is None:
        reference_points = scoring.reference_missing_points
    else:
        reference_points = reference_rating_points(reference.rating, scoring)
        if not reference.verified:
            reference_points += scoring.unverified_reference_points

    return AlternativeDataAssessment(
        payment_signal=signal,
        payment_tier=tier,
        payment_points=payment_tier_points(tier, scoring),
        reference_rating=reference.rating if reference else None,
        reference_verified=reference.verified if reference else None,
        reference_points=reference_points,
    )


class AlternativeDataEvaluator(FactorEvaluator):
    """Applies offsets and surcharges from supplemental signals."""

    factor = "alternative_data"
    data_source = "Utility payment records, rent payment history, and landlord references"

    def evaluate(
        self,
        application: TenantApplication,
        config: ScreeningConfig,
        as_of: date,
    ) -> Optional[RiskFactor]:
        assessment = assess_alternative_data(
            application,
            config.thresholds.alternative_data,
            config.scoring.alternative_data,
        )
        if not assessment.has_signals and assessment.risk == 0:
            return None

        parts = []
        if assessment.payment_signal is not None:
            parts.append(
                f"payment reliability {assessment.payment_signal:.0%} ({assessment.payment_tier.value})"
            )
        if assessment.reference_rating is not None:
            verified = "verified" if assessment.reference_verified else "unverified"
            parts.append(f"{assessment.reference_rating.value} landlord reference ({verified})")
        label = "Alternative data: " + ("; ".join(parts) if parts else "no supplemental signals supplied")

        actions = []
        if assessment.payment_points > 0:
            actions.append("Request additional utility or rent payment records")
        if assessment.reference_points > 0:
            actions.append("Contact the prior landlord to verify and discuss the reference")

        points = assessment.risk
        logger.debug("Alternative data points=%.2f (%s)", points, label)
        return RiskFactor(
            factor=self.factor,
            label=label,
            points=points,
            severity=classify_severity(points),
            data_source=self.data_source,
            recommended_action="; ".join(actions) or None,
            details={
                "payment_signal": assessment.payment_signal,
                "payment_tier": assessment.payment_tier.value,
                "payment_points": assessment.payment_points,
                "reference_rating": assessment.reference_rating,
                "reference_verified": assessment.reference_verified,
                "reference_points": assessment.reference_points,
            },
        )
