"""
Credit score evaluation.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from ..application.models import TenantApplication
from ..config.models import CreditScoring, CreditThresholds, ScreeningConfig
from .base import FactorEvaluator, RiskFactor, classify_severity


class CreditTier(Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    POOR = "poor"


@dataclass(frozen=True)
class CreditAssessment:
    tier: CreditTier
    risk: float


def assess_credit(
    credit_score: float,
    thresholds: CreditThresholds,
    scoring: CreditScoring,
) -> CreditAssessment:
    if credit_score >= thresholds.excellent_min:
        return CreditAssessment(CreditTier.EXCELLENT, scoring.excellent)
    if credit_score >= thresholds.good_min:
        return CreditAssessment(CreditTier.GOOD, scoring.good)
    return CreditAssessment(CreditTier.POOR, scoring.poor)


class CreditEvaluator(FactorEvaluator):
    """Maps the credit score to a tier."""

    factor = "credit"
    data_source = "Consumer credit report"

    def evaluate(
        self,
        application: TenantApplication,
        config: ScreeningConfig,
        as_of: date,
    ) -> Optional[RiskFactor]:
        assessment = assess_credit(
            application.credit_score, config.thresholds.credit, config.scoring.credit
        )
        points = assessment.risk
        return RiskFactor(
            factor=self.factor,
            label=f"Credit score {application.credit_score:g} ({assessment.tier.value})",
            points=points,
            severity=classify_severity(points, critical=assessment.tier is CreditTier.POOR),
            data_source=self.data_source,
            recommended_action=(
                "Offer the applicant a chance to explain or dispute credit tradelines, "
                "or accept alternative evidence of creditworthiness"
                if points > 0 else None
            ),
            details={
                "credit_score": application.credit_score,
                "tier": assessment.tier.value,
                "excellent_min": config.thresholds.credit.excellent_min,
                "good_min": config.thresholds.credit.good_min,
            },
        )
