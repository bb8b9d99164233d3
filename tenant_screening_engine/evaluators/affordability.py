"""
Affordability evaluation.

Classifies the applicant's income-to-rent ratio and debt-to-income posture
into a tier, plus the separate high-DTI penalty.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from ..application.models import TenantApplication
from ..config.models import AffordabilityScoring, AffordabilityThresholds, ScreeningConfig
from .base import FactorEvaluator, RiskFactor, classify_severity

logger = logging.getLogger(__name__)


class AffordabilityTier(Enum):
    """Affordability classification, best first."""
    MEETS_RULE = "meets-rule"
    PARTIAL_CREDIT = "partial-credit"
    DTI_EXCEPTION = "dti-exception"
    FAIL = "fail"


@dataclass(frozen=True)
class AffordabilityAssessment:
    ratio: float
    dti: float
    tier: AffordabilityTier
    risk: float


TIER_ACTIONS = {
    AffordabilityTier.PARTIAL_CREDIT: (
        "Verify income documentation; partial credit applied because the debt load is low"
    ),
    AffordabilityTier.DTI_EXCEPTION: (
        "Request alternative affordability evidence such as savings, a voucher, or a guarantor"
    ),
    AffordabilityTier.FAIL: (
        "Request proof of additional income, a qualified guarantor, or a rental subsidy"
    ),
}


def calculate_dti(income: float, debt: float) -> float:
    """Debt-to-income ratio; infinite when there is no income."""
    if income <= 0:
        return math.inf
    return debt / income


def calculate_income_to_rent_ratio(income: float, monthly_rent: float) -> float:
    """Monthly income over monthly rent; infinite when no rent is due."""
    if monthly_rent <= 0:
        return math.inf
    return (income / 12) / monthly_rent


def assess_affordability(
    income: float,
    debt: float,
    monthly_rent: float,
    thresholds: AffordabilityThresholds,
    scoring: AffordabilityScoring,
) -> AffordabilityAssessment:
    """Assign an affordability tier. First matching rule wins."""
    ratio = calculate_income_to_rent_ratio(income, monthly_rent)
    dti = calculate_dti(income, debt)

    if math.isinf(ratio) or ratio >= thresholds.rent_rule:
        tier, risk = AffordabilityTier.MEETS_RULE, scoring.meets_rule
    elif ratio >= thresholds.partial_credit_ratio and dti <= thresholds.dti_mitigation:
        tier, risk = AffordabilityTier.PARTIAL_CREDIT, scoring.partial_credit
    elif dti <= thresholds.dti_exception:
        tier, risk = AffordabilityTier.DTI_EXCEPTION, scoring.dti_exception
    else:
        tier, risk = AffordabilityTier.FAIL, scoring.fail

    logger.debug("Affordability ratio=%.3f dti=%.3f tier=%s", ratio, dti, tier.value)
    return AffordabilityAssessment(ratio=ratio, dti=dti, tier=tier, risk=risk)


class AffordabilityEvaluator(FactorEvaluator):
    """Scores income-to-rent and debt-to-income posture."""

    factor = "affordability"
    data_source = "Applicant-reported income, rent, and debt"

    def evaluate(
        self,
        application: TenantApplication,
        config: ScreeningConfig,
        as_of: date,
    ) -> Optional[RiskFactor]:
        thresholds = config.thresholds.affordability
        assessment = assess_affordability(
            income=application.income,
            debt=application.debt,
            monthly_rent=application.monthly_rent,
            thresholds=thresholds,
            scoring=config.scoring.affordability,
        )

        if math.isinf(assessment.ratio):
            label = "Affordability: no rent due (meets rule)"
        else:
            label = (
                f"Affordability: income {assessment.ratio:.2f}x rent "
                f"({assessment.tier.value}, rule {thresholds.rent_rule:g}x)"
            )

        points = assessment.risk
        return RiskFactor(
            factor=self.factor,
            label=label,
            points=points,
            severity=classify_severity(points, critical=assessment.tier is AffordabilityTier.FAIL),
            data_source=self.data_source,
            recommended_action=TIER_ACTIONS.get(assessment.tier) if points > 0 else None,
            details={
                "ratio": assessment.ratio,
                "dti": assessment.dti,
                "tier": assessment.tier.value,
                "rent_rule": thresholds.rent_rule,
                "partial_credit_ratio": thresholds.partial_credit_ratio,
            },
        )


class DebtToIncomeEvaluator(FactorEvaluator):
    """Adds a flat penalty when debt-to-income exceeds the high threshold."""

    factor = "dti_high"
    data_source = "Applicant-reported income and debt"

    def evaluate(
        self,
        application: TenantApplication,
        config: ScreeningConfig,
        as_of: date,
    ) -> Optional[RiskFactor]:
        dti = calculate_dti(application.income, application.debt)
        if dti <= config.thresholds.dti_high:
            return None

        points = config.scoring.dti_high
        dti_text = "no reported income" if math.isinf(dti) else f"{dti:.0%}"
        return RiskFactor(
            factor=self.factor,
            label=f"High debt-to-income: {dti_text} (limit {config.thresholds.dti_high:.0%})",
            points=points,
            severity=classify_severity(points),
            data_source=self.data_source,
            recommended_action=(
                "Review outstanding debts and request a payment plan or proof of payoff"
                if points > 0 else None
            ),
            details={"dti": dti, "dti_high": config.thresholds.dti_high},
        )
