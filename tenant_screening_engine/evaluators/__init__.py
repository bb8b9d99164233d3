"""
Risk Factor Evaluators for Tenant Screening.

Each evaluator turns applicant facts into one itemized risk contribution.
"""

from .base import FactorEvaluator, RiskFactor, Severity, classify_severity
from .affordability import (
    AffordabilityAssessment,
    AffordabilityEvaluator,
    AffordabilityTier,
    DebtToIncomeEvaluator,
    assess_affordability,
    calculate_dti,
    calculate_income_to_rent_ratio,
)
from .credit import CreditAssessment, CreditEvaluator, CreditTier, assess_credit
from .rental_history import (
    FilingContribution,
    RentalHistoryAssessment,
    RentalHistoryEvaluator,
    assess_rental_history,
    eviction_decay,
)
from .criminal_record import (
    CriminalAssessment,
    CriminalRecordEvaluator,
    ReviewedRecord,
    assess_criminal_record,
    normalize_records,
)
from .employment import EmploymentEvaluator, employment_points
from .alternative_data import (
    AlternativeDataAssessment,
    AlternativeDataEvaluator,
    PaymentReliabilityTier,
    assess_alternative_data,
)

# Breakdown order
DEFAULT_EVALUATORS = (
    AffordabilityEvaluator(),
    DebtToIncomeEvaluator(),
    CreditEvaluator(),
    RentalHistoryEvaluator(),
    CriminalRecordEvaluator(),
    EmploymentEvaluator(),
    AlternativeDataEvaluator(),
)

__all__ = [
    "FactorEvaluator",
    "RiskFactor",
    "Severity",
    "classify_severity",
    "AffordabilityAssessment",
    "AffordabilityEvaluator",
    "AffordabilityTier",
    "DebtToIncomeEvaluator",
    "assess_affordability",
    "calculate_dti",
    "calculate_income_to_rent_ratio",
    "CreditAssessment",
    "CreditEvaluator",
    "CreditTier",
    "assess_credit",
    "FilingContribution",
    "RentalHistoryAssessment",
    "RentalHistoryEvaluator",
    "assess_rental_history",
    "eviction_decay",
    "CriminalAssessment",
    "CriminalRecordEvaluator",
    "ReviewedRecord",
    "assess_criminal_record",
    "normalize_records",
    "EmploymentEvaluator",
    "employment_points",
    "AlternativeDataAssessment",
    "AlternativeDataEvaluator",
    "PaymentReliabilityTier",
    "assess_alternative_data",
    "DEFAULT_EVALUATORS",
]
