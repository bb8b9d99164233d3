"""
Tenant Screening Engine - Risk Scoring & Compliance Overlay.

Scores rental applicants from financial, rental, criminal, employment and
alternative-data signals, then classifies the total risk into a decision.
Jurisdiction fair-housing policies can be overlaid on the configuration to
neutralize restricted factors and surface procedural obligations.

Main Components:
    - config: Default screening configuration and its typed model
    - application: Applicant input model and payload parser
    - evaluators: One risk factor evaluator per screening criterion
    - compliance: Jurisdiction policy table and overlay
    - scoring: Risk aggregation, decision classification and the engine
"""

from datetime import date
from typing import Any, Dict, Mapping, Optional

from .application import (
    CriminalBackground,
    CriminalRecord,
    EmploymentStatus,
    EvictionFiling,
    EvictionOutcome,
    LandlordReference,
    PaymentHistory,
    ReferenceRating,
    RentalHistory,
    TenantApplication,
    parse_tenant_application,
)
from .compliance import (
    JURISDICTION_POLICIES,
    ComplianceSummary,
    JurisdictionPolicy,
    PolicyApplication,
    apply_jurisdiction_policy,
    get_jurisdiction_policy,
    list_jurisdiction_policies,
)
from .config import (
    SCREENING_CONFIG,
    ScreeningConfig,
    build_screening_config,
    build_strict_affordability_config,
    default_screening_config,
)
from .evaluators import DEFAULT_EVALUATORS, FactorEvaluator, RiskFactor, Severity
from .exceptions import (
    ApplicationValidationError,
    ConfigValidationError,
    ScreeningError,
    UnknownJurisdictionError,
)
from .scoring import Decision, ScreeningEngine, ScreeningResult


__version__ = "1.0.0"
__all__ = [
    # Application
    "CriminalBackground",
    "CriminalRecord",
    "EmploymentStatus",
    "EvictionFiling",
    "EvictionOutcome",
    "LandlordReference",
    "PaymentHistory",
    "ReferenceRating",
    "RentalHistory",
    "TenantApplication",
    "parse_tenant_application",
    # Compliance
    "JURISDICTION_POLICIES",
    "ComplianceSummary",
    "JurisdictionPolicy",
    "PolicyApplication",
    "apply_jurisdiction_policy",
    "get_jurisdiction_policy",
    "list_jurisdiction_policies",
    # Configuration
    "SCREENING_CONFIG",
    "ScreeningConfig",
    "build_screening_config",
    "build_strict_affordability_config",
    "default_screening_config",
    # Evaluators
    "DEFAULT_EVALUATORS",
    "FactorEvaluator",
    "RiskFactor",
    "Severity",
    # Errors
    "ApplicationValidationError",
    "ConfigValidationError",
    "ScreeningError",
    "UnknownJurisdictionError",
    # Scoring
    "Decision",
    "ScreeningEngine",
    "ScreeningResult",
    # Main function
    "run_tenant_screening",
]


def run_tenant_screening(
    payload: Mapping[str, Any],
    config_overrides: Optional[Mapping[str, Any]] = None,
    jurisdiction: Optional[str] = None,
    as_of: Optional[date] = None,
) -> Dict:
    """
    Main entry point for tenant screening.

    This function orchestrates the complete screening pipeline:
    1. Validate the applicant payload
    2. Build the configuration from defaults plus overrides
    3. Apply the jurisdiction policy, if any, and evaluate every factor
    4. Return the decision and itemized breakdown as plain JSON values

    Args:
        payload: Applicant payload with keys:
            - income: Annual income
            - monthly_rent: Monthly rent for the unit
            - debt: Outstanding debt
            - credit_score: 300-850
            - employment_status: "full-time", "part-time" or "unemployed"
            - rental_history: (Optional) evictions, late_payments, eviction_filings
            - criminal_background: (Optional) has_criminal_record, type_of_crime, records
            - utility_payment_score: (Optional) 0-1
            - landlord_reference: (Optional) rating and verified flag
            - payment_history: (Optional) on_time_rate 0-1
        config_overrides: Partial configuration document (camelCase or snake_case)
        jurisdiction: Policy key such as "us-nyc"
        as_of: Evaluation date (default today)

    Returns:
        Dictionary containing:
            - risk_score: Total risk points
            - decision: "Approved", "Flagged for Review" or "Denied"
            - breakdown: Itemized risk factors
            - compliance: Jurisdiction adjustments and warnings (or None)
            - flags: Operator-facing notes

    Raises:
        ApplicationValidationError: If the payload is invalid
        ConfigValidationError: If the overrides are invalid
        UnknownJurisdictionError: If the jurisdiction key is not known

    Example:
        >>> result = run_tenant_screening(
        ...     {
        ...         "income": 50000,
        ...         "monthly_rent": 1600,
        ...         "debt": 15000,
        ...         "credit_score": 720,
        ...         "employment_status": "full-time",
        ...         "rental_history": {"evictions": 0, "late_payments": 2},
        ...     }
        ... )
        >>> print(result["decision"])
        Approved
    """
    application = parse_tenant_application(payload)
    config = build_screening_config(config_overrides)
    engine = ScreeningEngine(config=config)
    result = engine.evaluate(application, jurisdiction=jurisdiction, as_of=as_of)
    return result.to_dict()
