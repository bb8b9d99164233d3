"""
Tenant Screening Engine.
Runs the factor evaluators, aggregates their points into a risk score and
classifies the score into a decision, optionally under a jurisdiction policy.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from ..application.models import TenantApplication
from ..compliance.jurisdictions import (
    ComplianceSummary,
    JurisdictionPolicy,
    apply_jurisdiction_policy,
    resolve_policy,
)
from ..config.models import DecisionCutoffs, ScreeningConfig, default_screening_config
from ..evaluators import DEFAULT_EVALUATORS
from ..evaluators.base import FactorEvaluator, RiskFactor, json_safe

logger = logging.getLogger(__name__)

INDIVIDUAL_REVIEW_FLAG = (
    "Individualized assessment required before any adverse action on criminal history"
)


class Decision(Enum):
    """Screening decision outcomes."""
    APPROVED = "Approved"
    FLAGGED = "Flagged for Review"
    DENIED = "Denied"


def aggregate_risk(factors: Sequence[RiskFactor]) -> float:
    """Sum factor points, rounded to keep cutoff comparisons stable."""
    return round(sum(f.points for f in factors), 4)


def classify_decision(score: float, cutoffs: DecisionCutoffs) -> Decision:
    """Map a risk score to a decision. Both cutoffs are inclusive."""
    if score <= cutoffs.approved_max:
        return Decision.APPROVED
    if score <= cutoffs.flagged_max:
        return Decision.FLAGGED
    return Decision.DENIED


@dataclass
class ScreeningResult:
    """Complete screening result for an application."""
    application_ref: str = ""
    risk_score: float = 0.0
    decision: Decision = Decision.DENIED
    breakdown: List[RiskFactor] = field(default_factory=list)
    compliance: Optional[ComplianceSummary] = None
    flags: List[str] = field(default_factory=list)
    as_of: Optional[date] = None

    @property
    def requires_individual_review(self) -> bool:
        factor = self.get_factor("criminal_history")
        return bool(factor and factor.details.get("requires_individual_review"))

    def get_factor(self, name: str) -> Optional[RiskFactor]:
        for factor in self.breakdown:
            if factor.factor == name:
                return factor
        return None

    def to_dict(self) -> Dict[str, Any]:
        return json_safe({
            "application_ref": self.application_ref,
            "risk_score": self.risk_score,
            "decision": self.decision,
            "breakdown": [f.to_dict() for f in self.breakdown],
            "compliance": self.compliance.to_dict() if self.compliance else None,
            "flags": list(self.flags),
            "requires_individual_review": self.requires_individual_review,
            "as_of": self.as_of,
        })


class ScreeningEngine:
    """Tenant screening engine."""

    def __init__(
        self,
        config: Optional[ScreeningConfig] = None,
        evaluators: Optional[Sequence[FactorEvaluator]] = None,
    ):
        self.config = config or default_screening_config()
        self.evaluators = tuple(evaluators) if evaluators is not None else DEFAULT_EVALUATORS

    def evaluate(
        self,
        application: TenantApplication,
        jurisdiction: Optional[Union[str, JurisdictionPolicy]] = None,
        as_of: Optional[date] = None,
    ) -> ScreeningResult:
        """
        Screen a tenant application.

        Args:
            application: Parsed applicant facts
            jurisdiction: Policy key (e.g. "us-nyc") or JurisdictionPolicy
            as_of: Evaluation date used for eviction time decay (default today)

        Returns:
            ScreeningResult with score, decision and itemized breakdown

        Raises:
            UnknownJurisdictionError: If the jurisdiction key is not known
        """
        as_of = as_of or date.today()
        config = self.config
        compliance = None

        if jurisdiction is not None:
            policy = resolve_policy(jurisdiction)
            applied = apply_jurisdiction_policy(config, policy)
            config = applied.config
            compliance = applied.summary

        breakdown = []
        for evaluator in self.evaluators:
            factor = evaluator.evaluate(application, config, as_of)
            if factor is not None:
                breakdown.append(factor)

        score = aggregate_risk(breakdown)
        decision = classify_decision(score, config.decision)

        result = ScreeningResult(
            application_ref=application.application_ref,
            risk_score=score,
            decision=decision,
            breakdown=breakdown,
            compliance=compliance,
            as_of=as_of,
        )
        result.flags = self._collect_flags(result)

        logger.debug(
            "Screened %s: score=%.4f decision=%s",
            application.application_ref or "<unnamed>", score, decision.value,
        )
        return result

    def _collect_flags(self, result: ScreeningResult) -> List[str]:
        """Collect operator-facing notes for the result."""
        flags = []
        if result.requires_individual_review:
            flags.append(INDIVIDUAL_REVIEW_FLAG)
        if result.compliance is not None:
            flags.extend(result.compliance.warnings)
        return flags
