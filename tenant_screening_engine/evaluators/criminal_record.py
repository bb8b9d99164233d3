"""
Criminal record evaluation.

Records are weighed with severity/category-specific lookback windows. A
record inside its window is considered and requires individualized review;
a record outside it is disregarded for the decision but still carries the
stale-record points and is kept for audit. When a record is reported
without usable structured detail, the applicant is routed to manual review
rather than automatically penalised or passed.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Tuple

from ..application.models import CriminalBackground, CriminalRecord, TenantApplication
from ..config.models import CriminalScoring, CriminalThresholds, ScreeningConfig
from .base import FactorEvaluator, RiskFactor, classify_severity

logger = logging.getLogger(__name__)

FELONY = "felony"
MISDEMEANOR = "misdemeanor"
VIOLENT = "violent"

VALID_SEVERITIES = {FELONY, MISDEMEANOR}
VALID_CATEGORIES = {VIOLENT, "property", "drug", "other"}


@dataclass(frozen=True)
class ReviewedRecord:
    """A normalized record with its lookback outcome."""
    severity: str
    category: str
    years_since: float
    lookback_years: float
    points: float
    considered: bool
    rationale: str
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "severity": self.severity,
            "category": self.category,
            "years_since": self.years_since,
            "lookback_years": self.lookback_years,
            "points": self.points,
            "considered": self.considered,
            "rationale": self.rationale,
            "description": self.description,
        }


@dataclass(frozen=True)
class CriminalAssessment:
    risk: float
    requires_individual_review: bool
    considered_records: Tuple[ReviewedRecord, ...] = ()
    disregarded_records: Tuple[ReviewedRecord, ...] = ()
    rationale: Tuple[str, ...] = ()


def normalize_records(records: Sequence[CriminalRecord]) -> List[CriminalRecord]:
    """Drop records with an invalid severity, category, or age."""
    valid = []
    for record in records:
        severity = record.severity.lower() if isinstance(record.severity, str) else None
        category = record.category.lower() if isinstance(record.category, str) else None
        years = record.years_since
        if (
            severity not in VALID_SEVERITIES
            or category not in VALID_CATEGORIES
            or not isinstance(years, (int, float))
            or isinstance(years, bool)
            or years < 0
        ):
            logger.debug("Dropping malformed criminal record: %r", record)
            continue
        valid.append(CriminalRecord(
            severity=severity,
            category=category,
            years_since=years,
            description=record.description,
        ))
    return valid


def lookback_years_for(record: CriminalRecord, thresholds: CriminalThresholds) -> float:
    if record.severity == FELONY and record.category == VIOLENT:
        return thresholds.violent_felony_lookback_years
    if record.severity == FELONY:
        return thresholds.felony_lookback_years
    return thresholds.misdemeanor_lookback_years


def recent_points_for(record: CriminalRecord, scoring: CriminalScoring) -> float:
    if record.severity == FELONY and record.category == VIOLENT:
        return scoring.recent_violent_felony_points
    if record.severity == FELONY:
        return scoring.recent_felony_points
    return scoring.recent_misdemeanor_points


def _unstructured_assessment(
    background: CriminalBackground,
    scoring: CriminalScoring,
) -> CriminalAssessment:
    crime = f" ({background.type_of_crime})" if background.type_of_crime else ""
    return CriminalAssessment(
        risk=scoring.stale_record_points,
        requires_individual_review=True,
        rationale=(
            f"Criminal record reported{crime} without structured severity, category, "
            f"or date; routed to individualized review",
        ),
    )


def assess_criminal_record(
    background: CriminalBackground,
    thresholds: CriminalThresholds,
    scoring: CriminalScoring,
) -> CriminalAssessment:
    """Apply lookback windows to a criminal background."""
    if not background.has_criminal_record:
        return CriminalAssessment(
            risk=scoring.clean_record_points,
            requires_individual_review=False,
            rationale=("No criminal record reported",),
        )

    if not background.records:
        return _unstructured_assessment(background, scoring)

    records = normalize_records(background.records)
    if not records:
        logger.debug(
            "All %d criminal records were malformed; falling back to manual review",
            len(background.records),
        )
        return _unstructured_assessment(background, scoring)

    considered = []
    disregarded = []
    for record in records:
        lookback = lookback_years_for(record, thresholds)
        summary = f"{record.severity.capitalize()} ({record.category}), {record.years_since:g} years ago"
        if record.years_since <= lookback:
            points = recent_points_for(record, scoring)
            considered.append(ReviewedRecord(
                severity=record.severity,
                category=record.category,
                years_since=record.years_since,
                lookback_years=lookback,
                points=points,
                considered=True,
                rationale=(
                    f"{summary}: within the {lookback:g}-year lookback; "
                    f"considered (+{points:g}) pending individualized review"
                ),
                description=record.description,
            ))
        else:
            points = scoring.stale_record_points
            disregarded.append(ReviewedRecord(
                severity=record.severity,
                category=record.category,
                years_since=record.years_since,
                lookback_years=lookback,
                points=points,
                considered=False,
                rationale=(
                    f"{summary}: outside the {lookback:g}-year lookback; "
                    f"disregarded for the decision, retained for audit (+{points:g})"
                ),
                description=record.description,
            ))

    reviewed = considered + disregarded
    return CriminalAssessment(
        risk=sum(r.points for r in reviewed),
        requires_individual_review=bool(considered),
        considered_records=tuple(considered),
        disregarded_records=tuple(disregarded),
        rationale=tuple(r.rationale for r in reviewed),
    )


class CriminalRecordEvaluator(FactorEvaluator):
    """Scores criminal history using lookback windows."""

    factor = "criminal_history"
    data_source = "Criminal background report"

    def evaluate(
        self,
        application: TenantApplication,
        config: ScreeningConfig,
        as_of: date,
    ) -> Optional[RiskFactor]:
        assessment = assess_criminal_record(
            application.criminal_background,
            config.thresholds.criminal,
            config.scoring.criminal,
        )

        if not application.criminal_background.has_criminal_record:
            label = "Criminal history: no record reported"
        elif not (assessment.considered_records or assessment.disregarded_records):
            label = "Criminal history: record reported without structured detail"
        else:
            label = (
                f"Criminal history: {len(assessment.considered_records)} record(s) within lookback, "
                f"{len(assessment.disregarded_records)} outside lookback"
            )

        points = assessment.risk
        return RiskFactor(
            factor=self.factor,
            label=label,
            points=points,
            severity=classify_severity(points, critical=bool(assessment.considered_records)),
            data_source=self.data_source,
            recommended_action=(
                "Complete an individualized assessment of the nature and recency of the "
                "offense and any mitigating evidence before taking adverse action"
                if assessment.requires_individual_review else None
            ),
            details={
                "requires_individual_review": assessment.requires_individual_review,
                "considered_records": [r.to_dict() for r in assessment.considered_records],
                "disregarded_records": [r.to_dict() for r in assessment.disregarded_records],
                "rationale": list(assessment.rationale),
            },
        )
