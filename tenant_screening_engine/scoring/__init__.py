"""
Scoring Module for Tenant Screening.

Contains risk aggregation, decision classification and the screening engine.
"""

from .scoring_engine import (
    INDIVIDUAL_REVIEW_FLAG,
    Decision,
    ScreeningEngine,
    ScreeningResult,
    aggregate_risk,
    classify_decision,
)

__all__ = [
    "INDIVIDUAL_REVIEW_FLAG",
    "Decision",
    "ScreeningEngine",
    "ScreeningResult",
    "aggregate_risk",
    "classify_decision",
]
