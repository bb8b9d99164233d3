"""
Common types for risk factor evaluators.

Each evaluator is an independently enabled scoring module: it reads the
applicant facts and the (possibly jurisdiction-adjusted) configuration and
returns one itemized RiskFactor, or None when its input is absent and it
contributes nothing.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional

from ..application.models import TenantApplication
from ..config.models import ScreeningConfig


class Severity(Enum):
    """How a contribution should be surfaced to operators."""
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass
class RiskFactor:
    """A single itemized contribution to the total risk score."""
    factor: str
    label: str
    points: float
    severity: Severity
    data_source: str
    recommended_action: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return json_safe({
            "factor": self.factor,
            "label": self.label,
            "points": self.points,
            "severity": self.severity,
            "data_source": self.data_source,
            "recommended_action": self.recommended_action,
            "details": self.details,
        })


def classify_severity(points: float, critical: bool = False) -> Severity:
    """Map a contribution to a severity; critical only applies to positive points."""
    if points < 0:
        return Severity.POSITIVE
    if points == 0:
        return Severity.NEUTRAL
    return Severity.CRITICAL if critical else Severity.WARNING


def json_safe(value: Any) -> Any:
    """Convert a result structure into plain JSON-compatible values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(item) for item in value]
    return value


class FactorEvaluator:
    """Base class for risk factor evaluators."""

    factor = ""
    data_source = ""

    def evaluate(
        self,
        application: TenantApplication,
        config: ScreeningConfig,
        as_of: date,
    ) -> Optional[RiskFactor]:
        raise NotImplementedError
