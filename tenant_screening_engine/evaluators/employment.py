"""
Employment status evaluation.
"""

from datetime import date
from typing import Optional

from ..application.models import EmploymentStatus, TenantApplication
from ..config.models import EmploymentScoring, ScreeningConfig
from .base import FactorEvaluator, RiskFactor, classify_severity


def employment_points(status: EmploymentStatus, scoring: EmploymentScoring) -> float:
    if status is EmploymentStatus.FULL_TIME:
        return scoring.full_time
    if status is EmploymentStatus.PART_TIME:
        return scoring.part_time
    return scoring.unemployed


class EmploymentEvaluator(FactorEvaluator):
    factor = "employment"
    data_source = "Employment verification"

    def evaluate(
        self,
        application: TenantApplication,
        config: ScreeningConfig,
        as_of: date,
    ) -> Optional[RiskFactor]:
        status = application.employment_status
        points = employment_points(status, config.scoring.employment)
        return RiskFactor(
            factor=self.factor,
            label=f"Employment: {status.value}",
            points=points,
            severity=classify_severity(points, critical=status is EmploymentStatus.UNEMPLOYED),
            data_source=self.data_source,
            recommended_action=(
                "Request documentation of other income (benefits, savings, offer letter)"
                if points > 0 else None
            ),
            details={"employment_status": status.value},
        )
