"""
Tests for credit score tiers and employment status points.
"""

import unittest
from dataclasses import replace
from datetime import date

from tenant_screening_engine.application import EmploymentStatus, TenantApplication
from tenant_screening_engine.config import default_screening_config
from tenant_screening_engine.evaluators import (
    CreditEvaluator,
    CreditTier,
    EmploymentEvaluator,
    Severity,
    assess_credit,
    employment_points,
)

AS_OF = date(2025, 1, 1)


class TestCreditTiers(unittest.TestCase):
    """Test credit tier boundaries."""

    def setUp(self):
        config = default_screening_config()
        self.thresholds = config.thresholds.credit
        self.scoring = config.scoring.credit

    def test_tier_boundaries_are_inclusive(self):
        cases = [
            (850, CreditTier.EXCELLENT, 0),
            (750, CreditTier.EXCELLENT, 0),
            (749, CreditTier.GOOD, 1),
            (665, CreditTier.GOOD, 1),
            (664, CreditTier.POOR, 2),
            (300, CreditTier.POOR, 2),
        ]
        for score, tier, points in cases:
            with self.subTest(score=score):
                result = assess_credit(score, self.thresholds, self.scoring)
                self.assertEqual(result.tier, tier)
                self.assertEqual(result.risk, points)

    def test_poor_credit_factor_is_critical(self):
        application = TenantApplication(
            income=50000,
            monthly_rent=1000,
            debt=0,
            credit_score=600,
            employment_status=EmploymentStatus.FULL_TIME,
        )
        factor = CreditEvaluator().evaluate(application, default_screening_config(), AS_OF)
        self.assertEqual(factor.factor, "credit")
        self.assertEqual(factor.points, 2)
        self.assertEqual(factor.severity, Severity.CRITICAL)
        self.assertEqual(factor.details["tier"], "poor")
        self.assertIsNotNone(factor.recommended_action)


class TestEmployment(unittest.TestCase):
    """Test employment status points."""

    def setUp(self):
        self.config = default_screening_config()
        self.application = TenantApplication(
            income=50000,
            monthly_rent=1000,
            debt=0,
            credit_score=720,
            employment_status=EmploymentStatus.FULL_TIME,
        )

    def test_points_per_status(self):
        scoring = self.config.scoring.employment
        self.assertEqual(employment_points(EmploymentStatus.FULL_TIME, scoring), 0)
        self.assertEqual(employment_points(EmploymentStatus.PART_TIME, scoring), 1)
        self.assertEqual(employment_points(EmploymentStatus.UNEMPLOYED, scoring), 2)

    def test_full_time_is_neutral(self):
        factor = EmploymentEvaluator().evaluate(self.application, self.config, AS_OF)
        self.assertEqual(factor.severity, Severity.NEUTRAL)
        self.assertIsNone(factor.recommended_action)

    def test_part_time_is_warning(self):
        application = replace(self.application, employment_status=EmploymentStatus.PART_TIME)
        factor = EmploymentEvaluator().evaluate(application, self.config, AS_OF)
        self.assertEqual(factor.severity, Severity.WARNING)

    def test_unemployed_is_critical(self):
        application = replace(self.application, employment_status=EmploymentStatus.UNEMPLOYED)
        factor = EmploymentEvaluator().evaluate(application, self.config, AS_OF)
        self.assertEqual(factor.points, 2)
        self.assertEqual(factor.severity, Severity.CRITICAL)
        self.assertIsNotNone(factor.recommended_action)


if __name__ == "__main__":
    unittest.main()
