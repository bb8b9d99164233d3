"""
Tests for eviction time decay, outcome weighting and late payments.
"""

import unittest
from datetime import date, timedelta

from tenant_screening_engine.application import (
    EmploymentStatus,
    EvictionFiling,
    EvictionOutcome,
    RentalHistory,
    TenantApplication,
)
from tenant_screening_engine.config import build_screening_config, default_screening_config
from tenant_screening_engine.evaluators import (
    RentalHistoryEvaluator,
    Severity,
    assess_rental_history,
    eviction_decay,
)
from tenant_screening_engine.evaluators.rental_history import (
    DETAILED_MODE,
    SUMMARY_MODE,
    years_between,
)

AS_OF = date(2025, 1, 1)


class TestEvictionDecay(unittest.TestCase):
    """Test the linear time-decay multiplier."""

    def test_new_filing_full_weight(self):
        self.assertEqual(eviction_decay(0, 5, 0.25), 1.0)

    def test_boundary_excluded(self):
        self.assertEqual(eviction_decay(5, 5, 0.25), 0.0)
        self.assertEqual(eviction_decay(7, 5, 0.25), 0.0)

    def test_linear_inside_window(self):
        self.assertAlmostEqual(eviction_decay(2.5, 5, 0.25), 0.5)

    def test_floor_applies_near_boundary(self):
        self.assertEqual(eviction_decay(4.5, 5, 0.25), 0.25)

    def test_decay_never_below_floor_inside_window(self):
        for tenths in range(0, 50):
            decay = eviction_decay(tenths / 10, 5, 0.25)
            self.assertGreaterEqual(decay, 0.25)
            self.assertLessEqual(decay, 1.0)

    def test_future_filing_counts_as_new(self):
        self.assertEqual(years_between(date(2025, 6, 1), AS_OF), 0.0)


class TestRentalHistoryAssessment(unittest.TestCase):
    """Test detailed and summary scoring modes."""

    def setUp(self):
        self.config = default_screening_config()

    def assess(self, history, config=None):
        config = config or self.config
        return assess_rental_history(history, config.thresholds.rental, config.scoring.rental, AS_OF)

    def test_clean_history(self):
        result = self.assess(RentalHistory())
        self.assertEqual(result.mode, SUMMARY_MODE)
        self.assertEqual(result.risk, 0)

    def test_summary_mode_per_eviction(self):
        result = self.assess(RentalHistory(evictions=2))
        self.assertEqual(result.mode, SUMMARY_MODE)
        self.assertEqual(result.eviction_points, 6)

    def test_late_payments_threshold_is_exclusive(self):
        self.assertEqual(self.assess(RentalHistory(late_payments=3)).late_payment_points, 0)
        self.assertEqual(self.assess(RentalHistory(late_payments=4)).late_payment_points, 2)

    def test_new_judgment_full_points(self):
        history = RentalHistory(
            evictions=1,
            eviction_filings=(EvictionFiling(filed_at=AS_OF, outcome=EvictionOutcome.JUDGMENT),),
        )
        result = self.assess(history)
        self.assertEqual(result.mode, DETAILED_MODE)
        self.assertEqual(result.eviction_points, 3.5)

    def test_outcome_weighting(self):
        outcomes = {
            EvictionOutcome.FILED: 1,
            EvictionOutcome.DISMISSED: 0.5,
            EvictionOutcome.SETTLED: 2,
            EvictionOutcome.JUDGMENT: 3.5,
        }
        for outcome, expected in outcomes.items():
            with self.subTest(outcome=outcome):
                history = RentalHistory(eviction_filings=(EvictionFiling(AS_OF, outcome),))
                self.assertEqual(self.assess(history).eviction_points, expected)

    def test_filing_inside_window_uses_floor(self):
        # 1826 days is just under five years of 365.25 days
        filed_at = AS_OF - timedelta(days=1826)
        history = RentalHistory(eviction_filings=(EvictionFiling(filed_at, EvictionOutcome.JUDGMENT),))
        result = self.assess(history)
        self.assertAlmostEqual(result.eviction_points, 3.5 * 0.25)
        self.assertFalse(result.filings[0].excluded)

    def test_filing_past_lookback_excluded(self):
        filed_at = AS_OF - timedelta(days=1827)
        history = RentalHistory(eviction_filings=(EvictionFiling(filed_at, EvictionOutcome.JUDGMENT),))
        result = self.assess(history)
        self.assertEqual(result.eviction_points, 0)
        self.assertTrue(result.filings[0].excluded)

    def test_filings_take_precedence_over_count(self):
        history = RentalHistory(
            evictions=3,
            eviction_filings=(EvictionFiling(AS_OF, EvictionOutcome.DISMISSED),),
        )
        result = self.assess(history)
        self.assertEqual(result.mode, DETAILED_MODE)
        self.assertEqual(result.eviction_points, 0.5)

    def test_disabled_outcome_points_fall_back_to_summary(self):
        config = build_screening_config({"scoring": {"rental": {"evictionOutcomePoints": None}}})
        history = RentalHistory(
            evictions=1,
            eviction_filings=(EvictionFiling(AS_OF, EvictionOutcome.JUDGMENT),),
        )
        result = self.assess(history, config)
        self.assertEqual(result.mode, SUMMARY_MODE)
        self.assertEqual(result.eviction_points, 3)


class TestRentalHistoryEvaluator(unittest.TestCase):
    """Test the rental history breakdown entry."""

    def setUp(self):
        self.config = default_screening_config()

    def make_application(self, history):
        return TenantApplication(
            income=50000,
            monthly_rent=1000,
            debt=0,
            credit_score=720,
            employment_status=EmploymentStatus.FULL_TIME,
            rental_history=history,
        )

    def test_clean_history_is_neutral(self):
        factor = RentalHistoryEvaluator().evaluate(self.make_application(RentalHistory()), self.config, AS_OF)
        self.assertEqual(factor.factor, "rental_history")
        self.assertEqual(factor.points, 0)
        self.assertEqual(factor.severity, Severity.NEUTRAL)
        self.assertIsNone(factor.recommended_action)

    def test_recent_judgment_is_critical(self):
        history = RentalHistory(
            evictions=1,
            late_payments=5,
            eviction_filings=(EvictionFiling(date(2024, 1, 1), EvictionOutcome.JUDGMENT),),
        )
        factor = RentalHistoryEvaluator().evaluate(self.make_application(history), self.config, AS_OF)
        self.assertEqual(factor.severity, Severity.CRITICAL)
        self.assertIsNotNone(factor.recommended_action)
        self.assertEqual(factor.details["mode"], DETAILED_MODE)
        self.assertEqual(len(factor.details["filings"]), 1)
        self.assertEqual(factor.details["late_payment_points"], 2)

    def test_filings_serialize_dates(self):
        history = RentalHistory(eviction_filings=(EvictionFiling(date(2024, 1, 1), EvictionOutcome.SETTLED),))
        factor = RentalHistoryEvaluator().evaluate(self.make_application(history), self.config, AS_OF)
        self.assertEqual(factor.to_dict()["details"]["filings"][0]["filed_at"], "2024-01-01")


if __name__ == "__main__":
    unittest.main()
