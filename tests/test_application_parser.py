"""
Tests for parsing raw applicant payloads.
"""

import unittest
from datetime import date

from tenant_screening_engine.application import (
    EmploymentStatus,
    EvictionOutcome,
    ReferenceRating,
    parse_tenant_application,
)
from tenant_screening_engine.exceptions import ApplicationValidationError


def base_payload(**overrides):
    payload = {
        "income": 50000,
        "monthly_rent": 1600,
        "debt": 15000,
        "credit_score": 720,
        "employment_status": "full-time",
        "rental_history": {"evictions": 0, "late_payments": 2},
        "criminal_background": {"has_criminal_record": False},
    }
    payload.update(overrides)
    return payload


class TestParseTenantApplication(unittest.TestCase):
    """Test payload validation and conversion."""

    def test_minimal_payload(self):
        application = parse_tenant_application(base_payload())
        self.assertEqual(application.income, 50000)
        self.assertEqual(application.monthly_rent, 1600)
        self.assertEqual(application.employment_status, EmploymentStatus.FULL_TIME)
        self.assertEqual(application.rental_history.late_payments, 2)
        self.assertFalse(application.criminal_background.has_criminal_record)
        self.assertIsNone(application.utility_payment_score)
        self.assertIsNone(application.landlord_reference)

    def test_optional_sections_default(self):
        payload = base_payload()
        del payload["rental_history"]
        del payload["criminal_background"]
        application = parse_tenant_application(payload)
        self.assertEqual(application.rental_history.evictions, 0)
        self.assertEqual(application.criminal_background.records, ())

    def test_numeric_strings_coerced(self):
        application = parse_tenant_application(base_payload(income="52000.50", credit_score="700"))
        self.assertEqual(application.income, 52000.5)
        self.assertEqual(application.credit_score, 700)

    def test_errors_collected_together(self):
        payload = base_payload(income=-1, monthly_rent="abc", credit_score=900, employment_status="contract")
        del payload["debt"]
        with self.assertRaises(ApplicationValidationError) as ctx:
            parse_tenant_application(payload)
        errors = ctx.exception.errors
        self.assertIn("income must be a non-negative number", errors)
        self.assertIn("monthly_rent must be a non-negative number", errors)
        self.assertIn("debt must be a non-negative number", errors)
        self.assertIn("credit_score must be a number between 300 and 850", errors)
        self.assertIn("employment_status must be one of: full-time, part-time, unemployed", errors)

    def test_boolean_is_not_a_number(self):
        with self.assertRaises(ApplicationValidationError):
            parse_tenant_application(base_payload(income=True))

    def test_negative_counts_rejected(self):
        with self.assertRaises(ApplicationValidationError) as ctx:
            parse_tenant_application(base_payload(rental_history={"evictions": -1, "late_payments": 1.5}))
        self.assertIn("rental_history.evictions must be a non-negative integer", ctx.exception.errors)
        self.assertIn("rental_history.late_payments must be a non-negative integer", ctx.exception.errors)

    def test_non_object_payload(self):
        with self.assertRaises(ApplicationValidationError) as ctx:
            parse_tenant_application(["not", "an", "object"])
        self.assertEqual(ctx.exception.errors, ["application payload must be an object"])

    def test_eviction_filings_parsed(self):
        application = parse_tenant_application(base_payload(rental_history={
            "evictions": 1,
            "late_payments": 0,
            "eviction_filings": [
                {"filed_at": "2022-03-01T00:00:00Z", "outcome": "Judgment"},
                {"filed_at": "2023-07-15", "outcome": "dismissed"},
            ],
        }))
        filings = application.rental_history.eviction_filings
        self.assertEqual(len(filings), 2)
        self.assertEqual(filings[0].filed_at, date(2022, 3, 1))
        self.assertEqual(filings[0].outcome, EvictionOutcome.JUDGMENT)
        self.assertEqual(filings[1].outcome, EvictionOutcome.DISMISSED)

    def test_invalid_filing_reported(self):
        with self.assertRaises(ApplicationValidationError) as ctx:
            parse_tenant_application(base_payload(rental_history={
                "eviction_filings": [
                    {"filed_at": "2022-03-01", "outcome": "appealed"},
                    {"filed_at": "yesterday", "outcome": "settled"},
                ],
            }))
        self.assertIn(
            "rental_history.eviction_filings[0].outcome must be one of filed, dismissed, settled, judgment",
            ctx.exception.errors,
        )
        self.assertIn(
            "rental_history.eviction_filings[1].filed_at must be an ISO date string",
            ctx.exception.errors,
        )

    def test_alternative_signals_range_checked(self):
        with self.assertRaises(ApplicationValidationError) as ctx:
            parse_tenant_application(base_payload(
                utility_payment_score=1.5,
                payment_history={"on_time_rate": -0.1},
            ))
        self.assertIn("utility_payment_score must be a number between 0 and 1", ctx.exception.errors)
        self.assertIn("payment_history.on_time_rate must be a number between 0 and 1", ctx.exception.errors)

    def test_alternative_signals_parsed(self):
        application = parse_tenant_application(base_payload(
            utility_payment_score=0.92,
            payment_history={"on_time_rate": 0.8},
            landlord_reference={"rating": "Strong", "verified": True},
        ))
        self.assertEqual(application.utility_payment_score, 0.92)
        self.assertEqual(application.payment_history.on_time_rate, 0.8)
        self.assertEqual(application.landlord_reference.rating, ReferenceRating.STRONG)
        self.assertTrue(application.landlord_reference.verified)

    def test_invalid_reference_rating(self):
        with self.assertRaises(ApplicationValidationError) as ctx:
            parse_tenant_application(base_payload(landlord_reference={"rating": "glowing"}))
        self.assertIn(
            "landlord_reference.rating must be one of: strong, positive, neutral, concern",
            ctx.exception.errors,
        )

    def test_criminal_records_passed_through(self):
        application = parse_tenant_application(base_payload(criminal_background={
            "has_criminal_record": True,
            "records": [
                {"severity": "arson", "category": "property", "years_since": 2},
                "junk",
                {"severity": "felony", "category": "violent", "years_since": "4"},
            ],
        }))
        records = application.criminal_background.records
        self.assertEqual(len(records), 3)
        self.assertEqual(records[0].severity, "arson")
        self.assertIsNone(records[1].severity)
        self.assertEqual(records[2].years_since, 4)

    def test_application_ref_kept(self):
        application = parse_tenant_application(base_payload(application_ref="APP-001"))
        self.assertEqual(application.application_ref, "APP-001")


if __name__ == "__main__":
    unittest.main()
