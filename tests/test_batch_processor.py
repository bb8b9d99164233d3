"""
Tests for the batch processor: file loading, per-file error handling,
statistics and DataFrame export.
"""

import io
import json
import unittest
import zipfile
from datetime import date

from screening_batch_processor import BatchResult, ScreeningBatchProcessor
from tenant_screening_engine.exceptions import ConfigValidationError
from tenant_screening_engine.scoring import Decision

AS_OF = date(2025, 1, 1)


def application(**overrides):
    payload = {
        "income": 50000,
        "monthly_rent": 1600,
        "debt": 15000,
        "credit_score": 720,
        "employment_status": "full-time",
        "rental_history": {"evictions": 0, "late_payments": 2},
    }
    payload.update(overrides)
    return payload


def as_file(name, data):
    return name, json.dumps(data).encode("utf-8")


class TestScreeningBatchProcessor(unittest.TestCase):
    """Test batch processing of application files."""

    def setUp(self):
        self.processor = ScreeningBatchProcessor()

    def test_single_application_file(self):
        batch = self.processor.process_batch([as_file("applicant_42.json", application())], as_of=AS_OF)
        self.assertEqual(batch.stats.successful, 1)
        self.assertEqual(batch.stats.approved, 1)
        self.assertEqual(batch.results[0].application_ref, "applicant_42")
        self.assertEqual(batch.results[0].decision, Decision.APPROVED)

    def test_list_file_refs_and_validation_errors(self):
        files = [as_file("multi.json", [application(), application(credit_score=9000)])]
        batch = self.processor.process_batch(files, as_of=AS_OF)

        self.assertEqual(batch.stats.total_files, 1)
        self.assertEqual(batch.stats.total_applications, 2)
        self.assertEqual(batch.stats.successful, 1)
        self.assertEqual(batch.stats.failed, 1)
        self.assertEqual(batch.results[0].application_ref, "multi_1")
        self.assertEqual(batch.errors[0].application_ref, "multi_2")
        self.assertEqual(batch.errors[0].error_type, "VALIDATION_ERROR")
        self.assertIn("credit_score", batch.errors[0].error_message)
        self.assertEqual(batch.error_summary, {"VALIDATION_ERROR": 1})

    def test_one_bad_file_does_not_abort_batch(self):
        files = [
            ("broken.json", b"{not json"),
            as_file("good.json", application(application_ref="APP-1")),
            ("scalar.json", b"42"),
        ]
        batch = self.processor.process_batch(files, as_of=AS_OF)
        self.assertEqual(batch.stats.successful, 1)
        self.assertEqual(batch.results[0].application_ref, "APP-1")
        self.assertEqual(batch.error_summary, {"JSON_PARSE_ERROR": 1, "INVALID_JSON_STRUCTURE": 1})
        self.assertAlmostEqual(batch.stats.success_rate, 100 / 3)

    def test_wrapped_file_with_jurisdiction(self):
        files = [as_file("nyc.json", {
            "jurisdiction": "us-nyc",
            "applications": [application(), application(jurisdiction="us-ca")],
        })]
        batch = self.processor.process_batch(files, as_of=AS_OF)
        self.assertEqual([r.compliance.policy_id for r in batch.results], ["us-nyc", "us-ca"])

    def test_unknown_jurisdiction(self):
        batch = self.processor.process_batch(
            [as_file("a.json", application(jurisdiction="atlantis"))], as_of=AS_OF
        )
        self.assertEqual(batch.errors[0].error_type, "UNKNOWN_JURISDICTION")

    def test_default_jurisdiction(self):
        processor = ScreeningBatchProcessor(default_jurisdiction="us-or-portland")
        batch = processor.process_batch([as_file("a.json", application())], as_of=AS_OF)
        self.assertEqual(batch.results[0].compliance.policy_id, "us-or-portland")

    def test_file_level_config_overrides(self):
        files = [
            as_file("strict.json", {
                "config_overrides": {"decision": {"approvedMax": 0.5}},
                "applications": [application()],
            }),
            as_file("bad_config.json", {
                "config_overrides": {"decision": {"bogus": 1}},
                "applications": [application()],
            }),
        ]
        batch = self.processor.process_batch(files, as_of=AS_OF)
        self.assertEqual(batch.results[0].decision, Decision.FLAGGED)
        self.assertEqual(batch.errors[0].file_name, "bad_config.json")
        self.assertEqual(batch.errors[0].error_type, "CONFIG_ERROR")

    def test_file_overrides_layer_on_processor_overrides(self):
        processor = ScreeningBatchProcessor(config_overrides={"decision": {"approvedMax": 0.5}})
        files = [as_file("layered.json", {
            "config_overrides": {"Decision": {"flaggedMax": 6}},
            "applications": [application()],
        })]
        batch = processor.process_batch(files, as_of=AS_OF)
        self.assertEqual(batch.results[0].decision, Decision.FLAGGED)

        decision = processor._build_file_config({"Decision": {"flaggedMax": 6}}).decision
        self.assertEqual((decision.approved_max, decision.flagged_max), (0.5, 6))

    def test_invalid_processor_overrides_raise(self):
        with self.assertRaises(ConfigValidationError):
            ScreeningBatchProcessor(config_overrides={"thresholds": {"nope": 1}})

    def test_cp1252_fallback(self):
        content = json.dumps(application(application_ref="REF-X")).encode("utf-8")
        content = content.replace(b"REF-X", b"REF-\x9c")
        batch = self.processor.process_batch([("legacy.json", content)], as_of=AS_OF)
        self.assertEqual(batch.stats.successful, 1)
        self.assertEqual(batch.results[0].application_ref, "REF-œ")

    def test_statistics(self):
        files = [
            as_file("approved.json", application()),
            as_file("denied.json", application(income=20000, credit_score=600, employment_status="unemployed")),
            as_file("review.json", application(criminal_background={
                "has_criminal_record": True,
                "records": [{"severity": "misdemeanor", "category": "other", "years_since": 1}],
            })),
        ]
        batch = self.processor.process_batch(files, as_of=AS_OF)
        stats = batch.stats
        self.assertEqual((stats.approved, stats.flagged, stats.denied), (1, 1, 1))
        self.assertEqual(stats.individual_review, 1)
        self.assertEqual(stats.min_score, 2)
        self.assertEqual(stats.max_score, 10)
        self.assertAlmostEqual(stats.average_score, (2 + 10 + 3.5) / 3)
        self.assertEqual(stats.success_rate, 100)
        self.assertGreaterEqual(stats.processing_time, 0)

    def test_empty_batch(self):
        batch = self.processor.process_batch([], as_of=AS_OF)
        self.assertEqual(batch.stats.min_score, 0)
        self.assertEqual(batch.stats.max_score, 0)
        self.assertEqual(batch.stats.success_rate, 0)

    def test_progress_callback(self):
        calls = []
        files = [as_file("a.json", application()), as_file("b.json", application())]
        self.processor.process_batch(files, progress_callback=lambda *args: calls.append(args), as_of=AS_OF)
        self.assertEqual([c[:2] for c in calls], [(1, 2), (2, 2)])

    def test_merge_results(self):
        first = self.processor.process_batch([as_file("a.json", application())], as_of=AS_OF)
        second = self.processor.process_batch(
            [as_file("b.json", application(credit_score=600, employment_status="part-time")),
             ("c.json", b"[")],
            as_of=AS_OF,
        )
        merged = BatchResult.merge_results(first, second)
        self.assertEqual(merged.stats.total_files, 3)
        self.assertEqual(merged.stats.successful, 2)
        self.assertEqual(merged.stats.approved, 1)
        self.assertEqual(merged.stats.flagged, 1)
        self.assertEqual(merged.stats.min_score, 2)
        self.assertEqual(merged.stats.max_score, 4)
        self.assertEqual(len(merged.results), 2)
        self.assertEqual(merged.error_summary, {"JSON_PARSE_ERROR": 1})

    def test_load_files_extracts_zip(self):
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as zf:
            zf.writestr("batch/one.json", json.dumps(application()))
            zf.writestr("batch/two.json", json.dumps(application()))
            zf.writestr("batch/readme.txt", "ignored")
        sources = [
            ("apps.zip", buffer.getvalue()),
            as_file("three.json", application()),
            ("notes.csv", b"a,b"),
        ]
        files = self.processor.load_files(sources)
        self.assertEqual(sorted(name for name, _ in files), ["one.json", "three.json", "two.json"])

    def test_dataframes(self):
        files = [as_file("a.json", application()), ("bad.json", b"{")]
        batch = self.processor.process_batch(files, as_of=AS_OF)

        results_df = self.processor.results_to_dataframe(batch.results)
        self.assertEqual(len(results_df), 1)
        self.assertEqual(results_df.iloc[0]["Decision"], "Approved")
        self.assertEqual(results_df.iloc[0]["affordability Points"], 1)
        self.assertIn("criminal_history Points", results_df.columns)

        errors_df = self.processor.errors_to_dataframe(batch.errors)
        self.assertEqual(list(errors_df["Error Type"]), ["JSON_PARSE_ERROR"])


if __name__ == "__main__":
    unittest.main()
