"""
Tenant Screening Batch Processor for screening multiple rental applications.
Handles JSON files and ZIP archives with comprehensive error handling.
"""

import json
import logging
import zipfile
import io
import os
from typing import Any, Dict, List, Optional, Tuple, Callable, Union
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
import traceback

from tenant_screening_engine.application.parser import parse_tenant_application
from tenant_screening_engine.config.models import (
    ScreeningConfig,
    build_screening_config,
    merge_config_overrides,
)
from tenant_screening_engine.exceptions import (
    ApplicationValidationError,
    ConfigValidationError,
    UnknownJurisdictionError,
)
from tenant_screening_engine.scoring.scoring_engine import Decision, ScreeningEngine, ScreeningResult

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


class InvalidJsonStructureError(Exception):
    """Raised when JSON structure cannot be normalized to a list of applications."""
    pass


@dataclass
class ProcessingError:
    """Details of a processing error."""
    file_name: str
    error_type: str
    error_message: str
    application_ref: str = ""
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


@dataclass
class ApplicationEntry:
    """One application payload extracted from a file."""
    application_ref: str
    payload: Dict[str, Any]
    jurisdiction: Optional[str] = None


@dataclass
class BatchStats:
    """Statistics for batch processing."""
    total_files: int = 0
    total_applications: int = 0
    processed: int = 0
    successful: int = 0
    failed: int = 0

    # Decision counts
    approved: int = 0
    flagged: int = 0
    denied: int = 0
    individual_review: int = 0

    # Score statistics
    total_score: float = 0.0
    min_score: float = float("inf")
    max_score: float = float("-inf")

    # Timing
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def average_score(self) -> float:
        """Calculate average risk score."""
        if self.successful == 0:
            return 0.0
        return self.total_score / self.successful

    @property
    def processing_time(self) -> float:
        """Calculate total processing time in seconds."""
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return 0.0

    @property
    def success_rate(self) -> float:
        """Calculate success rate as percentage of processed items."""
        if self.processed == 0:
            return 0.0
        return (self.successful / self.processed) * 100


@dataclass
class BatchResult:
    """Complete result of batch processing."""
    stats: BatchStats
    results: List[ScreeningResult]
    errors: List[ProcessingError]
    error_summary: Dict[str, int] = field(default_factory=dict)

    @staticmethod
    def merge_results(result1: 'BatchResult', result2: 'BatchResult') -> 'BatchResult':
        """
        Merge two BatchResult objects into a single combined result.

        This is used for cumulative batch processing where results from
        multiple uploads need to be combined.

        Args:
            result1: First batch result (typically the existing cumulative result)
            result2: Second batch result (typically the new batch to add)

        Returns:
            New BatchResult with merged data
        """
        s1, s2 = result1.stats, result2.stats
        merged_stats = BatchStats()

        # Sum all count fields
        merged_stats.total_files = s1.total_files + s2.total_files
        merged_stats.total_applications = s1.total_applications + s2.total_applications
        merged_stats.processed = s1.processed + s2.processed
        merged_stats.successful = s1.successful + s2.successful
        merged_stats.failed = s1.failed + s2.failed
        merged_stats.approved = s1.approved + s2.approved
        merged_stats.flagged = s1.flagged + s2.flagged
        merged_stats.denied = s1.denied + s2.denied
        merged_stats.individual_review = s1.individual_review + s2.individual_review
        merged_stats.total_score = s1.total_score + s2.total_score

        # Only batches with successful applications carry meaningful min/max
        scored = [s for s in (s1, s2) if s.successful > 0]
        if scored:
            merged_stats.min_score = min(s.min_score for s in scored)
            merged_stats.max_score = max(s.max_score for s in scored)
        else:
            merged_stats.min_score = 0.0
            merged_stats.max_score = 0.0

        # Use earliest start time and latest end time
        if s1.start_time and s2.start_time:
            merged_stats.start_time = min(s1.start_time, s2.start_time)
        else:
            merged_stats.start_time = s1.start_time or s2.start_time

        if s1.end_time and s2.end_time:
            merged_stats.end_time = max(s1.end_time, s2.end_time)
        else:
            merged_stats.end_time = s1.end_time or s2.end_time

        merged_error_summary = dict(result1.error_summary)
        for error_type, count in result2.error_summary.items():
            merged_error_summary[error_type] = merged_error_summary.get(error_type, 0) + count

        return BatchResult(
            stats=merged_stats,
            results=result1.results + result2.results,
            errors=result1.errors + result2.errors,
            error_summary=merged_error_summary
        )


class ScreeningBatchProcessor:
    """Batch processor for tenant screening applications."""

    def __init__(
        self,
        config_overrides: Optional[Dict[str, Any]] = None,
        default_jurisdiction: Optional[str] = None
    ):
        """
        Initialize the batch processor.

        Args:
            config_overrides: Partial screening configuration applied to every file
                              that does not carry its own overrides
            default_jurisdiction: Jurisdiction key used when neither the application
                                  nor its file names one

        Raises:
            ConfigValidationError: If config_overrides are invalid
        """
        self.config_overrides = config_overrides
        self.default_jurisdiction = default_jurisdiction
        self.config = build_screening_config(config_overrides)
        self.engine = ScreeningEngine(config=self.config)

        logger.info(
            f"Initialized batch processor: overrides={'custom' if config_overrides else 'defaults'}, "
            f"jurisdiction={default_jurisdiction or 'none'}"
        )

    def process_batch(
        self,
        files: List[Tuple[str, bytes]],
        progress_callback: Optional[Callable[[int, int, str], None]] = None,
        as_of: Optional[date] = None
    ) -> BatchResult:
        """
        Process a batch of application files.

        Args:
            files: List of (filename, content) tuples
            progress_callback: Optional callback(current, total, message)
            as_of: Evaluation date applied to every application (default today)

        Returns:
            BatchResult with all processing results
        """
        as_of = as_of or date.today()
        stats = BatchStats(
            total_files=len(files),
            start_time=datetime.now()
        )

        results = []
        errors = []
        error_types = {}

        def record_error(file_name: str, error_type: str, message: str, application_ref: str = ""):
            errors.append(ProcessingError(
                file_name=file_name,
                error_type=error_type,
                error_message=message,
                application_ref=application_ref
            ))
            stats.failed += 1
            stats.processed += 1
            error_types[error_type] = error_types.get(error_type, 0) + 1

        logger.info(f"Starting batch processing of {len(files)} files")

        for idx, (filename, content) in enumerate(files):
            if progress_callback:
                progress_callback(idx + 1, len(files), f"Processing: {filename}")

            logger.debug(f"Processing file {idx + 1}/{len(files)}: {filename}")

            try:
                entries, engine = self._load_file(filename, content)
            except json.JSONDecodeError as e:
                record_error(filename, "JSON_PARSE_ERROR", f"Invalid JSON: {str(e)}")
                logger.error(f"JSON parse error in {filename}: {e}")
                continue
            except InvalidJsonStructureError as e:
                record_error(filename, "INVALID_JSON_STRUCTURE", str(e))
                logger.error(f"Invalid JSON structure in {filename}: {e}")
                continue
            except ConfigValidationError as e:
                record_error(filename, "CONFIG_ERROR", e.message)
                logger.error(f"Invalid config overrides in {filename}: {e}")
                continue

            stats.total_applications += len(entries)

            for entry in entries:
                try:
                    result = self._screen_entry(entry, engine, as_of)
                except ApplicationValidationError as e:
                    record_error(filename, "VALIDATION_ERROR", "; ".join(e.errors), entry.application_ref)
                    logger.error(f"Validation error in {filename} ({entry.application_ref}): {e}")
                    continue
                except UnknownJurisdictionError as e:
                    record_error(filename, "UNKNOWN_JURISDICTION", e.message, entry.application_ref)
                    logger.error(f"Unknown jurisdiction in {filename} ({entry.application_ref}): {e}")
                    continue
                except Exception as e:
                    record_error(
                        filename, "PROCESSING_ERROR", f"{type(e).__name__}: {str(e)}", entry.application_ref
                    )
                    logger.error(f"Processing error in {filename}: {traceback.format_exc()}")
                    continue

                results.append(result)
                stats.processed += 1
                stats.successful += 1

                # Update score statistics
                stats.total_score += result.risk_score
                stats.min_score = min(stats.min_score, result.risk_score)
                stats.max_score = max(stats.max_score, result.risk_score)

                # Update decision counts
                if result.decision == Decision.APPROVED:
                    stats.approved += 1
                elif result.decision == Decision.FLAGGED:
                    stats.flagged += 1
                elif result.decision == Decision.DENIED:
                    stats.denied += 1

                if result.requires_individual_review:
                    stats.individual_review += 1

        stats.end_time = datetime.now()

        # Fix score range if nothing was screened
        if stats.successful == 0:
            stats.min_score = 0.0
            stats.max_score = 0.0

        logger.info(
            f"Batch processing complete: {stats.successful}/{stats.processed} successful, "
            f"avg score: {stats.average_score:.2f}, time: {stats.processing_time:.1f}s"
        )

        return BatchResult(
            stats=stats,
            results=results,
            errors=errors,
            error_summary=error_types
        )

    def _load_file(self, filename: str, content: bytes) -> Tuple[List[ApplicationEntry], ScreeningEngine]:
        """Decode a file into application entries and the engine that screens them."""
        # Parse JSON with fallback encoding handling
        try:
            data = json.loads(content.decode("utf-8"))
        except UnicodeDecodeError:
            # Fallback to cp1252 for Windows-encoded characters
            try:
                data = json.loads(content.decode("cp1252"))
            except UnicodeDecodeError:
                # Final fallback to latin-1 which accepts all byte values
                data = json.loads(content.decode("latin-1"))

        engine = self.engine
        if isinstance(data, dict) and data.get("config_overrides") is not None:
            engine = ScreeningEngine(config=self._build_file_config(data["config_overrides"]))
            logger.info(f"{filename}: Using file-level config overrides")

        return self._normalize_json_structure(data, filename), engine

    def _build_file_config(self, overrides: Any) -> ScreeningConfig:
        """File-level overrides are layered on top of the processor's overrides."""
        if not isinstance(overrides, dict):
            raise ConfigValidationError(["config_overrides must be an object"])
        return ScreeningConfig.from_dict(merge_config_overrides(self.config_overrides, overrides))

    def _screen_entry(self, entry: ApplicationEntry, engine: ScreeningEngine, as_of: date) -> ScreeningResult:
        """Screen a single application entry."""
        payload = dict(entry.payload)
        payload["application_ref"] = entry.application_ref
        application = parse_tenant_application(payload)
        jurisdiction = entry.jurisdiction or self.default_jurisdiction
        return engine.evaluate(application, jurisdiction=jurisdiction, as_of=as_of)

    def _normalize_json_structure(self, data, filename: str) -> List[ApplicationEntry]:
        """
        Normalize the supported JSON layouts to a list of application entries.

        Handles:
        - A single application object
        - Root-level list of application objects
        - Dictionary with an 'applications' list (optionally with a file-level
          'jurisdiction' and 'config_overrides')

        Args:
            data: Parsed JSON data (dict or list)
            filename: Filename used for references and logging

        Returns:
            List of ApplicationEntry

        Raises:
            InvalidJsonStructureError: If structure cannot be normalized
        """
        stem = Path(filename).stem
        file_jurisdiction = None

        if isinstance(data, dict) and "applications" in data:
            items = data["applications"]
            file_jurisdiction = data.get("jurisdiction")
            if not isinstance(items, list):
                raise InvalidJsonStructureError(
                    f"'applications' in {filename} must be an array, got {type(items).__name__}"
                )
            logger.debug(f"{filename}: Wrapped format - found {len(items)} applications")
        elif isinstance(data, dict):
            items = [data]
        elif isinstance(data, list):
            items = data
            logger.debug(f"{filename}: Root-level array - found {len(items)} applications")
        else:
            raise InvalidJsonStructureError(
                f"Unexpected JSON root type in {filename}: {type(data).__name__}. "
                f"Expected dict or list."
            )

        if not items:
            raise InvalidJsonStructureError(f"No applications found in {filename}")

        entries = []
        for idx, item in enumerate(items):
            if not isinstance(item, dict):
                raise InvalidJsonStructureError(
                    f"Application {idx} in {filename} is a {type(item).__name__}, expected an object"
                )
            ref = item.get("application_ref")
            if not ref:
                ref = stem if len(items) == 1 else f"{stem}_{idx + 1}"
            entries.append(ApplicationEntry(
                application_ref=str(ref),
                payload=item,
                jurisdiction=item.get("jurisdiction") or file_jurisdiction
            ))

        return entries

    def load_files(self, sources: List[Union[str, Path, Tuple[str, bytes]]]) -> List[Tuple[str, bytes]]:
        """
        Load application files from paths or (filename, content) pairs.
        Handles both JSON files and ZIP archives.

        Args:
            sources: File paths, or (filename, content) tuples from uploads

        Returns:
            List of (filename, content) tuples
        """
        all_files = []

        for source in sources:
            if isinstance(source, (str, Path)):
                path = Path(source)
                filename, content = path.name, path.read_bytes()
            else:
                filename, content = source

            if filename.lower().endswith(".zip"):
                logger.info(f"Extracting ZIP archive: {filename}")
                zip_files = self._extract_zip(content)
                all_files.extend(zip_files)
                logger.info(f"Extracted {len(zip_files)} files from {filename}")

            elif filename.lower().endswith(".json"):
                all_files.append((filename, content))

            else:
                logger.warning(f"Skipping unsupported file: {filename}")

        logger.info(f"Total files loaded: {len(all_files)}")
        return all_files

    def _extract_zip(self, content: bytes) -> List[Tuple[str, bytes]]:
        """Extract JSON files from a ZIP archive."""
        files = []

        with zipfile.ZipFile(io.BytesIO(content), "r") as zf:
            for name in zf.namelist():
                # Skip directories and non-JSON files
                if name.endswith("/"):
                    continue
                if not name.lower().endswith(".json"):
                    continue

                # Use just the filename without path
                filename = os.path.basename(name)
                files.append((filename, zf.read(name)))

        return files

    def results_to_dataframe(self, results: List[ScreeningResult]):
        """
        Convert screening results to a pandas DataFrame.

        One row per application, with a points column per risk factor.

        Args:
            results: List of ScreeningResult objects

        Returns:
            pandas DataFrame
        """
        import pandas as pd

        rows = []
        for result in results:
            row = {
                "Application Ref": result.application_ref,
                "Decision": result.decision.value,
                "Risk Score": result.risk_score,
                "Jurisdiction": result.compliance.policy_id if result.compliance else "",
                "Individual Review": result.requires_individual_review,
                "Compliance Adjustments": (
                    "; ".join(a.description for a in result.compliance.adjustments)
                    if result.compliance else ""
                ),
                "Flags": "; ".join(result.flags) if result.flags else "",
            }

            for factor in result.breakdown:
                row[f"{factor.factor} Points"] = factor.points

            rows.append(row)

        return pd.DataFrame(rows)

    def errors_to_dataframe(self, errors: List[ProcessingError]):
        """
        Convert processing errors to a pandas DataFrame.

        Args:
            errors: List of ProcessingError objects

        Returns:
            pandas DataFrame
        """
        import pandas as pd

        rows = []
        for error in errors:
            row = {
                "File Name": error.file_name,
                "Application Ref": error.application_ref,
                "Error Type": error.error_type,
                "Error Message": error.error_message,
                "Timestamp": error.timestamp,
            }
            rows.append(row)

        return pd.DataFrame(rows)
