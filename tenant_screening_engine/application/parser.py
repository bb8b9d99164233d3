"""
Parse raw applicant payloads (decoded JSON) into a TenantApplication.

Every problem found is collected and reported together. Criminal records are
passed through loosely typed: malformed entries are the criminal evaluator's
to drop, not a reason to reject the application.
"""

import logging
import math
from datetime import date, datetime
from typing import Any, List, Mapping, Optional

from ..exceptions import ApplicationValidationError
from .models import (
    CriminalBackground,
    CriminalRecord,
    EmploymentStatus,
    EvictionFiling,
    EvictionOutcome,
    LandlordReference,
    PaymentHistory,
    ReferenceRating,
    RentalHistory,
    TenantApplication,
)

logger = logging.getLogger(__name__)

MIN_CREDIT_SCORE = 300
MAX_CREDIT_SCORE = 850


def _to_number(value: Any) -> Optional[float]:
    """Coerce numbers and numeric strings; anything else is None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    return value


def _to_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and len(value) >= 10:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def _parse_count(value: Any, name: str, errors: List[str]) -> int:
    number = _to_number(value)
    if number is None or number < 0 or number != int(number):
        errors.append(f"{name} must be a non-negative integer")
        return 0
    return int(number)


def _parse_rate(value: Any, name: str, errors: List[str]) -> Optional[float]:
    number = _to_number(value)
    if number is None or not 0 <= number <= 1:
        errors.append(f"{name} must be a number between 0 and 1")
        return None
    return float(number)


def _parse_eviction_filings(raw: Any, errors: List[str]) -> tuple:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        errors.append("rental_history.eviction_filings must be an array when provided")
        return ()

    allowed = ", ".join(outcome.value for outcome in EvictionOutcome)
    filings = []
    for idx, record in enumerate(raw):
        record = record if isinstance(record, Mapping) else {}
        outcome_raw = record.get("outcome")
        try:
            outcome = EvictionOutcome(str(outcome_raw).lower())
        except ValueError:
            errors.append(f"rental_history.eviction_filings[{idx}].outcome must be one of {allowed}")
            continue
        filed_at = _to_date(record.get("filed_at"))
        if filed_at is None:
            errors.append(f"rental_history.eviction_filings[{idx}].filed_at must be an ISO date string")
            continue
        filings.append(EvictionFiling(filed_at=filed_at, outcome=outcome))
    return tuple(filings)


def _parse_criminal_background(raw: Any) -> CriminalBackground:
    raw = raw if isinstance(raw, Mapping) else {}
    type_of_crime = raw.get("type_of_crime")

    records = []
    raw_records = raw.get("records")
    if isinstance(raw_records, list):
        for rec in raw_records:
            if not isinstance(rec, Mapping):
                logger.debug("Keeping non-object criminal record for normalization: %r", rec)
                records.append(CriminalRecord())
                continue
            description = rec.get("description")
            records.append(CriminalRecord(
                severity=rec.get("severity"),
                category=rec.get("category"),
                years_since=_to_number(rec.get("years_since")),
                description=description if isinstance(description, str) else None,
            ))

    return CriminalBackground(
        has_criminal_record=bool(raw.get("has_criminal_record")),
        type_of_crime=type_of_crime if isinstance(type_of_crime, str) else None,
        records=tuple(records),
    )


def parse_tenant_application(payload: Mapping[str, Any]) -> TenantApplication:
    """
    Validate a raw payload and build a TenantApplication.

    Args:
        payload: Decoded JSON object describing the applicant

    Returns:
        TenantApplication

    Raises:
        ApplicationValidationError: With every validation problem found
    """
    if not isinstance(payload, Mapping):
        raise ApplicationValidationError(["application payload must be an object"])

    errors: List[str] = []

    income = _to_number(payload.get("income"))
    monthly_rent = _to_number(payload.get("monthly_rent"))
    debt = _to_number(payload.get("debt"))
    credit_score = _to_number(payload.get("credit_score"))

    if income is None or income < 0:
        errors.append("income must be a non-negative number")
    if monthly_rent is None or monthly_rent < 0:
        errors.append("monthly_rent must be a non-negative number")
    if debt is None or debt < 0:
        errors.append("debt must be a non-negative number")
    if credit_score is None or not MIN_CREDIT_SCORE <= credit_score <= MAX_CREDIT_SCORE:
        errors.append(
            f"credit_score must be a number between {MIN_CREDIT_SCORE} and {MAX_CREDIT_SCORE}"
        )

    rental_raw = payload.get("rental_history")
    if rental_raw is None:
        rental_raw = {}
    if not isinstance(rental_raw, Mapping):
        errors.append("rental_history must be an object")
        rental_raw = {}
    rental_history = RentalHistory(
        evictions=_parse_count(rental_raw.get("evictions", 0), "rental_history.evictions", errors),
        late_payments=_parse_count(
            rental_raw.get("late_payments", 0), "rental_history.late_payments", errors
        ),
        eviction_filings=_parse_eviction_filings(rental_raw.get("eviction_filings"), errors),
    )

    criminal_background = _parse_criminal_background(payload.get("criminal_background"))

    employment_status = None
    try:
        employment_status = EmploymentStatus(payload.get("employment_status"))
    except ValueError:
        allowed = ", ".join(status.value for status in EmploymentStatus)
        errors.append(f"employment_status must be one of: {allowed}")

    utility_payment_score = None
    if payload.get("utility_payment_score") is not None:
        utility_payment_score = _parse_rate(
            payload.get("utility_payment_score"), "utility_payment_score", errors
        )

    landlord_reference = None
    reference_raw = payload.get("landlord_reference")
    if reference_raw is not None:
        if not isinstance(reference_raw, Mapping):
            errors.append("landlord_reference must be an object")
        else:
            try:
                rating = ReferenceRating(str(reference_raw.get("rating")).lower())
                landlord_reference = LandlordReference(
                    rating=rating,
                    verified=bool(reference_raw.get("verified", False)),
                )
            except ValueError:
                allowed = ", ".join(rating.value for rating in ReferenceRating)
                errors.append(f"landlord_reference.rating must be one of: {allowed}")

    payment_history = None
    history_raw = payload.get("payment_history")
    if history_raw is not None:
        if not isinstance(history_raw, Mapping):
            errors.append("payment_history must be an object")
        else:
            rate = _parse_rate(
                history_raw.get("on_time_rate"), "payment_history.on_time_rate", errors
            )
            if rate is not None:
                payment_history = PaymentHistory(on_time_rate=rate)

    if errors:
        raise ApplicationValidationError(errors)

    return TenantApplication(
        income=float(income),
        monthly_rent=float(monthly_rent),
        debt=float(debt),
        credit_score=float(credit_score),
        employment_status=employment_status,
        rental_history=rental_history,
        criminal_background=criminal_background,
        utility_payment_score=utility_payment_score,
        landlord_reference=landlord_reference,
        payment_history=payment_history,
        application_ref=str(payload.get("application_ref") or ""),
    )
