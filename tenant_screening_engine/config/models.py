"""
Typed, immutable screening configuration.

A ScreeningConfig is built by deep-merging a partial override document onto
SCREENING_CONFIG. Overrides may use camelCase keys (as sent by JSON clients)
or snake_case keys. Only finite numeric leaves override defaults; unknown
fields and invalid values are rejected rather than ignored. The merged
result is checked against the config invariants on construction, so an
invalid ScreeningConfig can never exist.
"""

import logging
import math
import re
from dataclasses import asdict, dataclass, fields, is_dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Union, get_args, get_origin

from ..exceptions import ConfigValidationError
from .screening_config import SCREENING_CONFIG

logger = logging.getLogger(__name__)

# Sections that may be explicitly disabled by passing null
NULLABLE_SECTIONS = {"scoring.rental.eviction_outcome_points"}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass(frozen=True)
class AffordabilityThresholds:
    rent_rule: float
    partial_credit_ratio: float
    dti_mitigation: float
    dti_exception: float


@dataclass(frozen=True)
class CreditThresholds:
    excellent_min: float
    good_min: float


@dataclass(frozen=True)
class UtilityThresholds:
    strong: float
    moderate: float
    weak: float


@dataclass(frozen=True)
class AlternativeDataThresholds:
    utility: UtilityThresholds


@dataclass(frozen=True)
class RentalThresholds:
    eviction_lookback_years: float


@dataclass(frozen=True)
class CriminalThresholds:
    violent_felony_lookback_years: float
    felony_lookback_years: float
    misdemeanor_lookback_years: float


@dataclass(frozen=True)
class Thresholds:
    dti_high: float
    affordability: AffordabilityThresholds
    credit: CreditThresholds
    alternative_data: AlternativeDataThresholds
    rental: RentalThresholds
    criminal: CriminalThresholds


@dataclass(frozen=True)
class AffordabilityScoring:
    meets_rule: float
    partial_credit: float
    dti_exception: float
    fail: float


@dataclass(frozen=True)
class CreditScoring:
    excellent: float
    good: float
    poor: float


@dataclass(frozen=True)
class EvictionOutcomePoints:
    filing: float
    dismissed: float
    settled: float
    judgment: float


@dataclass(frozen=True)
class RentalScoring:
    eviction_points: float
    eviction_outcome_points: Optional[EvictionOutcomePoints]
    eviction_time_decay_floor: float
    late_payments_threshold: float
    late_payments_points: float


@dataclass(frozen=True)
class CriminalScoring:
    clean_record_points: float
    stale_record_points: float
    recent_misdemeanor_points: float
    recent_felony_points: float
    recent_violent_felony_points: float


@dataclass(frozen=True)
class EmploymentScoring:
    full_time: float
    part_time: float
    unemployed: float


@dataclass(frozen=True)
class AlternativeDataScoring:
    utility_strong_offset: float
    utility_moderate_offset: float
    utility_weak_points: float
    payment_missing_points: float
    reference_strong_offset: float
    reference_positive_offset: float
    reference_neutral_points: float
    reference_concern_points: float
    unverified_reference_points: float
    reference_missing_points: float


@dataclass(frozen=True)
class Scoring:
    dti_high: float
    affordability: AffordabilityScoring
    credit: CreditScoring
    rental: RentalScoring
    criminal: CriminalScoring
    employment: EmploymentScoring
    alternative_data: AlternativeDataScoring


@dataclass(frozen=True)
class DecisionCutoffs:
    approved_max: float
    flagged_max: float


@dataclass(frozen=True)
class ScreeningConfig:
    """Complete, validated screening configuration."""
    thresholds: Thresholds
    scoring: Scoring
    decision: DecisionCutoffs

    def __post_init__(self):
        errors = validate_screening_config(self)
        if errors:
            raise ConfigValidationError(errors)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScreeningConfig":
        """Build from a complete (already merged) configuration document."""
        return _section_from_dict(cls, data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _is_finite_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _normalise_key(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", str(key)).lower()


def _section_type(field_type: Any) -> Optional[type]:
    """Return the dataclass type for a nested section field, if any."""
    if get_origin(field_type) is Union:
        for arg in get_args(field_type):
            if is_dataclass(arg):
                return arg
        return None
    return field_type if is_dataclass(field_type) else None


def _section_from_dict(cls, data: Mapping[str, Any]):
    kwargs = {}
    for f in fields(cls):
        value = data[f.name]
        nested = _section_type(f.type)
        if nested is not None and value is not None:
            value = _section_from_dict(nested, value)
        kwargs[f.name] = value
    return cls(**kwargs)


def _plain_copy(section: Mapping[str, Any]) -> Dict[str, Any]:
    """Deep copy a (possibly read-only) config document into plain dicts."""
    return {
        key: _plain_copy(value) if isinstance(value, Mapping) else value
        for key, value in section.items()
    }


def _merge_overrides(
    base: Mapping[str, Any],
    override: Any,
    path: str,
    errors: List[str],
    merged: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Merge an override document onto merged (a copy of base by default),
    collecting errors. Sections are merged field by field, so a section
    spelled twice (camelCase and snake_case) keeps both sets of overrides.
    """
    if merged is None:
        merged = _plain_copy(base)
    if not isinstance(override, Mapping):
        errors.append(f"{path or 'config'} must be an object")
        return merged

    seen_leaves = set()
    for raw_key, value in override.items():
        key = _normalise_key(raw_key)
        dotted = f"{path}.{key}" if path else key

        if key not in base:
            errors.append(f"unknown config field: {dotted}")
            continue

        default = base[key]
        if isinstance(default, Mapping):
            if value is None and dotted in NULLABLE_SECTIONS:
                merged[key] = None
            else:
                current = merged[key] if merged[key] is not None else _plain_copy(default)
                merged[key] = _merge_overrides(default, value, dotted, errors, current)
        elif key in seen_leaves:
            errors.append(f"duplicate config field: {dotted}")
        elif _is_finite_number(value):
            merged[key] = value
            seen_leaves.add(key)
        else:
            errors.append(f"{dotted} must be a finite number")

    return merged


def _collect_leaves(data: Mapping[str, Any], path: str = ""):
    for key, value in data.items():
        dotted = f"{path}.{key}" if path else key
        if isinstance(value, Mapping):
            yield from _collect_leaves(value, dotted)
        else:
            yield dotted, value


def validate_screening_config(config: ScreeningConfig) -> List[str]:
    """
    Check a configuration against its invariants.

    Returns:
        List of human-readable violations (empty when valid)
    """
    errors = []
    data = asdict(config)

    for dotted, value in _collect_leaves(data):
        if value is None and dotted in NULLABLE_SECTIONS:
            continue
        if not _is_finite_number(value):
            errors.append(f"{dotted} must be a finite number")
    if errors:
        return errors

    for dotted, value in _collect_leaves(data["thresholds"], "thresholds"):
        if value < 0:
            errors.append(f"{dotted} must be >= 0")

    t = config.thresholds
    s = config.scoring

    if not t.credit.good_min <= t.credit.excellent_min:
        errors.append("thresholds.credit.good_min must be <= thresholds.credit.excellent_min")
    if not config.decision.approved_max <= config.decision.flagged_max:
        errors.append("decision.approved_max must be <= decision.flagged_max")
    if not t.affordability.partial_credit_ratio <= t.affordability.rent_rule:
        errors.append(
            "thresholds.affordability.partial_credit_ratio must be <= thresholds.affordability.rent_rule"
        )
    if not t.affordability.dti_exception <= t.affordability.dti_mitigation:
        errors.append(
            "thresholds.affordability.dti_exception must be <= thresholds.affordability.dti_mitigation"
        )

    utility = t.alternative_data.utility
    if not utility.weak <= utility.moderate <= utility.strong <= 1:
        errors.append(
            "thresholds.alternative_data.utility must satisfy weak <= moderate <= strong <= 1"
        )

    alt = s.alternative_data
    if not alt.utility_strong_offset <= alt.utility_moderate_offset <= 0 <= alt.utility_weak_points:
        errors.append(
            "scoring.alternative_data must satisfy utility_strong_offset <= "
            "utility_moderate_offset <= 0 <= utility_weak_points"
        )

    if not 0 <= s.rental.eviction_time_decay_floor <= 1:
        errors.append("scoring.rental.eviction_time_decay_floor must be between 0 and 1")

    return errors


def build_screening_config(overrides: Optional[Mapping[str, Any]] = None) -> ScreeningConfig:
    """
    Build a validated configuration from the defaults plus optional overrides.

    Args:
        overrides: Deep-partial configuration document (camelCase or snake_case keys)

    Returns:
        Immutable ScreeningConfig

    Raises:
        ConfigValidationError: If an override is unknown/invalid or the merged
            configuration violates an invariant
    """
    return ScreeningConfig.from_dict(merge_config_overrides(overrides))


def merge_config_overrides(*documents: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Layer override documents onto the defaults, later documents winning
    field by field. None documents are skipped.

    Returns:
        Complete configuration document with snake_case keys

    Raises:
        ConfigValidationError: If any document has unknown or invalid fields
    """
    errors: List[str] = []
    merged = _plain_copy(SCREENING_CONFIG)
    for document in documents:
        if document is not None:
            merged = _merge_overrides(SCREENING_CONFIG, document, "", errors, merged)
    if errors:
        logger.debug("Rejected config overrides: %s", errors)
        raise ConfigValidationError(errors)
    return merged


def default_screening_config() -> ScreeningConfig:
    """Return the built-in default configuration."""
    return build_screening_config()


def build_strict_affordability_config(base: Optional[ScreeningConfig] = None) -> ScreeningConfig:
    """
    Collapse tiered affordability into a strict income-multiple screen.

    Partial credit and the DTI exception are removed: an applicant either
    meets the rent rule or receives enough points to be denied on
    affordability alone.
    """
    base = base or default_screening_config()
    thresholds = base.thresholds.affordability
    scoring = base.scoring.affordability

    strict_thresholds = replace(
        thresholds,
        partial_credit_ratio=thresholds.rent_rule,
        dti_mitigation=0,
        dti_exception=0,
    )
    # Every tier below the rent rule scores the same denial-level points
    fail_points = max(scoring.fail, base.decision.flagged_max + 1)
    strict_scoring = replace(
        scoring,
        partial_credit=fail_points,
        dti_exception=fail_points,
        fail=fail_points,
    )

    return replace(
        base,
        thresholds=replace(base.thresholds, affordability=strict_thresholds),
        scoring=replace(base.scoring, affordability=strict_scoring),
    )
