"""
Configuration module for the Tenant Screening Engine.

This module contains the default screening configuration and the typed,
validated configuration model built from it.
"""

from .screening_config import SCREENING_CONFIG
from .models import (
    AffordabilityScoring,
    AffordabilityThresholds,
    AlternativeDataScoring,
    AlternativeDataThresholds,
    CreditScoring,
    CreditThresholds,
    CriminalScoring,
    CriminalThresholds,
    DecisionCutoffs,
    EmploymentScoring,
    EvictionOutcomePoints,
    RentalScoring,
    RentalThresholds,
    Scoring,
    ScreeningConfig,
    Thresholds,
    UtilityThresholds,
    build_screening_config,
    build_strict_affordability_config,
    default_screening_config,
    merge_config_overrides,
    validate_screening_config,
)

__all__ = [
    "SCREENING_CONFIG",
    "AffordabilityScoring",
    "AffordabilityThresholds",
    "AlternativeDataScoring",
    "AlternativeDataThresholds",
    "CreditScoring",
    "CreditThresholds",
    "CriminalScoring",
    "CriminalThresholds",
    "DecisionCutoffs",
    "EmploymentScoring",
    "EvictionOutcomePoints",
    "RentalScoring",
    "RentalThresholds",
    "Scoring",
    "ScreeningConfig",
    "Thresholds",
    "UtilityThresholds",
    "build_screening_config",
    "build_strict_affordability_config",
    "default_screening_config",
    "merge_config_overrides",
    "validate_screening_config",
]
