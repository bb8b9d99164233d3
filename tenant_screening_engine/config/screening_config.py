"""
Screening configuration for Tenant Risk Scoring.
Contains classification thresholds, per-factor point weights, and decision cutoffs.
The document is read-only; build a ScreeningConfig to change values.
"""

from types import MappingProxyType

# Screening Configuration
# NOTE: Points are risk points - higher totals mean higher risk.
# Negative values are offsets that reduce risk (alternative data only).
SCREENING_CONFIG = {
    # Cutoffs used to classify an applicant fact into a tier
    "thresholds": {
        "dti_high": 0.4,  # DTI above this adds scoring.dti_high
        "affordability": {
            "rent_rule": 3,  # Monthly income / rent needed for full credit
            "partial_credit_ratio": 2.5,  # Ratio where partial credit can apply
            "dti_mitigation": 0.36,  # Max DTI to earn partial credit
            "dti_exception": 0.3,  # Max DTI for alternative affordability
        },
        "credit": {
            "excellent_min": 750,  # Inclusive
            "good_min": 665,  # Inclusive
        },
        "alternative_data": {
            "utility": {
                "strong": 0.9,
                "moderate": 0.8,
                "weak": 0.65,  # Below this adds utility_weak_points
            },
        },
        "rental": {
            "eviction_lookback_years": 5,  # Filings this old are fully excluded
        },
        "criminal": {
            "violent_felony_lookback_years": 10,
            "felony_lookback_years": 7,
            "misdemeanor_lookback_years": 3,
        },
    },

    # Points assigned per tier/category
    "scoring": {
        "dti_high": 2,
        "affordability": {
            "meets_rule": 0,
            "partial_credit": 1,
            "dti_exception": 2,
            "fail": 4,
        },
        "credit": {
            "excellent": 0,
            "good": 1,
            "poor": 2,
        },
        "rental": {
            "eviction_points": 3,  # Flat penalty per eviction when no filings supplied
            "eviction_outcome_points": {
                "filing": 1,  # Only the filing is known
                "dismissed": 0.5,
                "settled": 2,
                "judgment": 3.5,
            },
            "eviction_time_decay_floor": 0.25,  # Minimum multiplier inside the lookback
            "late_payments_threshold": 3,  # More than this adds late_payments_points
            "late_payments_points": 2,
        },
        "criminal": {
            "clean_record_points": 0,
            "stale_record_points": 0.5,
            "recent_misdemeanor_points": 1.5,
            "recent_felony_points": 3,
            "recent_violent_felony_points": 4,
        },
        "employment": {
            "full_time": 0,
            "part_time": 1,
            "unemployed": 2,
        },
        "alternative_data": {
            "utility_strong_offset": -1.25,
            "utility_moderate_offset": -0.75,
            "utility_weak_points": 0.75,
            "payment_missing_points": 0,  # Never penalise missing optional data by default
            "reference_strong_offset": -1.25,
            "reference_positive_offset": -0.5,
            "reference_neutral_points": 0,
            "reference_concern_points": 1.25,
            "unverified_reference_points": 0.5,  # Added when a reference is not verified
            "reference_missing_points": 0,
        },
    },

    # Inclusive cutoffs on the total risk score
    "decision": {
        "approved_max": 2.75,  # <= approved_max => Approved
        "flagged_max": 5.5,  # <= flagged_max => Flagged for Review, else Denied
    },
}


def _freeze(section):
    return MappingProxyType({
        key: _freeze(value) if isinstance(value, dict) else value
        for key, value in section.items()
    })


SCREENING_CONFIG = _freeze(SCREENING_CONFIG)
