"""
Tenant application input model.

All entities are immutable and created fresh per evaluation.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Tuple


class EmploymentStatus(Enum):
    """Applicant employment status."""
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    UNEMPLOYED = "unemployed"


class EvictionOutcome(Enum):
    """Outcome of an eviction court filing."""
    FILED = "filed"
    DISMISSED = "dismissed"
    SETTLED = "settled"
    JUDGMENT = "judgment"


class ReferenceRating(Enum):
    """Prior landlord reference rating."""
    STRONG = "strong"
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    CONCERN = "concern"


@dataclass(frozen=True)
class EvictionFiling:
    """A single eviction filing with its outcome."""
    filed_at: date
    outcome: EvictionOutcome


@dataclass(frozen=True)
class RentalHistory:
    """Rental history summary plus optional detailed filings."""
    evictions: int = 0
    late_payments: int = 0
    eviction_filings: Tuple[EvictionFiling, ...] = ()


@dataclass(frozen=True)
class CriminalRecord:
    """
    A criminal record as reported.

    Fields are kept as supplied; the criminal evaluator normalizes them and
    drops entries with an unknown severity/category or a negative age.
    """
    severity: Optional[str] = None  # felony | misdemeanor
    category: Optional[str] = None  # violent | property | drug | other
    years_since: Optional[float] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class CriminalBackground:
    """Criminal background check result."""
    has_criminal_record: bool = False
    type_of_crime: Optional[str] = None  # Free-text summary when no structured records
    records: Tuple[CriminalRecord, ...] = ()


@dataclass(frozen=True)
class LandlordReference:
    """Reference from a prior landlord."""
    rating: ReferenceRating
    verified: bool = False


@dataclass(frozen=True)
class PaymentHistory:
    """Supplemental payment history (e.g. rent reporting services)."""
    on_time_rate: float


@dataclass(frozen=True)
class TenantApplication:
    """Applicant facts for a single evaluation."""
    income: float  # Annual
    monthly_rent: float
    debt: float
    credit_score: float  # 300-850
    employment_status: EmploymentStatus
    rental_history: RentalHistory = field(default_factory=RentalHistory)
    criminal_background: CriminalBackground = field(default_factory=CriminalBackground)

    # Optional alternative signals
    utility_payment_score: Optional[float] = None  # 0-1
    landlord_reference: Optional[LandlordReference] = None
    payment_history: Optional[PaymentHistory] = None

    application_ref: str = ""
