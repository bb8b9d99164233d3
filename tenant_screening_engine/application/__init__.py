"""
Application Module for the Tenant Screening Engine.

Contains the immutable applicant input model and the payload parser.
"""

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
from .parser import parse_tenant_application

__all__ = [
    "CriminalBackground",
    "CriminalRecord",
    "EmploymentStatus",
    "EvictionFiling",
    "EvictionOutcome",
    "LandlordReference",
    "PaymentHistory",
    "ReferenceRating",
    "RentalHistory",
    "TenantApplication",
    "parse_tenant_application",
]
