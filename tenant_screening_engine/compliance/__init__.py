"""
Compliance Module for the Tenant Screening Engine.

Contains the jurisdiction policy table and the overlay that derives a
jurisdiction-compliant screening configuration.
"""

from .jurisdictions import (
    POST_OFFER,
    JURISDICTION_POLICIES,
    ComplianceAdjustment,
    ComplianceSummary,
    CreditRestriction,
    CriminalRestriction,
    IncomeRestriction,
    JurisdictionPolicy,
    JurisdictionRestrictions,
    PolicyApplication,
    RegulationReference,
    apply_jurisdiction_policy,
    get_jurisdiction_policy,
    list_jurisdiction_policies,
    resolve_policy,
)

__all__ = [
    "POST_OFFER",
    "JURISDICTION_POLICIES",
    "ComplianceAdjustment",
    "ComplianceSummary",
    "CreditRestriction",
    "CriminalRestriction",
    "IncomeRestriction",
    "JurisdictionPolicy",
    "JurisdictionRestrictions",
    "PolicyApplication",
    "RegulationReference",
    "apply_jurisdiction_policy",
    "get_jurisdiction_policy",
    "list_jurisdiction_policies",
    "resolve_policy",
]
