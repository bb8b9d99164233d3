"""
Jurisdiction policy overlay.

A jurisdiction policy is applied as a pure transformation of the screening
configuration: restricted factors are zeroed or capped in a new config, and
every change is recorded as an adjustment. Procedural obligations that
cannot be expressed as a config change are returned as warnings for
operators.
"""

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, List, Optional, Tuple, Union

from ..config.models import CreditScoring, CriminalScoring, ScreeningConfig
from ..exceptions import UnknownJurisdictionError

logger = logging.getLogger(__name__)

POST_OFFER = "post-offer"

CREDIT = "credit"
INCOME = "income"
CRIMINAL = "criminal"


@dataclass(frozen=True)
class RegulationReference:
    title: str
    citation: str
    url: str


@dataclass(frozen=True)
class CreditRestriction:
    allowed: bool = True
    stage: Optional[str] = None
    requires_alternative_evidence: bool = False
    notes: str = ""


@dataclass(frozen=True)
class IncomeRestriction:
    max_rent_multiple: Optional[float] = None
    portable_screening_accepted: bool = False
    requires_alternative_evidence: bool = False
    notes: str = ""


@dataclass(frozen=True)
class CriminalRestriction:
    allowed: bool = True
    stage: Optional[str] = None
    lookback_years: Optional[float] = None
    disallowed_categories: Tuple[str, ...] = ()
    notes: str = ""


@dataclass(frozen=True)
class JurisdictionRestrictions:
    credit: Optional[CreditRestriction] = None
    income: Optional[IncomeRestriction] = None
    criminal: Optional[CriminalRestriction] = None


@dataclass(frozen=True)
class JurisdictionPolicy:
    """Fair-housing screening restrictions for one jurisdiction."""
    id: str
    name: str
    restrictions: JurisdictionRestrictions
    markets: Tuple[str, ...] = ()
    summary: str = ""
    references: Tuple[RegulationReference, ...] = ()


@dataclass(frozen=True)
class ComplianceAdjustment:
    criteria: str  # credit | income | criminal
    description: str


@dataclass
class ComplianceSummary:
    """Adjustments made and warnings raised by a policy overlay."""
    policy_id: str
    policy_name: str
    adjustments: List[ComplianceAdjustment] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "policy_id": self.policy_id,
            "policy_name": self.policy_name,
            "adjustments": [
                {"criteria": a.criteria, "description": a.description}
                for a in self.adjustments
            ],
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class PolicyApplication:
    """Result of applying a policy: the adjusted config and its summary."""
    config: ScreeningConfig
    summary: ComplianceSummary


JURISDICTION_POLICIES = MappingProxyType({
    "us-ca": JurisdictionPolicy(
        id="us-ca",
        name="California Statewide",
        markets=("Los Angeles", "San Francisco", "San Diego"),
        summary=(
            "Statewide baseline that limits the use of credit history for voucher holders "
            "and requires acceptance of portable screening reports."
        ),
        restrictions=JurisdictionRestrictions(
            credit=CreditRestriction(
                allowed=True,
                requires_alternative_evidence=True,
                notes=(
                    "SB 267 (2023) requires housing providers to offer applicants using Housing "
                    "Choice Vouchers a chance to present alternative evidence of creditworthiness "
                    "before denying based on credit history."
                ),
            ),
            income=IncomeRestriction(
                requires_alternative_evidence=True,
                portable_screening_accepted=True,
                notes=(
                    "Civil Code 1950.6 and SB 267 require landlords to accept reusable screening "
                    "reports and to evaluate voucher holders using alternative documentation."
                ),
            ),
            criminal=CriminalRestriction(
                allowed=True,
                notes=(
                    "Few statewide limits on criminal screening; local ordinances apply and "
                    "adverse action notices are required under the ICRAA."
                ),
            ),
        ),
        references=(
            RegulationReference(
                title="SB 267 (2023)",
                citation="Cal. Civ. Code § 1950.6 & Gov. Code § 12955",
                url="https://leginfo.legislature.ca.gov/faces/billTextClient.xhtml?bill_id=202320240SB267",
            ),
            RegulationReference(
                title="Tenant Screening Fee Act",
                citation="Cal. Civ. Code § 1950.6",
                url="https://leginfo.legislature.ca.gov/faces/codes_displaySection.xhtml?lawCode=CIV&sectionNum=1950.6",
            ),
        ),
    ),
    "us-nyc": JurisdictionPolicy(
        id="us-nyc",
        name="New York City, NY",
        markets=("New York City",),
        summary=(
            "Fair Chance for Housing Act: criminal history reviews are deferred until after a "
            "conditional offer and sealed or vacated records may not be considered."
        ),
        restrictions=JurisdictionRestrictions(
            credit=CreditRestriction(
                allowed=True,
                requires_alternative_evidence=True,
                notes=(
                    "The NYC Human Rights Law bars source-of-income discrimination, so non-credit "
                    "alternatives must be offered to subsidized applicants."
                ),
            ),
            income=IncomeRestriction(
                max_rent_multiple=2.5,
                notes=(
                    "Commission guidance treats high income multiples as discriminatory for "
                    "voucher holders and recommends capping at roughly 2.5x rent."
                ),
            ),
            criminal=CriminalRestriction(
                allowed=False,
                stage=POST_OFFER,
                disallowed_categories=(
                    "sealed records",
                    "non-convictions",
                    "adjournments in contemplation of dismissal",
                ),
                notes=(
                    "Local Law 24 of 2023 prohibits criminal history inquiries until after a "
                    "conditional offer."
                ),
            ),
        ),
        references=(
            RegulationReference(
                title="Fair Chance for Housing Act Guidance",
                citation="NYC Local Law 24 (2023)",
                url="https://www.nyc.gov/site/cchr/media/fair-chance-for-housing.page",
            ),
            RegulationReference(
                title="NYC Human Rights Law - Source of Income Protection",
                citation="N.Y.C. Admin. Code § 8-107(5)(a)(1)",
                url="https://www1.nyc.gov/assets/cchr/downloads/pdf/publications/fairhousingbrochure.pdf",
            ),
        ),
    ),
    "us-il-cook": JurisdictionPolicy(
        id="us-il-cook",
        name="Cook County, IL",
        markets=("Chicago", "Cook County Suburbs"),
        summary=(
            "Just Housing Amendment: criminal screens require a prequalification step and may "
            "only consider convictions from the past three years."
        ),
        restrictions=JurisdictionRestrictions(
            credit=CreditRestriction(
                allowed=True,
                notes="Credit checks remain permitted alongside individualized assessment.",
            ),
            income=IncomeRestriction(
                notes="No county-wide cap on income multiples.",
            ),
            criminal=CriminalRestriction(
                allowed=True,
                stage=POST_OFFER,
                lookback_years=3,
                disallowed_categories=("arrests", "sealed or expunged records"),
                notes=(
                    "Two-step process: prequalification before any criminal inquiry, then only "
                    "convictions within three years after an individualized assessment."
                ),
            ),
        ),
        references=(
            RegulationReference(
                title="Cook County Just Housing Amendment",
                citation="Cook County Code of Ordinances § 42-38",
                url="https://www.cookcountyil.gov/service/just-housing-ordinance",
            ),
        ),
    ),
    "us-wa-seattle": JurisdictionPolicy(
        id="us-wa-seattle",
        name="Seattle, WA",
        markets=("Seattle",),
        summary=(
            "Fair Chance Housing Ordinance bans nearly all use of criminal history in tenant "
            "screening."
        ),
        restrictions=JurisdictionRestrictions(
            credit=CreditRestriction(
                allowed=True,
                notes="Adverse action notice requirements apply to credit screening.",
            ),
            income=IncomeRestriction(
                max_rent_multiple=2.5,
                notes="Income requirements capped at 2.5x rent for source-of-income protection.",
            ),
            criminal=CriminalRestriction(
                allowed=False,
                disallowed_categories=(
                    "all arrests",
                    "all convictions except sex offender registry exceptions",
                ),
                notes="SMC 14.09 largely prohibits asking about or using criminal history.",
            ),
        ),
        references=(
            RegulationReference(
                title="Seattle Fair Chance Housing Ordinance",
                citation="Seattle Municipal Code 14.09",
                url="https://seattle.gov/civilrights/fair-housing/fair-chance-housing",
            ),
        ),
    ),
    "us-or-portland": JurisdictionPolicy(
        id="us-or-portland",
        name="Portland, OR",
        markets=("Portland",),
        summary=(
            "FAIR Ordinance: low-barrier screening with caps on income multiples and limits on "
            "credit and criminal record usage."
        ),
        restrictions=JurisdictionRestrictions(
            credit=CreditRestriction(
                allowed=True,
                requires_alternative_evidence=True,
                notes="Alternative evidence of creditworthiness must be accepted.",
            ),
            income=IncomeRestriction(
                max_rent_multiple=2.5,
                notes="Low-barrier screening caps minimum income at 2.5x the rent.",
            ),
            criminal=CriminalRestriction(
                allowed=True,
                lookback_years=7,
                disallowed_categories=(
                    "arrests not leading to conviction",
                    "expunged convictions",
                ),
                notes="Convictions older than seven years must be ignored.",
            ),
        ),
        references=(
            RegulationReference(
                title="Fair Access in Renting (FAIR) Ordinance",
                citation="Portland City Code 30.01.086",
                url="https://www.portland.gov/phb/rental-services/fair-access-renting",
            ),
        ),
    ),
})


def list_jurisdiction_policies() -> List[JurisdictionPolicy]:
    return list(JURISDICTION_POLICIES.values())


def get_jurisdiction_policy(jurisdiction_id: str) -> JurisdictionPolicy:
    """
    Resolve a jurisdiction key.

    Raises:
        UnknownJurisdictionError: If the key is not in the policy table
    """
    policy = JURISDICTION_POLICIES.get(jurisdiction_id) if isinstance(jurisdiction_id, str) else None
    if policy is None:
        raise UnknownJurisdictionError(jurisdiction_id, known=sorted(JURISDICTION_POLICIES))
    return policy


def resolve_policy(jurisdiction: Union[str, JurisdictionPolicy]) -> JurisdictionPolicy:
    if isinstance(jurisdiction, JurisdictionPolicy):
        return jurisdiction
    return get_jurisdiction_policy(jurisdiction)


def _blocks_pre_offer(allowed: bool, stage: Optional[str]) -> bool:
    return not allowed or stage == POST_OFFER


def apply_jurisdiction_policy(config: ScreeningConfig, policy: JurisdictionPolicy) -> PolicyApplication:
    """
    Derive a jurisdiction-compliant configuration.

    The input config is never modified. Applying the same policy to the same
    config always yields an equal result, and applying it to an already
    adjusted config records no further adjustments.

    Args:
        config: Base screening configuration
        policy: Jurisdiction policy to enforce

    Returns:
        PolicyApplication with the adjusted config and compliance summary
    """
    summary = ComplianceSummary(policy_id=policy.id, policy_name=policy.name)
    thresholds = config.thresholds
    scoring = config.scoring

    affordability_thresholds = thresholds.affordability
    criminal_thresholds = thresholds.criminal
    credit_scoring = scoring.credit
    criminal_scoring = scoring.criminal

    restrictions = policy.restrictions

    credit = restrictions.credit
    if credit is not None:
        if _blocks_pre_offer(credit.allowed, credit.stage):
            if any((credit_scoring.excellent, credit_scoring.good, credit_scoring.poor)):
                reason = "restricted to post-offer" if credit.allowed else "not permitted"
                summary.adjustments.append(ComplianceAdjustment(
                    criteria=CREDIT,
                    description=f"{policy.name}: credit scoring disabled because screening is {reason} pre-offer.",
                ))
            credit_scoring = CreditScoring(excellent=0, good=0, poor=0)
        elif credit.requires_alternative_evidence:
            summary.warnings.append(
                f"{policy.name}: credit review must accept alternative evidence when applicants "
                f"use subsidies or portable reports."
            )

    income = restrictions.income
    if income is not None:
        cap = income.max_rent_multiple
        if cap is not None and cap > 0 and affordability_thresholds.rent_rule > cap:
            summary.adjustments.append(ComplianceAdjustment(
                criteria=INCOME,
                description=f"{policy.name}: income-to-rent threshold reduced to {cap:g}x rent per local rules.",
            ))
            affordability_thresholds = replace(
                affordability_thresholds,
                rent_rule=cap,
                partial_credit_ratio=min(affordability_thresholds.partial_credit_ratio, cap),
            )
        if income.requires_alternative_evidence:
            summary.warnings.append(
                f"{policy.name}: staff must accept alternative income or credit documentation "
                f"when applicants present vouchers or reusable reports."
            )
        if income.portable_screening_accepted:
            summary.warnings.append(
                f"{policy.name}: reusable screening reports must be accepted instead of running "
                f"new credit pulls when they meet statutory requirements."
            )

    criminal = restrictions.criminal
    if criminal is not None:
        if _blocks_pre_offer(criminal.allowed, criminal.stage):
            current = (
                criminal_scoring.clean_record_points,
                criminal_scoring.stale_record_points,
                criminal_scoring.recent_misdemeanor_points,
                criminal_scoring.recent_felony_points,
                criminal_scoring.recent_violent_felony_points,
            )
            if any(current):
                reason = "limited to post-offer reviews" if criminal.allowed else "not allowed"
                summary.adjustments.append(ComplianceAdjustment(
                    criteria=CRIMINAL,
                    description=(
                        f"{policy.name}: criminal history scoring removed because checks are "
                        f"{reason} at application."
                    ),
                ))
            criminal_scoring = CriminalScoring(
                clean_record_points=0,
                stale_record_points=0,
                recent_misdemeanor_points=0,
                recent_felony_points=0,
                recent_violent_felony_points=0,
            )
        elif criminal.lookback_years is not None:
            cap = criminal.lookback_years
            capped = replace(
                criminal_thresholds,
                violent_felony_lookback_years=min(criminal_thresholds.violent_felony_lookback_years, cap),
                felony_lookback_years=min(criminal_thresholds.felony_lookback_years, cap),
                misdemeanor_lookback_years=min(criminal_thresholds.misdemeanor_lookback_years, cap),
            )
            if capped != criminal_thresholds:
                summary.adjustments.append(ComplianceAdjustment(
                    criteria=CRIMINAL,
                    description=f"{policy.name}: criminal lookback windows capped at {cap:g} years.",
                ))
                criminal_thresholds = capped

        if criminal.lookback_years and criminal.allowed:
            summary.warnings.append(
                f"{policy.name}: only convictions from the past {criminal.lookback_years:g} years "
                f"may be considered and individualized assessments are required."
            )
        if criminal.disallowed_categories:
            summary.warnings.append(
                f"{policy.name}: criminal reviews must ignore {', '.join(criminal.disallowed_categories)}."
            )

    adjusted = replace(
        config,
        thresholds=replace(
            thresholds,
            affordability=affordability_thresholds,
            criminal=criminal_thresholds,
        ),
        scoring=replace(scoring, credit=credit_scoring, criminal=criminal_scoring),
    )

    for adjustment in summary.adjustments:
        logger.debug("Applied %s adjustment: %s", adjustment.criteria, adjustment.description)

    return PolicyApplication(config=adjusted, summary=summary)
