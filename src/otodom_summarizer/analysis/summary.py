"""Run the full description analysis for one listing."""

from dataclasses import dataclass, replace
from typing import Optional

from otodom_summarizer.analysis.amounts import AmountExtraction, extract_amounts, round_half_up
from otodom_summarizer.analysis.inconsistencies import Inconsistency, detect_inconsistencies
from otodom_summarizer.analysis.insights import generate_insights
from otodom_summarizer.analysis.policies import PolicyFlags, classify_policies, notary_note
from otodom_summarizer.analysis.reconcile import (
    AdminFeePolicy,
    ReconciledValues,
    get_admin_fee_policy,
    reconcile,
)
from otodom_summarizer.analysis.risk import (
    RiskAssessment,
    RiskSignals,
    TrustBreakdown,
    assess_risk,
    build_trust_breakdown,
)
from otodom_summarizer.models.listing import ListingFields, ListingText


@dataclass(frozen=True)
class ListingAnalysis:
    """Result of analysing one listing's fields and description."""

    amounts: AmountExtraction
    policies: PolicyFlags
    reconciled: ReconciledValues
    inconsistencies: tuple[Inconsistency, ...]
    risk: RiskAssessment
    trust: TrustBreakdown
    price_per_m2: Optional[int]
    insights: tuple[str, ...] = ()

    def description_analysis(self) -> dict:
        policies = self.policies
        contract_terms = None
        if policies.contract_minimum_months:
            contract_terms = {"minimumMonths": policies.contract_minimum_months}
        notary_info = None
        if policies.notary_required:
            notary_info = {
                "required": True,
                "ownerSharePercent": policies.notary_owner_share_percent,
                "note": notary_note(policies),
            }
        return {
            "inconsistencies": [i.to_dict() for i in self.inconsistencies],
            "importantNotes": policies.notes,
            "contractTerms": contract_terms,
            "notaryInfo": notary_info,
            "registrationAllowed": policies.registration_allowed,
        }

    def to_dict(self) -> dict:
        """Fields of the enriched summary that come from the analysis."""
        reconciled = self.reconciled
        utilities = reconciled.hidden_utilities
        return {
            "trueDepositPLN": reconciled.true_deposit,
            "trueAdminPLN": reconciled.true_admin,
            "trueTotalPLN": reconciled.true_total,
            "pricePerM2": self.price_per_m2,
            "hiddenUtilities": utilities.to_dict() if utilities else None,
            "additionalFees": [fee.to_dict() for fee in reconciled.additional_fees],
            "additionalFeesTotal": reconciled.additional_fees_total,
            "hasMeteredFees": self.amounts.has_metered_fees,
            "meteredFeeTypes": list(self.amounts.metered_fee_types),
            "advertiserType": reconciled.advertiser_type,
            "descriptionAnalysis": self.description_analysis(),
            "insights": list(self.insights),
            "risk": self.risk.to_dict(),
            "trustBreakdown": self.trust.to_dict(),
        }


def price_per_m2(total: Optional[int], area_m2: Optional[float]) -> Optional[int]:
    if not total or not area_m2 or area_m2 <= 0:
        return None
    return round_half_up(total / area_m2)


def analyze_listing(
    fields: ListingFields,
    text: ListingText = None,
    admin_policy: AdminFeePolicy | str | None = None,
) -> ListingAnalysis:
    """Mine the description, reconcile it with the structured fields and score the listing.

    Args:
        fields: Structured fields from the listing page
        text: Description text; defaults to the descriptions held in ``fields``
        admin_policy: Admin fee policy function or its name in ADMIN_FEE_POLICIES
    """
    text = text or fields.text()
    if admin_policy is None or isinstance(admin_policy, str):
        admin_policy = get_admin_fee_policy(admin_policy)

    buffer = text.combined
    amounts = extract_amounts(buffer)
    policies = classify_policies(buffer)
    reconciled = reconcile(fields, amounts, policies, admin_policy)
    inconsistencies = tuple(detect_inconsistencies(fields, reconciled, amounts, policies))
    ppm2 = price_per_m2(reconciled.true_total, fields.area_m2)

    signals = RiskSignals(
        rent=fields.rent_pln,
        true_admin=reconciled.true_admin,
        true_deposit=reconciled.true_deposit,
        structured_deposit=fields.deposit_pln,
        extracted_deposit=amounts.deposit,
        utilities=amounts.utilities,
        price_per_m2=ppm2,
        description_length=text.length,
        available_from=fields.available_from,
        notary_required=policies.notary_required,
        registration_allowed=policies.registration_allowed,
        inconsistencies=inconsistencies,
    )

    analysis = ListingAnalysis(
        amounts=amounts,
        policies=policies,
        reconciled=reconciled,
        inconsistencies=inconsistencies,
        risk=assess_risk(signals),
        trust=build_trust_breakdown(signals),
        price_per_m2=ppm2,
    )
    return replace(analysis, insights=tuple(generate_insights(fields, analysis)))
