"""Merge structured listing fields with values mined from the description."""

from dataclasses import dataclass, field
from typing import Callable, Optional

from otodom_summarizer.analysis.amounts import AmountExtraction, ExtractedAmount, UtilityEstimate
from otodom_summarizer.analysis.policies import PolicyFlags
from otodom_summarizer.config.settings import ADMIN_FEE_FLOOR, ADMIN_FEE_POLICY
from otodom_summarizer.models.listing import ListingFields

# (structured admin fee, utility estimate) -> admin fee to report
AdminFeePolicy = Callable[[Optional[int], Optional[UtilityEstimate]], Optional[int]]


def trust_structured_admin(
    admin: Optional[int], utilities: Optional[UtilityEstimate]
) -> Optional[int]:
    """Always report the structured admin fee; utilities are surfaced separately."""
    return admin


def utilities_when_admin_missing(
    admin: Optional[int], utilities: Optional[UtilityEstimate]
) -> Optional[int]:
    """Use the utility average when the page gives no admin fee."""
    if admin is None and utilities is not None:
        return utilities.avg
    return admin


def utilities_when_admin_below_floor(
    admin: Optional[int], utilities: Optional[UtilityEstimate]
) -> Optional[int]:
    """Use the utility average when the admin fee is missing or trivially small."""
    if utilities is not None and (admin is None or admin < ADMIN_FEE_FLOOR):
        return utilities.avg
    return admin


ADMIN_FEE_POLICIES: dict[str, AdminFeePolicy] = {
    "trust_structured": trust_structured_admin,
    "utilities_when_missing": utilities_when_admin_missing,
    "utilities_below_floor": utilities_when_admin_below_floor,
}


def get_admin_fee_policy(name: str = None) -> AdminFeePolicy:
    """Look up an admin fee policy by name (default from settings)."""
    name = (name or ADMIN_FEE_POLICY).lower()
    if name not in ADMIN_FEE_POLICIES:
        raise ValueError(
            f"Unknown admin fee policy: {name}. Available: {list(ADMIN_FEE_POLICIES.keys())}"
        )
    return ADMIN_FEE_POLICIES[name]


@dataclass(frozen=True)
class ReconciledValues:
    """Best-estimate figures exposed to the consumer."""

    true_deposit: Optional[int] = None
    true_admin: Optional[int] = None
    true_total: Optional[int] = None
    hidden_utilities: Optional[UtilityEstimate] = None
    additional_fees: tuple[ExtractedAmount, ...] = field(default_factory=tuple)
    advertiser_type: str = "unknown"

    @property
    def additional_fees_total(self) -> Optional[int]:
        """Subtotal of description-only fees, None when there are none."""
        if not self.additional_fees:
            return None
        return sum(fee.value for fee in self.additional_fees)


def resolve_deposit(structured: Optional[int], extracted: Optional[int]) -> Optional[int]:
    """Prefer the description deposit only when it is higher than the structured one."""
    if extracted is not None and extracted > (structured or 0):
        return extracted
    return structured


def reconcile(
    fields: ListingFields,
    amounts: AmountExtraction,
    policies: PolicyFlags,
    admin_policy: Optional[AdminFeePolicy] = None,
) -> ReconciledValues:
    """Compute true deposit, admin fee and total from structured and extracted data."""
    admin_policy = admin_policy or get_admin_fee_policy()

    true_admin = admin_policy(fields.admin_pln, amounts.utilities)
    true_total = None
    if fields.rent_pln is not None:
        # Description-only fees never enter the total
        true_total = fields.rent_pln + (true_admin or 0)

    return ReconciledValues(
        true_deposit=resolve_deposit(fields.deposit_pln, amounts.deposit),
        true_admin=true_admin,
        true_total=true_total,
        hidden_utilities=amounts.utilities,
        additional_fees=tuple(amounts.fees),
        advertiser_type=fields.advertiser_type or policies.advertiser_type,
    )
