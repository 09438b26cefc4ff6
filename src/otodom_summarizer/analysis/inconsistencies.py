"""Detect conflicts between structured listing fields and the description."""

from dataclasses import dataclass, field
from typing import Any

from otodom_summarizer.analysis.amounts import AmountExtraction
from otodom_summarizer.analysis.policies import PolicyFlags
from otodom_summarizer.analysis.reconcile import ReconciledValues
from otodom_summarizer.config.settings import ADMIN_FEE_FLOOR, DEPOSIT_MISMATCH_TOLERANCE
from otodom_summarizer.models.listing import ListingFields


@dataclass(frozen=True)
class Inconsistency:
    """A quantified conflict or risk condition found in the listing."""

    kind: str  # deposit_mismatch, hidden_utilities, no_registration
    severity: str  # high, medium
    message: str
    values: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.kind,
            "severity": self.severity,
            "message": self.message,
            "values": dict(self.values),
        }


def deposit_mismatch(structured: int, extracted: int) -> bool:
    """True when the two deposits differ by more than the tolerated share of the structured one."""
    return abs(extracted - structured) > DEPOSIT_MISMATCH_TOLERANCE * structured


def detect_inconsistencies(
    fields: ListingFields,
    reconciled: ReconciledValues,
    amounts: AmountExtraction,
    policies: PolicyFlags,
) -> list[Inconsistency]:
    """Compare structured and extracted values. Absence alone never counts."""
    found: list[Inconsistency] = []

    structured_deposit = fields.deposit_pln
    extracted_deposit = amounts.deposit
    if (
        structured_deposit is not None
        and extracted_deposit is not None
        and deposit_mismatch(structured_deposit, extracted_deposit)
    ):
        found.append(
            Inconsistency(
                kind="deposit_mismatch",
                severity="high",
                message=(
                    f"Deposit in listing details is {structured_deposit} PLN "
                    f"but the description says {extracted_deposit} PLN"
                ),
                values={"structured": structured_deposit, "extracted": extracted_deposit},
            )
        )

    utilities = reconciled.hidden_utilities
    admin = fields.admin_pln
    if utilities is not None and (admin is None or admin < ADMIN_FEE_FLOOR):
        found.append(
            Inconsistency(
                kind="hidden_utilities",
                severity="medium",
                message=(
                    f"Description mentions utilities of {utilities.min}-{utilities.max} PLN "
                    f"per person/month that are not in the admin fee"
                ),
                values={"structured": admin, "min": utilities.min, "max": utilities.max},
            )
        )

    if policies.registration_allowed is False:
        found.append(
            Inconsistency(
                kind="no_registration",
                severity="medium",
                message="Description says address registration (zameldowanie) is not possible",
            )
        )

    return found
