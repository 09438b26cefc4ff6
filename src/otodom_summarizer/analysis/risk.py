"""Risk score and trust checklist for a single listing."""

from dataclasses import dataclass, field
from typing import Optional

from otodom_summarizer.analysis.amounts import UtilityEstimate, round_half_up
from otodom_summarizer.analysis.inconsistencies import Inconsistency
from otodom_summarizer.config.settings import (
    CONFIDENCE_FLOOR,
    CONFIDENCE_STEP,
    HIGH_ADMIN_RATIO,
    HIGH_DEPOSIT_RATIO,
    PRICE_PER_M2_HIGH,
    PRICE_PER_M2_LOW,
    RISK_HIGH_THRESHOLD,
    RISK_MEDIUM_THRESHOLD,
    SEVERITY_POINTS,
    SHORT_DESCRIPTION_CHARS,
    TRUST_LOW_BELOW,
    TRUST_MEDIUM_BELOW,
)

# Scored through the explicit registration row instead of its severity
SEPARATELY_SCORED_KINDS = {"no_registration"}


@dataclass(frozen=True)
class RiskSignals:
    """Everything the scorer looks at, gathered from the analysed listing."""

    rent: Optional[int] = None
    true_admin: Optional[int] = None
    true_deposit: Optional[int] = None
    structured_deposit: Optional[int] = None
    extracted_deposit: Optional[int] = None
    utilities: Optional[UtilityEstimate] = None
    price_per_m2: Optional[int] = None
    description_length: int = 0
    available_from: Optional[str] = None
    notary_required: bool = False
    registration_allowed: Optional[bool] = None
    inconsistencies: tuple[Inconsistency, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class RiskAssessment:
    """Weighted risk score with a discrete level and a confidence percentage."""

    score: int
    level: str  # Low, Medium, High
    confidence: int
    notes: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "level": self.level,
            "score": self.score,
            "confidence": self.confidence,
            "notes": list(self.notes),
        }


@dataclass(frozen=True)
class TrustCheck:
    category: str
    label: str
    passed: bool
    detail: str

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "label": self.label,
            "passed": self.passed,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class TrustBreakdown:
    """Pass/fail checklist summarised as a percentage."""

    checks: tuple[TrustCheck, ...]

    @property
    def passed(self) -> int:
        return sum(1 for check in self.checks if check.passed)

    @property
    def total(self) -> int:
        return len(self.checks)

    @property
    def percentage(self) -> int:
        if not self.checks:
            return 0
        return round_half_up(self.passed / self.total * 100)

    @property
    def level(self) -> str:
        if self.percentage < TRUST_LOW_BELOW:
            return "low"
        if self.percentage < TRUST_MEDIUM_BELOW:
            return "medium"
        return "high"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "checks": [check.to_dict() for check in self.checks],
            "passed": self.passed,
            "total": self.total,
            "percentage": self.percentage,
            "level": self.level,
        }


def risk_level(score: int) -> str:
    if score >= RISK_HIGH_THRESHOLD:
        return "High"
    if score >= RISK_MEDIUM_THRESHOLD:
        return "Medium"
    return "Low"


def confidence_for(score: int) -> int:
    return max(CONFIDENCE_FLOOR, 100 - score * CONFIDENCE_STEP)


def assess_risk(signals: RiskSignals) -> RiskAssessment:
    """Accumulate points for every triggered condition and derive level and confidence."""
    score = 0
    notes: list[str] = []

    def flag(points: int, note: str) -> None:
        nonlocal score
        score += points
        notes.append(note)

    for inconsistency in signals.inconsistencies:
        if inconsistency.kind in SEPARATELY_SCORED_KINDS:
            continue
        flag(SEVERITY_POINTS.get(inconsistency.severity, 0), inconsistency.message)

    rent = signals.rent
    if rent and signals.true_deposit and signals.true_deposit > HIGH_DEPOSIT_RATIO * rent:
        flag(2, f"High deposit: {signals.true_deposit} PLN (more than 2× monthly rent)")

    if rent and signals.true_admin and signals.true_admin > HIGH_ADMIN_RATIO * rent:
        flag(1, f"Admin / utilities ({signals.true_admin} PLN) are high compared to base rent")

    ppm2 = signals.price_per_m2
    if ppm2 is not None and ppm2 > PRICE_PER_M2_HIGH:
        flag(2, f"Price per m² ({ppm2} PLN) is on the expensive side for many areas")
    if ppm2 is not None and ppm2 < PRICE_PER_M2_LOW:
        flag(2, f"Price per m² ({ppm2} PLN) is suspiciously low")

    if signals.true_admin is None and signals.utilities is None:
        flag(1, "Admin fee not specified and no utility costs mentioned")

    if signals.structured_deposit is None and signals.extracted_deposit is None:
        flag(1, "Deposit not specified")

    if signals.description_length < SHORT_DESCRIPTION_CHARS:
        flag(1, "Very short description")

    if not signals.available_from:
        flag(1, "Availability date not specified")

    if signals.notary_required:
        flag(1, "Notarial act required (extra cost and paperwork)")

    if signals.registration_allowed is False:
        flag(2, "Address registration (zameldowanie) not possible")

    return RiskAssessment(
        score=score,
        level=risk_level(score),
        confidence=confidence_for(score),
        notes=tuple(notes),
    )


def build_trust_breakdown(signals: RiskSignals) -> TrustBreakdown:
    """Fixed checklist view of the same signals."""
    rent = signals.rent
    deposit = signals.true_deposit
    ppm2 = signals.price_per_m2
    contradictions = [
        i for i in signals.inconsistencies if i.kind in ("deposit_mismatch", "hidden_utilities")
    ]

    pricing_clear = rent is not None and (
        signals.true_admin is not None or signals.utilities is not None
    )
    checks = [
        TrustCheck(
            "pricing",
            "Pricing clarity",
            pricing_clear,
            "Rent and running costs are stated" if pricing_clear
            else "Rent or running costs are missing",
        ),
        TrustCheck(
            "pricing",
            "Deposit specified",
            deposit is not None,
            f"{deposit} PLN" if deposit is not None else "No deposit amount given",
        ),
        TrustCheck(
            "consistency",
            "No price contradictions",
            not contradictions,
            "; ".join(i.message for i in contradictions) or "Listing details match the description",
        ),
        TrustCheck(
            "transparency",
            "Detailed description",
            signals.description_length >= SHORT_DESCRIPTION_CHARS,
            f"{signals.description_length} characters",
        ),
        TrustCheck(
            "transparency",
            "Availability specified",
            bool(signals.available_from),
            signals.available_from or "No availability date",
        ),
    ]

    if rent and deposit is not None:
        ratio = deposit / rent
        checks.append(
            TrustCheck(
                "pricing",
                "Reasonable deposit",
                deposit <= HIGH_DEPOSIT_RATIO * rent,
                f"{ratio:.1f}× monthly rent",
            )
        )
    else:
        checks.append(TrustCheck("pricing", "Reasonable deposit", False, "Cannot compare deposit to rent"))

    if ppm2 is not None:
        checks.append(
            TrustCheck(
                "market",
                "Price per m² within market range",
                PRICE_PER_M2_LOW <= ppm2 <= PRICE_PER_M2_HIGH,
                f"{ppm2} PLN/m²",
            )
        )
    else:
        checks.append(
            TrustCheck("market", "Price per m² within market range", False, "Area or price missing")
        )

    checks.append(
        TrustCheck(
            "legal",
            "Registration allowed",
            signals.registration_allowed is not False,
            {
                True: "Registration possible",
                False: "Registration not possible",
                None: "Registration not mentioned",
            }[signals.registration_allowed],
        )
    )

    return TrustBreakdown(checks=tuple(checks))
