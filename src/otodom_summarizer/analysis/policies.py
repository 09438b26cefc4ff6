"""Keyword detectors for listing policies stated in the description."""

import re
from dataclasses import dataclass
from typing import Optional

from otodom_summarizer.config.settings import (
    CONTRACT_DEPOSIT_WINDOW,
    CONTRACT_MAX_MONTHS,
    CONTRACT_MIN_MONTHS,
)

# Agency keywords are checked first; a description matching both sets is an agency listing
AGENCY_KEYWORDS = ("agency", "biuro", "pośrednik", "commission", "prowizja")
PRIVATE_KEYWORDS = ("private", "owner", "właściciel", "no commission", "bezpośrednio")

REGISTRATION_MENTION = re.compile(r"zameldow\w*|meldun\w*|registration|register\w*")
REGISTRATION_DENIED = (
    re.compile(r"bez\s+(?:możliwości\s+)?zameldowania"),
    re.compile(r"(?:brak|nie\s+ma)\s+(?:możliwości\s+)?zameldowania"),
    re.compile(r"zameldowanie\s+(?:nie\s+jest\s+)?(?:niemożliwe|wykluczone|nie\s+jest\s+możliwe)"),
    re.compile(r"nie\s+(?:ma\s+)?(?:możliwości\s+)?(?:zameldowania|meldunku|zameldować)"),
    re.compile(r"no\s+(?:possibility\s+of\s+)?registration"),
    re.compile(r"without\s+(?:the\s+)?(?:possibility\s+of\s+)?registration"),
    re.compile(r"registration\s+(?:is\s+)?not\s+(?:possible|allowed|available)"),
    re.compile(r"(?:cannot|can't|can\s+not)\s+(?:be\s+)?register"),
)
REGISTRATION_ALLOWED = (
    re.compile(r"możliwoś[ćc]\s+zameldowania"),
    re.compile(r"zameldowanie\s+(?:jest\s+)?możliwe"),
    re.compile(r"możliwe\s+zameldowanie"),
    re.compile(r"registration\s+(?:is\s+)?(?:possible|allowed|available)"),
    re.compile(r"possib\w*\s+(?:of\s+|to\s+)?(?:registration|register)"),
    re.compile(r"can\s+(?:be\s+)?register"),
)

NOTARY_PATTERN = re.compile(
    r"notari\w*|notary|notarial\w*|najem\w*\s+okazjonaln\w*|occasional\s+(?:lease|rental)"
)
NOTARY_SHARE_PATTERNS = (
    # "właściciel pokrywa 50% kosztów", "owner pays 50%"
    re.compile(r"(?:właściciel\w*|wynajmując\w*|owner|landlord)[^.%\d]{0,60}?(\d{1,3})\s*%"),
    # "50% kosztów pokrywa właściciel"
    re.compile(r"(\d{1,3})\s*%[^.%\d]{0,60}?(?:właściciel\w*|wynajmując\w*|owner|landlord)"),
)

MONTH = r"(?:miesi\w*|mies\.?|m-c\w*|months?)"
CONTRACT_PATTERNS = (
    # "minimum 12 miesięcy", "at least 6 months"
    re.compile(r"(?:minimum|minimaln\w*|min\.|co\s+najmniej|at\s+least)[^\d]{0,30}?(\d{1,2})\s*" + MONTH),
    # "12 months minimum", "12 miesięcy umowy"
    re.compile(r"(?<!\d)(\d{1,2})\s*" + MONTH + r"[^\d.,;]{0,30}?(?:minimum|contract|lease|umow\w*|umów\w*|najm\w*)"),
    # "umowa na 12 miesięcy", "contract for 12 months"
    re.compile(r"(?:umow\w*|umów\w*|contract|lease|najem)[^\d.]{0,30}?(?:na|for)\s+(\d{1,2})\s*" + MONTH),
)

# "kaucja 2 miesiące" is a deposit size, not a contract length
DEPOSIT_MENTION = re.compile(r"kaucj\w*|depozyt\w*|deposit")

PET_NEGATIVE = re.compile(
    r"bez\s+zwierz\w*|zwierz\w*\s+(?:nie\s+(?:są\s+)?(?:akceptowan\w*|dozwolon\w*)|niedozwolon\w*)"
    r"|no\s+pets|pets\s+(?:are\s+)?not\s+(?:allowed|accepted|permitted)"
)
PET_POSITIVE = re.compile(
    r"zwierz\w*\s+(?:są\s+)?(?:mile\s+widzian\w*|akceptowan\w*|dozwolon\w*)"
    r"|pets?\s+(?:are\s+)?(?:allowed|welcome|accepted)|pet[\s-]friendly"
)
SMOKING_NEGATIVE = re.compile(
    r"niepaląc\w*|niepalac\w*|zakaz\s+palenia|non[\s-]?smok\w*|no\s+smoking|smoking\s+(?:is\s+)?not\s+allowed"
)
SMOKING_POSITIVE = re.compile(r"palenie\s+(?:jest\s+)?dozwolon\w*|smoking\s+(?:is\s+)?allowed")
STUDENT_NEGATIVE = re.compile(
    r"nie\s+dla\s+student\w*|bez\s+student\w*|no\s+students|not\s+(?:suitable\s+)?for\s+students"
)
STUDENT_POSITIVE = re.compile(
    r"dla\s+student\w*|studen\w*\s+mile\s+widzian\w*|students?\s+(?:are\s+)?welcome|ideal\s+for\s+students"
)


@dataclass(frozen=True)
class PolicyFlags:
    """Binary and enum listing attributes stated in the description."""

    advertiser_type: str = "unknown"  # agency, private, unknown
    registration_allowed: Optional[bool] = None
    notary_required: bool = False
    notary_owner_share_percent: Optional[int] = None
    contract_minimum_months: Optional[int] = None
    pet_policy: Optional[str] = None
    smoking_policy: Optional[str] = None
    student_policy: Optional[str] = None

    @property
    def notes(self) -> list[str]:
        """Human-readable policy notes in a fixed order."""
        notes = []
        if self.contract_minimum_months:
            notes.append(f"Minimum contract: {self.contract_minimum_months} months")
        if self.notary_required:
            notes.append(notary_note(self))
        if self.registration_allowed is False:
            notes.append("Address registration (zameldowanie) is not possible")
        elif self.registration_allowed is True:
            notes.append("Address registration (zameldowanie) is possible")
        for note in (self.pet_policy, self.smoking_policy, self.student_policy):
            if note:
                notes.append(note)
        return notes


def notary_note(flags: PolicyFlags) -> str:
    """Describe the notary requirement, including the owner's share when stated."""
    note = "Notarial act required (najem okazjonalny)"
    if flags.notary_owner_share_percent is not None:
        note += f", owner covers {flags.notary_owner_share_percent}% of the cost"
    return note


def detect_advertiser_type(text: str) -> str:
    """Classify the advertiser as agency, private or unknown."""
    if any(keyword in text for keyword in AGENCY_KEYWORDS):
        return "agency"
    if any(keyword in text for keyword in PRIVATE_KEYWORDS):
        return "private"
    return "unknown"


def detect_registration(text: str) -> Optional[bool]:
    """Whether address registration is allowed; None when the text is silent or vague."""
    if not REGISTRATION_MENTION.search(text):
        return None
    if any(pattern.search(text) for pattern in REGISTRATION_DENIED):
        return False
    if any(pattern.search(text) for pattern in REGISTRATION_ALLOWED):
        return True
    return None


def detect_notary(text: str) -> tuple[bool, Optional[int]]:
    """Return (notary required, percentage of the notary cost paid by the owner)."""
    if not NOTARY_PATTERN.search(text):
        return False, None
    for pattern in NOTARY_SHARE_PATTERNS:
        for match in pattern.finditer(text):
            share = int(match.group(1))
            if 0 <= share <= 100:
                return True, share
    return True, None


def detect_contract_minimum(text: str) -> Optional[int]:
    """Minimum contract length in months; first plausible match in pattern order wins."""
    for pattern in CONTRACT_PATTERNS:
        for match in pattern.finditer(text):
            start = match.start(1)
            if DEPOSIT_MENTION.search(text[max(0, start - CONTRACT_DEPOSIT_WINDOW):start]):
                continue
            months = int(match.group(1))
            if CONTRACT_MIN_MONTHS <= months <= CONTRACT_MAX_MONTHS:
                return months
    return None


def detect_pet_policy(text: str) -> Optional[str]:
    if PET_NEGATIVE.search(text):
        return "No pets allowed"
    if PET_POSITIVE.search(text):
        return "Pets allowed"
    return None


def detect_smoking_policy(text: str) -> Optional[str]:
    if SMOKING_NEGATIVE.search(text):
        return "Non-smokers only"
    if SMOKING_POSITIVE.search(text):
        return "Smoking allowed"
    return None


def detect_student_policy(text: str) -> Optional[str]:
    if STUDENT_NEGATIVE.search(text):
        return "Not available to students"
    if STUDENT_POSITIVE.search(text):
        return "Students welcome"
    return None


def classify_policies(text: str) -> PolicyFlags:
    """Run every policy detector over the combined description text."""
    text = (text or "").lower()
    notary_required, owner_share = detect_notary(text)
    return PolicyFlags(
        advertiser_type=detect_advertiser_type(text),
        registration_allowed=detect_registration(text),
        notary_required=notary_required,
        notary_owner_share_percent=owner_share,
        contract_minimum_months=detect_contract_minimum(text),
        pet_policy=detect_pet_policy(text),
        smoking_policy=detect_smoking_policy(text),
        student_policy=detect_student_policy(text),
    )
