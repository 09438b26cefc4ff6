"""Pattern-based extraction of deposits, utilities and extra fees from listing descriptions.

All functions expect the lower-cased scan buffer built by ``ListingText.combined``
(Polish and English variants concatenated) and never raise for string input.
"""

import math
import re
from dataclasses import dataclass
from typing import Optional

from otodom_summarizer.config.settings import (
    CONTEXT_WINDOW,
    DEPOSIT_MAX,
    DEPOSIT_MIN,
    FEE_BANDS,
    METERED_WINDOW,
    UTILITY_MAX,
    UTILITY_MIN,
)

# "4 500", "4.500", "4,500", "4500", optionally followed by ",00"
NUM = r"(?<!\d)(\d{1,3}(?:[ \u00a0.,]\d{3})+|\d+)(?:[.,]\d{1,2}(?!\d))?"
CUR = r"(?:złotych|złote|zł|zlotych|zl\b|pln)"
GAP = r"[^\d]{0,30}?"

DEPOSIT_KW = r"(?:kaucj\w*|depozyt\w*|deposit\w*)"
REFUND_KW = r"(?:zwrotn\w*|refundable)"

UTILITY_KW = r"(?:media|rachunk\w*|utilities|bills)"
# Up to 40 non-digits after the utility keyword, never running into an admin fee or rent mention
UTILITY_GAP = r"(?:(?!czynsz|administr\w*|admin\b|\brent\b)[^\d]){0,40}?"
PER_UNIT = r"(?:os(?:ob|ób)\w*|os\.|person\w*|people|miesi\w*|mies\.|m-c|month\w*)"
RANGE_SEP = r"\s*(?:-|–|—|do|to)\s*"

INTERNET_KW = r"(?:internet\w*|wi-?fi|światłowód\w*|swiatlowod\w*)"
TV_KW = r"(?:\btv\b|telewizj\w*|kablówk\w*|kablowk\w*|cable)"
PARKING_KW = r"(?:parking\w*|miejsc\w*\s+postojow\w*|garaż\w*|garaz\w*|garage)"
COMBO_KW = (
    r"(?:internet\w*\s*(?:\+|i|and|&|oraz|z)\s*(?:\btv\b|telewizj\w*)"
    r"|(?:\btv\b|telewizj\w*)\s*(?:\+|i|and|&|oraz)\s*internet\w*)"
)


def _amount_patterns(keyword: str) -> tuple[re.Pattern, ...]:
    """Keyword-then-amount and amount-then-keyword templates for one fee keyword."""
    return (
        # "internet: 60 zł"
        re.compile(keyword + GAP + NUM + r"\s*" + CUR),
        # "60 zł za internet"
        re.compile(NUM + r"\s*" + CUR + r"[^\d]{0,15}?(?:za|for|na)\s+" + keyword),
    )


DEPOSIT_PATTERNS = (
    # "kaucja: 4 500 zł", "deposit of 4500 pln"
    re.compile(DEPOSIT_KW + GAP + NUM + r"\s*" + CUR),
    # "4500 zł kaucji"
    re.compile(NUM + r"\s*" + CUR + GAP + DEPOSIT_KW),
    # "zwrotna 3000 zł", "refundable 3000 pln"
    re.compile(REFUND_KW + GAP + NUM + r"\s*" + CUR),
    # "3000 zł (zwrotna)"
    re.compile(NUM + r"\s*" + CUR + GAP + REFUND_KW),
)

UTILITY_RANGE_PATTERNS = (
    # "media ok. 100-150 zł na osobę"
    re.compile(UTILITY_KW + UTILITY_GAP + NUM + RANGE_SEP + NUM + r"\s*" + CUR + GAP + PER_UNIT),
)

UTILITY_SINGLE_PATTERNS = (
    # "media ok. 150 zł za osobę", "utilities approx. 200 pln per month"
    re.compile(UTILITY_KW + UTILITY_GAP + NUM + r"\s*" + CUR + GAP + PER_UNIT),
    # "for one person ~150 zł", "na jedną osobę ok. 150 zł"
    re.compile(
        r"(?:for\s+(?:one|1|a\s+single)\s+person|(?:dla|na)\s+(?:jedną|jedna|jednej|1)\s+osob\w*)"
        r"[^\d]{0,20}?" + NUM + r"\s*" + CUR
    ),
)

FEE_PATTERNS: dict[str, tuple[re.Pattern, ...]] = {
    "fee-internet": _amount_patterns(INTERNET_KW),
    "fee-tv": _amount_patterns(TV_KW),
    "fee-parking": _amount_patterns(PARKING_KW),
    "fee-combo": _amount_patterns(COMBO_KW),
}

# "dla 3 osób", "for 2 people"
HEAD_COUNT_PATTERN = re.compile(r"\d+\s*(?:os\.|osob\w*|osób|persons?\b|people)")

# Numbers near these are bus lines, areas, floor numbers, distances, years or phone numbers
UTILITY_BAD_CONTEXT_PATTERNS = (
    re.compile(r"\b(?:linia|linii|line|bus|autobus\w*|tramwaj\w*|tram)\b\s*(?:nr\.?\s*)?\d+"),
    re.compile(r"\d+\s*(?:m2|m²|m\.?\s?kw|mkw|sq\.?\s?m|sqm|square\s+met\w*|metr\w*\s+kwadrat\w*)"),
    re.compile(r"\d+\s*(?:piętr\w*|pietr\w*|kondygnacj\w*)"),
    re.compile(r"(?:piętr\w*|pietr\w*|floor)\s*(?:nr\.?\s*)?\d+"),
    re.compile(r"\d+(?:st|nd|rd|th)?\s+(?:floor|storey)"),
    re.compile(r"\d+\s*(?:km\b|m\b|min\b|minut\w*|minutes?\b|metr\w*|meters?\b|metres?\b)"),
    re.compile(r"\b(?:19|20)\d{2}\s*(?:r\.|r\b|rok\w*|year)|\b(?:rok\w*|year)\s*(?:budowy\s*)?(?:19|20)\d{2}\b"),
    re.compile(r"(?:\btel\.?|telefon\w*|phone|\bnr\b|numer\w*|\bid\b)\s*[:.]?\s*\+?\d"),
    re.compile(r"\d{3}[\s-]\d{3}[\s-]\d{3}"),
)

# Per-person utilities name a head count themselves, fees must not sit next to one
BAD_CONTEXT_PATTERNS = UTILITY_BAD_CONTEXT_PATTERNS + (HEAD_COUNT_PATTERN,)

METERED_PATTERNS = (
    re.compile(r"według\s+(?:licznik\w*|zużyci\w*|wskaza\w*)"),
    re.compile(r"wg\.?\s+(?:licznik\w*|zużyci\w*|wskaza\w*)"),
    re.compile(r"(?:zgodnie\s+z|na\s+podstawie)\s+(?:licznik\w*|zużyci\w*|wskaza\w*)"),
    re.compile(r"rozlicz\w*\s+(?:wg|według|osobno|indywidualn\w*)"),
    re.compile(r"by\s+(?:the\s+)?meters?\b|metered|meter\s+readings?"),
    re.compile(r"(?:according\s+to|based\s+on)\s+(?:the\s+)?(?:actual\s+)?(?:meters?|consumption|usage)"),
)

METERED_CATEGORIES = (
    ("electricity", re.compile(r"prąd\w*|prad\w*|energi\w*\s+elektr\w*|electric\w*")),
    ("gas", re.compile(r"\bgaz\w*|\bgas\b")),
    ("water", re.compile(r"\bwod\w*|\bwater\b")),
)


@dataclass(frozen=True)
class ExtractedAmount:
    """A monetary value found in the description."""

    kind: str  # deposit, utility, fee-internet, fee-tv, fee-parking, fee-combo
    value: int
    raw_context: str

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {"kind": self.kind, "value": self.value, "rawContext": self.raw_context}


@dataclass(frozen=True)
class UtilityEstimate:
    """Per-person monthly utilities mentioned in the description."""

    min: int
    max: int
    avg: int
    is_metered: bool = False
    metered_categories: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "min": self.min,
            "max": self.max,
            "avg": self.avg,
            "isMetered": self.is_metered,
            "meteredCategories": list(self.metered_categories),
        }


@dataclass(frozen=True)
class AmountExtraction:
    """Everything the amount extractor found in one description."""

    amounts: tuple[ExtractedAmount, ...] = ()
    utilities: Optional[UtilityEstimate] = None
    has_metered_fees: bool = False
    metered_fee_types: tuple[str, ...] = ()

    @property
    def deposit(self) -> Optional[int]:
        """Extracted deposit value, if any."""
        for amount in self.amounts:
            if amount.kind == "deposit":
                return amount.value
        return None

    @property
    def fees(self) -> list[ExtractedAmount]:
        """Description-only fees (internet, TV, parking)."""
        return [a for a in self.amounts if a.kind.startswith("fee-")]


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (125.5 -> 126)."""
    return int(math.floor(value + 0.5))


def parse_amount(raw: Optional[str]) -> Optional[int]:
    """Parse a matched number like '4 500' or '4.500' into an int, None if unusable."""
    if not raw:
        return None
    digits = re.sub(r"\D", "", raw)
    if not digits:
        return None
    return int(digits)


def _snippet(text: str, match: re.Match) -> str:
    return " ".join(text[match.start():match.end()].split())


def extract_deposit(text: str) -> Optional[ExtractedAmount]:
    """Find the deposit amount; first plausible match in pattern order wins."""
    for pattern in DEPOSIT_PATTERNS:
        for match in pattern.finditer(text):
            value = parse_amount(match.group(1))
            if value is not None and DEPOSIT_MIN < value < DEPOSIT_MAX:
                return ExtractedAmount("deposit", value, _snippet(text, match))
    return None


def extract_utilities(text: str) -> list[ExtractedAmount]:
    """Find per-person / per-month utility amounts within the plausibility band."""
    found: list[ExtractedAmount] = []
    seen_spans: set[tuple[int, int]] = set()

    def accept(match: re.Match, group: int) -> None:
        span = match.span(group)
        value = parse_amount(match.group(group))
        if span in seen_spans or value is None:
            return
        if has_bad_context(text, *span, patterns=UTILITY_BAD_CONTEXT_PATTERNS):
            return
        if UTILITY_MIN <= value <= UTILITY_MAX:
            seen_spans.add(span)
            found.append(ExtractedAmount("utility", value, _snippet(text, match)))

    for pattern in UTILITY_RANGE_PATTERNS:
        for match in pattern.finditer(text):
            accept(match, 1)
            accept(match, 2)

    for pattern in UTILITY_SINGLE_PATTERNS:
        for match in pattern.finditer(text):
            accept(match, 1)

    return found


def has_bad_context(
    text: str,
    start: int,
    end: int,
    window: int = CONTEXT_WINDOW,
    patterns: tuple[re.Pattern, ...] = BAD_CONTEXT_PATTERNS,
) -> bool:
    """Check whether the number at text[start:end] sits next to an unrelated numeric mention."""
    context = text[max(0, start - window):end + window]
    return any(pattern.search(context) for pattern in patterns)


def extract_fees(text: str) -> list[ExtractedAmount]:
    """Find internet, TV, parking and combined internet+TV fees.

    A combined fee replaces separately found internet and TV fees.
    """
    fees: dict[str, ExtractedAmount] = {}

    for kind, patterns in FEE_PATTERNS.items():
        low, high = FEE_BANDS[kind]
        for pattern in patterns:
            for match in pattern.finditer(text):
                value = parse_amount(match.group(1))
                if value is None or not low <= value <= high:
                    continue
                if has_bad_context(text, *match.span(1)):
                    continue
                fees[kind] = ExtractedAmount(kind, value, _snippet(text, match))
                break
            if kind in fees:
                break

    if "fee-combo" in fees:
        fees.pop("fee-internet", None)
        fees.pop("fee-tv", None)

    return list(fees.values())


def detect_metered_fees(text: str) -> tuple[bool, tuple[str, ...]]:
    """Detect 'billed by meter' phrasing and the utility categories named near it."""
    categories: set[str] = set()
    metered = False

    for pattern in METERED_PATTERNS:
        for match in pattern.finditer(text):
            metered = True
            context = text[max(0, match.start() - METERED_WINDOW):match.end() + METERED_WINDOW]
            for name, category_pattern in METERED_CATEGORIES:
                if category_pattern.search(context):
                    categories.add(name)

    ordered = tuple(name for name, _ in METERED_CATEGORIES if name in categories)
    return metered, ordered


def build_utility_estimate(
    utilities: list[ExtractedAmount],
    is_metered: bool = False,
    metered_categories: tuple[str, ...] = (),
) -> Optional[UtilityEstimate]:
    """Collapse accepted utility values into a min / max / avg estimate."""
    if not utilities:
        return None
    values = [u.value for u in utilities]
    low, high = min(values), max(values)
    return UtilityEstimate(
        min=low,
        max=high,
        avg=round_half_up((low + high) / 2),
        is_metered=is_metered,
        metered_categories=metered_categories,
    )


def extract_amounts(text: str) -> AmountExtraction:
    """Run every amount detector over the combined description text."""
    text = (text or "").lower()

    amounts: list[ExtractedAmount] = []
    deposit = extract_deposit(text)
    if deposit:
        amounts.append(deposit)

    utilities = extract_utilities(text)
    amounts.extend(utilities)
    amounts.extend(extract_fees(text))

    metered, categories = detect_metered_fees(text)

    return AmountExtraction(
        amounts=tuple(amounts),
        utilities=build_utility_estimate(utilities, metered, categories),
        has_metered_fees=metered,
        metered_fee_types=categories,
    )
