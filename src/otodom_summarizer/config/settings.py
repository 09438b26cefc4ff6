"""Configuration for fetching, enrichment and listing analysis."""

import os
from dataclasses import dataclass


# === SITE ===
SITE_NAME = "otodom.pl"
SUPPORTED_HOSTS = ("otodom.pl",)


# === BASE LOCATION ===
@dataclass(frozen=True)
class BaseLocation:
    """Reference point used for distance and commute calculations."""

    name: str
    lat: float
    lng: float


# Palace of Culture and Science, central Warsaw
DEFAULT_BASE_LOCATION = BaseLocation(
    name="Warsaw city centre",
    lat=52.2318,
    lng=21.0060,
)
COUNTRY = "Poland"

# === SCRAPING CONFIG ===
MAX_RETRIES = 3
TIMEOUT = 30

# === TRANSLATION CONFIG ===
DEEPL_API_URL = "https://api-free.deepl.com/v2/translate"
DEEPL_API_KEY = os.environ.get("DEEPL_API_KEY", "")
TRANSLATION_TIMEOUT = 15
SOURCE_LANG = "PL"
TARGET_LANG = "EN"

# === CURRENCY ===
CURRENCY = "PLN"
PLN_TO_EUR = 0.23

# === AMOUNT BANDS (whole PLN) ===
# Deposit band is exclusive on both ends
DEPOSIT_MIN = 500
DEPOSIT_MAX = 50000
# Per-person monthly utilities, inclusive
UTILITY_MIN = 50
UTILITY_MAX = 500
FEE_BANDS: dict[str, tuple[int, int]] = {
    "fee-internet": (40, 200),
    "fee-tv": (30, 150),
    "fee-parking": (100, 500),
    "fee-combo": (60, 250),
}
# Characters inspected either side of a fee amount for unrelated numbers
CONTEXT_WINDOW = 50
# Characters inspected either side of a "billed by meter" phrase
METERED_WINDOW = 80
CONTRACT_MIN_MONTHS = 1
CONTRACT_MAX_MONTHS = 36
# Characters before a month count that are checked for a deposit keyword
CONTRACT_DEPOSIT_WINDOW = 25

# === RECONCILIATION ===
# Admin fee below this is treated as effectively unset
ADMIN_FEE_FLOOR = 10
# Relative deposit difference tolerated before flagging a mismatch
DEPOSIT_MISMATCH_TOLERANCE = 0.2
# Name of the admin fee policy in analysis.reconcile.ADMIN_FEE_POLICIES
ADMIN_FEE_POLICY = os.environ.get("OTODOM_ADMIN_FEE_POLICY", "trust_structured")

# === RISK SCORING ===
SEVERITY_POINTS = {"high": 3, "medium": 2}
HIGH_DEPOSIT_RATIO = 2.0
HIGH_ADMIN_RATIO = 0.6
PRICE_PER_M2_HIGH = 150
PRICE_PER_M2_LOW = 40
SHORT_DESCRIPTION_CHARS = 200

RISK_HIGH_THRESHOLD = 6
RISK_MEDIUM_THRESHOLD = 3
CONFIDENCE_FLOOR = 40
CONFIDENCE_STEP = 5

TRUST_LOW_BELOW = 50
TRUST_MEDIUM_BELOW = 75
