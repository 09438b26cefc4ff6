"""Data models for listing input fields, description text and the enriched summary."""

import re
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DESCRIPTION_SEPARATOR = "\n---\n"


def parse_pln_amount(value: Any) -> Optional[int]:
    """Parse a whole-PLN amount such as '1 200 zł' or '3.500,00 PLN'.

    Returns None for anything that does not contain a usable number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    match = re.search(r"\d[\d\s .,]*", str(value))
    if not match:
        return None
    raw = match.group().strip()
    # Drop a trailing decimal part: "3.500,00" -> "3.500", "1200.5" -> "1200"
    raw = re.sub(r"[.,]\d{1,2}$", "", raw)
    digits = re.sub(r"\D", "", raw)
    return int(digits) if digits else None


def parse_area(value: Any) -> Optional[float]:
    """Parse an area like '48,5 m²' into square metres."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = re.search(r"\d+(?:[.,]\d+)?", str(value))
    if not match:
        return None
    return float(match.group().replace(",", "."))


@dataclass(frozen=True)
class ListingText:
    """Bilingual listing description: Polish source and its English rendering."""

    description_source: str = ""
    description_target: str = ""

    @property
    def combined(self) -> str:
        """Lower-cased scan buffer holding both language variants."""
        source = (self.description_source or "").strip()
        target = (self.description_target or "").strip()
        if not target or target == source:
            return source.lower()
        if not source:
            return target.lower()
        return f"{source}{DESCRIPTION_SEPARATOR}{target}".lower()

    @property
    def length(self) -> int:
        """Length of the original description (falls back to the translation)."""
        return len((self.description_source or self.description_target or "").strip())


class ListingFields(BaseModel):
    """Structured fields read from the listing page."""

    # === Identifiers ===
    url: Optional[str] = None
    title: Optional[str] = None

    # === Money (whole PLN) ===
    rent_pln: Optional[int] = Field(None, description="Monthly base rent")
    admin_pln: Optional[int] = Field(None, description="Monthly admin / building fee (czynsz)")
    deposit_pln: Optional[int] = Field(None, description="Security deposit (kaucja)")
    admin_raw: Optional[str] = Field(None, description="Admin fee as shown on the page")
    deposit_raw: Optional[str] = Field(None, description="Deposit as shown on the page")

    # === Property ===
    area: Optional[str] = Field(None, description="Area as shown on the page")
    area_m2: Optional[float] = None
    rooms: Optional[str] = None
    available_from: Optional[str] = None
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    amenities: list[str] = Field(default_factory=list)
    advertiser_type: Optional[str] = Field(
        None, description="agency / private when the page states it"
    )

    # === Description ===
    description_pl: str = ""
    description_en: str = ""

    @field_validator("rent_pln", "admin_pln", "deposit_pln", mode="before")
    @classmethod
    def _positive_amount(cls, value: Any) -> Optional[int]:
        amount = parse_pln_amount(value)
        if amount is None or amount <= 0:
            return None
        return amount

    @field_validator("area_m2", mode="before")
    @classmethod
    def _positive_area(cls, value: Any) -> Optional[float]:
        area = parse_area(value)
        if area is None or area <= 0:
            return None
        return area

    @field_validator("advertiser_type", mode="before")
    @classmethod
    def _known_advertiser(cls, value: Any) -> Optional[str]:
        if not value:
            return None
        value = str(value).strip().lower()
        if value in ("agency", "business", "developer"):
            return "agency"
        if value in ("private", "owner"):
            return "private"
        return None

    @field_validator("description_pl", "description_en", mode="before")
    @classmethod
    def _text_or_empty(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""

    def text(self) -> ListingText:
        """Description text in both languages."""
        return ListingText(self.description_pl, self.description_en)


class ListingSummary(BaseModel):
    """Enriched summary returned for a single listing."""

    model_config = ConfigDict(populate_by_name=True)

    site: str
    url: Optional[str] = None
    title: Optional[str] = None

    # === Monetary fields as shown ===
    rent: Optional[str] = None
    rent_pln: Optional[int] = Field(None, alias="rentPLN")
    admin: Optional[str] = None
    admin_pln: Optional[int] = Field(None, alias="adminPLN")
    total_pln: Optional[int] = Field(None, alias="totalPLN")
    total_cost_display: Optional[str] = Field(None, alias="totalCostDisplay")
    deposit: Optional[str] = None
    deposit_pln: Optional[int] = Field(None, alias="depositPLN")

    # === Property ===
    rooms: Optional[str] = None
    area: Optional[str] = None
    available_from: Optional[str] = Field(None, alias="availableFrom")
    location: Optional[str] = None
    district: Optional[dict] = None
    amenities: list[str] = Field(default_factory=list)
    description_pl: str = Field("", alias="descriptionPL")
    description_en: str = Field("", alias="descriptionEN")
    has_terrace_or_balcony: bool = Field(False, alias="hasTerraceOrBalcony")
    has_internet: bool = Field(False, alias="hasInternet")
    price_per_m2: Optional[int] = Field(None, alias="pricePerM2")

    # === Geo (computed) ===
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    distance_km: Optional[float] = Field(None, alias="distanceKm")
    commute: Optional[dict] = None

    # === Description analysis (computed) ===
    true_deposit_pln: Optional[int] = Field(None, alias="trueDepositPLN")
    true_admin_pln: Optional[int] = Field(None, alias="trueAdminPLN")
    true_total_pln: Optional[int] = Field(None, alias="trueTotalPLN")
    hidden_utilities: Optional[dict] = Field(None, alias="hiddenUtilities")
    additional_fees: list[dict] = Field(default_factory=list, alias="additionalFees")
    additional_fees_total: Optional[int] = Field(None, alias="additionalFeesTotal")
    has_metered_fees: bool = Field(False, alias="hasMeteredFees")
    metered_fee_types: list[str] = Field(default_factory=list, alias="meteredFeeTypes")
    advertiser_type: str = Field("unknown", alias="advertiserType")
    description_analysis: dict = Field(default_factory=dict, alias="descriptionAnalysis")
    insights: list[str] = Field(default_factory=list)
    risk: dict = Field(default_factory=dict)
    trust_breakdown: Optional[dict] = Field(None, alias="trustBreakdown")

    def to_json_dict(self) -> dict:
        """Serialize with the camelCase keys of the public output."""
        return self.model_dump(by_alias=True)
