"""Static lookup tables: amenity translations and Warsaw district descriptions.

Loaded once at import time and never mutated.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional


@dataclass(frozen=True)
class Amenity:
    """English label and display icon for a Polish amenity name."""

    en: str
    icon: str = "•"


# Keys are lower-case Polish fragments as they appear on Otodom
AMENITY_MAP = MappingProxyType({
    "taras": Amenity("terrace", "🌿"),
    "balkon": Amenity("balcony", "🌿"),
    "pom. użytkowe": Amenity("utility room", "📦"),
    "pom. użytkowy": Amenity("utility room", "📦"),
    "piwnica": Amenity("basement storage", "📦"),
    "meble": Amenity("furniture", "🛋"),
    "pralka": Amenity("washing machine", "🧺"),
    "zmywarka": Amenity("dishwasher", "🍽"),
    "lodówka": Amenity("refrigerator", "🧊"),
    "kuchenka": Amenity("stove", "🍳"),
    "piekarnik": Amenity("oven", "🍳"),
    "telewizor": Amenity("tv", "📺"),
    "klimatyzacja": Amenity("air conditioning", "❄"),
    "rolety antywłamaniowe": Amenity("anti-burglary roller blinds", "🔒"),
    "drzwi / okna antywłamaniowe": Amenity("burglar-proof doors / windows", "🔒"),
    "domofon / wideofon": Amenity("intercom / videophone", "🔔"),
    "system alarmowy": Amenity("alarm system", "🚨"),
    "monitoring / ochrona": Amenity("cctv / security", "🎥"),
    "internet": Amenity("internet", "🌐"),
    "telewizja kablowa": Amenity("cable tv", "📺"),
    "telefon": Amenity("phone", "☎"),
    "teren zamknięty": Amenity("gated area", "🚧"),
    "garaż": Amenity("garage", "🚗"),
    "miejsce parkingowe": Amenity("parking space", "🅿"),
    "winda": Amenity("lift", "🛗"),
    "tylko dla niepalących": Amenity("non-smokers only", "🚭"),
})


def decorate_amenity(raw: str) -> str:
    """Return a display label like '🌿 balcony (balkon)' for a raw amenity name."""
    lower = raw.lower()
    for key, amenity in AMENITY_MAP.items():
        if key in lower:
            return f"{amenity.icon} {amenity.en} ({raw})"
    return f"• {raw}"


@dataclass(frozen=True)
class District:
    """Short expat-oriented profile of a Warsaw district."""

    name: str
    description: str
    metro: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "description": self.description,
            "metro": self.metro,
        }


WARSAW_DISTRICTS = MappingProxyType({
    "śródmieście": District(
        "Śródmieście",
        "City centre: offices, nightlife and the Old Town, busy and expensive.",
        metro=True,
    ),
    "mokotów": District(
        "Mokotów",
        "Large residential district with parks and the Mokotów business area.",
        metro=True,
    ),
    "wola": District(
        "Wola",
        "Fast-changing business district with new high-rises around Rondo Daszyńskiego.",
        metro=True,
    ),
    "żoliborz": District(
        "Żoliborz",
        "Quiet, green and leafy with pre-war villas, popular with families.",
        metro=True,
    ),
    "ochota": District(
        "Ochota",
        "Compact residential area close to the centre with good tram links.",
    ),
    "praga-południe": District(
        "Praga-Południe",
        "East bank district around Saska Kępa, mixed old and new housing.",
        metro=True,
    ),
    "praga-północ": District(
        "Praga-Północ",
        "Historic east bank area with an artistic scene, still gentrifying.",
        metro=True,
    ),
    "ursynów": District(
        "Ursynów",
        "Southern residential district with large estates and direct metro to the centre.",
        metro=True,
    ),
    "bielany": District(
        "Bielany",
        "Green northern district near Bielański Forest and the university campus.",
        metro=True,
    ),
    "bemowo": District(
        "Bemowo",
        "Western residential district with newer estates and growing metro access.",
        metro=True,
    ),
    "targówek": District(
        "Targówek",
        "North-east residential district, more affordable, served by metro line 2.",
        metro=True,
    ),
    "białołęka": District(
        "Białołęka",
        "Fast-growing northern suburb of new developments, long commutes by bus.",
    ),
    "wilanów": District(
        "Wilanów",
        "Upscale newer district around the royal palace, car-oriented.",
    ),
    "ursus": District(
        "Ursus",
        "Western district on the railway line, cheaper newer builds.",
    ),
    "włochy": District(
        "Włochy",
        "Near Chopin Airport, mixed residential and light industry.",
    ),
    "wawer": District(
        "Wawer",
        "Forested south-eastern outskirts with mostly houses.",
    ),
    "wesoła": District(
        "Wesoła",
        "Quiet eastern outskirts with detached houses and forest.",
    ),
    "rembertów": District(
        "Rembertów",
        "Small eastern district with suburban character.",
    ),
})


def normalize_district_name(name: str) -> str:
    """Normalize a district name for lookup ('Praga Południe' -> 'praga-południe')."""
    return re.sub(r"\s+", "-", name.strip().lower())


def find_district(location: Optional[str]) -> Optional[District]:
    """Find a known Warsaw district mentioned in a free-form location string."""
    if not location:
        return None
    normalized = normalize_district_name(location)
    for key, district in WARSAW_DISTRICTS.items():
        if key in normalized:
            return district
    return None
