"""Otodom.pl scraper - reads the listing's JSON-LD structured data."""

import json
import re
from typing import Optional

from bs4 import BeautifulSoup

from otodom_summarizer.config.settings import SITE_NAME, SUPPORTED_HOSTS
from otodom_summarizer.models.listing import ListingFields, parse_area
from otodom_summarizer.scrapers.base import BaseScraper, console

PRODUCT_TYPES = {"Product", "Apartment"}

# Otodom property names holding comma-separated amenity lists
AMENITY_PROPERTIES = (
    "informacje dodatkowe",
    "wyposażenie",
    "media",
    "bezpieczeństwo",
    "zabezpieczenia",
)

AGENCY_SELLER_TYPES = {"RealEstateAgent", "Organization", "LocalBusiness", "Corporation"}


def strip_html(html: Optional[str]) -> str:
    """Return the text of an HTML fragment with whitespace collapsed."""
    if not html:
        return ""
    text = BeautifulSoup(html, "lxml").get_text(separator=" ")
    return re.sub(r"\s+", " ", text).strip()


def _is_product(node: dict) -> bool:
    node_type = node.get("@type")
    if isinstance(node_type, list):
        return any(t in PRODUCT_TYPES for t in node_type)
    return node_type in PRODUCT_TYPES


def find_product_node(soup: BeautifulSoup) -> Optional[dict]:
    """Find the listing node among the page's JSON-LD blocks."""
    for script in soup.select('script[type="application/ld+json"]'):
        raw = script.string or script.get_text()
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            continue

        if isinstance(data, list):
            candidates = data
        elif isinstance(data, dict) and "@graph" in data:
            candidates = data["@graph"]
        else:
            candidates = [data]

        for node in candidates:
            if isinstance(node, dict) and _is_product(node):
                return node
    return None


def get_property(product: dict, name_part: str) -> Optional[str]:
    """Value of the first additionalProperty whose name contains name_part."""
    name_part = name_part.lower()
    for prop in product.get("additionalProperty") or []:
        if not isinstance(prop, dict):
            continue
        if name_part in str(prop.get("name") or "").lower():
            value = prop.get("value")
            return str(value).strip() if value is not None else None
    return None


def _to_float(value) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _offer(product: dict) -> dict:
    offers = product.get("offers") or {}
    if isinstance(offers, list):
        offers = offers[0] if offers else {}
    return offers if isinstance(offers, dict) else {}


def _seller_type(product: dict) -> Optional[str]:
    offers = _offer(product)
    seller = offers.get("seller") or offers.get("offeredBy")
    if not isinstance(seller, dict):
        return None
    seller_type = seller.get("@type")
    if seller_type in AGENCY_SELLER_TYPES:
        return "agency"
    if seller_type == "Person":
        return "private"
    return None


class OtodomScraper(BaseScraper):
    """Scraper for otodom.pl rental listings."""

    site_name = SITE_NAME
    hosts = SUPPORTED_HOSTS

    def parse_listing_page(self, html: str, url: str) -> ListingFields:
        """Parse an Otodom listing page from its JSON-LD."""
        soup = BeautifulSoup(html, "lxml")
        product = find_product_node(soup)
        if not product:
            raise ValueError("Could not find structured data on page (Otodom JSON-LD).")

        area = get_property(product, "powierzchnia")
        rooms = get_property(product, "liczba pokoi") or product.get("numberOfRooms")
        available_from = get_property(product, "dostępne od") or get_property(product, "available from")
        admin = get_property(product, "czynsz")
        deposit = get_property(product, "kaucja")

        amenities = []
        for name in AMENITY_PROPERTIES:
            value = get_property(product, name) or ""
            amenities.extend(item.strip() for item in value.split(",") if item.strip())

        address = product.get("address") or {}
        location = ", ".join(
            part
            for part in (
                address.get("addressLocality"),
                address.get("addressRegion"),
                address.get("streetAddress"),
            )
            if part
        )

        geo = product.get("geo") or {}
        offers = _offer(product)
        title_el = soup.select_one("h1")
        title = title_el.get_text(strip=True) if title_el else product.get("name")

        fields = ListingFields(
            url=url,
            title=title or "Unknown title",
            rent_pln=offers.get("price"),
            admin_pln=admin,
            deposit_pln=deposit,
            admin_raw=admin,
            deposit_raw=deposit,
            area=area,
            area_m2=parse_area(area),
            rooms=str(rooms) if rooms else None,
            available_from=available_from,
            location=location or None,
            latitude=_to_float(geo.get("latitude")),
            longitude=_to_float(geo.get("longitude")),
            amenities=amenities,
            advertiser_type=_seller_type(product),
            description_pl=strip_html(product.get("description")),
        )
        console.print(f"  Parsed: {fields.title} ({fields.rent_pln or '?'} PLN, {area or '?'})")
        return fields
