import pytest
from bs4 import BeautifulSoup

from otodom_summarizer.pipeline import build_summary, summarize_listing
from otodom_summarizer.scrapers import OtodomScraper
from otodom_summarizer.scrapers.otodom import find_product_node, get_property, strip_html


def test_supports_only_otodom_hosts():
    scraper = OtodomScraper()
    assert scraper.supports("https://www.otodom.pl/pl/oferta/abc")
    assert scraper.supports("https://otodom.pl/pl/oferta/abc")
    assert not scraper.supports("https://www.olx.pl/d/oferta/abc")
    assert not scraper.supports("https://nototodom.pl/oferta")


def test_strip_html():
    assert strip_html("<p>Jasne   mieszkanie.</p><p>Kaucja 5000 zł.</p>") == (
        "Jasne mieszkanie. Kaucja 5000 zł."
    )
    assert strip_html(None) == ""


def test_find_product_node_skips_other_blocks(listing_html):
    node = find_product_node(BeautifulSoup(listing_html, "lxml"))
    assert node["name"] == "Mieszkanie 2 pokoje Mokotów"
    assert get_property(node, "czynsz") == "600 zł"
    assert get_property(node, "nieistniejące") is None


def test_parse_listing_page(listing_html, listing_url):
    fields = OtodomScraper().parse_listing_page(listing_html, listing_url)

    assert fields.url == listing_url
    assert fields.title == "Przestronne 2 pokoje na Mokotowie"
    assert fields.rent_pln == 3500
    assert fields.admin_pln == 600
    assert fields.deposit_pln == 5000
    assert fields.admin_raw == "600 zł"
    assert fields.area == "48,5 m²"
    assert fields.area_m2 == 48.5
    assert fields.rooms == "2"
    assert fields.available_from == "2024-10-01"
    assert fields.location == "Warszawa, Mokotów, ul. Puławska"
    assert fields.latitude == 52.19
    assert fields.amenities == ["balkon", "winda", "internet", "telewizja kablowa"]
    assert fields.advertiser_type == "private"
    assert fields.description_pl == "Przestronne mieszkanie. Kaucja 5000 zł."


def test_page_without_structured_data():
    with pytest.raises(ValueError, match="structured data"):
        OtodomScraper().parse_listing_page("<html><body><h1>Oferta</h1></body></html>", "https://www.otodom.pl/x")


def test_summarize_saved_page_offline(listing_html, listing_url):
    summary = summarize_listing(listing_url, html=listing_html, translate=False, with_geo=False)
    data = summary.to_json_dict()

    assert data["site"] == "otodom.pl"
    assert data["rent"] == "3500 PLN"
    assert data["rentPLN"] == 3500
    assert data["totalPLN"] == 4100
    assert data["totalCostDisplay"] == "4100 PLN (~943 EUR)"
    assert data["admin"] == "600 zł"
    assert data["trueDepositPLN"] == 5000
    assert data["trueTotalPLN"] == 4100
    assert data["pricePerM2"] == 85
    assert data["district"]["name"] == "Mokotów"
    assert data["hasTerraceOrBalcony"] is True
    assert data["hasInternet"] is True
    assert "🌿 balcony (balkon)" in data["amenities"]
    assert data["descriptionEN"] == ""
    assert data["distanceKm"] is None
    assert data["advertiserType"] == "private"


def test_summarize_rejects_other_sites(listing_html):
    with pytest.raises(ValueError):
        summarize_listing("https://www.olx.pl/d/oferta/abc", html=listing_html, translate=False)


def test_build_summary_uses_geo(listing_html, listing_url):
    fields = OtodomScraper().parse_listing_page(listing_html, listing_url)
    geo = {"latitude": 52.19, "longitude": 21.02, "distance_km": 4.8, "commute": None}
    summary = build_summary(fields, geo=geo)
    assert summary.distance_km == 4.8
    assert summary.to_json_dict()["distanceKm"] == 4.8
