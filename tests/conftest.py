# tests/conftest.py
import json

import pytest

from otodom_summarizer.models.listing import ListingFields

LISTING_URL = "https://www.otodom.pl/pl/oferta/przestronne-2-pokoje-mokotow-ID4abcd"


def _product_node():
    return {
        "@type": "Product",
        "name": "Mieszkanie 2 pokoje Mokotów",
        "description": "<p>Przestronne mieszkanie.</p><p>Kaucja 5000 zł.</p>",
        "offers": {
            "@type": "Offer",
            "price": "3500",
            "priceCurrency": "PLN",
            "seller": {"@type": "Person", "name": "Anna"},
        },
        "address": {
            "addressLocality": "Warszawa",
            "addressRegion": "Mokotów",
            "streetAddress": "ul. Puławska",
        },
        "geo": {"latitude": 52.19, "longitude": 21.02},
        "additionalProperty": [
            {"name": "Powierzchnia", "value": "48,5 m²"},
            {"name": "Liczba pokoi", "value": "2"},
            {"name": "Czynsz", "value": "600 zł"},
            {"name": "Kaucja", "value": "5 000 zł"},
            {"name": "Dostępne od", "value": "2024-10-01"},
            {"name": "Informacje dodatkowe", "value": "balkon, winda"},
            {"name": "Media", "value": "internet, telewizja kablowa"},
        ],
    }


@pytest.fixture
def listing_url():
    return LISTING_URL


@pytest.fixture
def listing_html():
    """Otodom-like page: a breadcrumb block followed by an @graph holding the listing."""
    breadcrumb = {"@context": "https://schema.org", "@type": "BreadcrumbList"}
    graph = {"@context": "https://schema.org", "@graph": [_product_node()]}
    # Live pages write "</" as "<\/" inside JSON-LD
    graph_json = json.dumps(graph, ensure_ascii=False).replace("</", "<\\/")
    return (
        "<html><head>"
        f'<script type="application/ld+json">{json.dumps(breadcrumb)}</script>'
        f'<script type="application/ld+json">{graph_json}</script>'
        "</head><body><h1>Przestronne 2 pokoje na Mokotowie</h1></body></html>"
    )


@pytest.fixture
def long_description():
    """A description comfortably above the short-description threshold."""
    return (
        "Do wynajęcia przestronne, jasne mieszkanie w spokojnej okolicy. "
        "Mieszkanie jest w pełni umeblowane i wyposażone, gotowe do zamieszkania od zaraz. "
        "W pobliżu sklepy, szkoły, przedszkola oraz park. Bardzo dobra komunikacja z centrum miasta. "
    )


@pytest.fixture
def make_fields():
    def _make(**kwargs):
        return ListingFields(**kwargs)

    return _make
