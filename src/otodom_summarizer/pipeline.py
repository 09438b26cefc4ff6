"""Pipeline that turns one listing URL into an enriched summary."""

from typing import Optional

from rich.console import Console
from rich.table import Table

from otodom_summarizer.analysis.insights import has_internet, has_terrace_or_balcony, to_eur
from otodom_summarizer.analysis.reconcile import AdminFeePolicy
from otodom_summarizer.analysis.summary import analyze_listing
from otodom_summarizer.config.settings import CURRENCY, SITE_NAME, BaseLocation
from otodom_summarizer.models.listing import ListingFields, ListingSummary
from otodom_summarizer.scrapers.otodom import OtodomScraper
from otodom_summarizer.utils.amenities import decorate_amenity, find_district
from otodom_summarizer.utils.geo import enrich_with_geo
from otodom_summarizer.utils.translate import translate_to_english

console = Console()


def _display_amount(amount: Optional[int]) -> Optional[str]:
    return f"{amount} {CURRENCY}" if amount else None


def build_summary(
    fields: ListingFields,
    admin_policy: AdminFeePolicy | str | None = None,
    geo: Optional[dict] = None,
) -> ListingSummary:
    """Combine the listing fields, the description analysis and geo data into a summary."""
    analysis = analyze_listing(fields, admin_policy=admin_policy)

    total = None
    if fields.rent_pln:
        total = fields.rent_pln + (fields.admin_pln or 0)

    district = find_district(fields.location)
    geo = geo or {}

    return ListingSummary(
        site=SITE_NAME,
        url=fields.url,
        title=fields.title,
        rent=_display_amount(fields.rent_pln),
        rent_pln=fields.rent_pln,
        admin=fields.admin_raw or _display_amount(fields.admin_pln),
        admin_pln=fields.admin_pln,
        total_pln=total,
        total_cost_display=f"{total} {CURRENCY} (~{to_eur(total)} EUR)" if total else None,
        deposit=fields.deposit_raw or _display_amount(fields.deposit_pln),
        deposit_pln=fields.deposit_pln,
        rooms=fields.rooms,
        area=fields.area,
        available_from=fields.available_from,
        location=fields.location,
        district=district.to_dict() if district else None,
        amenities=[decorate_amenity(a) for a in fields.amenities],
        description_pl=fields.description_pl,
        description_en=fields.description_en,
        has_terrace_or_balcony=has_terrace_or_balcony(fields),
        has_internet=has_internet(fields),
        latitude=geo.get("latitude", fields.latitude),
        longitude=geo.get("longitude", fields.longitude),
        distance_km=geo.get("distance_km"),
        commute=geo.get("commute"),
        **analysis.to_dict(),
    )


def summarize_listing(
    url: str,
    html: Optional[str] = None,
    translate: bool = True,
    with_geo: bool = True,
    with_commute: bool = False,
    admin_policy: AdminFeePolicy | str | None = None,
    base: BaseLocation = None,
) -> ListingSummary:
    """
    Fetch (or take) a listing page and build its enriched summary.

    Args:
        url: Otodom listing URL
        html: Page HTML already on hand; skips the fetch when given
        translate: Translate the description to English via DeepL
        with_geo: Geocode and compute distance to the base location
        with_commute: Also look up routed commute times (needs with_geo)
        admin_policy: Admin fee policy name or function
        base: Reference location for distance / commute
    """
    scraper = OtodomScraper()
    if not scraper.supports(url):
        raise ValueError("Right now this works best on Otodom listing pages.")

    if html is None:
        fields = scraper.scrape(url)
    else:
        fields = scraper.parse_listing_page(html, url)

    if translate and fields.description_pl:
        console.print("[bold cyan]Translating description...[/]")
        fields = fields.model_copy(
            update={"description_en": translate_to_english(fields.description_pl)}
        )

    geo = None
    if with_geo:
        console.print("[bold cyan]Resolving location...[/]")
        geo = enrich_with_geo(
            fields.latitude,
            fields.longitude,
            location=fields.location,
            base=base,
            with_commute=with_commute,
        )

    console.print("[bold cyan]Analysing description...[/]")
    return build_summary(fields, admin_policy=admin_policy, geo=geo)


def print_summary(summary: ListingSummary) -> None:
    """Print a formatted summary of one listing."""
    console.print(f"\n[bold cyan]═══ {summary.title or summary.url} ═══[/]")

    table = Table(show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    rows = [
        ("Rent", summary.rent),
        ("Admin", summary.admin),
        ("Total", summary.total_cost_display),
        ("Deposit", summary.deposit),
        ("True deposit", _display_amount(summary.true_deposit_pln)),
        ("True total", _display_amount(summary.true_total_pln)),
        ("Area", summary.area),
        ("Rooms", summary.rooms),
        ("Price per m²", _display_amount(summary.price_per_m2)),
        ("Available from", summary.available_from),
        ("Location", summary.location),
        ("Distance", f"{summary.distance_km} km" if summary.distance_km is not None else None),
        ("Advertiser", summary.advertiser_type),
    ]
    for label, value in rows:
        table.add_row(label, str(value) if value is not None else "-")
    console.print(table)

    if summary.commute:
        commute = summary.commute
        modes = [
            f"{label} {commute[key]} min"
            for label, key in (
                ("walk", "walk_min"),
                ("bike", "bike_min"),
                ("drive", "drive_min"),
                ("transit", "transit_min"),
            )
            if commute.get(key) is not None
        ]
        if modes:
            console.print(f"[cyan]Commute:[/] {', '.join(modes)}")

    risk = summary.risk
    colour = {"Low": "green", "Medium": "yellow", "High": "red"}.get(risk.get("level"), "white")
    console.print(
        f"\n[bold {colour}]Risk: {risk.get('level')} "
        f"(score {risk.get('score')}, confidence {risk.get('confidence')}%)[/]"
    )
    for note in risk.get("notes", []):
        console.print(f"  • {note}")

    inconsistencies = summary.description_analysis.get("inconsistencies", [])
    if inconsistencies:
        console.print("\n[bold red]Inconsistencies:[/]")
        for item in inconsistencies:
            console.print(f"  ({item['severity']}) {item['message']}")

    if summary.trust_breakdown:
        trust = summary.trust_breakdown
        console.print(
            f"\n[bold]Trust: {trust['percentage']}% ({trust['passed']}/{trust['total']} checks, "
            f"{trust['level']})[/]"
        )

    if summary.insights:
        console.print("\n[bold]Insights:[/]")
        for insight in summary.insights:
            console.print(f"  • {insight}")
