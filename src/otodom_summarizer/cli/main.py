"""CLI entry point for the Otodom listing summarizer."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

app = typer.Typer(
    name="otodom-summarizer", help="Otodom rental listing summary + description analysis"
)
console = Console()


@app.command()
def summarize(
    url: str = typer.Argument(..., help="Otodom listing URL"),
    html_file: Optional[Path] = typer.Option(
        None, "--html-file", help="Read the page from a saved HTML file instead of fetching it"
    ),
    no_translate: bool = typer.Option(
        False, "--no-translate", help="Skip DeepL translation of the description"
    ),
    no_geo: bool = typer.Option(
        False, "--no-geo", help="Skip geocoding and distance to the base location"
    ),
    commute: bool = typer.Option(
        False, "--commute", "-c", help="Look up walk/bike/drive/transit times"
    ),
    admin_policy: Optional[str] = typer.Option(
        None, "--admin-policy", "-p", help="Admin fee policy (default: OTODOM_ADMIN_FEE_POLICY)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the summary as JSON"),
):
    """
    Summarize one Otodom rental listing.

    Examples:
        otodom-summarizer summarize https://www.otodom.pl/pl/oferta/...
        otodom-summarizer summarize URL --commute --json
        otodom-summarizer summarize URL --html-file saved.html --no-translate
    """
    from otodom_summarizer.pipeline import print_summary, summarize_listing

    html = None
    if html_file is not None:
        if not html_file.exists():
            console.print(f"[red]HTML file not found: {html_file}[/]")
            raise typer.Exit(1)
        html = html_file.read_text(encoding="utf-8")

    try:
        summary = summarize_listing(
            url,
            html=html,
            translate=not no_translate,
            with_geo=not no_geo,
            with_commute=commute,
            admin_policy=admin_policy,
        )
    except ValueError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(1)

    if as_json:
        console.print_json(data=summary.to_json_dict())
    else:
        print_summary(summary)


@app.command()
def analyze(
    description: Optional[str] = typer.Option(
        None, "--description", "-d", help="Polish description text"
    ),
    description_file: Optional[Path] = typer.Option(
        None, "--description-file", "-f", help="File holding the Polish description"
    ),
    translation: str = typer.Option("", "--translation", "-t", help="English translation"),
    rent: Optional[int] = typer.Option(None, "--rent", help="Monthly rent in PLN"),
    admin: Optional[int] = typer.Option(None, "--admin", help="Monthly admin fee in PLN"),
    deposit: Optional[int] = typer.Option(None, "--deposit", help="Deposit in PLN"),
    area: Optional[float] = typer.Option(None, "--area", help="Area in m²"),
    available_from: Optional[str] = typer.Option(
        None, "--available-from", help="Availability date as shown on the listing"
    ),
    admin_policy: Optional[str] = typer.Option(
        None, "--admin-policy", "-p", help="Admin fee policy (default: OTODOM_ADMIN_FEE_POLICY)"
    ),
):
    """
    Analyse a description and listing figures without fetching anything.

    Examples:
        otodom-summarizer analyze -d "Kaucja 5000 zł" --rent 3000 --admin 500
        otodom-summarizer analyze -f opis.txt --area 48 --available-from 2024-09-01
    """
    from otodom_summarizer.analysis import analyze_listing
    from otodom_summarizer.models.listing import ListingFields

    if description and description_file:
        console.print("[red]Use either --description or --description-file, not both.[/]")
        raise typer.Exit(1)

    if description_file is not None:
        if not description_file.exists():
            console.print(f"[red]Description file not found: {description_file}[/]")
            raise typer.Exit(1)
        description = description_file.read_text(encoding="utf-8")

    fields = ListingFields(
        rent_pln=rent,
        admin_pln=admin,
        deposit_pln=deposit,
        area_m2=area,
        available_from=available_from,
        description_pl=description or "",
        description_en=translation,
    )

    try:
        analysis = analyze_listing(fields, admin_policy=admin_policy)
    except ValueError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(1)

    console.print_json(data=analysis.to_dict())


@app.command()
def policies():
    """List the available admin fee policies."""
    from otodom_summarizer.analysis import ADMIN_FEE_POLICIES
    from otodom_summarizer.config.settings import ADMIN_FEE_POLICY

    console.print("[bold]Admin fee policies:[/]")
    for name, policy in ADMIN_FEE_POLICIES.items():
        marker = " [green](default)[/]" if name == ADMIN_FEE_POLICY else ""
        console.print(f"  [cyan]{name}[/]{marker}: {policy.__doc__}")


if __name__ == "__main__":
    app()
