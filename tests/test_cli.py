import json

from typer.testing import CliRunner

from otodom_summarizer.cli.main import app

runner = CliRunner()


def test_analyze_prints_json():
    result = runner.invoke(
        app,
        ["analyze", "--description", "Mieszkanie bez zameldowania.", "--rent", "3000", "--admin", "500"],
    )
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["trueTotalPLN"] == 3500
    assert data["descriptionAnalysis"]["registrationAllowed"] is False
    assert "Address registration (zameldowanie) not possible" in data["risk"]["notes"]


def test_analyze_reads_description_file(tmp_path):
    path = tmp_path / "opis.txt"
    path.write_text("Kaucja 6000 zł. Media ok. 100-150 zł na osobę miesięcznie.", encoding="utf-8")

    result = runner.invoke(
        app,
        ["analyze", "--description-file", str(path), "--rent", "3000", "--admin-policy", "utilities_when_missing"],
    )
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["trueDepositPLN"] == 6000
    assert data["trueAdminPLN"] == 125


def test_analyze_rejects_unknown_policy():
    result = runner.invoke(app, ["analyze", "--description", "x", "--admin-policy", "guess"])
    assert result.exit_code == 1
    assert "Unknown admin fee policy" in result.output


def test_analyze_rejects_both_description_sources(tmp_path):
    path = tmp_path / "opis.txt"
    path.write_text("x", encoding="utf-8")
    result = runner.invoke(app, ["analyze", "--description", "x", "--description-file", str(path)])
    assert result.exit_code == 1


def test_summarize_saved_page(tmp_path, listing_html, listing_url):
    path = tmp_path / "listing.html"
    path.write_text(listing_html, encoding="utf-8")

    result = runner.invoke(
        app, ["summarize", listing_url, "--html-file", str(path), "--no-translate", "--no-geo", "--json"]
    )
    assert result.exit_code == 0
    assert '"rentPLN": 3500' in result.output
    assert '"trueTotalPLN": 4100' in result.output


def test_summarize_table_output(tmp_path, listing_html, listing_url):
    path = tmp_path / "listing.html"
    path.write_text(listing_html, encoding="utf-8")

    result = runner.invoke(app, ["summarize", listing_url, "--html-file", str(path), "--no-translate", "--no-geo"])
    assert result.exit_code == 0
    assert "Risk:" in result.output
    assert "Trust:" in result.output


def test_summarize_rejects_other_sites():
    result = runner.invoke(app, ["summarize", "https://www.olx.pl/d/oferta/abc", "--no-translate"])
    assert result.exit_code == 1
    assert "Otodom" in result.output


def test_policies_lists_all_policies():
    result = runner.invoke(app, ["policies"])
    assert result.exit_code == 0
    for name in ("trust_structured", "utilities_when_missing", "utilities_below_floor"):
        assert name in result.output
