import pytest

from otodom_summarizer.analysis import analyze_listing
from otodom_summarizer.analysis.summary import price_per_m2
from otodom_summarizer.models.listing import ListingText

OUTPUT_KEYS = {
    "trueDepositPLN",
    "trueAdminPLN",
    "trueTotalPLN",
    "pricePerM2",
    "hiddenUtilities",
    "additionalFees",
    "additionalFeesTotal",
    "hasMeteredFees",
    "meteredFeeTypes",
    "advertiserType",
    "descriptionAnalysis",
    "insights",
    "risk",
    "trustBreakdown",
}


def test_deposit_conflict_scenario(make_fields):
    fields = make_fields(rent_pln=3000, deposit_pln=3000, description_pl="Deposit: 4500 PLN, refundable.")
    result = analyze_listing(fields, admin_policy="trust_structured").to_dict()

    assert set(result) == OUTPUT_KEYS
    assert result["trueDepositPLN"] == 4500
    inconsistencies = result["descriptionAnalysis"]["inconsistencies"]
    assert [(i["type"], i["severity"]) for i in inconsistencies] == [("deposit_mismatch", "high")]
    assert "3000" in inconsistencies[0]["message"]
    assert "4500" in inconsistencies[0]["message"]

    notes = result["risk"]["notes"]
    assert inconsistencies[0]["message"] in notes
    assert "Admin fee not specified and no utility costs mentioned" in notes
    assert result["risk"]["score"] == 6
    assert result["risk"]["level"] == "High"


def test_hidden_utilities_scenario(make_fields):
    fields = make_fields(
        rent_pln=2800,
        description_pl="Mieszkanie do wynajęcia. Media ok. 100-150 zł na osobę miesięcznie.",
    )
    result = analyze_listing(fields, admin_policy="trust_structured").to_dict()

    assert result["hiddenUtilities"]["min"] == 100
    assert result["hiddenUtilities"]["max"] == 150
    assert result["hiddenUtilities"]["avg"] == 125
    inconsistencies = result["descriptionAnalysis"]["inconsistencies"]
    assert [(i["type"], i["severity"]) for i in inconsistencies] == [("hidden_utilities", "medium")]
    assert result["trueAdminPLN"] is None
    assert result["trueTotalPLN"] == 2800


def test_admin_fee_is_not_read_as_utilities(make_fields):
    fields = make_fields(
        rent_pln=3000,
        description_pl="Media według zużycia. Czynsz 450 zł miesięcznie.",
    )
    result = analyze_listing(fields).to_dict()

    assert result["hiddenUtilities"] is None
    assert result["descriptionAnalysis"]["inconsistencies"] == []
    assert result["hasMeteredFees"] is True


def test_alternative_admin_policy(make_fields):
    fields = make_fields(
        rent_pln=2800,
        description_pl="Media ok. 100-150 zł na osobę miesięcznie.",
    )
    result = analyze_listing(fields, admin_policy="utilities_when_missing").to_dict()
    assert result["trueAdminPLN"] == 125
    assert result["trueTotalPLN"] == 2925


def test_no_registration_scenario(make_fields, long_description):
    base = dict(rent_pln=3000, admin_pln=500, deposit_pln=3000, area_m2=50, available_from="od zaraz")
    plain = analyze_listing(make_fields(**base, description_pl=long_description))
    flagged = analyze_listing(
        make_fields(**base, description_pl=long_description + " Bez zameldowania.")
    )

    analysis = flagged.to_dict()["descriptionAnalysis"]
    assert analysis["registrationAllowed"] is False
    assert [i["type"] for i in analysis["inconsistencies"]] == ["no_registration"]
    assert flagged.risk.score - plain.risk.score == 2
    assert "Address registration (zameldowanie) not possible" in flagged.risk.notes


def test_empty_listing_scenario(make_fields):
    analysis = analyze_listing(make_fields(description_pl=""))
    result = analysis.to_dict()

    assert result["descriptionAnalysis"]["inconsistencies"] == []
    assert result["risk"]["score"] == 4
    assert result["risk"]["level"] == "Medium"
    assert result["risk"]["confidence"] == 80
    assert result["trueTotalPLN"] is None
    assert result["pricePerM2"] is None
    assert result["advertiserType"] == "unknown"
    assert result["descriptionAnalysis"]["contractTerms"] is None
    assert result["descriptionAnalysis"]["notaryInfo"] is None


def test_translation_is_scanned_too(make_fields):
    fields = make_fields(
        rent_pln=3000,
        description_pl="Mieszkanie w centrum.",
        description_en="Apartment in the centre. No registration possible.",
    )
    result = analyze_listing(fields).to_dict()
    assert result["descriptionAnalysis"]["registrationAllowed"] is False


def test_explicit_text_overrides_fields(make_fields):
    fields = make_fields(rent_pln=3000, description_pl="kaucja 9000 zł")
    analysis = analyze_listing(fields, text=ListingText("kaucja 6000 zł"))
    assert analysis.reconciled.true_deposit == 6000


def test_insights_and_notary_info(make_fields, long_description):
    fields = make_fields(
        rent_pln=3000,
        admin_pln=500,
        deposit_pln=3000,
        area_m2=50,
        available_from="2024-10-01",
        location="Warszawa, Mokotów",
        amenities=["balkon", "internet"],
        description_pl=long_description
        + " Najem okazjonalny, właściciel pokrywa 50% kosztów. Minimum 12 miesięcy.",
    )
    result = analyze_listing(fields).to_dict()

    assert result["pricePerM2"] == 70
    assert "Price per m²: 70 PLN (~16 EUR)" in result["insights"]
    assert "Includes terrace or balcony" in result["insights"]
    assert "Internet included / available in building" in result["insights"]
    assert "Minimum contract length: 12 months" in result["insights"]
    assert any(insight.startswith("Mokotów:") for insight in result["insights"])

    analysis = result["descriptionAnalysis"]
    assert analysis["contractTerms"] == {"minimumMonths": 12}
    assert analysis["notaryInfo"]["required"] is True
    assert analysis["notaryInfo"]["ownerSharePercent"] == 50


def test_unknown_policy_name_is_rejected(make_fields):
    with pytest.raises(ValueError):
        analyze_listing(make_fields(), admin_policy="guess")


def test_price_per_m2():
    assert price_per_m2(3500, 50) == 70
    assert price_per_m2(4100, 48.5) == 85
    assert price_per_m2(None, 50) is None
    assert price_per_m2(3500, None) is None
