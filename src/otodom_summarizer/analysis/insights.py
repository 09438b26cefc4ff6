"""Human-readable insights for expats reading a Polish listing."""

from otodom_summarizer.analysis.amounts import round_half_up
from otodom_summarizer.config.settings import PLN_TO_EUR
from otodom_summarizer.models.listing import ListingFields
from otodom_summarizer.utils.amenities import find_district

FEE_LABELS = {
    "fee-internet": "internet",
    "fee-tv": "TV",
    "fee-parking": "parking",
    "fee-combo": "internet + TV",
}


def _amenities_text(fields: ListingFields) -> str:
    return " ".join(fields.amenities).lower()


def has_terrace_or_balcony(fields: ListingFields) -> bool:
    text = _amenities_text(fields)
    return "taras" in text or "balkon" in text


def has_internet(fields: ListingFields) -> bool:
    return "internet" in _amenities_text(fields)


def to_eur(amount_pln: float) -> int:
    return round_half_up(amount_pln * PLN_TO_EUR)


def generate_insights(fields: ListingFields, analysis) -> list[str]:
    """Build the insight list from listing fields and a ListingAnalysis."""
    insights = []
    reconciled = analysis.reconciled
    policies = analysis.policies

    if analysis.price_per_m2:
        insights.append(
            f"Price per m²: {analysis.price_per_m2} PLN (~{to_eur(analysis.price_per_m2)} EUR)"
        )

    if fields.available_from:
        insights.append(f"Available from: {fields.available_from}")

    if has_terrace_or_balcony(fields):
        insights.append("Includes terrace or balcony")

    if has_internet(fields):
        insights.append("Internet included / available in building")

    if reconciled.advertiser_type == "agency":
        insights.append("Listed by an agency: ask whether a commission is charged")
    elif reconciled.advertiser_type == "private":
        insights.append("Listed privately, usually no agency commission")

    if policies.contract_minimum_months:
        insights.append(f"Minimum contract length: {policies.contract_minimum_months} months")

    utilities = reconciled.hidden_utilities
    if utilities:
        insights.append(
            f"Utilities mentioned in description: {utilities.min}-{utilities.max} PLN "
            f"per person/month (avg {utilities.avg} PLN)"
        )

    if reconciled.additional_fees:
        labels = ", ".join(FEE_LABELS[fee.kind] for fee in reconciled.additional_fees)
        insights.append(
            f"Extra fees in description: {reconciled.additional_fees_total} PLN/month ({labels})"
        )

    if analysis.amounts.has_metered_fees:
        kinds = ", ".join(analysis.amounts.metered_fee_types) or "utilities"
        insights.append(f"Billed by meter: {kinds}")

    district = find_district(fields.location)
    if district:
        insights.append(f"{district.name}: {district.description}")

    return insights
