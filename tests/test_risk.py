from otodom_summarizer.analysis.inconsistencies import Inconsistency
from otodom_summarizer.analysis.risk import (
    RiskSignals,
    TrustBreakdown,
    TrustCheck,
    assess_risk,
    build_trust_breakdown,
    confidence_for,
    risk_level,
)

COMPLETE = dict(
    rent=3000,
    true_admin=500,
    true_deposit=3000,
    structured_deposit=3000,
    price_per_m2=70,
    description_length=300,
    available_from="2024-10-01",
)


def test_risk_level_thresholds():
    assert risk_level(0) == "Low"
    assert risk_level(2) == "Low"
    assert risk_level(3) == "Medium"
    assert risk_level(5) == "Medium"
    assert risk_level(6) == "High"


def test_confidence_has_a_floor():
    assert confidence_for(0) == 100
    assert confidence_for(4) == 80
    assert confidence_for(12) == 40
    assert confidence_for(20) == 40


def test_empty_signals_score_only_missing_fields():
    risk = assess_risk(RiskSignals())
    assert risk.score == 4
    assert risk.level == "Medium"
    assert risk.confidence == 80
    assert list(risk.notes) == [
        "Admin fee not specified and no utility costs mentioned",
        "Deposit not specified",
        "Very short description",
        "Availability date not specified",
    ]


def test_complete_listing_has_no_risk():
    risk = assess_risk(RiskSignals(**COMPLETE))
    assert risk.score == 0
    assert risk.level == "Low"
    assert risk.notes == ()


def test_high_deposit_and_admin():
    signals = RiskSignals(**{**COMPLETE, "rent": 2000, "true_admin": 1500, "true_deposit": 5000})
    risk = assess_risk(signals)
    assert risk.score == 3
    assert risk.notes[0] == "High deposit: 5000 PLN (more than 2× monthly rent)"
    assert risk.notes[1].startswith("Admin / utilities (1500 PLN)")


def test_price_per_m2_outside_market_range():
    assert assess_risk(RiskSignals(**{**COMPLETE, "price_per_m2": 200})).score == 2
    assert assess_risk(RiskSignals(**{**COMPLETE, "price_per_m2": 30})).score == 2
    assert assess_risk(RiskSignals(**{**COMPLETE, "price_per_m2": 150})).score == 0


def test_inconsistencies_add_severity_points():
    mismatch = Inconsistency("deposit_mismatch", "high", "Deposit mismatch")
    utilities = Inconsistency("hidden_utilities", "medium", "Hidden utilities")
    risk = assess_risk(RiskSignals(**COMPLETE, inconsistencies=(mismatch, utilities)))
    assert risk.score == 5
    assert list(risk.notes) == ["Deposit mismatch", "Hidden utilities"]


def test_no_registration_is_scored_once():
    no_registration = Inconsistency("no_registration", "medium", "No registration")
    signals = RiskSignals(
        **COMPLETE, registration_allowed=False, inconsistencies=(no_registration,)
    )
    risk = assess_risk(signals)
    assert risk.score == 2
    assert list(risk.notes) == ["Address registration (zameldowanie) not possible"]


def test_notary_requirement_adds_a_point():
    assert assess_risk(RiskSignals(**COMPLETE, notary_required=True)).score == 1


def test_trust_breakdown_complete_listing():
    trust = build_trust_breakdown(RiskSignals(**COMPLETE))
    assert trust.total == 8
    assert trust.passed == 8
    assert trust.percentage == 100
    assert trust.level == "high"


def test_trust_breakdown_empty_listing():
    trust = build_trust_breakdown(RiskSignals())
    passed = [check.label for check in trust.checks if check.passed]
    assert passed == ["No price contradictions", "Registration allowed"]
    assert trust.percentage == 25
    assert trust.level == "low"


def test_trust_percentage_rounds_half_up():
    checks = tuple(TrustCheck("pricing", f"check {i}", i < 5, "") for i in range(8))
    trust = TrustBreakdown(checks)
    assert trust.percentage == 63
    assert trust.level == "medium"
    assert trust.to_dict()["passed"] == 5
