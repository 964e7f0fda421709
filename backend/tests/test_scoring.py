from rams.config import get_settings
from rams.models.enums import Severity
from rams.schemas.rams import FormSnapshot
from rams.services.compliance.scoring import (
    build_score_details,
    build_summary,
    calculate_score,
    generate_recommendations,
)
from rams.services.compliance.severity import parse_severity, severity_weights
from rams.services.compliance.suggestion import Suggestion, suggestion_to_dict


def _s(severity: Severity, field: str = "controls", message: str = "Issue") -> Suggestion:
    return Suggestion(field=field, severity=severity, message=message)


def test_empty_suggestions_score_100():
    assert calculate_score([]) == 100


def test_canonical_weights():
    assert calculate_score([_s(Severity.CRITICAL)]) == 65
    assert calculate_score([_s(Severity.HIGH)]) == 75
    assert calculate_score([_s(Severity.MEDIUM)]) == 90
    assert calculate_score([_s(Severity.LOW)]) == 95


def test_score_clamped_at_zero():
    assert calculate_score([_s(Severity.CRITICAL)] * 4) == 0


def test_score_clamped_at_100_with_bonuses():
    snapshot = FormSnapshot(reviewed_by="A. Reviewer", emergency_contacts="Major trauma centre")
    assert calculate_score([], snapshot) == 100


def test_bonuses_offset_deductions():
    snapshot = FormSnapshot(
        reviewed_by="A. Reviewer",
        emergency_contacts="Nearest major trauma centre: Royal Infirmary",
        controls="x" * 501,
        method_statement="y" * 1001,
    )
    # 100 - 25 + 5 + 3 + 5 + 5
    assert calculate_score([_s(Severity.HIGH)], snapshot) == 93


def test_weights_from_settings(monkeypatch):
    monkeypatch.setenv("SCORE_WEIGHT_HIGH", "40")
    get_settings.cache_clear()
    assert severity_weights()[Severity.HIGH] == 40
    assert calculate_score([_s(Severity.HIGH)]) == 60


def test_explicit_weights():
    weights = {Severity.HIGH: 50}
    assert calculate_score([_s(Severity.HIGH), _s(Severity.LOW)], weights=weights) == 50


def test_summary_counts():
    summary = build_summary([_s(Severity.HIGH), _s(Severity.CRITICAL), _s(Severity.LOW)])
    assert summary == {
        "isValid": False,
        "errorCount": 2,
        "warningCount": 1,
        "message": "Found 2 errors and 1 warning.",
    }


def test_summary_all_passed():
    summary = build_summary([])
    assert summary["isValid"] is True
    assert summary["message"] == "All validations passed successfully."


def test_score_details():
    details = build_score_details(65, [_s(Severity.CRITICAL)])
    assert details["bySeverity"]["critical"] == 1
    assert details["weights"]["critical"] == 35
    assert details["suggestionCount"] == 1


def test_recommendations():
    suggestions = [_s(Severity.LOW, message=f"Issue {i}") for i in range(5)]
    suggestions.append(_s(Severity.CRITICAL, message="Isolation missing"))

    recommendations = generate_recommendations(FormSnapshot(), suggestions)

    assert any("phases" in r for r in recommendations)
    assert any("supervisor review" in r for r in recommendations)
    assert any("competency" in r.lower() for r in recommendations)
    assert recommendations[-1].endswith("Isolation missing")


def test_no_recommendations_for_reviewed_competent_form():
    snapshot = FormSnapshot(reviewed_by="A. Reviewer", competent_person_verified=True)
    assert generate_recommendations(snapshot, []) == []


def test_parse_severity_lenient():
    assert parse_severity("HIGH") == Severity.HIGH
    assert parse_severity(" low ") == Severity.LOW
    assert parse_severity("urgent") == Severity.MEDIUM
    assert parse_severity(None) == Severity.MEDIUM


def test_suggestion_to_dict_is_camel_case():
    d = suggestion_to_dict(Suggestion(
        field="controls",
        severity=Severity.HIGH,
        message="Issue",
        rule_id="WAH001",
        auto_fix_content="Block",
    ))
    assert d["id"] == "WAH001"
    assert d["severity"] == "high"
    assert d["autoFixContent"] == "Block"
    assert d["regulation"] is None
