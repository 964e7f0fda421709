import json

from rams.models.enums import Severity
from rams.schemas.rams import FormSnapshot
from rams.services.ai import AIServiceError
from rams.services.compliance.augmenter import (
    AugmentDegraded,
    AugmentOk,
    augment_with_ai,
    merge_suggestions,
    parse_suggestion_payload,
)
from rams.services.compliance.suggestion import Suggestion

AI_ITEMS = [
    {
        "field": "methodStatement",
        "severity": "high",
        "message": "The method statement lacks a waste removal step.",
        "suggestion": "Add waste removal.",
        "autoFixContent": "4. Waste Removal: All waste to the designated skip.",
    },
    {
        "field": "controls",
        "severity": "urgent",
        "message": "Controls do not mention supervision.",
    },
]


def test_not_configured_is_degraded_without_calling():
    result = augment_with_ai(FormSnapshot())
    assert isinstance(result, AugmentDegraded)
    assert result.suggestions == []
    assert result.reason == "AI not configured"


def test_parses_json_array(fake_ai):
    fake_ai.content = json.dumps(AI_ITEMS)

    result = augment_with_ai(FormSnapshot(project_name="Block C"))

    assert isinstance(result, AugmentOk)
    assert [s.field for s in result.suggestions] == ["methodStatement", "controls"]
    first, second = result.suggestions
    assert first.severity == Severity.HIGH
    assert first.auto_fix_content.startswith("4. Waste Removal")
    assert first.source == "ai"
    assert second.severity == Severity.MEDIUM
    assert "Block C" in fake_ai.calls[0]["user_prompt"]


def test_parses_fenced_json(fake_ai):
    fake_ai.content = "```json\n" + json.dumps(AI_ITEMS) + "\n```"
    result = augment_with_ai(FormSnapshot())
    assert len(result.suggestions) == 2


def test_parses_suggestions_object(fake_ai):
    fake_ai.content = json.dumps({"suggestions": AI_ITEMS[:1]})
    result = augment_with_ai(FormSnapshot())
    assert len(result.suggestions) == 1


def test_recovers_embedded_array(fake_ai):
    fake_ai.content = "Here are the issues:\n" + json.dumps(AI_ITEMS) + "\nThanks."
    result = augment_with_ai(FormSnapshot())
    assert isinstance(result, AugmentOk)
    assert len(result.suggestions) == 2


def test_empty_array_means_compliant(fake_ai):
    fake_ai.content = "[]"
    result = augment_with_ai(FormSnapshot())
    assert isinstance(result, AugmentOk)
    assert result.suggestions == []


def test_text_line_fallback():
    content = (
        "Field: controls\n"
        "Severity: high\n"
        "Message: No supervision arrangements.\n"
        "Suggestion: Name the supervisor.\n"
        "\n"
        "Field: emergencyContacts\n"
        "Message: No first aider listed.\n"
    )
    items = parse_suggestion_payload(content)
    assert items == [
        {
            "field": "controls",
            "severity": "high",
            "message": "No supervision arrangements.",
            "suggestion": "Name the supervisor.",
        },
        {"field": "emergencyContacts", "message": "No first aider listed."},
    ]


def test_unparseable_reply_is_degraded(fake_ai):
    fake_ai.content = "I cannot help with that."
    result = augment_with_ai(FormSnapshot())
    assert isinstance(result, AugmentDegraded)
    assert result.suggestions == []


def test_service_error_is_degraded(fake_ai):
    fake_ai.error = AIServiceError("AI request timed out")
    result = augment_with_ai(FormSnapshot())
    assert isinstance(result, AugmentDegraded)
    assert result.reason == "AI request timed out"


def test_unexpected_error_is_degraded(fake_ai):
    fake_ai.error = KeyError("usage")
    result = augment_with_ai(FormSnapshot())
    assert isinstance(result, AugmentDegraded)


def test_unknown_and_unsupported_fields_dropped(fake_ai):
    fake_ai.content = json.dumps([
        {"field": "weather", "severity": "low", "message": "Check the forecast."},
        {"field": "selectedPPE", "severity": "low", "message": "Add gloves."},
        {"field": "controls", "severity": "low"},
        {"field": "scope_of_work", "severity": "low", "message": "Name the floors."},
    ])
    result = augment_with_ai(FormSnapshot())
    assert [s.field for s in result.suggestions] == ["scopeOfWork"]


def test_merge_drops_duplicates():
    rule = Suggestion(field="controls", severity=Severity.HIGH, message="Add isolation.")
    dup = Suggestion(field="controls", severity=Severity.LOW, message="add isolation. ", source="ai")
    extra = Suggestion(field="controls", severity=Severity.LOW, message="Name the supervisor.", source="ai")

    merged = merge_suggestions([rule], [dup, extra])

    assert merged == [rule, extra]
