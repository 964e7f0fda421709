import pytest

from rams.models.enums import Hazard, PPEItem, Regulation, Severity
from rams.schemas.rams import FormSnapshot
from rams.services.compliance.autofix import apply_rule_fix
from rams.services.compliance.rules import RULES, RULES_BY_ID, get_rule

# A snapshot that violates each rule
VIOLATING = {
    "CDM001": {},
    "CDM002": {},
    "CDM003": {},
    "CDM004": {},
    "CDM005": {"methodStatement": "short"},
    "CDM006": {"methodStatement": "Work safely and follow standard procedure."},
    "CDM007": {},
    "CDM008": {"controls": "Barriers."},
    "CDM009": {},
    "CDM010": {"trade": "Electrician", "controls": "Barriers in place."},
    "COSHH001": {
        "selectedHazards": ["Hazardous Substances (COSHH)"],
        "controls": "Gloves worn.",
    },
    "COSHH002": {
        "selectedHazards": ["Hazardous Substances (COSHH)"],
        "controls": "COSHH assessment completed.",
    },
    "COSHH003": {
        "selectedHazards": ["Hazardous Substances (COSHH)"],
        "controls": "COSHH assessment completed.",
    },
    "COSHH004": {
        "scopeOfWork": "Painting of the stairwell walls",
        "controls": "Barriers in place.",
    },
    "RIDDOR001": {"emergencyContacts": "Site manager 07700 900123"},
    "RIDDOR002": {"emergencyContacts": "HSE 0345 300 9923"},
    "WAH001": {"selectedHazards": ["Working at Height"], "controls": ""},
    "WAH002": {
        "selectedHazards": ["Working at Height"],
        "controls": "Full body harness worn at all times.",
    },
    "MH001": {"selectedHazards": ["Manual Handling"], "controls": "Team lifts."},
    "MH002": {
        "selectedHazards": ["Manual Handling"],
        "controls": "Manual handling assessment done.",
    },
    "PPE001": {"selectedHazards": ["Working at Height"], "selectedPPE": ["Hard Hat"]},
}


def test_every_rule_has_a_violating_case():
    assert set(VIOLATING) == set(RULES_BY_ID)


def test_rule_ids_unique_and_fields_known():
    assert len(RULES) == len(RULES_BY_ID)
    for rule in RULES:
        assert FormSnapshot.resolve_field(rule.field) is not None


def test_rules_grouped_in_regulation_order():
    order = list(Regulation)
    positions = [order.index(rule.regulation) for rule in RULES]
    assert positions == sorted(positions)


@pytest.mark.parametrize("rule_id", sorted(VIOLATING))
def test_fix_resolves_violation(rule_id):
    rule = get_rule(rule_id)
    snapshot = FormSnapshot.model_validate(VIOLATING[rule_id])
    assert rule.is_violated(snapshot)

    fixed = apply_rule_fix(snapshot, rule_id)

    assert not rule.is_violated(fixed)


@pytest.mark.parametrize("rule_id", sorted(VIOLATING))
def test_fix_is_idempotent(rule_id):
    snapshot = FormSnapshot.model_validate(VIOLATING[rule_id])
    once = apply_rule_fix(snapshot, rule_id)
    twice = apply_rule_fix(once, rule_id)
    assert twice == once


def test_fix_is_deterministic():
    snapshot = FormSnapshot.model_validate(VIOLATING["COSHH004"])
    rule = get_rule("COSHH004")
    assert rule.fix(snapshot) == rule.fix(snapshot)


def test_append_fix_keeps_existing_text():
    snapshot = FormSnapshot.model_validate(VIOLATING["WAH001"] | {"controls": "Barriers."})
    fixed = apply_rule_fix(snapshot, "WAH001")
    assert fixed.controls.startswith("Barriers.")
    assert "scaffold" in fixed.controls.lower()


def test_ppe_fix_returns_tag_list():
    snapshot = FormSnapshot.model_validate(VIOLATING["PPE001"])
    content = get_rule("PPE001").fix(snapshot)
    assert isinstance(content, list)
    assert PPEItem.FALL_ARREST_HARNESS.value in content
    assert PPEItem.HARD_HAT.value in content


def test_coshh_fix_names_substances_from_scope():
    snapshot = FormSnapshot.model_validate(VIOLATING["COSHH004"])
    text = get_rule("COSHH004").fix(snapshot)
    assert "Paint" in text
    assert "Safety Data Sheet" in text


def test_isolation_rule_is_critical_for_electrical_hazard():
    rule = get_rule("CDM010")
    snapshot = FormSnapshot(selected_hazards=[Hazard.ELECTRICAL], controls="Barriers.")
    assert rule.severity == Severity.CRITICAL
    assert rule.is_violated(snapshot)


def test_hazard_rules_do_not_apply_without_hazard():
    snapshot = FormSnapshot(controls="Barriers.")
    for rule_id in ("COSHH001", "WAH001", "MH001", "PPE001"):
        assert not get_rule(rule_id).is_violated(snapshot)


def test_whitespace_reads_as_absent():
    snapshot = FormSnapshot(project_name="   ")
    assert get_rule("CDM001").is_violated(snapshot)


def test_get_rule_unknown():
    assert get_rule("NOPE001") is None
