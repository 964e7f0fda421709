"""Canonical compliance rule registry.

Each rule is a plain record: a precondition (``applies``), a compliance
predicate (``check``, True means compliant) and a fix generator that
produces replacement content for the rule's target field. A rule is
violated when it applies and its check fails.

Predicates and generators must be pure functions of the snapshot. Absent
or empty fields read as "not satisfied".

Rules are loaded once at import; ``RULES`` is immutable and ordered by
declaration within each regulation.
"""

from collections.abc import Callable
from dataclasses import dataclass

from rams.models.enums import Hazard, PPEItem, Regulation, Severity
from rams.schemas.rams import FormSnapshot

from . import templates as t

FixContent = str | list[str]


def _always(snapshot: FormSnapshot) -> bool:
    return True


@dataclass(frozen=True)
class Rule:
    id: str
    regulation: Regulation
    field: str  # wire alias of the target field
    severity: Severity
    message: str
    check: Callable[[FormSnapshot], bool]
    fix: Callable[[FormSnapshot], FixContent]
    applies: Callable[[FormSnapshot], bool] = _always
    suggestion: str | None = None
    references: tuple[str, ...] = ()

    def is_violated(self, snapshot: FormSnapshot) -> bool:
        return self.applies(snapshot) and not self.check(snapshot)


# ---------------------------------------------------------------------------
# Predicate helpers
# ---------------------------------------------------------------------------


def _present(attr: str) -> Callable[[FormSnapshot], bool]:
    def check(snapshot: FormSnapshot) -> bool:
        return bool(snapshot.text(attr))
    return check


def _mentions(attr: str, *keywords: str) -> Callable[[FormSnapshot], bool]:
    def check(snapshot: FormSnapshot) -> bool:
        return t.contains_any(snapshot.text(attr), keywords)
    return check


def _hazard(hazard: Hazard) -> Callable[[FormSnapshot], bool]:
    def applies(snapshot: FormSnapshot) -> bool:
        return snapshot.has_hazard(hazard)
    return applies


def _append_to(attr: str, block: str | Callable[[FormSnapshot], str]) -> Callable[[FormSnapshot], str]:
    def fix(snapshot: FormSnapshot) -> str:
        text = block(snapshot) if callable(block) else block
        return t.append_block(getattr(snapshot, attr), text)
    return fix


def _method_statement_detailed(snapshot: FormSnapshot) -> bool:
    return len(snapshot.text("method_statement")) >= 50


def _method_statement_short(snapshot: FormSnapshot) -> bool:
    text = snapshot.text("method_statement")
    return bool(text) and len(text) < 200


def _method_statement_specific(snapshot: FormSnapshot) -> bool:
    return not t.contains_any(snapshot.text("method_statement"), t.GENERIC_PHRASES)


def _controls_detailed(snapshot: FormSnapshot) -> bool:
    return len(snapshot.text("controls")) >= 100


def _electrical_work(snapshot: FormSnapshot) -> bool:
    return snapshot.text("trade") == "Electrician" or snapshot.has_hazard(Hazard.ELECTRICAL)


def _coshh_controls_complete(snapshot: FormSnapshot) -> bool:
    controls = snapshot.text("controls").lower()
    return all(word in controls for word in ("ventilation", "ppe", "storage"))


def _scope_names_substances(snapshot: FormSnapshot) -> bool:
    return t.contains_any(snapshot.text("scope_of_work"), t.HAZARDOUS_SCOPE_KEYWORDS)


def _harness_in_use(snapshot: FormSnapshot) -> bool:
    return (
        snapshot.has_hazard(Hazard.WORKING_AT_HEIGHT)
        and "harness" in snapshot.text("controls").lower()
    )


def _manual_handling_assessed(snapshot: FormSnapshot) -> bool:
    controls = snapshot.text("controls").lower()
    return "manual handling" in controls and "assess" in controls


def _any_hazard(snapshot: FormSnapshot) -> bool:
    return bool(snapshot.selected_hazards)


def _ppe_complete(snapshot: FormSnapshot) -> bool:
    return not t.missing_ppe(snapshot)


def _ppe_fix(snapshot: FormSnapshot) -> list[str]:
    wanted = set(snapshot.selected_ppe) | set(t.required_ppe(snapshot.selected_hazards))
    return [item.value for item in PPEItem if item in wanted]


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------

CDM_RULES = (
    Rule(
        id="CDM001",
        regulation=Regulation.CDM,
        field="projectName",
        severity=Severity.HIGH,
        message="Project name is required.",
        check=_present("project_name"),
        fix=t.project_name_text,
        suggestion="Name the project so the RAMS can be tied to the site.",
        references=("CDM 2015 Regulation 12",),
    ),
    Rule(
        id="CDM002",
        regulation=Regulation.CDM,
        field="clientName",
        severity=Severity.HIGH,
        message="Client name is required.",
        check=_present("client_name"),
        fix=t.client_name_text,
        suggestion="Record the client so duty holders are identifiable.",
        references=("CDM 2015 Regulation 4",),
    ),
    Rule(
        id="CDM003",
        regulation=Regulation.CDM,
        field="scopeOfWork",
        severity=Severity.HIGH,
        message="Scope of work is required.",
        check=_present("scope_of_work"),
        fix=t.scope_of_work_text,
        suggestion="Describe the work covered by this RAMS.",
        references=("CDM 2015 Regulation 15",),
    ),
    Rule(
        id="CDM004",
        regulation=Regulation.CDM,
        field="methodStatement",
        severity=Severity.HIGH,
        message=(
            "Method statement is required. Please provide detailed steps for how "
            "the work will be carried out safely."
        ),
        check=_present("method_statement"),
        fix=t.method_statement_text,
        suggestion="CDM Requirement",
        references=("CDM 2015 Regulation 8", "HSG150 Health and safety in construction"),
    ),
    Rule(
        id="CDM005",
        regulation=Regulation.CDM,
        field="methodStatement",
        severity=Severity.MEDIUM,
        message=(
            "The method statement is brief. Consider adding more detail about the "
            "sequence of operations and specific safety controls."
        ),
        check=_method_statement_detailed,
        fix=t.method_statement_text,
        applies=_present("method_statement"),
        suggestion="Method statement lacks detail - include step-by-step procedures.",
        references=("CDM 2015 Regulation 8",),
    ),
    Rule(
        id="CDM006",
        regulation=Regulation.CDM,
        field="methodStatement",
        severity=Severity.MEDIUM,
        message=(
            "The method statement appears to contain generic phrases. Consider adding "
            "more specific, detailed procedures for this particular task."
        ),
        check=_method_statement_specific,
        fix=t.method_statement_text,
        applies=_method_statement_short,
        suggestion="Replace generic wording with task-specific procedures.",
    ),
    Rule(
        id="CDM007",
        regulation=Regulation.CDM,
        field="controls",
        severity=Severity.HIGH,
        message="Control measures are required. Please specify how risks will be managed.",
        check=_present("controls"),
        fix=_append_to("controls", t.general_controls_block),
        suggestion="CDM Requirement",
        references=("Management of Health and Safety at Work Regulations 1999, Regulation 3",),
    ),
    Rule(
        id="CDM008",
        regulation=Regulation.CDM,
        field="controls",
        severity=Severity.MEDIUM,
        message=(
            "Control measures seem brief. Consider adding more detailed risk "
            "control information."
        ),
        check=_controls_detailed,
        fix=_append_to("controls", t.general_controls_block),
        applies=_present("controls"),
        suggestion="Expand the control measures for each identified hazard.",
    ),
    Rule(
        id="CDM009",
        regulation=Regulation.CDM,
        field="emergencyContacts",
        severity=Severity.HIGH,
        message="CDM requires emergency procedures and key contacts to be documented.",
        check=_present("emergency_contacts"),
        fix=_append_to("emergency_contacts", t.emergency_contacts_block),
        suggestion="List emergency services, site manager and first aider contacts.",
        references=("CDM 2015 Part 4",),
    ),
    Rule(
        id="CDM010",
        regulation=Regulation.CDM,
        field="controls",
        severity=Severity.CRITICAL,
        message="Electrical work requires isolation procedures.",
        check=_mentions("controls", "isolation"),
        fix=_append_to("controls", t.ISOLATION_BLOCK),
        applies=_electrical_work,
        suggestion="Document the safe isolation procedure before any electrical work.",
        references=("Electricity at Work Regulations 1989", "HSE GS38"),
    ),
)

COSHH_RULES = (
    Rule(
        id="COSHH001",
        regulation=Regulation.COSHH,
        field="controls",
        severity=Severity.HIGH,
        message=(
            "Hazardous Substances are selected, but no specific COSHH assessment or "
            "controls are mentioned in the control measures."
        ),
        check=_mentions("controls", "coshh"),
        fix=_append_to("controls", t.coshh_block),
        applies=_hazard(Hazard.HAZARDOUS_SUBSTANCES),
        suggestion="COSHH Requirement",
        references=("COSHH Regulations 2002", "HSE INDG136"),
    ),
    Rule(
        id="COSHH002",
        regulation=Regulation.COSHH,
        field="controls",
        severity=Severity.MEDIUM,
        message="COSHH Regulation 6 requires safety data sheets for all hazardous substances.",
        check=_mentions("controls", "data sheet", "sds"),
        fix=_append_to("controls", t.coshh_block),
        applies=_hazard(Hazard.HAZARDOUS_SUBSTANCES),
        suggestion="Reference the safety data sheet for each substance.",
        references=("COSHH Regulation 6",),
    ),
    Rule(
        id="COSHH003",
        regulation=Regulation.COSHH,
        field="controls",
        severity=Severity.MEDIUM,
        message="COSHH controls incomplete - must specify ventilation, PPE, and storage.",
        check=_coshh_controls_complete,
        fix=_append_to("controls", t.coshh_block),
        applies=_hazard(Hazard.HAZARDOUS_SUBSTANCES),
        suggestion="State ventilation, PPE and storage arrangements.",
        references=("COSHH Regulation 7 - Control Measures",),
    ),
    Rule(
        id="COSHH004",
        regulation=Regulation.COSHH,
        field="controls",
        severity=Severity.HIGH,
        message="COSHH assessment required - hazardous substances detected in scope.",
        check=_mentions("controls", "coshh"),
        fix=_append_to("controls", t.coshh_block),
        applies=_scope_names_substances,
        suggestion="Add a COSHH assessment for the substances named in the scope.",
        references=("COSHH Regulations 2002", "HSE INDG136"),
    ),
)

RIDDOR_RULES = (
    Rule(
        id="RIDDOR001",
        regulation=Regulation.RIDDOR,
        field="emergencyContacts",
        severity=Severity.MEDIUM,
        message="RIDDOR reporting contact details must be readily available.",
        check=_mentions("emergency_contacts", "hse", "0345", "riddor"),
        fix=_append_to("emergency_contacts", t.riddor_block),
        suggestion="RIDDOR Requirement",
        references=("RIDDOR 2013", "HSE INDG453"),
    ),
    Rule(
        id="RIDDOR002",
        regulation=Regulation.RIDDOR,
        field="emergencyContacts",
        severity=Severity.LOW,
        message="Emergency contacts should include the emergency services number (999).",
        check=_mentions("emergency_contacts", "999"),
        fix=_append_to("emergency_contacts", t.EMERGENCY_SERVICES_BLOCK),
        applies=_present("emergency_contacts"),
        suggestion="Add 999 to the emergency contacts.",
    ),
)

WORK_AT_HEIGHT_RULES = (
    Rule(
        id="WAH001",
        regulation=Regulation.WORKING_AT_HEIGHT,
        field="controls",
        severity=Severity.HIGH,
        message=(
            "Working at height requires specific fall protection measures (scaffold, "
            "edge protection or harness) under the Work at Height Regulations 2005 "
            "and CDM 2015 Schedule 2."
        ),
        check=_mentions("controls", *t.FALL_PROTECTION_KEYWORDS),
        fix=_append_to("controls", t.WORK_AT_HEIGHT_BLOCK),
        applies=_hazard(Hazard.WORKING_AT_HEIGHT),
        suggestion="Work at Height Requirement",
        references=("Work at Height Regulations 2005", "CDM 2015 Schedule 2"),
    ),
    Rule(
        id="WAH002",
        regulation=Regulation.WORKING_AT_HEIGHT,
        field="controls",
        severity=Severity.MEDIUM,
        message="Harness use requires a documented rescue plan.",
        check=_mentions("controls", "rescue"),
        fix=_append_to("controls", t.RESCUE_PLAN_BLOCK),
        applies=_harness_in_use,
        suggestion="Add a rescue plan for suspended workers.",
        references=("Work at Height Regulations 2005, Regulation 4",),
    ),
)

MANUAL_HANDLING_RULES = (
    Rule(
        id="MH001",
        regulation=Regulation.MANUAL_HANDLING,
        field="controls",
        severity=Severity.MEDIUM,
        message="Manual handling is identified but no manual handling assessment is recorded.",
        check=_manual_handling_assessed,
        fix=_append_to("controls", t.MANUAL_HANDLING_BLOCK),
        applies=_hazard(Hazard.MANUAL_HANDLING),
        suggestion="Record a TILE-based manual handling assessment.",
        references=("Manual Handling Operations Regulations 1992",),
    ),
    Rule(
        id="MH002",
        regulation=Regulation.MANUAL_HANDLING,
        field="controls",
        severity=Severity.LOW,
        message="Manual handling controls should state that operatives are trained.",
        check=_mentions("controls", "train"),
        fix=_append_to("controls", t.MANUAL_HANDLING_BLOCK),
        applies=_hazard(Hazard.MANUAL_HANDLING),
        suggestion="Confirm manual handling training.",
        references=("HSE L23",),
    ),
)

PPE_RULES = (
    Rule(
        id="PPE001",
        regulation=Regulation.PPE,
        field="selectedPPE",
        severity=Severity.HIGH,
        message="PPE selection doesn't match identified hazards.",
        check=_ppe_complete,
        fix=_ppe_fix,
        applies=_any_hazard,
        suggestion="Select the PPE required for each identified hazard.",
        references=("PPE at Work Regulations 2022", "HSE INDG174"),
    ),
)

RULES_BY_REGULATION: dict[Regulation, tuple[Rule, ...]] = {
    Regulation.CDM: CDM_RULES,
    Regulation.COSHH: COSHH_RULES,
    Regulation.RIDDOR: RIDDOR_RULES,
    Regulation.WORKING_AT_HEIGHT: WORK_AT_HEIGHT_RULES,
    Regulation.MANUAL_HANDLING: MANUAL_HANDLING_RULES,
    Regulation.PPE: PPE_RULES,
}

RULES: tuple[Rule, ...] = tuple(
    rule for regulation in Regulation for rule in RULES_BY_REGULATION[regulation]
)


def _index(rules: tuple[Rule, ...]) -> dict[str, Rule]:
    index: dict[str, Rule] = {}
    for rule in rules:
        if rule.id in index:
            raise ValueError(f"Duplicate rule id: {rule.id}")
        if FormSnapshot.resolve_field(rule.field) is None:
            raise ValueError(f"Rule {rule.id} targets unknown field {rule.field}")
        index[rule.id] = rule
    return index


RULES_BY_ID: dict[str, Rule] = _index(RULES)


def get_rule(rule_id: str) -> Rule | None:
    return RULES_BY_ID.get(rule_id)
