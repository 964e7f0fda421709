"""Deterministic fix-text generators for compliance rules.

Each generator builds replacement content from the snapshot alone, so the
same snapshot always yields the same text. Blocks are written so that the
rule which proposes them is satisfied once they are applied.
"""

import re

from rams.models.enums import Hazard, PPEItem
from rams.schemas.rams import FormSnapshot

# ---------------------------------------------------------------------------
# Keyword tables
# ---------------------------------------------------------------------------

GENERIC_PHRASES = (
    "follow standard procedure",
    "work safely",
    "use appropriate ppe",
    "take care",
    "be careful",
)

HAZARDOUS_SCOPE_KEYWORDS = (
    "paint",
    "adhesive",
    "solvent",
    "chemical",
    "fumes",
    "resin",
    "asbestos",
    "silica",
)

COMMON_SUBSTANCES = (
    "paint",
    "adhesive",
    "cement",
    "solvent",
    "fuel",
    "oil",
    "asbestos",
    "silica",
)

FALL_PROTECTION_KEYWORDS = ("scaffold", "harness", "edge protection", "fall arrest")

# PPE each hazard calls for, on top of the site baseline
PPE_MATRIX: dict[Hazard, tuple[PPEItem, ...]] = {
    Hazard.WORKING_AT_HEIGHT: (PPEItem.FALL_ARREST_HARNESS, PPEItem.HARD_HAT),
    Hazard.ELECTRICAL: (PPEItem.GLOVES, PPEItem.SAFETY_GLASSES),
    Hazard.DUST: (PPEItem.DUST_MASK, PPEItem.SAFETY_GLASSES),
    Hazard.MANUAL_HANDLING: (PPEItem.GLOVES, PPEItem.SAFETY_BOOTS),
    Hazard.NOISE_VIBRATION: (PPEItem.EAR_DEFENDERS,),
    Hazard.HOT_WORKS: (PPEItem.FACE_SHIELD, PPEItem.GLOVES),
    Hazard.HAZARDOUS_SUBSTANCES: (PPEItem.GLOVES, PPEItem.FACE_SHIELD),
}

BASELINE_PPE = (PPEItem.HARD_HAT, PPEItem.SAFETY_BOOTS, PPEItem.HI_VIS)

PPE_STANDARDS: dict[PPEItem, str] = {
    PPEItem.HARD_HAT: "BS EN 397",
    PPEItem.SAFETY_BOOTS: "BS EN ISO 20345",
    PPEItem.HI_VIS: "BS EN ISO 20471 Class 2",
    PPEItem.SAFETY_GLASSES: "BS EN 166",
    PPEItem.FALL_ARREST_HARNESS: "BS EN 361",
    PPEItem.GLOVES: "BS EN 388",
    PPEItem.EAR_DEFENDERS: "BS EN 352",
    PPEItem.DUST_MASK: "BS EN 149 FFP3",
}

TRADE_STEPS: dict[str, str] = {
    "Electrician": (
        "   a. Obtain permit for electrical work\n"
        "   b. Lock off and tag electrical supply\n"
        "   c. Test with approved voltage tester\n"
        "   d. Confirm dead and post warning signs\n"
        "   e. Carry out work as per BS 7671\n"
        "   f. Test installation and complete certificates\n"
        "   g. Remove lock off and restore power under control"
    ),
    "Bricklayer": (
        "   a. Set out work area and establish datum levels\n"
        "   b. Check materials conform to specification\n"
        "   c. Mix mortar to correct consistency\n"
        "   d. Lay bricks to line and level\n"
        "   e. Check plumb and gauge regularly\n"
        "   f. Install DPC and wall ties as required\n"
        "   g. Point and clean down work"
    ),
}

DEFAULT_STEPS = (
    "   a. Prepare work area\n"
    "   b. Check materials and tools\n"
    "   c. Execute main task\n"
    "   d. Quality check work\n"
    "   e. Clean and secure area"
)

TOLERANCES_MM: dict[str, int] = {
    "Bricklayer": 10,
    "Carpenter / Joiner": 5,
    "Steel Erector": 3,
    "Electrician": 5,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def append_block(existing: str | None, block: str) -> str:
    """Append a block to existing text, once."""
    current = (existing or "").rstrip()
    if not current:
        return block
    if block in current:
        return current
    return f"{current}\n\n{block}"


def contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def extract_substances(text: str) -> list[str]:
    """Common hazardous substances named in free text."""
    lowered = text.lower()
    return [
        substance for substance in COMMON_SUBSTANCES
        if re.search(rf"\b{substance}", lowered)
    ]


def required_ppe(hazards: list[Hazard]) -> list[PPEItem]:
    """PPE required for the hazards, in PPEItem declaration order."""
    required = set(BASELINE_PPE)
    for hazard in hazards:
        required.update(PPE_MATRIX.get(hazard, ()))
    return [item for item in PPEItem if item in required]


def missing_ppe(snapshot: FormSnapshot) -> list[PPEItem]:
    selected = set(snapshot.selected_ppe)
    return [item for item in required_ppe(snapshot.selected_hazards) if item not in selected]


def ppe_standard(item: PPEItem) -> str:
    return PPE_STANDARDS.get(item, "Appropriate BS EN standard")


# ---------------------------------------------------------------------------
# Project information
# ---------------------------------------------------------------------------


def project_name_text(snapshot: FormSnapshot) -> str:
    task = snapshot.text("task_type") or "Construction Works"
    site = snapshot.text("site_address") or "[Site Address]"
    return f"{task} - {site}"


def client_name_text(snapshot: FormSnapshot) -> str:
    return "[Client Name]"


def scope_of_work_text(snapshot: FormSnapshot) -> str:
    task = snapshot.text("task_type") or "General Works"
    trade = snapshot.text("trade") or "site"
    site = snapshot.text("site_address") or "the project site"
    return (
        f"Scope of Work: {task} carried out by {trade} operatives at {site}. "
        "The works comprise preparation and segregation of the work area, "
        "the activities set out in the method statement, inspection and "
        "testing of the completed work, and making good, cleaning and "
        "handover on completion."
    )


# ---------------------------------------------------------------------------
# Method statement
# ---------------------------------------------------------------------------


def method_statement_text(snapshot: FormSnapshot) -> str:
    trade = snapshot.text("trade") or "General Construction"
    task = snapshot.text("task_type") or "General Works"
    steps = TRADE_STEPS.get(trade, DEFAULT_STEPS)
    tolerance = TOLERANCES_MM.get(trade, 10)

    return f"""Method Statement for {task}:

1. PREPARATION PHASE
   - Site induction completed for all operatives
   - Permit to work obtained (if required)
   - Service drawings reviewed and CAT scan completed
   - Materials and tools inspected and certified
   - Exclusion zones established with Heras fencing

2. SETUP & ACCESS
   - Welfare facilities confirmed operational
   - Access routes cleared and signed
   - Emergency egress routes verified and communicated
   - Work area barriers erected with appropriate signage
   - Temporary services connected and tested

3. MAIN WORK SEQUENCE
{steps}

4. QUALITY CHECKS
   - Dimensional tolerance: +/-{tolerance}mm
   - Visual inspection for defects
   - Testing as per British Standards
   - Photographic records taken
   - Sign-off by supervisor

5. COMPLETION
   - Work area cleaned and waste segregated
   - Tools and equipment demobilised
   - Barriers removed only after area is made safe
   - Handover documentation completed
   - Lessons learned recorded"""


# ---------------------------------------------------------------------------
# Control measures
# ---------------------------------------------------------------------------


def general_controls_block(snapshot: FormSnapshot) -> str:
    lines = [
        "General Control Measures:",
        "- Task-specific risk assessment briefed to all operatives before work starts",
        "- Work area segregated with barriers and signage",
        "- Tools and equipment inspected before use; defective items quarantined",
        "- Supervisor monitors compliance throughout the shift",
        "- Housekeeping maintained and waste removed at the end of each day",
    ]
    if snapshot.selected_hazards:
        hazards = ", ".join(h.value for h in snapshot.selected_hazards)
        lines.append(f"- Identified hazards addressed: {hazards}")
    return "\n".join(lines)


ISOLATION_BLOCK = """Safe Isolation Procedure (Electricity at Work Regulations 1989):
- Identify the circuit and isolate at the point of supply
- Lock off and tag the isolation point; the operative retains the key
- Prove the approved voltage indicator on a known live source
- Test the circuit dead, then re-prove the voltage indicator
- Post warning notices before work starts
- No live working without a documented justification and permit"""


def coshh_block(snapshot: FormSnapshot) -> str:
    substances = extract_substances(snapshot.text("scope_of_work")) or ["general substances"]
    lines = ["COSHH Assessment (COSHH Regulations 2002, Regulations 6 and 7):"]
    for substance in substances:
        lines.append(
            f"- {substance.capitalize()}: Safety Data Sheet (SDS) held on site; "
            "exposure assessed before use"
        )
    lines.extend([
        "- Ventilation: adequate natural or local exhaust ventilation (LEV) maintained",
        "- PPE: gloves, eye protection and RPE as specified in the safety data sheet",
        "- Storage: original labelled containers in a locked COSHH cabinet",
        "- Disposal: via licensed waste carrier",
        "- Emergency: eye wash station and spill kit available",
    ])
    return "\n".join(lines)


WORK_AT_HEIGHT_BLOCK = """Work at Height Controls (Work at Height Regulations 2005, CDM 2015 Schedule 2):
- Hierarchy applied: avoid, prevent, mitigate
- Scaffold erected by CISRS qualified scaffolders and inspected every 7 days
- Edge protection installed to BS EN 13374
- Fall arrest: full body harness (BS EN 361) with shock-absorbing lanyard where collective protection is not reasonably practicable
- Rescue plan in place with trained personnel and rescue kit on site
- Daily pre-use inspections documented
- No work in winds above 23 mph"""

RESCUE_PLAN_BLOCK = """Rescue Plan:
- Suspended worker to be recovered within 10 minutes
- Rescue kit and trained rescue team available whenever harnesses are in use
- Emergency services called on 999 if recovery is not immediate"""

MANUAL_HANDLING_BLOCK = """Manual Handling Controls (Manual Handling Operations Regulations 1992):
- Manual handling assessment completed using TILE (Task, Individual, Load, Environment)
- Mechanical lifting aids used wherever reasonably practicable
- Team lifts for loads above 25 kg
- Operatives trained in safe lifting technique
- Materials stored at waist height to reduce bending"""


# ---------------------------------------------------------------------------
# Emergency arrangements
# ---------------------------------------------------------------------------


def emergency_contacts_block(snapshot: FormSnapshot) -> str:
    manager = snapshot.text("site_manager") or "[Site Manager]"
    number = snapshot.text("contact_number") or "[Contact Number]"
    return (
        "Emergency Services: 999\n"
        f"Site Manager: {manager} - {number}\n"
        "First Aider: [Name] - [Number]\n"
        "Nearest A&E: [Hospital name and address]\n"
        "HSE Incident Contact Centre (RIDDOR): 0345 300 9923"
    )


def riddor_block(snapshot: FormSnapshot) -> str:
    manager = snapshot.text("site_manager") or "[Site Manager]"
    return (
        "RIDDOR Reporting Procedure:\n"
        "- HSE Contact: 0345 300 9923 (fatal and specified injuries - report immediately)\n"
        "- Online reporting: www.hse.gov.uk/riddor\n"
        f"- Responsible person: {manager}\n"
        "- Site accident book location: Site office"
    )


EMERGENCY_SERVICES_BLOCK = "Emergency Services: 999 (Police, Fire, Ambulance)"
