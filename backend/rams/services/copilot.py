"""AI copilot: draft RAMS form content from a free-text prompt."""

import logging
from dataclasses import dataclass, field

from rams.models.enums import Hazard
from rams.schemas.rams import FormSnapshot
from rams.services.ai import AIServiceError, extract_json_object, generate_response
from rams.services.compliance.prompts import copilot_system_prompt
from rams.services.gating import AI_DISCLAIMER

logger = logging.getLogger(__name__)

# Text fields the copilot may draft, by wire alias
DRAFT_TEXT_FIELDS = (
    "projectName",
    "trade",
    "taskType",
    "scopeOfWork",
    "methodStatement",
    "personsAtRisk",
    "controls",
)


@dataclass
class CopilotDraft:
    form: FormSnapshot
    special_considerations: str | None = None
    dropped_hazards: list[str] = field(default_factory=list)
    disclaimer: str = AI_DISCLAIMER


def draft_rams(prompt: str) -> CopilotDraft:
    """Ask the model to draft form content for the described job.

    Raises:
        AIServiceError: The call failed, including unexpected client
            errors, or the reply was not a JSON object.
    """
    try:
        ai_response = generate_response(
            system_prompt=copilot_system_prompt(),
            user_prompt=prompt,
            max_tokens=2000,
            temperature=0.3,
        )
    except AIServiceError:
        raise
    except Exception as exc:
        logger.exception("Unexpected error during copilot drafting")
        raise AIServiceError("Unexpected AI error") from exc

    parsed = extract_json_object(ai_response.content)
    if parsed is None:
        logger.warning("Copilot returned an unparseable response")
        raise AIServiceError("Failed to parse generated content")

    values: dict = {}
    for alias in DRAFT_TEXT_FIELDS:
        value = parsed.get(alias)
        if isinstance(value, str) and value.strip():
            values[alias] = value.strip()

    hazards, dropped = _split_hazards(parsed.get("selectedHazards"))
    values["selectedHazards"] = hazards
    if dropped:
        logger.info("Copilot proposed unknown hazards: %s", ", ".join(dropped))

    special = parsed.get("specialConsiderations")
    return CopilotDraft(
        form=FormSnapshot.model_validate(values),
        special_considerations=special if isinstance(special, str) else None,
        dropped_hazards=dropped,
    )


def draft_to_dict(draft: CopilotDraft) -> dict:
    form_data = draft.form.to_wire()
    form_data["specialConsiderations"] = draft.special_considerations
    form_data["aiGenerated"] = True
    form_data["disclaimer"] = draft.disclaimer
    return {
        "success": True,
        "formData": form_data,
        "droppedHazards": draft.dropped_hazards,
    }


def _split_hazards(raw) -> tuple[list[Hazard], list[str]]:
    if not isinstance(raw, list):
        return [], []
    known = {h.value: h for h in Hazard}
    hazards: list[Hazard] = []
    dropped: list[str] = []
    for value in raw:
        hazard = known.get(value) if isinstance(value, str) else None
        if hazard is None:
            dropped.append(str(value))
        elif hazard not in hazards:
            hazards.append(hazard)
    return hazards, dropped
