"""Best-effort AI augmentation of rule-based validation.

Sends a projection of the snapshot to Claude and parses the reply into
Suggestions. The outcome is explicit: ``AugmentOk`` when the model
answered with something usable, ``AugmentDegraded`` (with a reason) when
it did not. Neither path raises, so validation always completes with the
rule-based results.
"""

import json
import logging
from dataclasses import dataclass

from rams.models.enums import Regulation
from rams.schemas.rams import BOOL_FIELDS, TAG_FIELDS, FormSnapshot
from rams.services.ai import AIServiceError, generate_response, is_ai_configured

from .prompts import AI_TARGET_FIELDS, VALIDATION_SYSTEM, VALIDATION_USER, format_snapshot_for_prompt
from .severity import parse_severity
from .suggestion import Suggestion

logger = logging.getLogger(__name__)

MAX_AI_SUGGESTIONS = 10


@dataclass(frozen=True)
class AugmentOk:
    suggestions: list[Suggestion]
    model: str | None = None

    status = "ok"


@dataclass(frozen=True)
class AugmentDegraded:
    suggestions: list[Suggestion]
    reason: str

    status = "degraded"


AugmentResult = AugmentOk | AugmentDegraded


def augment_with_ai(snapshot: FormSnapshot) -> AugmentResult:
    """Ask the model for additional compliance suggestions."""
    if not is_ai_configured():
        return AugmentDegraded(suggestions=[], reason="AI not configured")

    user_prompt = VALIDATION_USER.format(
        document=format_snapshot_for_prompt(snapshot),
        fields=", ".join(AI_TARGET_FIELDS),
    )

    try:
        ai_response = generate_response(
            system_prompt=VALIDATION_SYSTEM,
            user_prompt=user_prompt,
            max_tokens=1500,
            temperature=0.3,
        )
    except AIServiceError as exc:
        logger.warning("AI validation unavailable: %s", exc)
        return AugmentDegraded(suggestions=[], reason=str(exc))
    except Exception:
        logger.exception("Unexpected error during AI validation")
        return AugmentDegraded(suggestions=[], reason="Unexpected AI error")

    raw_items = parse_suggestion_payload(ai_response.content)
    if raw_items is None:
        logger.warning("AI validation returned an unparseable response")
        return AugmentDegraded(suggestions=[], reason="Unparseable AI response")

    suggestions = []
    for raw in raw_items[:MAX_AI_SUGGESTIONS]:
        suggestion = _build_suggestion(raw)
        if suggestion:
            suggestions.append(suggestion)

    logger.info(
        "AI validation produced %d suggestions (%d raw)", len(suggestions), len(raw_items),
    )
    return AugmentOk(suggestions=suggestions, model=ai_response.model)


def merge_suggestions(
    rule_suggestions: list[Suggestion],
    ai_suggestions: list[Suggestion],
) -> list[Suggestion]:
    """Rule findings first, then AI findings; duplicates by (field, message) dropped."""
    seen: set[tuple[str, str]] = set()
    merged: list[Suggestion] = []
    for s in [*rule_suggestions, *ai_suggestions]:
        if s.dedupe_key in seen:
            continue
        seen.add(s.dedupe_key)
        merged.append(s)
    return merged


def parse_suggestion_payload(content: str) -> list[dict] | None:
    """Parse a model reply into raw suggestion dicts.

    Returns None when nothing usable could be recovered.
    """
    parsed = _parse_suggestion_json(content)
    if parsed is not None:
        return parsed
    items = _parse_text_suggestions(content)
    return items or None


def _parse_suggestion_json(content: str) -> list[dict] | None:
    """Parse a JSON array (or {"suggestions": [...]}) from the reply."""
    # Strip markdown code fences if present
    text = content.strip()
    if text.startswith("```"):
        lines = [l for l in text.split("\n") if not l.strip().startswith("```")]
        text = "\n".join(lines)

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        # Try to find a JSON array in the response
        start = text.find("[")
        end = text.rfind("]")
        if start == -1 or end <= start:
            return None
        try:
            parsed = json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            return None

    if isinstance(parsed, dict):
        parsed = parsed.get("suggestions")
    if not isinstance(parsed, list):
        return None
    return [item for item in parsed if isinstance(item, dict)]


def _parse_text_suggestions(content: str) -> list[dict]:
    """Fallback for replies written as "Field: ... / Severity: ..." lines."""
    items: list[dict] = []
    current: dict = {}

    for line in content.splitlines():
        key, sep, value = line.strip().partition(":")
        if not sep:
            continue
        key = key.strip().lstrip("-* ").lower()
        value = value.strip()
        if key == "field":
            if current.get("field"):
                items.append(current)
            current = {"field": value}
        elif key == "severity":
            current["severity"] = value
        elif key in ("message", "issue"):
            current["message"] = value
        elif key in ("suggestion", "recommendation"):
            current["suggestion"] = value

    if current.get("field"):
        items.append(current)
    return items


def _build_suggestion(raw: dict) -> Suggestion | None:
    """Build a Suggestion from raw model output, with validation."""
    field_name = raw.get("field")
    message = raw.get("message")
    if not isinstance(field_name, str) or not isinstance(message, str) or not message.strip():
        return None

    attr = FormSnapshot.resolve_field(field_name.strip())
    if attr is None or attr in TAG_FIELDS or attr in BOOL_FIELDS:
        logger.warning("Dropping AI suggestion for unsupported field: %s", field_name)
        return None

    auto_fix = raw.get("autoFixContent")
    suggestion = raw.get("suggestion")

    return Suggestion(
        field=FormSnapshot.alias_for(attr),
        severity=parse_severity(raw.get("severity")),
        message=message.strip(),
        regulation=_safe_regulation(raw.get("regulation")),
        suggestion=suggestion if isinstance(suggestion, str) else None,
        auto_fix_content=auto_fix if isinstance(auto_fix, str) and auto_fix.strip() else None,
        source="ai",
    )


def _safe_regulation(value) -> Regulation | None:
    if not isinstance(value, str):
        return None
    try:
        return Regulation(value.strip().upper())
    except ValueError:
        return None
