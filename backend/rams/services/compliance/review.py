"""AI language and tone review of a RAMS form.

Always returns a result: an unparseable reply and a failed call each map
to fixed fallback scores so the UI can keep rendering.
"""

import logging
import math
from dataclasses import dataclass, field

from rams.schemas.rams import FormSnapshot
from rams.services.ai import AIServiceError, extract_json_object, generate_response

from .prompts import REVIEW_SYSTEM, REVIEW_USER, format_snapshot_for_prompt

logger = logging.getLogger(__name__)

MAX_REVIEW_SUGGESTIONS = 5

# Reply received but not usable
PARSE_FALLBACK = (70, 70, 60)
PARSE_FALLBACK_SUGGESTIONS = [
    "Unable to process full validation. Please ensure all fields are complete.",
]
MISSING_SUGGESTIONS = ["Please review all sections for completeness"]

# No reply at all
UNAVAILABLE_FALLBACK = (75, 75, 65)
UNAVAILABLE_SUGGESTIONS = [
    "AI validation temporarily unavailable. Manual review recommended.",
    "Ensure all safety procedures follow current UK regulations.",
]


@dataclass
class ReviewResult:
    language_score: int
    tone_score: int
    completeness_score: int
    suggestions: list[str] = field(default_factory=list)
    degraded: bool = False


def review_form(snapshot: FormSnapshot) -> ReviewResult:
    """Score the form's language, tone and completeness."""
    user_prompt = REVIEW_USER.format(document=format_snapshot_for_prompt(snapshot))

    try:
        ai_response = generate_response(
            system_prompt=REVIEW_SYSTEM,
            user_prompt=user_prompt,
            max_tokens=500,
            temperature=0.3,
        )
    except AIServiceError as exc:
        logger.warning("AI review unavailable: %s", exc)
        return _unavailable()
    except Exception:
        logger.exception("Unexpected error during AI review")
        return _unavailable()

    parsed = extract_json_object(ai_response.content)
    if parsed is None:
        logger.warning("AI review returned an unparseable response")
        language, tone, completeness = PARSE_FALLBACK
        return ReviewResult(
            language_score=language,
            tone_score=tone,
            completeness_score=completeness,
            suggestions=list(PARSE_FALLBACK_SUGGESTIONS),
            degraded=True,
        )

    suggestions = parsed.get("suggestions")
    if isinstance(suggestions, list):
        suggestions = [str(s) for s in suggestions[:MAX_REVIEW_SUGGESTIONS]]
    else:
        suggestions = list(MISSING_SUGGESTIONS)

    return ReviewResult(
        language_score=_score(parsed.get("languageScore"), PARSE_FALLBACK[0]),
        tone_score=_score(parsed.get("toneScore"), PARSE_FALLBACK[1]),
        completeness_score=_score(parsed.get("completenessScore"), PARSE_FALLBACK[2]),
        suggestions=suggestions,
    )


def review_to_dict(result: ReviewResult) -> dict:
    return {
        "languageScore": result.language_score,
        "toneScore": result.tone_score,
        "completenessScore": result.completeness_score,
        "suggestions": result.suggestions,
        "degraded": result.degraded,
    }


def _score(value, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return max(0, min(100, value))
    if isinstance(value, float) and math.isfinite(value):
        return max(0, min(100, round(value)))
    return default


def _unavailable() -> ReviewResult:
    language, tone, completeness = UNAVAILABLE_FALLBACK
    return ReviewResult(
        language_score=language,
        tone_score=tone,
        completeness_score=completeness,
        suggestions=list(UNAVAILABLE_SUGGESTIONS),
        degraded=True,
    )
