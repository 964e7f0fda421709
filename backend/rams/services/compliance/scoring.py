"""Compliance score calculation.

Formula: score = 100 - sum(severity weight per suggestion) + bonuses,
clamped to [0, 100]. Bonuses reward best-practice signals in the
snapshot and only apply when a snapshot is supplied.
"""

import logging

from rams.models.enums import Severity
from rams.schemas.rams import FormSnapshot

from .severity import SEVERITY_ORDER, is_blocking, severity_weights
from .suggestion import Suggestion

logger = logging.getLogger(__name__)

MAX_SCORE = 100
MIN_SCORE = 0

# Best-practice bonuses
REVIEWED_BONUS = 5
TRAUMA_CONTACT_BONUS = 3
DETAILED_CONTROLS_BONUS = 5
DETAILED_CONTROLS_CHARS = 500
DETAILED_METHOD_BONUS = 5
DETAILED_METHOD_CHARS = 1000

# More suggestions than this and the work should be phased
PHASING_THRESHOLD = 5


def calculate_score(
    suggestions: list[Suggestion],
    snapshot: FormSnapshot | None = None,
    weights: dict[Severity, int] | None = None,
) -> int:
    """Calculate the 0-100 compliance score for a suggestion set."""
    if weights is None:
        weights = severity_weights()

    score = MAX_SCORE
    for s in suggestions:
        score -= weights.get(s.severity, 0)

    if snapshot is not None:
        score += _bonus(snapshot)

    score = max(MIN_SCORE, min(MAX_SCORE, score))
    logger.debug("Compliance score %d from %d suggestions", score, len(suggestions))
    return score


def _bonus(snapshot: FormSnapshot) -> int:
    bonus = 0
    if snapshot.text("reviewed_by"):
        bonus += REVIEWED_BONUS
    if "trauma" in snapshot.text("emergency_contacts").lower():
        bonus += TRAUMA_CONTACT_BONUS
    if len(snapshot.text("controls")) > DETAILED_CONTROLS_CHARS:
        bonus += DETAILED_CONTROLS_BONUS
    if len(snapshot.text("method_statement")) > DETAILED_METHOD_CHARS:
        bonus += DETAILED_METHOD_BONUS
    return bonus


def build_summary(suggestions: list[Suggestion]) -> dict:
    """Error/warning counts and a one-line summary message."""
    error_count = sum(1 for s in suggestions if is_blocking(s.severity))
    warning_count = len(suggestions) - error_count

    if error_count == 0 and warning_count == 0:
        message = "All validations passed successfully."
    else:
        parts = []
        if error_count:
            parts.append(f"{error_count} error{'s' if error_count != 1 else ''}")
        if warning_count:
            parts.append(f"{warning_count} warning{'s' if warning_count != 1 else ''}")
        message = f"Found {' and '.join(parts)}."

    return {
        "isValid": error_count == 0,
        "errorCount": error_count,
        "warningCount": warning_count,
        "message": message,
    }


def build_score_details(score: int, suggestions: list[Suggestion], weights: dict[Severity, int] | None = None) -> dict:
    """Build the JSON details blob for the score."""
    if weights is None:
        weights = severity_weights()
    by_severity = {severity.value: 0 for severity in Severity}
    for s in suggestions:
        by_severity[s.severity.value] += 1
    return {
        "score": score,
        "suggestionCount": len(suggestions),
        "bySeverity": by_severity,
        "weights": {severity.value: weight for severity, weight in weights.items()},
        "formula": "100 - sum(severity weights) + bonuses, clamped to 0-100",
    }


def group_by_field(suggestions: list[Suggestion]) -> dict[str, list[Suggestion]]:
    grouped: dict[str, list[Suggestion]] = {}
    for s in suggestions:
        grouped.setdefault(s.field, []).append(s)
    return grouped


def generate_recommendations(snapshot: FormSnapshot, suggestions: list[Suggestion]) -> list[str]:
    """Whole-document advice that no single rule owns."""
    recommendations: list[str] = []

    if len(suggestions) > PHASING_THRESHOLD:
        recommendations.append(
            "Consider breaking work into smaller, more manageable phases"
        )
    if not snapshot.text("reviewed_by"):
        recommendations.append(
            "Have a supervisor review this RAMS before work commences"
        )
    if not snapshot.competent_person_verified:
        recommendations.append(
            "Complete competency verification - CDM 2015 requires a competent person "
            "to prepare or review risk assessments"
        )

    worst = max(suggestions, key=lambda s: SEVERITY_ORDER[s.severity], default=None)
    if worst is not None and worst.severity == Severity.CRITICAL:
        recommendations.append(
            f"Resolve critical issue before work starts: {worst.message}"
        )

    return recommendations
