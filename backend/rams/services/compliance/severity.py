"""Suggestion severity ordering and score weights.

Severity levels, least to most serious:
  LOW:      Best-practice gap
  MEDIUM:   Incomplete or weak content
  HIGH:     Required content missing
  CRITICAL: Missing control for a fatal-risk activity
"""

from rams.config import Settings, get_settings
from rams.models.enums import Severity

SEVERITY_ORDER = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}

# Severities that make a snapshot invalid
BLOCKING_SEVERITIES = frozenset({Severity.HIGH, Severity.CRITICAL})


def severity_weights(settings: Settings | None = None) -> dict[Severity, int]:
    """Points deducted from the compliance score per suggestion."""
    if settings is None:
        settings = get_settings()
    return {
        Severity.CRITICAL: settings.score_weight_critical,
        Severity.HIGH: settings.score_weight_high,
        Severity.MEDIUM: settings.score_weight_medium,
        Severity.LOW: settings.score_weight_low,
    }


def parse_severity(value: object, default: Severity = Severity.MEDIUM) -> Severity:
    """Lenient parse for severities coming from model output."""
    if isinstance(value, Severity):
        return value
    if isinstance(value, str):
        try:
            return Severity(value.strip().lower())
        except ValueError:
            pass
    return default


def is_blocking(severity: Severity) -> bool:
    return severity in BLOCKING_SEVERITIES
