"""Suggestion record shared by the rule evaluator and the AI augmenter."""

from dataclasses import dataclass
from typing import Literal

from rams.models.enums import Regulation, Severity


@dataclass(frozen=True)
class Suggestion:
    field: str  # wire alias
    severity: Severity
    message: str
    rule_id: str | None = None
    regulation: Regulation | None = None
    suggestion: str | None = None
    auto_fix_content: str | list[str] | None = None
    references: tuple[str, ...] = ()
    source: Literal["rules", "ai"] = "rules"

    @property
    def dedupe_key(self) -> tuple[str, str]:
        return self.field, self.message.strip().lower()


def suggestion_to_dict(s: Suggestion) -> dict:
    """Serialize a Suggestion to a camelCase dict."""
    return {
        "id": s.rule_id,
        "field": s.field,
        "severity": s.severity.value,
        "regulation": s.regulation.value if s.regulation else None,
        "message": s.message,
        "suggestion": s.suggestion,
        "autoFixContent": s.auto_fix_content,
        "references": list(s.references),
        "source": s.source,
    }
