"""Rule evaluator.

Runs the enabled rules against a snapshot and returns a Suggestion for
every violated rule. Output order is regulation order, then rule
declaration order. A rule that raises is logged and skipped; the
remaining rules still run.
"""

import logging
from collections.abc import Iterable

from rams.models.enums import Regulation
from rams.schemas.rams import FormSnapshot, fields_up_to_step

from .rules import RULES, Rule
from .suggestion import Suggestion

logger = logging.getLogger(__name__)

REGULATION_ORDER = {regulation: index for index, regulation in enumerate(Regulation)}


def evaluate_rules(
    snapshot: FormSnapshot,
    regulations: Iterable[Regulation] | None = None,
    *,
    step: int | None = None,
    rules: Iterable[Rule] = RULES,
) -> list[Suggestion]:
    """Evaluate rules against a snapshot.

    Args:
        snapshot: The form to check. Never mutated.
        regulations: Enabled rule tags. None enables all of them.
        step: When given, only report fields on this form step or earlier.
        rules: Rule table to evaluate (the canonical registry by default).
    """
    enabled = set(Regulation) if regulations is None else set(regulations)
    visible = fields_up_to_step(step) if step is not None else None

    ordered = sorted(
        (rule for rule in rules if rule.regulation in enabled),
        key=lambda rule: REGULATION_ORDER[rule.regulation],
    )

    suggestions: list[Suggestion] = []
    for rule in ordered:
        if visible is not None and rule.field not in visible:
            continue
        try:
            if not rule.is_violated(snapshot):
                continue
            fix_content = rule.fix(snapshot)
        except Exception:
            logger.exception("Rule %s failed; skipping", rule.id)
            continue
        suggestions.append(_to_suggestion(rule, fix_content))

    logger.debug(
        "Evaluated %d rules: %d violations", len(ordered), len(suggestions),
    )
    return suggestions


def filter_to_step(suggestions: list[Suggestion], step: int) -> list[Suggestion]:
    """Drop suggestions for fields on later form steps."""
    visible = fields_up_to_step(step)
    return [s for s in suggestions if s.field in visible]


def _to_suggestion(rule: Rule, fix_content) -> Suggestion:
    return Suggestion(
        field=rule.field,
        severity=rule.severity,
        message=rule.message,
        rule_id=rule.id,
        regulation=rule.regulation,
        suggestion=rule.suggestion or f"{rule.regulation.value} Requirement",
        auto_fix_content=fix_content,
        references=rule.references,
        source="rules",
    )
