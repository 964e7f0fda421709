"""Apply fix content to a snapshot.

Auto-fix overwrites a single field with the given content; it never
merges. Merging (append-once) is the fix generator's job.
"""

import logging

from rams.schemas.rams import BOOL_FIELDS, TAG_FIELDS, FormSnapshot

from .rules import get_rule

logger = logging.getLogger(__name__)


class AutoFixError(ValueError):
    """Fix content could not be applied to the requested field."""


def apply_auto_fix(snapshot: FormSnapshot, field: str, content: str | list[str]) -> FormSnapshot:
    """Return a copy of the snapshot with one field replaced.

    Args:
        snapshot: The form to update. Never mutated.
        field: Wire alias or attribute name of the target field.
        content: Text for text fields, a list of tag values for tag fields.

    Raises:
        AutoFixError: Unknown field, a boolean field, or content of the
            wrong type for the field.
    """
    attr = FormSnapshot.resolve_field(field)
    if attr is None:
        raise AutoFixError(f"Unknown field: {field}")
    if attr in BOOL_FIELDS:
        raise AutoFixError(f"Field {field} cannot be auto-fixed")

    if attr in TAG_FIELDS:
        value = _coerce_tags(field, TAG_FIELDS[attr], content)
    else:
        if not isinstance(content, str):
            raise AutoFixError(f"Field {field} expects text content")
        value = content

    logger.debug("Auto-fix applied to %s", attr)
    return snapshot.model_copy(update={attr: value})


def apply_rule_fix(snapshot: FormSnapshot, rule_id: str) -> FormSnapshot:
    """Generate a rule's fix for this snapshot and apply it."""
    rule = get_rule(rule_id)
    if rule is None:
        raise AutoFixError(f"Unknown rule: {rule_id}")
    return apply_auto_fix(snapshot, rule.field, rule.fix(snapshot))


def _coerce_tags(field: str, enum_cls: type, content) -> list:
    if not isinstance(content, list) or not all(isinstance(v, str) for v in content):
        raise AutoFixError(f"Field {field} expects a list of tags")
    tags = []
    for value in content:
        try:
            tag = enum_cls(value)
        except ValueError:
            raise AutoFixError(f"Unknown value for {field}: {value}") from None
        if tag not in tags:
            tags.append(tag)
    return tags
