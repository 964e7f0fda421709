"""Compliance validation API routes.

Endpoints:
  POST   /validate-step   Rule-based (plus optional AI) validation of a form snapshot
  POST   /auto-fix        Apply a rule's fix, or explicit content, to one field
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from rams.dependencies import enforce_validate_rate_limit
from rams.models.enums import Regulation
from rams.schemas.validation import AutoFixRequest, ValidateStepRequest
from rams.services.compliance.augmenter import AugmentResult, augment_with_ai, merge_suggestions
from rams.services.compliance.autofix import AutoFixError, apply_auto_fix, apply_rule_fix
from rams.services.compliance.evaluator import evaluate_rules, filter_to_step
from rams.services.compliance.rules import get_rule
from rams.services.compliance.scoring import (
    build_score_details,
    build_summary,
    calculate_score,
    generate_recommendations,
    group_by_field,
)
from rams.services.compliance.severity import severity_weights
from rams.services.compliance.suggestion import suggestion_to_dict
from rams.services.gating import LEGAL_DISCLAIMER

logger = logging.getLogger(__name__)

router = APIRouter(tags=["validation"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _ai_status_to_dict(result: AugmentResult | None) -> dict:
    if result is None:
        return {"status": "skipped", "reason": "AI validation not requested", "suggestionCount": 0}
    return {
        "status": result.status,
        "reason": getattr(result, "reason", None),
        "suggestionCount": len(result.suggestions),
    }


# ---------------------------------------------------------------------------
# Validate
# ---------------------------------------------------------------------------

@router.post("/validate-step", dependencies=[Depends(enforce_validate_rate_limit)])
def validate_step(body: ValidateStepRequest):
    """Validate a form snapshot and score it.

    AI failures never fail the request: the rule-based result is returned
    with the AI status marked degraded.
    """
    snapshot = body.snapshot()
    regulations = body.regulations if body.regulations is not None else list(Regulation)

    suggestions = evaluate_rules(snapshot, regulations, step=body.step)

    ai_result = None
    if body.use_ai:
        ai_result = augment_with_ai(snapshot)
        ai_suggestions = ai_result.suggestions
        if body.step is not None:
            ai_suggestions = filter_to_step(ai_suggestions, body.step)
        suggestions = merge_suggestions(suggestions, ai_suggestions)

    weights = severity_weights()
    score = calculate_score(suggestions, snapshot, weights)

    logger.info(
        "Validated step %s: %d suggestions, score %d", body.step, len(suggestions), score,
    )
    return {
        "suggestions": [suggestion_to_dict(s) for s in suggestions],
        "complianceScore": score,
        "scoreDetails": build_score_details(score, suggestions, weights),
        "summary": build_summary(suggestions),
        "recommendations": generate_recommendations(snapshot, suggestions),
        "ai": _ai_status_to_dict(ai_result),
        "disclaimer": LEGAL_DISCLAIMER,
        "metadata": {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "step": body.step,
            "regulations": [r.value for r in regulations],
            "byField": {field: len(items) for field, items in group_by_field(suggestions).items()},
        },
    }


# ---------------------------------------------------------------------------
# Auto-fix
# ---------------------------------------------------------------------------

@router.post("/auto-fix")
async def auto_fix(body: AutoFixRequest):
    """Apply fix content to the form and return the updated form."""
    try:
        if body.rule_id:
            rule = get_rule(body.rule_id)
            if rule is None:
                raise HTTPException(status_code=404, detail=f"Unknown rule: {body.rule_id}")
            updated = apply_rule_fix(body.form_data, body.rule_id)
            field = rule.field
        elif body.field and body.content is not None:
            updated = apply_auto_fix(body.form_data, body.field, body.content)
            field = body.field
        else:
            raise HTTPException(
                status_code=400, detail="Provide ruleId, or field and content",
            )
    except AutoFixError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "success": True,
        "field": field,
        "formData": updated.to_wire(),
    }
