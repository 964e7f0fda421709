"""AI review and drafting API routes.

Endpoints:
  POST   /gpt-validate       Language, tone and completeness review (always 200)
  POST   /copilot-generate   Draft form content from a free-text prompt
"""

import logging

from fastapi import APIRouter, HTTPException

from rams.schemas.gating import CopilotRequest
from rams.schemas.rams import FormSnapshot
from rams.services.ai import AIServiceError
from rams.services.compliance.review import review_form, review_to_dict
from rams.services.copilot import draft_rams, draft_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(tags=["review"])


@router.post("/gpt-validate")
def gpt_validate(body: FormSnapshot):
    """Score the form's language and tone. Falls back to fixed scores."""
    return review_to_dict(review_form(body))


@router.post("/copilot-generate")
def copilot_generate(body: CopilotRequest):
    """Draft RAMS content for the described job."""
    try:
        draft = draft_rams(body.prompt)
    except AIServiceError as e:
        logger.warning("Copilot generation failed: %s", e)
        raise HTTPException(status_code=502, detail=f"Failed to generate RAMS content: {e}")
    return draft_to_dict(draft)
