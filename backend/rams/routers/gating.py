"""Competency and legal gating API routes.

Endpoints:
  GET    /competency/questions   The competency questionnaire
  POST   /competency/verify      Score questionnaire answers
  GET    /legal/disclaimer       Fixed legal disclaimer text
"""

from fastapi import APIRouter, HTTPException

from rams.schemas.gating import CompetencyVerifyRequest
from rams.services.gating import (
    AI_DISCLAIMER,
    LEGAL_DISCLAIMER,
    PASS_MARK,
    QUESTIONS,
    CompetencyError,
    competency_to_dict,
    question_to_dict,
    score_competency,
)

router = APIRouter(tags=["gating"])


@router.get("/competency/questions")
async def competency_questions():
    return {
        "questions": [question_to_dict(q) for q in QUESTIONS],
        "passMark": PASS_MARK,
    }


@router.post("/competency/verify")
async def competency_verify(body: CompetencyVerifyRequest):
    """Score the answers; verified at or above the pass mark."""
    try:
        result = score_competency(body.answers)
    except CompetencyError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return competency_to_dict(result)


@router.get("/legal/disclaimer")
async def legal_disclaimer():
    return {
        "disclaimer": LEGAL_DISCLAIMER,
        "aiDisclaimer": AI_DISCLAIMER,
    }
