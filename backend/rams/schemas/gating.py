"""Pydantic schemas for competency verification and copilot drafting."""

from pydantic import BaseModel, Field


class CompetencyVerifyRequest(BaseModel):
    answers: dict[str, str]


class CopilotRequest(BaseModel):
    prompt: str = Field(min_length=1, max_length=4000)
