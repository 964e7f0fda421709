"""Pydantic schemas for validation and auto-fix requests."""

from pydantic import BaseModel, Field

from rams.models.enums import Regulation
from rams.schemas.rams import FormSnapshot


class ValidateStepRequest(FormSnapshot):
    """The form snapshot plus validation options, flattened in one body."""

    step: int | None = Field(default=None, ge=1, le=6)
    regulations: list[Regulation] | None = None
    use_ai: bool = Field(default=True, alias="useAi")

    def snapshot(self) -> FormSnapshot:
        return FormSnapshot.model_validate(
            self.model_dump(include=set(FormSnapshot.model_fields))
        )


class AutoFixRequest(BaseModel):
    form_data: FormSnapshot = Field(alias="formData")
    rule_id: str | None = Field(default=None, alias="ruleId")
    field: str | None = None
    content: str | list[str] | None = None

    model_config = {"populate_by_name": True}
