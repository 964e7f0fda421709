"""FormSnapshot: the RAMS form as submitted by the multi-step UI.

Every field is optional; the form is validated field by field as the user
moves through the steps. Field names are camelCase on the wire.
"""

from pydantic import BaseModel, Field, field_validator

from rams.models.enums import Hazard, PPEItem

# Fields captured on each form step (1-based), by wire alias
STEP_FIELDS: dict[int, tuple[str, ...]] = {
    1: (
        "projectName", "clientName", "startDate", "endDate", "duration",
        "jobReference", "siteAddress", "siteContactPerson",
    ),
    2: (
        "trade", "taskType", "scopeOfWork", "methodStatement",
        "sequenceOfOperations", "personsAtRisk",
    ),
    3: ("selectedHazards", "customHazards", "controls"),
    4: ("selectedPPE", "specialEquipment", "toolingSafety", "signageAndBarriers"),
    5: (
        "firstAidArrangements", "firePrecautions", "emergencyContacts",
        "siteManager", "contactNumber",
    ),
    6: (
        "preparedBy", "reviewedBy", "reviewDate", "revisionNumber",
        "competentPersonVerified", "acknowledgement",
    ),
}

REQUIRED_FIELDS = (
    "projectName",
    "clientName",
    "scopeOfWork",
    "methodStatement",
    "controls",
    "emergencyContacts",
)

# Tag-set fields and the enum their values belong to
TAG_FIELDS: dict[str, type] = {
    "selected_hazards": Hazard,
    "selected_ppe": PPEItem,
}
BOOL_FIELDS = frozenset({"competent_person_verified", "acknowledgement"})


class FormSnapshot(BaseModel):
    # Project information
    project_name: str | None = Field(default=None, alias="projectName")
    client_name: str | None = Field(default=None, alias="clientName")
    start_date: str | None = Field(default=None, alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")
    duration: str | None = None
    job_reference: str | None = Field(default=None, alias="jobReference")
    site_address: str | None = Field(default=None, alias="siteAddress")
    site_contact_person: str | None = Field(default=None, alias="siteContactPerson")

    # Work details
    trade: str | None = None
    task_type: str | None = Field(default=None, alias="taskType")
    scope_of_work: str | None = Field(default=None, alias="scopeOfWork")
    method_statement: str | None = Field(default=None, alias="methodStatement")
    sequence_of_operations: str | None = Field(default=None, alias="sequenceOfOperations")
    persons_at_risk: str | None = Field(default=None, alias="personsAtRisk")

    # Hazards and controls
    selected_hazards: list[Hazard] = Field(default_factory=list, alias="selectedHazards")
    custom_hazards: str | None = Field(default=None, alias="customHazards")
    controls: str | None = None

    # Equipment and PPE
    selected_ppe: list[PPEItem] = Field(default_factory=list, alias="selectedPPE")
    special_equipment: str | None = Field(default=None, alias="specialEquipment")
    tooling_safety: str | None = Field(default=None, alias="toolingSafety")
    signage_and_barriers: str | None = Field(default=None, alias="signageAndBarriers")

    # Emergency arrangements
    first_aid_arrangements: str | None = Field(default=None, alias="firstAidArrangements")
    fire_precautions: str | None = Field(default=None, alias="firePrecautions")
    emergency_contacts: str | None = Field(default=None, alias="emergencyContacts")
    site_manager: str | None = Field(default=None, alias="siteManager")
    contact_number: str | None = Field(default=None, alias="contactNumber")

    # Review and sign-off
    prepared_by: str | None = Field(default=None, alias="preparedBy")
    reviewed_by: str | None = Field(default=None, alias="reviewedBy")
    review_date: str | None = Field(default=None, alias="reviewDate")
    revision_number: str | None = Field(default=None, alias="revisionNumber")
    competent_person_verified: bool = Field(default=False, alias="competentPersonVerified")
    acknowledgement: bool = False

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("selected_hazards", "selected_ppe", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("selected_hazards", "selected_ppe")
    @classmethod
    def _dedupe_tags(cls, value: list) -> list:
        return list(dict.fromkeys(value))

    @classmethod
    def resolve_field(cls, name: str) -> str | None:
        """Map a wire alias or attribute name to the attribute name."""
        for attr, info in cls.model_fields.items():
            if name == attr or name == info.alias:
                return attr
        return None

    @classmethod
    def alias_for(cls, attr: str) -> str:
        info = cls.model_fields[attr]
        return info.alias or attr

    def text(self, attr: str) -> str:
        """Stripped text value of a field; empty string when absent."""
        value = getattr(self, attr, None)
        if not isinstance(value, str):
            return ""
        return value.strip()

    def has_hazard(self, hazard: Hazard) -> bool:
        return hazard in self.selected_hazards

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


def fields_up_to_step(step: int) -> frozenset[str]:
    """Wire aliases of every field on the given step or an earlier one."""
    fields: set[str] = set()
    for number, names in STEP_FIELDS.items():
        if number <= step:
            fields.update(names)
    return frozenset(fields)
