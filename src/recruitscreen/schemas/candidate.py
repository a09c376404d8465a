from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"


class Stage(str, Enum):
    """Recruiting pipeline stage, valued with its display label."""

    NEW_LEAD = "New Lead"
    SCREENING = "Screening"
    DOCUMENTS = "Documents"
    MEPS = "MEPS"
    ENLISTED = "Enlisted"
    SHIPPED = "Shipped"

    @property
    def sort_order(self) -> int:
        return list(Stage).index(self)


class MedicalFlag(str, Enum):
    """Medical screening notes recorded against a candidate."""

    ASTHMA = "asthma"
    HEART_CONDITION = "heartCondition"
    MENTAL_HEALTH = "mentalHealth"
    VISION = "vision"
    HEARING = "hearing"
    ORTHOPEDIC = "orthopedic"
    OTHER = "other"


class LegalDisqualifier(str, Enum):
    """Legal history entries that may require review."""

    FELONY = "felony"
    PROBATION = "probation"
    PAROLE = "parole"
    DUI = "dui"
    OTHER = "other"


class Candidate(BaseModel):
    """Applicant snapshot consumed by the eligibility and body composition engines.

    Unknown numeric attributes stay ``None``; zero is a real measurement.
    Accepts both camelCase keys (as written by the recruiter app) and
    snake_case attribute names. ``body_composition_status`` is derived by the
    assessment pipeline; any value supplied in input is discarded.
    """

    candidate_id: str = ""
    full_name: str = ""
    age: int | None = None
    sex: Sex = Sex.MALE
    prior_service: bool = False
    physical_health: str = ""
    legal_issues: str = ""
    education_level: str = ""
    medical_flags: list[MedicalFlag] = Field(default_factory=list)
    legal_history: list[LegalDisqualifier] = Field(default_factory=list)
    interest_level: int = 0
    dependents: int | None = None
    has_tattoos: bool = False
    tattoos_notes: str = ""
    stage: Stage = Stage.NEW_LEAD
    height_in_inches: float | None = None
    weight_in_pounds: float | None = None
    waist_in_inches: float | None = None
    updated_at: datetime | None = None
    last_activity_at: datetime | None = None
    body_composition_status: str | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    @field_validator("body_composition_status", mode="before")
    @classmethod
    def _discard_input_status(cls, value: object) -> None:
        return None
