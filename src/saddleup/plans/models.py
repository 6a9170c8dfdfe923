"""
SaddleUp - Training plan models.

Phases contain modules, modules contain lessons. The wire format (model
output and stored plan content) is camelCase; Python attributes are
snake_case.

Structure is strict (every level needs at least one child). Descriptive
fields are lenient: a null from the model reads as empty.
"""

from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

Text = Annotated[str, BeforeValidator(lambda v: "" if v is None else v)]
TextList = Annotated[list[str], BeforeValidator(lambda v: [] if v is None else v)]


class _PlanModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OnboardingData(_PlanModel):
    """Answers from onboarding that drive plan generation."""

    experience_level: str
    primary_goal: str
    days_per_week: int = Field(ge=1, le=7)
    session_length: int = Field(gt=0, description="Minutes per session")
    owns_horse: bool
    horse_details: str | None = None


class LessonTemplate(_PlanModel):
    """One lesson: what to do, how to stay safe, when to move on."""

    lesson_number: int
    title: str
    objective: Text = ""
    equipment: TextList = Field(default_factory=list)
    instructions: TextList = Field(default_factory=list)
    safety_notes: TextList = Field(default_factory=list)
    common_mistakes: TextList = Field(default_factory=list)
    move_on_when: TextList = Field(default_factory=list)
    requires_professional_help: bool | None = None


class Module(_PlanModel):
    module_number: int
    module_name: str
    description: Text = ""
    lessons: list[LessonTemplate] = Field(min_length=1)


class Phase(_PlanModel):
    phase_number: int
    phase_name: str
    description: Text = ""
    modules: list[Module] = Field(min_length=1)


class TrainingPlanStructure(_PlanModel):
    """A full curriculum. Never empty: every level has at least one child."""

    phases: list[Phase] = Field(min_length=1)

    def to_dict(self) -> dict:
        """camelCase dict for storage."""
        return self.model_dump(by_alias=True, exclude_none=True)
