"""
SaddleUp - Training plan service.

Plan generation with fallback, plus helpers the training screens need:
flattening a plan into lesson records and suggesting questions for the
current lesson.
"""

import logging
from dataclasses import dataclass
from typing import Literal

from saddleup.errors import SaddleUpError
from saddleup.plans.fallback import generate_fallback_plan
from saddleup.plans.generator import generate_training_plan
from saddleup.plans.models import LessonTemplate, OnboardingData, TrainingPlanStructure

logger = logging.getLogger(__name__)

MAX_SUGGESTED_QUESTIONS = 5


@dataclass(frozen=True)
class PlanResult:
    """A plan and where it came from."""

    plan: TrainingPlanStructure
    source: Literal["ai", "fallback"]
    error: SaddleUpError | None = None


@dataclass(frozen=True)
class LessonRecord:
    """One lesson row ready to be stored with its plan."""

    lesson_id: str  # "F1-M2-L3"
    phase_number: int
    module_number: int
    lesson_number: int
    title: str
    content: LessonTemplate


async def generate_plan_with_fallback(data: OnboardingData) -> PlanResult:
    """
    Generate a plan with the model, falling back to the static curriculum.

    Any core failure (model, parse or validation) selects the fallback;
    the error is kept on the result for diagnostics.
    """
    try:
        plan = await generate_training_plan(data)
    except SaddleUpError as e:
        logger.warning(f"AI plan generation failed ({type(e).__name__}), using fallback plan: {e}")
        return PlanResult(plan=generate_fallback_plan(data), source="fallback", error=e)

    return PlanResult(plan=plan, source="ai")


def lesson_id(phase_number: int, module_number: int, lesson_number: int) -> str:
    """Human-readable lesson id, e.g. F1-M2-L3."""
    return f"F{phase_number}-M{module_number}-L{lesson_number}"


def flatten_plan_lessons(plan: TrainingPlanStructure) -> list[LessonRecord]:
    """All lessons in plan order (phase, module, lesson)."""
    return [
        LessonRecord(
            lesson_id=lesson_id(phase.phase_number, module.module_number, lesson.lesson_number),
            phase_number=phase.phase_number,
            module_number=module.module_number,
            lesson_number=lesson.lesson_number,
            title=lesson.title,
            content=lesson,
        )
        for phase in plan.phases
        for module in phase.modules
        for lesson in module.lessons
    ]


def suggest_questions(lesson: LessonTemplate, limit: int = MAX_SUGGESTED_QUESTIONS) -> list[str]:
    """
    Starter questions a rider might ask about their current lesson.

    Three general questions, then equipment, safety and progression
    questions when the lesson has those details.
    """
    title = lesson.title
    questions = [
        f'What should I know before starting "{title}"?',
        f'How do I know if I\'m doing "{title}" correctly?',
        f'What are common mistakes to avoid in "{title}"?',
    ]
    if lesson.equipment:
        questions.append(f'What equipment do I need for "{title}"?')
    if lesson.safety_notes:
        questions.append(f'Are there safety concerns with "{title}"?')
    if lesson.move_on_when:
        questions.append(f'How do I know when I\'m ready to move on from "{title}"?')

    return questions[:limit]
