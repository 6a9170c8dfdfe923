"""
SaddleUp Plans - Training curricula.

- generator: AI curriculum generation and reply parsing
- fallback: static curriculum used when generation fails
- service: generation with fallback, lesson flattening, suggested questions
"""

from saddleup.plans.fallback import generate_fallback_plan
from saddleup.plans.generator import generate_training_plan, parse_plan_response, strip_code_fence
from saddleup.plans.models import LessonTemplate, Module, OnboardingData, Phase, TrainingPlanStructure
from saddleup.plans.service import (
    LessonRecord,
    PlanResult,
    flatten_plan_lessons,
    generate_plan_with_fallback,
    suggest_questions,
)

__all__ = [
    "generate_training_plan",
    "generate_fallback_plan",
    "generate_plan_with_fallback",
    "parse_plan_response",
    "strip_code_fence",
    "flatten_plan_lessons",
    "suggest_questions",
    "PlanResult",
    "LessonRecord",
    "OnboardingData",
    "TrainingPlanStructure",
    "Phase",
    "Module",
    "LessonTemplate",
]
