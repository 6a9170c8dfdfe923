"""
SaddleUp - Training plan generator.

Asks the model for a curriculum as JSON and validates it into a
TrainingPlanStructure.

Failures are typed so the caller can choose a fallback:
- PlanGenerationError: the model call itself failed
- PlanParseError: the reply is not JSON
- PlanValidationError: the JSON has no phases or an empty level
"""

import json
import logging

from pydantic import ValidationError

from saddleup.errors import ModelError, PlanGenerationError, PlanParseError, PlanValidationError
from saddleup.llm.client import call_llm_chat
from saddleup.plans.models import OnboardingData, TrainingPlanStructure
from saddleup.plans.prompts import PLAN_SYSTEM_PROMPT, build_plan_prompt

logger = logging.getLogger(__name__)


def strip_code_fence(text: str) -> str:
    """Remove a ```json / ``` wrapper the model may add despite instructions."""
    text = text.strip()
    if text.startswith("```json"):
        text = text[len("```json"):]
    if text.startswith("```"):
        text = text[len("```"):]
    if text.endswith("```"):
        text = text[: -len("```")]
    return text.strip()


def parse_plan_response(text: str) -> TrainingPlanStructure:
    """
    Parse and validate a model reply.

    Raises:
        PlanParseError: Not valid JSON
        PlanValidationError: Valid JSON but not a usable plan
    """
    json_text = strip_code_fence(text)

    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as e:
        raise PlanParseError(f"invalid JSON ({e.msg} at line {e.lineno})") from e

    if not isinstance(data, dict) or not data.get("phases"):
        raise PlanValidationError("response has no phases")

    try:
        return TrainingPlanStructure.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise PlanValidationError(f"{e.error_count()} structural error(s), first at {location}: {first['msg']}") from e


async def generate_training_plan(data: OnboardingData) -> TrainingPlanStructure:
    """
    Generate a personalized curriculum with the model.

    Args:
        data: The rider's onboarding answers

    Returns:
        Validated TrainingPlanStructure

    Raises:
        PlanGenerationError: Model call failed (cause chained)
        PlanParseError / PlanValidationError: Reply unusable
    """
    messages = [
        {"role": "system", "content": PLAN_SYSTEM_PROMPT},
        {"role": "user", "content": build_plan_prompt(data)},
    ]

    try:
        response_text = await call_llm_chat(messages=messages, task="plan")
    except Exception as e:
        logger.error(f"Error generating training plan: {e}")
        if isinstance(e, ModelError):
            raise PlanGenerationError(status_code=e.status_code, body=e.body) from e
        raise PlanGenerationError() from e

    try:
        plan = parse_plan_response(response_text)
    except PlanParseError as e:
        logger.warning(f"Unusable training plan from model: {e.detail}")
        raise

    logger.info(
        f"Generated training plan: {len(plan.phases)} phases, "
        f"{sum(len(p.modules) for p in plan.phases)} modules"
    )
    return plan
