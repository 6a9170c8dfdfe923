"""
SaddleUp - Model Router.

Selects the model and sampling parameters for each kind of call.

Tasks:
- chat: conversational answers, warmer
- plan: JSON curriculum generation, more deterministic
"""

from typing import Literal, TypedDict

from saddleup.config import settings

Task = Literal["chat", "plan"]


class ModelConfig(TypedDict, total=False):
    """Configuration for model calls."""

    model: str
    temperature: float
    max_tokens: int


# Lower = more deterministic, higher = more creative
TASK_TEMPERATURE: dict[str, float] = {
    "chat": 0.6,
    "plan": 0.3,
}

# Plans are long: 2-4 phases of full lesson templates
TASK_MAX_TOKENS: dict[str, int] = {
    "plan": 8192,
}


def get_task_config(task: Task | str) -> ModelConfig:
    """
    Get model configuration for a task.

    Args:
        task: "chat" or "plan" (unknown tasks use the chat model)

    Returns:
        Model configuration with model name and sampling parameters
    """
    model = settings.llm_plan_model if task == "plan" else settings.llm_chat_model
    config: ModelConfig = {"model": model}

    if task in TASK_TEMPERATURE:
        config["temperature"] = TASK_TEMPERATURE[task]
    if task in TASK_MAX_TOKENS:
        config["max_tokens"] = TASK_MAX_TOKENS[task]

    return config
