"""
SaddleUp - LLM Client.

Plain chat-completion calls against an OpenAI-compatible endpoint.
"""

from saddleup.llm.client import call_llm_chat, get_raw_async_client
from saddleup.llm.model_router import get_task_config

__all__ = [
    "call_llm_chat",
    "get_raw_async_client",
    "get_task_config",
]
