"""
SaddleUp - LLM Client.

Wraps the OpenAI SDK pointed at any OpenAI-compatible endpoint.
All model calls go through here for consistency and observability.

The SDK owns the transport policy: every call has a timeout and a bounded
number of retries with exponential backoff (see Settings.llm_timeout_seconds
and Settings.llm_max_retries). Cancelling the awaiting task aborts the
in-flight request.

The connection pool belongs to the event loop that opened it, so the
cached client is rebuilt whenever calls arrive on a different loop (the
CLI runs one asyncio.run per turn).
"""

import asyncio
import logging

import openai
from openai import AsyncOpenAI

from saddleup.config import settings
from saddleup.errors import ModelError
from saddleup.llm.model_router import get_task_config
from saddleup.llm.prompt_logger import log_prompt

logger = logging.getLogger(__name__)

# Client instance and the event loop its pool is bound to
_async_client: AsyncOpenAI | None = None
_client_loop: asyncio.AbstractEventLoop | None = None


def _current_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def get_raw_async_client() -> AsyncOpenAI:
    """
    Get the async OpenAI-compatible client.

    One client per event loop; repeated calls on the same loop share the
    connection pool.
    """
    global _async_client, _client_loop

    loop = _current_loop()
    if _async_client is None or (loop is not None and loop is not _client_loop):
        if _async_client is not None:
            logger.debug("Event loop changed, rebuilding model client")
        _async_client = AsyncOpenAI(
            api_key=settings.llm_api_key,
            base_url=settings.llm_base_url,
            timeout=settings.llm_timeout_seconds,
            max_retries=settings.llm_max_retries,
        )
        _client_loop = loop

    return _async_client


def reset_client() -> None:
    """Drop the cached client (settings changed, or tests)."""
    global _async_client, _client_loop
    _async_client = None
    _client_loop = None


async def call_llm_chat(
    *,
    messages: list[dict[str, str]],
    task: str = "chat",
) -> str:
    """
    Send role-tagged messages and return the completion text.

    Args:
        messages: [{"role": "system"|"user"|"assistant", "content": ...}, ...]
        task: "chat" or "plan" - selects model and sampling parameters

    Returns:
        The text of choices[0].message

    Raises:
        ModelError: HTTP failure, transport failure, or a response without
            choices[0].message content
    """
    client = get_raw_async_client()
    config = get_task_config(task)
    model = config.pop("model")

    try:
        response = await client.chat.completions.create(
            model=model,
            messages=messages,
            **config,
        )
        content = _extract_content(response)

    except openai.APIStatusError as e:
        body = e.response.text if e.response is not None else None
        logger.error(f"Model API error ({task}): {e.status_code} - {body}")
        log_prompt(task=task, model=model, messages=messages, error=str(e))
        raise ModelError(
            f"Model API error: {e.status_code}",
            status_code=e.status_code,
            body=body,
        ) from e

    except openai.APIError as e:
        logger.error(f"Model API call failed ({task}): {e}")
        log_prompt(task=task, model=model, messages=messages, error=str(e))
        raise ModelError(f"Model API call failed: {e}") from e

    except ModelError as e:
        logger.error(f"Invalid model response ({task}): {e}")
        log_prompt(task=task, model=model, messages=messages, error=str(e))
        raise

    except Exception as e:
        logger.error(f"Model transport failed ({task}): {type(e).__name__}: {e}")
        log_prompt(task=task, model=model, messages=messages, error=str(e))
        raise ModelError(f"Model API call failed: {e}") from e

    log_prompt(task=task, model=model, messages=messages, response=content)
    return content


def _extract_content(response) -> str:
    """Pull choices[0].message.content out of a completion, or raise."""
    choices = getattr(response, "choices", None)
    if not choices:
        raise ModelError("Invalid response from model API: no choices")

    message = getattr(choices[0], "message", None)
    if message is None or message.content is None:
        raise ModelError("Invalid response from model API: missing message")

    return message.content
