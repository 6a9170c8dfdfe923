"""
SaddleUp - Chat Orchestrator.

Builds the system prompt for one chat turn, sends it with the recent
conversation to the model, and attaches video timestamp metadata when the
user sent media.

1 LLM call per turn. No fallback: a model failure fails the turn with
ChatGenerationError.
"""

import logging
from dataclasses import dataclass, field
from typing import Literal, TypedDict

from saddleup.chat.prompts import DEFAULT_CHAT_TABLES, ChatPromptTables
from saddleup.chat.timestamps import MediaAnalysis, extract_timestamp_analysis
from saddleup.context.composer import DEFAULT_PROMPT_TABLES, PromptTables, build_ai_context_prompt, format_detail
from saddleup.context.models import AggregatedContext, MethodRecord, pick
from saddleup.errors import ChatGenerationError, ModelError
from saddleup.llm.client import call_llm_chat

logger = logging.getLogger(__name__)

# Most recent messages sent upstream with each turn
MAX_HISTORY_MESSAGES = 10


class ChatMessage(TypedDict):
    """One role-tagged message, oldest first in a history."""

    role: Literal["system", "user", "assistant"]
    content: str


@dataclass(frozen=True)
class UserContext:
    """What the chat turn knows about the user outside the aggregated context."""

    experience_level: str | None = None
    primary_goal: str | None = None
    current_lessons: list[dict] = field(default_factory=list)
    method_preference: MethodRecord | None = None
    conversation_method: MethodRecord | None = None
    show_comparisons: bool = False

    @property
    def active_method(self) -> MethodRecord | None:
        """The conversation's method overrides the rider's primary method."""
        return self.conversation_method or self.method_preference


@dataclass(frozen=True)
class ChatResponse:
    """Assistant reply plus media metadata."""

    content: str
    media_analysis: MediaAnalysis | None = None

    def to_dict(self) -> dict:
        return {
            "content": self.content,
            "mediaAnalysis": self.media_analysis.to_dict() if self.media_analysis else None,
        }


def _method_framing(method: MethodRecord, show_comparisons: bool, tables: ChatPromptTables) -> str:
    label = f"{method.name} ({method.category})" if method.category else method.name
    parts = [tables.method_intro.format(method=label)]
    if method.philosophy:
        parts.append(f"Philosophy: {method.philosophy}.")
    if method.key_principles:
        parts.append(f"Key principles: {format_detail(method.key_principles)}.")
    if method.common_terminology:
        parts.append(f"Common terminology: {format_detail(method.common_terminology)}.")

    closing = tables.comparison_mode.format(name=method.name) if show_comparisons else tables.method_framing
    return " ".join(parts) + "\n" + closing


def _lessons_block(lessons: list[dict], tables: ChatPromptTables) -> str:
    lines = [tables.lessons_intro]
    for lesson in lessons:
        lines.append(
            f"- Phase {pick(lesson, 'phase_number', 'phaseNumber')}, "
            f"Module {pick(lesson, 'module_number', 'moduleNumber')}, "
            f"Lesson {pick(lesson, 'lesson_number', 'lessonNumber')}: {pick(lesson, 'title')}"
        )
    first = lessons[0]
    lines.append("")
    lines.append(tables.lessons_reference.format(
        module=pick(first, "module_number", "moduleNumber") or 1,
        lesson=pick(first, "lesson_number", "lessonNumber") or 1,
    ))
    return "\n".join(lines)


def build_chat_system_prompt(
    user_context: UserContext,
    media_count: int = 0,
    comprehensive_context: AggregatedContext | None = None,
    tables: ChatPromptTables = DEFAULT_CHAT_TABLES,
    context_tables: PromptTables = DEFAULT_PROMPT_TABLES,
) -> str:
    """
    Build the system prompt for a chat turn.

    Section order:
    1. Persona
    2. Aggregated context (if supplied)
    3. Experience level
    4. Method framing (only without aggregated context, which already
       covers method preference) or comparison mode
    5. Current lessons
    6. Media analysis instructions
    7. Response and formatting guidelines
    """
    parts = [tables.persona]

    if comprehensive_context:
        parts.append(build_ai_context_prompt(comprehensive_context, context_tables))

    if user_context.experience_level:
        description = tables.experience_descriptions.get(
            user_context.experience_level, user_context.experience_level
        )
        parts.append(tables.experience_clause.format(description=description))

    method = user_context.active_method
    if method and not comprehensive_context:
        parts.append(_method_framing(method, user_context.show_comparisons, tables))
    elif method and user_context.show_comparisons:
        parts.append(tables.comparison_mode.format(name=method.name))

    if user_context.current_lessons:
        parts.append(_lessons_block(user_context.current_lessons, tables))

    if media_count > 0:
        parts.append("\n\n".join([
            tables.media_header.format(count=media_count),
            tables.video_guidance,
            tables.photo_guidance,
            tables.media_closing,
        ]))

    parts.append(tables.response_guidelines)
    return "\n\n".join(parts)


def build_chat_messages(
    system_prompt: str,
    conversation_history: list[ChatMessage],
    user_message: str,
    media_count: int = 0,
    tables: ChatPromptTables = DEFAULT_CHAT_TABLES,
) -> list[ChatMessage]:
    """System prompt, the last MAX_HISTORY_MESSAGES of history, then the new message."""
    history = [
        {"role": msg["role"], "content": msg["content"]}
        for msg in conversation_history[-MAX_HISTORY_MESSAGES:]
    ]
    content = user_message
    if media_count > 0:
        content = f"{user_message}\n\n{tables.attachment_note.format(count=media_count)}"

    return [
        {"role": "system", "content": system_prompt},
        *history,
        {"role": "user", "content": content},
    ]


async def generate_chat_response(
    user_message: str,
    conversation_history: list[ChatMessage],
    user_context: UserContext,
    media_urls: list[str] | None = None,
    comprehensive_context: AggregatedContext | None = None,
) -> ChatResponse:
    """
    Answer one chat message.

    Args:
        user_message: The new message from the user
        conversation_history: Prior messages, oldest first
        user_context: Experience level, lessons and method info
        media_urls: Attached photo/video URLs (optional)
        comprehensive_context: Aggregated horse/rider/facility context (optional)

    Returns:
        ChatResponse with the reply and, when media was attached, its
        timestamp analysis

    Raises:
        ChatGenerationError: The model call failed for any reason; the
            original error is chained as __cause__
    """
    media_urls = media_urls or []

    system_prompt = build_chat_system_prompt(
        user_context,
        media_count=len(media_urls),
        comprehensive_context=comprehensive_context,
    )
    messages = build_chat_messages(
        system_prompt, conversation_history, user_message, media_count=len(media_urls)
    )

    try:
        response_text = await call_llm_chat(messages=messages, task="chat")
    except Exception as e:
        logger.error(f"Error generating chat response: {e}")
        if isinstance(e, ModelError):
            raise ChatGenerationError(status_code=e.status_code, body=e.body) from e
        raise ChatGenerationError() from e

    media_analysis = extract_timestamp_analysis(response_text, media_urls) if media_urls else None

    return ChatResponse(content=response_text, media_analysis=media_analysis)
