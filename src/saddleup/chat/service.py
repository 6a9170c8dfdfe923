"""
SaddleUp - Chat service.

Glue between an authenticated chat request and the orchestrator: loads the
rider's context and current lessons, then answers the message. Persisting
the user and assistant messages is the caller's job.
"""

import logging

from saddleup.chat.orchestrator import ChatMessage, ChatResponse, UserContext, generate_chat_response
from saddleup.context.aggregator import build_comprehensive_context
from saddleup.context.models import AggregatedContext, MethodRecord
from saddleup.db.client import get_incomplete_lessons, get_method

logger = logging.getLogger(__name__)

# Upcoming lessons offered to the model as back-references
MAX_REFERENCED_LESSONS = 10


def build_user_context(
    context: AggregatedContext,
    current_lessons: list[dict] | None = None,
    conversation_method: MethodRecord | None = None,
) -> UserContext:
    """Derive the chat UserContext from the aggregated rider context."""
    rider = context.rider
    return UserContext(
        experience_level=rider.experience_level,
        primary_goal=rider.primary_goal,
        current_lessons=list(current_lessons or []),
        method_preference=rider.primary_method,
        conversation_method=conversation_method,
        show_comparisons=bool(rider.show_comparisons),
    )


async def answer_message(
    user_id: str,
    content: str,
    conversation_history: list[ChatMessage],
    media_urls: list[str] | None = None,
    horse_id: str | None = None,
    facility_id: str | None = None,
    weather_context: dict | None = None,
    environmental_factors: list[str] | None = None,
    conversation_method_id: str | None = None,
) -> ChatResponse:
    """
    Answer a chat message for an authenticated user.

    Args:
        user_id: Authenticated user's id
        content: The new message text
        conversation_history: Earlier messages in this conversation, oldest first
        media_urls: Attached media (optional)
        horse_id: Horse the question is about (optional)
        facility_id: Facility in question (optional)
        weather_context: Current conditions (optional)
        environmental_factors: Free-form environment notes (optional)
        conversation_method_id: Method the conversation is scoped to (optional)

    Returns:
        ChatResponse from the orchestrator
    """
    context = await build_comprehensive_context(
        user_id,
        horse_id=horse_id,
        facility_id=facility_id,
        weather_context=weather_context,
        environmental_factors=environmental_factors,
    )
    lessons = await get_incomplete_lessons(user_id, limit=MAX_REFERENCED_LESSONS)

    conversation_method = None
    if conversation_method_id:
        record = await get_method(conversation_method_id)
        if record:
            conversation_method = MethodRecord.from_record(record)
        else:
            logger.warning(f"Conversation method {conversation_method_id} not found")

    return await generate_chat_response(
        user_message=content,
        conversation_history=conversation_history,
        user_context=build_user_context(context, lessons, conversation_method),
        media_urls=media_urls,
        comprehensive_context=context,
    )
