"""
SaddleUp Chat - Answering rider questions.

- orchestrator: system prompt assembly and the model call
- timestamps: video timestamp extraction from replies
- service: request-level glue (context + lessons + orchestrator)
"""

from saddleup.chat.orchestrator import (
    ChatMessage,
    ChatResponse,
    UserContext,
    build_chat_system_prompt,
    generate_chat_response,
)
from saddleup.chat.service import answer_message
from saddleup.chat.timestamps import (
    MediaAnalysis,
    TimestampReference,
    extract_timestamp_analysis,
)

__all__ = [
    "ChatMessage",
    "ChatResponse",
    "UserContext",
    "build_chat_system_prompt",
    "generate_chat_response",
    "answer_message",
    "MediaAnalysis",
    "TimestampReference",
    "extract_timestamp_analysis",
]
