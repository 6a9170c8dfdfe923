"""
SaddleUp - Video timestamp extraction.

Scans assistant text for references like "At 0:15", "At 0:20-0:25",
"Around 0:30" or "Between 0:10 and 0:15", and classifies each by the
keywords found around it.

Classification precedence is positive, then concern, then instruction;
the first category with a keyword in the context window wins.
"""

import re
from dataclasses import dataclass, field
from typing import Literal

TimestampType = Literal["positive", "concern", "instruction"]

TIMESTAMP_PATTERN = re.compile(
    r"(?:At|Around|Between|From)\s+(\d+):(\d+)(?:-(\d+):(\d+))?(?:\s+and\s+(\d+):(\d+))?",
    re.IGNORECASE,
)
_FIRST_TIME = re.compile(r"(\d+):(\d+)")

# Context window around each match
CONTEXT_BEFORE = 50
CONTEXT_AFTER = 200


@dataclass(frozen=True)
class TimestampKeywords:
    """Keyword table for classifying a timestamp's context, in precedence order."""

    categories: tuple[tuple[TimestampType, tuple[str, ...]], ...]


DEFAULT_TIMESTAMP_KEYWORDS = TimestampKeywords(
    categories=(
        ("positive", ("good", "nice", "well", "correct")),
        ("concern", ("wrong", "issue", "problem", "concern", "worry")),
        ("instruction", ("try", "should", "need to", "focus on")),
    ),
)


@dataclass(frozen=True)
class TimestampReference:
    """One timestamped observation in a video analysis."""

    timestamp: str  # "0:15" or "0:20-0:25"
    text: str
    type: TimestampType | None = None

    def to_dict(self) -> dict:
        data = {"timestamp": self.timestamp, "text": self.text}
        if self.type:
            data["type"] = self.type
        return data


@dataclass(frozen=True)
class MediaAnalysis:
    """Media metadata attached to an assistant message."""

    has_media: bool
    media_count: int
    timestamp_references: list[TimestampReference] = field(default_factory=list)
    has_video_timestamps: bool = False

    def to_dict(self) -> dict:
        """Wire shape stored with the assistant message."""
        return {
            "hasMedia": self.has_media,
            "mediaCount": self.media_count,
            "timestampReferences": [ref.to_dict() for ref in self.timestamp_references],
            "hasVideoTimestamps": self.has_video_timestamps,
        }


def parse_timestamp_to_seconds(timestamp: str) -> int:
    """
    Convert a timestamp to seconds for sorting.

    Ranges use their start time. Unparsable input sorts first (0).
    """
    match = _FIRST_TIME.search(timestamp)
    if not match:
        return 0
    return int(match.group(1)) * 60 + int(match.group(2))


def _format_time(minutes: str, seconds: str) -> str:
    return f"{int(minutes)}:{int(seconds):02d}"


def classify_context(text: str, keywords: TimestampKeywords = DEFAULT_TIMESTAMP_KEYWORDS) -> TimestampType | None:
    """Return the first category with a keyword in text, or None."""
    lowered = text.lower()
    for category, words in keywords.categories:
        if any(word in lowered for word in words):
            return category
    return None


def extract_timestamp_analysis(
    response_text: str,
    media_urls: list[str],
    keywords: TimestampKeywords = DEFAULT_TIMESTAMP_KEYWORDS,
) -> MediaAnalysis:
    """
    Extract timestamp references from an assistant response.

    Only called when the user attached media, so has_media is always True.

    Args:
        response_text: The assistant's reply
        media_urls: URLs of the attached media
        keywords: Classification keyword table

    Returns:
        MediaAnalysis with references deduplicated by timestamp (last one
        wins) and sorted by start time
    """
    by_timestamp: dict[str, TimestampReference] = {}

    for match in TIMESTAMP_PATTERN.finditer(response_text):
        start_min, start_sec, dash_min, dash_sec, and_min, and_sec = match.groups()
        timestamp = _format_time(start_min, start_sec)
        if dash_min is not None and dash_sec is not None:
            timestamp += f"-{_format_time(dash_min, dash_sec)}"
        elif and_min is not None and and_sec is not None:
            timestamp += f"-{_format_time(and_min, and_sec)}"

        context_start = max(0, match.start() - CONTEXT_BEFORE)
        context_end = min(len(response_text), match.end() + CONTEXT_AFTER)
        context = response_text[context_start:context_end]

        # Last occurrence wins; position stays at first occurrence
        by_timestamp[timestamp] = TimestampReference(
            timestamp=timestamp,
            text=context.strip(),
            type=classify_context(context, keywords),
        )

    references = sorted(by_timestamp.values(), key=lambda ref: parse_timestamp_to_seconds(ref.timestamp))

    return MediaAnalysis(
        has_media=True,
        media_count=len(media_urls),
        timestamp_references=references,
        has_video_timestamps=len(references) > 0,
    )
