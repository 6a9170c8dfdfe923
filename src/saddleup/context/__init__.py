"""
SaddleUp Context - Aggregation and prompt composition.

- aggregator: loads and merges rider/horse/facility/method records
- composer: renders the aggregated context into prompt text
"""

from saddleup.context.aggregator import build_comprehensive_context, merge_method_experience
from saddleup.context.composer import DEFAULT_PROMPT_TABLES, PromptTables, build_ai_context_prompt
from saddleup.context.models import (
    DEFAULT_PREFERENCE_MODE,
    AggregatedContext,
    FacilitySnapshot,
    HorseSnapshot,
    MethodExperience,
    MethodPreferenceMode,
    MethodRecord,
    RiderSnapshot,
    WeatherSnapshot,
)

__all__ = [
    # Aggregation
    "build_comprehensive_context",
    "merge_method_experience",
    # Composition
    "build_ai_context_prompt",
    "PromptTables",
    "DEFAULT_PROMPT_TABLES",
    # Models
    "AggregatedContext",
    "HorseSnapshot",
    "RiderSnapshot",
    "FacilitySnapshot",
    "WeatherSnapshot",
    "MethodRecord",
    "MethodExperience",
    "MethodPreferenceMode",
    "DEFAULT_PREFERENCE_MODE",
]
