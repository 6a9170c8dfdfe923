"""
SaddleUp - Prompt Composer.

Renders an AggregatedContext into the context section of the system prompt.

Pure and deterministic: the same context and tables always produce the same
string. Sections render in a fixed order and only when their data is present:

1. Horse profile
2. Rider profile
3. Method preference (explore / blend / single)
4. Method experience (blend and explore only)
5. Facility
6. Current conditions

The output is read by a language model, so it carries names and
descriptions only, never record ids.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from saddleup.context.models import (
    AggregatedContext,
    FacilitySnapshot,
    HorseSnapshot,
    MethodExperience,
    MethodPreferenceMode,
    MethodRecord,
    RiderSnapshot,
)


@dataclass(frozen=True)
class PromptTables:
    """Fixed wording used by the composer."""

    headings: Mapping[str, str]
    directives: Mapping[str, str]
    preference_modes: Mapping[MethodPreferenceMode, str]
    unpredictable_keyword: str
    safety_warning: str
    strategy_note: str
    accommodation_note: str
    blending_directives: tuple[str, ...] = field(default_factory=tuple)


DEFAULT_PROMPT_TABLES = PromptTables(
    headings=MappingProxyType({
        "horse": "**HORSE PROFILE:**",
        "rider": "**RIDER PROFILE:**",
        "preference": "**METHOD PREFERENCE:**",
        "experience": "**RIDER METHOD EXPERIENCE:**",
        "blending": "**INSTRUCTIONS FOR METHOD BLENDING:**",
        "facility": "**FACILITY:**",
        "conditions": "**CURRENT CONDITIONS:**",
    }),
    directives=MappingProxyType({
        "horse": "**IMPORTANT: Tailor every recommendation to this specific horse's temperament, history and current level.**",
        "rider": "**IMPORTANT: Match explanations and exercises to this rider's experience, learning style and risk tolerance.**",
        "experience": "**IMPORTANT: Pitch explanations for each method at the rider's comfort level with it.**",
        "facility": "**IMPORTANT: Adapt all recommendations to work within these facility constraints.**",
        "conditions": "**IMPORTANT: Adapt session plan based on these conditions.**",
    }),
    preference_modes=MappingProxyType({
        MethodPreferenceMode.EXPLORE: (
            "The rider is still exploring horsemanship methods and has not committed to one. "
            "Explore various approaches: where more than one sound answer exists, briefly show how "
            "different methods would handle it and what each emphasizes.\n"
            "**IMPORTANT: Present options from several methods neutrally and let the rider compare them.**"
        ),
        MethodPreferenceMode.BLEND: (
            "The rider blends techniques from these selected methods: {names}.\n"
            "**IMPORTANT: Blend techniques from the selected methods and attribute each technique "
            "to the method it comes from.**"
        ),
        MethodPreferenceMode.SINGLE: (
            "The rider follows {name} exclusively.\n"
            "**IMPORTANT: Focus exclusively on {name}, use its terminology, and do not recommend "
            "techniques from other methods.**"
        ),
    }),
    unpredictable_keyword="unpredictable",
    safety_warning=(
        "**SAFETY WARNING: This horse can be unpredictable. Always recommend protective gear, "
        "a safe enclosed work area and an experienced handler nearby.**"
    ),
    strategy_note=(
        "**STRATEGY NOTE: Work around the issues, injuries and trauma listed above. "
        "Avoid known triggers, respect physical limits and build confidence gradually.**"
    ),
    accommodation_note="**IMPORTANT: Adapt all recommendations to accommodate these limitations.**",
    blending_directives=(
        "Reference familiar terminology and exercises from their known methods",
        "For methods with lower comfort levels, provide more detailed explanations",
        "When blending methods, explain which method each technique comes from",
        "Show how different methods approach similar concepts",
    ),
)

_ID_KEY = re.compile(r"(?:^|_)(?i:id)$|(?:Id|ID)$")


# =============================================================================
# Value Formatting
# =============================================================================


def _humanize_key(key: str) -> str:
    words = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", " ", key).replace("_", " ")
    return words.strip().capitalize()


def format_detail(value: Any) -> str:
    """
    Render a stored value as readable text.

    Lists become comma-separated, dicts become "Key: value" pairs.
    Id-like keys are skipped.
    """
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        parts = [format_detail(v) for v in value if v not in (None, "", [], {})]
        return ", ".join(p for p in parts if p)
    if isinstance(value, dict):
        parts = [
            f"{_humanize_key(k)}: {format_detail(v)}"
            for k, v in value.items()
            if not _ID_KEY.search(str(k)) and v not in (None, "", [], {})
        ]
        return "; ".join(parts)
    return str(value).strip()


def _line(label: str, value: Any) -> str | None:
    if value is None:
        return None
    text = format_detail(value)
    return f"{label}: {text}" if text else None


def _block(heading: str, lines: list[str | None]) -> str:
    return "\n".join([heading, *[line for line in lines if line]])


# =============================================================================
# Sections
# =============================================================================


def _horse_section(horse: HorseSnapshot, tables: PromptTables) -> str:
    lines = [
        f"Name: {horse.name}",
        _line("Breed", horse.breed),
        _line("Age", horse.age),
        _line("Sex", horse.sex),
        _line("Temperament", horse.temperament),
    ]
    keyword = tables.unpredictable_keyword.lower()
    if horse.temperament and any(keyword in tag.lower() for tag in horse.temperament):
        lines.append(tables.safety_warning)

    lines += [
        _line("Energy Level", horse.energy_level),
        _line("Learning Style", horse.learning_style),
        _line("Injuries/Health", horse.injuries),
        _line("Health Conditions", horse.health_conditions),
        _line("Known Issues", horse.known_issues),
        _line("Past Trauma", horse.past_trauma),
        _line("Training Level", horse.training_level),
        _line("Training History", horse.training_history),
        _line("Known Cues", horse.known_cues),
        _line("Areas of Difficulty", horse.struggles),
        _line("Strengths", horse.strengths),
    ]
    if horse.known_issues or horse.injuries or horse.past_trauma:
        lines.append(tables.strategy_note)

    lines.append(tables.directives["horse"])
    return _block(tables.headings["horse"], lines)


def _rider_section(rider: RiderSnapshot, tables: PromptTables) -> str | None:
    lines = [
        _line("Experience Level", rider.experience_level),
        _line("Primary Goal", rider.primary_goal),
        _line("Learning Style", rider.learning_style),
        _line("Risk Tolerance", rider.risk_tolerance),
    ]
    if rider.physical_limitations:
        lines.append(_line("Physical Limitations", rider.physical_limitations))
        lines.append(tables.accommodation_note)
    lines += [
        _line("Confidence Areas", rider.confidence_areas),
        _line("Struggle Areas", rider.struggle_areas),
    ]
    if not any(lines):
        return None

    lines.append(tables.directives["rider"])
    return _block(tables.headings["rider"], lines)


def _by_comfort(experience: list[MethodExperience]) -> list[MethodExperience]:
    return sorted(
        (me for me in experience if me.method),
        key=lambda me: (-me.comfort_level, me.method.name.lower()),
    )


def _method_details(method: MethodRecord) -> list[str | None]:
    return [
        _line("Philosophy", method.philosophy),
        _line("Key Principles", method.key_principles),
        _line("Common Terminology", method.common_terminology),
    ]


def _designated_method(rider: RiderSnapshot) -> MethodRecord | None:
    if rider.primary_method:
        return rider.primary_method
    ranked = _by_comfort(rider.method_experience or [])
    return ranked[0].method if ranked else None


def _preference_section(rider: RiderSnapshot, tables: PromptTables) -> str:
    mode = rider.effective_preference_mode
    template = tables.preference_modes[mode]
    lines: list[str | None] = []

    if mode is MethodPreferenceMode.SINGLE:
        method = _designated_method(rider)
        name = method.name if method else "their chosen method"
        if method and method.category:
            lines.append(f"Method: {method.name} ({method.category})")
        if method:
            lines += _method_details(method)
        lines.append(template.format(name=name))

    elif mode is MethodPreferenceMode.BLEND:
        names = [me.method.name for me in rider.method_experience or [] if me.method]
        if rider.primary_method and rider.primary_method.name not in names:
            names.insert(0, rider.primary_method.name)
        lines.append(template.format(names=", ".join(names) or "their selected methods"))

    else:
        if rider.primary_method:
            lines.append(f"Currently most interested in: {rider.primary_method.name}")
        lines.append(template)

    return _block(tables.headings["preference"], lines)


def _experience_section(rider: RiderSnapshot, tables: PromptTables) -> str | None:
    if rider.effective_preference_mode is MethodPreferenceMode.SINGLE:
        return None
    ranked = _by_comfort(rider.method_experience or [])
    if not ranked:
        return None

    lines: list[str | None] = ["The rider has experience with the following methods:"]
    for me in ranked:
        category = f" ({me.method.category})" if me.method.category else ""
        lines.append(
            f"- {me.method.name}{category}: Comfort level {me.comfort_level}/5, "
            f"{format_detail(me.years_experience)} years experience"
        )
        lines += [f"  {detail}" for detail in _method_details(me.method)[:2] if detail]

    order = ", ".join(f"{me.method.name} ({me.comfort_level}/5)" for me in ranked)
    lines.append("")
    lines.append(tables.headings["blending"])
    lines.append(f"- Prioritize methods in this order of rider comfort: {order}")
    lines += [f"- {directive}" for directive in tables.blending_directives]
    lines.append(tables.directives["experience"])
    return "\n".join([tables.headings["experience"], *[line for line in lines if line is not None]])


def _facility_section(facility: FacilitySnapshot, tables: PromptTables) -> str:
    if facility.round_pen:
        size = f" ({facility.round_pen_size})" if facility.round_pen_size else ""
        round_pen = f"Has Round Pen: Yes{size}"
    else:
        round_pen = "Has Round Pen: No - adapt exercises accordingly"

    lines = [
        f"Name: {facility.name}",
        _line("Arena Type", facility.arena_type),
        _line("Arena Size", facility.arena_size),
        _line("Footing", facility.footing),
        round_pen,
        _line("Trail Access", facility.trail_access),
        _line("Available Obstacles", facility.obstacles),
        _line("Lighting", facility.lighting),
        _line("Weather Considerations", facility.weather_considerations),
        tables.directives["facility"],
    ]
    return _block(tables.headings["facility"], lines)


def _conditions_section(context: AggregatedContext, tables: PromptTables) -> str | None:
    weather = context.weather_context
    lines: list[str | None] = []
    if weather:
        if weather.temperature is not None:
            lines.append(f"Temperature: {format_detail(weather.temperature)}°F")
        lines += [
            _line("Wind", weather.wind),
            _line("Precipitation", weather.precipitation),
            _line("Time of Day", weather.time_of_day),
            _line("Seasonal", weather.seasonal_considerations),
        ]
    if context.environmental_factors:
        lines.append(_line("Environmental Factors", context.environmental_factors))

    if not any(lines):
        return None

    lines.append(tables.directives["conditions"])
    return _block(tables.headings["conditions"], lines)


# =============================================================================
# Public API
# =============================================================================


def build_ai_context_prompt(
    context: AggregatedContext,
    tables: PromptTables = DEFAULT_PROMPT_TABLES,
) -> str:
    """
    Render the aggregated context as a prompt section.

    Args:
        context: Aggregated rider/horse/facility/conditions context
        tables: Wording tables (headings, directives, preference-mode text)

    Returns:
        Markdown-ish prompt text; sections separated by blank lines
    """
    sections = [
        _horse_section(context.horse, tables) if context.horse else None,
        _rider_section(context.rider, tables),
        _preference_section(context.rider, tables),
        _experience_section(context.rider, tables),
        _facility_section(context.facility, tables) if context.facility else None,
        _conditions_section(context, tables),
    ]
    return "\n\n".join(section for section in sections if section)
