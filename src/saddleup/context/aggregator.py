"""
SaddleUp - Context Aggregator.

Gathers the rider's profile, horse, facility, method experience and current
conditions into one AggregatedContext for prompt composition.

Method experience merges three sources, keyed by method id:
1. Onboarding-selected methods seed comfort 3 / 0 years
2. Explicit method ratings overwrite with their own values
3. Profile-reported experienced methods overwrite only when their comfort
   is strictly higher than what is already recorded

Store failures propagate to the caller; there is no partial-context mode.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace

from saddleup.context.models import (
    AggregatedContext,
    FacilitySnapshot,
    HorseSnapshot,
    MethodExperience,
    MethodPreferenceMode,
    MethodRecord,
    RiderSnapshot,
    WeatherSnapshot,
    pick,
    present,
)
from saddleup.db.client import (
    get_facility,
    get_first_active_facility,
    get_first_active_horse,
    get_horse,
    get_methods_by_ids,
    get_rider_record,
)

logger = logging.getLogger(__name__)

DEFAULT_COMFORT_LEVEL = 3
MIN_COMFORT_LEVEL = 1
MAX_COMFORT_LEVEL = 5


def _reported_comfort(value) -> int:
    try:
        level = int(value)
    except (TypeError, ValueError):
        return DEFAULT_COMFORT_LEVEL
    return level or DEFAULT_COMFORT_LEVEL


def _comfort(value) -> int:
    return max(MIN_COMFORT_LEVEL, min(MAX_COMFORT_LEVEL, _reported_comfort(value)))


def _years(value) -> float:
    try:
        years = float(value)
    except (TypeError, ValueError):
        return 0
    return int(years) if years.is_integer() else years


def _entry(raw: dict, source: str) -> MethodExperience | None:
    method_id = pick(raw, "method_id", "methodId")
    if method_id is None:
        return None
    return MethodExperience(
        method_id=str(method_id),
        comfort_level=_comfort(pick(raw, "comfort_level", "comfortLevel")),
        years_experience=_years(pick(raw, "years_experience", "yearsExperience")),
        source=source,
    )


def merge_method_experience(
    selected_method_ids: Iterable[str] | None = None,
    method_ratings: Iterable[dict] | None = None,
    experienced_methods: Iterable[dict] | None = None,
) -> dict[str, MethodExperience]:
    """
    Merge the three method-experience sources.

    Args:
        selected_method_ids: Method ids chosen during onboarding
        method_ratings: Explicit ratings [{method_id, comfort_level, years_experience}]
        experienced_methods: Profile-reported experience, same shape as ratings

    Returns:
        Method id -> MethodExperience (without resolved method records),
        in first-seen order
    """
    merged: dict[str, MethodExperience] = {}
    # Unclamped comfort per id; precedence compares what each source reported
    reported: dict[str, int] = {}

    for method_id in selected_method_ids or []:
        if present(method_id) is None:
            continue
        merged[str(method_id)] = MethodExperience(
            method_id=str(method_id),
            comfort_level=DEFAULT_COMFORT_LEVEL,
            years_experience=0,
            source="onboarding",
        )
        reported[str(method_id)] = DEFAULT_COMFORT_LEVEL

    for raw in method_ratings or []:
        entry = _entry(raw, "ratings")
        if entry:
            merged[entry.method_id] = entry
            reported[entry.method_id] = _reported_comfort(pick(raw, "comfort_level", "comfortLevel"))

    for raw in experienced_methods or []:
        entry = _entry(raw, "profile")
        if not entry:
            continue
        level = _reported_comfort(pick(raw, "comfort_level", "comfortLevel"))
        if entry.method_id not in merged or level > reported[entry.method_id]:
            merged[entry.method_id] = entry
            reported[entry.method_id] = level

    return merged


def resolve_method_experience(
    merged: dict[str, MethodExperience],
    method_records: Iterable[dict],
) -> list[MethodExperience] | None:
    """Attach method records to merged entries; ids with no record are dropped."""
    records = {str(r["id"]): MethodRecord.from_record(r) for r in method_records}
    resolved = [
        replace(entry, method=records[method_id])
        for method_id, entry in merged.items()
        if method_id in records
    ]
    return resolved or None


def build_rider_snapshot(
    profile: dict | None,
    method_preference: dict | None,
    method_experience: list[MethodExperience] | None = None,
) -> RiderSnapshot:
    """Build the rider snapshot from raw profile and preference records."""
    primary = (method_preference or {}).get("primary_method")
    selected = pick(method_preference, "selected_methods", "selectedMethods")

    return RiderSnapshot(
        experience_level=pick(profile, "experience_level", "experienceLevel"),
        primary_goal=pick(profile, "primary_goal", "primaryGoal"),
        learning_style=pick(profile, "learning_style", "learningStyle"),
        risk_tolerance=pick(profile, "risk_tolerance", "riskTolerance"),
        physical_limitations=pick(profile, "physical_limitations", "physicalLimitations"),
        confidence_areas=pick(profile, "confidence_areas", "confidenceAreas"),
        struggle_areas=pick(profile, "struggle_areas", "struggleAreas"),
        preference_mode=MethodPreferenceMode.from_value(
            pick(method_preference, "preference_mode", "preferenceMode")
        ),
        primary_method=MethodRecord.from_record(primary) if primary else None,
        selected_method_ids=[str(m) for m in selected] if selected else None,
        method_experience=method_experience,
        show_comparisons=bool(pick(method_preference, "show_comparisons", "showComparisons")) or None,
    )


async def build_comprehensive_context(
    user_id: str,
    horse_id: str | None = None,
    facility_id: str | None = None,
    weather_context: dict | WeatherSnapshot | None = None,
    environmental_factors: list[str] | None = None,
) -> AggregatedContext:
    """
    Build the full context for one chat or plan request.

    Horse and facility resolve to the explicit id (scoped to the user),
    else the user's first active record, else None.

    Args:
        user_id: Authenticated user's id
        horse_id: Horse the question is about (optional)
        facility_id: Facility the session happens at (optional)
        weather_context: Current conditions from the client (optional)
        environmental_factors: Free-form factors like "new horse in barn" (optional)

    Returns:
        AggregatedContext with every absent section left as None
    """
    rider_record = await get_rider_record(user_id)
    profile = rider_record.get("profile")
    preference = rider_record.get("method_preference")

    if horse_id:
        horse_record = await get_horse(user_id, horse_id)
    else:
        horse_record = await get_first_active_horse(user_id)

    if facility_id:
        facility_record = await get_facility(user_id, facility_id)
    else:
        facility_record = await get_first_active_facility(user_id)

    merged = merge_method_experience(
        selected_method_ids=pick(preference, "selected_methods", "selectedMethods"),
        method_ratings=pick(preference, "method_ratings", "methodRatings"),
        experienced_methods=pick(profile, "experienced_methods", "experiencedMethods"),
    )
    method_experience = None
    if merged:
        method_records = await get_methods_by_ids(list(merged))
        method_experience = resolve_method_experience(merged, method_records)
        logger.debug(
            f"Resolved {len(method_experience or [])} of {len(merged)} methods for user {user_id}"
        )

    if isinstance(weather_context, dict):
        weather_context = WeatherSnapshot.from_dict(weather_context)

    factors = [str(f).strip() for f in environmental_factors or [] if present(f) is not None]

    return AggregatedContext(
        rider=build_rider_snapshot(profile, preference, method_experience),
        horse=HorseSnapshot.from_record(horse_record) if horse_record else None,
        facility=FacilitySnapshot.from_record(facility_record) if facility_record else None,
        weather_context=weather_context,
        environmental_factors=factors or None,
    )
