"""
SaddleUp - Context data model.

Request-scoped snapshots of the rider, horse, facility and conditions.
Every snapshot is built once per request and never mutated afterwards.

Absent values are always None (never "" or []), so the prompt composer can
treat "field is not None" as "render this line".
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class MethodPreferenceMode(str, Enum):
    """How the rider wants horsemanship methods used in advice."""

    EXPLORE = "explore"
    BLEND = "blend"
    SINGLE = "single"

    @classmethod
    def from_value(cls, value: Any) -> "MethodPreferenceMode | None":
        """
        Parse a stored preference value.

        Returns None when nothing usable is recorded. This is the only place
        external preference strings enter the core.
        """
        if isinstance(value, cls):
            return value
        if not value:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


# Applied by the composer when the rider has no recorded preference
DEFAULT_PREFERENCE_MODE = MethodPreferenceMode.EXPLORE


def present(value: Any) -> Any:
    """Normalize empty values ("", [], {}, None) to None."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, (list, tuple, dict, set)) and not value:
        return None
    return value


def pick(record: dict | None, *keys: str) -> Any:
    """First present value among keys (accepts snake_case or camelCase)."""
    if not record:
        return None
    for key in keys:
        value = present(record.get(key))
        if value is not None:
            return value
    return None


def _tags(value: Any) -> list[str] | None:
    """Normalize one tag or many tags into a list of strings."""
    value = present(value)
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        tags = [str(v).strip() for v in value if present(v) is not None]
        return tags or None
    return [str(value)]


@dataclass(frozen=True)
class MethodRecord:
    """A horsemanship method (training philosophy)."""

    id: str
    name: str
    category: str | None = None
    philosophy: str | None = None
    key_principles: Any = None
    common_terminology: Any = None

    @classmethod
    def from_record(cls, record: dict) -> "MethodRecord":
        return cls(
            id=str(record["id"]),
            name=record.get("name") or "Unnamed method",
            category=pick(record, "category"),
            philosophy=pick(record, "philosophy"),
            key_principles=pick(record, "key_principles", "keyPrinciples"),
            common_terminology=pick(record, "common_terminology", "commonTerminology"),
        )


@dataclass(frozen=True)
class MethodExperience:
    """The rider's merged familiarity with one method."""

    method_id: str
    comfort_level: int
    years_experience: float
    source: str  # "onboarding", "ratings" or "profile"
    method: MethodRecord | None = None


@dataclass(frozen=True)
class HorseSnapshot:
    """Denormalized view of a horse record."""

    name: str
    breed: str | None = None
    age: Any = None
    sex: str | None = None
    temperament: list[str] | None = None
    energy_level: str | None = None
    learning_style: Any = None
    injuries: Any = None
    health_conditions: Any = None
    known_issues: Any = None
    past_trauma: Any = None
    training_level: str | None = None
    training_history: Any = None
    known_cues: Any = None
    struggles: Any = None
    strengths: Any = None

    @classmethod
    def from_record(cls, record: dict) -> "HorseSnapshot":
        return cls(
            name=record.get("name") or "Unnamed horse",
            breed=pick(record, "breed"),
            age=pick(record, "age"),
            sex=pick(record, "sex"),
            temperament=_tags(record.get("temperament")),
            energy_level=pick(record, "energy_level", "energyLevel"),
            learning_style=pick(record, "learning_style", "learningStyle"),
            injuries=pick(record, "injuries"),
            health_conditions=pick(record, "health_conditions", "healthConditions"),
            known_issues=pick(record, "known_issues", "knownIssues"),
            past_trauma=pick(record, "past_trauma", "pastTrauma"),
            training_level=pick(record, "training_level", "trainingLevel"),
            training_history=pick(record, "training_history", "trainingHistory"),
            known_cues=pick(record, "known_cues", "knownCues"),
            struggles=pick(record, "struggles"),
            strengths=pick(record, "good_with", "goodWith", "strengths"),
        )


@dataclass(frozen=True)
class FacilitySnapshot:
    """Where the rider trains."""

    name: str
    arena_type: str | None = None
    arena_size: str | None = None
    footing: str | None = None
    round_pen: bool | None = None
    round_pen_size: str | None = None
    trail_access: str | None = None
    obstacles: Any = None
    lighting: str | None = None
    weather_considerations: str | None = None

    @classmethod
    def from_record(cls, record: dict) -> "FacilitySnapshot":
        round_pen = record.get("round_pen", record.get("roundPen"))
        return cls(
            name=record.get("name") or "Unnamed facility",
            arena_type=pick(record, "arena_type", "arenaType"),
            arena_size=pick(record, "arena_size", "arenaSize"),
            footing=pick(record, "footing"),
            round_pen=bool(round_pen) if round_pen is not None else None,
            round_pen_size=pick(record, "round_pen_size", "roundPenSize"),
            trail_access=pick(record, "trail_access", "trailAccess"),
            obstacles=pick(record, "obstacles"),
            lighting=pick(record, "lighting"),
            weather_considerations=pick(record, "weather_considerations", "weatherConsiderations"),
        )


@dataclass(frozen=True)
class WeatherSnapshot:
    """Current conditions reported with the request."""

    temperature: float | None = None  # Fahrenheit
    wind: str | None = None
    precipitation: str | None = None
    time_of_day: str | None = None
    seasonal_considerations: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "WeatherSnapshot | None":
        snapshot = cls(
            temperature=pick(data, "temperature"),
            wind=pick(data, "wind"),
            precipitation=pick(data, "precipitation"),
            time_of_day=pick(data, "time_of_day", "timeOfDay"),
            seasonal_considerations=pick(data, "seasonal_considerations", "seasonalConsiderations"),
        )
        return None if snapshot == cls() else snapshot


@dataclass(frozen=True)
class RiderSnapshot:
    """The rider's profile and method preference."""

    experience_level: str | None = None
    primary_goal: str | None = None
    learning_style: str | None = None
    risk_tolerance: str | None = None
    physical_limitations: Any = None
    confidence_areas: Any = None
    struggle_areas: Any = None
    preference_mode: MethodPreferenceMode | None = None
    primary_method: MethodRecord | None = None
    selected_method_ids: list[str] | None = None
    method_experience: list[MethodExperience] | None = None
    show_comparisons: bool | None = None

    @property
    def effective_preference_mode(self) -> MethodPreferenceMode:
        """Recorded preference, or DEFAULT_PREFERENCE_MODE when none is recorded."""
        return self.preference_mode or DEFAULT_PREFERENCE_MODE


@dataclass(frozen=True)
class AggregatedContext:
    """Everything known about this rider's situation for one request."""

    rider: RiderSnapshot
    horse: HorseSnapshot | None = None
    facility: FacilitySnapshot | None = None
    weather_context: WeatherSnapshot | None = None
    environmental_factors: list[str] | None = None
