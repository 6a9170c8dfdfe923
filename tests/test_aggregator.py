"""
Tests for the context aggregator.

Covers:
- Method-experience merge precedence (onboarding < ratings, profile only if higher)
- Record normalization (empty values become None)
- build_comprehensive_context record resolution and error propagation
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from saddleup.context.aggregator import (
    DEFAULT_COMFORT_LEVEL,
    build_comprehensive_context,
    build_rider_snapshot,
    merge_method_experience,
    resolve_method_experience,
)
from saddleup.context.models import (
    DEFAULT_PREFERENCE_MODE,
    MethodPreferenceMode,
    WeatherSnapshot,
)

AGG = "saddleup.context.aggregator"


def _run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio needed)."""
    return asyncio.run(coro)


# ---------------------------------------------------------------------------
# Merge precedence
# ---------------------------------------------------------------------------

class TestMergeMethodExperience:
    """Three sources merged by method id."""

    def test_onboarding_seeds_default_comfort(self):
        merged = merge_method_experience(selected_method_ids=["m-natural"])

        entry = merged["m-natural"]
        assert entry.comfort_level == DEFAULT_COMFORT_LEVEL == 3
        assert entry.years_experience == 0
        assert entry.source == "onboarding"

    def test_rating_overwrites_onboarding(self):
        merged = merge_method_experience(
            selected_method_ids=["m-natural"],
            method_ratings=[{"method_id": "m-natural", "comfort_level": 5, "years_experience": 3}],
        )

        assert merged["m-natural"].comfort_level == 5
        assert merged["m-natural"].years_experience == 3
        assert merged["m-natural"].source == "ratings"

    def test_rating_overwrites_even_when_lower(self):
        merged = merge_method_experience(
            selected_method_ids=["m-natural"],
            method_ratings=[{"method_id": "m-natural", "comfort_level": 1}],
        )

        assert merged["m-natural"].comfort_level == 1

    def test_higher_profile_comfort_wins(self):
        merged = merge_method_experience(
            method_ratings=[{"method_id": "m-classical", "comfort_level": 2}],
            experienced_methods=[{"method_id": "m-classical", "comfort_level": 4}],
        )

        assert merged["m-classical"].comfort_level == 4
        assert merged["m-classical"].source == "profile"

    def test_lower_profile_comfort_does_not_overwrite(self):
        merged = merge_method_experience(
            method_ratings=[{"method_id": "m-classical", "comfort_level": 4}],
            experienced_methods=[{"method_id": "m-classical", "comfort_level": 1}],
        )

        assert merged["m-classical"].comfort_level == 4
        assert merged["m-classical"].source == "ratings"

    def test_equal_profile_comfort_does_not_overwrite(self):
        merged = merge_method_experience(
            selected_method_ids=["m-positive"],
            experienced_methods=[{"method_id": "m-positive", "comfort_level": 3, "years_experience": 6}],
        )

        assert merged["m-positive"].years_experience == 0

    def test_camel_case_keys_accepted(self):
        merged = merge_method_experience(
            method_ratings=[{"methodId": "m-natural", "comfortLevel": 4, "yearsExperience": 1.5}],
        )

        assert merged["m-natural"].comfort_level == 4
        assert merged["m-natural"].years_experience == 1.5

    def test_comfort_clamped_to_scale(self):
        merged = merge_method_experience(
            method_ratings=[
                {"method_id": "a", "comfort_level": 9},
                {"method_id": "b", "comfort_level": -2},
                {"method_id": "c", "comfort_level": "lots"},
            ],
        )

        assert merged["a"].comfort_level == 5
        assert merged["b"].comfort_level == 1
        assert merged["c"].comfort_level == DEFAULT_COMFORT_LEVEL

    def test_profile_precedence_uses_reported_comfort(self):
        merged = merge_method_experience(
            method_ratings=[{"method_id": "m-classical", "comfort_level": 5, "years_experience": 1}],
            experienced_methods=[{"method_id": "m-classical", "comfort_level": 7, "years_experience": 12}],
        )

        entry = merged["m-classical"]
        assert entry.source == "profile"
        assert entry.comfort_level == 5
        assert entry.years_experience == 12

    def test_out_of_scale_rating_still_beats_lower_profile(self):
        merged = merge_method_experience(
            method_ratings=[{"method_id": "m-natural", "comfort_level": 8}],
            experienced_methods=[{"method_id": "m-natural", "comfort_level": 6}],
        )

        assert merged["m-natural"].source == "ratings"

    def test_entries_without_id_skipped(self):
        merged = merge_method_experience(
            selected_method_ids=["", None],
            method_ratings=[{"comfort_level": 5}],
        )

        assert merged == {}

    def test_first_seen_order(self):
        merged = merge_method_experience(
            selected_method_ids=["b", "a"],
            experienced_methods=[{"method_id": "c", "comfort_level": 2}],
        )

        assert list(merged) == ["b", "a", "c"]


class TestResolveMethodExperience:

    def test_unknown_ids_dropped(self, sample_methods):
        merged = merge_method_experience(selected_method_ids=["m-natural", "m-missing"])

        resolved = resolve_method_experience(merged, sample_methods)

        assert [me.method_id for me in resolved] == ["m-natural"]
        assert resolved[0].method.name == "Natural Horsemanship"

    def test_nothing_resolved_is_none(self):
        merged = merge_method_experience(selected_method_ids=["m-missing"])

        assert resolve_method_experience(merged, []) is None


# ---------------------------------------------------------------------------
# Rider snapshot
# ---------------------------------------------------------------------------

class TestBuildRiderSnapshot:

    def test_empty_values_become_none(self):
        rider = build_rider_snapshot(
            {"experience_level": "", "primary_goal": "learn_to_ride", "physical_limitations": []},
            None,
        )

        assert rider.experience_level is None
        assert rider.primary_goal == "learn_to_ride"
        assert rider.physical_limitations is None
        assert rider.preference_mode is None
        assert rider.show_comparisons is None

    def test_missing_preference_uses_explicit_default(self):
        rider = build_rider_snapshot({}, {})

        assert rider.effective_preference_mode is DEFAULT_PREFERENCE_MODE
        assert DEFAULT_PREFERENCE_MODE is MethodPreferenceMode.EXPLORE

    def test_unknown_preference_is_unset(self):
        rider = build_rider_snapshot({}, {"preference_mode": "mystery"})

        assert rider.preference_mode is None

    def test_preference_and_primary_method(self, sample_methods):
        rider = build_rider_snapshot(
            {},
            {
                "preference_mode": "Single",
                "primary_method": sample_methods[1],
                "selected_methods": ["m-classical"],
                "show_comparisons": True,
            },
        )

        assert rider.preference_mode is MethodPreferenceMode.SINGLE
        assert rider.primary_method.name == "Classical Dressage"
        assert rider.selected_method_ids == ["m-classical"]
        assert rider.show_comparisons is True


# ---------------------------------------------------------------------------
# build_comprehensive_context
# ---------------------------------------------------------------------------

class TestBuildComprehensiveContext:
    """Record resolution against a patched store."""

    def _patch_store(self, rider_record, horse=None, first_horse=None, facility=None,
                     first_facility=None, methods=None):
        return [
            patch(f"{AGG}.get_rider_record", new=AsyncMock(return_value=rider_record)),
            patch(f"{AGG}.get_horse", new=AsyncMock(return_value=horse)),
            patch(f"{AGG}.get_first_active_horse", new=AsyncMock(return_value=first_horse)),
            patch(f"{AGG}.get_facility", new=AsyncMock(return_value=facility)),
            patch(f"{AGG}.get_first_active_facility", new=AsyncMock(return_value=first_facility)),
            patch(f"{AGG}.get_methods_by_ids", new=AsyncMock(return_value=methods or [])),
        ]

    def _build(self, patches, **kwargs):
        mocks = [p.start() for p in patches]
        try:
            return _run(build_comprehensive_context("user-1", **kwargs)), mocks
        finally:
            for p in patches:
                p.stop()

    def test_full_context(self, sample_profile, sample_horse, sample_facility, sample_methods):
        rider_record = {
            "profile": sample_profile,
            "method_preference": {
                "preference_mode": "blend",
                "selected_methods": ["m-natural", "m-classical"],
                "method_ratings": [{"method_id": "m-classical", "comfort_level": 2}],
            },
        }
        patches = self._patch_store(
            rider_record,
            first_horse=sample_horse,
            first_facility=sample_facility,
            methods=sample_methods[:2],
        )

        context, mocks = self._build(
            patches,
            weather_context={"temperature": 85, "wind": "", "timeOfDay": "afternoon"},
            environmental_factors=["  new horse in barn ", ""],
        )

        assert context.horse.name == "Biscuit"
        assert context.horse.known_issues is None
        assert context.facility.round_pen is False
        assert context.weather_context == WeatherSnapshot(temperature=85, time_of_day="afternoon")
        assert context.environmental_factors == ["new horse in barn"]
        assert context.rider.preference_mode is MethodPreferenceMode.BLEND

        comfort = {me.method_id: me.comfort_level for me in context.rider.method_experience}
        assert comfort == {"m-natural": 3, "m-classical": 4}

        # One batched method lookup
        mocks[5].assert_awaited_once_with(["m-natural", "m-classical"])

    def test_explicit_ids_scoped_to_user(self, sample_horse, sample_facility):
        patches = self._patch_store(
            {"profile": {}, "method_preference": None},
            horse=sample_horse,
            facility=sample_facility,
        )

        context, mocks = self._build(patches, horse_id="horse-1", facility_id="facility-1")

        mocks[1].assert_awaited_once_with("user-1", "horse-1")
        mocks[2].assert_not_awaited()
        mocks[3].assert_awaited_once_with("user-1", "facility-1")
        mocks[4].assert_not_awaited()
        assert context.horse.name == "Biscuit"
        assert context.facility.name == "Willow Creek Barn"

    def test_explicit_id_not_found_does_not_fall_back(self, sample_horse):
        patches = self._patch_store(
            {"profile": {}, "method_preference": None},
            horse=None,
            first_horse=sample_horse,
        )

        context, mocks = self._build(patches, horse_id="someone-elses-horse")

        assert context.horse is None
        mocks[2].assert_not_awaited()

    def test_absent_sections_are_none(self):
        patches = self._patch_store({"profile": None, "method_preference": None})

        context, mocks = self._build(patches, weather_context={})

        assert context.horse is None
        assert context.facility is None
        assert context.weather_context is None
        assert context.environmental_factors is None
        assert context.rider.method_experience is None
        mocks[5].assert_not_awaited()

    def test_store_failure_propagates(self):
        patches = self._patch_store({"profile": {}, "method_preference": None})
        patches[2] = patch(f"{AGG}.get_first_active_horse", new=AsyncMock(side_effect=RuntimeError("store down")))

        with pytest.raises(RuntimeError, match="store down"):
            self._build(patches)
