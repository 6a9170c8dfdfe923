"""
Pytest configuration and fixtures for SaddleUp tests.
"""

import os

import pytest

# Set test environment before importing saddleup modules
os.environ["LLM_API_KEY"] = "test-key"
os.environ["SADDLEUP_ENV"] = "development"
os.environ["SADDLEUP_LOG_PROMPTS"] = "0"


@pytest.fixture
def sample_methods():
    """Horsemanship method records as stored."""
    return [
        {
            "id": "m-natural",
            "name": "Natural Horsemanship",
            "category": "natural",
            "philosophy": "Communicate using the horse's own language of pressure and release",
            "key_principles": ["pressure and release", "respect", "patience"],
            "common_terminology": ["yield", "draw", "drive"],
        },
        {
            "id": "m-classical",
            "name": "Classical Dressage",
            "category": "classical",
            "philosophy": "Develop the horse gymnastically through correct progression",
            "key_principles": ["rhythm", "suppleness", "contact"],
            "common_terminology": ["half-halt", "collection"],
        },
        {
            "id": "m-positive",
            "name": "Positive Reinforcement",
            "category": "science-based",
            "philosophy": None,
            "key_principles": [],
            "common_terminology": None,
        },
    ]


@pytest.fixture
def sample_profile():
    """Rider profile as stored."""
    return {
        "id": "profile-1",
        "user_id": "user-1",
        "experience_level": "some_experience",
        "primary_goal": "learn_to_ride",
        "learning_style": "visual",
        "risk_tolerance": "low",
        "physical_limitations": ["bad knee"],
        "confidence_areas": ["grooming"],
        "struggle_areas": ["leading"],
        "experienced_methods": [
            {"method_id": "m-classical", "comfort_level": 4, "years_experience": 2},
        ],
    }


@pytest.fixture
def sample_horse():
    """Horse record as stored."""
    return {
        "id": "horse-1",
        "user_id": "user-1",
        "name": "Biscuit",
        "breed": "Quarter Horse",
        "age": 9,
        "sex": "gelding",
        "temperament": ["calm", "curious"],
        "energy_level": "medium",
        "injuries": None,
        "known_issues": "",
        "past_trauma": None,
        "training_level": "green",
        "is_active": True,
    }


@pytest.fixture
def sample_facility():
    """Facility record as stored."""
    return {
        "id": "facility-1",
        "user_id": "user-1",
        "name": "Willow Creek Barn",
        "arena_type": "outdoor",
        "arena_size": "100x200",
        "footing": "sand",
        "round_pen": False,
        "trail_access": "limited",
        "obstacles": ["poles", "tarp"],
        "is_active": True,
    }


@pytest.fixture
def onboarding_answers():
    """Onboarding answers for plan generation."""
    from saddleup.plans.models import OnboardingData

    return OnboardingData(
        experience_level="complete_beginner",
        primary_goal="learn_to_ride",
        days_per_week=3,
        session_length=60,
        owns_horse=False,
    )
