"""
SaddleUp - Supabase Client.

Low-level record access. All queries go through here and every query is
scoped by the owning user's id.
"""

from supabase import Client, create_client

from saddleup.config import settings

# Singleton client instance
_client: Client | None = None


def get_client() -> Client:
    """
    Get the Supabase client.

    Uses singleton pattern to reuse connection.
    """
    global _client

    if _client is None:
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise RuntimeError("SUPABASE_URL and SUPABASE_ANON_KEY must be set for record lookups")
        _client = create_client(
            settings.supabase_url,
            settings.supabase_anon_key,
        )

    return _client


def _single(response) -> dict | None:
    # maybe_single() yields no response object at all when nothing matched
    if response is None:
        return None
    return response.data or None


# =============================================================================
# Rider Operations
# =============================================================================


async def get_rider_record(user_id: str) -> dict:
    """
    Get the rider's profile and method preference.

    Returns:
        {"profile": dict | None, "method_preference": dict | None}
        The method preference embeds its primary method as "primary_method".
    """
    client = get_client()

    profile_resp = (
        client.table("user_profiles")
        .select("*")
        .eq("user_id", user_id)
        .maybe_single()
        .execute()
    )
    pref_resp = (
        client.table("method_preferences")
        .select("*, primary_method:horsemanship_methods(*)")
        .eq("user_id", user_id)
        .maybe_single()
        .execute()
    )

    return {
        "profile": _single(profile_resp),
        "method_preference": _single(pref_resp),
    }


# =============================================================================
# Horse Operations
# =============================================================================


async def get_horse(user_id: str, horse_id: str) -> dict | None:
    """Get a horse by ID, only if the user owns it."""
    client = get_client()
    response = (
        client.table("horses")
        .select("*")
        .eq("id", horse_id)
        .eq("user_id", user_id)  # Security: ensure user owns horse
        .maybe_single()
        .execute()
    )
    return _single(response)


async def get_first_active_horse(user_id: str) -> dict | None:
    """Get the first active horse the user owns."""
    client = get_client()
    response = (
        client.table("horses")
        .select("*")
        .eq("user_id", user_id)
        .eq("is_active", True)
        .limit(1)
        .execute()
    )
    return response.data[0] if response.data else None


# =============================================================================
# Facility Operations
# =============================================================================


async def get_facility(user_id: str, facility_id: str) -> dict | None:
    """Get a facility by ID, only if the user owns it."""
    client = get_client()
    response = (
        client.table("facilities")
        .select("*")
        .eq("id", facility_id)
        .eq("user_id", user_id)
        .maybe_single()
        .execute()
    )
    return _single(response)


async def get_first_active_facility(user_id: str) -> dict | None:
    """Get the user's first active facility."""
    client = get_client()
    response = (
        client.table("facilities")
        .select("*")
        .eq("user_id", user_id)
        .eq("is_active", True)
        .limit(1)
        .execute()
    )
    return response.data[0] if response.data else None


# =============================================================================
# Method Operations
# =============================================================================


async def get_methods_by_ids(method_ids: list[str]) -> list[dict]:
    """Get horsemanship methods in one batched lookup."""
    if not method_ids:
        return []
    client = get_client()
    response = client.table("horsemanship_methods").select("*").in_("id", method_ids).execute()
    return response.data


async def get_method(method_id: str) -> dict | None:
    """Get a single horsemanship method by ID."""
    client = get_client()
    response = client.table("horsemanship_methods").select("*").eq("id", method_id).maybe_single().execute()
    return _single(response)


# =============================================================================
# Training Plan Operations
# =============================================================================


async def get_incomplete_lessons(user_id: str, limit: int = 10) -> list[dict]:
    """
    Get the next incomplete lessons of the user's active training plan.

    Ordered by phase, module, then lesson number.
    """
    client = get_client()
    plan_resp = (
        client.table("training_plans")
        .select("id")
        .eq("user_id", user_id)
        .eq("is_active", True)
        .order("created_at", desc=True)
        .limit(1)
        .execute()
    )
    if not plan_resp.data:
        return []

    response = (
        client.table("lessons")
        .select("*")
        .eq("plan_id", plan_resp.data[0]["id"])
        .eq("is_completed", False)
        .order("phase_number")
        .order("module_number")
        .order("lesson_number")
        .limit(limit)
        .execute()
    )
    return response.data
