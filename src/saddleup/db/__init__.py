"""SaddleUp - Record access (Supabase)."""

from saddleup.db.client import get_client

__all__ = ["get_client"]
