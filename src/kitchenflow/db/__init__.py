"""
KitchenFlow - Database Layer.

Supabase persistence for imported recipes.
"""

from kitchenflow.db.client import (
    SupabaseRecipeStore,
    get_authenticated_client,
    get_service_client,
)

__all__ = [
    "SupabaseRecipeStore",
    "get_authenticated_client",
    "get_service_client",
]
