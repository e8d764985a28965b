"""
KitchenFlow - Supabase Client.

Recipe and ingredient-line persistence. All queries go through here.
"""

import logging

from supabase import Client, ClientOptions, create_client

from kitchenflow.config import settings
from kitchenflow.recipe_import.capabilities import RecipeStore
from kitchenflow.recipe_import.errors import LinkFailure
from kitchenflow.recipe_import.models import RecipeIngredientLine

logger = logging.getLogger(__name__)

# Singleton client instance
_service_client: Client | None = None


def _require_supabase() -> None:
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise RuntimeError("SUPABASE_URL and SUPABASE_ANON_KEY must be configured")


def get_service_client() -> Client:
    """
    Get the service-role Supabase client (token validation).

    Uses singleton pattern to reuse connection.
    """
    global _service_client

    if _service_client is None:
        _require_supabase()
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key or settings.supabase_anon_key,
        )

    return _service_client


def get_authenticated_client(access_token: str) -> Client:
    """Client acting as the user, so row-level security applies."""
    _require_supabase()
    return create_client(
        settings.supabase_url,
        settings.supabase_anon_key,
        options=ClientOptions(headers={"Authorization": f"Bearer {access_token}"}),
    )


class SupabaseRecipeStore(RecipeStore):
    """RecipeStore over the `recipes` and `recipe_ingredients` tables."""

    def __init__(self, client: Client, user_id: str):
        self.client = client
        self.user_id = user_id

    async def create_recipe(self, record: dict) -> dict:
        """Create a recipe, then its ingredient lines. The recipe row is removed if the lines fail."""
        record = dict(record)
        ingredients = record.pop("ingredients", [])

        recipe_resp = self.client.table("recipes").insert({"user_id": self.user_id, **record}).execute()
        if not recipe_resp.data:
            raise RuntimeError(f"Failed to create recipe '{record.get('name')}'")
        created = recipe_resp.data[0]

        if ingredients:
            rows = [
                {"recipe_id": created["id"], "user_id": self.user_id, "ingredient_id": None, **ing}
                for ing in ingredients
            ]
            try:
                self.client.table("recipe_ingredients").insert(rows).execute()
            except Exception:
                logger.error(f"Ingredient lines failed for recipe {created['id']}, removing it")
                self._delete_recipe(created["id"])
                raise

        logger.info(f"Created recipe {created['id']} with {len(ingredients)} ingredient lines")
        return created

    def _delete_recipe(self, recipe_id: str) -> None:
        self.client.table("recipes").delete().eq("id", recipe_id).eq("user_id", self.user_id).execute()

    async def link_ingredient_line(self, line_id: str, ingredient_id: str) -> None:
        response = (
            self.client.table("recipe_ingredients")
            .update({"ingredient_id": ingredient_id})
            .eq("id", line_id)
            .eq("user_id", self.user_id)  # Security: ensure user owns line
            .execute()
        )
        if not response.data:
            raise LinkFailure(f"Ingredient line {line_id} not found")

    async def get_ingredient_lines(self, recipe_id: str) -> list[RecipeIngredientLine]:
        response = (
            self.client.table("recipe_ingredients")
            .select("*")
            .eq("recipe_id", recipe_id)
            .eq("user_id", self.user_id)
            .order("sort_order")
            .execute()
        )
        return [
            RecipeIngredientLine(
                id=str(row["id"]),
                recipe_id=str(row["recipe_id"]),
                name=row["name"],
                sort_order=row.get("sort_order") or 0,
                amount=row.get("amount"),
                unit=row.get("unit"),
                optional=bool(row.get("optional")),
                ingredient_id=row.get("ingredient_id"),
            )
            for row in response.data or []
        ]
