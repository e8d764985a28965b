"""Sequential creation of many imported recipes."""

import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable

from .capabilities import RecipeStore
from .errors import BatchItemFailure
from .models import BatchProgress, ImportResult, RecipeSource

logger = logging.getLogger(__name__)

DEFAULT_RECIPE_NAME = "Recette sans nom"

ProgressCallback = Callable[[BatchProgress], Awaitable[None] | None]


def recipe_record(result: ImportResult) -> dict:
    """Store record for one import candidate, ingredient lines in source order."""
    recipe = result.recipe
    return {
        "name": recipe.name or DEFAULT_RECIPE_NAME,
        "category": recipe.category.value,
        "cuisine": recipe.cuisine,
        "instructions": list(recipe.instructions),
        "prep_time": recipe.prep_time,
        "cook_time": recipe.cook_time,
        "servings": recipe.servings,
        "servings_text": recipe.servings_text,
        "difficulty": recipe.difficulty.value,
        "wine_pairings": list(recipe.wine_pairings),
        "tips": list(recipe.tips),
        "variations": list(recipe.variations),
        "source": RecipeSource.IMPORTED.value,
        "source_url": recipe.source_url,
        "image_url": recipe.image_url,
        "is_favorite": recipe.is_favorite,
        "ingredients": [
            {
                "name": ing.name,
                "amount": ing.amount,
                "unit": ing.unit,
                "optional": ing.optional,
                "sort_order": index,
            }
            for index, ing in enumerate(result.ingredients)
        ],
    }


class BatchImportOrchestrator:
    """
    Create import candidates one at a time, in order.

    On the first failure the batch stops: earlier recipes stay created,
    later ones are never attempted, and progress stays where it was.
    There is no retry or resume; restart from the candidate list.
    """

    def __init__(self, store: RecipeStore):
        self.store = store
        self.progress = BatchProgress(current=0, total=0)
        self.created_ids: list[str] = []

    async def iter_progress(self, candidates: list[ImportResult]) -> AsyncIterator[BatchProgress]:
        """
        Yield progress after each created recipe.

        Raises:
            BatchItemFailure: creating an item failed
        """
        total = len(candidates)
        self.progress = BatchProgress(current=0, total=total)
        self.created_ids = []

        for index, candidate in enumerate(candidates, start=1):
            try:
                created = await self.store.create_recipe(recipe_record(candidate))
            except Exception as e:
                logger.error(f"Batch import stopped at {index}/{total}: {e}")
                raise BatchItemFailure(index=index, progress=self.progress, cause=e) from e

            # The recipe is stored even when the store echoes no id
            recipe_id = created.get("id") if created else None
            if recipe_id is None:
                logger.warning(f"Store returned no id for item {index}/{total}")
            else:
                self.created_ids.append(str(recipe_id))
            self.progress = BatchProgress(current=index, total=total)
            yield self.progress

        logger.info(f"Batch import created {total} recipes")

    async def run(
        self,
        candidates: list[ImportResult],
        on_progress: ProgressCallback | None = None,
    ) -> list[str]:
        """
        Create every candidate, reporting progress after each success.

        Returns:
            Ids of the created recipes, in candidate order

        Raises:
            BatchItemFailure: creating an item failed
        """
        async for progress in self.iter_progress(candidates):
            if on_progress is not None:
                outcome = on_progress(progress)
                if inspect.isawaitable(outcome):
                    await outcome
        return list(self.created_ids)
