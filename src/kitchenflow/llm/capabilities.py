"""LLM-backed text structuring and ingredient matching."""

import logging

from kitchenflow.llm.client import call_llm
from kitchenflow.recipe_import.capabilities import (
    MatchResponse,
    SemanticMatchCapability,
    StructuredRecipeFields,
    TextStructuringCapability,
)
from kitchenflow.recipe_import.models import Confidence, InventoryItem, RecipeCategory

logger = logging.getLogger(__name__)

STRUCTURE_SYSTEM_PROMPT = f"""Tu es un assistant culinaire qui structure des recettes.

À partir du texte brut d'une recette, extrais :
- name : le nom de la recette
- category : une valeur parmi {", ".join(c.value for c in RecipeCategory)}
- cuisine, difficulty (EASY, MEDIUM ou HARD)
- prepTime, cookTime : durées en minutes (entiers)
- servings : nombre de portions (entier), servingsText : le texte original
- ingredients : liste d'objets {{name, amount, unit, optional}}, dans l'ordre du texte
- instructions : étapes dans l'ordre, une chaîne par étape
- winePairings, tips, variations : listes courtes, vides si rien dans le texte

N'invente rien qui ne figure pas dans le texte."""

MATCH_SYSTEM_PROMPT = """Tu relies les ingrédients d'une recette à l'inventaire d'un utilisateur.

Pour chaque ingrédient de la recette, renvoie :
- recipeIngredientName : le nom exact de l'ingrédient, tel que donné
- matchedIngredientId : l'id de l'article d'inventaire correspondant, ou null
- confidence : HIGH (même produit), MEDIUM (substitut très proche) ou LOW (doute)

N'utilise que des ids présents dans l'inventaire."""


class LLMTextStructurer(TextStructuringCapability):
    """Structure recipe text with a single LLM call."""

    async def structure(self, raw_text: str) -> StructuredRecipeFields:
        return await call_llm(
            response_model=StructuredRecipeFields,
            system_prompt=STRUCTURE_SYSTEM_PROMPT,
            user_prompt=raw_text,
        )


class LLMSemanticMatcher(SemanticMatchCapability):
    """Match ingredient names to inventory items with a single LLM call."""

    async def match(self, names: list[str], inventory: list[InventoryItem]) -> MatchResponse:
        if not names or not inventory:
            return MatchResponse(
                matches=[
                    {
                        "recipeIngredientName": name,
                        "matchedIngredientId": None,
                        "confidence": Confidence.LOW.value,
                    }
                    for name in names
                ]
            )

        ingredient_list = "\n".join(f"- {name}" for name in names)
        inventory_list = "\n".join(
            f"- id={item.id} | {item.name}" + (f" ({item.category})" if item.category else "")
            for item in inventory
        )
        user_prompt = (
            f"Ingrédients de la recette :\n{ingredient_list}\n\n"
            f"Inventaire :\n{inventory_list}"
        )

        response = await call_llm(
            response_model=MatchResponse,
            system_prompt=MATCH_SYSTEM_PROMPT,
            user_prompt=user_prompt,
        )
        logger.info(f"Semantic matching returned {len(response.matches)} candidates for {len(names)} names")
        return response
