"""Tests for ImportResult assembly and metadata re-export."""

import pytest

from kitchenflow.recipe_import.assembler import (
    build_from_metadata,
    build_from_structured,
    to_metadata,
)
from kitchenflow.recipe_import.capabilities import coerce_structured_fields
from kitchenflow.recipe_import.models import (
    Confidence,
    Difficulty,
    ImportResult,
    ParsedIngredientLine,
    ParseMethod,
    RecipeCategory,
    RecipeDraft,
    RecipeSource,
)


class TestImportResultInvariants:
    def test_needs_ai_requires_text(self):
        with pytest.raises(ValueError):
            ImportResult(recipe=RecipeDraft(), confidence=Confidence.LOW, parse_method=ParseMethod.NEEDS_AI)

    def test_needs_ai_cannot_carry_ingredients(self):
        with pytest.raises(ValueError):
            ImportResult(
                recipe=RecipeDraft(),
                confidence=Confidence.LOW,
                parse_method=ParseMethod.NEEDS_AI,
                raw_text="texte",
                ingredients=[ParsedIngredientLine(name="sel")],
            )

    def test_other_methods_cannot_carry_text(self):
        with pytest.raises(ValueError):
            ImportResult(
                recipe=RecipeDraft(),
                confidence=Confidence.HIGH,
                parse_method=ParseMethod.STRUCTURED_METADATA,
                raw_text="texte",
            )


class TestBuildFromMetadata:
    def test_minimal_node(self):
        result = build_from_metadata({"@type": "Recipe"})
        assert result.recipe.name is None
        assert result.recipe.servings == 4
        assert result.recipe.prep_time == 0
        assert result.recipe.source == RecipeSource.IMPORTED
        assert result.ingredients == []

    def test_source_url_falls_back_to_node_url(self):
        result = build_from_metadata({"@type": "Recipe", "url": "https://example.com/r"})
        assert result.recipe.source_url == "https://example.com/r"
        result = build_from_metadata({"@type": "Recipe", "url": "https://example.com/r"}, "https://final.example.com/r")
        assert result.recipe.source_url == "https://final.example.com/r"

    def test_ingredients_key_variant(self):
        result = build_from_metadata({"@type": "Recipe", "ingredients": ["2 œufs"]})
        assert result.ingredients == [ParsedIngredientLine(name="œufs", amount=2.0)]


class TestToMetadata:
    def test_reimport_preserves_ingredients_and_steps(self, sample_recipe_node):
        original = build_from_metadata(sample_recipe_node, "https://example.com/tarte")
        again = build_from_metadata(to_metadata(original))

        assert again.ingredients == original.ingredients
        assert again.recipe.instructions == original.recipe.instructions
        assert again.recipe.prep_time == original.recipe.prep_time
        assert again.recipe.cook_time == original.recipe.cook_time
        assert again.recipe.servings == original.recipe.servings
        assert again.recipe.source_url == original.recipe.source_url

    @pytest.mark.parametrize(
        "line",
        ["1/3 tasse de lait", "2/3 verre de vin", "1 c.s. de l'huile d'olive", "200 g de la farine"],
    )
    def test_reimport_is_stable_per_line(self, line):
        first = build_from_metadata({"@type": "Recipe", "name": "Test", "recipeIngredient": [line]})
        again = build_from_metadata(to_metadata(first))
        assert again.ingredients == first.ingredients

    def test_node_shape(self):
        result = ImportResult(
            recipe=RecipeDraft(name="Salade", prep_time=10, servings=2, instructions=["Laver.", "Mélanger."]),
            confidence=Confidence.MEDIUM,
            parse_method=ParseMethod.ARCHIVE,
            ingredients=[ParsedIngredientLine(name="laitue", amount=1.0), ParsedIngredientLine(name="noix", optional=True)],
        )
        node = to_metadata(result)
        assert node["@type"] == "Recipe"
        assert node["recipeIngredient"] == ["1 laitue", "noix (optionnel)"]
        assert node["recipeInstructions"][1] == {"@type": "HowToStep", "text": "Mélanger."}
        assert node["prepTime"] == "PT10M"
        assert node["recipeYield"] == "2"


class TestBuildFromStructured:
    def test_camel_case_fields(self):
        fields = coerce_structured_fields({
            "name": "Ratatouille",
            "category": "Accompagnement",
            "difficulty": "facile",
            "prepTime": 20,
            "cookTime": "PT45M",
            "servings": "6",
            "servingsText": "6 personnes",
            "ingredients": [
                {"name": "courgettes", "amount": 2, "unit": None},
                {"name": "basilic", "optional": True},
                "1 c.s. d'huile d'olive",
            ],
            "instructions": ["Couper les légumes.", "Mijoter."],
            "winePairings": ["Bandol rosé"],
            "tips": "Meilleure le lendemain.",
        })
        result = build_from_structured(fields, source_url="https://example.com/ratatouille")

        assert result.parse_method == ParseMethod.AI_TEXT
        assert result.confidence == Confidence.MEDIUM
        assert result.raw_text is None
        recipe = result.recipe
        assert recipe.category == RecipeCategory.ACCOMPAGNEMENT
        assert recipe.difficulty == Difficulty.EASY
        assert recipe.prep_time == 20
        assert recipe.cook_time == 45
        assert recipe.servings == 6
        assert recipe.servings_text == "6 personnes"
        assert recipe.wine_pairings == ["Bandol rosé"]
        assert recipe.tips == ["Meilleure le lendemain."]
        assert recipe.source_url == "https://example.com/ratatouille"
        assert result.ingredients == [
            ParsedIngredientLine(name="courgettes", amount=2.0),
            ParsedIngredientLine(name="basilic", optional=True),
            ParsedIngredientLine(name="huile d'olive", amount=1.0, unit="c.s."),
        ]
