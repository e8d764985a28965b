"""
Recipe assembly - turn adapter output into ImportResults.

One builder per source shape:
- build_from_metadata: a schema.org Recipe node (JSON-LD or microdata)
- build_from_archive_entry: one decoded Paprika recipe
- build_from_structured: fields returned by the text-structuring capability

to_metadata goes the other way, rendering an ImportResult as a Recipe
node; build_from_metadata(to_metadata(r)) gives back the same ingredient
triples and instruction order.
"""

from .capabilities import StructuredRecipeFields
from .ingredient_parser import format_ingredient_line, parse_ingredient_lines
from .lexicon import lookup_category, lookup_difficulty
from .models import (
    DEFAULT_SERVINGS,
    Confidence,
    ImportResult,
    ParsedIngredientLine,
    ParseMethod,
    RecipeCategory,
    RecipeDraft,
    RecipeSource,
)
from .normalizer import (
    extract_cuisine,
    extract_image_url,
    extract_instructions_text,
    first_int,
    normalize_ingredients,
    parse_duration,
    parse_servings,
    split_lines,
)

FAVORITE_ABOVE_RATING = 3


def _text(value) -> str | None:
    if isinstance(value, list):
        value = next((v for v in value if isinstance(v, str) and v.strip()), None)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def build_from_metadata(node: dict, source_url: str | None = None) -> ImportResult:
    """
    Assemble a schema.org Recipe node.

    The format carries no usable category, so recipes land in PLAT.
    """
    servings, servings_text = parse_servings(node.get("recipeYield"))
    raw_ingredients = normalize_ingredients(
        node.get("recipeIngredient") or node.get("ingredients")
    )

    recipe = RecipeDraft(
        name=_text(node.get("name")),
        category=RecipeCategory.PLAT,
        cuisine=extract_cuisine(node.get("recipeCuisine")),
        instructions=extract_instructions_text(node.get("recipeInstructions")),
        prep_time=parse_duration(node.get("prepTime")),
        cook_time=parse_duration(node.get("cookTime")),
        servings=servings,
        servings_text=servings_text,
        source=RecipeSource.IMPORTED,
        source_url=source_url or _text(node.get("url")),
        image_url=extract_image_url(node.get("image")),
    )

    return ImportResult(
        recipe=recipe,
        ingredients=parse_ingredient_lines(raw_ingredients),
        confidence=Confidence.HIGH,
        parse_method=ParseMethod.STRUCTURED_METADATA,
    )


def _rating(value) -> float:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return float(value)
    return first_int(value, default=0)


def build_from_archive_entry(data: dict) -> ImportResult:
    """
    Assemble one Paprika recipe.

    Paprika stores ingredients and directions as newline-separated blobs
    and times/servings as free text; only the leading integer is kept.
    """
    categories = data.get("categories") or []
    first_category = categories[0] if isinstance(categories, list) and categories else None

    servings_raw = _text(data.get("servings"))
    servings = first_int(servings_raw, default=DEFAULT_SERVINGS)

    recipe = RecipeDraft(
        name=_text(data.get("name")),
        category=lookup_category(first_category if isinstance(first_category, str) else None),
        instructions=split_lines(data.get("directions")),
        prep_time=first_int(_text(data.get("prep_time")), default=0),
        cook_time=first_int(_text(data.get("cook_time")), default=0),
        servings=servings if servings >= 1 else DEFAULT_SERVINGS,
        servings_text=servings_raw,
        difficulty=lookup_difficulty(_text(data.get("difficulty"))),
        tips=split_lines(data.get("notes")),
        source=RecipeSource.IMPORTED,
        source_url=_text(data.get("source_url")),
        image_url=extract_image_url(data.get("image_url")),
        is_favorite=_rating(data.get("rating")) > FAVORITE_ABOVE_RATING,
    )

    return ImportResult(
        recipe=recipe,
        ingredients=parse_ingredient_lines(split_lines(data.get("ingredients"))),
        confidence=Confidence.MEDIUM,
        parse_method=ParseMethod.ARCHIVE,
    )


def build_from_structured(
    fields: StructuredRecipeFields, source_url: str | None = None
) -> ImportResult:
    """Assemble already-coerced text-structuring output."""
    recipe = RecipeDraft(
        name=fields.name,
        category=fields.category,
        cuisine=fields.cuisine,
        instructions=list(fields.instructions),
        prep_time=fields.prep_time,
        cook_time=fields.cook_time,
        servings=fields.servings,
        servings_text=fields.servings_text,
        difficulty=fields.difficulty,
        wine_pairings=list(fields.wine_pairings),
        tips=list(fields.tips),
        variations=list(fields.variations),
        source=RecipeSource.IMPORTED,
        source_url=source_url,
    )
    ingredients = [
        ParsedIngredientLine(
            name=ing.name,
            amount=ing.amount,
            unit=ing.unit,
            optional=ing.optional,
        )
        for ing in fields.ingredients
    ]

    return ImportResult(
        recipe=recipe,
        ingredients=ingredients,
        confidence=Confidence.MEDIUM,
        parse_method=ParseMethod.AI_TEXT,
    )


def to_metadata(result: ImportResult) -> dict:
    """Render an ImportResult as a schema.org Recipe node."""
    recipe = result.recipe
    node = {
        "@context": "https://schema.org",
        "@type": "Recipe",
        "name": recipe.name,
        "recipeIngredient": [format_ingredient_line(i) for i in result.ingredients],
        "recipeInstructions": [
            {"@type": "HowToStep", "text": step} for step in recipe.instructions
        ],
        "prepTime": f"PT{recipe.prep_time}M",
        "cookTime": f"PT{recipe.cook_time}M",
        "recipeYield": recipe.servings_text or str(recipe.servings),
    }
    if recipe.cuisine:
        node["recipeCuisine"] = recipe.cuisine
    if recipe.image_url:
        node["image"] = recipe.image_url
    if recipe.source_url:
        node["url"] = recipe.source_url
    return node
