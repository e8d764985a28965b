"""
External collaborator interfaces and output coercion.

The pipeline talks to three collaborators it does not own:
- TextStructuringCapability: raw recipe text -> canonical recipe fields
- SemanticMatchCapability: ingredient names + inventory -> match candidates
- RecipeStore: recipe and ingredient-line persistence

Capability output comes from a generative model, so it is validated and
coerced here (missing fields defaulted, oversized lists capped, bad items
dropped) before anything downstream sees it.
"""

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .ingredient_parser import parse_ingredient_line
from .lexicon import lookup_category, lookup_difficulty
from .models import (
    DEFAULT_SERVINGS,
    Confidence,
    Difficulty,
    InventoryItem,
    MatchCandidate,
    RecipeCategory,
    RecipeIngredientLine,
)
from .normalizer import extract_instructions_text, first_int, parse_duration

logger = logging.getLogger(__name__)

MAX_INGREDIENTS = 100
MAX_INSTRUCTIONS = 100
MAX_SUGGESTIONS = 10


# =============================================================================
# Interfaces
# =============================================================================


class TextStructuringCapability(ABC):
    """Turns freeform recipe text into canonical recipe fields."""

    @abstractmethod
    async def structure(self, raw_text: str) -> Any:
        """Return a mapping (or model) shaped like StructuredRecipeFields."""


class SemanticMatchCapability(ABC):
    """Proposes inventory matches for recipe ingredient names."""

    @abstractmethod
    async def match(self, names: list[str], inventory: list[InventoryItem]) -> Any:
        """Return a list of candidates shaped like MatchCandidatePayload."""


class RecipeStore(ABC):
    """Persistence for recipes and their ingredient lines."""

    @abstractmethod
    async def create_recipe(self, record: dict) -> dict:
        """Create a recipe (with its "ingredients") and return it with its "id"."""

    @abstractmethod
    async def link_ingredient_line(self, line_id: str, ingredient_id: str) -> None:
        """Point an ingredient line at an inventory ingredient."""

    @abstractmethod
    async def get_ingredient_lines(self, recipe_id: str) -> list[RecipeIngredientLine]:
        """Ingredient lines of a recipe, in sort order."""


# =============================================================================
# Coercion helpers
# =============================================================================


def _clean_str(value) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return None
    return value.strip() or None


def _string_list(value, limit: int) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    cleaned = [s for s in (_clean_str(v) for v in value) if s]
    return cleaned[:limit]


def _coerce_amount(value) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        return parse_ingredient_line(f"{value} x").amount
    return None


def _coerce_ingredient(item) -> dict | None:
    if isinstance(item, str):
        parsed = parse_ingredient_line(item)
        if not parsed.name:
            return None
        return {
            "name": parsed.name,
            "amount": parsed.amount,
            "unit": parsed.unit,
            "optional": parsed.optional,
        }
    if isinstance(item, BaseModel):
        item = item.model_dump()
    if not isinstance(item, Mapping):
        return None
    name = _clean_str(item.get("name"))
    if not name:
        return None
    return {
        "name": name,
        "amount": _coerce_amount(item.get("amount")),
        "unit": _clean_str(item.get("unit")),
        "optional": item.get("optional") is True,
    }


# =============================================================================
# Structured recipe fields
# =============================================================================


class IngredientFields(BaseModel):
    """One structured ingredient."""

    model_config = ConfigDict(extra="ignore")

    name: str
    amount: float | None = None
    unit: str | None = None
    optional: bool = False


class StructuredRecipeFields(BaseModel):
    """Canonical recipe shape returned by the text-structuring capability."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = None
    category: RecipeCategory = RecipeCategory.PLAT
    cuisine: str | None = None
    difficulty: Difficulty = Difficulty.MEDIUM
    prep_time: int = Field(0, alias="prepTime")
    cook_time: int = Field(0, alias="cookTime")
    servings: int = DEFAULT_SERVINGS
    servings_text: str | None = Field(None, alias="servingsText")
    ingredients: list[IngredientFields] = []
    instructions: list[str] = []
    wine_pairings: list[str] = Field(default_factory=list, alias="winePairings")
    tips: list[str] = []
    variations: list[str] = []

    @field_validator("name", "cuisine", "servings_text", mode="before")
    @classmethod
    def _text(cls, value):
        return _clean_str(value)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, value):
        return lookup_category(value if isinstance(value, str) else None)

    @field_validator("difficulty", mode="before")
    @classmethod
    def _difficulty(cls, value):
        return lookup_difficulty(value if isinstance(value, str) else None)

    @field_validator("prep_time", "cook_time", mode="before")
    @classmethod
    def _minutes(cls, value):
        if isinstance(value, float):
            value = int(value) if math.isfinite(value) else 0
        return parse_duration(value if isinstance(value, (str, int)) else None)

    @field_validator("servings", mode="before")
    @classmethod
    def _servings(cls, value):
        if isinstance(value, float):
            value = int(value) if math.isfinite(value) else None
        servings = first_int(value if isinstance(value, (str, int)) else None, DEFAULT_SERVINGS)
        return servings if servings >= 1 else DEFAULT_SERVINGS

    @field_validator("ingredients", mode="before")
    @classmethod
    def _ingredients(cls, value):
        if isinstance(value, str):
            value = value.splitlines()
        if not isinstance(value, list):
            return []
        coerced = [i for i in (_coerce_ingredient(item) for item in value) if i]
        return coerced[:MAX_INGREDIENTS]

    @field_validator("instructions", mode="before")
    @classmethod
    def _instructions(cls, value):
        return extract_instructions_text(value)[:MAX_INSTRUCTIONS]

    @field_validator("wine_pairings", "tips", "variations", mode="before")
    @classmethod
    def _suggestions(cls, value):
        return _string_list(value, MAX_SUGGESTIONS)


def coerce_structured_fields(raw: Any) -> StructuredRecipeFields:
    """
    Validate whatever the text-structuring capability returned.

    A result that is not a mapping at all degrades to empty fields:
    a partial import is still a valid outcome.
    """
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(by_alias=True)
    if not isinstance(raw, Mapping):
        logger.warning(f"Text structuring returned {type(raw).__name__}, expected a mapping")
        return StructuredRecipeFields()
    return StructuredRecipeFields.model_validate(dict(raw))


# =============================================================================
# Match candidates
# =============================================================================


class MatchCandidatePayload(BaseModel):
    """One match as returned by the semantic-matching capability."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    recipe_ingredient_name: str = Field(alias="recipeIngredientName")
    matched_ingredient_id: str | None = Field(None, alias="matchedIngredientId")
    confidence: Confidence = Confidence.LOW

    @field_validator("matched_ingredient_id", mode="before")
    @classmethod
    def _matched_id(cls, value):
        return _clean_str(value)

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence(cls, value):
        if isinstance(value, str) and value.strip().upper() in Confidence.__members__:
            return Confidence[value.strip().upper()]
        return Confidence.LOW


class MatchResponse(BaseModel):
    """Full semantic-matching response."""

    matches: list[MatchCandidatePayload] = []


def coerce_match_candidates(raw: Any, limit: int) -> list[MatchCandidate]:
    """
    Validate semantic-matching output into MatchCandidates.

    Malformed items are dropped and the list is capped at `limit`
    (the number of names that were sent).
    """
    if isinstance(raw, MatchResponse):
        items = list(raw.matches)
    elif isinstance(raw, Mapping) and isinstance(raw.get("matches"), list):
        items = raw["matches"]
    elif isinstance(raw, (list, tuple)):
        items = list(raw)
    else:
        logger.warning(f"Semantic matching returned {type(raw).__name__}, expected a list")
        return []

    candidates = []
    for item in items:
        if isinstance(item, MatchCandidate):
            candidates.append(item)
            continue
        try:
            if isinstance(item, MatchCandidatePayload):
                payload = item
            else:
                payload = MatchCandidatePayload.model_validate(item)
        except ValidationError as e:
            logger.debug(f"Dropping malformed match candidate {item!r}: {e}")
            continue
        candidates.append(
            MatchCandidate(
                source_name=payload.recipe_ingredient_name,
                matched_id=payload.matched_ingredient_id,
                confidence=payload.confidence,
            )
        )

    if len(candidates) > limit:
        logger.warning(f"Semantic matching returned {len(candidates)} candidates for {limit} names")
    return candidates[:limit]
