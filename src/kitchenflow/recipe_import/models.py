"""Data models for recipe import."""

from dataclasses import dataclass, field
from enum import Enum


class Confidence(str, Enum):
    """Coarse reliability label for an import or a match."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ParseMethod(str, Enum):
    """Which adapter path produced an ImportResult."""

    STRUCTURED_METADATA = "STRUCTURED_METADATA"
    ARCHIVE = "ARCHIVE"
    AI_TEXT = "AI_TEXT"
    NEEDS_AI = "NEEDS_AI"


class RecipeCategory(str, Enum):
    ENTREE = "ENTREE"
    PLAT = "PLAT"
    DESSERT = "DESSERT"
    SAUCE = "SAUCE"
    ACCOMPAGNEMENT = "ACCOMPAGNEMENT"
    BOISSON = "BOISSON"
    SNACK = "SNACK"


class Difficulty(str, Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class RecipeSource(str, Enum):
    MANUAL = "MANUAL"
    AI = "AI"
    IMPORTED = "IMPORTED"


DEFAULT_SERVINGS = 4


@dataclass
class ParsedIngredientLine:
    """Canonical ingredient line shared by every adapter."""

    name: str
    amount: float | None = None
    unit: str | None = None
    optional: bool = False


@dataclass
class RecipeDraft:
    """Partial recipe extracted from a source, not yet persisted."""

    name: str | None = None
    category: RecipeCategory = RecipeCategory.PLAT
    cuisine: str | None = None
    instructions: list[str] = field(default_factory=list)
    prep_time: int = 0
    cook_time: int = 0
    servings: int = DEFAULT_SERVINGS
    servings_text: str | None = None
    difficulty: Difficulty = Difficulty.MEDIUM
    wine_pairings: list[str] = field(default_factory=list)
    tips: list[str] = field(default_factory=list)
    variations: list[str] = field(default_factory=list)
    source: RecipeSource = RecipeSource.IMPORTED
    source_url: str | None = None
    image_url: str | None = None
    is_favorite: bool = False


@dataclass
class ImportResult:
    """
    Transient envelope produced by every adapter.

    NEEDS_AI results carry the page text for the text-structuring
    capability and no ingredients; every other method carries no text.
    """

    recipe: RecipeDraft
    confidence: Confidence
    parse_method: ParseMethod
    ingredients: list[ParsedIngredientLine] = field(default_factory=list)
    raw_text: str | None = None

    def __post_init__(self) -> None:
        if self.parse_method == ParseMethod.NEEDS_AI:
            if self.raw_text is None:
                raise ValueError("NEEDS_AI import result requires raw_text")
            if self.ingredients:
                raise ValueError("NEEDS_AI import result cannot carry ingredients")
        elif self.raw_text is not None:
            raise ValueError(f"{self.parse_method.value} import result cannot carry raw_text")

    @property
    def needs_ai(self) -> bool:
        return self.parse_method == ParseMethod.NEEDS_AI


@dataclass
class RecipeIngredientLine:
    """Ingredient line as persisted under a recipe."""

    id: str
    recipe_id: str
    name: str
    sort_order: int
    amount: float | None = None
    unit: str | None = None
    optional: bool = False
    ingredient_id: str | None = None


@dataclass
class InventoryItem:
    """One entry of the caller's inventory snapshot."""

    id: str
    name: str
    category: str | None = None


@dataclass
class MatchCandidate:
    """Match proposed by the semantic-matching capability."""

    source_name: str
    matched_id: str | None
    confidence: Confidence

    @property
    def is_linkable(self) -> bool:
        return self.confidence != Confidence.LOW and bool(self.matched_id)


@dataclass(frozen=True)
class BatchProgress:
    """Progress of a sequential batch import."""

    current: int
    total: int
