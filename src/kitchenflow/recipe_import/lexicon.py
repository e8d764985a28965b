"""
Lookup tables used by the ingredient, category and difficulty parsers.

Kept as plain data so they can be tested and extended without touching
the parsing code.
"""

from .models import Difficulty, RecipeCategory

FRACTION_GLYPHS: dict[str, float] = {
    "½": 0.5,
    "¼": 0.25,
    "¾": 0.75,
    "⅓": 0.333,
    "⅔": 0.667,
}

# Metric units and French culinary measures
UNITS: tuple[str, ...] = (
    "g",
    "kg",
    "ml",
    "cl",
    "dl",
    "l",
    "cm",
    "c.s.",
    "c.c.",
    "c.à.s.",
    "c.à.c.",
    "bouquet",
    "pincée",
    "gousse",
    "gousses",
    "branche",
    "branches",
    "feuille",
    "feuilles",
    "tranche",
    "tranches",
    "botte",
    "bottes",
    "sachet",
    "sachets",
    "cuillère",
    "cuillères",
    "verre",
    "verres",
    "tasse",
    "tasses",
    "poignée",
    "poignées",
)

# Elided forms end with an apostrophe and attach to the next word
CONNECTORS: tuple[str, ...] = ("de", "d'", "du", "des", "la", "le", "l'")

OPTIONAL_MARKERS: tuple[str, ...] = ("optionnel", "facultatif", "?")

CATEGORY_SYNONYMS: dict[RecipeCategory, tuple[str, ...]] = {
    RecipeCategory.ENTREE: (
        "entrée",
        "entrées",
        "entree",
        "entrees",
        "starter",
        "starters",
        "appetizer",
        "appetizers",
        "hors d'oeuvre",
        "hors-d'oeuvre",
    ),
    RecipeCategory.PLAT: (
        "plat",
        "plats",
        "plat principal",
        "main",
        "mains",
        "main course",
        "main dish",
        "dinner",
        "dîner",
    ),
    RecipeCategory.DESSERT: (
        "dessert",
        "desserts",
        "pâtisserie",
        "patisserie",
        "sweet",
        "sweets",
        "gâteau",
        "gâteaux",
        "cake",
        "cakes",
    ),
    RecipeCategory.SAUCE: (
        "sauce",
        "sauces",
        "condiment",
        "condiments",
        "dressing",
        "vinaigrette",
    ),
    RecipeCategory.ACCOMPAGNEMENT: (
        "accompagnement",
        "accompagnements",
        "garniture",
        "side",
        "sides",
        "side dish",
        "side dishes",
    ),
    RecipeCategory.BOISSON: (
        "boisson",
        "boissons",
        "cocktail",
        "cocktails",
        "drink",
        "drinks",
        "beverage",
        "beverages",
    ),
    RecipeCategory.SNACK: (
        "snack",
        "snacks",
        "en-cas",
        "encas",
        "goûter",
        "gouter",
        "apéro",
        "apero",
    ),
}

DIFFICULTY_SYNONYMS: dict[Difficulty, tuple[str, ...]] = {
    Difficulty.EASY: ("easy", "facile", "simple", "très facile"),
    Difficulty.MEDIUM: ("medium", "moyen", "moyenne", "intermediate", "intermédiaire"),
    Difficulty.HARD: ("hard", "difficult", "difficile", "expert"),
}


def _invert(table: dict) -> dict:
    return {term: key for key, terms in table.items() for term in terms}


_CATEGORY_BY_TERM = _invert(CATEGORY_SYNONYMS)
_DIFFICULTY_BY_TERM = _invert(DIFFICULTY_SYNONYMS)


def lookup_category(
    term: str | None, default: RecipeCategory = RecipeCategory.PLAT
) -> RecipeCategory:
    """
    Map a free-text category tag to a RecipeCategory.

    Matches whole tags case-insensitively. Enum names ("DESSERT") are
    accepted too, so already-canonical values pass through.
    """
    if not term or not isinstance(term, str):
        return default
    normalized = " ".join(term.lower().split())
    if normalized.upper() in RecipeCategory.__members__:
        return RecipeCategory[normalized.upper()]
    return _CATEGORY_BY_TERM.get(normalized, default)


def lookup_difficulty(
    term: str | None, default: Difficulty = Difficulty.MEDIUM
) -> Difficulty:
    """Map a free-text difficulty to a Difficulty, same rules as categories."""
    if not term or not isinstance(term, str):
        return default
    normalized = " ".join(term.lower().split())
    if normalized.upper() in Difficulty.__members__:
        return Difficulty[normalized.upper()]
    return _DIFFICULTY_BY_TERM.get(normalized, default)
