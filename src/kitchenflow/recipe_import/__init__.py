"""Recipe import module: web pages, pasted text and Paprika archives."""

from .archive import import_archive
from .batch import BatchImportOrchestrator
from .capabilities import RecipeStore, SemanticMatchCapability, TextStructuringCapability
from .errors import (
    BatchItemFailure,
    FetchError,
    InvalidSourceUrl,
    LinkFailure,
    MalformedContainer,
    MalformedEntry,
    RecipeImportError,
    SourceUnreachable,
)
from .extractor import extract_recipe
from .ingredient_parser import parse_ingredient_line
from .linker import InventoryLinker
from .models import (
    BatchProgress,
    Confidence,
    ImportResult,
    InventoryItem,
    MatchCandidate,
    ParsedIngredientLine,
    ParseMethod,
    RecipeDraft,
    RecipeIngredientLine,
)
from .normalizer import parse_duration
from .text import import_from_text, resolve_with_ai

__all__ = [
    "BatchImportOrchestrator",
    "BatchItemFailure",
    "BatchProgress",
    "Confidence",
    "FetchError",
    "ImportResult",
    "InvalidSourceUrl",
    "InventoryItem",
    "InventoryLinker",
    "LinkFailure",
    "MalformedContainer",
    "MalformedEntry",
    "MatchCandidate",
    "ParseMethod",
    "ParsedIngredientLine",
    "RecipeDraft",
    "RecipeImportError",
    "RecipeIngredientLine",
    "RecipeStore",
    "SemanticMatchCapability",
    "SourceUnreachable",
    "TextStructuringCapability",
    "extract_recipe",
    "import_archive",
    "import_from_text",
    "parse_duration",
    "parse_ingredient_line",
    "resolve_with_ai",
]
