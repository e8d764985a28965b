"""
Pytest configuration and fixtures for KitchenFlow tests.
"""

import gzip
import io
import json
import os
import zipfile

import pytest

# Set test environment before importing kitchenflow modules
os.environ["KITCHENFLOW_ENV"] = "development"
os.environ["LOG_LEVEL"] = "DEBUG"

from kitchenflow.recipe_import.capabilities import (  # noqa: E402
    RecipeStore,
    SemanticMatchCapability,
    TextStructuringCapability,
)
from kitchenflow.recipe_import.errors import LinkFailure  # noqa: E402
from kitchenflow.recipe_import.models import InventoryItem, RecipeIngredientLine  # noqa: E402


class FakeRecipeStore(RecipeStore):
    """In-memory RecipeStore recording every call."""

    def __init__(self, fail_on_call: int | None = None, failing_links: set[str] | None = None):
        self.fail_on_call = fail_on_call
        self.failing_links = failing_links or set()
        self.create_calls: list[dict] = []
        self.created: list[dict] = []
        self.links: dict[str, str] = {}
        self.lines: dict[str, list[RecipeIngredientLine]] = {}

    async def create_recipe(self, record: dict) -> dict:
        self.create_calls.append(record)
        if self.fail_on_call == len(self.create_calls):
            raise RuntimeError("database unavailable")
        recipe_id = f"recipe-{len(self.created) + 1}"
        self.created.append({"id": recipe_id, **record})
        self.lines[recipe_id] = [
            RecipeIngredientLine(
                id=f"{recipe_id}-line-{ing['sort_order']}",
                recipe_id=recipe_id,
                name=ing["name"],
                sort_order=ing["sort_order"],
                amount=ing["amount"],
                unit=ing["unit"],
                optional=ing["optional"],
            )
            for ing in record.get("ingredients", [])
        ]
        return {"id": recipe_id, "name": record["name"]}

    async def link_ingredient_line(self, line_id: str, ingredient_id: str) -> None:
        if line_id in self.failing_links:
            raise LinkFailure(f"Ingredient line {line_id} not found")
        self.links[line_id] = ingredient_id

    async def get_ingredient_lines(self, recipe_id: str) -> list[RecipeIngredientLine]:
        return list(self.lines.get(recipe_id, []))


class FakeStructurer(TextStructuringCapability):
    """Returns a canned structuring response."""

    def __init__(self, response):
        self.response = response
        self.calls: list[str] = []

    async def structure(self, raw_text: str):
        self.calls.append(raw_text)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


class FakeMatcher(SemanticMatchCapability):
    """Returns a canned matching response."""

    def __init__(self, response):
        self.response = response
        self.calls: list[tuple[list[str], list[InventoryItem]]] = []

    async def match(self, names: list[str], inventory: list[InventoryItem]):
        self.calls.append((names, inventory))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def paprika_entry(data) -> bytes:
    """One gzip-compressed Paprika recipe."""
    return gzip.compress(json.dumps(data).encode("utf-8"))


def paprika_archive(entries: dict[str, bytes]) -> bytes:
    """Zip archive of already-encoded entries, in insertion order."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, payload in entries.items():
            archive.writestr(name, payload)
    return buffer.getvalue()


@pytest.fixture
def store():
    """Empty in-memory recipe store."""
    return FakeRecipeStore()


@pytest.fixture
def make_store():
    return FakeRecipeStore


@pytest.fixture
def make_structurer():
    return FakeStructurer


@pytest.fixture
def make_matcher():
    return FakeMatcher


@pytest.fixture
def make_paprika_entry():
    return paprika_entry


@pytest.fixture
def make_paprika_archive():
    return paprika_archive


@pytest.fixture
def sample_paprika_recipe():
    """Paprika export of one recipe."""
    return {
        "name": "Dal de lentilles corail",
        "ingredients": "250 g de lentilles corail\n1 boîte de lait de coco\n\n2 gousses d'ail\nsel (optionnel)",
        "directions": "Rincer les lentilles.\n\nFaire revenir l'ail.\nAjouter le reste et cuire 20 minutes.",
        "categories": ["Plat principal", "Végétarien"],
        "prep_time": "10 min",
        "cook_time": "25 minutes",
        "servings": "4 personnes",
        "difficulty": "Facile",
        "rating": 5,
        "notes": "Se congèle très bien.",
        "source_url": "https://example.com/dal",
        "image_url": "https://example.com/dal.jpg",
    }


@pytest.fixture
def sample_inventory():
    """Inventory snapshot for ingredient linking."""
    return [
        InventoryItem(id="ing-lentilles", name="lentilles corail", category="légumineuses"),
        InventoryItem(id="ing-ail", name="ail", category="légumes"),
        InventoryItem(id="ing-coco", name="lait de coco", category="épicerie"),
    ]


@pytest.fixture
def sample_recipe_node():
    """Schema.org Recipe node as found in a page's JSON-LD."""
    return {
        "@context": "https://schema.org",
        "@type": "Recipe",
        "name": "Tarte aux pommes",
        "recipeYield": "6 parts",
        "prepTime": "PT20M",
        "cookTime": "PT1H",
        "recipeCuisine": ["Française"],
        "image": {"@type": "ImageObject", "url": "https://example.com/tarte.jpg"},
        "recipeIngredient": [
            "1 pâte brisée",
            "4 pommes",
            "50 g de beurre",
            "2 c.à.s. de sucre",
            "½ c.c. de cannelle (facultatif)",
        ],
        "recipeInstructions": [
            {"@type": "HowToStep", "text": "Préchauffer le four à 180°C."},
            {"@type": "HowToStep", "text": "Éplucher et couper les pommes."},
            {
                "@type": "HowToSection",
                "name": "Montage",
                "itemListElement": [
                    {"@type": "HowToStep", "text": "Étaler la pâte."},
                    {"@type": "HowToStep", "text": "Disposer les pommes."},
                ],
            },
            {"@type": "HowToStep", "text": "Cuire 1 heure."},
        ],
    }
