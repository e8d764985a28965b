"""API endpoints for recipe import: URLs, pasted text, Paprika archives and batches."""

import json
import logging
from collections.abc import AsyncIterator
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from sse_starlette.sse import EventSourceResponse

from kitchenflow.llm.capabilities import LLMSemanticMatcher, LLMTextStructurer
from kitchenflow.recipe_import import (
    BatchImportOrchestrator,
    BatchItemFailure,
    FetchError,
    ImportResult,
    InvalidSourceUrl,
    InventoryItem,
    InventoryLinker,
    MalformedContainer,
    ParsedIngredientLine,
    RecipeDraft,
    RecipeStore,
    SemanticMatchCapability,
    TextStructuringCapability,
    extract_recipe,
    import_archive,
    import_from_text,
    parse_ingredient_line,
)
from kitchenflow.recipe_import.models import (
    Confidence,
    Difficulty,
    ParseMethod,
    RecipeCategory,
    RecipeSource,
)
from kitchenflow.web.auth import AuthenticatedUser, get_current_user, get_recipe_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recipe-import"])


# =============================================================================
# Dependencies
# =============================================================================


def get_text_structurer() -> TextStructuringCapability:
    return LLMTextStructurer()


def get_semantic_matcher() -> SemanticMatchCapability:
    return LLMSemanticMatcher()


# =============================================================================
# Request/Response Models
# =============================================================================


class IngredientLineModel(BaseModel):
    """Parsed ingredient line."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    amount: float | None = None
    unit: str | None = None
    optional: bool = False


class RecipeDraftModel(BaseModel):
    """Recipe fields extracted from a source."""

    model_config = ConfigDict(from_attributes=True)

    name: str | None = None
    category: RecipeCategory = RecipeCategory.PLAT
    cuisine: str | None = None
    instructions: list[str] = []
    prep_time: int = 0
    cook_time: int = 0
    servings: int = 4
    servings_text: str | None = None
    difficulty: Difficulty = Difficulty.MEDIUM
    wine_pairings: list[str] = []
    tips: list[str] = []
    variations: list[str] = []
    source: RecipeSource = RecipeSource.IMPORTED
    source_url: str | None = None
    image_url: str | None = None
    is_favorite: bool = False


class ImportResultModel(BaseModel):
    """Import result, as returned for preview and sent back for batch creation."""

    model_config = ConfigDict(from_attributes=True)

    recipe: RecipeDraftModel
    confidence: Confidence
    parse_method: ParseMethod
    ingredients: list[IngredientLineModel] = []
    raw_text: str | None = None


class ImportUrlRequest(BaseModel):
    url: str


class ParseTextRequest(BaseModel):
    text: str
    source_url: str | None = None


class ParseIngredientRequest(BaseModel):
    line: str


class BatchImportRequest(BaseModel):
    candidates: list[ImportResultModel]


class InventoryItemModel(BaseModel):
    id: str
    name: str
    category: str | None = None


class MatchIngredientsRequest(BaseModel):
    inventory: list[InventoryItemModel] = []


class MatchIngredientsResponse(BaseModel):
    linked: int


# =============================================================================
# Conversions
# =============================================================================


def to_response(result: ImportResult) -> ImportResultModel:
    return ImportResultModel.model_validate(result, from_attributes=True)


def to_import_result(payload: ImportResultModel) -> ImportResult:
    """
    Rebuild a pipeline ImportResult from its API form.

    Raises:
        ValueError: the payload breaks the raw_text/ingredients rules
    """
    return ImportResult(
        recipe=RecipeDraft(**payload.recipe.model_dump()),
        confidence=payload.confidence,
        parse_method=payload.parse_method,
        ingredients=[ParsedIngredientLine(**ing.model_dump()) for ing in payload.ingredients],
        raw_text=payload.raw_text,
    )


def _fetch_error_response(e: FetchError) -> JSONResponse:
    return JSONResponse(status_code=502, content={"error": str(e), "status_code": e.status_code})


async def batch_events(
    orchestrator: BatchImportOrchestrator, candidates: list[ImportResult]
) -> AsyncIterator[dict]:
    """SSE events for a batch: one `progress` per recipe, then `done` or `error`."""
    try:
        async for progress in orchestrator.iter_progress(candidates):
            yield {"event": "progress", "data": json.dumps(asdict(progress))}
    except BatchItemFailure as e:
        yield {
            "event": "error",
            "data": json.dumps({
                "error": str(e.cause),
                "index": e.index,
                "progress": asdict(e.progress),
                "recipe_ids": list(orchestrator.created_ids),
            }),
        }
        return

    yield {"event": "done", "data": json.dumps({"recipe_ids": list(orchestrator.created_ids)})}


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/recipes/import-url", response_model=ImportResultModel)
async def import_url(
    req: ImportUrlRequest,
    resolve: bool = Query(False, description="Structure pages without metadata right away"),
    user: AuthenticatedUser = Depends(get_current_user),
    structurer: TextStructuringCapability = Depends(get_text_structurer),
):
    """
    Extract a recipe from a URL for preview.

    Pages without Schema.org Recipe data come back as NEEDS_AI with their
    text, unless `resolve` is set.
    """
    logger.info(f"Import request from user {user.id} for URL: {req.url}")

    try:
        result = await extract_recipe(req.url, structurer=structurer if resolve else None)
    except InvalidSourceUrl as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FetchError as e:
        return _fetch_error_response(e)
    except Exception as e:
        logger.error(f"Import of {req.url} failed: {e}")
        raise HTTPException(status_code=502, detail="Recipe structuring failed")

    return to_response(result)


@router.post("/recipes/import-archive", response_model=list[ImportResultModel])
async def import_archive_upload(
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
):
    """Import a Paprika archive sent as multipart/form-data (or as the raw file)."""
    body = await request.body()
    logger.info(f"Archive import from user {user.id} ({len(body)} bytes)")

    try:
        results = import_archive(body, request.headers.get("content-type"))
    except MalformedContainer as e:
        raise HTTPException(status_code=400, detail=str(e))

    return [to_response(r) for r in results]


@router.post("/recipes/parse-text", response_model=ImportResultModel)
async def parse_text(
    req: ParseTextRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    structurer: TextStructuringCapability = Depends(get_text_structurer),
):
    if not req.text.strip():
        raise HTTPException(status_code=400, detail="Recipe text is empty")

    try:
        result = await import_from_text(req.text, structurer, source_url=req.source_url)
    except Exception as e:
        logger.error(f"Text structuring failed for user {user.id}: {e}")
        raise HTTPException(status_code=502, detail="Recipe structuring failed")

    return to_response(result)


@router.post("/recipes/parse-ingredient", response_model=IngredientLineModel)
async def parse_ingredient(
    req: ParseIngredientRequest,
    user: AuthenticatedUser = Depends(get_current_user),
):
    return IngredientLineModel.model_validate(parse_ingredient_line(req.line), from_attributes=True)


@router.post("/recipes/batch-import")
async def batch_import(
    req: BatchImportRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    store: RecipeStore = Depends(get_recipe_store),
):
    """
    Create import candidates one by one, streaming progress over SSE.

    Events: `progress` {current, total} after each recipe, then `done`
    {recipe_ids} or `error` {error, index, progress, recipe_ids}.
    """
    try:
        candidates = [to_import_result(c) for c in req.candidates]
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Batch import of {len(candidates)} recipes for user {user.id}")
    orchestrator = BatchImportOrchestrator(store)
    return EventSourceResponse(batch_events(orchestrator, candidates))


@router.post("/recipes/{recipe_id}/match-ingredients", response_model=MatchIngredientsResponse)
async def match_ingredients(
    recipe_id: str,
    req: MatchIngredientsRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    store: RecipeStore = Depends(get_recipe_store),
    matcher: SemanticMatchCapability = Depends(get_semantic_matcher),
) -> MatchIngredientsResponse:
    """Link the recipe's unlinked ingredient lines to the given inventory."""
    lines = await store.get_ingredient_lines(recipe_id)
    inventory = [InventoryItem(id=i.id, name=i.name, category=i.category) for i in req.inventory]

    try:
        linked = await InventoryLinker(matcher, store).reconcile(lines, inventory)
    except Exception as e:
        logger.error(f"Ingredient matching failed for recipe {recipe_id}: {e}")
        raise HTTPException(status_code=502, detail="Ingredient matching failed")

    return MatchIngredientsResponse(linked=linked)
