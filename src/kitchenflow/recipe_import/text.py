"""Freeform text import through the text-structuring capability."""

import logging

from .assembler import build_from_structured
from .capabilities import TextStructuringCapability, coerce_structured_fields
from .models import ImportResult

logger = logging.getLogger(__name__)


async def import_from_text(
    raw_text: str,
    structurer: TextStructuringCapability,
    source_url: str | None = None,
) -> ImportResult:
    """
    Structure pasted recipe text into an AI_TEXT ImportResult.

    Raises:
        ValueError: the text is empty
    """
    if not raw_text or not raw_text.strip():
        raise ValueError("Recipe text is empty")

    raw = await structurer.structure(raw_text.strip())
    fields = coerce_structured_fields(raw)
    result = build_from_structured(fields, source_url=source_url)

    logger.info(
        f"Structured text into '{result.recipe.name}' "
        f"({len(result.ingredients)} ingredients, {len(result.recipe.instructions)} steps)"
    )
    return result


async def resolve_with_ai(
    result: ImportResult, structurer: TextStructuringCapability
) -> ImportResult:
    """Send a NEEDS_AI result's page text through structuring; pass others through."""
    if not result.needs_ai:
        return result
    return await import_from_text(
        result.raw_text, structurer, source_url=result.recipe.source_url
    )
