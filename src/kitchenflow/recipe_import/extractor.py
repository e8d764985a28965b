"""Main recipe extraction orchestration."""

import logging
import re
from urllib.parse import urlparse

import httpx

from .capabilities import TextStructuringCapability
from .errors import InvalidSourceUrl
from .json_ld import import_from_url
from .models import ImportResult
from .text import resolve_with_ai

logger = logging.getLogger(__name__)


async def extract_recipe(
    url: str,
    *,
    structurer: TextStructuringCapability | None = None,
    client: httpx.AsyncClient | None = None,
) -> ImportResult:
    """
    Extract a recipe from a URL.

    Extraction pipeline:
    1. Validate URL format
    2. Fetch the page and look for Schema.org Recipe data
    3. Without structured data, return NEEDS_AI with the page text, or
       route that text through `structurer` when one is given

    Raises:
        InvalidSourceUrl: the URL is not an http(s) URL
        FetchError: the page could not be fetched
    """
    validation_error = _validate_url(url)
    if validation_error:
        raise InvalidSourceUrl(validation_error)

    url = url.strip()
    logger.info(f"Importing recipe from {url}")
    result = await import_from_url(url, client=client)
    logger.info(f"Import of {url} finished: {result.parse_method.value} ({result.confidence.value})")

    if structurer is not None and result.needs_ai:
        return await resolve_with_ai(result, structurer)
    return result


def _validate_url(url: str) -> str | None:
    """
    Validate URL format.

    Returns error message if invalid, None if valid.
    """
    if not url or not url.strip():
        return "URL is required"

    url = url.strip()

    # Basic URL pattern check
    if not re.match(r"^https?://", url, re.IGNORECASE):
        return "URL must start with http:// or https://"

    try:
        parsed = urlparse(url)
    except ValueError:
        return "Invalid URL format"
    if not parsed.netloc:
        return "Invalid URL format"

    return None
