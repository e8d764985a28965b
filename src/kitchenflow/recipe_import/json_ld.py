"""Web page import via Schema.org structured data."""

import json
import logging

import extruct
import httpx
from bs4 import BeautifulSoup

from kitchenflow.config import settings

from .assembler import build_from_metadata
from .errors import FetchError, MalformedMetadata
from .models import Confidence, ImportResult, ParseMethod, RecipeDraft, RecipeSource
from .normalizer import html_to_text

logger = logging.getLogger(__name__)

JSON_LD_MIME = "application/ld+json"


def _browser_headers() -> dict[str, str]:
    return {
        "User-Agent": settings.fetch_user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "fr-FR,fr;q=0.9,en;q=0.5",
    }


async def fetch_html(url: str, client: httpx.AsyncClient | None = None) -> tuple[str, str]:
    """
    Fetch a page body as text.

    Returns:
        (html, final_url) after redirects

    Raises:
        FetchError: transport failure, timeout, or non-2xx status
    """
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(
            follow_redirects=True,
            timeout=settings.fetch_timeout_seconds,
        )

    try:
        response = await client.get(url, headers=_browser_headers())
    except httpx.TimeoutException as e:
        raise FetchError(url, reason="request timed out") from e
    except httpx.HTTPError as e:
        raise FetchError(url, reason=str(e)) from e
    finally:
        if owns_client:
            await client.aclose()

    if not response.is_success:
        raise FetchError(url, status_code=response.status_code)

    return response.text, str(response.url)


def _is_recipe_type(node) -> bool:
    if not isinstance(node, dict):
        return False
    node_type = node.get("@type", "")
    return node_type == "Recipe" or (isinstance(node_type, list) and "Recipe" in node_type)


def _candidate_nodes(data):
    """Objects of one JSON-LD block: the object, an array, or its @graph."""
    items = data if isinstance(data, list) else [data]
    for item in items:
        if not isinstance(item, dict):
            continue
        yield item
        graph = item.get("@graph")
        if isinstance(graph, list):
            yield from (node for node in graph if isinstance(node, dict))


def _parse_block(text: str) -> object:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedMetadata(str(e)) from e


def _is_json_ld_script(script_type: str | None) -> bool:
    return bool(script_type) and script_type.split(";")[0].strip().lower() == JSON_LD_MIME


def find_recipe_in_json_ld(html: str) -> dict | None:
    """
    First Recipe node across all JSON-LD blocks, in document order.

    Blocks that are not valid JSON are skipped.
    """
    soup = BeautifulSoup(html, "lxml")
    for index, script in enumerate(soup.find_all("script", attrs={"type": _is_json_ld_script})):
        try:
            data = _parse_block(script.get_text())
        except MalformedMetadata as e:
            logger.debug(f"Skipping JSON-LD block {index}: {e}")
            continue

        for node in _candidate_nodes(data):
            if _is_recipe_type(node):
                return node

    return None


def find_recipe_in_microdata(html: str, base_url: str | None = None) -> dict | None:
    """Recipe properties from Schema.org microdata, if the page has any."""
    try:
        data = extruct.extract(html, base_url=base_url, syntaxes=["microdata"])
    except Exception as e:
        logger.debug(f"Microdata extraction failed for {base_url}: {e}")
        return None

    for item in data.get("microdata", []):
        if isinstance(item, dict) and "Recipe" in str(item.get("type", "")):
            properties = item.get("properties")
            if isinstance(properties, dict):
                return properties
    return None


def build_needs_ai(html: str, source_url: str | None = None) -> ImportResult:
    """Page without structured data: hand its text to the structuring capability."""
    return ImportResult(
        recipe=RecipeDraft(source=RecipeSource.IMPORTED, source_url=source_url),
        confidence=Confidence.LOW,
        parse_method=ParseMethod.NEEDS_AI,
        raw_text=html_to_text(html, settings.html_text_max_chars),
    )


def extract_from_html(html: str, source_url: str | None = None) -> ImportResult:
    """
    Build an ImportResult from a fetched page.

    JSON-LD first, microdata second; a page with neither comes back as
    NEEDS_AI with its cleaned text.
    """
    node = find_recipe_in_json_ld(html)
    if node is None:
        node = find_recipe_in_microdata(html, source_url)

    if node is None:
        logger.info(f"No structured recipe data on {source_url}, needs AI parsing")
        return build_needs_ai(html, source_url)

    return build_from_metadata(node, source_url=source_url)


async def import_from_url(url: str, *, client: httpx.AsyncClient | None = None) -> ImportResult:
    """
    Fetch a recipe page and extract it.

    Raises:
        FetchError: the page could not be fetched
    """
    html, final_url = await fetch_html(url, client=client)
    return extract_from_html(html, source_url=final_url)
