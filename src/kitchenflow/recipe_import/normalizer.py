"""Normalization utilities for recipe data."""

import re

from bs4 import BeautifulSoup

from .models import DEFAULT_SERVINGS

DURATION_PATTERN = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?", re.IGNORECASE)
DIGITS_PATTERN = re.compile(r"\d+")


def parse_duration(duration: str | int | None) -> int:
    """
    Parse an ISO 8601 duration (hours and minutes only) to minutes.

    Falls back to the first run of digits anywhere in the string, read as
    minutes. Never raises; anything unreadable is 0.

    Examples:
        PT45M -> 45
        PT1H -> 60
        PT1H30M -> 90
        "45 minutes" -> 45
        "" -> 0
    """
    if duration is None or isinstance(duration, bool):
        return 0

    # Handle already-integer values
    if isinstance(duration, int):
        return max(duration, 0)

    text = str(duration)
    match = DURATION_PATTERN.search(text)
    if match and (match.group(1) or match.group(2)):
        try:
            hours = int(match.group(1) or 0)
            minutes = int(match.group(2) or 0)
        except ValueError:
            # Digit runs too long for int()
            return 0
        return hours * 60 + minutes

    return first_int(text, default=0)


def first_int(text: str | int | None, default: int) -> int:
    """Leading integer of a free-text field ("4 servings" -> 4)."""
    if text is None or isinstance(text, bool):
        return default
    if isinstance(text, int):
        return text
    match = DIGITS_PATTERN.search(str(text))
    if not match:
        return default
    try:
        return int(match.group(0))
    except ValueError:
        return default


def parse_servings(yield_value: str | int | list | None) -> tuple[int, str | None]:
    """
    Parse recipe yield to (servings, servings_text).

    The integer is the first number found (at least 1, 4 when none);
    the text is the original value kept verbatim.

    Examples:
        "4 servings" -> (4, "4 servings")
        "Serves 6" -> (6, "Serves 6")
        ["8", "8 parts"] -> (8, "8")
        "une tarte" -> (4, "une tarte")
    """
    if isinstance(yield_value, list):
        yield_value = next((v for v in yield_value if v not in (None, "")), None)

    if yield_value is None or yield_value == "":
        return DEFAULT_SERVINGS, None

    servings = first_int(yield_value, default=DEFAULT_SERVINGS)
    if servings < 1:
        servings = DEFAULT_SERVINGS
    return servings, str(yield_value)


def split_lines(text: str | None) -> list[str]:
    """Split a newline-separated blob, dropping blank lines."""
    if not text or not isinstance(text, str):
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]


def _step_text(step) -> str | None:
    if isinstance(step, str):
        return step.strip() or None
    if not isinstance(step, dict):
        return None

    # HowToSection: sub-steps joined into one instruction
    sub_steps = step.get("itemListElement")
    if isinstance(sub_steps, list):
        texts = [t for t in (_step_text(s) for s in sub_steps) if t]
        if texts:
            return " ".join(texts)

    text = step.get("text") or step.get("@text") or step.get("name") or ""
    if isinstance(text, str) and text.strip():
        return text.strip()
    return None


def extract_instructions_text(instructions: list | str | dict | None) -> list[str]:
    """
    Extract instruction text from the shapes structured metadata uses.

    Handles:
        - A single string (one step per non-blank line)
        - List of strings
        - List of HowToStep dicts with a 'text' field
        - HowToSection dicts whose 'itemListElement' sub-steps are
          joined with spaces into one step
    """
    if not instructions:
        return []

    if isinstance(instructions, str):
        return split_lines(instructions)

    if isinstance(instructions, dict):
        instructions = [instructions]

    if not isinstance(instructions, list):
        return []

    result = []
    for item in instructions:
        text = _step_text(item)
        if text:
            result.append(text)
    return result


def normalize_ingredients(ingredients: list | str | None) -> list[str]:
    """
    Normalize ingredients to a list of strings.

    Handles:
        - List of strings
        - List of dicts with 'name' or 'text' field
        - A single newline-separated string
    """
    if not ingredients:
        return []

    if isinstance(ingredients, str):
        return split_lines(ingredients)

    if not isinstance(ingredients, list):
        return []

    result = []
    for item in ingredients:
        if isinstance(item, str):
            text = item.strip()
            if text:
                result.append(text)
        elif isinstance(item, dict):
            text = item.get("text") or item.get("name") or ""
            if isinstance(text, str) and text.strip():
                result.append(text.strip())

    return result


def extract_image_url(image: str | dict | list | None) -> str | None:
    """
    Extract image URL from various formats.

    Handles:
        - Plain URL string
        - Dict with 'url' field
        - List of images (take first)
    """
    if not image:
        return None

    if isinstance(image, str):
        return image if image.startswith("http") else None

    if isinstance(image, dict):
        url = image.get("url") or image.get("@url") or image.get("contentUrl")
        if isinstance(url, str) and url.startswith("http"):
            return url

    if isinstance(image, list) and len(image) > 0:
        return extract_image_url(image[0])

    return None


def extract_cuisine(cuisine: str | list | None) -> str | None:
    """First cuisine when the metadata lists several."""
    if isinstance(cuisine, list):
        cuisine = next((c for c in cuisine if isinstance(c, str) and c.strip()), None)
    if isinstance(cuisine, str) and cuisine.strip():
        return cuisine.strip()
    return None


def html_to_text(html: str, max_chars: int) -> str:
    """
    Reduce an HTML page to plain text.

    Drops script and style blocks and every tag, collapses whitespace
    runs to single spaces and truncates to max_chars.
    """
    soup = BeautifulSoup(html, "lxml")
    for tag in soup(["script", "style"]):
        tag.decompose()
    text = " ".join(soup.get_text(" ").split())
    return text[:max_chars]
