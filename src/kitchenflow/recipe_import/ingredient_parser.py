"""Ingredient Parser - Turn freeform ingredient strings into structured lines.

Deterministic, table-driven parsing of lines such as:
- "250 g de lentilles corail" -> 250, "g", "lentilles corail"
- "½ bouquet de coriandre"    -> 0.5, "bouquet", "coriandre"
- "2 gousses d'ail"           -> 2, "gousses", "ail"
- "sel (optionnel)"           -> no amount, optional

The parser never raises. Anything it cannot read becomes a name-only line.
Unit words that are really part of the ingredient name are taken as units;
the lexicon and connector heuristic are the only disambiguation.
"""

import math
import re
from decimal import Decimal

from .lexicon import CONNECTORS, FRACTION_GLYPHS, OPTIONAL_MARKERS, UNITS
from .models import ParsedIngredientLine

_GLYPH_CLASS = "".join(FRACTION_GLYPHS)

QUANTITY_PATTERN = re.compile(
    rf"^(?:(?P<glyph>[{_GLYPH_CLASS}])|(?P<num>\d+)/(?P<den>\d+)|(?P<dec>\d+(?:[.,]\d+)?))"
)

_UNIT_BY_LOWER = {unit.lower(): unit for unit in UNITS}
UNIT_PATTERN = re.compile(
    r"^(?P<unit>"
    + "|".join(re.escape(unit) for unit in sorted(UNITS, key=len, reverse=True))
    + r")(?=\s|$)",
    re.IGNORECASE,
)


def _connector_alternative(connector: str) -> str:
    if connector.endswith("'"):
        # Elided form, accept straight and typographic apostrophes
        return re.escape(connector[:-1]) + "['’]"
    return re.escape(connector) + r"\s+"


CONNECTOR_PATTERN = re.compile(
    "^(?:"
    + "|".join(_connector_alternative(c) for c in sorted(CONNECTORS, key=len, reverse=True))
    + ")",
    re.IGNORECASE,
)


def detect_optional(line: str) -> bool:
    """True if the line is marked optional anywhere in its text."""
    lowered = line.lower()
    return any(marker in lowered for marker in OPTIONAL_MARKERS)


def _parse_quantity(match: re.Match) -> float | None:
    if match.group("glyph"):
        return FRACTION_GLYPHS[match.group("glyph")]
    if match.group("num"):
        try:
            return int(match.group("num")) / int(match.group("den"))
        except (ValueError, OverflowError, ZeroDivisionError):
            return None
    amount = float(match.group("dec").replace(",", "."))
    return amount if math.isfinite(amount) else None


def parse_ingredient_line(line: str) -> ParsedIngredientLine:
    """
    Parse one ingredient line into amount, unit, name and optional flag.

    Args:
        line: Raw ingredient text, e.g. "250 g de lentilles corail"

    Returns:
        ParsedIngredientLine. Amount and unit stay None when absent or
        unreadable; name is never None.
    """
    if not isinstance(line, str):
        line = "" if line is None else str(line)

    text = line.strip()
    optional = detect_optional(line)
    if not text:
        return ParsedIngredientLine(name="", optional=False)

    fallback = ParsedIngredientLine(name=text, optional=optional)

    amount = None
    unit = None
    rest = text

    quantity_match = QUANTITY_PATTERN.match(rest)
    if quantity_match:
        amount = _parse_quantity(quantity_match)
        if amount is None:
            return fallback
        rest = rest[quantity_match.end():].lstrip()

        unit_match = UNIT_PATTERN.match(rest)
        if unit_match:
            unit = _UNIT_BY_LOWER[unit_match.group("unit").lower()]
            rest = rest[unit_match.end():].lstrip()

            connector_match = CONNECTOR_PATTERN.match(rest)
            if connector_match:
                rest = rest[connector_match.end():]

    name = rest.strip()
    if not name:
        return fallback

    return ParsedIngredientLine(name=name, amount=amount, unit=unit, optional=optional)


def parse_ingredient_lines(lines: list[str]) -> list[ParsedIngredientLine]:
    """Parse many lines, dropping blank ones and keeping source order."""
    return [parse_ingredient_line(line) for line in lines if line and line.strip()]


def format_ingredient_line(ingredient: ParsedIngredientLine) -> str:
    """
    Render a parsed line back to text that parses to the same triple.

    Used when a canonical recipe is re-exported as structured metadata.
    """
    parts = []
    if ingredient.amount is not None:
        parts.append(format_amount(ingredient.amount))
        if ingredient.unit:
            parts.append(ingredient.unit)
            # The parser strips one connector after a unit
            if CONNECTOR_PATTERN.match(ingredient.name):
                parts.append("de")
    parts.append(ingredient.name)
    text = " ".join(parts)
    if ingredient.optional and not detect_optional(text):
        text = f"{text} (optionnel)"
    return text


def format_amount(amount: float) -> str:
    """250.0 -> "250", 0.5 -> "0.5", 1/3 -> "0.3333333333333333"."""
    if float(amount).is_integer():
        return str(int(amount))
    # Shortest text that reads back to the same float, without exponent
    return format(Decimal(repr(float(amount))), "f")
