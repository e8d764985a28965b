"""Tests for free-text ingredient line parsing."""

import pytest

from kitchenflow.recipe_import.ingredient_parser import (
    detect_optional,
    format_amount,
    format_ingredient_line,
    parse_ingredient_line,
    parse_ingredient_lines,
)
from kitchenflow.recipe_import.models import ParsedIngredientLine


class TestParseIngredientLine:
    """Amount, unit, name and optional flag from one line."""

    def test_amount_unit_and_connector(self):
        line = parse_ingredient_line("250 g de lentilles corail")
        assert line == ParsedIngredientLine(name="lentilles corail", amount=250.0, unit="g")

    def test_elided_connector(self):
        line = parse_ingredient_line("2 gousses d'ail")
        assert line.amount == 2.0
        assert line.unit == "gousses"
        assert line.name == "ail"

    def test_typographic_apostrophe(self):
        line = parse_ingredient_line("3 c.s. d’huile d’olive")
        assert line.unit == "c.s."
        assert line.name == "huile d’olive"

    def test_fraction_glyph(self):
        line = parse_ingredient_line("½ bouquet de coriandre")
        assert line.amount == 0.5
        assert line.unit == "bouquet"
        assert line.name == "coriandre"

    def test_slash_fraction(self):
        line = parse_ingredient_line("1/4 l de lait")
        assert line.amount == 0.25
        assert line.unit == "l"
        assert line.name == "lait"

    def test_decimal_comma(self):
        line = parse_ingredient_line("1,5 kg de pommes de terre")
        assert line.amount == 1.5
        assert line.unit == "kg"
        assert line.name == "pommes de terre"

    def test_amount_without_unit(self):
        line = parse_ingredient_line("3 œufs")
        assert line.amount == 3.0
        assert line.unit is None
        assert line.name == "œufs"

    def test_unit_is_case_insensitive_and_canonical(self):
        line = parse_ingredient_line("2 C.À.S. de sucre")
        assert line.unit == "c.à.s."
        assert line.name == "sucre"

    def test_unit_prefix_of_word_is_not_a_unit(self):
        line = parse_ingredient_line("2 glands")
        assert line.unit is None
        assert line.name == "glands"

    def test_unit_only_after_amount(self):
        line = parse_ingredient_line("feuilles de laurier")
        assert line.amount is None
        assert line.unit is None
        assert line.name == "feuilles de laurier"

    def test_connector_kept_without_unit(self):
        line = parse_ingredient_line("2 de plus")
        assert line.unit is None
        assert line.name == "de plus"

    def test_name_only(self):
        line = parse_ingredient_line("sel et poivre")
        assert line == ParsedIngredientLine(name="sel et poivre")

    def test_empty_line(self):
        assert parse_ingredient_line("") == ParsedIngredientLine(name="")
        assert parse_ingredient_line("   ") == ParsedIngredientLine(name="")

    def test_quantity_with_nothing_after_degrades(self):
        line = parse_ingredient_line("250 g")
        assert line.amount is None
        assert line.unit is None
        assert line.name == "250 g"

    def test_zero_denominator_degrades(self):
        line = parse_ingredient_line("1/0 pincée de sel")
        assert line.amount is None
        assert line.name == "1/0 pincée de sel"

    @pytest.mark.parametrize(
        "text",
        ["sel (optionnel)", "persil facultatif", "piment ?", "Crème fraîche (OPTIONNEL)"],
    )
    def test_optional_markers(self, text):
        assert parse_ingredient_line(text).optional is True

    def test_optional_keeps_amount_and_unit(self):
        line = parse_ingredient_line("½ c.c. de cannelle (facultatif)")
        assert line.amount == 0.5
        assert line.unit == "c.c."
        assert line.name == "cannelle (facultatif)"
        assert line.optional is True

    def test_never_raises_on_odd_input(self):
        for text in ["/", "½", "99999999999999999999/3 g de sucre", "( )", "d'", None]:
            line = parse_ingredient_line(text)
            assert isinstance(line, ParsedIngredientLine)
            assert line.name is not None

    def test_overlong_decimal_is_not_an_amount(self):
        line = parse_ingredient_line("9" * 400 + " g de sel")
        assert line.amount is None
        assert line.unit is None
        assert line.name == "9" * 400 + " g de sel"


class TestParseIngredientLines:
    def test_drops_blank_lines_and_keeps_order(self):
        lines = parse_ingredient_lines(["2 œufs", "", "  ", "100 g de farine"])
        assert [l.name for l in lines] == ["œufs", "farine"]


class TestDetectOptional:
    def test_plain_line_is_not_optional(self):
        assert detect_optional("200 g de farine") is False


class TestFormatIngredientLine:
    """Rendering back to text keeps the parsed triple."""

    def test_format_amount(self):
        assert format_amount(250.0) == "250"
        assert format_amount(0.5) == "0.5"
        assert format_amount(0.333) == "0.333"
        assert format_amount(1 / 3) == "0.3333333333333333"
        assert format_amount(0.00001) == "0.00001"

    def test_connector_kept_before_article(self):
        line = parse_ingredient_line("200 g de la farine")
        assert line.name == "la farine"
        assert format_ingredient_line(line) == "200 g de la farine"

    @pytest.mark.parametrize(
        "text",
        [
            "250 g de lentilles corail",
            "½ bouquet de coriandre",
            "3 œufs",
            "sel (optionnel)",
            "2 c.à.s. de sucre",
            "1/3 tasse de lait",
            "2/3 verre de vin",
            "1 c.s. de l'huile d'olive",
            "200 g de la farine",
        ],
    )
    def test_reparse_gives_same_line(self, text):
        parsed = parse_ingredient_line(text)
        assert parse_ingredient_line(format_ingredient_line(parsed)) == parsed

    def test_optional_marker_added_once(self):
        line = ParsedIngredientLine(name="persil", optional=True)
        assert format_ingredient_line(line) == "persil (optionnel)"
