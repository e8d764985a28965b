"""Tests for the kitchenflow command line."""

from typer.testing import CliRunner

from kitchenflow.main import app

runner = CliRunner()


class TestParseLine:
    def test_parse_line(self):
        result = runner.invoke(app, ["parse-line", "250 g de lentilles corail"])
        assert result.exit_code == 0
        assert "lentilles corail" in result.output
        assert "250" in result.output


class TestImportArchive:
    def test_lists_recipes(self, tmp_path, make_paprika_archive, make_paprika_entry):
        export = tmp_path / "export.paprikarecipes"
        export.write_bytes(make_paprika_archive({
            "a.paprikarecipe": make_paprika_entry({"name": "Crêpes", "ingredients": "250 g de farine", "rating": 5}),
        }))

        result = runner.invoke(app, ["import-archive", str(export)])

        assert result.exit_code == 0
        assert "Crêpes" in result.output

    def test_bad_archive_exits_with_error(self, tmp_path):
        export = tmp_path / "broken.paprikarecipes"
        export.write_bytes(b"not a zip")

        result = runner.invoke(app, ["import-archive", str(export)])

        assert result.exit_code == 1


class TestImportUrl:
    def test_invalid_url(self):
        result = runner.invoke(app, ["import-url", "ftp://example.com"])
        assert result.exit_code == 1
