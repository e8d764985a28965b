"""
KitchenFlow - CLI Entry Point.

Usage:
    kitchenflow parse-line "200 g de farine"    Parse one ingredient line
    kitchenflow import-url URL [--ai]           Preview a recipe from a web page
    kitchenflow import-archive FILE             Preview a Paprika export
    kitchenflow serve                           Start the web API
"""

import asyncio
import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

app = typer.Typer(
    name="kitchenflow",
    help="KitchenFlow - Import recipes from the web, pasted text and Paprika.",
    add_completion=False,
)
console = Console()


def _setup_logging() -> None:
    from kitchenflow.config import settings

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _ingredient_table(ingredients) -> Table:
    from kitchenflow.recipe_import.ingredient_parser import format_amount

    table = Table(title="Ingrédients")
    table.add_column("#", style="dim")
    table.add_column("Quantité", justify="right")
    table.add_column("Unité")
    table.add_column("Nom")
    table.add_column("Optionnel")

    for index, ing in enumerate(ingredients, start=1):
        table.add_row(
            str(index),
            format_amount(ing.amount) if ing.amount is not None else "",
            ing.unit or "",
            ing.name,
            "oui" if ing.optional else "",
        )
    return table


def _print_result(result) -> None:
    recipe = result.recipe
    console.print(
        Panel.fit(
            f"[bold]{recipe.name or '(sans nom)'}[/bold]\n"
            f"[dim]{result.parse_method.value} · confiance {result.confidence.value}[/dim]\n"
            f"Catégorie: {recipe.category.value}  Difficulté: {recipe.difficulty.value}\n"
            f"Préparation: {recipe.prep_time} min  Cuisson: {recipe.cook_time} min  "
            f"Portions: {recipe.servings}",
            border_style="green",
        )
    )
    if result.ingredients:
        console.print(_ingredient_table(result.ingredients))
    for index, step in enumerate(recipe.instructions, start=1):
        console.print(f"  [bold]{index}.[/bold] {step}")


@app.command("parse-line")
def parse_line(line: str = typer.Argument(..., help="Ingredient line, e.g. '2 c. à soupe d'huile'")) -> None:
    """Parse one free-text ingredient line."""
    from kitchenflow.recipe_import import parse_ingredient_line

    console.print(_ingredient_table([parse_ingredient_line(line)]))


@app.command("import-url")
def import_url(
    url: str = typer.Argument(..., help="Recipe page URL"),
    ai: bool = typer.Option(False, "--ai", help="Structure pages without recipe metadata with the LLM"),
) -> None:
    """Preview a recipe extracted from a web page."""
    _setup_logging()
    from kitchenflow.recipe_import import FetchError, InvalidSourceUrl, extract_recipe

    structurer = None
    if ai:
        from kitchenflow.llm.capabilities import LLMTextStructurer

        structurer = LLMTextStructurer()

    try:
        result = asyncio.run(extract_recipe(url, structurer=structurer))
    except (InvalidSourceUrl, FetchError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if result.needs_ai:
        console.print("[yellow]No recipe metadata on this page.[/yellow] Re-run with --ai to structure its text.")
        console.print(f"[dim]{len(result.raw_text)} characters of page text captured[/dim]")
        return

    _print_result(result)


@app.command("import-archive")
def import_archive_file(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Paprika .paprikarecipes export"),
) -> None:
    """Preview every recipe of a Paprika export."""
    _setup_logging()
    from kitchenflow.recipe_import import MalformedContainer, import_archive

    try:
        results = import_archive(path.read_bytes())
    except MalformedContainer as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"{path.name}: {len(results)} recettes")
    table.add_column("Nom")
    table.add_column("Catégorie")
    table.add_column("Ingrédients", justify="right")
    table.add_column("Favori")
    for result in results:
        table.add_row(
            result.recipe.name or "(sans nom)",
            result.recipe.category.value,
            str(len(result.ingredients)),
            "★" if result.recipe.is_favorite else "",
        )
    console.print(table)


@app.command()
def serve(
    port: int = typer.Option(8000, "--port", "-p", help="Port to run on"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload for development"),
) -> None:
    """Start the web API server."""
    import uvicorn

    # Hosting platforms set PORT
    actual_port = int(os.environ.get("PORT", port))

    console.print(f"\n[bold green]KitchenFlow API[/bold green]")
    console.print(f"Starting server on http://localhost:{actual_port}")
    console.print(f"[dim]Press Ctrl+C to stop[/dim]\n")

    uvicorn.run(
        "kitchenflow.web.app:app",
        host="0.0.0.0",
        port=actual_port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
