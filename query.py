#!/usr/bin/env python3
"""Ad hoc recipe search from the terminal.

Runs one search session against TheMealDB and renders it: suggestions,
result list, favourites and the details panel of the selected recipe.

Usage:
    python query.py chicken garlic
    python query.py --suggest chi
    python query.py --cuisine "North Indian" --diet Non-Veg --max-minutes 90 chicken
    python query.py --meal-time Breakfast --select 52772 --favourite 52772 egg
    python query.py --debug chicken  # Show full JSON result

Features:
- Multi-ingredient search with intersection of per-ingredient results
- Cuisine, cooking time, meal time and diet filters
- Favourites and selection for the details panel
- JSON output with --debug or OUTPUT_FORMAT=json
"""

import asyncio
import sys
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from recipe_ideas.clients.mealdb import MealDBClient
from recipe_ideas.models.models import CUISINE_OPTIONS, DIETS, MEAL_TIMES, FilterConfig, RecipeDetail
from recipe_ideas.pipeline.classify import estimate_cook_time, format_minutes
from recipe_ideas.session.session import RecipeSession
from recipe_ideas.utils.config import config
from recipe_ideas.utils.logger import logger

console = Console()

USAGE = (
    'Usage: python query.py [--debug] [--suggest TEXT] [--cuisine LABEL]... [--max-minutes N] '
    '[--meal-time LABEL]... [--diet LABEL]... [--select ID] [--favourite ID]... ingredient [ingredient ...]'
)

VALUE_FLAGS = ("--suggest", "--cuisine", "--max-minutes", "--meal-time", "--diet", "--select", "--favourite")


def parse_args(argv: list[str]) -> dict:
    """Parse command-line flags into a plain options dict.

    Raises:
        ValueError: On unknown flags, missing values or invalid labels/numbers.
    """
    options: dict = {
        "debug": False,
        "suggest": None,
        "cuisines": [],
        "max_minutes": None,
        "meal_times": [],
        "diets": [],
        "select": None,
        "favourites": [],
        "ingredients": [],
    }
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--debug":
            options["debug"] = True
            i += 1
            continue
        if not arg.startswith("--"):
            options["ingredients"].append(arg)
            i += 1
            continue
        if arg not in VALUE_FLAGS:
            raise ValueError(f"Unknown flag: {arg}")
        if i + 1 >= len(argv):
            raise ValueError(f"{arg} flag requires a value")
        value = argv[i + 1]
        i += 2

        if arg == "--suggest":
            options["suggest"] = value
        elif arg == "--cuisine":
            if value.casefold() not in {o.label.casefold() for o in CUISINE_OPTIONS}:
                raise ValueError(f"Unknown cuisine: {value} (choose from {', '.join(o.label for o in CUISINE_OPTIONS)})")
            options["cuisines"].append(value)
        elif arg == "--max-minutes":
            if not value.isdigit():
                raise ValueError(f"--max-minutes must be a whole number, got: {value}")
            options["max_minutes"] = int(value)
        elif arg == "--meal-time":
            if value not in MEAL_TIMES:
                raise ValueError(f"Unknown meal time: {value} (choose from {', '.join(MEAL_TIMES)})")
            options["meal_times"].append(value)
        elif arg == "--diet":
            if value not in DIETS:
                raise ValueError(f"Unknown diet: {value} (choose from {', '.join(DIETS)})")
            options["diets"].append(value)
        elif arg == "--select":
            options["select"] = value
        elif arg == "--favourite":
            options["favourites"].append(value)
    return options


def build_filters(options: dict) -> FilterConfig:
    cuisines = [
        option
        for label in options["cuisines"]
        for option in CUISINE_OPTIONS
        if option.label.casefold() == label.casefold()
    ]
    kwargs = {"cuisines": cuisines, "meal_times": options["meal_times"], "diets": options["diets"]}
    if options["max_minutes"] is not None:
        kwargs["max_minutes"] = options["max_minutes"]
    return FilterConfig(**kwargs)


def describe_filters(filters: FilterConfig) -> str:
    limit = "> 1 hr" if filters.max_minutes >= config.NO_LIMIT_MINUTES else f"{filters.max_minutes} mins"
    parts = [f"up to {limit}"]
    if filters.cuisines:
        parts.append("cuisine: " + ", ".join(c.label for c in filters.cuisines))
    if filters.meal_times:
        parts.append("meal time: " + ", ".join(filters.meal_times))
    if filters.diets:
        parts.append("diet: " + ", ".join(filters.diets))
    return "; ".join(parts)


def render_results(session: RecipeSession) -> None:
    state = session.state
    table = Table(title=f"Recipes with {', '.join(state.ingredients)}", title_justify="left")
    table.add_column("", width=2)
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Category")
    table.add_column("Area")
    table.add_column("Time", justify="right")

    for recipe in state.recipes:
        star = "★" if session.is_favourite(recipe.id) else "☆"
        name = f"[green]{recipe.name}[/green]" if state.selected and state.selected.id == recipe.id else recipe.name
        table.add_row(
            star,
            recipe.id,
            name,
            recipe.category or "-",
            recipe.area or "-",
            format_minutes(estimate_cook_time(recipe)),
        )
    console.print(table)


def render_details(recipe: Optional[RecipeDetail]) -> None:
    if recipe is None:
        console.print("[dim]Select a recipe to see details.[/dim]")
        return

    lines = [f"[bold]{recipe.name}[/bold]", f"{recipe.category or '-'} · {recipe.area or '-'}"]
    if recipe.tags:
        lines.append(f"[dim]Tags: {recipe.tags}[/dim]")
    lines.append("")
    lines.append("[underline]Required Ingredients[/underline]")
    for line in recipe.ingredients:
        lines.append(f"• {line.ingredient}" + (f" - {line.measure}" if line.measure else ""))
    lines.append("")
    lines.append("[underline]Instructions[/underline]")
    lines.append(recipe.instructions or "-")
    if recipe.youtube:
        lines.append("")
        lines.append(f"Video: {recipe.youtube}")

    console.print(Panel("\n".join(lines), title="Details", title_align="left"))


async def run_query(options: dict) -> int:
    """Execute one search session and render it.

    Returns:
        Process exit code.
    """
    async with MealDBClient() as client:
        session = RecipeSession(client)

        if options["suggest"] is not None:
            await session.load_catalog()
            # Chosen ingredients are excluded from suggestions
            session.state.ingredients = list(options["ingredients"])
            suggestions = session.suggestions(options["suggest"])
            console.print(f"[bold cyan]Suggestions for {options['suggest']!r}:[/bold cyan] " + (", ".join(suggestions) or "none"))
            if not options["ingredients"]:
                return 0

        session.state.filters = build_filters(options)
        logger.info(f"Filters: {describe_filters(session.state.filters)}")
        result = await session.set_ingredients(options["ingredients"])

        if options["select"]:
            if session.select_by_id(options["select"]) is None:
                logger.warning(f"Recipe {options['select']} is not in the results")
        for recipe_id in options["favourites"]:
            recipe = next((r for r in session.state.recipes if r.id == recipe_id), None)
            if recipe is None:
                logger.warning(f"Recipe {recipe_id} is not in the results, cannot favourite it")
                continue
            session.toggle_favourite(recipe)

        if options["debug"] or config.OUTPUT_FORMAT == "json":
            console.print_json(session.state.model_dump_json())
            return 0 if result.error is None else 1

        console.print()
        if result.error:
            console.print(f"[red]✗ {result.error}[/red]")
            return 1
        if not session.state.recipes:
            console.print("[yellow]No recipes found. Try fewer ingredients or looser filters.[/yellow]")
            return 0

        render_results(session)
        if session.state.favourites:
            console.print("[bold]Favourites[/bold]")
            console.print_json(session.favourites_json())
        render_details(session.state.selected)
        return 0


if __name__ == "__main__":
    try:
        opts = parse_args(sys.argv[1:])
    except ValueError as e:
        print(f"Error: {e}")
        print(USAGE)
        sys.exit(1)

    if not opts["ingredients"] and opts["suggest"] is None:
        print("Error: No ingredients provided")
        print(USAGE)
        print("")
        print("Examples:")
        print("  python query.py chicken garlic")
        print('  python query.py --cuisine "North Indian" --max-minutes 90 chicken')
        print("  python query.py --suggest tom")
        sys.exit(1)

    try:
        sys.exit(asyncio.run(run_query(opts)))
    except KeyboardInterrupt:
        logger.info("Query interrupted by user.")
        sys.exit(0)
