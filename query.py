#!/usr/bin/env python3
"""Ad hoc recipe generation from the command line.

Generate a recipe without starting the API server.

Usage:
    python query.py "quick breakfast"
    python query.py --ingredient egg --ingredient flour "quick breakfast"
    python query.py --diet vegan --ingredient tofu --ingredient rice
    python query.py --debug --ingredient salmon  # Also print the recipe JSON

Features:
- Runs the same pipeline as POST /generate-recipe
- Renders the recipe as markdown in the terminal
- Debug mode prints the full recipe with wire field names
"""

import asyncio
import sys

from rich.console import Console
from rich.markdown import Markdown

from recipe_generator.clients.openai_chat import OpenAIChatClient
from recipe_generator.services.generator import generate_recipe
from recipe_generator.utils.config import config
from recipe_generator.utils.errors import NoInputError, UpstreamError
from recipe_generator.utils.logger import logger

console = Console()

USAGE = 'Usage: python query.py [--debug] [--ingredient NAME]... [--diet NAME]... "<custom request>"'


def run_query(
    custom_prompt: str,
    ingredients: list[str],
    dietary_restrictions: list[str],
    debug: bool = False,
) -> None:
    """Generate one recipe and print it.

    Args:
        custom_prompt: Free-text requirements (may be empty if ingredients given).
        ingredients: Ingredient names.
        dietary_restrictions: Dietary restriction names.
        debug: If True, also print the recipe JSON.
    """
    client = OpenAIChatClient.from_config(config)

    try:
        recipe = asyncio.run(generate_recipe(ingredients, dietary_restrictions, custom_prompt, client))
    except NoInputError as e:
        console.print(f"[yellow]{e}[/yellow]")
        sys.exit(2)
    except UpstreamError as e:
        logger.error(f"Recipe generation failed: {e}")
        console.print("[red]✗ Failed to generate recipe. Please try again.[/red]")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("\nQuery interrupted by user.")
        sys.exit(0)

    console.print()

    if debug:
        console.print("[bold cyan]Debug Mode: Full Recipe[/bold cyan]")
        console.print("[dim]" + "=" * 60 + "[/dim]")
        console.print_json(data=recipe.to_wire())
        console.print("[dim]" + "=" * 60 + "[/dim]")
        console.print()

    console.print(Markdown(recipe.to_markdown()))


def parse_args(argv: list[str]) -> tuple[str, list[str], list[str], bool]:
    """Split argv into (custom_prompt, ingredients, dietary_restrictions, debug)."""
    ingredients: list[str] = []
    dietary: list[str] = []
    debug = False
    rest: list[str] = []

    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--debug":
            debug = True
        elif arg in ("--ingredient", "--diet"):
            i += 1
            if i >= len(argv):
                raise ValueError(f"{arg} flag requires a value")
            (ingredients if arg == "--ingredient" else dietary).append(argv[i])
        elif arg.startswith("--"):
            raise ValueError(f"Unknown flag: {arg}")
        else:
            rest.append(arg)
        i += 1

    return " ".join(rest), ingredients, dietary, debug


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(USAGE)
        print("")
        print("Examples:")
        print('  python query.py "quick breakfast"')
        print('  python query.py --ingredient egg --ingredient flour "quick breakfast"')
        print("  python query.py --debug --diet vegan --ingredient tofu")
        sys.exit(1)

    try:
        prompt, ingredient_names, dietary_names, debug_mode = parse_args(sys.argv[1:])
    except ValueError as e:
        print(f"Error: {e}")
        print(USAGE)
        sys.exit(1)

    run_query(prompt, ingredient_names, dietary_names, debug=debug_mode)
