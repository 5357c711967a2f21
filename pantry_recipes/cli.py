#!/usr/bin/env python3
"""Command-line interface for pantry recipe suggestions."""

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

from pantry_recipes.config import Settings, configure_logging
from pantry_recipes.data_layer.exceptions import InvalidInputError, RecipeServiceError
from pantry_recipes.output.formatters import format_recipes_json_string, format_recipes_markdown
from pantry_recipes.planning.recipe_planner import RecipePlanner
from pantry_recipes.providers.registry import PROVIDERS, create_provider


logger = logging.getLogger(__name__)

EXIT_INPUT_ERROR = 2
EXIT_PROVIDER_ERROR = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Suggest recipes for the ingredients you already have."
    )
    parser.add_argument(
        "ingredients",
        help='Comma separated ingredient list, e.g. "domates, soğan, biber"'
    )
    parser.add_argument(
        "--provider",
        choices=sorted(PROVIDERS),
        default=None,
        help="Recipe provider (default: RECIPE_PROVIDER or spoonacular)"
    )
    parser.add_argument(
        "--output",
        choices=["json", "markdown"],
        default="markdown",
        help="Output format (default: markdown)"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    if args.provider:
        settings = dataclasses.replace(settings, provider=args.provider)
    configure_logging(settings.log_level)

    planner = RecipePlanner(create_provider(settings))
    print(f"Asking {settings.provider} for recipes...", file=sys.stderr)
    try:
        recipes = planner.suggest(args.ingredients)
    except InvalidInputError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except RecipeServiceError as e:
        logger.debug("Provider failure context: %s", e.context)
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_PROVIDER_ERROR

    if args.output == "json":
        print(format_recipes_json_string(recipes, indent=2))
    else:
        print(format_recipes_markdown(recipes))
    print(f"\n✅ {len(recipes)} tarif bulundu!", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
