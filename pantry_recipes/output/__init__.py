"""Output formatting for recipe suggestions."""

from pantry_recipes.output.formatters import (
    format_recipes_json,
    format_recipes_json_string,
    format_recipes_markdown,
    format_error,
    format_ingredient_line
)

__all__ = [
    "format_recipes_json",
    "format_recipes_json_string",
    "format_recipes_markdown",
    "format_error",
    "format_ingredient_line"
]
