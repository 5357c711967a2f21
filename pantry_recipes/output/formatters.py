"""Formatters for recipe suggestions (JSON envelope and Markdown)."""

import json
from typing import Any, Dict, List, Sequence

from pantry_recipes.data_layer.models import IngredientAvailability, Recipe


def format_recipes_json(recipes: Sequence[Recipe]) -> Dict[str, Any]:
    """Build the success envelope ``{"recipes": [...]}``.

    Raises:
        ValueError: If ``recipes`` is empty (an empty success envelope is
            never sent; callers report NoMatch instead)
    """
    if not recipes:
        raise ValueError("Success envelope requires at least one recipe")
    return {"recipes": [recipe.to_dict() for recipe in recipes]}


def format_recipes_json_string(recipes: Sequence[Recipe], indent: int = 2) -> str:
    return json.dumps(format_recipes_json(recipes), indent=indent, ensure_ascii=False)


def format_error(message: str) -> Dict[str, str]:
    """Build the error envelope ``{"error": message}``."""
    return {"error": message}


def format_ingredient_line(ingredient: IngredientAvailability) -> str:
    """Format an ingredient as "+ 1 adet domates" (have) or "- tuz" (missing)."""
    marker = "+" if ingredient.available else "-"
    return f"{marker} {ingredient.name}"


def format_recipes_markdown(recipes: Sequence[Recipe]) -> str:
    """Format recipes as Markdown, one section per recipe.

    Args:
        recipes: Normalized recipes

    Returns:
        Markdown string
    """
    lines: List[str] = []
    for index, recipe in enumerate(recipes, start=1):
        lines.append(f"## {index}. {recipe.title}")
        lines.append(f"*{recipe.cuisine}*\n")

        lines.append("### Malzemeler")
        for ingredient in recipe.ingredients:
            lines.append(format_ingredient_line(ingredient))
        lines.append("")

        lines.append("### Hazırlanışı")
        for step_number, step in enumerate(recipe.preparation, start=1):
            lines.append(f"{step_number}. {step}")
        lines.append("")

        nutrition = recipe.nutrition
        lines.append("### Besin Değerleri")
        lines.append(f"- **Protein:** {nutrition.protein}")
        lines.append(f"- **Karbonhidrat:** {nutrition.carbohydrate}")
        lines.append(f"- **Yağ:** {nutrition.fat}")
        lines.append("")

        if recipe.pairing:
            lines.append(f"**Öneri:** {recipe.pairing}")
        if recipe.source_url:
            lines.append(f"**Kaynak:** {recipe.source_url}")
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"
