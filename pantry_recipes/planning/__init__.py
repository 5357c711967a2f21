"""Planning module for turning ingredient lists into recipe suggestions."""

from .recipe_planner import RecipePlanner

__all__ = [
    "RecipePlanner"
]
