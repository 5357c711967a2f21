"""Data models for the recipe suggestion service."""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class IngredientAvailability:
    """A recipe ingredient line and whether the user already has it."""

    name: str  # Line as surfaced by the provider (may include quantity/unit)
    available: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "available": self.available}


@dataclass(frozen=True)
class NutritionSummary:
    """Display-only macro estimates ("15g" or "N/A")."""

    protein: str = NOT_AVAILABLE
    carbohydrate: str = NOT_AVAILABLE
    fat: str = NOT_AVAILABLE

    def to_dict(self) -> Dict[str, str]:
        return {
            "protein": self.protein,
            "carbohydrate": self.carbohydrate,
            "fat": self.fat,
        }


@dataclass(frozen=True)
class Recipe:
    """Canonical recipe returned to the presentation layer."""

    cuisine: str
    title: str
    ingredients: Tuple[IngredientAvailability, ...]
    preparation: Tuple[str, ...]  # Never empty
    nutrition: NutritionSummary
    pairing: Optional[str] = None
    source_url: Optional[str] = None
    image: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys the UI expects."""
        return {
            "cuisine": self.cuisine,
            "title": self.title,
            "ingredients": [ing.to_dict() for ing in self.ingredients],
            "preparation": list(self.preparation),
            "nutrition": self.nutrition.to_dict(),
            "pairing": self.pairing,
            "sourceUrl": self.source_url,
            "image": self.image,
        }


@dataclass(frozen=True)
class Nutrient:
    """Provider-neutral nutrient entry (e.g. Protein, 14.6, "g")."""

    name: str
    amount: Any  # Numeric when known; anything else formats as "N/A"
    unit: Optional[str] = None


@dataclass
class ProviderRecipe:
    """Intermediate record produced by a provider adapter.

    Adapters fill in what their upstream supplies; the normalizer derives
    everything else. The ``*_label``/``nutrition``/``ingredient_flags``
    fields are only set by adapters whose upstream already returns the
    canonical values (the LLM adapter).
    """

    title: Optional[str] = None
    cuisine_tag: Optional[str] = None  # Cuisine/area tag, gets " Mutfağı"
    meal_type_tag: Optional[str] = None  # Secondary fallback for cuisine
    cuisine_label: Optional[str] = None  # Ready-made label, used verbatim
    ingredient_lines: Tuple[str, ...] = ()
    ingredient_flags: Optional[Tuple[bool, ...]] = None
    steps: Tuple[str, ...] = ()
    nutrients: Tuple[Nutrient, ...] = ()
    nutrition: Optional[NutritionSummary] = None
    dish_type_tag: Optional[str] = None
    pairing: Optional[str] = None
    source_url: Optional[str] = None
    image: Optional[str] = None
