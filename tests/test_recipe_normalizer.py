"""Tests for normalizing provider records into the canonical recipe shape."""

import math

import pytest

from pantry_recipes.data_layer.models import (
    NOT_AVAILABLE,
    Nutrient,
    NutritionSummary,
    ProviderRecipe,
)
from pantry_recipes.ingestion.recipe_normalizer import (
    DEFAULT_CUISINE,
    DEFAULT_PAIRING,
    DEFAULT_TITLE,
    PLACEHOLDER_STEPS,
    cuisine_label,
    format_nutrient,
    normalize,
    pairing_suggestion,
    preparation_steps,
    round_half_up,
    summarize_nutrition,
)


class TestFormatNutrient:
    """Tests for nutrient display formatting."""

    @pytest.mark.parametrize("amount,expected", [
        (14.6, "15g"),
        (14.5, "15g"),
        (14.4, "14g"),
        (0, "0g"),
        (0.49, "0g"),
        (120, "120g"),
    ])
    def test_rounds_half_up(self, amount, expected):
        assert format_nutrient(Nutrient("Protein", amount, "g")) == expected

    def test_missing_nutrient(self):
        assert format_nutrient(None) == NOT_AVAILABLE

    @pytest.mark.parametrize("amount", [None, "12", True, math.nan, math.inf])
    def test_non_numeric_amount(self, amount):
        assert format_nutrient(Nutrient("Fat", amount, "g")) == NOT_AVAILABLE

    def test_missing_unit_defaults_to_grams(self):
        assert format_nutrient(Nutrient("Fat", 3.2, None)) == "3g"
        assert format_nutrient(Nutrient("Fat", 3.2, "")) == "3g"

    def test_keeps_provider_unit(self):
        assert format_nutrient(Nutrient("Fat", 350.2, "mg")) == "350mg"

    def test_round_half_up_is_not_bankers_rounding(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4


class TestSummarizeNutrition:
    """Tests for picking protein/carbohydrate/fat out of a nutrient list."""

    def test_short_names_case_insensitive(self):
        summary = summarize_nutrition([
            Nutrient("Calories", 300, "kcal"),
            Nutrient("PROTEIN", 10.2, "g"),
            Nutrient("carbohydrates", 30, "g"),
        ])
        assert summary == NutritionSummary(protein="10g", carbohydrate="30g", fat=NOT_AVAILABLE)

    def test_usda_names(self):
        summary = summarize_nutrition([
            Nutrient("Protein", 4.6, "g"),
            Nutrient("Carbohydrate, by difference", 24.5, "g"),
            Nutrient("Total lipid (fat)", 2.2, "g"),
        ])
        assert summary == NutritionSummary(protein="5g", carbohydrate="25g", fat="2g")

    def test_first_match_wins(self):
        summary = summarize_nutrition([Nutrient("Fat", 5, "g"), Nutrient("Fat", 9, "g")])
        assert summary.fat == "5g"

    def test_empty_list(self):
        assert summarize_nutrition([]) == NutritionSummary()


class TestCuisineLabel:
    """Tests for cuisine label derivation."""

    def test_cuisine_tag_gets_suffix(self):
        assert cuisine_label(ProviderRecipe(cuisine_tag="italian")) == "Italian Mutfağı"

    def test_meal_type_fallback(self):
        assert cuisine_label(ProviderRecipe(meal_type_tag="lunch/dinner")) == "Lunch/dinner"

    def test_cuisine_tag_wins_over_meal_type(self):
        record = ProviderRecipe(cuisine_tag="mexican", meal_type_tag="lunch/dinner")
        assert cuisine_label(record) == "Mexican Mutfağı"

    def test_ready_made_label_is_verbatim(self):
        record = ProviderRecipe(cuisine_label="Türk Mutfağı", cuisine_tag="turkish")
        assert cuisine_label(record) == "Türk Mutfağı"

    @pytest.mark.parametrize("tag", [None, "", "   "])
    def test_default(self, tag):
        assert cuisine_label(ProviderRecipe(cuisine_tag=tag)) == DEFAULT_CUISINE


class TestPreparationAndPairing:
    """Tests for step cleanup and pairing suggestions."""

    def test_steps_are_stripped(self):
        assert preparation_steps([" Doğrayın. ", "", "  ", "Pişirin."]) == ("Doğrayın.", "Pişirin.")

    def test_placeholder_when_no_steps(self):
        assert preparation_steps([]) == PLACEHOLDER_STEPS
        assert preparation_steps(["  "]) == PLACEHOLDER_STEPS

    def test_placeholder_has_four_steps(self):
        assert len(PLACEHOLDER_STEPS) == 4

    def test_pairing_from_dish_type(self):
        pairing = pairing_suggestion(ProviderRecipe(dish_type_tag="main course"))
        assert pairing == "Bu main course yanında hafif bir salata veya içecek ile servis edilebilir."

    def test_provider_pairing_wins(self):
        record = ProviderRecipe(pairing="Ayran ile servis edin.", dish_type_tag="soup")
        assert pairing_suggestion(record) == "Ayran ile servis edin."

    def test_default_pairing(self):
        assert pairing_suggestion(ProviderRecipe()) == DEFAULT_PAIRING


class TestNormalize:
    """Tests for normalize()."""

    @pytest.fixture
    def record(self):
        return ProviderRecipe(
            title="Menemen",
            cuisine_tag="turkish",
            ingredient_lines=("2 adet domates", "1 adet yeşil biber", "3 yumurta"),
            steps=("Domatesleri doğrayın.",),
            nutrients=(Nutrient("Protein", 14.6, "g"), Nutrient("Fat", 14.5, "g")),
            dish_type_tag="breakfast",
            source_url="https://example.com/menemen",
        )

    def test_availability_from_matcher(self, record):
        recipe = normalize(record, ["domates", "biber"])
        assert [(i.name, i.available) for i in recipe.ingredients] == [
            ("2 adet domates", True),
            ("1 adet yeşil biber", True),
            ("3 yumurta", False),
        ]

    def test_every_line_is_kept_in_order(self, record):
        recipe = normalize(record, [])
        assert [i.name for i in recipe.ingredients] == list(record.ingredient_lines)
        assert all(i.available is False for i in recipe.ingredients)

    def test_fields(self, record):
        recipe = normalize(record, ["domates"])
        assert recipe.title == "Menemen"
        assert recipe.cuisine == "Turkish Mutfağı"
        assert recipe.preparation == ("Domatesleri doğrayın.",)
        assert recipe.nutrition == NutritionSummary(protein="15g", carbohydrate=NOT_AVAILABLE, fat="15g")
        assert recipe.pairing.startswith("Bu breakfast")
        assert recipe.source_url == "https://example.com/menemen"
        assert recipe.image is None

    def test_defaults_for_empty_record(self):
        recipe = normalize(ProviderRecipe(title="  ", source_url=""), ["domates"])
        assert recipe.title == DEFAULT_TITLE
        assert recipe.cuisine == DEFAULT_CUISINE
        assert recipe.ingredients == ()
        assert recipe.preparation == PLACEHOLDER_STEPS
        assert recipe.nutrition == NutritionSummary()
        assert recipe.pairing == DEFAULT_PAIRING
        assert recipe.source_url is None

    def test_provided_availability_is_trusted(self):
        record = ProviderRecipe(
            ingredient_lines=("2 adet domates", "tuz", "karabiber"),
            ingredient_flags=(False, True),
        )
        recipe = normalize(record, ["domates"], provides_own_availability=True)
        assert [i.available for i in recipe.ingredients] == [False, True, False]

    def test_ready_made_nutrition_is_used_verbatim(self):
        summary = NutritionSummary(protein="18g", carbohydrate="10g", fat=NOT_AVAILABLE)
        record = ProviderRecipe(nutrition=summary, nutrients=(Nutrient("Protein", 99, "g"),))
        assert normalize(record, []).nutrition is summary

    def test_to_dict_uses_camel_case(self, record):
        data = normalize(record, ["domates"]).to_dict()
        assert set(data) == {
            "cuisine", "title", "ingredients", "preparation",
            "nutrition", "pairing", "sourceUrl", "image",
        }
        assert data["ingredients"][0] == {"name": "2 adet domates", "available": True}
        assert data["nutrition"] == {"protein": "15g", "carbohydrate": "N/A", "fat": "15g"}
