"""
Unit tests for recipe payload validation.
"""
import pytest
from pydantic import ValidationError as PydanticValidationError

from app.errors import ValidationError
from app.models import Difficulty, MealType
from app.services.recipe_schemas import (
    MAX_INT,
    IngredientCreate,
    RecipeCreate,
    RecipeIngredientInput,
    RecipeUpdate,
)


class TestRecipeCreate:

    def test_minimal_recipe(self):
        recipe = RecipeCreate.model_validate({"name": "Toast", "difficulty": "easy"})

        assert recipe.difficulty == Difficulty.EASY
        assert recipe.ingredients == []
        assert recipe.favorite is False

    def test_name_is_stripped(self):
        recipe = RecipeCreate.model_validate({"name": "  Toast  ", "difficulty": "easy"})

        assert recipe.name == "Toast"

    @pytest.mark.parametrize("name", ["", "   ", "x" * 256])
    def test_name_bounds(self, name):
        with pytest.raises(PydanticValidationError):
            RecipeCreate.model_validate({"name": name, "difficulty": "easy"})

    def test_difficulty_required(self):
        with pytest.raises(PydanticValidationError):
            RecipeCreate.model_validate({"name": "Toast"})

    def test_meal_type_with_space(self):
        recipe = RecipeCreate.model_validate(
            {"name": "Fries", "difficulty": "easy", "meal_type": "side dish"}
        )

        assert recipe.meal_type == MealType.SIDE_DISH

    @pytest.mark.parametrize("field", ["prep_time", "cook_time", "extra_time"])
    def test_negative_times_rejected(self, field):
        with pytest.raises(PydanticValidationError):
            RecipeCreate.model_validate({"name": "Toast", "difficulty": "easy", field: -5})

    def test_zero_time_allowed(self):
        recipe = RecipeCreate.model_validate(
            {"name": "Salad", "difficulty": "easy", "cook_time": 0}
        )

        assert recipe.cook_time == 0

    def test_source_url_must_be_url_or_empty(self):
        with pytest.raises(PydanticValidationError):
            RecipeCreate.model_validate(
                {"name": "Toast", "difficulty": "easy", "source_url": "not a url"}
            )

        recipe = RecipeCreate.model_validate(
            {"name": "Toast", "difficulty": "easy", "source_url": ""}
        )
        assert recipe.source_url == ""


class TestRecipeIngredientInput:

    def test_name_and_category_required_without_id(self):
        with pytest.raises(PydanticValidationError):
            RecipeIngredientInput.model_validate({"name": "Salt"})

    def test_id_alone_is_enough(self):
        line = RecipeIngredientInput.model_validate({"ingredient_id": 3})

        assert line.ingredient_id == 3
        assert line.is_optional is False

    def test_amount_must_be_positive(self):
        with pytest.raises(PydanticValidationError):
            RecipeIngredientInput.model_validate(
                {"name": "Salt", "category": "spices", "amount": 0}
            )


class TestIngredientCreate:

    def test_unknown_category(self):
        with pytest.raises(PydanticValidationError):
            IngredientCreate.model_validate({"name": "Salt", "category": "minerals"})


class TestRecipeUpdate:

    def test_changes_only_contains_supplied_fields(self):
        patch = RecipeUpdate.model_validate({"favorite": True})

        assert patch.changes() == {"favorite": True}

    def test_optional_field_can_be_cleared(self):
        patch = RecipeUpdate.model_validate({"cuisine": None})

        assert patch.changes() == {"cuisine": None}

    def test_source_url_serialized_as_string(self):
        patch = RecipeUpdate.model_validate({"source_url": "https://example.com/tacos"})

        assert patch.changes() == {"source_url": "https://example.com/tacos"}

    @pytest.mark.parametrize("field", ["name", "difficulty", "favorite"])
    def test_required_fields_cannot_be_null(self, field):
        with pytest.raises(PydanticValidationError):
            RecipeUpdate.model_validate({field: None})

    def test_unknown_fields_rejected(self):
        with pytest.raises(PydanticValidationError):
            RecipeUpdate.model_validate({"owner": "someone"})


class TestValidationErrorFromPydantic:

    def test_lists_each_field(self):
        try:
            RecipeCreate.model_validate({"name": "", "difficulty": "extreme"})
        except PydanticValidationError as e:
            error = ValidationError.from_pydantic(e, "Invalid recipe")

        assert error.message == "Invalid recipe"
        assert error.status_code == 400
        assert {e["field"] for e in error.errors} == {"name", "difficulty"}


class TestBounds:
    """Values that would not fit the INTEGER/REAL columns are rejected up front."""

    @pytest.mark.parametrize("ingredient_id", [0, -1, 2**31, 2**70])
    def test_ingredient_id_out_of_range(self, ingredient_id):
        with pytest.raises(PydanticValidationError):
            RecipeIngredientInput.model_validate({"ingredient_id": ingredient_id})

    def test_largest_ingredient_id_accepted(self):
        line = RecipeIngredientInput.model_validate({"ingredient_id": MAX_INT})

        assert line.ingredient_id == MAX_INT

    @pytest.mark.parametrize("field", ["prep_time", "cook_time", "extra_time", "servings"])
    def test_integer_fields_bounded(self, field):
        with pytest.raises(PydanticValidationError):
            RecipeCreate.model_validate({"name": "Toast", "difficulty": "easy", field: 2**40})

        with pytest.raises(PydanticValidationError):
            RecipeUpdate.model_validate({field: 2**40})

    @pytest.mark.parametrize("amount", [float("inf"), float("nan")])
    def test_amount_must_be_finite(self, amount):
        with pytest.raises(PydanticValidationError):
            RecipeIngredientInput.model_validate(
                {"name": "Salt", "category": "spices", "amount": amount}
            )


class TestSourceUrl:

    @pytest.mark.parametrize(
        "url",
        ["https://example.com", "http://example.com/recipes?id=3", "HTTPS://Example.com/Tacos"],
    )
    def test_kept_exactly_as_sent(self, url):
        recipe = RecipeCreate.model_validate({"name": "Tacos", "difficulty": "easy", "source_url": url})
        patch = RecipeUpdate.model_validate({"source_url": url})

        assert recipe.source_url == url
        assert patch.changes() == {"source_url": url}

    @pytest.mark.parametrize("url", ["ftp://example.com/file", "example.com", "https://"])
    def test_non_http_urls_rejected(self, url):
        with pytest.raises(PydanticValidationError):
            RecipeCreate.model_validate({"name": "Tacos", "difficulty": "easy", "source_url": url})

    def test_overlong_url_rejected(self):
        url = "https://example.com/" + "a" * 2048

        with pytest.raises(PydanticValidationError):
            RecipeUpdate.model_validate({"source_url": url})
