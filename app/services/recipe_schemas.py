"""
Pydantic models for recipe and ingredient payloads.

This is the single constraint set for the write path: the recipe writer,
the field updater and the route documentation all validate against it.
"""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    StringConstraints,
    TypeAdapter,
    ValidationError as PydanticValidationError,
    model_validator,
)

from app.models.ingredient import IngredientCategory
from app.models.recipe import Difficulty, MealType


NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]

# Upper bound of a 32-bit INTEGER column; larger values cannot be bound as parameters
MAX_INT = 2**31 - 1

_http_url = TypeAdapter(HttpUrl)


def _check_source_url(value: str) -> str:
    """Accept an absolute http(s) URL or "", keeping the text exactly as sent."""
    if value:
        try:
            _http_url.validate_python(value)
        except PydanticValidationError:
            raise ValueError("must be a valid http or https URL") from None
    return value


SourceUrl = Annotated[str, StringConstraints(max_length=2048), AfterValidator(_check_source_url)]


# --- Ingredients ---


class IngredientCreate(BaseModel):
    name: NameStr
    category: IngredientCategory


class IngredientRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category: IngredientCategory


# --- Recipe ingredient lines ---


class RecipeIngredientInput(BaseModel):
    """One ingredient line of a submitted recipe.

    Either ``ingredient_id`` references an existing ingredient, or ``name`` and
    ``category`` are given and the ingredient is found or created by name.
    """

    ingredient_id: Optional[int] = Field(default=None, gt=0, le=MAX_INT)
    name: Optional[NameStr] = None
    category: Optional[IngredientCategory] = None
    amount: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    measurement: Optional[str] = Field(default=None, max_length=50)
    is_optional: bool = False

    @model_validator(mode="after")
    def require_name_without_reference(self):
        if self.ingredient_id is None:
            missing = [f for f in ("name", "category") if getattr(self, f) is None]
            if missing:
                raise ValueError(
                    f"{' and '.join(missing)} required when ingredient_id is not given"
                )
        return self


class RecipeIngredientRead(BaseModel):
    id: int
    ingredient_id: int
    name: str
    category: IngredientCategory
    amount: Optional[float] = None
    measurement: Optional[str] = None
    is_optional: bool = False


# --- Recipes ---


class RecipeFields(BaseModel):
    """Scalar recipe fields accepted on create."""

    name: NameStr
    description: Optional[str] = Field(default=None, max_length=300)
    meal_type: Optional[MealType] = None
    prep_time: Optional[int] = Field(default=None, ge=0, le=MAX_INT)
    cook_time: Optional[int] = Field(default=None, ge=0, le=MAX_INT)
    extra_time: Optional[int] = Field(default=None, ge=0, le=MAX_INT)
    difficulty: Difficulty
    cuisine: Optional[str] = Field(default=None, max_length=100)
    servings: Optional[int] = Field(default=None, gt=0, le=MAX_INT)
    directions: Optional[str] = None
    source_url: Optional[SourceUrl] = None
    special_tools: Optional[list[str]] = None
    favorite: bool = False


class RecipeCreate(RecipeFields):
    ingredients: list[RecipeIngredientInput] = Field(default_factory=list)


# Fields that map to NOT NULL columns; a patch may omit them but not null them
_NON_NULLABLE_FIELDS = ("name", "difficulty", "favorite", "directions", "special_tools")


class RecipeUpdate(BaseModel):
    """Partial update of scalar fields. Ingredient lines are not editable here."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[NameStr] = None
    description: Optional[str] = Field(default=None, max_length=300)
    meal_type: Optional[MealType] = None
    prep_time: Optional[int] = Field(default=None, ge=0, le=MAX_INT)
    cook_time: Optional[int] = Field(default=None, ge=0, le=MAX_INT)
    extra_time: Optional[int] = Field(default=None, ge=0, le=MAX_INT)
    difficulty: Optional[Difficulty] = None
    cuisine: Optional[str] = Field(default=None, max_length=100)
    servings: Optional[int] = Field(default=None, gt=0, le=MAX_INT)
    directions: Optional[str] = None
    source_url: Optional[SourceUrl] = None
    special_tools: Optional[list[str]] = None
    favorite: Optional[bool] = None

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        nulled = [
            f for f in _NON_NULLABLE_FIELDS
            if f in self.model_fields_set and getattr(self, f) is None
        ]
        if nulled:
            raise ValueError(f"cannot be null: {', '.join(nulled)}")
        return self

    def changes(self) -> dict:
        """Return only the fields the caller supplied, ready for the ORM row."""
        return self.model_dump(exclude_unset=True)


class RecipeRead(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    meal_type: Optional[MealType] = None
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    extra_time: Optional[int] = None
    difficulty: Difficulty
    cuisine: Optional[str] = None
    servings: Optional[int] = None
    directions: str = ""
    source_url: Optional[str] = None
    special_tools: list[str] = []
    favorite: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    ingredients: list[RecipeIngredientRead] = []

    @classmethod
    def from_recipe(cls, recipe) -> "RecipeRead":
        """Compose a recipe row with its lines, dropping lines without an ingredient."""
        lines = [
            RecipeIngredientRead(
                id=line.id,
                ingredient_id=line.ingredient_id,
                name=line.ingredient.name,
                category=line.ingredient.category,
                amount=line.amount,
                measurement=line.measurement,
                is_optional=line.is_optional,
            )
            for line in recipe.recipe_ingredients
            if line.ingredient is not None
        ]
        return cls(
            id=recipe.id,
            name=recipe.name,
            description=recipe.description,
            meal_type=recipe.meal_type,
            prep_time=recipe.prep_time,
            cook_time=recipe.cook_time,
            extra_time=recipe.extra_time,
            difficulty=recipe.difficulty,
            cuisine=recipe.cuisine,
            servings=recipe.servings,
            directions=recipe.directions or "",
            source_url=recipe.source_url,
            special_tools=list(recipe.special_tools or []),
            favorite=bool(recipe.favorite),
            created_at=recipe.created_at,
            updated_at=recipe.updated_at,
            ingredients=lines,
        )
