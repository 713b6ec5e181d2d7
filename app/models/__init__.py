"""
Database models for Recipe Box.

Import all models here so Alembic can detect them for migrations.
"""

from app.database import Base
from app.models.user import User
from app.models.session import Session
from app.models.ingredient import Ingredient, IngredientCategory
from app.models.recipe import Recipe, MealType, Difficulty
from app.models.recipe_ingredient import RecipeIngredient

__all__ = [
    "Base",
    "User",
    "Session",
    "Ingredient",
    "IngredientCategory",
    "Recipe",
    "MealType",
    "Difficulty",
    "RecipeIngredient",
]
