from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, Enum, JSON, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from app.database import Base


class MealType(str, enum.Enum):
    SNACK = "snack"
    MEAL = "meal"
    SIDE_DISH = "side dish"
    APPETIZER = "appetizer"
    DESSERT = "dessert"


class Difficulty(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Recipe(Base):
    """Recipe record. Owns its ingredient lines."""

    __tablename__ = "recipes"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)  # Not unique: duplicates are allowed
    description = Column(String(300))
    meal_type = Column(
        Enum(MealType, name="meal_type", values_callable=_enum_values)
    )
    prep_time = Column(Integer)  # minutes
    cook_time = Column(Integer)  # minutes
    extra_time = Column(Integer)  # minutes
    difficulty = Column(
        Enum(Difficulty, name="recipe_difficulty", values_callable=_enum_values),
        nullable=False,
    )
    cuisine = Column(String(100))
    servings = Column(Integer)
    directions = Column(Text, nullable=False, default="")
    source_url = Column(String(2048))
    special_tools = Column(
        JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list
    )
    favorite = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    recipe_ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.position",
    )

    __table_args__ = (
        Index("idx_recipes_name", "name"),
    )
