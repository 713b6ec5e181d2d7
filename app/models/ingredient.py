from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from app.database import Base


class IngredientCategory(str, enum.Enum):
    """Enum for ingredient shelf category."""
    MEAT = "meat"
    DAIRY = "dairy"
    PRODUCE = "produce"
    PANTRY = "pantry"
    SPICES = "spices"
    OTHER = "other"


class Ingredient(Base):
    """Ingredient master table shared by all recipes."""
    __tablename__ = "ingredients"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)  # Display name as first entered
    normalized_name = Column(String(255), nullable=False, unique=True, index=True)  # Lowercase for matching
    category = Column(
        Enum(
            IngredientCategory,
            name="ingredient_category",
            values_callable=lambda e: [member.value for member in e],
        ),
        nullable=False,
        default=IngredientCategory.OTHER,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    recipe_ingredients = relationship("RecipeIngredient", back_populates="ingredient")

    @staticmethod
    def normalize_name(name: str) -> str:
        """Normalize ingredient name for case-insensitive matching."""
        return name.strip().lower()
