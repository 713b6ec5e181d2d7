from sqlalchemy import Column, Integer, String, Boolean, Float, ForeignKey, Index
from sqlalchemy.orm import relationship

from app.database import Base


class RecipeIngredient(Base):
    """Junction table linking recipes to ingredients with amount and unit."""
    __tablename__ = "recipe_ingredients"

    id = Column(Integer, primary_key=True)
    recipe_id = Column(Integer, ForeignKey('recipes.id', ondelete='CASCADE'), nullable=False)
    ingredient_id = Column(Integer, ForeignKey('ingredients.id', ondelete='RESTRICT'), nullable=False)
    position = Column(Integer, nullable=False, default=0)  # Order the line was submitted in
    amount = Column(Float)
    measurement = Column(String(50))
    is_optional = Column(Boolean, nullable=False, default=False)

    # Relationships
    recipe = relationship("Recipe", back_populates="recipe_ingredients")
    ingredient = relationship("Ingredient", back_populates="recipe_ingredients")

    __table_args__ = (
        Index('idx_recipe_ingredients_recipe_id', 'recipe_id'),
        Index('idx_recipe_ingredients_ingredient_id', 'ingredient_id'),
    )
