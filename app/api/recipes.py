"""API endpoints for recipes and the shared ingredient catalogue."""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.ingredient_service import ingredient_service
from app.services.recipe_service import recipe_service
from app.services.recipe_schemas import (
    MAX_INT,
    IngredientCreate,
    IngredientRead,
    RecipeCreate,
    RecipeRead,
    RecipeUpdate,
)

router = APIRouter(prefix="/recipes", tags=["recipes"])

RecipeId = Annotated[int, Path(ge=1, le=MAX_INT)]

# Handlers are sync; FastAPI runs them in its threadpool


# =============================================================================
# Ingredients
# =============================================================================


@router.get("/ingredients/search", response_model=List[IngredientRead])
def search_ingredients(
    query: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Ingredient name search for autocomplete (case-insensitive, at most 5)."""
    return ingredient_service.search(db, query)


@router.post("/ingredients", response_model=IngredientRead)
def create_ingredient(
    payload: IngredientCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    """
    Find an ingredient by name or create it.

    Returns 201 when a new ingredient was created, 200 when it already existed.
    """
    ingredient, created = ingredient_service.find_or_create(
        db, payload.name, payload.category
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return ingredient


# =============================================================================
# Recipes
# =============================================================================


@router.get("", response_model=List[RecipeRead])
def list_recipes(db: Session = Depends(get_db)):
    """All recipes with their ingredients, ordered by name."""
    return recipe_service.list_recipes(db)


@router.post("", response_model=RecipeRead, status_code=status.HTTP_201_CREATED)
def create_recipe(payload: RecipeCreate, db: Session = Depends(get_db)):
    """Create a recipe together with its ingredient lines."""
    return recipe_service.create_recipe(db, payload)


@router.get("/{recipe_id}", response_model=RecipeRead)
def get_recipe(recipe_id: RecipeId, db: Session = Depends(get_db)):
    return recipe_service.get_recipe(db, recipe_id)


@router.patch("/{recipe_id}", response_model=RecipeRead)
def update_recipe(
    recipe_id: RecipeId, patch: RecipeUpdate, db: Session = Depends(get_db)
):
    """Update scalar fields (e.g. toggle favorite). Ingredient lines are not changed."""
    return recipe_service.update_recipe(db, recipe_id, patch)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recipe(recipe_id: RecipeId, db: Session = Depends(get_db)):
    """Delete a recipe and its ingredient lines."""
    recipe_service.delete_recipe(db, recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
