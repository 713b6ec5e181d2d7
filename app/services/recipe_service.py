"""Business logic for recipe management."""

import logging
from typing import List, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from app.errors import NotFoundError, RecipeBoxError, StorageError, ValidationError
from app.models.recipe import Recipe
from app.models.recipe_ingredient import RecipeIngredient
from app.services.ingredient_service import IngredientService
from app.services.recipe_schemas import RecipeCreate, RecipeRead, RecipeUpdate


logger = logging.getLogger(__name__)


def _validate(schema, payload, message: str):
    """Validate a raw payload, reporting every violated field at once."""
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e, message) from None


def _with_lines(query):
    return query.options(
        selectinload(Recipe.recipe_ingredients).joinedload(RecipeIngredient.ingredient)
    )


class RecipeService:
    """Service for recipe-related operations."""

    @staticmethod
    def _check_ingredient_references(db: Session, data: RecipeCreate) -> None:
        """Reject lines that point at ingredient ids which do not exist."""
        errors = []
        for position, line in enumerate(data.ingredients):
            if line.ingredient_id is None:
                continue
            if IngredientService.get_ingredient(db, line.ingredient_id) is None:
                errors.append(
                    {
                        "field": f"ingredients.{position}.ingredient_id",
                        "message": f"ingredient {line.ingredient_id} does not exist",
                    }
                )
        if errors:
            raise ValidationError("Invalid recipe", errors)

    @staticmethod
    def create_recipe(db: Session, payload: Union[RecipeCreate, dict]) -> RecipeRead:
        """
        Create a recipe and all of its ingredient lines in one transaction.

        Lines without an ``ingredient_id`` are resolved by name, creating the
        ingredient when it does not exist yet. Lines keep their submitted order.
        Either everything is committed or nothing is.

        Args:
            db: Database session
            payload: RecipeCreate or a raw dict to validate

        Returns:
            The created recipe with its ingredient lines expanded

        Raises:
            ValidationError: payload invalid (all violations listed)
            StorageError: database failure; the transaction was rolled back
        """
        data = _validate(RecipeCreate, payload, "Invalid recipe")

        try:
            RecipeService._check_ingredient_references(db, data)

            recipe = Recipe(
                name=data.name,
                description=data.description,
                meal_type=data.meal_type,
                prep_time=data.prep_time,
                cook_time=data.cook_time,
                extra_time=data.extra_time,
                difficulty=data.difficulty,
                cuisine=data.cuisine,
                servings=data.servings,
                directions=data.directions or "",
                source_url=data.source_url,
                special_tools=list(data.special_tools or []),
                favorite=data.favorite,
            )
            db.add(recipe)
            db.flush()  # Get the recipe ID
            recipe_id = recipe.id

            for position, line in enumerate(data.ingredients):
                ingredient_id = line.ingredient_id
                if ingredient_id is None:
                    ingredient_id = IngredientService.resolve(db, line.name, line.category)
                db.add(
                    RecipeIngredient(
                        recipe_id=recipe_id,
                        ingredient_id=ingredient_id,
                        position=position,
                        amount=line.amount,
                        measurement=line.measurement,
                        is_optional=line.is_optional,
                    )
                )

            db.flush()
            db.commit()
        except RecipeBoxError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Failed to create recipe %r", data.name)
            raise StorageError("Failed to save recipe") from e

        logger.info(
            "Created recipe %s (%r) with %d ingredient lines",
            recipe_id,
            data.name,
            len(data.ingredients),
        )
        return RecipeService.get_recipe(db, recipe_id)

    @staticmethod
    def _load(db: Session, recipe_id: int) -> Optional[Recipe]:
        return _with_lines(db.query(Recipe)).filter(Recipe.id == recipe_id).first()

    @staticmethod
    def get_recipe(db: Session, recipe_id: int) -> RecipeRead:
        """Get one recipe with its ingredient lines. Raises NotFoundError if unknown."""
        try:
            recipe = RecipeService._load(db, recipe_id)
        except SQLAlchemyError as e:
            logger.exception("Failed to load recipe %s", recipe_id)
            raise StorageError("Failed to load recipe") from e

        if not recipe:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        return RecipeRead.from_recipe(recipe)

    @staticmethod
    def list_recipes(db: Session) -> List[RecipeRead]:
        """Get all recipes with their ingredient lines, ordered by name ascending."""
        try:
            recipes = (
                _with_lines(db.query(Recipe))
                .order_by(Recipe.name.asc(), Recipe.id.asc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.exception("Failed to list recipes")
            raise StorageError("Failed to load recipes") from e

        return [RecipeRead.from_recipe(recipe) for recipe in recipes]

    @staticmethod
    def update_recipe(
        db: Session, recipe_id: int, patch: Union[RecipeUpdate, dict]
    ) -> RecipeRead:
        """
        Apply a partial update to a recipe's scalar fields.

        Only the fields present in ``patch`` are written. Ingredient lines are
        left untouched.

        Raises:
            ValidationError: patch invalid (all violations listed)
            NotFoundError: no recipe with this ID; nothing is changed
            StorageError: database failure
        """
        changes = _validate(RecipeUpdate, patch, "Invalid recipe update").changes()

        try:
            recipe = db.query(Recipe).filter(Recipe.id == recipe_id).first()
            if not recipe:
                raise NotFoundError(f"Recipe {recipe_id} not found")

            for field, value in changes.items():
                setattr(recipe, field, value)

            db.commit()
        except RecipeBoxError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Failed to update recipe %s", recipe_id)
            raise StorageError("Failed to update recipe") from e

        logger.info("Updated recipe %s fields: %s", recipe_id, sorted(changes))
        return RecipeService.get_recipe(db, recipe_id)

    @staticmethod
    def delete_recipe(db: Session, recipe_id: int) -> None:
        """
        Delete a recipe and its ingredient lines. Ingredients themselves are kept.

        Raises:
            NotFoundError: no recipe with this ID
            StorageError: database failure
        """
        try:
            recipe = db.query(Recipe).filter(Recipe.id == recipe_id).first()
            if not recipe:
                raise NotFoundError(f"Recipe {recipe_id} not found")
            db.delete(recipe)
            db.commit()
        except RecipeBoxError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Failed to delete recipe %s", recipe_id)
            raise StorageError("Failed to delete recipe") from e

        logger.info("Deleted recipe %s", recipe_id)


# Singleton instance
recipe_service = RecipeService()
