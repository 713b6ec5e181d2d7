"""Business logic for the shared ingredient table."""

import logging
from typing import List, Tuple

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import StorageError, ValidationError
from app.models.ingredient import Ingredient, IngredientCategory


logger = logging.getLogger(__name__)

SEARCH_LIMIT = 5

# Dialects with INSERT ... ON CONFLICT DO NOTHING support
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _clean_name(name: str) -> str:
    if name is None or not name.strip():
        raise ValidationError(
            "Ingredient name is required",
            [{"field": "name", "message": "must not be empty"}],
        )
    return name.strip()


def _coerce_category(category) -> IngredientCategory:
    try:
        return IngredientCategory(category)
    except ValueError:
        allowed = ", ".join(c.value for c in IngredientCategory)
        raise ValidationError(
            "Invalid ingredient category",
            [{"field": "category", "message": f"must be one of: {allowed}"}],
        ) from None


class IngredientService:
    """Service for ingredient lookup, find-or-create and search."""

    @staticmethod
    def _lookup(db: Session, normalized_name: str):
        return (
            db.query(Ingredient)
            .filter(Ingredient.normalized_name == normalized_name)
            .first()
        )

    @staticmethod
    def _insert_if_absent(
        db: Session, name: str, normalized_name: str, category: IngredientCategory
    ) -> Tuple[int, bool]:
        """
        Insert the ingredient unless its normalized name already exists.

        Returns (ingredient_id, created). Runs inside the caller's transaction.
        """
        dialect = db.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)

        if insert is not None:
            stmt = (
                insert(Ingredient)
                .values(name=name, normalized_name=normalized_name, category=category)
                .on_conflict_do_nothing(index_elements=["normalized_name"])
                .returning(Ingredient.id)
            )
            new_id = db.execute(stmt).scalar_one_or_none()
            if new_id is not None:
                return new_id, True
            existing_id = db.execute(
                select(Ingredient.id).where(Ingredient.normalized_name == normalized_name)
            ).scalar_one()
            return existing_id, False

        # No native upsert: guard the insert with a savepoint so a lost race
        # only discards this row, not the caller's transaction
        ingredient = IngredientService._lookup(db, normalized_name)
        if ingredient:
            return ingredient.id, False
        try:
            with db.begin_nested():
                ingredient = Ingredient(
                    name=name, normalized_name=normalized_name, category=category
                )
                db.add(ingredient)
            return ingredient.id, True
        except IntegrityError:
            # Race condition: another request created it first
            ingredient = IngredientService._lookup(db, normalized_name)
            return ingredient.id, False

    @staticmethod
    def resolve(db: Session, name: str, category) -> int:
        """
        Return the id of the ingredient named ``name``, creating it if absent.

        Matching is case-insensitive. An existing ingredient keeps its category.
        Writes inside the caller's transaction and never commits.

        Raises:
            ValidationError: empty name or unknown category
            StorageError: database failure
        """
        clean_name = _clean_name(name)
        category = _coerce_category(category)
        normalized_name = Ingredient.normalize_name(clean_name)

        try:
            ingredient_id, created = IngredientService._insert_if_absent(
                db, clean_name, normalized_name, category
            )
        except SQLAlchemyError as e:
            logger.error("Failed to resolve ingredient %r: %s", clean_name, e)
            raise StorageError("Failed to save ingredient") from e

        if created:
            logger.info("Created ingredient %r (id=%s)", clean_name, ingredient_id)
        return ingredient_id

    @staticmethod
    def find_or_create(db: Session, name: str, category) -> Tuple[Ingredient, bool]:
        """
        Find an ingredient by name or create it, committing the result.

        Returns:
            (Ingredient, created) where created is False if it already existed
        """
        clean_name = _clean_name(name)
        category = _coerce_category(category)
        normalized_name = Ingredient.normalize_name(clean_name)

        try:
            ingredient_id, created = IngredientService._insert_if_absent(
                db, clean_name, normalized_name, category
            )
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to find or create ingredient %r: %s", clean_name, e)
            raise StorageError("Failed to save ingredient") from e

        return db.get(Ingredient, ingredient_id), created

    @staticmethod
    def search(db: Session, query: str, limit: int = SEARCH_LIMIT) -> List[Ingredient]:
        """Case-insensitive substring search on ingredient names, ordered by name."""
        if query is None or not query.strip():
            raise ValidationError(
                "Search query is required",
                [{"field": "query", "message": "must not be empty"}],
            )
        # normalized_name is lowercase, so a lowercase pattern is case-insensitive everywhere
        term = query.strip().lower()
        escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return (
            db.query(Ingredient)
            .filter(Ingredient.normalized_name.like(f"%{escaped}%", escape="\\"))
            .order_by(Ingredient.name.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_ingredient(db: Session, ingredient_id: int):
        """Get an ingredient by ID."""
        return db.get(Ingredient, ingredient_id)


# Singleton instance
ingredient_service = IngredientService()
