"""Application error hierarchy.

Services raise these; ``app.main`` maps each class to an HTTP status.
"""

from typing import Optional


class RecipeBoxError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RecipeBoxError):
    """Malformed or missing input. Carries every field violation found."""

    status_code = 400

    def __init__(self, message: str, errors: Optional[list[dict]] = None):
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc, message: str = "Invalid request") -> "ValidationError":
        """Build from a pydantic ValidationError (or FastAPI RequestValidationError)."""
        errors = []
        for err in exc.errors():
            loc = [str(part) for part in err.get("loc", ()) if part != "body"]
            errors.append({"field": ".".join(loc) or "body", "message": err.get("msg", "")})
        return cls(message, errors)


class NotFoundError(RecipeBoxError):
    """Unknown identifier."""

    status_code = 404


class ConflictError(RecipeBoxError):
    """Duplicate unique key that could not be folded into a find-or-create."""

    status_code = 400


class StorageError(RecipeBoxError):
    """Connectivity or transaction failure. The message is safe to show clients."""

    status_code = 500


class AuthError(RecipeBoxError):
    """Missing, invalid or expired identity token, or bad credentials."""

    status_code = 401
