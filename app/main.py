import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import auth, recipes
from app.config import settings
from app.errors import AuthError, RecipeBoxError, StorageError, ValidationError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Recipe Box", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Error Handling
# =============================================================================


def _error_response(exc: RecipeBoxError) -> JSONResponse:
    content = {"detail": exc.message}
    if isinstance(exc, ValidationError):
        content["errors"] = exc.errors

    headers = None
    if isinstance(exc, AuthError):
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


@app.exception_handler(RecipeBoxError)
async def recipe_box_exception_handler(request: Request, exc: RecipeBoxError):
    """Map application errors to their HTTP status with a JSON body."""
    if isinstance(exc, StorageError):
        # Cause is logged where it was raised; the client only gets the generic message
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc.message)
    return _error_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400 with every violated field."""
    return _error_response(ValidationError.from_pydantic(exc))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# Include routers
app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(recipes.router, prefix=settings.api_prefix)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
