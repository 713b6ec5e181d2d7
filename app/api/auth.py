"""Authentication routes for registration, login and the caller's profile."""

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import AuthError, NotFoundError
from app.services.auth import get_auth_provider
from app.services.auth.dependencies import AuthContext, get_auth_context
from app.services.auth.schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserRead,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: Request,
    payload: RegisterRequest,
    db: Session = Depends(get_db),
):
    """Create an account and sign it in. Returns the user and an identity token."""
    auth_provider = get_auth_provider()
    user = await auth_provider.create_user(
        db, payload.username, payload.email, payload.password
    )

    # Auto-login
    token = await auth_provider.create_session(db, user, request)

    return AuthResponse(user=UserRead.model_validate(user), token=token)


@router.post("/login", response_model=AuthResponse)
async def login(
    request: Request,
    payload: LoginRequest,
    db: Session = Depends(get_db),
):
    """Verify credentials and issue an identity token."""
    auth_provider = get_auth_provider()
    user = await auth_provider.authenticate(db, payload.email, payload.password)

    if not user:
        logger.warning("Failed login attempt for %s", payload.email.strip().lower())
        raise AuthError("Invalid credentials")

    token = await auth_provider.create_session(db, user, request)
    return AuthResponse(user=UserRead.model_validate(user), token=token)


@router.get("/me", response_model=UserRead)
async def me(auth: AuthContext = Depends(get_auth_context)):
    """The caller's profile."""
    if auth.user is None:
        raise NotFoundError("User not found")
    return auth.user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """Revoke the token used for this request."""
    user_id = auth.user_id
    await get_auth_provider().revoke_session(db, auth.token)
    logger.info("Logged out user %s", user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
