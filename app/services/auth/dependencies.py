"""FastAPI dependencies for authentication."""
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.errors import AuthError
from app.models.session import Session as UserSession
from app.models.user import User
from app.services.auth import get_auth_provider


logger = logging.getLogger(__name__)


@dataclass
class AuthContext:
    """Validated identity handed to route handlers."""

    token: str
    session: UserSession
    user: Optional[User]

    @property
    def user_id(self):
        return self.session.user_id


def extract_token(request: Request) -> Optional[str]:
    """Read the identity token from the Authorization header, falling back to the cookie."""
    header = request.headers.get("authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(settings.session_cookie_name) or None


async def get_auth_context(
    request: Request,
    db: Session = Depends(get_db)
) -> AuthContext:
    """
    Validate the caller's token on every request.

    Raises AuthError (401) if the token is missing, unknown or expired.
    """
    token = extract_token(request)
    if not token:
        raise AuthError("Please authenticate")

    auth_provider = get_auth_provider()
    result = await auth_provider.get_session(db, token)
    if not result:
        logger.warning("Rejected invalid or expired token: path=%s", request.url.path)
        raise AuthError("Please authenticate")

    session, user = result
    return AuthContext(token=token, session=session, user=user)

