"""Abstract base class for authentication providers."""
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from fastapi import Request
from sqlalchemy.orm import Session as DBSession

from app.models.session import Session
from app.models.user import User


class AuthProvider(ABC):
    """
    Abstract authentication provider interface.

    Route handlers only see users and identity tokens, so the credential and
    token scheme can change without touching them.
    """

    @abstractmethod
    async def authenticate(self, db: DBSession, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password.

        Returns User if credentials are valid, None otherwise.
        """
        pass

    @abstractmethod
    async def create_user(
        self,
        db: DBSession,
        username: str,
        email: str,
        password: str,
    ) -> User:
        """
        Create a new user with the given credentials.

        Raises ConflictError if the username or email is taken.
        """
        pass

    @abstractmethod
    async def get_session(self, db: DBSession, token: str) -> Optional[Tuple[Session, User]]:
        """
        Validate an identity token.

        Returns (session, user) if the token exists and has not expired, None otherwise.
        """
        pass

    @abstractmethod
    async def create_session(self, db: DBSession, user: User, request: Request) -> str:
        """
        Issue an identity token for the user.

        Returns the token the client presents on later requests.
        """
        pass

    @abstractmethod
    async def revoke_session(self, db: DBSession, token: str) -> bool:
        """
        Revoke/invalidate a token.

        Returns True if the session was revoked, False if not found.
        """
        pass
