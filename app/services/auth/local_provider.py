"""Local password-based authentication provider."""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import bcrypt
from fastapi import Request
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session as DBSession

from app.config import settings
from app.errors import ConflictError, ValidationError
from app.models.user import User
from app.models.session import Session
from app.services.auth.base import AuthProvider


logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes and bcrypt>=5 rejects anything longer
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class LocalAuthProvider(AuthProvider):
    """
    Local authentication provider using password hashing and database sessions.

    Passwords are hashed with bcrypt. Identity tokens are secure random strings
    stored server-side with an expiry, so revocation and expiry are enforced on
    every request.
    """

    def _hash_password(self, password: str) -> str:
        """Hash a password using bcrypt."""
        return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

    def _verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        if password_too_long(plain_password):
            return False
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))

    def _generate_session_token(self) -> str:
        """Generate a cryptographically secure session token."""
        return secrets.token_urlsafe(32)

    async def authenticate(self, db: DBSession, email: str, password: str) -> Optional[User]:
        """Authenticate user with email and password."""
        user = db.query(User).filter(User.email == email.strip().lower()).first()
        if not user or not user.password_hash:
            return None
        if not self._verify_password(password, user.password_hash):
            return None
        return user

    async def create_user(
        self,
        db: DBSession,
        username: str,
        email: str,
        password: str,
    ) -> User:
        """Create a new user with hashed password."""
        if password_too_long(password):
            raise ValidationError(
                "Invalid registration",
                [{"field": "password", "message": f"must be at most {MAX_PASSWORD_BYTES} bytes"}],
            )
        email = email.strip().lower()
        existing = (
            db.query(User)
            .filter(or_(User.email == email, User.username == username))
            .first()
        )
        if existing:
            raise ConflictError("User with this email or username already exists")

        user = User(
            username=username,
            email=email,
            password_hash=self._hash_password(password),
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Race condition: another registration took the email or username
            db.rollback()
            raise ConflictError("User with this email or username already exists") from None
        db.refresh(user)
        logger.info("Registered user %s", user.id)
        return user

    async def get_session(self, db: DBSession, token: str) -> Optional[Tuple[Session, User]]:
        """Look up a token and check it has not expired."""
        session = db.query(Session).filter(Session.token == token).first()
        if not session:
            return None

        if _as_utc(session.expires_at) <= datetime.now(timezone.utc):
            return None

        return session, session.user

    async def create_session(self, db: DBSession, user: User, request: Request) -> str:
        """Create a new session for the user."""
        token = self._generate_session_token()
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=settings.session_max_age)

        # Extract request metadata
        user_agent = request.headers.get("user-agent", "")[:512]
        client_ip = request.client.host if request.client else None

        session = Session(
            user_id=user.id,
            token=token,
            expires_at=expires_at,
            user_agent=user_agent,
            ip_address=client_ip
        )
        db.add(session)
        db.commit()

        return token

    async def revoke_session(self, db: DBSession, token: str) -> bool:
        """Revoke a session by its token."""
        session = db.query(Session).filter(Session.token == token).first()
        if not session:
            return False
        db.delete(session)
        db.commit()
        return True


# Singleton instance
local_auth_provider = LocalAuthProvider()
