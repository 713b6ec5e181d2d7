"""
Authentication service package.

Provides pluggable authentication. Currently only local password auth with
server-side identity tokens.

Usage:
    from app.services.auth import get_auth_provider
    from app.services.auth.dependencies import AuthContext, get_auth_context

    # In routes:
    @router.get("/protected")
    async def protected_route(auth: AuthContext = Depends(get_auth_context)):
        ...
"""
from app.services.auth.base import AuthProvider
from app.services.auth.local_provider import local_auth_provider


def get_auth_provider() -> AuthProvider:
    """
    Factory function to get the configured auth provider.
    """
    return local_auth_provider


__all__ = [
    "AuthProvider",
    "get_auth_provider",
    "local_auth_provider",
]
