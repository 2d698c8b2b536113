"""
JWT verification for API callers.

Tokens are issued by the identity provider in front of this service; the
backend only checks the signature and reads the user id from ``sub``.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from ..config import get_settings

logger = logging.getLogger(__name__)


class AuthService:
    """Service for access token operations."""

    def __init__(self, secret_key: Optional[str] = None, algorithm: Optional[str] = None):
        settings = get_settings()
        self.secret_key = secret_key or settings.jwt_secret_key
        self.algorithm = algorithm or settings.jwt_algorithm

    def create_access_token(self, user_id: str, expires_minutes: int = 30) -> str:
        """Create an access token (used by local tooling and tests)."""
        expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
        to_encode = {
            "sub": user_id,
            "exp": expire,
            "type": "access"
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Optional[dict]:
        """
        Decode and validate a JWT token.

        Returns:
            Decoded token payload or None if invalid
        """
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning(f"Token decode error: {e}")
            return None

    def verify_access_token(self, token: str) -> Optional[str]:
        """Return the user id of a valid access token, else None."""
        payload = self.decode_token(token)
        if not payload or payload.get("type") != "access":
            return None
        return payload.get("sub")


# Singleton instance
_auth_service = None


def get_auth_service() -> AuthService:
    """Get the singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
