# edumanage/core/security.py

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from edumanage.core.config import get_token_expires_delta, settings
from edumanage.core.errors import AuthenticationError

logger = logging.getLogger(__name__)


class TokenType:
    ACCESS = "access"


pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__default_rounds=settings.BCRYPT_ROUNDS
)


def get_password_hash(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash"""
    return pwd_context.verify(plain_password, hashed_password)


def create_token(
    data: Dict[str, Any],
    token_type: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create JWT token with specified type and expiration"""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or get_token_expires_delta())

    to_encode.update({
        "exp": expire,
        "iss": settings.TOKEN_ISSUER,
        "type": token_type,
        "jti": secrets.token_urlsafe(32)
    })

    return jwt.encode(to_encode, settings.get_jwt_key(), algorithm=settings.ALGORITHM)


def create_access_token(user_id: str, email: str, expires_delta: Optional[timedelta] = None) -> str:
    """Access tokens carry identity only; roles are re-read on every request"""
    return create_token({"sub": str(user_id), "email": email}, TokenType.ACCESS, expires_delta)


def verify_token(token: str, token_type: Optional[str] = TokenType.ACCESS) -> Dict[str, Any]:
    """
    Verify JWT token and optionally check token type.

    Raises:
        AuthenticationError: if the token is malformed, expired or of the wrong type
    """
    try:
        payload = jwt.decode(
            token,
            settings.get_jwt_key(),
            algorithms=[settings.ALGORITHM],
            issuer=settings.TOKEN_ISSUER
        )
    except JWTError as e:
        logger.info(f"Token verification failed: {str(e)}")
        raise AuthenticationError("Invalid token")

    if token_type and payload.get("type") != token_type:
        raise AuthenticationError(f"Invalid token type. Expected {token_type}")
    if not payload.get("sub") or not payload.get("jti"):
        raise AuthenticationError("Invalid token")

    return payload


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Pull the credential out of an `Authorization: Bearer <token>` header"""
    if not authorization:
        raise AuthenticationError("Not authenticated")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Invalid token")
    return token.strip()
