from datetime import timedelta
from typing import Any, Dict, Optional
import hmac
import secrets

import bcrypt
from jose import JWTError, jwt

from servicedesk.core.config import get_settings
from servicedesk.core.errors import AuthenticationError
from servicedesk.utils.datetime_utils import utc_now

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password"""
    # Bcrypt has a 72 byte limit
    password_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    """Hash password with configurable rounds (BCRYPT_ROUNDS in .env)"""
    password_bytes = password.encode("utf-8")[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=get_settings().bcrypt_rounds))
    return hashed.decode("utf-8")


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    settings = get_settings()
    to_encode = data.copy()
    expire = utc_now() + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode.update({"exp": expire, "type": ACCESS_TOKEN})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def create_refresh_token(data: Dict[str, Any]) -> str:
    """Create JWT refresh token"""
    settings = get_settings()
    to_encode = data.copy()
    expire = utc_now() + timedelta(days=settings.refresh_token_expire_days)
    to_encode.update({"exp": expire, "type": REFRESH_TOKEN})
    return jwt.encode(to_encode, settings.jwt_refresh_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, token_type: str = ACCESS_TOKEN) -> Dict[str, Any]:
    """
    Decode and validate a JWT.

    Raises:
        AuthenticationError: If the token is invalid, expired or of the wrong type
    """
    settings = get_settings()
    secret = settings.jwt_secret if token_type == ACCESS_TOKEN else settings.jwt_refresh_secret
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise AuthenticationError("Could not validate credentials")

    if payload.get("type") != token_type:
        raise AuthenticationError("Invalid token type")
    if not payload.get("sub"):
        raise AuthenticationError("Could not validate credentials")
    return payload


def generate_csrf_token() -> str:
    """Generate a CSRF token for the double-submit cookie."""
    return secrets.token_urlsafe(32)


def csrf_tokens_match(cookie_token: Optional[str], header_token: Optional[str]) -> bool:
    if not cookie_token or not header_token:
        return False
    return hmac.compare_digest(cookie_token, header_token)
