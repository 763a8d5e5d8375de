"""
Security module: password policy, hashing, JWT access/refresh tokens and revocation.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict
from jose import jwt, JWTError
from passlib.context import CryptContext
from app.core.config import settings
from app.core.errors import WeakCredentialError
from app.cache.redis_client import cache

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

PASSWORD_MIN_LENGTH = 6


def validate_password(password: str) -> None:
    """
    Validate password strength.

    Args:
        password: The password to validate

    Raises:
        WeakCredentialError: naming the first rule the password does not meet
    """
    if len(password) < PASSWORD_MIN_LENGTH:
        raise WeakCredentialError(f"Passwords must be at least {PASSWORD_MIN_LENGTH} characters.")

    if not any(c.isdigit() for c in password):
        raise WeakCredentialError("Passwords must have at least one digit ('0'-'9').")

    if not any(c.islower() for c in password):
        raise WeakCredentialError("Passwords must have at least one lowercase ('a'-'z').")

    if not any(c.isupper() for c in password):
        raise WeakCredentialError("Passwords must have at least one uppercase ('A'-'Z').")

    if all(c.isalnum() for c in password):
        raise WeakCredentialError("Passwords must have at least one non alphanumeric character.")


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a password against a hash."""
    return pwd_context.verify(plain, hashed)


def hash_password(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(data: Dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode; ``sub`` must hold the account id
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    to_encode = data.copy()
    expire = _now() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_refresh_token(data: Dict) -> str:
    """Create a JWT refresh token, issued only for "remember me" sessions."""
    to_encode = data.copy()
    expire = _now() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    to_encode.update({"exp": expire, "type": "refresh"})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> Dict:
    """
    Decode and validate a JWT token.

    Raises:
        ValueError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise ValueError("Token has expired")
    except JWTError as e:
        raise ValueError(f"Invalid token: {str(e)}")

    if "sub" not in payload:
        raise ValueError("Invalid token payload: missing 'sub' field")
    return payload


async def revoke_token(token: str) -> bool:
    """
    Add token to the revocation list until it would have expired anyway.

    Returns:
        True if the token is on the list afterwards
    """
    try:
        payload = decode_token(token)
    except ValueError:
        # Already unusable
        return True

    ttl = int(payload.get("exp", 0)) - int(_now().timestamp())
    if ttl <= 0:
        return True
    return await cache.set(f"revoked_token:{token}", True, expire=ttl)


async def is_token_revoked(token: str) -> bool:
    return await cache.exists(f"revoked_token:{token}")
