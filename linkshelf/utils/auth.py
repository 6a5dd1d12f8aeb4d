"""
Authentication utilities with JWT tokens and bcrypt password hashing.

- bcrypt with salt for password hashing; passwords are first reduced to a
  fixed-length SHA-256 digest since bcrypt only accepts 72 bytes
- signed JWT bearer tokens carrying the user id (``sub``) and a token id
  (``jti``) that must match a stored AccessToken row
- UTC timezone consistency
"""

import base64
import hashlib
import secrets
from datetime import UTC, datetime, timedelta

import bcrypt
from jose import JWTError, jwt

from linkshelf.config import settings


def _prehash(password: str) -> bytes:
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a hashed password."""
    try:
        return bcrypt.checkpw(
            _prehash(plain_password), hashed_password.encode("utf-8")
        )
    except ValueError:
        return False


def get_password_hash(password: str) -> str:
    """Hash a plain text password using bcrypt."""
    salt = bcrypt.gensalt()
    hashed_password = bcrypt.hashpw(password=_prehash(password), salt=salt)
    return hashed_password.decode("utf-8")


def new_token_id() -> str:
    return secrets.token_hex(16)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token with the given data."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(
            minutes=settings.access_token_expire_minutes
        )

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict | None:
    """Decode and verify a JWT access token."""
    try:
        return jwt.decode(
            token, settings.secret_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        return None


def extract_token_claims(token: str) -> tuple[int, str] | None:
    """Return ``(user_id, jti)`` from a valid token, or None."""
    payload = decode_access_token(token)
    if payload is None:
        return None
    subject, jti = payload.get("sub"), payload.get("jti")
    if subject is None or jti is None:
        return None
    try:
        return int(subject), jti
    except (TypeError, ValueError):
        return None
