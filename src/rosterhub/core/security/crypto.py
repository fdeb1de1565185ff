"""Password hashing, invite codes and bearer tokens."""

import secrets
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from uuid import UUID

import argon2
from jose import JWTError, jwt

from src.rosterhub.core.config import get_settings

INVITE_CODE_BYTES = 16


@lru_cache
def get_password_hasher() -> argon2.PasswordHasher:
    settings = get_settings()
    return argon2.PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
    )


def hash_password(password: str) -> str:
    """Hash password using Argon2id."""
    return get_password_hasher().hash(password)


def verify_password(password: str, hashed: str) -> bool:
    try:
        return get_password_hasher().verify(hashed, password)
    except (argon2.exceptions.VerifyMismatchError, argon2.exceptions.InvalidHashError):
        return False


def generate_invite_code() -> str:
    """Opaque URL-safe code handed to an invitee; the unique column is the only index on it."""
    return secrets.token_urlsafe(INVITE_CODE_BYTES)


def create_access_token(subject: str | UUID, expires_delta: timedelta | None = None) -> str:
    """Issue a bearer token for a user id.

    Production tokens come from the identity provider, signed with the same
    shared secret; this produces the same claims.
    """
    settings = get_settings()
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {
        "sub": str(subject),
        "exp": datetime.now(UTC) + lifetime,
        "type": "access",
    }
    return jwt.encode(  # type: ignore[no-any-return]
        claims,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str) -> UUID | None:
    """Return the user id of a valid, unexpired access token, else None."""
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None

    if claims.get("type") != "access":
        return None
    try:
        return UUID(str(claims.get("sub", "")))
    except ValueError:
        return None
