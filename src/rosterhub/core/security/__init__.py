"""Security utilities - password hashing, bearer tokens, response headers."""

from src.rosterhub.core.security.crypto import (
    create_access_token,
    decode_access_token,
    generate_invite_code,
    hash_password,
    verify_password,
)
from src.rosterhub.core.security.headers import SecurityHeadersMiddleware

__all__ = [
    "SecurityHeadersMiddleware",
    "create_access_token",
    "decode_access_token",
    "generate_invite_code",
    "hash_password",
    "verify_password",
]
