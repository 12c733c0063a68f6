"""
security helpers:
- Argon2 password hashing via argon2-cffi (work factor is configurable)
- JWT creation/verification via PyJWT
- Opaque refresh token generation from the OS CSPRNG
"""
from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Dict, Any

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

# 32 random bytes = 256 bits of entropy
REFRESH_TOKEN_BYTES = 32


class TokenDecodeError(Exception):
    """Token could not be decoded; `expired` tells the two failure kinds apart."""

    def __init__(self, message: str, expired: bool = False):
        super().__init__(message)
        self.expired = expired


def make_password_hasher(time_cost: int = 3, memory_cost: int = 65536) -> PasswordHasher:
    return PasswordHasher(time_cost=time_cost, memory_cost=memory_cost)


def hash_password(hasher: PasswordHasher, password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return hasher.hash(password)


def verify_password(hasher: PasswordHasher, password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def generate_refresh_token() -> str:
    """URL-safe opaque token, not tied to any claims format."""
    return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)


def create_jwt_token(
    subject: str,
    secret: str,
    algorithm: str,
    issued_at: datetime,
    expires_in: timedelta,
) -> str:
    payload = {
        "sub": str(subject),
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + expires_in).timestamp()),
        "type": "access",
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_token(token: str, secret: str, algorithm: str, expected_type: str = "access") -> Dict[str, Any]:
    """
    Decode and validate a JWT. Only `algorithm` is accepted, which rules out
    "none" and algorithm-confusion tricks. Raises TokenDecodeError.
    """
    try:
        decoded = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenDecodeError("Token expired", expired=True)
    except jwt.InvalidTokenError as exc:
        raise TokenDecodeError(f"Invalid token: {exc}")

    if decoded.get("type") != expected_type:
        raise TokenDecodeError("Wrong token type")
    return decoded
