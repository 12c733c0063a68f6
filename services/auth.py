"""
Authentication service: registration, login, access/refresh token issuance,
refresh, logout and access-token verification.

The service holds no mutable state of its own. Signing secret and hashing
cost come from an immutable AuthSettings value given at construction; users
and refresh tokens live in the database behind DBStorage.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError

from models.refresh_token import RefreshToken
from models.user import User
from services.errors import DuplicateEmail, InvalidCredentials, InvalidToken, TokenExpired
from utils.security import (
    TokenDecodeError,
    create_jwt_token,
    decode_token,
    generate_refresh_token,
    hash_password,
    make_password_hasher,
    verify_password,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Only HMAC signatures: the secret is shared by issuer and verifier
HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


@dataclass(frozen=True)
class AuthSettings:
    """Immutable auth parameters, fixed when the app is created."""

    jwt_secret: str
    refresh_token_secret: str
    jwt_algorithm: str = "HS256"
    access_token_ttl: timedelta = timedelta(hours=24)
    refresh_token_ttl: timedelta = timedelta(days=30)
    password_time_cost: int = 3
    password_memory_cost: int = 65536

    def __post_init__(self):
        if self.jwt_algorithm not in HMAC_ALGORITHMS:
            raise ValueError(
                f"Unsupported JWT algorithm {self.jwt_algorithm!r}; expected one of {', '.join(HMAC_ALGORITHMS)}"
            )
        if not self.jwt_secret:
            raise ValueError("JWT secret must not be empty")


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


class AuthService:
    def __init__(self, storage, settings: AuthSettings, clock: Callable[[], datetime] = _utcnow):
        self.storage = storage
        self.settings = settings
        self.clock = clock
        self.hasher = make_password_hasher(settings.password_time_cost, settings.password_memory_cost)
        # Verified against when the email is unknown, so both login failures cost one hash check
        self._dummy_hash = hash_password(self.hasher, uuid.uuid4().hex)

    def _get_user_by_email(self, email: str) -> Optional[User]:
        session = self.storage.get_session()
        return session.query(User).filter(User.email == email.strip().lower()).first()

    def register(self, name: str, email: str, password: str, birth_date: date | None) -> User:
        email = email.strip().lower()
        if self._get_user_by_email(email):
            raise DuplicateEmail()

        user = User(
            name=name,
            email=email,
            password_hash=hash_password(self.hasher, password),
            birth_date=birth_date,
        )
        self.storage.new(user)
        try:
            self.storage.save()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            raise DuplicateEmail()
        logger.info("registered user %s", user.id)
        return user

    def login(self, email: str, password: str) -> TokenPair:
        user = self._get_user_by_email(email)
        password_hash = user.password_hash if user else self._dummy_hash
        password_ok = verify_password(self.hasher, password, password_hash)
        if not user or not password_ok:
            logger.warning("failed login attempt")
            raise InvalidCredentials()

        return TokenPair(
            access_token=self.issue_access_token(user.id),
            refresh_token=self.issue_refresh_token(user.id),
        )

    def issue_access_token(self, user_id: str) -> str:
        return create_jwt_token(
            subject=user_id,
            secret=self.settings.jwt_secret,
            algorithm=self.settings.jwt_algorithm,
            issued_at=self.clock(),
            expires_in=self.settings.access_token_ttl,
        )

    def issue_refresh_token(self, user_id: str) -> str:
        token = generate_refresh_token()
        record = RefreshToken(
            user_id=user_id,
            token=token,
            expires_at=self.clock() + self.settings.refresh_token_ttl,
            revoked=False,
        )
        self.storage.new(record)
        self.storage.save()
        return token

    def refresh(self, refresh_token: str) -> str:
        """Exchange a live refresh token for a new access token. No rotation."""
        session = self.storage.get_session()
        record = (
            session.query(RefreshToken)
            .filter(RefreshToken.token == refresh_token, RefreshToken.revoked.is_(False))
            .first()
        )
        if record is None:
            raise InvalidToken("Invalid refresh token")
        if record.is_expired(self.clock()):
            raise TokenExpired("Refresh token expired")
        return self.issue_access_token(record.user_id)

    def logout(self, refresh_token: str) -> None:
        """Revoke a refresh token. Revoking twice, or an unknown token, is not an error."""
        session = self.storage.get_session()
        updated = (
            session.query(RefreshToken)
            .filter(RefreshToken.token == refresh_token)
            .update({RefreshToken.revoked: True, RefreshToken.updated_at: self.clock()},
                    synchronize_session="fetch")
        )
        self.storage.save()
        logger.info("logout revoked %d refresh token(s)", updated)

    def verify_access_token(self, token: str) -> str:
        """Return the user id carried by a valid access token."""
        try:
            claims = decode_token(token, self.settings.jwt_secret, self.settings.jwt_algorithm)
        except TokenDecodeError as exc:
            if exc.expired:
                raise TokenExpired()
            raise InvalidToken()

        subject = claims.get("sub")
        try:
            return str(uuid.UUID(str(subject)))
        except ValueError:
            raise InvalidToken()
