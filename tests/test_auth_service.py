"""Tests for services.auth.AuthService against an in-memory database."""

import uuid
from datetime import date, datetime, timedelta, timezone

import jwt
import pytest

from api.config import TestingConfig, auth_settings_from_config
from models import storage
from models.refresh_token import RefreshToken
from models.user import User
from services.auth import AuthService, AuthSettings
from services.errors import DuplicateEmail, InvalidCredentials, InvalidToken, TokenExpired


def _register(service, email="a@example.com", password="password123"):
    return service.register(name="Alice", email=email, password=password, birth_date=date(1990, 1, 1))


def _service_at(auth_service, moment):
    return AuthService(storage, auth_service.settings, clock=lambda: moment)


def _token_with(auth_service, **claims):
    now = datetime.now(timezone.utc)
    payload = {
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(hours=1)).timestamp()),
        "type": "access",
    }
    payload.update(claims)
    return jwt.encode(payload, auth_service.settings.jwt_secret, algorithm="HS256")


class TestRegister:
    def test_register_hashes_password(self, auth_service):
        user = _register(auth_service)

        assert user.id
        assert user.email == "a@example.com"
        assert user.password_hash != "password123"
        assert user.password_hash.startswith("$argon2")

    def test_register_normalizes_email(self, auth_service):
        user = _register(auth_service, email="  Alice@Example.COM ")
        assert user.email == "alice@example.com"

    def test_duplicate_email_creates_no_row(self, auth_service):
        _register(auth_service)

        with pytest.raises(DuplicateEmail):
            _register(auth_service, password="another-password")
        assert storage.count(User) == 1


class TestLogin:
    def test_register_then_login(self, auth_service):
        _register(auth_service)

        tokens = auth_service.login("a@example.com", "password123")
        assert tokens.access_token
        assert tokens.refresh_token

    def test_each_login_issues_a_new_refresh_token(self, auth_service):
        _register(auth_service)

        first = auth_service.login("a@example.com", "password123")
        second = auth_service.login("a@example.com", "password123")
        assert first.refresh_token != second.refresh_token
        assert storage.count(RefreshToken) == 2

    def test_wrong_password_and_unknown_email_look_the_same(self, auth_service):
        _register(auth_service)

        with pytest.raises(InvalidCredentials) as wrong_password:
            auth_service.login("a@example.com", "wrong-password")
        with pytest.raises(InvalidCredentials) as unknown_email:
            auth_service.login("nobody@example.com", "password123")

        assert type(wrong_password.value) is type(unknown_email.value)
        assert wrong_password.value.message == unknown_email.value.message
        assert wrong_password.value.status_code == unknown_email.value.status_code

    def test_refresh_token_row_expires_in_thirty_days(self, auth_service):
        moment = datetime(2030, 1, 1, tzinfo=timezone.utc)
        service = _service_at(auth_service, moment)
        _register(service)

        tokens = service.login("a@example.com", "password123")
        record = storage.get_session().query(RefreshToken).filter_by(token=tokens.refresh_token).one()
        assert record.revoked is False
        assert record.expires_at.replace(tzinfo=timezone.utc) == moment + timedelta(days=30)


class TestSettings:
    def test_app_settings_give_day_long_access_tokens(self, auth_service):
        user = _register(auth_service)
        token = auth_service.issue_access_token(user.id)

        claims = jwt.decode(token, options={"verify_signature": False})
        assert claims["exp"] - claims["iat"] == 86400
        assert auth_service.settings.refresh_token_ttl == timedelta(days=30)

    @pytest.mark.parametrize("algorithm", ["none", "RS256", "ES256", ""])
    def test_non_hmac_algorithms_are_refused(self, algorithm):
        with pytest.raises(ValueError):
            AuthSettings(jwt_secret="secret", refresh_token_secret="other", jwt_algorithm=algorithm)

    def test_config_algorithm_is_checked(self):
        config = {key: getattr(TestingConfig, key) for key in dir(TestingConfig) if key.isupper()}
        config["JWT_ALGORITHM"] = "none"

        with pytest.raises(ValueError):
            auth_settings_from_config(config)

    def test_config_accepts_hs512(self):
        config = {key: getattr(TestingConfig, key) for key in dir(TestingConfig) if key.isupper()}
        config["JWT_ALGORITHM"] = "HS512"

        assert auth_settings_from_config(config).jwt_algorithm == "HS512"


class TestVerifyAccessToken:
    def test_fresh_token_resolves_to_user(self, auth_service):
        user = _register(auth_service)
        token = auth_service.issue_access_token(user.id)

        assert auth_service.verify_access_token(token) == user.id

    def test_expired_token_is_rejected(self, auth_service):
        user = _register(auth_service)
        past = _service_at(auth_service, datetime.now(timezone.utc) - timedelta(hours=25))
        token = past.issue_access_token(user.id)

        with pytest.raises(TokenExpired):
            auth_service.verify_access_token(token)

    def test_tampered_signature_is_rejected(self, auth_service):
        user = _register(auth_service)
        token = auth_service.issue_access_token(user.id)
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])

        with pytest.raises(InvalidToken):
            auth_service.verify_access_token(tampered)

    def test_unsigned_token_is_rejected(self, auth_service):
        user = _register(auth_service)
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": user.id, "iat": int(now.timestamp()), "exp": int((now + timedelta(hours=1)).timestamp())},
            None,
            algorithm="none",
        )

        with pytest.raises(InvalidToken):
            auth_service.verify_access_token(token)

    def test_missing_subject_is_rejected(self, auth_service):
        with pytest.raises(InvalidToken):
            auth_service.verify_access_token(_token_with(auth_service))

    def test_malformed_subject_is_rejected(self, auth_service):
        with pytest.raises(InvalidToken):
            auth_service.verify_access_token(_token_with(auth_service, sub="not-a-uuid"))

    def test_subject_is_not_rechecked_against_users(self, auth_service):
        ghost = str(uuid.uuid4())
        assert auth_service.verify_access_token(_token_with(auth_service, sub=ghost)) == ghost

    def test_garbage_is_rejected(self, auth_service):
        with pytest.raises(InvalidToken):
            auth_service.verify_access_token("garbage")


class TestRefreshAndLogout:
    def test_refresh_returns_token_for_owner(self, auth_service):
        user = _register(auth_service)
        tokens = auth_service.login("a@example.com", "password123")

        access = auth_service.refresh(tokens.refresh_token)
        assert auth_service.verify_access_token(access) == user.id

    def test_refresh_does_not_rotate(self, auth_service):
        _register(auth_service)
        tokens = auth_service.login("a@example.com", "password123")

        auth_service.refresh(tokens.refresh_token)
        assert auth_service.refresh(tokens.refresh_token)

    def test_unknown_refresh_token(self, auth_service):
        with pytest.raises(InvalidToken):
            auth_service.refresh("no-such-token")

    def test_revoked_refresh_token(self, auth_service):
        _register(auth_service)
        tokens = auth_service.login("a@example.com", "password123")

        auth_service.logout(tokens.refresh_token)
        with pytest.raises(InvalidToken):
            auth_service.refresh(tokens.refresh_token)

    def test_expired_refresh_token(self, auth_service):
        _register(auth_service)
        past = _service_at(auth_service, datetime.now(timezone.utc) - timedelta(days=31))
        tokens = past.login("a@example.com", "password123")

        with pytest.raises(TokenExpired):
            auth_service.refresh(tokens.refresh_token)

    def test_logout_is_idempotent(self, auth_service):
        _register(auth_service)
        tokens = auth_service.login("a@example.com", "password123")

        auth_service.logout(tokens.refresh_token)
        auth_service.logout(tokens.refresh_token)
        auth_service.logout("never-issued")

        record = storage.get_session().query(RefreshToken).filter_by(token=tokens.refresh_token).one()
        assert record.revoked is True

    def test_logout_leaves_other_sessions_alone(self, auth_service):
        _register(auth_service)
        first = auth_service.login("a@example.com", "password123")
        second = auth_service.login("a@example.com", "password123")

        auth_service.logout(first.refresh_token)
        assert auth_service.refresh(second.refresh_token)

    def test_access_token_survives_logout(self, auth_service):
        user = _register(auth_service)
        tokens = auth_service.login("a@example.com", "password123")

        auth_service.logout(tokens.refresh_token)
        assert auth_service.verify_access_token(tokens.access_token) == user.id
