"""
Unit tests for authentication service.
"""

import time
from unittest.mock import MagicMock

import pytest
import requests

from tagfolio.config import get_config
from tagfolio.error_handling import AuthenticationError, AuthorizationError, NetworkError, ValidationError
from tagfolio.services.auth import (
    LOGIN_FAILED_MESSAGE,
    LOGIN_REQUIRED_MESSAGE,
    AuthService,
    DevelopmentAuthService,
    FirebaseAuthService,
    UserInfo,
    create_auth_service,
    get_auth_service,
    reset_auth_service,
)
from tests.conftest import TestDataFactory


def make_response(status_code: int = 200, payload: dict | None = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload if payload is not None else {}
    return response


def firebase_error(message: str, status_code: int = 400) -> MagicMock:
    return make_response(status_code, {"error": {"code": status_code, "message": message}})


class TestUserInfo:
    """Test cases for UserInfo dataclass."""

    def test_user_info_creation_minimal(self):
        user_info = UserInfo(user_id="uid", email="owner@example.com")

        assert user_info.id_token is None
        assert user_info.expires_at is None
        assert user_info.is_expired() is False

    def test_is_expired_uses_margin(self):
        """Tokens count as expired a minute before their actual expiry."""
        now = 1_000_000.0
        assert UserInfo("uid", "e", expires_at=now + 30).is_expired(now) is True
        assert UserInfo("uid", "e", expires_at=now + 120).is_expired(now) is False

    def test_display_name(self):
        assert UserInfo("uid", "owner@example.com").display_name() == "owner@example.com 님"


class TestAuthServiceBase:
    """Test cases for the abstract sign-in rules."""

    def test_base_class_is_abstract(self):
        with pytest.raises(TypeError):
            AuthService()

    def test_subclass_gets_sign_in_rules(self):
        class StaticAuthService(AuthService):
            def _verify_credentials(self, email, password):
                return UserInfo(user_id="static", email=email)

        service = StaticAuthService()

        with pytest.raises(ValidationError):
            service.sign_in("owner@example.com", "")
        assert service.sign_in("owner@example.com", "pw").user_id == "static"
        assert service.is_authenticated()


class TestDevelopmentAuthService:
    """Test cases for DevelopmentAuthService."""

    def setup_method(self):
        self.auth_service = DevelopmentAuthService()

    def test_sign_in_with_default_credentials(self):
        user_info = self.auth_service.sign_in("owner@example.com", "password")

        assert user_info.email == "owner@example.com"
        assert user_info.user_id == "dev-owner@example.com"
        assert self.auth_service.is_authenticated()

    def test_sign_in_trims_email(self):
        user_info = self.auth_service.sign_in("  owner@example.com  ", "password")
        assert user_info.email == "owner@example.com"

    def test_sign_in_with_custom_credentials(self, monkeypatch):
        monkeypatch.setenv("DEV_OWNER_EMAIL", "me@test.dev")
        monkeypatch.setenv("DEV_OWNER_PASSWORD", "secret")
        get_config().clear_cache()
        service = DevelopmentAuthService()

        assert service.sign_in("me@test.dev", "secret").email == "me@test.dev"

    def test_sign_in_wrong_password(self):
        with pytest.raises(AuthenticationError) as exc_info:
            self.auth_service.sign_in("owner@example.com", "wrong")

        assert exc_info.value.code == "login_failed"
        assert exc_info.value.user_message == LOGIN_FAILED_MESSAGE
        assert not self.auth_service.is_authenticated()

    @pytest.mark.parametrize("email,password", [("", "password"), ("owner@example.com", ""), ("   ", "x")])
    def test_sign_in_requires_both_fields(self, email, password):
        """Empty credentials are rejected before any verification."""
        with pytest.raises(ValidationError) as exc_info:
            self.auth_service.sign_in(email, password)

        assert exc_info.value.code == "credentials_missing"
        assert exc_info.value.user_message == LOGIN_REQUIRED_MESSAGE

    def test_sign_in_rejects_non_owner(self, monkeypatch):
        """Only the configured owner may sign in."""
        monkeypatch.setenv("OWNER_EMAIL", "someone-else@example.com")
        get_config().clear_cache()

        with pytest.raises(AuthorizationError) as exc_info:
            self.auth_service.sign_in("owner@example.com", "password")

        assert exc_info.value.code == "not_owner"
        assert not self.auth_service.is_authenticated()

    def test_owner_email_comparison_ignores_case(self, monkeypatch):
        monkeypatch.setenv("OWNER_EMAIL", "Owner@Example.com")
        get_config().clear_cache()

        assert self.auth_service.sign_in("owner@example.com", "password")

    def test_sign_out(self):
        self.auth_service.sign_in("owner@example.com", "password")

        self.auth_service.sign_out()

        assert self.auth_service.get_current_user() is None
        assert self.auth_service.get_user_email() is None

    def test_ensure_authenticated(self):
        self.auth_service.sign_in("owner@example.com", "password")
        assert self.auth_service.ensure_authenticated().email == "owner@example.com"

    def test_ensure_authenticated_signed_out(self):
        with pytest.raises(AuthenticationError) as exc_info:
            self.auth_service.ensure_authenticated(user_message="로그인 후 삭제할 수 있습니다.")

        assert exc_info.value.code == "user_not_authenticated"
        assert exc_info.value.user_message == "로그인 후 삭제할 수 있습니다."

    def test_check_configuration(self):
        assert self.auth_service.check_configuration()["status"] == "healthy"


class TestFirebaseAuthService:
    """Test cases for FirebaseAuthService."""

    def setup_method(self):
        self.session = MagicMock()
        self.auth_service = FirebaseAuthService(api_key="test-api-key", session=self.session)

    def test_sign_in_success(self):
        """Test a successful signInWithPassword call."""
        self.session.post.return_value = make_response(200, TestDataFactory.create_sign_in_response())

        user_info = self.auth_service.sign_in("owner@example.com", "secret")

        assert user_info.user_id == "owner-uid-123"
        assert user_info.email == "owner@example.com"
        assert user_info.refresh_token == "refresh-token"
        assert user_info.expires_at > time.time() + 3000

        args, kwargs = self.session.post.call_args
        assert args[0] == FirebaseAuthService.SIGN_IN_URL
        assert kwargs["params"] == {"key": "test-api-key"}
        assert kwargs["json"] == {"email": "owner@example.com", "password": "secret", "returnSecureToken": True}

    @pytest.mark.parametrize("message", ["INVALID_LOGIN_CREDENTIALS", "EMAIL_NOT_FOUND", "INVALID_PASSWORD"])
    def test_sign_in_wrong_credentials(self, message):
        self.session.post.return_value = firebase_error(message)

        with pytest.raises(AuthenticationError) as exc_info:
            self.auth_service.sign_in("owner@example.com", "wrong")

        assert exc_info.value.code == "login_failed"
        assert exc_info.value.user_message == LOGIN_FAILED_MESSAGE

    def test_sign_in_other_rejection(self):
        """Non-credential errors such as throttling are still login failures."""
        self.session.post.return_value = firebase_error("TOO_MANY_ATTEMPTS_TRY_LATER : Access disabled")

        with pytest.raises(AuthenticationError) as exc_info:
            self.auth_service.sign_in("owner@example.com", "secret")

        assert exc_info.value.code == "auth_rejected"
        assert exc_info.value.details["error_code"] == "TOO_MANY_ATTEMPTS_TRY_LATER"

    def test_sign_in_server_error(self):
        self.session.post.return_value = make_response(503)

        with pytest.raises(NetworkError) as exc_info:
            self.auth_service.sign_in("owner@example.com", "secret")

        assert exc_info.value.code == "auth_unavailable"

    def test_sign_in_unreachable(self):
        self.session.post.side_effect = requests.ConnectionError("no route")

        with pytest.raises(NetworkError) as exc_info:
            self.auth_service.sign_in("owner@example.com", "secret")

        assert exc_info.value.code == "auth_unreachable"

    def test_sign_in_response_missing_token(self):
        self.session.post.return_value = make_response(200, {"localId": "uid"})

        with pytest.raises(AuthenticationError):
            self.auth_service.sign_in("owner@example.com", "secret")

    def test_sign_in_token_subject_mismatch(self):
        payload = TestDataFactory.create_sign_in_response()
        payload["idToken"] = TestDataFactory.create_id_token(user_id="someone-else")
        self.session.post.return_value = make_response(200, payload)

        with pytest.raises(AuthenticationError) as exc_info:
            self.auth_service.sign_in("owner@example.com", "secret")

        assert exc_info.value.code == "token_mismatch"

    def test_decode_jwt_payload(self):
        claims = self.auth_service._decode_jwt_payload(TestDataFactory.create_id_token(email="a@b.test"))
        assert claims["email"] == "a@b.test"

    def test_decode_invalid_jwt(self):
        with pytest.raises(AuthenticationError) as exc_info:
            self.auth_service._decode_jwt_payload("not-a-jwt")

        assert exc_info.value.code == "invalid_token"

    def test_expired_session_is_refreshed(self):
        """An expired token is exchanged for a new one on access."""
        self.auth_service.set_current_user(
            UserInfo("owner-uid-123", "owner@example.com", "old", "refresh-token", expires_at=time.time() - 10)
        )
        self.session.post.return_value = make_response(
            200, {"id_token": "new", "refresh_token": "refresh-2", "expires_in": "3600", "user_id": "owner-uid-123"}
        )

        user_info = self.auth_service.get_current_user()

        assert user_info.id_token == "new"
        assert user_info.refresh_token == "refresh-2"
        assert not user_info.is_expired()
        args, kwargs = self.session.post.call_args
        assert args[0] == FirebaseAuthService.REFRESH_URL
        assert kwargs["data"] == {"grant_type": "refresh_token", "refresh_token": "refresh-token"}

    def test_failed_refresh_signs_out(self):
        self.auth_service.set_current_user(
            UserInfo("owner-uid-123", "owner@example.com", "old", "refresh-token", expires_at=time.time() - 10)
        )
        self.session.post.return_value = firebase_error("TOKEN_EXPIRED")

        assert self.auth_service.get_current_user() is None
        assert not self.auth_service.is_authenticated()

    def test_expired_session_without_refresh_token(self):
        self.auth_service.set_current_user(UserInfo("uid", "owner@example.com", expires_at=time.time() - 10))

        assert self.auth_service.get_current_user() is None
        self.session.post.assert_not_called()

    def test_check_configuration(self):
        assert self.auth_service.check_configuration()["status"] == "healthy"


class TestCreateAuthService:
    """Test cases for auth service selection."""

    def test_development_without_api_key(self):
        assert isinstance(create_auth_service(), DevelopmentAuthService)

    def test_development_with_api_key(self, monkeypatch):
        monkeypatch.setenv("FIREBASE_API_KEY", "key")
        get_config().clear_cache()

        assert isinstance(create_auth_service(), FirebaseAuthService)

    def test_production_uses_firebase(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("FIREBASE_API_KEY", "key")
        get_config().clear_cache()

        service = create_auth_service()
        assert isinstance(service, FirebaseAuthService)
        assert service.api_key == "key"

    def test_get_auth_service_is_cached(self):
        service = get_auth_service()
        assert get_auth_service() is service

        reset_auth_service()
        assert get_auth_service() is not service
