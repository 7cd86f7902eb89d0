"""Authentication service for tagfolio application.

The gallery has a single owner who signs in with email and password. In
production the credentials are checked by Firebase Authentication through its
REST API; development environments check them against environment variables.
"""

import base64
import json
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import requests

from ..config import get_config, get_firebase_api_key, get_owner_email, get_request_timeout
from ..error_handling import AuthenticationError, AuthorizationError, NetworkError, ValidationError
from ..logging_config import get_logger, log_error, log_security_event, log_user_action

logger = get_logger(__name__)

LOGIN_REQUIRED_MESSAGE = "이메일과 비밀번호를 입력하세요."
LOGIN_FAILED_MESSAGE = "로그인에 실패했습니다. 이메일/비밀번호를 확인하세요."

# Refresh this many seconds before the ID token actually expires
TOKEN_EXPIRY_MARGIN = 60


@dataclass
class UserInfo:
    """Represents the signed-in gallery owner."""

    user_id: str
    email: str
    id_token: str | None = None
    refresh_token: str | None = None
    expires_at: float | None = None

    def is_expired(self, now: float | None = None) -> bool:
        """Check whether the ID token is past its expiry margin."""
        if self.expires_at is None:
            return False
        now = time.time() if now is None else now
        return now >= self.expires_at - TOKEN_EXPIRY_MARGIN

    def display_name(self) -> str:
        """Greeting shown in the header auth area."""
        return f"{self.email} 님"


class AuthService(ABC):
    """Base class holding the signed-in user and the sign-in rules."""

    def __init__(self) -> None:
        self._current_user: UserInfo | None = None

    def sign_in(self, email: str, password: str) -> UserInfo:
        """
        Sign the owner in with email and password.

        Args:
            email: Account email (surrounding whitespace is ignored)
            password: Account password (used as given)

        Returns:
            UserInfo: The signed-in user

        Raises:
            ValidationError: If email or password is empty
            AuthenticationError: If the credentials are rejected
            AuthorizationError: If the account is not the configured owner
        """
        email = (email or "").strip()
        if not email or not password:
            raise ValidationError(
                "Email and password are required",
                code="credentials_missing",
                user_message=LOGIN_REQUIRED_MESSAGE,
            )

        user_info = self._verify_credentials(email, password)
        self._check_owner(user_info)

        self._current_user = user_info
        log_user_action(user_info.user_id, "login", email=user_info.email)
        return user_info

    @abstractmethod
    def _verify_credentials(self, email: str, password: str) -> UserInfo:
        """Check the credentials with the backend and return the account."""

    def _refresh(self, user_info: UserInfo) -> UserInfo:
        """Return a user with a fresh token; the base class never expires tokens."""
        return user_info

    def _check_owner(self, user_info: UserInfo) -> None:
        owner_email = get_owner_email()
        if owner_email and user_info.email.lower() != owner_email:
            log_security_event("non_owner_login", user_id=user_info.user_id, email=user_info.email)
            raise AuthorizationError(
                f"Account {user_info.email} is not the gallery owner",
                code="not_owner",
                user_message="이 갤러리의 관리자 계정이 아닙니다.",
                details={"email": user_info.email},
            )

    def sign_out(self) -> None:
        """Clear the current authentication state."""
        user_id = self._current_user.user_id if self._current_user else None
        self._current_user = None
        log_user_action(user_id or "unknown", "logout")

    def get_current_user(self) -> UserInfo | None:
        """
        Get the currently signed-in user.

        Expired sessions are refreshed; if refreshing fails the user is signed
        out and None is returned.
        """
        user_info = self._current_user
        if user_info is None or not user_info.is_expired():
            return user_info

        try:
            self._current_user = self._refresh(user_info)
        except (AuthenticationError, NetworkError):
            logger.warning("session_refresh_failed", user_id=user_info.user_id)
            self._current_user = None
        return self._current_user

    def set_current_user(self, user_info: UserInfo | None) -> None:
        """Set the current user (for restoring a session or for tests)."""
        self._current_user = user_info

    def is_authenticated(self) -> bool:
        """Check if a user is currently signed in."""
        return self.get_current_user() is not None

    def get_user_email(self) -> str | None:
        user_info = self.get_current_user()
        return user_info.email if user_info else None

    def ensure_authenticated(self, user_message: str | None = None) -> UserInfo:
        """
        Ensure a user is signed in.

        Args:
            user_message: Message to show the owner when nobody is signed in

        Returns:
            UserInfo: Current user

        Raises:
            AuthenticationError: If nobody is signed in
        """
        user_info = self.get_current_user()
        if user_info is None:
            raise AuthenticationError(
                "User is not authenticated",
                code="user_not_authenticated",
                user_message=user_message or "로그인이 필요합니다.",
            )
        return user_info

    def check_configuration(self) -> dict[str, Any]:
        """Report whether the service is usable, for health checks."""
        return {"status": "healthy", "message": "Authentication service ready"}


class FirebaseAuthService(AuthService):
    """Email/password sign-in through the Firebase Authentication REST API."""

    SIGN_IN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"
    REFRESH_URL = "https://securetoken.googleapis.com/v1/token"

    # Firebase error codes that mean "wrong credentials" rather than an outage
    CREDENTIAL_ERRORS = {
        "EMAIL_NOT_FOUND",
        "INVALID_PASSWORD",
        "INVALID_LOGIN_CREDENTIALS",
        "INVALID_EMAIL",
        "USER_DISABLED",
    }

    def __init__(self, api_key: str | None = None, session: requests.Session | None = None) -> None:
        super().__init__()
        self.api_key = api_key or get_firebase_api_key()
        self.session = session or requests.Session()
        self.timeout = get_request_timeout()

    def _post(self, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = self.session.post(url, params={"key": self.api_key}, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise NetworkError(
                f"Authentication request failed: {e}",
                code="auth_unreachable",
                details={"url": url},
                original_exception=e,
            ) from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.status_code != 200:
            error_code = str(payload.get("error", {}).get("message", "")).split(" ")[0]
            if response.status_code >= 500:
                raise NetworkError(
                    f"Authentication service error {response.status_code}",
                    code="auth_unavailable",
                    details={"status_code": response.status_code, "error_code": error_code},
                )
            raise AuthenticationError(
                f"Firebase rejected the request: {error_code or response.status_code}",
                code="login_failed" if error_code in self.CREDENTIAL_ERRORS else "auth_rejected",
                user_message=LOGIN_FAILED_MESSAGE,
                details={"status_code": response.status_code, "error_code": error_code},
            )

        return payload

    def _verify_credentials(self, email: str, password: str) -> UserInfo:
        payload = self._post(
            self.SIGN_IN_URL,
            json={"email": email, "password": password, "returnSecureToken": True},
        )

        id_token = payload.get("idToken")
        user_id = payload.get("localId")
        if not id_token or not user_id:
            raise AuthenticationError(
                "Sign-in response is missing idToken or localId",
                code="login_failed",
                user_message=LOGIN_FAILED_MESSAGE,
            )

        claims = self._decode_jwt_payload(id_token)
        token_email = claims.get("email") or payload.get("email") or email
        if claims.get("user_id", claims.get("sub", user_id)) != user_id:
            raise AuthenticationError(
                "ID token subject does not match the signed-in account",
                code="token_mismatch",
                user_message=LOGIN_FAILED_MESSAGE,
            )

        return UserInfo(
            user_id=user_id,
            email=token_email,
            id_token=id_token,
            refresh_token=payload.get("refreshToken"),
            expires_at=time.time() + int(payload.get("expiresIn", 3600)),
        )

    def _refresh(self, user_info: UserInfo) -> UserInfo:
        if not user_info.refresh_token:
            raise AuthenticationError("Session expired", code="session_expired")

        payload = self._post(
            self.REFRESH_URL,
            data={"grant_type": "refresh_token", "refresh_token": user_info.refresh_token},
        )
        logger.info("session_refreshed", user_id=user_info.user_id)
        return UserInfo(
            user_id=payload.get("user_id", user_info.user_id),
            email=user_info.email,
            id_token=payload.get("id_token", user_info.id_token),
            refresh_token=payload.get("refresh_token", user_info.refresh_token),
            expires_at=time.time() + int(payload.get("expires_in", 3600)),
        )

    def _decode_jwt_payload(self, jwt_token: str) -> dict[str, Any]:
        """
        Decode the claims of an ID token.

        The token comes straight from Google over TLS, so the signature is not
        re-verified here.
        """
        try:
            parts = jwt_token.split(".")
            if len(parts) != 3:
                raise ValueError("Invalid JWT token format")

            payload_b64 = parts[1]
            padding = 4 - len(payload_b64) % 4
            if padding != 4:
                payload_b64 += "=" * padding

            return json.loads(base64.urlsafe_b64decode(payload_b64).decode("utf-8"))
        except (ValueError, UnicodeDecodeError) as e:
            log_error(e, {"operation": "decode_id_token"})
            raise AuthenticationError(
                f"Failed to decode ID token: {e}",
                code="invalid_token",
                user_message=LOGIN_FAILED_MESSAGE,
                original_exception=e,
            ) from e

    def check_configuration(self) -> dict[str, Any]:
        if not self.api_key:
            return {"status": "unhealthy", "message": "FIREBASE_API_KEY is not set"}
        return {"status": "healthy", "message": "Firebase Authentication configured"}


class DevelopmentAuthService(AuthService):
    """Local sign-in against DEV_OWNER_EMAIL / DEV_OWNER_PASSWORD."""

    def __init__(self) -> None:
        super().__init__()
        config = get_config()
        self.dev_email = str(config.get("DEV_OWNER_EMAIL", "owner@example.com")).strip()
        self.dev_password = str(config.get("DEV_OWNER_PASSWORD", "password"))
        logger.info("development_auth_mode_enabled", email=self.dev_email)

    def _verify_credentials(self, email: str, password: str) -> UserInfo:
        if email.lower() != self.dev_email.lower() or password != self.dev_password:
            log_security_event("login_failed", email=email, mode="development")
            raise AuthenticationError(
                "Development credentials did not match",
                code="login_failed",
                user_message=LOGIN_FAILED_MESSAGE,
                details={"email": email},
            )

        return UserInfo(user_id=f"dev-{self.dev_email}", email=self.dev_email)


_auth_service: AuthService | None = None


def create_auth_service() -> AuthService:
    """Create the auth service that matches the current environment."""
    if get_config().is_development() and not get_config().get("FIREBASE_API_KEY"):
        return DevelopmentAuthService()
    return FirebaseAuthService()


def get_auth_service() -> AuthService:
    """Get the global authentication service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = create_auth_service()
    return _auth_service


def reset_auth_service() -> None:
    """Drop the global instance so the next call re-reads configuration."""
    global _auth_service
    _auth_service = None
