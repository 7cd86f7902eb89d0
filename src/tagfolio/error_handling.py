"""
Centralized error handling and classification for tagfolio application.

Every application error carries a category, a severity and a message that is
safe to show to the gallery owner. Foreign exceptions are classified into the
same hierarchy by ``ErrorHandler``.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from .logging_config import get_logger, log_error, log_security_event

logger = get_logger(__name__)


class ErrorCategory(Enum):
    """Error categories for classification and handling."""

    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    IMAGE_PROCESSING = "image_processing"
    STORE = "store"
    VALIDATION = "validation"
    NETWORK = "network"
    SYSTEM = "system"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class ErrorInfo:
    """Structured error information."""

    category: ErrorCategory
    severity: ErrorSeverity
    code: str
    message: str
    user_message: str
    details: dict[str, Any]
    timestamp: datetime
    recoverable: bool = True
    retry_suggested: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert error info to dictionary."""
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "user_message": self.user_message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "recoverable": self.recoverable,
            "retry_suggested": self.retry_suggested,
        }


_USER_MESSAGES = {
    ErrorCategory.AUTHENTICATION: "로그인에 실패했습니다. 다시 로그인해 주세요.",
    ErrorCategory.AUTHORIZATION: "이 작업을 수행할 권한이 없습니다.",
    ErrorCategory.IMAGE_PROCESSING: "이미지를 처리하는 중 오류가 발생했습니다.",
    ErrorCategory.STORE: "사진 저장소 오류가 발생했습니다.",
    ErrorCategory.VALIDATION: "입력 내용을 확인해 주세요.",
    ErrorCategory.NETWORK: "네트워크 오류가 발생했습니다.",
    ErrorCategory.SYSTEM: "시스템 오류가 발생했습니다.",
    ErrorCategory.UNKNOWN: "예기치 않은 오류가 발생했습니다.",
}


class GalleryError(Exception):
    """Base exception class for tagfolio application."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        recoverable: bool = True,
        retry_suggested: bool = False,
        original_exception: Exception | None = None,
    ):
        super().__init__(message)
        self.category = category
        self.severity = severity
        self.code = code or f"{category.value}_error"
        self.user_message = user_message or _USER_MESSAGES.get(category, "오류가 발생했습니다.")
        self.details = details or {}
        self.recoverable = recoverable
        self.retry_suggested = retry_suggested
        self.original_exception = original_exception
        self.timestamp = datetime.now()

        self._log_error()

    def _log_error(self) -> None:
        """Log the error with its classification."""
        error_context = {
            "category": self.category.value,
            "severity": self.severity.value,
            "code": self.code,
            "recoverable": self.recoverable,
            **self.details,
        }

        if self.original_exception:
            error_context["original_exception"] = str(self.original_exception)

        if self.category is ErrorCategory.VALIDATION:
            logger.info("validation_failed", message=str(self), **error_context)
            return

        log_error(self, error_context)

        if self.category in [ErrorCategory.AUTHENTICATION, ErrorCategory.AUTHORIZATION]:
            log_security_event(self.category.value, context=error_context)

    def get_error_info(self) -> ErrorInfo:
        """Get structured error information."""
        return ErrorInfo(
            category=self.category,
            severity=self.severity,
            code=self.code,
            message=str(self),
            user_message=self.user_message,
            details=self.details,
            timestamp=self.timestamp,
            recoverable=self.recoverable,
            retry_suggested=self.retry_suggested,
        )


class AuthenticationError(GalleryError):
    """Sign-in failures and operations attempted while signed out."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.AUTHENTICATION,
            severity=ErrorSeverity.HIGH,
            code=code or "auth_failed",
            user_message=user_message,
            details=details,
            recoverable=True,
            retry_suggested=True,
            original_exception=original_exception,
        )


class AuthorizationError(GalleryError):
    """A signed-in account that is not the gallery owner."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.AUTHORIZATION,
            severity=ErrorSeverity.HIGH,
            code=code or "access_denied",
            user_message=user_message,
            details=details,
            recoverable=False,
            retry_suggested=False,
            original_exception=original_exception,
        )


class ValidationError(GalleryError):
    """Invalid form input or unsupported upload."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.LOW,
            code=code or "validation_failed",
            user_message=user_message,
            details=details,
            recoverable=True,
            retry_suggested=False,
            original_exception=original_exception,
        )


class StoreError(GalleryError):
    """Photo store (Firestore or DuckDB) failures."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        recoverable: bool = True,
        retry_suggested: bool = True,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.STORE,
            severity=ErrorSeverity.HIGH,
            code=code or "store_error",
            user_message=user_message or "사진 저장소 오류가 발생했습니다. 잠시 후 다시 시도해 주세요.",
            details=details,
            recoverable=recoverable,
            retry_suggested=retry_suggested,
            original_exception=original_exception,
        )


class ImageProcessingError(GalleryError):
    """Uploaded image could not be decoded or encoded."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.IMAGE_PROCESSING,
            severity=ErrorSeverity.MEDIUM,
            code=code or "image_processing_failed",
            user_message=user_message or "이미지를 처리하지 못했습니다. 파일 형식을 확인해 주세요.",
            details=details,
            recoverable=True,
            retry_suggested=False,
            original_exception=original_exception,
        )


class NetworkError(GalleryError):
    """Remote service unreachable or timed out."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.NETWORK,
            severity=ErrorSeverity.MEDIUM,
            code=code or "network_error",
            user_message=user_message or "네트워크 오류가 발생했습니다. 연결을 확인해 주세요.",
            details=details,
            recoverable=True,
            retry_suggested=True,
            original_exception=original_exception,
        )


class GallerySystemError(GalleryError):
    """Unrecoverable system errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(
            message=message,
            category=ErrorCategory.SYSTEM,
            severity=ErrorSeverity.CRITICAL,
            code=code or "system_error",
            user_message=user_message or "시스템 오류가 발생했습니다. 관리자에게 문의해 주세요.",
            details=details,
            recoverable=False,
            retry_suggested=False,
            original_exception=original_exception,
        )


class ErrorHandler:
    """Centralized error handler for the application."""

    _KEYWORDS: list[tuple[type[GalleryError], tuple[str, ...]]] = [
        (AuthenticationError, ("authentication", "login", "token", "unauthorized", "password")),
        (AuthorizationError, ("permission", "access denied", "forbidden", "not allowed")),
        (ImageProcessingError, ("image", "pillow", "jpeg", "heic", "decode")),
        (StoreError, ("firestore", "duckdb", "document", "collection", "database")),
        (NetworkError, ("network", "connection", "timeout", "unreachable")),
        (ValidationError, ("validation", "invalid", "required", "missing")),
    ]

    def __init__(self) -> None:
        self.error_counts: dict[str, int] = {}
        self.logger = get_logger(__name__)

    def handle_error(
        self,
        error: Exception,
        context: dict[str, Any] | None = None,
    ) -> ErrorInfo:
        """
        Handle and classify errors.

        Args:
            error: Exception to handle
            context: Additional context information

        Returns:
            ErrorInfo: Structured error information
        """
        if isinstance(error, GalleryError):
            error_info = error.get_error_info()
        else:
            error_info = self._classify_error(error, context or {}).get_error_info()

        self._track_error(error_info.code)
        return error_info

    def _classify_error(self, error: Exception, context: dict[str, Any]) -> GalleryError:
        """Classify a foreign exception into the GalleryError hierarchy."""
        error_type = type(error).__name__
        error_message = str(error)
        lowered = error_message.lower()
        details = {"original_type": error_type, **context}

        for error_class, keywords in self._KEYWORDS:
            if any(keyword in lowered for keyword in keywords):
                return error_class(message=error_message, details=details, original_exception=error)

        if isinstance(error, (MemoryError, SystemError)):
            return GallerySystemError(message=error_message, details=details, original_exception=error)

        return GalleryError(
            message=error_message,
            category=ErrorCategory.UNKNOWN,
            severity=ErrorSeverity.MEDIUM,
            details=details,
            original_exception=error,
        )

    def _track_error(self, error_code: str) -> None:
        """Track error occurrence for monitoring."""
        self.error_counts[error_code] = self.error_counts.get(error_code, 0) + 1

        if self.error_counts[error_code] % 10 == 0:
            self.logger.warning("frequent_error_detected", error_code=error_code, count=self.error_counts[error_code])

    def get_error_statistics(self) -> dict[str, int]:
        """Get error occurrence statistics."""
        return self.error_counts.copy()

    def reset_statistics(self) -> None:
        """Reset error statistics."""
        self.error_counts.clear()


# Global error handler instance
error_handler = ErrorHandler()


def handle_error(error: Exception, context: dict[str, Any] | None = None) -> ErrorInfo:
    """Classify ``error`` with the global handler."""
    return error_handler.handle_error(error, context)


def get_error_handler() -> ErrorHandler:
    """Get the global error handler instance."""
    return error_handler
