"""
Streamlit error display components.

Errors are shown with an alert level that matches their severity, and
``error_context`` turns exceptions raised while rendering a section into such
an alert instead of a traceback.
"""

from typing import Any

import streamlit as st

from tagfolio.error_handling import ErrorInfo, ErrorSeverity, handle_error
from tagfolio.logging_config import get_logger

from streamlit.runtime.scriptrunner_utils.exceptions import RerunException, StopException

logger = get_logger(__name__)


class ErrorDisplayManager:
    """Manager for displaying errors in Streamlit interface."""

    _ALERT_TYPES = {
        ErrorSeverity.LOW: "info",
        ErrorSeverity.MEDIUM: "warning",
        ErrorSeverity.HIGH: "error",
        ErrorSeverity.CRITICAL: "error",
    }

    def display_error(self, error_info: ErrorInfo, show_details: bool = False) -> None:
        """
        Display error information.

        Args:
            error_info: Structured error information
            show_details: Whether to show the error code and details
        """
        alert_type = self._ALERT_TYPES.get(error_info.severity, "error")
        if alert_type == "error":
            st.error(error_info.user_message)
        elif alert_type == "warning":
            st.warning(error_info.user_message)
        else:
            st.info(error_info.user_message)

        if show_details:
            with st.expander("상세 정보", expanded=False):
                st.write("**오류 코드:**", error_info.code)
                st.write("**분류:**", error_info.category.value)
                st.write("**발생 시각:**", error_info.timestamp.strftime("%Y-%m-%d %H:%M:%S"))
                for key, value in error_info.details.items():
                    if key != "original_exception":
                        st.write(f"- {key}: {value}")

        logger.info(
            "error_displayed_to_user",
            error_code=error_info.code,
            category=error_info.category.value,
            severity=error_info.severity.value,
        )

    def display_exception(
        self,
        exception: Exception,
        context: dict[str, Any] | None = None,
        show_details: bool = False,
    ) -> None:
        """Classify an exception and display it."""
        self.display_error(handle_error(exception, context), show_details=show_details)

    def display_flash(self, level: str, message: str) -> None:
        """Display a one-shot message queued by a widget callback."""
        if level == "success":
            st.success(message)
        elif level == "error":
            st.error(message)
        elif level == "warning":
            st.warning(message)
        else:
            st.info(message)


error_display_manager = ErrorDisplayManager()


def get_error_display_manager() -> ErrorDisplayManager:
    """Get the global error display manager instance."""
    return error_display_manager


class StreamlitErrorContext:
    """Context manager that displays exceptions from a rendering block."""

    def __init__(self, operation: str, show_details: bool = False):
        self.operation = operation
        self.show_details = show_details

    def __enter__(self) -> "StreamlitErrorContext":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        if exc_type is None:
            return False

        # st.rerun() and st.stop() are control flow, not errors
        if isinstance(exc_val, (RerunException, StopException)):
            return False

        if not isinstance(exc_val, Exception):
            return False

        error_display_manager.display_exception(
            exc_val, context={"operation": self.operation}, show_details=self.show_details
        )
        return True


def error_context(operation: str, show_details: bool = False) -> StreamlitErrorContext:
    """Create an error context manager for a Streamlit rendering block."""
    return StreamlitErrorContext(operation, show_details)
