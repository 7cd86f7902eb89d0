"""Authentication handlers for tagfolio application."""

import streamlit as st
import structlog

from tagfolio.error_handling import GalleryError, handle_error
from tagfolio.services.auth import AuthService, create_auth_service

logger = structlog.get_logger(__name__)


def get_session_auth_service() -> AuthService:
    """
    Get the auth service for the current browser session.

    Streamlit module globals are shared by every visitor, so the signed-in
    user lives in session state rather than in a process-wide service.
    """
    if st.session_state.get("auth_service") is None:
        st.session_state.auth_service = create_auth_service()
    return st.session_state.auth_service


def initialize_auth_state() -> None:
    """Initialize authentication session state variables."""
    if "authenticated" not in st.session_state:
        st.session_state.authenticated = False
    if "user_email" not in st.session_state:
        st.session_state.user_email = None
    if "auth_error" not in st.session_state:
        st.session_state.auth_error = None


def sync_auth_state() -> bool:
    """
    Mirror the auth service's user into session state.

    An expired session that could not be refreshed shows up here as signed out.

    Returns:
        bool: True if a user is signed in
    """
    user_info = get_session_auth_service().get_current_user()
    st.session_state.authenticated = user_info is not None
    st.session_state.user_email = user_info.email if user_info else None
    return st.session_state.authenticated


def handle_login(email: str, password: str) -> bool:
    """
    Sign the owner in.

    Returns:
        bool: True if sign-in succeeded; otherwise ``auth_error`` holds the message
    """
    try:
        user_info = get_session_auth_service().sign_in(email, password)
    except GalleryError as e:
        st.session_state.auth_error = e.user_message
        logger.warning("login_failed", code=e.code)
        return False
    except Exception as e:
        st.session_state.auth_error = handle_error(e, {"operation": "login"}).user_message
        return False

    st.session_state.authenticated = True
    st.session_state.user_email = user_info.email
    st.session_state.auth_error = None
    logger.info("login_success", user_id=user_info.user_id)
    return True


def on_login_submit() -> None:
    """Login form callback; reads the form widgets from session state."""
    handle_login(st.session_state.get("auth_email", ""), st.session_state.get("auth_password", ""))
    st.session_state.auth_password = ""


def handle_logout() -> None:
    """Sign out and drop everything tied to the owner session."""
    get_session_auth_service().sign_out()

    st.session_state.authenticated = False
    st.session_state.user_email = None
    st.session_state.auth_error = None
    st.session_state.confirm_delete_id = None
    st.session_state.profile_editor_loaded = False

    logger.info("user_logout")


def is_signed_in() -> bool:
    return bool(st.session_state.get("authenticated"))
