"""Profile card and theme handlers for tagfolio application."""

import streamlit as st
import structlog

from tagfolio.models.profile import Profile
from tagfolio.services.preferences import DARK, LIGHT, LocalPreferences, get_preferences

from .auth import is_signed_in
from .gallery import set_flash

logger = structlog.get_logger(__name__)


def get_session_preferences() -> LocalPreferences:
    if st.session_state.get("preferences") is None:
        st.session_state.preferences = get_preferences()
    return st.session_state.preferences


def load_profile_into_editor() -> Profile:
    """Copy the saved profile into the editor inputs (once per sign-in)."""
    profile = get_session_preferences().load_profile()
    if not st.session_state.get("profile_editor_loaded"):
        st.session_state.edit_name = profile.name
        st.session_state.edit_bio = profile.bio
        st.session_state.edit_email = profile.email
        st.session_state.edit_link = profile.link
        st.session_state.profile_editor_loaded = True
    return profile


def handle_profile_save() -> Profile:
    """Persist the editor inputs and refresh them with the normalized values."""
    profile = Profile.from_form(
        st.session_state.get("edit_name", ""),
        st.session_state.get("edit_bio", ""),
        st.session_state.get("edit_email", ""),
        st.session_state.get("edit_link", ""),
    )
    get_session_preferences().save_profile(profile)

    st.session_state.edit_name = profile.name
    st.session_state.edit_link = profile.link
    set_flash("success", "프로필이 저장되었습니다!")
    return profile


def get_session_theme() -> str:
    """The theme for this browser session, seeded from the owner's saved choice."""
    if st.session_state.get("theme") not in (LIGHT, DARK):
        st.session_state.theme = get_session_preferences().get_theme()
    return st.session_state.theme


def handle_theme_toggle() -> str:
    """Flip this session's theme; only the signed-in owner's choice is saved."""
    theme = LIGHT if get_session_theme() == DARK else DARK
    st.session_state.theme = theme

    if is_signed_in():
        get_session_preferences().set_theme(theme)
    logger.info("theme_toggled", theme=theme, persisted=is_signed_in())
    return theme
