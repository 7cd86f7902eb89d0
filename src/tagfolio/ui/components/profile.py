"""Profile card components for tagfolio application."""

import html

import streamlit as st

from tagfolio.models.profile import Profile

from ..handlers.auth import is_signed_in
from ..handlers.profile import get_session_preferences, handle_profile_save, load_profile_into_editor
from .common import safe_href


def build_profile_html(profile: Profile) -> str:
    """HTML for the profile card; the link becomes an anchor only for web schemes."""
    href = safe_href(profile.link)
    text = html.escape(profile.link)
    if href:
        text = f'<a href="{href}" target="_blank" rel="noopener noreferrer">{text}</a>'
    lines = [
        f'<p class="profile-name">{html.escape(profile.name)}</p>',
        f'<p class="profile-bio">{html.escape(profile.bio)}</p>',
        f'<p class="profile-extra">📧 {html.escape(profile.email)}</p>',
        f'<p class="profile-extra">🔗 {text}</p>',
    ]
    return '<div class="profile-box">' + "".join(lines) + "</div>"


def render_profile_editor() -> None:
    """Owner-only profile form; inputs are keyed edit_* in session state."""
    load_profile_into_editor()

    with st.expander("✏️ 프로필 수정", expanded=False):
        st.text_input("이름", key="edit_name")
        st.text_area("소개", key="edit_bio", height=80)
        st.text_input("이메일", key="edit_email")
        st.text_input("링크", key="edit_link")
        st.button("프로필 저장", key="profile_save", on_click=handle_profile_save, type="primary")


def render_profile_card() -> None:
    """Render the saved profile, plus the editor when the owner is signed in."""
    profile = get_session_preferences().load_profile()
    st.markdown(build_profile_html(profile), unsafe_allow_html=True)

    if is_signed_in():
        render_profile_editor()
