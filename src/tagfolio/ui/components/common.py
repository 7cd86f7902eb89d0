"""Reusable UI components for tagfolio application."""

import html
from datetime import datetime

import streamlit as st
import structlog

from ..handlers.auth import handle_logout, is_signed_in, on_login_submit
from ..handlers.profile import get_session_theme, handle_theme_toggle

logger = structlog.get_logger()

SAFE_URL_SCHEMES = ("http://", "https://", "mailto:")

DARK_THEME_CSS = """
<style>
    .stApp, [data-testid="stHeader"] { background-color: #0f172a; color: #e5e7eb; }
    .stApp p, .stApp span, .stApp label, .stApp h1, .stApp h2, .stApp h3 { color: #e5e7eb; }
    .gallery-card, .profile-box { background-color: #1e293b; border-color: #334155; }
    .tag-pill { background-color: #334155; color: #e5e7eb; }
</style>
"""

BASE_CSS = """
<style>
    .gallery-card { border: 1px solid #e5e7eb; border-radius: 12px; padding: 0.5rem; margin-bottom: 1rem; }
    .gallery-image img { width: 100%; height: auto; display: block; border-radius: 8px; }
    .tag-list { display: flex; flex-wrap: wrap; gap: 0.35rem; margin-top: 0.5rem; }
    .tag-pill { background-color: #f1f5f9; border-radius: 999px; padding: 2px 10px; font-size: 0.85rem; }
    .profile-box { border: 1px solid #e5e7eb; border-radius: 12px; padding: 1rem; margin-bottom: 1rem; }
    .profile-name { font-size: 1.3rem; font-weight: 600; margin: 0; }
    .profile-bio { margin: 0.25rem 0; }
    .profile-extra { font-size: 0.9rem; margin: 0.1rem 0; word-break: break-all; }
</style>
"""


def safe_href(url: str | None) -> str | None:
    """Escape a URL for an href attribute; non-web schemes are refused."""
    if not url or not url.strip().lower().startswith(SAFE_URL_SCHEMES):
        return None
    return html.escape(url.strip(), quote=True)


def apply_theme() -> str:
    """Inject the page CSS for this session's theme."""
    theme = get_session_theme()
    st.markdown(BASE_CSS, unsafe_allow_html=True)
    if theme == "dark":
        st.markdown(DARK_THEME_CSS, unsafe_allow_html=True)
    return theme


def render_auth_area() -> None:
    """Signed in: greeting and logout. Signed out: email/password login."""
    if is_signed_in():
        col1, col2 = st.columns([3, 1])
        with col1:
            st.caption(f"{st.session_state.user_email} 님")
        with col2:
            st.button("로그아웃", key="logout_button", on_click=handle_logout, use_container_width=True)
        return

    with st.form("login_form", clear_on_submit=False, border=False):
        col1, col2, col3 = st.columns([2, 2, 1])
        with col1:
            st.text_input("이메일", key="auth_email", placeholder="이메일", label_visibility="collapsed")
        with col2:
            st.text_input(
                "비밀번호", key="auth_password", type="password", placeholder="비밀번호", label_visibility="collapsed"
            )
        with col3:
            st.form_submit_button("로그인", on_click=on_login_submit, use_container_width=True)

    if st.session_state.get("auth_error"):
        st.error(st.session_state.auth_error)


def render_header(theme: str) -> None:
    """Render the title bar: name, theme toggle and auth area."""
    col1, col2, col3 = st.columns([3, 1, 4])

    with col1:
        st.markdown("## 📷 My Gallery")

    with col2:
        label = "☀️ 라이트" if theme == "dark" else "🌙 다크"
        st.button(label, key="theme_toggle", on_click=handle_theme_toggle, use_container_width=True)

    with col3:
        render_auth_area()

    st.divider()


def render_empty_state(title: str, description: str, icon: str = "📭") -> None:
    """Render a centered empty state message."""
    st.markdown(
        f"""
    <div style='text-align: center; padding: 2rem 0;'>
        <div style='font-size: 3rem; margin-bottom: 0.5rem;'>{icon}</div>
        <h4 style='color: #666; margin-bottom: 0.5rem;'>{html.escape(title)}</h4>
        <p style='color: #888;'>{html.escape(description)}</p>
    </div>
    """,
        unsafe_allow_html=True,
    )


def render_footer() -> None:
    """Render the footer with the current year."""
    st.divider()
    st.markdown(
        f"<div style='text-align: center; color: #888; font-size: 0.8em;'>© {datetime.now().year} My Gallery</div>",
        unsafe_allow_html=True,
    )
