"""
Main Streamlit application for tagfolio.

This is the entry point for the tagged photo gallery.
"""

import streamlit as st

from tagfolio.config import get_debug_mode
from tagfolio.logging_config import configure_structured_logging, get_logger
from tagfolio.ui.components.common import apply_theme, render_footer, render_header
from tagfolio.ui.components.error_display import error_context, get_error_display_manager
from tagfolio.ui.handlers.auth import initialize_auth_state, sync_auth_state
from tagfolio.ui.handlers.gallery import pop_flash
from tagfolio.ui.handlers.photo_form import initialize_form_state
from tagfolio.ui.pages.admin import render_admin_page
from tagfolio.ui.pages.gallery import render_gallery_page

# Configure structured logging
configure_structured_logging()
logger = get_logger(__name__)
error_display = get_error_display_manager()


def initialize_session_state() -> None:
    """Initialize session state variables."""
    initialize_auth_state()
    initialize_form_state()

    if "photos_loaded" not in st.session_state:
        st.session_state.photos_loaded = False

    if "flash" not in st.session_state:
        st.session_state.flash = None


def render_main_content() -> None:
    """Render the gallery and, for the owner, the admin section."""
    flash = pop_flash()
    if flash:
        error_display.display_flash(*flash)

    with error_context("gallery_page"):
        render_gallery_page()

    with error_context("admin_page"):
        render_admin_page()


def main() -> None:
    """Main application entry point."""
    logger.info("application_starting", page="main")

    st.set_page_config(
        page_title="My Gallery",
        page_icon="📷",
        layout="wide",
        menu_items={
            "Get Help": None,
            "Report a bug": None,
            "About": "tagfolio - tagged photo gallery",
        },
    )

    try:
        initialize_session_state()

        with error_context("auth_sync"):
            sync_auth_state()

        theme = apply_theme()
        render_header(theme)

        with st.container():
            render_main_content()

        render_footer()

        if get_debug_mode():
            with st.expander("Debug Info"):
                st.write("Session State:", dict(st.session_state))

    except Exception as e:
        logger.error("critical_application_error", error=str(e))
        error_display.display_exception(e, context={"operation": "main_application"}, show_details=True)

        if st.button("🔄 다시 시도", type="primary"):
            st.rerun()


if __name__ == "__main__":
    main()
