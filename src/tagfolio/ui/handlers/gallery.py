"""Gallery handlers for tagfolio application."""

import streamlit as st
import structlog

from tagfolio.error_handling import GalleryError
from tagfolio.services.gallery import GalleryService
from tagfolio.services.photo_store import get_photo_store

from .auth import get_session_auth_service

logger = structlog.get_logger(__name__)


def get_gallery_service() -> GalleryService:
    """Get the gallery state for the current browser session."""
    if st.session_state.get("gallery") is None:
        st.session_state.gallery = GalleryService(get_photo_store(), get_session_auth_service())
        st.session_state.photos_loaded = False
    return st.session_state.gallery


def ensure_photos_loaded() -> GalleryService:
    """Load entries once per session; later loads happen after each mutation."""
    gallery = get_gallery_service()
    if not st.session_state.get("photos_loaded"):
        gallery.load_photos_safely()
        st.session_state.photos_loaded = True
    return gallery


def on_tag_selected(tag: str) -> None:
    """Tag filter button callback."""
    get_gallery_service().select_tag(tag)


def on_refresh() -> None:
    """Reload entries from the store on request."""
    gallery = get_gallery_service()
    try:
        gallery.load_photos()
    except GalleryError as e:
        set_flash("error", e.user_message)
        return
    set_flash("success", f"사진 {len(gallery.photos)}개를 불러왔습니다.")


def set_flash(level: str, message: str) -> None:
    """Queue a one-shot message for the next render."""
    st.session_state.flash = (level, message)


def pop_flash() -> tuple[str, str] | None:
    flash = st.session_state.get("flash")
    st.session_state.flash = None
    return flash
