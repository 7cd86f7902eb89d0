"""Public gallery page: profile card, tag filter and photo grid."""

import streamlit as st

from ..components.gallery import render_gallery_grid, render_tag_filter
from ..components.profile import render_profile_card
from ..handlers.gallery import ensure_photos_loaded


def render_gallery_page() -> None:
    """Render the part of the page every visitor sees."""
    gallery = ensure_photos_loaded()

    render_profile_card()

    if gallery.load_error:
        st.error(gallery.load_error)

    render_tag_filter(gallery)
    render_gallery_grid(gallery.filtered_photos())
