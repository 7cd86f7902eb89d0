"""Owner-only admin section."""

import streamlit as st

from ..components.admin import render_photo_form, render_photo_list
from ..handlers.auth import is_signed_in
from ..handlers.gallery import ensure_photos_loaded, on_refresh


def render_admin_page() -> None:
    """Render the upload/edit form and the managed list; nothing when signed out."""
    if not is_signed_in():
        return

    gallery = ensure_photos_loaded()

    st.divider()
    col1, col2 = st.columns([4, 1])
    with col1:
        st.markdown("### 🛠️ 사진 관리")
    with col2:
        st.button("🔄 새로고침", key="admin_refresh", on_click=on_refresh, use_container_width=True)

    form_col, list_col = st.columns([2, 3])
    with form_col:
        render_photo_form()
    with list_col:
        render_photo_list(gallery)
