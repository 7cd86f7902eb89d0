"""Owner-only components: the photo form and the managed photo list."""

import streamlit as st
import structlog

from tagfolio.models.photo import PhotoEntry
from tagfolio.services.gallery import GalleryService
from tagfolio.services.image_processor import HEIF_AVAILABLE

from ..handlers.photo_form import (
    cancel_delete,
    confirm_delete,
    fill_form_for_edit,
    handle_submit,
    request_delete,
    reset_form,
    uploader_key,
)

logger = structlog.get_logger(__name__)

UPLOAD_TYPES = ["jpg", "jpeg", "png", "gif", "webp"]


def get_upload_types() -> list[str]:
    if HEIF_AVAILABLE:
        return [*UPLOAD_TYPES, "heic", "heif"]
    return list(UPLOAD_TYPES)


def render_photo_form() -> None:
    """Render the add/edit form. Submitting an edit keeps the stored image unless a new one is chosen."""
    editing = bool(st.session_state.get("form_photo_id"))

    st.markdown("#### " + ("사진 수정" if editing else "사진 추가"))
    if editing:
        st.caption("수정 중입니다. 새 이미지를 선택하지 않으면 기존 이미지가 유지됩니다.")

    st.text_input("태그 (쉼표로 구분)", key="form_tags", placeholder="여행, 바다, 음식")
    st.text_input("링크", key="form_link", placeholder="https://...")
    st.file_uploader("이미지", type=get_upload_types(), key=uploader_key())

    col1, col2 = st.columns(2)
    with col1:
        st.button(
            "수정 저장" if editing else "추가",
            key="form_submit",
            type="primary",
            on_click=handle_submit,
            use_container_width=True,
        )
    with col2:
        st.button("초기화", key="form_reset", on_click=reset_form, use_container_width=True)


def render_photo_row(photo: PhotoEntry) -> None:
    """One entry in the managed list: thumbnail, title, tags and actions."""
    col1, col2, col3 = st.columns([1, 4, 2])

    with col1:
        st.image(photo.image_data, use_container_width=True)

    with col2:
        st.markdown(f"**{photo.display_title()}**")
        if photo.tags:
            st.caption(" ".join(photo.tag_labels()))

    with col3:
        if st.session_state.get("confirm_delete_id") == photo.id:
            st.warning("삭제할까요?")
            sub1, sub2 = st.columns(2)
            with sub1:
                st.button("삭제", key=f"confirm_{photo.id}", type="primary", on_click=confirm_delete)
            with sub2:
                st.button("취소", key=f"cancel_{photo.id}", on_click=cancel_delete)
        else:
            sub1, sub2 = st.columns(2)
            with sub1:
                st.button("수정", key=f"edit_{photo.id}", on_click=fill_form_for_edit, args=(photo.id,))
            with sub2:
                st.button("삭제", key=f"delete_{photo.id}", on_click=request_delete, args=(photo.id,))


def render_photo_list(gallery: GalleryService) -> None:
    """Render every stored entry, newest first."""
    st.markdown(f"#### 등록된 사진 ({len(gallery.photos)})")

    if not gallery.photos:
        st.info("아직 등록된 사진이 없습니다.")
        return

    for photo in gallery.photos:
        with st.container():
            render_photo_row(photo)
            st.divider()
