"""Upload/edit form handlers for tagfolio application.

The form widgets are keyed in session state:

- ``form_photo_id``: id of the entry being edited, empty when adding
- ``form_tags`` / ``form_link``: text inputs
- ``form_uploader_nonce``: suffix of the file uploader key; bumping it
  empties the uploader, which is the only way to clear one
"""

from typing import Any

import streamlit as st
import structlog

from tagfolio.error_handling import GalleryError, handle_error
from tagfolio.services.image_processor import get_image_processor

from .gallery import get_gallery_service, set_flash

logger = structlog.get_logger(__name__)


def initialize_form_state() -> None:
    """Initialize form session state variables."""
    defaults: dict[str, Any] = {
        "form_photo_id": "",
        "form_tags": "",
        "form_link": "",
        "form_uploader_nonce": 0,
        "confirm_delete_id": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def uploader_key() -> str:
    return f"image_input_{st.session_state.get('form_uploader_nonce', 0)}"


def _clear_uploader() -> None:
    st.session_state.form_uploader_nonce = st.session_state.get("form_uploader_nonce", 0) + 1


def reset_form() -> None:
    """Clear every field, the edited id and any chosen image."""
    st.session_state.form_photo_id = ""
    st.session_state.form_tags = ""
    st.session_state.form_link = ""
    _clear_uploader()


def fill_form_for_edit(photo_id: str) -> None:
    """Load an entry into the form; a previously chosen image is discarded."""
    photo = get_gallery_service().find_photo(photo_id)
    if photo is None:
        logger.warning("edit_target_missing", photo_id=photo_id)
        return

    st.session_state.form_photo_id = photo.id
    st.session_state.form_tags = photo.tags_as_input()
    st.session_state.form_link = photo.link
    _clear_uploader()
    logger.debug("form_filled_for_edit", photo_id=photo_id)


def _read_pending_image() -> str | None:
    """Encode the file currently in the uploader, if any."""
    uploaded_file = st.session_state.get(uploader_key())
    if uploaded_file is None:
        return None
    return get_image_processor().to_data_url(uploaded_file.getvalue(), uploaded_file.name)


def handle_submit() -> bool:
    """
    Save the form as a new entry or as an update of the edited entry.

    Returns:
        bool: True if saved; on failure the reason is queued as a flash message
    """
    photo_id = st.session_state.get("form_photo_id", "")
    try:
        image_data = _read_pending_image()
        get_gallery_service().save_photo(
            photo_id,
            st.session_state.get("form_tags", ""),
            st.session_state.get("form_link", ""),
            image_data,
        )
    except GalleryError as e:
        set_flash("error", e.user_message)
        return False
    except Exception as e:
        set_flash("error", handle_error(e, {"operation": "save_photo", "photo_id": photo_id}).user_message)
        return False

    reset_form()
    set_flash("success", "사진을 수정했습니다." if photo_id else "사진을 추가했습니다.")
    return True


def request_delete(photo_id: str) -> None:
    """First click on delete: ask for confirmation."""
    st.session_state.confirm_delete_id = photo_id


def cancel_delete() -> None:
    st.session_state.confirm_delete_id = None


def confirm_delete() -> bool:
    """
    Delete the entry awaiting confirmation.

    Returns:
        bool: True if deleted
    """
    photo_id = st.session_state.get("confirm_delete_id")
    st.session_state.confirm_delete_id = None
    if not photo_id:
        return False

    try:
        get_gallery_service().delete_photo(photo_id)
    except GalleryError as e:
        set_flash("error", e.user_message)
        return False
    except Exception as e:
        set_flash("error", handle_error(e, {"operation": "delete_photo", "photo_id": photo_id}).user_message)
        return False

    if st.session_state.get("form_photo_id") == photo_id:
        reset_form()
    set_flash("success", "사진을 삭제했습니다.")
    return True
