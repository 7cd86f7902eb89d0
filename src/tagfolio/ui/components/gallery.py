"""Gallery components for tagfolio application."""

import html

import streamlit as st
import structlog

from tagfolio.models.photo import PhotoEntry
from tagfolio.services.gallery import ALL_TAGS, GalleryService

from ..handlers.gallery import on_tag_selected
from .common import render_empty_state, safe_href

logger = structlog.get_logger(__name__)

COLS_PER_ROW = 3


def tag_button_label(tag: str) -> str:
    """Button text for a tag filter: "전체" for ALL, "#tag" otherwise."""
    return "전체" if tag == ALL_TAGS else f"#{tag}"


def render_tag_filter(gallery: GalleryService) -> None:
    """
    Render one button per available tag; the active one is highlighted.

    Args:
        gallery: Session gallery state
    """
    tags = gallery.available_tags()
    cols = st.columns(min(len(tags), 6))

    for index, tag in enumerate(tags):
        with cols[index % len(cols)]:
            st.button(
                tag_button_label(tag),
                key=f"tag_filter_{index}",
                type="primary" if tag == gallery.active_tag else "secondary",
                on_click=on_tag_selected,
                args=(tag,),
                use_container_width=True,
            )


def build_card_html(photo: PhotoEntry) -> str:
    """
    Build the HTML for one gallery card.

    The card links to the entry's destination in a new tab when the link is
    a web address; tag pills are only emitted for entries that have tags.
    """
    image = (
        f'<div class="gallery-image"><img src="{html.escape(photo.image_data, quote=True)}" '
        f'alt="{html.escape(photo.alt_text(), quote=True)}" loading="lazy"/></div>'
    )

    pills = ""
    if photo.tags:
        pills = "".join(f'<span class="tag-pill">{html.escape(label)}</span>' for label in photo.tag_labels())
        pills = f'<div class="tag-list">{pills}</div>'

    href = safe_href(photo.link)
    if href:
        body = f'<a href="{href}" target="_blank" rel="noopener noreferrer">{image}</a>'
    else:
        body = image

    return f'<div class="gallery-card">{body}{pills}</div>'


def render_gallery_grid(photos: list[PhotoEntry]) -> None:
    """
    Render entries in a grid layout.

    Args:
        photos: Entries to show, already filtered and ordered
    """
    if not photos:
        render_empty_state("표시할 사진이 없습니다", "다른 태그를 선택하거나 사진을 추가해 보세요.", "🖼️")
        return

    for i in range(0, len(photos), COLS_PER_ROW):
        cols = st.columns(COLS_PER_ROW)

        for j, col in enumerate(cols):
            photo_index = i + j
            with col:
                if photo_index < len(photos):
                    st.markdown(build_card_html(photos[photo_index]), unsafe_allow_html=True)
                else:
                    st.empty()

    logger.debug("gallery_rendered", count=len(photos))
