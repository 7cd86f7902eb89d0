"""
Photo entry model for tagfolio application.

This module contains the PhotoEntry dataclass that represents one gallery
entry as stored in the photo store, plus the tag parsing used by the form.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

PLACEHOLDER_IMAGE_URL = (
    "https://images.pexels.com/photos/414612/pexels-photo-414612.jpeg?auto=compress&cs=tinysrgb&w=800"
)

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def parse_tags(raw: str | None) -> list[str]:
    """
    Parse comma-separated tag input.

    Args:
        raw: Text such as "travel, sea ,, food"

    Returns:
        Trimmed, non-empty tags in input order (duplicates kept)
    """
    if not raw or not raw.strip():
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def _to_datetime(value: Any) -> datetime:
    """Normalize a stored createdAt value to an aware datetime."""
    if value is None:
        return EPOCH
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return EPOCH
    if not isinstance(value, datetime):
        return EPOCH
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


@dataclass
class PhotoEntry:
    """
    A tagged photo in the gallery.

    ``image_data`` is either a ``data:`` URL produced at upload time or a plain
    http(s) URL such as the placeholder image.
    """

    id: str
    tags: list[str] = field(default_factory=list)
    link: str = ""
    image_data: str = PLACEHOLDER_IMAGE_URL
    created_at: datetime = EPOCH

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any] | None) -> "PhotoEntry":
        """
        Create a PhotoEntry from a stored document.

        Missing fields fall back to empty tags, an empty link, the placeholder
        image and the Unix epoch.

        Args:
            doc_id: Document identifier assigned by the store
            data: Document fields (camelCase, as stored)

        Returns:
            PhotoEntry instance
        """
        data = data or {}
        return cls(
            id=doc_id,
            tags=list(data.get("tags") or []),
            link=data.get("link") or "",
            image_data=data.get("imageData") or PLACEHOLDER_IMAGE_URL,
            created_at=_to_datetime(data.get("createdAt")),
        )

    def to_document(self) -> dict[str, Any]:
        """
        Convert the entry to stored document fields.

        Returns:
            Dictionary with ``tags``, ``link``, ``imageData`` and ``createdAt``
        """
        return {
            "tags": list(self.tags),
            "link": self.link,
            "imageData": self.image_data,
            "createdAt": self.created_at,
        }

    def has_tag(self, tag: str) -> bool:
        """Exact, case-sensitive tag membership."""
        return tag in self.tags

    def alt_text(self) -> str:
        """Alt text for the gallery image."""
        return ", ".join(self.tags) or "photo"

    def display_title(self) -> str:
        """Title line in the admin photo list."""
        return self.link or "(링크 없음)"

    def tag_labels(self) -> list[str]:
        return [f"#{tag}" for tag in self.tags]

    def tags_as_input(self) -> str:
        """Tags joined back into the form's comma-separated text."""
        return ", ".join(self.tags)
