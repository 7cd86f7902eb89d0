"""Gallery state and owner CRUD flow for tagfolio application.

``GalleryService`` holds the entries last loaded from the photo store and the
active tag filter. Every mutation goes to the store first and then reloads
the whole list, so the in-memory list always mirrors the store's ordering.
"""

from ..error_handling import StoreError, ValidationError
from ..logging_config import get_logger, log_user_action
from ..models.photo import PLACEHOLDER_IMAGE_URL, PhotoEntry, parse_tags
from .auth import AuthService
from .photo_store import PhotoStore

logger = get_logger(__name__)

ALL_TAGS = "ALL"


class GalleryService:
    """In-memory gallery state over a photo store."""

    def __init__(self, store: PhotoStore, auth_service: AuthService) -> None:
        self.store = store
        self.auth_service = auth_service
        self.photos: list[PhotoEntry] = []
        self.active_tag: str = ALL_TAGS
        self.load_error: str | None = None

    def load_photos(self) -> list[PhotoEntry]:
        """
        Replace the in-memory list with the store's entries.

        Raises:
            StoreError: If the store cannot be read
        """
        self.photos = self.store.list_photos()
        self.load_error = None
        logger.debug("photos_loaded", count=len(self.photos))
        return self.photos

    def load_photos_safely(self) -> list[PhotoEntry]:
        """
        Load entries for page start-up.

        A failing store is logged and leaves the list empty so the rest of
        the page still renders.
        """
        try:
            return self.load_photos()
        except StoreError as e:
            self.photos = []
            self.load_error = e.user_message
            logger.error("initial_photo_load_failed", code=e.code)
            return self.photos

    def filtered_photos(self) -> list[PhotoEntry]:
        """Entries matching the active tag, in store order."""
        if self.active_tag == ALL_TAGS:
            return list(self.photos)
        return [photo for photo in self.photos if photo.has_tag(self.active_tag)]

    def available_tags(self) -> list[str]:
        """``ALL`` followed by every distinct tag, in first-seen order."""
        seen: dict[str, None] = {}
        for photo in self.photos:
            for tag in photo.tags:
                seen.setdefault(tag, None)
        return [ALL_TAGS, *seen]

    def select_tag(self, tag: str) -> None:
        self.active_tag = tag
        logger.debug("tag_selected", tag=tag)

    def find_photo(self, photo_id: str) -> PhotoEntry | None:
        return next((photo for photo in self.photos if photo.id == photo_id), None)

    def save_photo(
        self,
        photo_id: str | None,
        tags_raw: str,
        link: str,
        image_data: str | None = None,
        reload: bool = True,
    ) -> str:
        """
        Add a new entry, or update the entry ``photo_id``.

        Args:
            photo_id: Existing entry id; empty means "add"
            tags_raw: Comma-separated tag input
            link: Destination link (required)
            image_data: Newly uploaded image as data URL, if any
            reload: Re-read the list from the store afterwards

        Returns:
            str: Id of the saved entry

        Raises:
            AuthenticationError: If nobody is signed in
            ValidationError: If the link is empty
            StoreError: If the store write fails
        """
        user = self.auth_service.ensure_authenticated(
            user_message="로그인 후에만 사진을 추가/수정할 수 있습니다."
        )

        link = (link or "").strip()
        tags = parse_tags(tags_raw)
        if not link:
            raise ValidationError("Link is required", code="link_required", user_message="링크는 필수입니다.")

        if photo_id:
            self.store.update_photo(photo_id, tags, link, image_data or None)
            saved_id = photo_id
            log_user_action(user.user_id, "photo_updated", photo_id=photo_id, image_replaced=bool(image_data))
        else:
            saved_id = self.store.add_photo(tags, link, image_data or PLACEHOLDER_IMAGE_URL)
            log_user_action(user.user_id, "photo_added", photo_id=saved_id, has_image=bool(image_data))

        if reload:
            self.load_photos()
        return saved_id

    def delete_photo(self, photo_id: str) -> None:
        """
        Delete an entry and reload.

        Raises:
            AuthenticationError: If nobody is signed in
            StoreError: If the store write fails
        """
        user = self.auth_service.ensure_authenticated(user_message="로그인 후 삭제할 수 있습니다.")
        self.store.delete_photo(photo_id)
        log_user_action(user.user_id, "photo_deleted", photo_id=photo_id)
        self.load_photos()
