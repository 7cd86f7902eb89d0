"""
Unit tests for the gallery service.
"""

from unittest.mock import MagicMock

import pytest

from tagfolio.error_handling import AuthenticationError, StoreError, ValidationError
from tagfolio.models.photo import PLACEHOLDER_IMAGE_URL
from tagfolio.services.auth import DevelopmentAuthService
from tagfolio.services.gallery import ALL_TAGS, GalleryService
from tagfolio.services.photo_store import DuckDBPhotoStore
from tests.conftest import TestDataFactory


@pytest.fixture
def store():
    photo_store = DuckDBPhotoStore(":memory:")
    yield photo_store
    photo_store.close()


@pytest.fixture
def auth_service():
    return DevelopmentAuthService()


@pytest.fixture
def gallery(store, auth_service):
    return GalleryService(store, auth_service)


@pytest.fixture
def signed_in_gallery(gallery, auth_service):
    auth_service.sign_in("owner@example.com", "password")
    return gallery


class TestGalleryState:
    """Test cases for filtering and tag listing."""

    def setup_method(self):
        self.gallery = GalleryService(MagicMock(), MagicMock())
        self.gallery.photos = [
            TestDataFactory.create_photo("p1", tags=["travel", "sea"]),
            TestDataFactory.create_photo("p2", tags=["food"]),
            TestDataFactory.create_photo("p3", tags=[]),
            TestDataFactory.create_photo("p4", tags=["sea", "Sea"]),
        ]

    def test_initial_state(self):
        gallery = GalleryService(MagicMock(), MagicMock())

        assert gallery.photos == []
        assert gallery.active_tag == ALL_TAGS
        assert gallery.load_error is None

    def test_all_tag_shows_everything(self):
        assert [photo.id for photo in self.gallery.filtered_photos()] == ["p1", "p2", "p3", "p4"]

    def test_filter_by_tag(self):
        """Only entries carrying the exact tag are shown, in list order."""
        self.gallery.select_tag("sea")
        assert [photo.id for photo in self.gallery.filtered_photos()] == ["p1", "p4"]

    def test_filter_is_case_sensitive(self):
        self.gallery.select_tag("Sea")
        assert [photo.id for photo in self.gallery.filtered_photos()] == ["p4"]

    def test_filter_with_unknown_tag_is_empty(self):
        self.gallery.select_tag("missing")
        assert self.gallery.filtered_photos() == []

    def test_available_tags_first_seen_order(self):
        """ALL comes first, then distinct tags in order of first appearance."""
        assert self.gallery.available_tags() == [ALL_TAGS, "travel", "sea", "food", "Sea"]

    def test_available_tags_when_empty(self):
        self.gallery.photos = []
        assert self.gallery.available_tags() == [ALL_TAGS]

    def test_find_photo(self):
        assert self.gallery.find_photo("p2").tags == ["food"]
        assert self.gallery.find_photo("missing") is None


class TestLoadPhotos:
    """Test cases for loading from the store."""

    def test_load_photos(self, gallery, store):
        store.add_photo(["a"], "https://example.com/1", "data:1")

        photos = gallery.load_photos()

        assert len(photos) == 1
        assert gallery.photos == photos

    def test_load_photos_safely_on_failure(self):
        """A failing store leaves an empty list and an error message."""
        failing_store = MagicMock()
        failing_store.list_photos.side_effect = StoreError("down", user_message="저장소 오류")
        gallery = GalleryService(failing_store, MagicMock())

        assert gallery.load_photos_safely() == []
        assert gallery.load_error == "저장소 오류"

    def test_load_photos_clears_previous_error(self, gallery):
        gallery.load_error = "old"
        gallery.load_photos()
        assert gallery.load_error is None

    def test_load_photos_raises(self):
        failing_store = MagicMock()
        failing_store.list_photos.side_effect = StoreError("down")

        with pytest.raises(StoreError):
            GalleryService(failing_store, MagicMock()).load_photos()


class TestSavePhoto:
    """Test cases for adding and updating entries."""

    def test_add_requires_sign_in(self, gallery, store):
        with pytest.raises(AuthenticationError) as exc_info:
            gallery.save_photo("", "travel", "https://example.com")

        assert exc_info.value.user_message == "로그인 후에만 사진을 추가/수정할 수 있습니다."
        assert store.list_photos() == []

    @pytest.mark.parametrize("link", ["", "   "])
    def test_add_requires_link(self, signed_in_gallery, store, link):
        with pytest.raises(ValidationError) as exc_info:
            signed_in_gallery.save_photo("", "travel", link)

        assert exc_info.value.user_message == "링크는 필수입니다."
        assert store.list_photos() == []

    def test_add_photo(self, signed_in_gallery):
        """A new entry is stored and the list reloaded, newest first."""
        signed_in_gallery.save_photo("", "old", "https://example.com/old", "data:old")
        photo_id = signed_in_gallery.save_photo("", " travel, sea ,", " https://example.com/new ", "data:new")

        newest = signed_in_gallery.photos[0]
        assert newest.id == photo_id
        assert newest.tags == ["travel", "sea"]
        assert newest.link == "https://example.com/new"
        assert newest.image_data == "data:new"
        assert len(signed_in_gallery.photos) == 2

    def test_add_without_image_uses_placeholder(self, signed_in_gallery):
        signed_in_gallery.save_photo("", "", "https://example.com")

        assert signed_in_gallery.photos[0].image_data == PLACEHOLDER_IMAGE_URL
        assert signed_in_gallery.photos[0].tags == []

    def test_update_keeps_image_without_new_upload(self, signed_in_gallery):
        photo_id = signed_in_gallery.save_photo("", "a", "https://example.com/1", "data:original")

        signed_in_gallery.save_photo(photo_id, "b", "https://example.com/2")

        photo = signed_in_gallery.find_photo(photo_id)
        assert photo.tags == ["b"]
        assert photo.link == "https://example.com/2"
        assert photo.image_data == "data:original"

    def test_update_replaces_image(self, signed_in_gallery):
        photo_id = signed_in_gallery.save_photo("", "a", "https://example.com/1", "data:original")

        signed_in_gallery.save_photo(photo_id, "a", "https://example.com/1", "data:new")

        assert signed_in_gallery.find_photo(photo_id).image_data == "data:new"

    def test_update_missing_photo(self, signed_in_gallery):
        with pytest.raises(StoreError) as exc_info:
            signed_in_gallery.save_photo("missing", "a", "https://example.com")

        assert exc_info.value.code == "photo_not_found"

    def test_new_tag_appears_in_available_tags(self, signed_in_gallery):
        signed_in_gallery.save_photo("", "brand-new", "https://example.com")
        assert "brand-new" in signed_in_gallery.available_tags()


class TestDeletePhoto:
    """Test cases for deleting entries."""

    def test_delete_requires_sign_in(self, gallery, store):
        photo_id = store.add_photo(["a"], "https://example.com", "data:x")

        with pytest.raises(AuthenticationError) as exc_info:
            gallery.delete_photo(photo_id)

        assert exc_info.value.user_message == "로그인 후 삭제할 수 있습니다."
        assert store.get_photo(photo_id) is not None

    def test_delete_photo(self, signed_in_gallery):
        photo_id = signed_in_gallery.save_photo("", "a", "https://example.com")

        signed_in_gallery.delete_photo(photo_id)

        assert signed_in_gallery.find_photo(photo_id) is None
        assert signed_in_gallery.photos == []

    def test_active_tag_kept_after_its_last_entry_is_deleted(self, signed_in_gallery):
        """Deleting the last entry with the active tag leaves an empty filtered view."""
        photo_id = signed_in_gallery.save_photo("", "only", "https://example.com")
        signed_in_gallery.select_tag("only")

        signed_in_gallery.delete_photo(photo_id)

        assert signed_in_gallery.active_tag == "only"
        assert signed_in_gallery.filtered_photos() == []
        assert signed_in_gallery.available_tags() == [ALL_TAGS]
