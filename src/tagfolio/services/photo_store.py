"""Photo store: persistence of gallery entries.

Production keeps entries as documents in a Google Cloud Firestore collection.
Development and tests use a DuckDB file (or an in-memory database) with the
same semantics: newest first, creation time assigned by the store.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any

import duckdb
from google.api_core import exceptions as google_exceptions
from google.cloud import firestore  # type: ignore[attr-defined]

from ..config import get_duckdb_path, get_photo_collection, get_photo_store_backend, get_project_id
from ..error_handling import StoreError
from ..logging_config import get_logger, log_performance
from ..models.database import DatabaseManager
from ..models.photo import PhotoEntry

logger = get_logger(__name__)


def _not_found(photo_id: str) -> StoreError:
    return StoreError(
        f"Photo not found: {photo_id}",
        code="photo_not_found",
        user_message="사진을 찾을 수 없습니다. 목록을 새로고침해 주세요.",
        details={"photo_id": photo_id},
        retry_suggested=False,
    )


class PhotoStore(ABC):
    """Interface to the document store holding gallery entries."""

    backend_name = "abstract"

    @abstractmethod
    def list_photos(self) -> list[PhotoEntry]:
        """Return every entry, newest ``createdAt`` first."""

    @abstractmethod
    def get_photo(self, photo_id: str) -> PhotoEntry | None:
        """Return one entry, or None when it does not exist."""

    @abstractmethod
    def add_photo(self, tags: list[str], link: str, image_data: str) -> str:
        """Create an entry stamped with the store's current time and return its id."""

    @abstractmethod
    def update_photo(self, photo_id: str, tags: list[str], link: str, image_data: str | None = None) -> None:
        """
        Replace tags and link of an entry.

        The stored image is replaced only when ``image_data`` is given.

        Raises:
            StoreError: If the entry does not exist (code ``photo_not_found``)
        """

    @abstractmethod
    def delete_photo(self, photo_id: str) -> None:
        """Delete an entry; deleting a missing entry is not an error."""

    def check_health(self) -> dict[str, Any]:
        """Probe the backend for health checks."""
        try:
            count = len(self.list_photos())
            return {"status": "healthy", "message": f"{self.backend_name} reachable", "photos": count}
        except StoreError as e:
            return {"status": "unhealthy", "message": f"{self.backend_name} unavailable: {e}"}


class FirestorePhotoStore(PhotoStore):
    """Photo store backed by a Cloud Firestore collection."""

    backend_name = "firestore"

    def __init__(
        self,
        project_id: str | None = None,
        collection: str | None = None,
        client: Any = None,
    ) -> None:
        """
        Initialize the Firestore photo store.

        Args:
            project_id: GCP project ID (defaults to GOOGLE_CLOUD_PROJECT)
            collection: Collection name (defaults to PHOTO_COLLECTION, "photos")
            client: Pre-built firestore.Client (mainly for tests)
        """
        self.collection_name = collection or get_photo_collection()

        try:
            self.project_id = project_id or (None if client is not None else get_project_id())
            self.client = client or firestore.Client(project=self.project_id)
            self.collection = self.client.collection(self.collection_name)
        except ValueError as e:
            raise StoreError(
                f"Firestore configuration missing: {e}", code="store_not_configured", original_exception=e
            ) from e
        except Exception as e:
            raise StoreError(f"Failed to initialize Firestore client: {e}", original_exception=e) from e

        logger.info("firestore_store_initialized", project_id=self.project_id, collection=self.collection_name)

    def list_photos(self) -> list[PhotoEntry]:
        start_time = datetime.now()
        try:
            query = self.collection.order_by("createdAt", direction=firestore.Query.DESCENDING)
            photos = [PhotoEntry.from_document(doc.id, doc.to_dict()) for doc in query.stream()]
        except google_exceptions.GoogleAPIError as e:
            raise StoreError(
                f"Failed to load photos from Firestore: {e}",
                code="store_read_failed",
                details={"collection": self.collection_name},
                original_exception=e,
            ) from e

        log_performance(
            "list_photos", (datetime.now() - start_time).total_seconds(), backend="firestore", count=len(photos)
        )
        return photos

    def get_photo(self, photo_id: str) -> PhotoEntry | None:
        try:
            snapshot = self.collection.document(photo_id).get()
        except google_exceptions.GoogleAPIError as e:
            raise StoreError(
                f"Failed to read photo {photo_id}: {e}", code="store_read_failed", original_exception=e
            ) from e

        if not snapshot.exists:
            return None
        return PhotoEntry.from_document(snapshot.id, snapshot.to_dict())

    def add_photo(self, tags: list[str], link: str, image_data: str) -> str:
        try:
            _, doc_ref = self.collection.add(
                {
                    "tags": list(tags),
                    "link": link,
                    "imageData": image_data,
                    "createdAt": firestore.SERVER_TIMESTAMP,
                }
            )
        except google_exceptions.GoogleAPIError as e:
            raise StoreError(
                f"Failed to add photo: {e}",
                code="store_write_failed",
                details={"link": link},
                original_exception=e,
            ) from e

        logger.info("photo_added", photo_id=doc_ref.id, backend="firestore", tags=tags)
        return doc_ref.id

    def update_photo(self, photo_id: str, tags: list[str], link: str, image_data: str | None = None) -> None:
        update_data: dict[str, Any] = {"tags": list(tags), "link": link}
        if image_data:
            update_data["imageData"] = image_data

        try:
            self.collection.document(photo_id).update(update_data)
        except google_exceptions.NotFound as e:
            raise _not_found(photo_id) from e
        except google_exceptions.GoogleAPIError as e:
            raise StoreError(
                f"Failed to update photo {photo_id}: {e}",
                code="store_write_failed",
                details={"photo_id": photo_id},
                original_exception=e,
            ) from e

        logger.info("photo_updated", photo_id=photo_id, backend="firestore", image_replaced="imageData" in update_data)

    def delete_photo(self, photo_id: str) -> None:
        try:
            self.collection.document(photo_id).delete()
        except google_exceptions.GoogleAPIError as e:
            raise StoreError(
                f"Failed to delete photo {photo_id}: {e}",
                code="store_write_failed",
                details={"photo_id": photo_id},
                original_exception=e,
            ) from e

        logger.info("photo_deleted", photo_id=photo_id, backend="firestore")


class DuckDBPhotoStore(PhotoStore):
    """Photo store backed by a local DuckDB database."""

    backend_name = "duckdb"

    _SELECT = "SELECT id, tags, link, image_data, created_at FROM photos"

    def __init__(self, db_path: str | None = None) -> None:
        self.db_path = db_path or get_duckdb_path()
        self.db_manager = DatabaseManager(self.db_path)

        try:
            self.db_manager.initialize_schema()
        except duckdb.Error as e:
            raise StoreError(
                f"Failed to initialize DuckDB photo store: {e}",
                code="store_not_configured",
                details={"db_path": self.db_path},
                original_exception=e,
            ) from e

        logger.info("duckdb_store_initialized", db_path=self.db_path)

    @staticmethod
    def _row_to_entry(row: tuple) -> PhotoEntry:
        return PhotoEntry.from_document(
            row[0],
            {"tags": row[1], "link": row[2], "imageData": row[3], "createdAt": row[4]},
        )

    def _execute(self, operation: str, query: str, parameters: tuple | list | None = None) -> list[tuple]:
        try:
            return self.db_manager.execute_query(query, parameters)
        except duckdb.Error as e:
            raise StoreError(
                f"DuckDB {operation} failed: {e}",
                code="store_read_failed" if operation == "read" else "store_write_failed",
                details={"db_path": self.db_path},
                original_exception=e,
            ) from e

    def list_photos(self) -> list[PhotoEntry]:
        rows = self._execute("read", f"{self._SELECT} ORDER BY created_at DESC, position DESC")
        return [self._row_to_entry(row) for row in rows]

    def get_photo(self, photo_id: str) -> PhotoEntry | None:
        rows = self._execute("read", f"{self._SELECT} WHERE id = ?", (photo_id,))
        return self._row_to_entry(rows[0]) if rows else None

    def add_photo(self, tags: list[str], link: str, image_data: str) -> str:
        photo_id = uuid.uuid4().hex
        # Naive UTC; PhotoEntry attaches the timezone on read
        created_at = datetime.now(UTC).replace(tzinfo=None)
        self._execute(
            "write",
            "INSERT INTO photos (id, tags, link, image_data, created_at) VALUES (?, CAST(? AS VARCHAR[]), ?, ?, ?)",
            (photo_id, list(tags), link, image_data, created_at),
        )
        logger.info("photo_added", photo_id=photo_id, backend="duckdb", tags=tags)
        return photo_id

    def update_photo(self, photo_id: str, tags: list[str], link: str, image_data: str | None = None) -> None:
        if not self._execute("read", "SELECT id FROM photos WHERE id = ?", (photo_id,)):
            raise _not_found(photo_id)

        if image_data:
            self._execute(
                "write",
                "UPDATE photos SET tags = CAST(? AS VARCHAR[]), link = ?, image_data = ? WHERE id = ?",
                (list(tags), link, image_data, photo_id),
            )
        else:
            self._execute(
                "write",
                "UPDATE photos SET tags = CAST(? AS VARCHAR[]), link = ? WHERE id = ?",
                (list(tags), link, photo_id),
            )

        logger.info("photo_updated", photo_id=photo_id, backend="duckdb", image_replaced=bool(image_data))

    def delete_photo(self, photo_id: str) -> None:
        self._execute("write", "DELETE FROM photos WHERE id = ?", (photo_id,))
        logger.info("photo_deleted", photo_id=photo_id, backend="duckdb")

    def close(self) -> None:
        self.db_manager.close()


def create_photo_store(backend: str | None = None) -> PhotoStore:
    """
    Create the photo store for the configured backend.

    Raises:
        StoreError: If the backend name is unknown or the backend cannot start
    """
    backend = (backend or get_photo_store_backend()).lower()
    if backend == "firestore":
        return FirestorePhotoStore()
    if backend == "duckdb":
        return DuckDBPhotoStore()

    raise StoreError(
        f"Unknown photo store backend: {backend}",
        code="store_not_configured",
        details={"backend": backend},
        recoverable=False,
        retry_suggested=False,
    )


_photo_store: PhotoStore | None = None


def get_photo_store() -> PhotoStore:
    """Get the global photo store instance."""
    global _photo_store
    if _photo_store is None:
        _photo_store = create_photo_store()
    return _photo_store


def reset_photo_store() -> None:
    """Drop the global instance so the next call re-reads configuration."""
    global _photo_store
    _photo_store = None
