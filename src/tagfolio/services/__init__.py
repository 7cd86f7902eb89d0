"""
Services module for tagfolio application.

This module contains all service classes that handle business logic:
- AuthService: Owner sign-in (Firebase Authentication or development credentials)
- PhotoStore: Gallery entry persistence (Firestore or DuckDB)
- GalleryService: In-memory gallery state, tag filtering and owner CRUD
- ImageProcessor: Upload validation and data URL encoding
- LocalPreferences: Profile card and theme persistence
"""

from .auth import AuthService, DevelopmentAuthService, FirebaseAuthService, UserInfo, get_auth_service
from .gallery import ALL_TAGS, GalleryService
from .image_processor import ImageProcessor, get_image_processor
from .photo_store import DuckDBPhotoStore, FirestorePhotoStore, PhotoStore, get_photo_store
from .preferences import LocalPreferences, get_preferences

__all__ = [
    "AuthService",
    "DevelopmentAuthService",
    "FirebaseAuthService",
    "UserInfo",
    "get_auth_service",
    "ALL_TAGS",
    "GalleryService",
    "ImageProcessor",
    "get_image_processor",
    "PhotoStore",
    "FirestorePhotoStore",
    "DuckDBPhotoStore",
    "get_photo_store",
    "LocalPreferences",
    "get_preferences",
]
