"""
Models module for tagfolio application.

This module contains data models and schemas:
- PhotoEntry: A tagged gallery photo
- Profile: The owner's profile card
- DatabaseManager: DuckDB connection and schema management for the local photo store
"""

from .database import DatabaseManager
from .photo import PLACEHOLDER_IMAGE_URL, PhotoEntry, parse_tags
from .profile import Profile
from .schema import get_schema_statements

__all__ = [
    "PhotoEntry",
    "PLACEHOLDER_IMAGE_URL",
    "parse_tags",
    "Profile",
    "DatabaseManager",
    "get_schema_statements",
]
