"""
Database schema definitions for the local DuckDB photo store.

Column names mirror the Firestore document fields so both stores decode
through PhotoEntry.from_document.
"""

from typing import List

# Insertion order, used to break createdAt ties
PHOTOS_POSITION_SEQUENCE = "CREATE SEQUENCE IF NOT EXISTS photos_position_seq;"

PHOTOS_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS photos (
    id TEXT PRIMARY KEY,
    tags VARCHAR[] NOT NULL,
    link TEXT NOT NULL,
    image_data TEXT NOT NULL,
    created_at TIMESTAMP NOT NULL,
    position BIGINT NOT NULL DEFAULT nextval('photos_position_seq')
);
"""

PHOTOS_TABLE_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_photos_created_at ON photos(created_at);",
]

REQUIRED_COLUMNS = {"id", "tags", "link", "image_data", "created_at", "position"}

ALL_SCHEMA_STATEMENTS = [PHOTOS_POSITION_SEQUENCE, PHOTOS_TABLE_SCHEMA] + PHOTOS_TABLE_INDEXES


def get_schema_statements() -> List[str]:
    """
    Get all database schema creation statements.

    Returns:
        List of SQL statements to create the sequence, table and indexes
    """
    return ALL_SCHEMA_STATEMENTS
