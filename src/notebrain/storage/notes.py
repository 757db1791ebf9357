"""Note repository for MongoDB storage.

Stores notes with their entities embedded in one document.
"""

import logging
import re
import uuid
from datetime import UTC, datetime
from typing import Any

from pymongo import DESCENDING
from pymongo.collection import Collection

from ..notes.models import Note
from .client import retry_on_connection_failure

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 50


class NoteRepository:
    """Repository for note storage operations."""

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        """Initialize repository with MongoDB collection.

        Args:
            collection: MongoDB collection for notes.
        """
        self._collection = collection
        self._ensure_indexes()

    def _ensure_indexes(self) -> None:
        """Create indexes for efficient queries."""
        self._collection.create_index([("timestamp", DESCENDING)])
        self._collection.create_index([("project_id", 1), ("timestamp", DESCENDING)])
        self._collection.create_index([("entities.people", 1)])

    @retry_on_connection_failure()
    def save(self, note: Note) -> str:
        """Save a note and return its ID.

        Args:
            note: The note to save.

        Returns:
            The note's document ID, generated on first save.
        """
        if note.id is None:
            note.id = str(uuid.uuid4())
        doc = note.to_dict()
        doc["created_at"] = datetime.now(UTC)
        # Keyed on the note's own id so a retried save cannot duplicate it
        self._collection.replace_one({"_id": note.id}, doc, upsert=True)
        return note.id

    @retry_on_connection_failure()
    def get_by_id(self, note_id: str) -> Note | None:
        """Retrieve a note by ID.

        Args:
            note_id: The note ID.

        Returns:
            The note or None if not found.
        """
        doc = self._collection.find_one({"_id": note_id})
        if doc is None:
            return None
        return Note.from_dict(doc)

    @retry_on_connection_failure()
    def get_all(self) -> list[Note]:
        """Get every note, most recent first."""
        cursor = self._collection.find().sort("timestamp", DESCENDING)
        return [Note.from_dict(doc) for doc in cursor]

    @retry_on_connection_failure()
    def get_by_project(self, project_id: str) -> list[Note]:
        """Get the notes assigned to a project, most recent first."""
        cursor = self._collection.find({"project_id": project_id}).sort("timestamp", DESCENDING)
        return [Note.from_dict(doc) for doc in cursor]

    @retry_on_connection_failure()
    def search_text(self, query: str, limit: int = SEARCH_LIMIT) -> list[Note]:
        """Case-insensitive substring search over note text.

        Args:
            query: Text to look for.
            limit: Maximum number of results.

        Returns:
            Matching notes, most recent first.
        """
        cursor = (
            self._collection.find({"text": {"$regex": re.escape(query), "$options": "i"}})
            .sort("timestamp", DESCENDING)
            .limit(limit)
        )
        return [Note.from_dict(doc) for doc in cursor]

    @retry_on_connection_failure()
    def delete(self, note_id: str) -> Note | None:
        """Delete a note.

        Returns:
            The deleted note, or None if it did not exist.
        """
        doc = self._collection.find_one_and_delete({"_id": note_id})
        if doc is None:
            return None
        logger.info("Deleted note %s", note_id)
        return Note.from_dict(doc)

    @retry_on_connection_failure()
    def reassign_project(self, from_project_id: str, to_project_id: str) -> int:
        """Move every note of one project to another.

        Returns:
            Number of notes moved.
        """
        result = self._collection.update_many(
            {"project_id": from_project_id},
            {"$set": {"project_id": to_project_id}},
        )
        return result.modified_count

    @retry_on_connection_failure()
    def count(self) -> int:
        """Count stored notes."""
        return self._collection.count_documents({})


__all__ = ["NoteRepository"]
