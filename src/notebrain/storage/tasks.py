"""Task registry backed by MongoDB.

Owns task lifecycle state. The pending -> completed transition is a single
conditional update on status, so concurrent completions of one task
succeed at most once.
"""

import logging
import uuid
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from pymongo import ASCENDING
from pymongo.collection import Collection

from ..notes.models import Task, TaskStatus
from .client import retry_on_connection_failure

logger = logging.getLogger(__name__)


class TaskRepository:
    """Repository for task storage and state transitions."""

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        """Initialize repository with MongoDB collection.

        Args:
            collection: MongoDB collection for tasks.
        """
        self._collection = collection
        self._ensure_indexes()

    def _ensure_indexes(self) -> None:
        """Create indexes for efficient queries."""
        self._collection.create_index([("status", 1), ("created_at", ASCENDING)])
        self._collection.create_index("note_id")

    def create(self, note_id: str, description: str) -> Task:
        """Create a pending task for a note.

        Args:
            note_id: Originating note.
            description: Task description text.

        Returns:
            The created task.
        """
        task = Task(note_id=note_id, description=description)
        doc = task.to_dict()
        doc["_id"] = str(uuid.uuid4())
        self._collection.insert_one(doc)
        task.id = doc["_id"]
        return task

    @retry_on_connection_failure()
    def get_by_id(self, task_id: str) -> Task | None:
        """Retrieve a task by ID."""
        doc = self._collection.find_one({"_id": task_id})
        if doc is None:
            return None
        return Task.from_dict(doc)

    @retry_on_connection_failure()
    def get_pending(self) -> list[Task]:
        """Get all pending tasks, oldest first."""
        cursor = self._collection.find({"status": TaskStatus.PENDING.value}).sort(
            "created_at", ASCENDING
        )
        return [Task.from_dict(doc) for doc in cursor]

    @retry_on_connection_failure()
    def get_for_notes(self, note_ids: Iterable[str]) -> list[Task]:
        """Get the tasks that originate from any of the given notes."""
        cursor = self._collection.find({"note_id": {"$in": list(note_ids)}})
        return [Task.from_dict(doc) for doc in cursor]

    # Not retried: after a lost acknowledgement the repeat would report None
    def complete(self, task_id: str, completed_by: str | None = None) -> Task | None:
        """Mark a pending task completed.

        Only succeeds while the task is still pending; a second attempt, or
        a concurrent one that lost the race, gets None.

        Args:
            task_id: Task to complete.
            completed_by: Note that completed it, if any.

        Returns:
            The completed task, or None if not found or already completed.
        """
        result = self._collection.update_one(
            {"_id": task_id, "status": TaskStatus.PENDING.value},
            {
                "$set": {
                    "status": TaskStatus.COMPLETED.value,
                    "completed_by": completed_by,
                    "completed_at": datetime.now(UTC),
                }
            },
        )
        if result.modified_count == 0:
            return None

        logger.info("Task %s completed (by note %s)", task_id, completed_by)
        return self.get_by_id(task_id)

    @retry_on_connection_failure()
    def add_rejection(self, task_id: str, note_id: str) -> bool:
        """Record that a note's completion suggestion was rejected.

        Returns:
            True if the task exists and is still pending.
        """
        result = self._collection.update_one(
            {"_id": task_id, "status": TaskStatus.PENDING.value},
            {"$addToSet": {"rejected_note_ids": note_id}},
        )
        return result.matched_count > 0

    @retry_on_connection_failure()
    def clear_completed_by(self, note_id: str) -> int:
        """Detach a deleted note from the tasks it completed.

        The tasks stay completed; only the reference is removed.

        Returns:
            Number of tasks updated.
        """
        result = self._collection.update_many(
            {"completed_by": note_id},
            {"$set": {"completed_by": None}},
        )
        return result.modified_count

    @retry_on_connection_failure()
    def delete_for_note(self, note_id: str) -> int:
        """Delete the tasks created from a note.

        Returns:
            Number of tasks deleted.
        """
        result = self._collection.delete_many({"note_id": note_id})
        return result.deleted_count


__all__ = ["TaskRepository"]
