"""Project repository for MongoDB storage.

Names are unique among active projects only, compared case-insensitively.
Deleting a project clears its active flag; the document is kept.
"""

import logging
import uuid
from datetime import UTC, datetime
from typing import Any

from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from ..notes.models import Project
from .client import retry_on_connection_failure
from .errors import DefaultProjectError, ProjectExistsError, ProjectNotFoundError

logger = logging.getLogger(__name__)


class ProjectRepository:
    """Repository for project storage operations."""

    def __init__(self, collection: Collection[dict[str, Any]]) -> None:
        """Initialize repository with MongoDB collection.

        Args:
            collection: MongoDB collection for projects.
        """
        self._collection = collection
        self._ensure_indexes()

    def _ensure_indexes(self) -> None:
        """Create indexes for efficient queries.

        The partial unique index keeps active names unique even when two
        creates race past the existence check.
        """
        self._collection.create_index(
            [("name_lower", ASCENDING)],
            unique=True,
            partialFilterExpression={"active": True},
            name="active_name_unique",
        )

    def create(self, name: str, description: str = "", color: str = "#6B7280") -> Project:
        """Create a new active project.

        Args:
            name: Project name.
            description: Optional description.
            color: Display color.

        Returns:
            The created project.

        Raises:
            ValueError: If the name is blank.
            ProjectExistsError: If an active project already has this name.
        """
        name = name.strip()
        if not name:
            raise ValueError("Project name is required")

        if self._collection.find_one({"active": True, "name_lower": name.lower()}):
            raise ProjectExistsError(name)

        project = Project(name=name, description=description.strip(), color=color)
        doc = project.to_dict()
        doc["_id"] = str(uuid.uuid4())
        try:
            self._collection.insert_one(doc)
        except DuplicateKeyError as e:
            raise ProjectExistsError(name) from e
        project.id = doc["_id"]

        logger.info("Created project %r", name)
        return project

    @retry_on_connection_failure()
    def get_by_id(self, project_id: str) -> Project | None:
        """Retrieve a project by ID, active or not."""
        doc = self._collection.find_one({"_id": project_id})
        if doc is None:
            return None
        return Project.from_dict(doc)

    @retry_on_connection_failure()
    def get_by_name(self, name: str) -> Project | None:
        """Retrieve the active project with this name (case-insensitive)."""
        doc = self._collection.find_one({"active": True, "name_lower": name.strip().lower()})
        if doc is None:
            return None
        return Project.from_dict(doc)

    @retry_on_connection_failure()
    def get_active(self) -> list[Project]:
        """Get all active projects, ordered by name."""
        cursor = self._collection.find({"active": True}).sort("name_lower", ASCENDING)
        return [Project.from_dict(doc) for doc in cursor]

    def active_names(self) -> list[str]:
        """Names of all active projects."""
        return [project.name for project in self.get_active()]

    def ensure_default(self, name: str = "General", color: str = "#6B7280") -> Project:
        """Return the fallback project, creating it if missing."""
        project = self.get_by_name(name)
        if project is not None:
            return project
        try:
            return self.create(name, "Notes without a specific project", color)
        except ProjectExistsError:
            # Created concurrently
            existing = self.get_by_name(name)
            if existing is None:
                raise
            return existing

    @retry_on_connection_failure()
    def deactivate(self, project_id: str, default_name: str = "General") -> Project:
        """Soft-delete a project.

        Args:
            project_id: Project to deactivate.
            default_name: Name of the fallback project, which cannot be deleted.

        Returns:
            The deactivated project.

        Raises:
            ProjectNotFoundError: If no active project has this ID.
            DefaultProjectError: If the project is the fallback project.
        """
        project = self.get_by_id(project_id)
        if project is None or not project.active:
            raise ProjectNotFoundError(f"Project not found: {project_id}")
        if project.name.lower() == default_name.lower():
            raise DefaultProjectError(f"The {default_name} project cannot be deleted")

        self._collection.update_one(
            {"_id": project_id, "active": True},
            {"$set": {"active": False, "deleted_at": datetime.now(UTC)}},
        )
        project.active = False

        logger.info("Deactivated project %r", project.name)
        return project


__all__ = ["ProjectRepository"]
