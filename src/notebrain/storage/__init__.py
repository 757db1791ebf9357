"""MongoDB storage module for notebrain.

Provides persistent storage for notes, projects, and tasks.
"""

from .client import MongoStorageClient, retry_on_connection_failure
from .errors import (
    DefaultProjectError,
    ProjectExistsError,
    ProjectNotFoundError,
    StorageError,
)
from .notes import NoteRepository
from .projects import ProjectRepository
from .tasks import TaskRepository

__all__ = [
    "DefaultProjectError",
    "MongoStorageClient",
    "NoteRepository",
    "ProjectExistsError",
    "ProjectNotFoundError",
    "ProjectRepository",
    "StorageError",
    "TaskRepository",
    "retry_on_connection_failure",
]
