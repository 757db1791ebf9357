"""Error types for the storage layer."""


class StorageError(Exception):
    """Base exception for storage errors."""

    pass


class ProjectExistsError(StorageError):
    """Raised when an active project already uses the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Project name already exists: {name}")
        self.name = name


class ProjectNotFoundError(StorageError):
    """Raised when a project ID does not name an active project."""

    pass


class DefaultProjectError(StorageError):
    """Raised when trying to delete the fallback project."""

    pass


__all__ = [
    "DefaultProjectError",
    "ProjectExistsError",
    "ProjectNotFoundError",
    "StorageError",
]
