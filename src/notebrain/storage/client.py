"""MongoDB storage client for notebrain.

Provides connection management, retry logic, and repository access.
"""

import logging
import time
from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, Any, TypeVar

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

if TYPE_CHECKING:
    from .notes import NoteRepository
    from .projects import ProjectRepository
    from .tasks import TaskRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_on_connection_failure(
    max_retries: int = 3,
    base_delay: float = 0.5,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Retry a repository call with exponential backoff while MongoDB is unreachable.

    Only connection failures are retried (server selection timeouts are one
    kind); every other error reaches the caller on the first attempt. Only
    decorate calls that are safe to repeat: a retry after a lost
    acknowledgement runs the whole call again.

    Args:
        max_retries: Total attempts before the failure is re-raised.
        base_delay: Delay before the second attempt, doubled each time.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            attempt = 1
            while True:
                try:
                    return func(*args, **kwargs)
                except ConnectionFailure as e:
                    if attempt >= max_retries:
                        logger.error(
                            "%s: giving up after %d attempts: %s", func.__qualname__, attempt, e
                        )
                        raise
                    delay = base_delay * 2 ** (attempt - 1)
                    logger.warning(
                        "%s: MongoDB unreachable (attempt %d/%d), retrying in %.1fs: %s",
                        func.__qualname__,
                        attempt,
                        max_retries,
                        delay,
                        e,
                    )
                    time.sleep(delay)
                    attempt += 1

        return wrapper

    return decorator


class MongoStorageClient:
    """High-level MongoDB storage client.

    Manages connection and provides access to the note, project, and task
    repositories.
    """

    def __init__(
        self,
        uri: str = "mongodb://localhost:27017",
        database_name: str = "notebrain",
        connect_timeout_ms: int = 5000,
        server_selection_timeout_ms: int = 5000,
        client: "MongoClient[dict[str, Any]] | None" = None,
    ) -> None:
        """Initialize the storage client.

        Args:
            uri: MongoDB connection URI.
            database_name: Name of the database to use.
            connect_timeout_ms: Connection timeout in milliseconds.
            server_selection_timeout_ms: Server selection timeout in milliseconds.
            client: Pre-built client (e.g. mongomock) used instead of connecting to uri.
        """
        self._uri = uri
        self._database_name = database_name
        self._connect_timeout_ms = connect_timeout_ms
        self._server_selection_timeout_ms = server_selection_timeout_ms
        self._client = client
        self._owns_client = client is None
        self._db: Database[dict[str, Any]] | None = None

        self._notes: NoteRepository | None = None
        self._projects: ProjectRepository | None = None
        self._tasks: TaskRepository | None = None

        self._connected = False

    def connect(self) -> None:
        """Connect to MongoDB and build repositories.

        Raises:
            ConnectionFailure: If the server cannot be reached.
        """
        if self._connected:
            return

        from .notes import NoteRepository
        from .projects import ProjectRepository
        from .tasks import TaskRepository

        try:
            if self._client is None:
                self._client = MongoClient(
                    self._uri,
                    connectTimeoutMS=self._connect_timeout_ms,
                    serverSelectionTimeoutMS=self._server_selection_timeout_ms,
                )

            self._client.admin.command("ping")

            self._db = self._client[self._database_name]
            self._notes = NoteRepository(self._db["notes"])
            self._projects = ProjectRepository(self._db["projects"])
            self._tasks = TaskRepository(self._db["tasks"])
            self._connected = True

            logger.info("Connected to MongoDB database %s", self._database_name)

        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error("Failed to connect to MongoDB: %s", str(e))
            self._connected = False
            raise

    def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self._client is not None:
            if self._owns_client:
                self._client.close()
                self._client = None
            self._db = None
            self._notes = None
            self._projects = None
            self._tasks = None
            self._connected = False
            logger.info("Disconnected from MongoDB")

    def is_connected(self) -> bool:
        """Check if connected to MongoDB.

        Returns:
            True if connected, False otherwise.
        """
        if not self._connected or self._client is None:
            return False

        try:
            self._client.admin.command("ping")
            return True
        except (ConnectionFailure, ServerSelectionTimeoutError):
            self._connected = False
            return False

    def health_check(self) -> bool:
        """Perform a health check on the database."""
        return self.is_connected()

    def _require(self, repository: Any) -> Any:
        if repository is None:
            raise RuntimeError("Not connected to MongoDB. Call connect() first.")
        return repository

    @property
    def notes(self) -> "NoteRepository":
        """Get the notes repository."""
        return self._require(self._notes)

    @property
    def projects(self) -> "ProjectRepository":
        """Get the projects repository."""
        return self._require(self._projects)

    @property
    def tasks(self) -> "TaskRepository":
        """Get the task registry."""
        return self._require(self._tasks)

    @property
    def database(self) -> Database[dict[str, Any]]:
        """Get the database instance.

        Raises:
            RuntimeError: If not connected.
        """
        return self._require(self._db)

    def __enter__(self) -> "MongoStorageClient":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.disconnect()


__all__ = [
    "MongoStorageClient",
    "retry_on_connection_failure",
]
