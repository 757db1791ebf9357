"""Data models for notes, projects, and tasks.

Defines the Entities record, Note, Project, Task, and the ephemeral
CompletionCandidate produced by the task matcher.
"""

from dataclasses import dataclass, field, fields
from datetime import UTC, datetime
from enum import Enum
from typing import Any

ENTITY_CATEGORIES: tuple[str, ...] = (
    "people",
    "tasks",
    "events",
    "dates",
    "times",
    "locations",
    "items",
    "topics",
)

# Keys that may carry the value when a model returns objects instead of strings
_VALUE_KEYS = ("text", "description", "task", "name", "value")


def _ensure_utc(value: Any) -> datetime:
    """Return a tz-aware datetime, treating naive values as UTC."""
    if not isinstance(value, datetime):
        return datetime.now(UTC)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _coerce_values(raw: Any) -> list[str]:
    """Coerce a loosely-typed entity list into a list of strings."""
    if not isinstance(raw, list):
        return []

    result = []
    for item in raw:
        if isinstance(item, str):
            if item.strip():
                result.append(item.strip())
        elif isinstance(item, dict):
            for key in _VALUE_KEYS:
                value = item.get(key)
                if isinstance(value, str) and value.strip():
                    result.append(value.strip())
                    break
    return result


@dataclass
class Entities:
    """Structured entities extracted from a note, one list per category."""

    people: list[str] = field(default_factory=list)
    tasks: list[str] = field(default_factory=list)
    events: list[str] = field(default_factory=list)
    dates: list[str] = field(default_factory=list)
    times: list[str] = field(default_factory=list)
    locations: list[str] = field(default_factory=list)
    items: list[str] = field(default_factory=list)
    topics: list[str] = field(default_factory=list)

    @classmethod
    def from_raw(cls, data: Any) -> "Entities":
        """Build from an untrusted category -> list mapping.

        Missing categories and non-list values are treated as empty.
        """
        if not isinstance(data, dict):
            return cls()
        return cls(**{name: _coerce_values(data.get(name)) for name in ENTITY_CATEGORIES})

    def values(self) -> list[str]:
        """All values across categories, in category order."""
        return [value for f in fields(self) for value in getattr(self, f.name)]

    def is_empty(self) -> bool:
        """Check whether no category holds a value."""
        return not self.values()

    def to_dict(self) -> dict[str, list[str]]:
        """Convert to dictionary for MongoDB storage."""
        return {name: list(getattr(self, name)) for name in ENTITY_CATEGORIES}


class TaskStatus(Enum):
    """Lifecycle state of a task."""

    PENDING = "pending"
    COMPLETED = "completed"


def count_words(text: str) -> int:
    """Count whitespace-separated words."""
    return len(text.split())


@dataclass
class Note:
    """A stored note with its extracted entities.

    Attributes:
        text: Note text (project prefix already stripped)
        timestamp: When the note was captured
        entities: Extracted entities
        project_id: Assigned project (if any)
        word_count: Derived from text at creation
        id: Document ID
    """

    text: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    entities: Entities = field(default_factory=Entities)
    project_id: str | None = None
    word_count: int | None = None
    id: str | None = None

    def __post_init__(self) -> None:
        if self.word_count is None:
            self.word_count = count_words(self.text)
        self.timestamp = _ensure_utc(self.timestamp)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for MongoDB storage."""
        return {
            "text": self.text,
            "timestamp": self.timestamp,
            "word_count": self.word_count,
            "project_id": self.project_id,
            "entities": self.entities.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Note":
        """Create from MongoDB document."""
        return cls(
            id=str(data["_id"]) if data.get("_id") else None,
            text=data.get("text", ""),
            timestamp=_ensure_utc(data.get("timestamp")),
            entities=Entities.from_raw(data.get("entities")),
            project_id=data.get("project_id"),
            word_count=data.get("word_count"),
        )


@dataclass
class Project:
    """A named grouping of notes.

    Only active projects participate in name matching.
    """

    name: str
    description: str = ""
    color: str = "#3B82F6"
    active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for MongoDB storage."""
        return {
            "name": self.name,
            "name_lower": self.name.lower(),
            "description": self.description,
            "color": self.color,
            "active": self.active,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Project":
        """Create from MongoDB document."""
        return cls(
            id=str(data["_id"]) if data.get("_id") else None,
            name=data.get("name", ""),
            description=data.get("description") or "",
            color=data.get("color") or "#3B82F6",
            active=data.get("active", True),
            created_at=_ensure_utc(data.get("created_at")),
        )


@dataclass
class Task:
    """An open or completed action item extracted from a note."""

    note_id: str
    description: str
    status: TaskStatus = TaskStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    completed_by: str | None = None
    completed_at: datetime | None = None
    rejected_note_ids: list[str] = field(default_factory=list)
    id: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == TaskStatus.PENDING

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for MongoDB storage."""
        return {
            "note_id": self.note_id,
            "description": self.description,
            "status": self.status.value,
            "created_at": self.created_at,
            "completed_by": self.completed_by,
            "completed_at": self.completed_at,
            "rejected_note_ids": self.rejected_note_ids,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Create from MongoDB document."""
        completed_at = data.get("completed_at")
        return cls(
            id=str(data["_id"]) if data.get("_id") else None,
            note_id=str(data.get("note_id", "")),
            description=data.get("description", ""),
            status=TaskStatus(data.get("status", "pending")),
            created_at=_ensure_utc(data.get("created_at")),
            completed_by=data.get("completed_by"),
            completed_at=_ensure_utc(completed_at) if completed_at else None,
            rejected_note_ids=list(data.get("rejected_note_ids") or []),
        )


@dataclass(frozen=True)
class CompletionCandidate:
    """A proposed pairing of a new note with a pending task it may satisfy.

    Attributes:
        task_id: Candidate task
        note_id: Note that may complete it
        matched_words: Task description words found in the note
        confidence: Matched share of descriptive words (0.0 to 1.0)
    """

    task_id: str | None
    note_id: str | None
    matched_words: tuple[str, ...]
    confidence: float


__all__ = [
    "ENTITY_CATEGORIES",
    "CompletionCandidate",
    "Entities",
    "Note",
    "Project",
    "Task",
    "TaskStatus",
    "count_words",
]
