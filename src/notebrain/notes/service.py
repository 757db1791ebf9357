"""Note service for capturing and querying notes.

Ties project detection, entity extraction, task tracking and answer
composition to the note, project, and task stores.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Protocol

from ..config import ProjectConfig, TaskConfig
from ..stt.transcriber import Transcriber
from .answer import Answer, AnswerComposer, UsageEstimate
from .extractor import EntityExtractor
from .models import CompletionCandidate, Note, Project, Task
from .projects import classify_project
from .tasks import detect_completion_keywords, match_task_completions

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_DESCRIPTION = "Notes without a specific project"


class NoteStore(Protocol):
    """Protocol for note persistence."""

    def save(self, note: Note) -> str: ...

    def get_by_id(self, note_id: str) -> Note | None: ...

    def get_all(self) -> list[Note]: ...

    def get_by_project(self, project_id: str) -> list[Note]: ...

    def search_text(self, query: str, limit: int = 50) -> list[Note]: ...

    def delete(self, note_id: str) -> Note | None: ...

    def reassign_project(self, from_project_id: str, to_project_id: str) -> int: ...


class ProjectStore(Protocol):
    """Protocol for project persistence."""

    def create(self, name: str, description: str = "", color: str = "#6B7280") -> Project: ...

    def get_by_name(self, name: str) -> Project | None: ...

    def get_active(self) -> list[Project]: ...

    def active_names(self) -> list[str]: ...

    def ensure_default(self, name: str = "General", color: str = "#6B7280") -> Project: ...

    def deactivate(self, project_id: str, default_name: str = "General") -> Project: ...


class TaskStore(Protocol):
    """Protocol for the task registry."""

    def create(self, note_id: str, description: str) -> Task: ...

    def get_by_id(self, task_id: str) -> Task | None: ...

    def get_pending(self) -> list[Task]: ...

    def get_for_notes(self, note_ids: Iterable[str]) -> list[Task]: ...

    def complete(self, task_id: str, completed_by: str | None = None) -> Task | None: ...

    def add_rejection(self, task_id: str, note_id: str) -> bool: ...

    def clear_completed_by(self, note_id: str) -> int: ...

    def delete_for_note(self, note_id: str) -> int: ...


@dataclass
class CaptureResult:
    """Everything that happened when a note was captured.

    Attributes:
        note: The stored note
        project: Project the note was assigned to
        created_tasks: Pending tasks created from the note's extracted tasks
        suggestions: Completion candidates awaiting confirmation
        auto_completed: Tasks completed automatically by this note
        completion_keywords: Completion phrases found in the note
    """

    note: Note
    project: Project
    created_tasks: list[Task] = field(default_factory=list)
    suggestions: list[CompletionCandidate] = field(default_factory=list)
    auto_completed: list[Task] = field(default_factory=list)
    completion_keywords: list[str] = field(default_factory=list)


@dataclass
class NoteStats:
    """Activity summary over a time window."""

    days: int
    total_notes: int
    unique_people: int
    total_tasks: int
    completed_tasks: int
    avg_words_per_note: float


class NoteService:
    """Service for capturing and querying notes."""

    def __init__(
        self,
        notes: NoteStore,
        projects: ProjectStore,
        tasks: TaskStore,
        extractor: EntityExtractor,
        composer: AnswerComposer,
        transcriber: Transcriber | None = None,
        task_config: TaskConfig | None = None,
        project_config: ProjectConfig | None = None,
    ) -> None:
        """Initialize note service.

        Args:
            notes: Note store
            projects: Project store
            tasks: Task registry
            extractor: Entity extractor for new notes
            composer: Answer composer for questions
            transcriber: Speech-to-text for audio notes (optional)
            task_config: Task completion policy
            project_config: Default project settings
        """
        self._notes = notes
        self._projects = projects
        self._tasks = tasks
        self._extractor = extractor
        self._composer = composer
        self._transcriber = transcriber
        self._task_config = task_config or TaskConfig()
        self._project_config = project_config or ProjectConfig()

    def _default_project(self) -> Project:
        return self._projects.ensure_default(
            self._project_config.default_project,
            self._project_config.default_color,
        )

    def capture(self, text: str) -> CaptureResult:
        """Capture a new note.

        Detects a leading project reference, extracts entities, stores the
        note, checks whether it completes any pending task, and registers
        the tasks it mentions.

        Args:
            text: Raw note text

        Returns:
            CaptureResult describing the stored note and task changes

        Raises:
            ValueError: If text is blank
        """
        text = text.strip()
        if not text:
            raise ValueError("Note text is required")

        default = self._default_project()
        project = default
        body = text

        match = classify_project(text, self._projects.active_names())
        if match is not None:
            project = self._projects.get_by_name(match.project) or default
            body = match.stripped_text

        entities = self._extractor.extract(body)
        note = Note(text=body, entities=entities, project_id=project.id)
        self._notes.save(note)

        # Pending tasks are read before this note's own tasks exist
        keywords = detect_completion_keywords(body)
        candidates = match_task_completions(body, self._tasks.get_pending(), note.id)
        suggestions, auto_completed = self._apply_auto_complete(candidates, note)

        created = [self._tasks.create(note.id or "", task) for task in entities.tasks]

        logger.info(
            f"Captured note: project={project.name}, tasks={len(created)}, "
            f"suggestions={len(suggestions)}, auto_completed={len(auto_completed)}"
        )

        return CaptureResult(
            note=note,
            project=project,
            created_tasks=created,
            suggestions=suggestions,
            auto_completed=auto_completed,
            completion_keywords=keywords,
        )

    def _apply_auto_complete(
        self, candidates: list[CompletionCandidate], note: Note
    ) -> tuple[list[CompletionCandidate], list[Task]]:
        if not self._task_config.auto_complete:
            return candidates, []

        suggestions = []
        completed = []
        for candidate in candidates:
            if candidate.task_id is None or candidate.confidence < self._task_config.auto_complete_threshold:
                suggestions.append(candidate)
                continue
            task = self._tasks.complete(candidate.task_id, note.id)
            if task is not None:
                completed.append(task)

        return suggestions, completed

    def capture_audio(self, path: str | Path) -> CaptureResult:
        """Transcribe an audio file and capture it as a note.

        Raises:
            RuntimeError: If no transcriber is configured
            TranscriptionError: If the audio yields no usable text
        """
        if self._transcriber is None:
            raise RuntimeError("No transcriber configured")

        result = self._transcriber.transcribe_file(Path(path))
        logger.info(f"Transcribed {result.duration_ms}ms of audio")
        return self.capture(result.text)

    def ask(self, question: str) -> Answer:
        """Answer a question from the stored notes.

        Raises:
            ValueError: If question is blank
        """
        question = question.strip()
        if not question:
            raise ValueError("Question is required")
        return self._composer.answer(question, self._notes.get_all())

    def estimate_usage(self, question: str) -> UsageEstimate:
        """Estimate what answering a question would cost."""
        return self._composer.estimate_usage(question.strip(), self._notes.get_all())

    def _may_complete(self, task: Task, note: Note) -> bool:
        """Check that a note may be recorded as completing a task.

        The completing note must be a different note that is no older than
        the note the task came from.
        """
        if note.id == task.note_id:
            return False
        origin = self._notes.get_by_id(task.note_id)
        return origin is None or note.timestamp >= origin.timestamp

    def confirm_completion(self, task_id: str, note_id: str) -> bool:
        """Confirm that a note completed a task.

        Returns:
            True if the task moved from pending to completed
        """
        task = self._tasks.get_by_id(task_id)
        if task is None or not task.is_pending:
            return False

        if note_id in task.rejected_note_ids:
            logger.info("Note %s was rejected for task %s", note_id, task_id)
            return False

        note = self._notes.get_by_id(note_id)
        if note is None or not self._may_complete(task, note):
            logger.warning("Note %s cannot complete task %s", note_id, task_id)
            return False

        return self._tasks.complete(task_id, note_id) is not None

    def reject_completion(self, task_id: str, note_id: str) -> bool:
        """Reject a suggestion; the note is never proposed for the task again.

        Returns:
            True if the task exists and is still pending
        """
        return self._tasks.add_rejection(task_id, note_id)

    def complete_task(self, task_id: str, note_id: str | None = None) -> bool:
        """Complete a task manually, optionally crediting a note.

        Returns:
            True if the task moved from pending to completed
        """
        if note_id is not None:
            return self.confirm_completion(task_id, note_id)
        return self._tasks.complete(task_id) is not None

    def pending_tasks(self) -> list[Task]:
        """Get all pending tasks, oldest first."""
        return self._tasks.get_pending()

    def create_project(self, name: str, description: str = "", color: str = "#3B82F6") -> Project:
        """Create a project.

        Raises:
            ValueError: If name is blank
            ProjectExistsError: If an active project has the same name
        """
        return self._projects.create(name, description, color)

    def delete_project(self, project_id: str) -> int:
        """Delete a project and move its notes to the default project.

        Returns:
            Number of notes moved

        Raises:
            ProjectNotFoundError: If no active project has this ID
            DefaultProjectError: If it is the default project
        """
        project = self._projects.deactivate(project_id, self._project_config.default_project)
        default = self._default_project()
        moved = self._notes.reassign_project(project_id, default.id or "")

        logger.info(f"Deleted project {project.name!r}, moved {moved} notes to {default.name}")
        return moved

    def list_projects(self) -> list[Project]:
        """Get active projects, including the default one."""
        self._default_project()
        return self._projects.get_active()

    def project_notes(self, project_id: str) -> list[Note]:
        """Get a project's notes, most recent first."""
        return self._notes.get_by_project(project_id)

    def list_notes(self, limit: int | None = None) -> list[Note]:
        """Get stored notes, most recent first."""
        notes = self._notes.get_all()
        return notes[:limit] if limit is not None else notes

    def delete_note(self, note_id: str) -> bool:
        """Delete a note, its tasks, and its completion references.

        Returns:
            True if the note existed
        """
        note = self._notes.delete(note_id)
        if note is None:
            return False

        removed = self._tasks.delete_for_note(note_id)
        detached = self._tasks.clear_completed_by(note_id)
        logger.debug("Removed %d tasks, detached %d completions", removed, detached)
        return True

    def search(self, query: str) -> list[Note]:
        """Case-insensitive text search, most recent first."""
        query = query.strip()
        if not query:
            return []
        return self._notes.search_text(query)

    def stats(self, days: int = 30) -> NoteStats:
        """Summarize activity over the last days.

        Args:
            days: Window size in days

        Returns:
            NoteStats for notes captured inside the window
        """
        cutoff = datetime.now(UTC) - timedelta(days=days)
        notes = [note for note in self._notes.get_all() if note.timestamp >= cutoff]

        people = {person.lower() for note in notes for person in note.entities.people}
        tasks = self._tasks.get_for_notes(note.id for note in notes if note.id)
        completed = sum(1 for task in tasks if not task.is_pending)
        words = sum(note.word_count or 0 for note in notes)

        return NoteStats(
            days=days,
            total_notes=len(notes),
            unique_people=len(people),
            total_tasks=len(tasks),
            completed_tasks=completed,
            avg_words_per_note=round(words / len(notes), 1) if notes else 0.0,
        )


__all__ = [
    "CaptureResult",
    "NoteService",
    "NoteStats",
    "NoteStore",
    "ProjectStore",
    "TaskStore",
]
