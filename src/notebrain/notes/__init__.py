"""Notes module for notebrain.

Provides note capture, project detection, task tracking, and question
answering over stored notes.
"""

from .answer import Answer, AnswerComposer, UsageEstimate
from .extractor import EntityExtractor
from .models import CompletionCandidate, Entities, Note, Project, Task, TaskStatus
from .projects import ProjectMatch, classify_project
from .relevance import ContextSelection, select_relevant_context
from .service import CaptureResult, NoteService, NoteStats
from .tasks import detect_completion_keywords, match_task_completions

__all__ = [
    "Answer",
    "AnswerComposer",
    "CaptureResult",
    "CompletionCandidate",
    "ContextSelection",
    "Entities",
    "EntityExtractor",
    "Note",
    "NoteService",
    "NoteStats",
    "Project",
    "ProjectMatch",
    "Task",
    "TaskStatus",
    "UsageEstimate",
    "classify_project",
    "detect_completion_keywords",
    "match_task_completions",
    "select_relevant_context",
]
