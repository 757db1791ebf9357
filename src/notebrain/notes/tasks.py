"""Task completion detection.

Spots completion language in a new note ("called Sarah", "finished the
report") and proposes which pending tasks it may complete. Never changes
task state; applying or confirming a candidate belongs to the task registry.
"""

import logging
import math
import re
from collections.abc import Iterable

from .models import CompletionCandidate, Task

logger = logging.getLogger(__name__)

COMPLETION_KEYWORDS: list[str] = [
    "done",
    "finished",
    "completed",
    "called",
    "talked to",
    "met with",
    "spoke to",
    "emailed",
    "sent",
    "bought",
    "picked up",
    "dropped off",
    "scheduled",
    "booked",
]

MIN_MATCHED_WORDS = 2
MATCH_RATIO = 0.5

_WORD_RE = re.compile(r"[\w']+")


def detect_completion_keywords(text: str) -> list[str]:
    """Return the completion keywords present in the text.

    Cheap signal for callers that do not need task-specific matching.
    """
    text_lower = text.lower()
    return [keyword for keyword in COMPLETION_KEYWORDS if keyword in text_lower]


def descriptive_words(description: str) -> list[str]:
    """Lowercase description words longer than two characters."""
    words = _WORD_RE.findall(description.lower())
    return list(dict.fromkeys(w for w in words if len(w) > 2))


def required_matches(word_count: int) -> int:
    """Overlapping words needed for a task to be a candidate."""
    return min(MIN_MATCHED_WORDS, math.ceil(word_count * MATCH_RATIO))


def match_task_completions(
    text: str,
    pending_tasks: Iterable[Task],
    note_id: str | None = None,
) -> list[CompletionCandidate]:
    """Propose pending tasks that the note text may complete.

    Args:
        text: New note text
        pending_tasks: Tasks to compare against
        note_id: ID of the new note, recorded on each candidate

    Returns:
        Candidates ordered by confidence, highest first
    """
    if not detect_completion_keywords(text):
        return []

    text_lower = text.lower()
    candidates = []

    for task in pending_tasks:
        if not task.is_pending:
            continue
        if note_id is not None and note_id in task.rejected_note_ids:
            continue

        words = descriptive_words(task.description)
        if not words:
            continue

        matched = tuple(word for word in words if word in text_lower)
        if len(matched) < required_matches(len(words)):
            continue

        candidates.append(
            CompletionCandidate(
                task_id=task.id,
                note_id=note_id,
                matched_words=matched,
                confidence=len(matched) / len(words),
            )
        )

    candidates.sort(key=lambda c: c.confidence, reverse=True)

    if candidates:
        logger.debug(
            "Found %d completion candidates (best %.2f)", len(candidates), candidates[0].confidence
        )
    return candidates


__all__ = [
    "COMPLETION_KEYWORDS",
    "descriptive_words",
    "detect_completion_keywords",
    "match_task_completions",
    "required_matches",
]
