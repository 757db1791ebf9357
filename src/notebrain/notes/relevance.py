"""Relevance scoring for question answering.

Ranks stored notes against a question and trims them to a fixed context
budget before anything is sent to the answer model. Scoring is keyword and
entity overlap with a small recency boost; it must stay cheap.
"""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from .models import Note

logger = logging.getLogger(__name__)

MAX_CONTEXT_CHARS = 3000
MAX_NOTES = 15
FALLBACK_NOTES = 5
DATE_FORMAT = "%m/%d/%Y"

KEYWORD_WEIGHT = 10
ENTITY_WEIGHT = 15
WEEK_BOOST = 2
DAY_BOOST = 1

_WORD_RE = re.compile(r"[\w']+")


@dataclass
class ContextSelection:
    """Notes chosen to answer a question, rendered for the answer model.

    Attributes:
        rendered_context: One "[date] text" line per used note
        used_count: Notes actually included in the rendered context
        total_count: Notes that were searched
        candidate_count: Notes kept after scoring (or fallback) before trimming
    """

    rendered_context: str
    used_count: int
    total_count: int
    candidate_count: int = 0

    def disclosure(self) -> str:
        """Describe how much of the history backed the answer."""
        if self.used_count >= self.total_count:
            return ""
        return (
            f"Searched {self.total_count} notes, answer based on "
            f"{self.used_count} most relevant ones."
        )


def query_terms(question: str) -> list[str]:
    """Lowercase question words longer than two characters, de-duplicated."""
    words = _WORD_RE.findall(question.lower())
    return list(dict.fromkeys(w for w in words if len(w) > 2))


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def score_note(
    note: Note,
    terms: Sequence[str],
    question_lower: str,
    now: datetime,
) -> int:
    """Score one note against the query.

    Args:
        note: Note to score
        terms: Query terms from query_terms()
        question_lower: Lowercased question, for entity lookups
        now: Reference time for the recency boost

    Returns:
        Relevance score (0 means unrelated and not recent)
    """
    text_lower = note.text.lower()
    score = sum(KEYWORD_WEIGHT for term in terms if term in text_lower)

    entity_values = {value.lower() for value in note.entities.values() if value.strip()}
    score += sum(ENTITY_WEIGHT for value in entity_values if value in question_lower)

    age = now - _as_utc(note.timestamp)
    if age < timedelta(days=7):
        score += WEEK_BOOST
    if age < timedelta(days=1):
        score += DAY_BOOST

    return score


def rank_notes(
    question: str,
    notes: Sequence[Note],
    max_notes: int = MAX_NOTES,
    fallback_notes: int = FALLBACK_NOTES,
    now: datetime | None = None,
) -> list[Note]:
    """Order notes by relevance to the question, most relevant first.

    Notes scoring zero are dropped. If nothing scores, the most recent
    notes are returned instead so a question never gets an empty context.
    """
    if not notes:
        return []

    now = now or datetime.now(UTC)
    terms = query_terms(question)
    question_lower = question.lower()

    scored = [(score_note(note, terms, question_lower, now), note) for note in notes]
    relevant = [(score, note) for score, note in scored if score > 0]

    if not relevant:
        logger.debug("No note scored for %r, falling back to most recent", question[:50])
        return sorted(notes, key=lambda n: _as_utc(n.timestamp), reverse=True)[:fallback_notes]

    relevant.sort(key=lambda pair: (pair[0], _as_utc(pair[1].timestamp)), reverse=True)
    ranked = [note for _, note in relevant[:max_notes]]

    logger.debug("Filtered %d notes down to %d relevant ones", len(notes), len(ranked))
    return ranked


def render_note(note: Note, date_format: str = DATE_FORMAT) -> str:
    """Render a note as a single context line."""
    return f"[{note.timestamp.strftime(date_format)}] {note.text}\n"


def trim_context(
    notes: Sequence[Note],
    max_chars: int = MAX_CONTEXT_CHARS,
    date_format: str = DATE_FORMAT,
) -> tuple[str, int]:
    """Concatenate rendered notes without exceeding the character budget.

    A note that would overflow the budget is dropped whole and later,
    smaller notes are still tried; a note is never cut mid-note.

    Returns:
        Tuple of (rendered context, number of notes used)
    """
    parts: list[str] = []
    length = 0

    for note in notes:
        line = render_note(note, date_format)
        if length + len(line) > max_chars:
            continue
        parts.append(line)
        length += len(line)

    return "".join(parts), len(parts)


def select_relevant_context(
    question: str,
    notes: Sequence[Note],
    max_chars: int = MAX_CONTEXT_CHARS,
    max_notes: int = MAX_NOTES,
    fallback_notes: int = FALLBACK_NOTES,
    date_format: str = DATE_FORMAT,
    now: datetime | None = None,
) -> ContextSelection:
    """Select and render the notes most relevant to a question.

    Args:
        question: Free-text question
        notes: Full note history
        max_chars: Character budget for the rendered context
        max_notes: Maximum number of ranked notes considered
        fallback_notes: Recent notes used when nothing scores
        date_format: strftime format for the date prefix
        now: Reference time (defaults to current UTC time)

    Returns:
        ContextSelection with the rendered context and counts
    """
    if not notes:
        return ContextSelection(rendered_context="", used_count=0, total_count=0)

    ranked = rank_notes(question, notes, max_notes, fallback_notes, now)
    context, used = trim_context(ranked, max_chars, date_format)

    logger.debug("Using %d notes (%d characters) for context", used, len(context))

    return ContextSelection(
        rendered_context=context,
        used_count=used,
        total_count=len(notes),
        candidate_count=len(ranked),
    )


__all__ = [
    "ContextSelection",
    "DATE_FORMAT",
    "FALLBACK_NOTES",
    "MAX_CONTEXT_CHARS",
    "MAX_NOTES",
    "query_terms",
    "rank_notes",
    "render_note",
    "score_note",
    "select_relevant_context",
    "trim_context",
]
