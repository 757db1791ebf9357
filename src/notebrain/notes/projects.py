"""Project detection from a note's leading text.

Dictated notes often start with the project they belong to ("Work: had a
meeting"). Detection tries an ordered list of strategies; the first one that
finds an active project name wins. Matching is case-insensitive and exact,
so a misspelled name is just note content.
"""

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

SEPARATORS = ":,."

# "Name<sep> rest" for each separator, in priority order
_LEADING_PATTERNS = [
    re.compile(r"^([^:]+):\s*(.*)$", re.DOTALL),
    re.compile(r"^([^,]+),\s*(.*)$", re.DOTALL),
    re.compile(r"^([^.]+)\.\s*(.*)$", re.DOTALL),
]


@dataclass(frozen=True)
class ProjectMatch:
    """A detected project and the note text without its prefix.

    Attributes:
        project: Canonical name of the matched active project
        stripped_text: Note text with the project reference removed
    """

    project: str
    stripped_text: str


Strategy = Callable[[str, dict[str, str]], "ProjectMatch | None"]


def _pattern_strategy(pattern: re.Pattern[str]) -> Strategy:
    """Build a strategy matching "Name<sep> rest" with one separator."""

    def match(text: str, names: dict[str, str]) -> ProjectMatch | None:
        found = pattern.match(text)
        if found is None:
            return None
        project = names.get(found.group(1).strip().lower())
        if project is None:
            return None
        return ProjectMatch(project=project, stripped_text=found.group(2).strip())

    return match


def _prefix_strategy(text: str, names: dict[str, str]) -> ProjectMatch | None:
    """Match a bare project name followed by whitespace or a separator.

    Covers dictation that drops the punctuation ("Work had a meeting").
    Longer names are tried first so "Home Office" beats "Home".
    """
    for name_lower, name in sorted(names.items(), key=lambda item: len(item[1]), reverse=True):
        # Slice by the canonical length; lowercasing can change it ("İ")
        if text[: len(name)].lower() != name_lower:
            continue
        rest = text[len(name):]
        if not rest or not (rest[0].isspace() or rest[0] in SEPARATORS):
            continue
        return ProjectMatch(
            project=name,
            stripped_text=rest.lstrip(SEPARATORS + " \t\r\n").strip(),
        )
    return None


STRATEGIES: list[Strategy] = [*(_pattern_strategy(p) for p in _LEADING_PATTERNS), _prefix_strategy]


def classify_project(text: str, active_project_names: Iterable[str]) -> ProjectMatch | None:
    """Detect a leading project reference in note text.

    Args:
        text: Raw note text
        active_project_names: Names of currently active projects

    Returns:
        ProjectMatch, or None when no project is referenced (text unchanged)

    Examples:
        >>> classify_project("Work: had a meeting", ["Work", "General"])
        ProjectMatch(project='Work', stripped_text='had a meeting')
        >>> classify_project("Random thoughts today", ["Work", "General"]) is None
        True
    """
    names = {name.strip().lower(): name.strip() for name in active_project_names if name.strip()}
    text = text.strip()
    if not names or not text:
        return None

    for strategy in STRATEGIES:
        match = strategy(text, names)
        if match is None:
            continue
        if not match.stripped_text:
            # Nothing left to store as the note; treat as plain content
            return None
        logger.debug("Classified note into project %r", match.project)
        return match

    return None


__all__ = ["ProjectMatch", "SEPARATORS", "STRATEGIES", "classify_project"]
