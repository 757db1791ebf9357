"""Unit tests for project detection from a note's leading text."""

import doctest

import pytest

from notebrain.notes import projects
from notebrain.notes.projects import ProjectMatch, classify_project

PROJECTS = ["Work", "Home", "Home Office", "General"]


class TestClassifyProject:
    """Test leading project reference detection."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Work: had a meeting", ProjectMatch("Work", "had a meeting")),
            ("work: had a meeting", ProjectMatch("Work", "had a meeting")),
            ("Work, call Bob", ProjectMatch("Work", "call Bob")),
            ("Work. call Bob", ProjectMatch("Work", "call Bob")),
            ("Work had a meeting", ProjectMatch("Work", "had a meeting")),
            ("WORK   lots of spaces", ProjectMatch("Work", "lots of spaces")),
        ],
    )
    def test_detects_project(self, text: str, expected: ProjectMatch) -> None:
        assert classify_project(text, PROJECTS) == expected

    def test_longest_name_wins(self) -> None:
        match = classify_project("Home Office printer is broken", PROJECTS)

        assert match == ProjectMatch("Home Office", "printer is broken")

    def test_falls_through_to_comma_separator(self) -> None:
        match = classify_project("Work, notes: here", PROJECTS)

        # "Work, notes" is not a project, so the comma form applies
        assert match == ProjectMatch("Work", "notes: here")

    def test_unknown_project(self) -> None:
        assert classify_project("Random: thought", PROJECTS) is None

    def test_name_must_be_at_start(self) -> None:
        assert classify_project("Meeting notes: Work, call", PROJECTS) is None

    def test_name_must_be_a_whole_word(self) -> None:
        assert classify_project("Workshop tomorrow at nine", PROJECTS) is None

    def test_empty_remainder_is_not_a_match(self) -> None:
        assert classify_project("Work:", PROJECTS) is None
        assert classify_project("Work", PROJECTS) is None

    def test_no_active_projects(self) -> None:
        assert classify_project("Work: had a meeting", []) is None

    def test_blank_text(self) -> None:
        assert classify_project("   ", PROJECTS) is None

    def test_keeps_multiline_remainder(self) -> None:
        match = classify_project("Work: line one\nline two", PROJECTS)

        assert match is not None
        assert match.stripped_text == "line one\nline two"

    def test_returns_canonical_name(self) -> None:
        match = classify_project("home office: new chair", ["Home Office"])

        assert match is not None
        assert match.project == "Home Office"

    def test_plain_note_is_not_classified(self) -> None:
        assert classify_project("Random thoughts today", ["Work", "General"]) is None

    def test_colon_form_with_default_project(self) -> None:
        assert classify_project("Work: had a meeting", ["Work", "General"]) == ProjectMatch(
            "Work", "had a meeting"
        )

    @pytest.mark.parametrize(
        "text",
        ["Work: had a meeting", "Work, call Bob", "Home Office printer is broken"],
    )
    def test_reclassifying_stripped_text_is_a_no_op(self, text: str) -> None:
        match = classify_project(text, PROJECTS)
        assert match is not None

        assert classify_project(match.stripped_text, PROJECTS) is None

    def test_nested_prefix_strips_one_level_at_a_time(self) -> None:
        first = classify_project("Home: Work: nested prefix", PROJECTS)
        assert first == ProjectMatch("Home", "Work: nested prefix")

        second = classify_project(first.stripped_text, PROJECTS)
        assert second == ProjectMatch("Work", "nested prefix")

    def test_name_that_changes_length_when_lowercased(self) -> None:
        match = classify_project("İstanbul trip planning", ["İstanbul"])

        assert match == ProjectMatch("İstanbul", "trip planning")

    def test_name_that_changes_length_with_separator(self) -> None:
        match = classify_project("İstanbul: book flights", ["İstanbul", "General"])

        assert match == ProjectMatch("İstanbul", "book flights")


def test_docstring_examples() -> None:
    results = doctest.testmod(projects)

    assert results.attempted > 0
    assert results.failed == 0
