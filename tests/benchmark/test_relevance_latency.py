"""Benchmark tests for context selection latency.

Selection runs on every question before the answer model is called, so it
has to stay fast on a large note history.
"""

import time
from datetime import UTC, datetime, timedelta

import pytest

from notebrain.notes.models import Entities, Note
from notebrain.notes.relevance import select_relevant_context

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def history() -> list[Note]:
    """Build a large, varied note history."""
    topics = ["budget", "garden", "dentist", "offsite", "groceries", "invoice"]
    people = ["Sarah", "Bob", "Priya", "Chen"]
    return [
        Note(
            text=f"Note {i} about the {topics[i % len(topics)]} with {people[i % len(people)]}",
            timestamp=NOW - timedelta(hours=i),
            entities=Entities(people=[people[i % len(people)]], topics=[topics[i % len(topics)]]),
        )
        for i in range(5000)
    ]


class TestRelevanceLatency:
    """Benchmark relevance selection."""

    def test_selection_under_one_second(self, history: list[Note]) -> None:
        """Test selection over 5000 notes finishes well under a second."""
        start = time.perf_counter()
        selection = select_relevant_context("What did Sarah say about the budget?", history, now=NOW)
        elapsed = time.perf_counter() - start

        assert selection.used_count > 0
        assert selection.total_count == 5000
        assert len(selection.rendered_context) <= 3000
        assert elapsed < 1.0
