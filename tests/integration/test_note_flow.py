"""Integration tests for the note capture and question flow.

Runs NoteService end to end against mongomock with mock models.
"""

from collections.abc import Iterator
from pathlib import Path

import mongomock
import pytest

from notebrain.config import TaskConfig
from notebrain.llm import MockLanguageModel
from notebrain.notes import AnswerComposer, EntityExtractor, NoteService, TaskStatus
from notebrain.notes.answer import NO_NOTES_MESSAGE
from notebrain.storage import (
    DefaultProjectError,
    MongoStorageClient,
    ProjectExistsError,
)
from notebrain.stt import MockTranscriber


@pytest.fixture
def storage() -> Iterator[MongoStorageClient]:
    """Create a storage client backed by mongomock."""
    client = MongoStorageClient(database_name="notebrain_test", client=mongomock.MongoClient())
    client.connect()
    yield client
    client.disconnect()


@pytest.fixture
def extraction_llm() -> MockLanguageModel:
    return MockLanguageModel(response="{}")


@pytest.fixture
def answer_llm() -> MockLanguageModel:
    return MockLanguageModel(response="You need to call Sarah about the budget.")


@pytest.fixture
def transcriber() -> MockTranscriber:
    return MockTranscriber("Work: call Sarah about the budget")


def build_service(
    storage: MongoStorageClient,
    extraction_llm: MockLanguageModel,
    answer_llm: MockLanguageModel,
    transcriber: MockTranscriber | None = None,
    task_config: TaskConfig | None = None,
) -> NoteService:
    return NoteService(
        notes=storage.notes,
        projects=storage.projects,
        tasks=storage.tasks,
        extractor=EntityExtractor(extraction_llm),
        composer=AnswerComposer(answer_llm),
        transcriber=transcriber,
        task_config=task_config,
    )


@pytest.fixture
def service(
    storage: MongoStorageClient,
    extraction_llm: MockLanguageModel,
    answer_llm: MockLanguageModel,
    transcriber: MockTranscriber,
) -> NoteService:
    return build_service(storage, extraction_llm, answer_llm, transcriber)


class TestNoteCaptureFlow:
    """Test complete note capture workflow."""

    def test_capture_into_project(
        self, service: NoteService, extraction_llm: MockLanguageModel
    ) -> None:
        """Test a project prefix assigns the project and is stripped."""
        service.create_project("Work")
        extraction_llm.set_response('{"people": ["Sarah"], "tasks": ["call Sarah about budget"]}')

        result = service.capture("Work: call Sarah about the budget")

        assert result.project.name == "Work"
        assert result.note.text == "call Sarah about the budget"
        assert result.note.project_id == result.project.id
        assert result.note.entities.people == ["Sarah"]
        assert [t.description for t in result.created_tasks] == ["call Sarah about budget"]
        assert result.suggestions == []
        assert "call Sarah about the budget" in extraction_llm.prompts[0]

    def test_capture_defaults_to_general(self, service: NoteService) -> None:
        """Test notes without a project prefix land in the default project."""
        result = service.capture("Random thought about gardening")

        assert result.project.name == "General"
        assert result.note.text == "Random thought about gardening"

    def test_capture_blank(self, service: NoteService) -> None:
        """Test blank notes are rejected."""
        with pytest.raises(ValueError):
            service.capture("   ")

    def test_extraction_failure_still_stores(
        self, service: NoteService, extraction_llm: MockLanguageModel, storage: MongoStorageClient
    ) -> None:
        """Test a broken extraction model does not lose the note."""
        extraction_llm.set_response("not json at all")

        result = service.capture("Lunch with Sarah")

        assert result.note.entities.is_empty()
        assert storage.notes.count() == 1

    def test_capture_audio(self, service: NoteService, tmp_path: Path) -> None:
        """Test audio notes go through transcription then capture."""
        service.create_project("Work")

        result = service.capture_audio(tmp_path / "memo.webm")

        assert result.project.name == "Work"
        assert result.note.text == "call Sarah about the budget"

    def test_capture_audio_without_transcriber(
        self, storage: MongoStorageClient, extraction_llm: MockLanguageModel, answer_llm: MockLanguageModel
    ) -> None:
        """Test audio capture needs a transcriber."""
        service = build_service(storage, extraction_llm, answer_llm)

        with pytest.raises(RuntimeError):
            service.capture_audio("memo.webm")


class TestTaskCompletionFlow:
    """Test completion suggestions and their confirmation."""

    def _capture_task(self, service: NoteService, extraction_llm: MockLanguageModel) -> str:
        extraction_llm.set_response('{"tasks": ["call Sarah"]}')
        result = service.capture("Need to call Sarah tomorrow")
        extraction_llm.set_response("{}")
        task_id = result.created_tasks[0].id
        assert task_id is not None
        return task_id

    def test_suggest_and_confirm(
        self, service: NoteService, extraction_llm: MockLanguageModel
    ) -> None:
        """Test a completion note is suggested, then confirmed."""
        task_id = self._capture_task(service, extraction_llm)

        result = service.capture("Called Sarah this morning")

        assert result.completion_keywords == ["called"]
        assert [s.task_id for s in result.suggestions] == [task_id]
        assert result.suggestions[0].confidence == 1.0
        assert result.auto_completed == []

        assert service.confirm_completion(task_id, result.note.id or "")
        assert service.pending_tasks() == []
        assert not service.confirm_completion(task_id, result.note.id or "")

    def test_reject_suggestion(
        self, service: NoteService, extraction_llm: MockLanguageModel, storage: MongoStorageClient
    ) -> None:
        """Test a rejected suggestion leaves the task pending."""
        task_id = self._capture_task(service, extraction_llm)
        result = service.capture("Called Sarah this morning")
        note_id = result.note.id or ""

        assert service.reject_completion(task_id, note_id)

        task = storage.tasks.get_by_id(task_id)
        assert task is not None
        assert task.status == TaskStatus.PENDING
        assert task.rejected_note_ids == [note_id]

    def test_rejected_note_cannot_confirm(
        self, service: NoteService, extraction_llm: MockLanguageModel, storage: MongoStorageClient
    ) -> None:
        """Test a rejected (task, note) pair stays rejected."""
        task_id = self._capture_task(service, extraction_llm)
        note_id = service.capture("Called Sarah this morning").note.id or ""
        assert service.reject_completion(task_id, note_id)

        assert not service.confirm_completion(task_id, note_id)
        assert not service.complete_task(task_id, note_id)

        task = storage.tasks.get_by_id(task_id)
        assert task is not None
        assert task.status == TaskStatus.PENDING

        # A different note may still complete it
        other = service.capture("Called Sarah again after lunch").note.id or ""
        assert service.confirm_completion(task_id, other)

    def test_task_cannot_be_completed_by_its_own_note(
        self, service: NoteService, extraction_llm: MockLanguageModel, storage: MongoStorageClient
    ) -> None:
        """Test the originating note is not a valid completer."""
        task_id = self._capture_task(service, extraction_llm)
        task = storage.tasks.get_by_id(task_id)
        assert task is not None

        assert not service.confirm_completion(task_id, task.note_id)
        assert not service.confirm_completion(task_id, "missing-note")
        assert len(service.pending_tasks()) == 1

    def test_auto_complete(
        self,
        storage: MongoStorageClient,
        extraction_llm: MockLanguageModel,
        answer_llm: MockLanguageModel,
    ) -> None:
        """Test full-confidence matches complete automatically when enabled."""
        service = build_service(
            storage,
            extraction_llm,
            answer_llm,
            task_config=TaskConfig(auto_complete=True, auto_complete_threshold=1.0),
        )
        task_id = self._capture_task(service, extraction_llm)

        result = service.capture("Called Sarah this morning")

        assert [t.id for t in result.auto_completed] == [task_id]
        assert result.auto_completed[0].completed_by == result.note.id
        assert result.suggestions == []
        assert service.pending_tasks() == []

    def test_auto_complete_below_threshold_is_suggested(
        self,
        storage: MongoStorageClient,
        extraction_llm: MockLanguageModel,
        answer_llm: MockLanguageModel,
    ) -> None:
        """Test partial matches stay suggestions."""
        service = build_service(
            storage,
            extraction_llm,
            answer_llm,
            task_config=TaskConfig(auto_complete=True, auto_complete_threshold=1.0),
        )
        extraction_llm.set_response('{"tasks": ["send budget report to finance"]}')
        service.capture("Remember to send the budget report to finance")
        extraction_llm.set_response("{}")

        result = service.capture("Sent the budget report")

        assert result.auto_completed == []
        assert len(result.suggestions) == 1
        assert result.suggestions[0].confidence == pytest.approx(0.5)

    def test_manual_completion(
        self, service: NoteService, extraction_llm: MockLanguageModel
    ) -> None:
        """Test completing a task without a completing note."""
        task_id = self._capture_task(service, extraction_llm)

        assert service.complete_task(task_id)
        assert not service.complete_task(task_id)


class TestQuestionFlow:
    """Test asking questions about stored notes."""

    def test_ask(
        self, service: NoteService, extraction_llm: MockLanguageModel, answer_llm: MockLanguageModel
    ) -> None:
        """Test answers are grounded in stored notes."""
        service.capture("Promised Sarah the budget draft by Friday")
        service.capture("Grocery list: milk and eggs")

        answer = service.ask("What did I promise Sarah?")

        assert answer.text.startswith("You need to call Sarah about the budget.")
        assert "Promised Sarah the budget draft by Friday" in answer_llm.prompts[0]
        assert answer.selection is not None
        assert answer.selection.total_count == 2

    def test_ask_without_notes(self, service: NoteService, answer_llm: MockLanguageModel) -> None:
        """Test the canned reply when nothing is stored."""
        assert service.ask("Anything?").text == NO_NOTES_MESSAGE
        assert answer_llm.call_count == 0

    def test_ask_blank(self, service: NoteService) -> None:
        """Test blank questions are rejected."""
        with pytest.raises(ValueError):
            service.ask("  ")

    def test_estimate_usage(self, service: NoteService) -> None:
        """Test the usage estimate counts stored notes."""
        service.capture("Budget draft for Sarah")

        estimate = service.estimate_usage("budget")

        assert estimate.total_notes == 1
        assert estimate.estimated_tokens > 0


class TestProjectFlow:
    """Test project management."""

    def test_duplicate_project(self, service: NoteService) -> None:
        service.create_project("Work")

        with pytest.raises(ProjectExistsError):
            service.create_project("WORK")

    def test_list_projects_includes_default(self, service: NoteService) -> None:
        service.create_project("Work")

        assert [p.name for p in service.list_projects()] == ["General", "Work"]

    def test_delete_project_moves_notes(self, service: NoteService) -> None:
        work = service.create_project("Work")
        service.capture("Work: first note")
        service.capture("Work: second note")
        service.capture("Unrelated note")

        moved = service.delete_project(work.id or "")

        assert moved == 2
        assert [p.name for p in service.list_projects()] == ["General"]
        general = service.list_projects()[0]
        assert len(service.project_notes(general.id or "")) == 3
        assert service.project_notes(work.id or "") == []

    def test_delete_default_project(self, service: NoteService) -> None:
        general = service.list_projects()[0]

        with pytest.raises(DefaultProjectError):
            service.delete_project(general.id or "")

    def test_deleted_project_no_longer_matches(self, service: NoteService) -> None:
        work = service.create_project("Work")
        service.delete_project(work.id or "")

        result = service.capture("Work: after deletion")

        assert result.project.name == "General"
        assert result.note.text == "Work: after deletion"


class TestNoteManagement:
    """Test deletion, search, and statistics."""

    def test_delete_note_cleans_up_tasks(
        self, service: NoteService, extraction_llm: MockLanguageModel, storage: MongoStorageClient
    ) -> None:
        extraction_llm.set_response('{"tasks": ["call Sarah"]}')
        origin = service.capture("Need to call Sarah").note
        extraction_llm.set_response("{}")
        task_id = service.pending_tasks()[0].id or ""
        completer = service.capture("Called Sarah").note
        assert service.confirm_completion(task_id, completer.id or "")

        assert service.delete_note(completer.id or "")
        task = storage.tasks.get_by_id(task_id)
        assert task is not None
        assert task.status == TaskStatus.COMPLETED
        assert task.completed_by is None

        assert service.delete_note(origin.id or "")
        assert storage.tasks.get_by_id(task_id) is None
        assert not service.delete_note(origin.id or "")

    def test_search(self, service: NoteService) -> None:
        service.capture("Budget review with Sarah")
        service.capture("Grocery list")

        assert [n.text for n in service.search("budget")] == ["Budget review with Sarah"]
        assert service.search("   ") == []

    def test_list_notes(self, service: NoteService) -> None:
        for text in ["first note", "second note", "third note"]:
            service.capture(text)

        assert len(service.list_notes()) == 3
        assert len(service.list_notes(limit=2)) == 2

    def test_stats(self, service: NoteService, extraction_llm: MockLanguageModel) -> None:
        extraction_llm.set_response('{"people": ["Sarah"], "tasks": ["send Sarah the notes"]}')
        service.capture("Lunch with Sarah")
        extraction_llm.set_response('{"people": ["sarah", "Bob"]}')
        service.capture("Met with sarah and Bob")
        task_id = service.pending_tasks()[0].id or ""
        assert service.complete_task(task_id)

        stats = service.stats(days=30)

        assert stats.total_notes == 2
        assert stats.unique_people == 2
        assert stats.total_tasks == 1
        assert stats.completed_tasks == 1
        assert stats.avg_words_per_note == 4.0

    def test_stats_empty(self, service: NoteService) -> None:
        stats = service.stats()

        assert stats.total_notes == 0
        assert stats.avg_words_per_note == 0.0
