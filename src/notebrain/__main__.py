"""notebrain command line entry point.

Usage:
    python -m notebrain [OPTIONS] COMMAND [ARGS]

Options:
    --config PATH    Path to YAML config file
    --profile NAME   Profile name (dev, prod, test)
    --mock           Use mock language models and transcriber
    --version        Show version
"""

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from dotenv import load_dotenv
from pymongo.errors import PyMongoError

from . import __version__
from .config import NoteBrainConfig
from .config.loader import load_config
from .config.profiles import detect_profile
from .llm import LLMError, create_language_model
from .notes import AnswerComposer, EntityExtractor, Note, NoteService
from .notes.service import CaptureResult
from .storage import MongoStorageClient, StorageError
from .stt import TranscriptionError, create_transcriber

# Load .env from the project root (parent of src/), else the working directory
_env_file = Path(__file__).parent.parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    load_dotenv()

logger = logging.getLogger("notebrain")


def setup_logging(level: str) -> None:
    """Configure logging based on config."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="notebrain",
        description="notebrain - ask questions about your own notes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m notebrain record --text "Work: call Sarah about the budget"
  python -m notebrain record --audio memo.m4a
  python -m notebrain ask "What do I need to tell Sarah?"
  python -m notebrain projects add Garden --description "Backyard work"
  python -m notebrain --profile prod stats --days 7

Environment:
  NOTEBRAIN_PROFILE    Set profile (dev, prod, test)
  ANTHROPIC_API_KEY    API key for the answer model
  NOTEBRAIN_MONGO_URI  MongoDB connection URI
""",
    )

    parser.add_argument("--config", type=Path, help="Path to YAML config file", metavar="PATH")
    parser.add_argument(
        "--profile",
        choices=["dev", "prod", "test"],
        help="Configuration profile to use",
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use mock language models and transcriber (no Ollama, Claude, or Whisper)",
    )
    parser.add_argument("--version", action="version", version=f"notebrain v{__version__}")

    commands = parser.add_subparsers(dest="command", required=True)

    record = commands.add_parser("record", help="Capture a note")
    source = record.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", help="Note text")
    source.add_argument("--audio", type=Path, metavar="PATH", help="Audio file to transcribe")

    ask = commands.add_parser("ask", help="Ask a question about your notes")
    ask.add_argument("question", help="Question text")
    ask.add_argument("--estimate", action="store_true", help="Only estimate token usage and cost")

    notes = commands.add_parser("notes", help="List or search notes")
    notes.add_argument("--search", metavar="TEXT", help="Case-insensitive text search")
    notes.add_argument("--project", metavar="NAME", help="Only notes in this project")
    notes.add_argument("--limit", type=int, default=20, help="Maximum notes to show")

    delete = commands.add_parser("delete", help="Delete a note")
    delete.add_argument("note_id")

    commands.add_parser("tasks", help="List pending tasks")

    complete = commands.add_parser("complete", help="Mark a task completed")
    complete.add_argument("task_id")
    complete.add_argument("--note", metavar="NOTE_ID", help="Note that completed the task")

    reject = commands.add_parser("reject", help="Reject a completion suggestion")
    reject.add_argument("task_id")
    reject.add_argument("note_id")

    projects = commands.add_parser("projects", help="Manage projects")
    project_commands = projects.add_subparsers(dest="project_command", required=True)
    project_commands.add_parser("list", help="List active projects")
    add = project_commands.add_parser("add", help="Create a project")
    add.add_argument("name")
    add.add_argument("--description", default="")
    add.add_argument("--color", default="#3B82F6")
    remove = project_commands.add_parser("delete", help="Delete a project (notes move to the default)")
    remove.add_argument("project", help="Project name or ID")

    stats = commands.add_parser("stats", help="Show activity statistics")
    stats.add_argument("--days", type=int, default=30, help="Window size in days")

    commands.add_parser("health", help="Check database connectivity")

    return parser


def build_service(
    config: NoteBrainConfig, storage: MongoStorageClient, use_mock: bool = False
) -> NoteService:
    """Wire a NoteService from configuration and a connected storage client."""
    extractor = EntityExtractor(
        create_language_model(config.extraction, use_mock=use_mock),
        max_tokens=config.extraction.max_tokens,
    )
    composer = AnswerComposer(
        create_language_model(config.answer, use_mock=use_mock),
        config.relevance,
    )
    return NoteService(
        notes=storage.notes,
        projects=storage.projects,
        tasks=storage.tasks,
        extractor=extractor,
        composer=composer,
        transcriber=create_transcriber(config.stt, use_mock=use_mock),
        task_config=config.tasks,
        project_config=config.projects,
    )


def format_note(note: Note) -> str:
    return f"{note.id}  [{note.timestamp:%Y-%m-%d %H:%M}] {note.text}"


def print_capture(result: CaptureResult) -> None:
    print(f"Saved note {result.note.id} to {result.project.name}")
    entities = result.note.entities.to_dict()
    for category, values in entities.items():
        if values:
            print(f"  {category}: {', '.join(values)}")
    for task in result.created_tasks:
        print(f"  New task {task.id}: {task.description}")
    for task in result.auto_completed:
        print(f"  Completed task {task.id}: {task.description}")
    for candidate in result.suggestions:
        print(
            f"  Might complete task {candidate.task_id} "
            f"(matched {', '.join(candidate.matched_words)}, {candidate.confidence:.0%}). "
            f"Confirm: notebrain complete {candidate.task_id} --note {result.note.id}"
        )


def cmd_record(service: NoteService, args: argparse.Namespace) -> int:
    if args.audio is not None:
        result = service.capture_audio(args.audio)
    else:
        result = service.capture(args.text)
    print_capture(result)
    return 0


def cmd_ask(service: NoteService, args: argparse.Namespace) -> int:
    if args.estimate:
        estimate = service.estimate_usage(args.question)
        print(f"Notes: {estimate.total_notes} ({estimate.relevant_notes} relevant)")
        print(f"Estimated tokens: {estimate.estimated_tokens}")
        print(f"Estimated cost: ${estimate.estimated_cost_usd:.6f}")
        return 0

    print(service.ask(args.question).text)
    return 0


def _find_project_id(service: NoteService, name_or_id: str) -> str | None:
    for project in service.list_projects():
        if project.id == name_or_id or project.name.lower() == name_or_id.strip().lower():
            return project.id
    return None


def cmd_notes(service: NoteService, args: argparse.Namespace) -> int:
    if args.search:
        notes = service.search(args.search)
    elif args.project:
        project_id = _find_project_id(service, args.project)
        if project_id is None:
            print(f"Unknown project: {args.project}", file=sys.stderr)
            return 1
        notes = service.project_notes(project_id)
    else:
        notes = service.list_notes()

    for note in notes[: args.limit]:
        print(format_note(note))
    if not notes:
        print("No notes found.")
    return 0


def cmd_delete(service: NoteService, args: argparse.Namespace) -> int:
    if not service.delete_note(args.note_id):
        print(f"Note not found: {args.note_id}", file=sys.stderr)
        return 1
    print(f"Deleted note {args.note_id}")
    return 0


def cmd_tasks(service: NoteService, args: argparse.Namespace) -> int:
    tasks = service.pending_tasks()
    for task in tasks:
        print(f"{task.id}  [{task.created_at:%Y-%m-%d}] {task.description}")
    if not tasks:
        print("No pending tasks.")
    return 0


def cmd_complete(service: NoteService, args: argparse.Namespace) -> int:
    if not service.complete_task(args.task_id, args.note):
        print(f"Task {args.task_id} was not completed", file=sys.stderr)
        return 1
    print(f"Completed task {args.task_id}")
    return 0


def cmd_reject(service: NoteService, args: argparse.Namespace) -> int:
    if not service.reject_completion(args.task_id, args.note_id):
        print(f"No pending task {args.task_id}", file=sys.stderr)
        return 1
    print(f"Note {args.note_id} will not be suggested for task {args.task_id} again")
    return 0


def cmd_projects(service: NoteService, args: argparse.Namespace) -> int:
    if args.project_command == "add":
        project = service.create_project(args.name, args.description, args.color)
        print(f"Created project {project.name} ({project.id})")
        return 0

    if args.project_command == "delete":
        project_id = _find_project_id(service, args.project)
        if project_id is None:
            print(f"Unknown project: {args.project}", file=sys.stderr)
            return 1
        moved = service.delete_project(project_id)
        print(f"Deleted project {args.project}, moved {moved} notes")
        return 0

    for project in service.list_projects():
        count = len(service.project_notes(project.id or ""))
        print(f"{project.id}  {project.name} ({count} notes) {project.description}".rstrip())
    return 0


def cmd_stats(service: NoteService, args: argparse.Namespace) -> int:
    stats = service.stats(args.days)
    print(f"Last {stats.days} days")
    print(f"  Notes: {stats.total_notes}")
    print(f"  People mentioned: {stats.unique_people}")
    print(f"  Tasks: {stats.completed_tasks}/{stats.total_tasks} completed")
    print(f"  Average words per note: {stats.avg_words_per_note}")
    return 0


COMMANDS: dict[str, Callable[[NoteService, argparse.Namespace], int]] = {
    "record": cmd_record,
    "ask": cmd_ask,
    "notes": cmd_notes,
    "delete": cmd_delete,
    "tasks": cmd_tasks,
    "complete": cmd_complete,
    "reject": cmd_reject,
    "projects": cmd_projects,
    "stats": cmd_stats,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point for notebrain.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = build_parser().parse_args(argv)

    # Load configuration
    try:
        if args.config:
            config = load_config(path=args.config)
        else:
            config = load_config(profile=args.profile or detect_profile().value)
    except FileNotFoundError as e:
        print(f"Error: Config file not found: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging.level)
    logger.debug(f"notebrain v{__version__}, database {config.storage.database}")

    storage = MongoStorageClient(
        uri=config.storage.uri,
        database_name=config.storage.database,
        connect_timeout_ms=config.storage.connect_timeout_ms,
        server_selection_timeout_ms=config.storage.server_selection_timeout_ms,
    )

    try:
        storage.connect()
    except PyMongoError as e:
        if args.command == "health":
            print(f"MongoDB: unreachable ({e})")
        else:
            print(f"Error: cannot reach MongoDB at {config.storage.uri}: {e}", file=sys.stderr)
        return 1

    try:
        if args.command == "health":
            print(f"MongoDB: {'ok' if storage.health_check() else 'unreachable'}")
            print(f"Notes stored: {storage.notes.count()}")
            return 0

        service = build_service(config, storage, use_mock=args.mock)
        return COMMANDS[args.command](service, args)
    except (ValueError, StorageError, TranscriptionError, LLMError, PyMongoError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        storage.disconnect()


if __name__ == "__main__":
    sys.exit(main())
