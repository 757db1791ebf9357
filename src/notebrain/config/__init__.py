"""Configuration module for notebrain.

This module provides typed configuration sections and profile loading.
"""

from dataclasses import dataclass, field


@dataclass
class RelevanceConfig:
    """Context selection budgets for question answering."""

    max_context_chars: int = 3000
    max_notes: int = 15
    fallback_notes: int = 5
    date_format: str = "%m/%d/%Y"


@dataclass
class TaskConfig:
    """Task completion policy."""

    auto_complete: bool = False
    auto_complete_threshold: float = 1.0


@dataclass
class ProjectConfig:
    """Project defaults."""

    default_project: str = "General"
    default_color: str = "#6B7280"


@dataclass
class STTConfig:
    """Speech-to-text configuration."""

    model: str = "base.en"
    device: str = "cpu"
    compute_type: str = "int8"
    beam_size: int = 5
    language: str = "en"
    max_file_mb: int = 25


@dataclass
class LLMConfig:
    """Language model configuration.

    Used twice: once for entity extraction and once for answers.
    """

    provider: str = "ollama"
    model: str = "llama3.2:3b"
    host: str = "http://localhost:11434"
    api_key: str | None = None
    max_tokens: int = 300
    temperature: float = 0.1
    timeout_seconds: float = 30.0


def default_answer_config() -> LLMConfig:
    """Answer model defaults: cloud model, longer output."""
    return LLMConfig(
        provider="anthropic",
        model="claude-3-5-haiku-latest",
        max_tokens=400,
        temperature=0.3,
    )


@dataclass
class StorageConfig:
    """MongoDB connection configuration."""

    uri: str = "mongodb://localhost:27017"
    database: str = "notebrain"
    connect_timeout_ms: int = 5000
    server_selection_timeout_ms: int = 5000


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"


@dataclass
class NoteBrainConfig:
    """Main notebrain configuration."""

    relevance: RelevanceConfig = field(default_factory=RelevanceConfig)
    tasks: TaskConfig = field(default_factory=TaskConfig)
    projects: ProjectConfig = field(default_factory=ProjectConfig)
    stt: STTConfig = field(default_factory=STTConfig)
    extraction: LLMConfig = field(default_factory=LLMConfig)
    answer: LLMConfig = field(default_factory=default_answer_config)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


__all__ = [
    "LLMConfig",
    "LoggingConfig",
    "NoteBrainConfig",
    "ProjectConfig",
    "RelevanceConfig",
    "STTConfig",
    "StorageConfig",
    "TaskConfig",
    "default_answer_config",
]
