"""YAML configuration loader with inheritance support.

Supports:
- Loading YAML config files
- Config inheritance via 'extends' key
- Deep merging of nested config
- Credentials and connection strings from the environment
"""

import os
from pathlib import Path
from typing import Any

import yaml

from . import (
    LLMConfig,
    LoggingConfig,
    NoteBrainConfig,
    ProjectConfig,
    RelevanceConfig,
    STTConfig,
    StorageConfig,
    TaskConfig,
    default_answer_config,
)
from .profiles import detect_profile

API_KEY_ENV_VAR = "ANTHROPIC_API_KEY"
MONGO_URI_ENV_VAR = "NOTEBRAIN_MONGO_URI"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    Values from override take precedence. Nested dicts are merged recursively.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_with_inheritance(path: Path) -> dict[str, Any]:
    """Load YAML file with inheritance support.

    If the file contains an 'extends' key, the base config is loaded first
    and merged with the current config.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        config = yaml.safe_load(f) or {}

    if "extends" in config:
        base_name = config.pop("extends")
        base_config = load_yaml_with_inheritance(path.parent / base_name)
        config = deep_merge(base_config, config)

    return config


def dict_to_config(data: dict[str, Any]) -> NoteBrainConfig:
    """Convert raw dict to typed NoteBrainConfig dataclass."""
    root = data.get("notebrain", {}) or {}

    # YAML gives None for empty sections
    def section(key: str) -> dict[str, Any]:
        value = root.get(key, {})
        return value if value is not None else {}

    answer = default_answer_config()
    for key, value in section("answer").items():
        setattr(answer, key, value)

    return NoteBrainConfig(
        relevance=RelevanceConfig(**section("relevance")),
        tasks=TaskConfig(**section("tasks")),
        projects=ProjectConfig(**section("projects")),
        stt=STTConfig(**section("stt")),
        extraction=LLMConfig(**section("extraction")),
        answer=answer,
        storage=StorageConfig(**section("storage")),
        logging=LoggingConfig(**section("logging")),
    )


def apply_env_overrides(config: NoteBrainConfig) -> NoteBrainConfig:
    """Fill credentials and connection settings from the environment.

    Values already present in the config file win.
    """
    api_key = os.environ.get(API_KEY_ENV_VAR, "").strip() or None
    for llm in (config.extraction, config.answer):
        if llm.provider == "anthropic" and not llm.api_key:
            llm.api_key = api_key

    mongo_uri = os.environ.get(MONGO_URI_ENV_VAR, "").strip()
    if mongo_uri:
        config.storage.uri = mongo_uri

    return config


class YAMLConfigLoader:
    """YAML configuration loader implementation."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize loader with optional config directory.

        Args:
            config_dir: Directory containing config files.
                        Defaults to 'config' relative to project root.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent.parent / "config"
        self._config_dir = config_dir

    def load(self, path: Path) -> NoteBrainConfig:
        """Load configuration from file path.

        Args:
            path: Path to YAML config file

        Returns:
            Parsed NoteBrainConfig
        """
        raw_config = load_yaml_with_inheritance(path)
        return apply_env_overrides(dict_to_config(raw_config))

    def load_profile(self, profile: str) -> NoteBrainConfig:
        """Load configuration by profile name.

        Args:
            profile: Profile name (e.g., 'dev', 'prod')

        Returns:
            Parsed NoteBrainConfig for the profile
        """
        return self.load(self._config_dir / f"{profile}.yaml")

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        return self._config_dir


def load_config(path: str | Path | None = None, profile: str | None = None) -> NoteBrainConfig:
    """Load notebrain configuration.

    Args:
        path: Direct path to config file (takes precedence)
        profile: Profile name ('dev', 'prod', 'test') if path not given

    Returns:
        Parsed NoteBrainConfig

    Examples:
        >>> config = load_config(profile="dev")
        >>> config = load_config(path="/path/to/config.yaml")
    """
    loader = YAMLConfigLoader()

    if path is not None:
        return loader.load(Path(path))
    if profile is not None:
        return loader.load_profile(profile)
    return loader.load_profile(detect_profile().value)


__all__ = [
    "API_KEY_ENV_VAR",
    "MONGO_URI_ENV_VAR",
    "YAMLConfigLoader",
    "apply_env_overrides",
    "deep_merge",
    "dict_to_config",
    "load_config",
    "load_yaml_with_inheritance",
]
