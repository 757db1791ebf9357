"""Unit tests for configuration loading and profile management."""

import os
from pathlib import Path
from unittest import mock

import pytest
import yaml

from notebrain.config import NoteBrainConfig
from notebrain.config.loader import (
    API_KEY_ENV_VAR,
    MONGO_URI_ENV_VAR,
    YAMLConfigLoader,
    apply_env_overrides,
    deep_merge,
    dict_to_config,
    load_config,
    load_yaml_with_inheritance,
)
from notebrain.config.profiles import PROFILE_ENV_VAR, Profile, detect_profile


def _env_without(*names: str) -> dict[str, str]:
    return {k: v for k, v in os.environ.items() if k not in names}


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_simple_merge(self) -> None:
        """Test merging flat dictionaries."""
        assert deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4}) == {"a": 1, "b": 3, "c": 4}

    def test_nested_merge(self) -> None:
        """Test merging nested dictionaries."""
        base = {"outer": {"a": 1, "b": 2}}
        override = {"outer": {"b": 3, "c": 4}}
        assert deep_merge(base, override) == {"outer": {"a": 1, "b": 3, "c": 4}}

    def test_override_replaces_non_dict(self) -> None:
        """Test that non-dict values are replaced."""
        assert deep_merge({"a": {"nested": 1}}, {"a": "replaced"}) == {"a": "replaced"}

    def test_base_is_not_mutated(self) -> None:
        """Test that merging leaves the base untouched."""
        base = {"a": {"b": 1}}
        deep_merge(base, {"a": {"b": 2}})
        assert base == {"a": {"b": 1}}


class TestYAMLLoading:
    """Tests for YAML config loading."""

    def test_load_with_inheritance(self, tmp_path: Path) -> None:
        """Test loading YAML with extends keyword."""
        (tmp_path / "base.yaml").write_text(
            yaml.dump({"notebrain": {"relevance": {"max_notes": 15, "fallback_notes": 5}}})
        )
        (tmp_path / "child.yaml").write_text(
            yaml.dump({"extends": "base.yaml", "notebrain": {"relevance": {"max_notes": 8}}})
        )

        result = load_yaml_with_inheritance(tmp_path / "child.yaml")

        assert result["notebrain"]["relevance"] == {"max_notes": 8, "fallback_notes": 5}
        assert "extends" not in result

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_yaml_with_inheritance(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test that an empty file loads as an empty dict."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_yaml_with_inheritance(path) == {}


class TestDictToConfig:
    """Tests for dict_to_config."""

    def test_defaults(self) -> None:
        """Test an empty dict gives the default configuration."""
        config = dict_to_config({})

        assert isinstance(config, NoteBrainConfig)
        assert config.relevance.max_context_chars == 3000
        assert config.relevance.max_notes == 15
        assert config.relevance.fallback_notes == 5
        assert config.tasks.auto_complete is False
        assert config.projects.default_project == "General"
        assert config.extraction.provider == "ollama"
        assert config.extraction.max_tokens == 300
        assert config.answer.provider == "anthropic"
        assert config.answer.max_tokens == 400
        assert config.answer.temperature == 0.3

    def test_answer_overrides_keep_answer_defaults(self) -> None:
        """Test that a partial answer section keeps the answer-model defaults."""
        config = dict_to_config({"notebrain": {"answer": {"model": "claude-other"}}})

        assert config.answer.model == "claude-other"
        assert config.answer.provider == "anthropic"
        assert config.answer.max_tokens == 400

    def test_empty_sections(self) -> None:
        """Test that empty YAML sections fall back to defaults."""
        config = dict_to_config({"notebrain": {"storage": None, "tasks": None}})

        assert config.storage.database == "notebrain"
        assert config.tasks.auto_complete_threshold == 1.0


class TestEnvOverrides:
    """Tests for credentials and URIs from the environment."""

    def test_api_key_goes_to_anthropic_models_only(self) -> None:
        """Test the API key is only given to cloud models."""
        config = dict_to_config({})

        with mock.patch.dict(os.environ, {API_KEY_ENV_VAR: "sk-test"}):
            apply_env_overrides(config)

        assert config.answer.api_key == "sk-test"
        assert config.extraction.api_key is None

    def test_config_file_key_wins(self) -> None:
        """Test an explicit key is not replaced."""
        config = dict_to_config({"notebrain": {"answer": {"api_key": "from-file"}}})

        with mock.patch.dict(os.environ, {API_KEY_ENV_VAR: "from-env"}):
            apply_env_overrides(config)

        assert config.answer.api_key == "from-file"

    def test_mongo_uri(self) -> None:
        """Test the MongoDB URI override."""
        config = dict_to_config({})

        with mock.patch.dict(os.environ, {MONGO_URI_ENV_VAR: "mongodb://db:27017"}):
            apply_env_overrides(config)

        assert config.storage.uri == "mongodb://db:27017"


class TestProfiles:
    """Tests for profile detection and bundled profiles."""

    def test_detect_profile_from_env(self) -> None:
        """Test NOTEBRAIN_PROFILE selects the profile."""
        with mock.patch.dict(os.environ, {PROFILE_ENV_VAR: "PROD"}):
            assert detect_profile() == Profile.PROD

    def test_detect_profile_default(self) -> None:
        """Test the default profile is dev."""
        with mock.patch.dict(os.environ, _env_without(PROFILE_ENV_VAR), clear=True):
            assert detect_profile() == Profile.DEV

    def test_detect_profile_unknown(self) -> None:
        """Test unknown values fall back to dev."""
        with mock.patch.dict(os.environ, {PROFILE_ENV_VAR: "staging"}):
            assert detect_profile() == Profile.DEV

    def test_loader_config_dir(self) -> None:
        """Test the loader finds the bundled config directory."""
        assert (YAMLConfigLoader().get_config_dir() / "base.yaml").exists()

    @pytest.mark.parametrize("profile", ["dev", "prod", "test"])
    def test_bundled_profiles_load(self, profile: str) -> None:
        """Test every bundled profile parses into a config."""
        with mock.patch.dict(os.environ, _env_without(API_KEY_ENV_VAR, MONGO_URI_ENV_VAR), clear=True):
            config = load_config(profile=profile)

        assert isinstance(config, NoteBrainConfig)

    def test_test_profile_uses_mocks(self) -> None:
        """Test the test profile never needs real models."""
        config = load_config(profile="test")

        assert config.extraction.provider == "mock"
        assert config.answer.provider == "mock"
        assert config.storage.database == "notebrain_test"

    def test_prod_profile_auto_completes(self) -> None:
        """Test the prod profile enables auto-completion."""
        assert load_config(profile="prod").tasks.auto_complete is True
