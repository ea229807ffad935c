"""Tests for config loading and the Pydantic config schema."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from src.config import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    get,
    get_validated_config,
    load_config,
    set_config_value,
)
from src.config_schema import AppConfig, RegistryConfig, load_validated_config, validate_config_dict


def write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return path


class TestSchemaDefaults:
    def test_empty_config_is_valid(self) -> None:
        config = validate_config_dict({})
        assert config.registry.root_authority == "SYSTEM"
        assert config.registry.validation_mode == "strict"
        assert config.logging.default_recent == 50
        assert config.checkpoint.checkpoint_file == "registry_checkpoint.json"

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_config_dict({"registry": {"root_authorty": "X"}})

    def test_unknown_section_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_config_dict({"dashboard": {}})

    def test_blank_root_authority_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RegistryConfig(root_authority="  ")

    def test_invalid_validation_mode(self) -> None:
        with pytest.raises(ValidationError):
            validate_config_dict({"registry": {"validation_mode": "lenient"}})

    def test_default_recent_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            validate_config_dict({"logging": {"default_recent": 0}})

    def test_shipped_config_is_valid(self) -> None:
        assert isinstance(load_validated_config(DEFAULT_CONFIG_PATH), AppConfig)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_validated_config(tmp_path / "absent.yaml")


class TestLoadConfig:
    def test_load_from_path(self, tmp_path: Path) -> None:
        path = write_config(tmp_path, "registry:\n  root_authority: ROOT\n")
        load_config(path)
        assert get("registry.root_authority") == "ROOT"
        assert get("logging.level") == "INFO"

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = write_config(tmp_path, "registry:\n  validation_mode: warn\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert get_validated_config().registry.validation_mode == "warn"

    def test_explicit_path_beats_env_var(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "absent.yaml"))
        path = write_config(tmp_path, "{}\n")
        load_config(path)
        assert get("registry.root_authority") == "SYSTEM"

    def test_get_missing_key_returns_default(self) -> None:
        assert get("registry.nope", "fallback") == "fallback"
        assert get("nope.deeper") is None


class TestSetConfigValue:
    def test_override(self) -> None:
        set_config_value("registry.root_authority", "ADMIN")
        assert get("registry.root_authority") == "ADMIN"
        assert get_validated_config().registry.root_authority == "ADMIN"

    def test_invalid_override_keeps_previous(self) -> None:
        set_config_value("logging.default_recent", 5)
        with pytest.raises(ValidationError):
            set_config_value("logging.default_recent", -1)
        assert get("logging.default_recent") == 5

    def test_service_picks_up_override(self) -> None:
        from src.registry import RegistryService

        set_config_value("registry.root_authority", "ADMIN")
        assert RegistryService().fetch_metrics()["root_authority"] == "ADMIN"
