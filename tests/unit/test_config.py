"""Unit tests for settings loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from panels.application.config import AppSettings, ConfigError, load_settings
from panels.application.config.loader import format_json_path, read_json_document
from panels.application.config.schema import DEFAULT_ADMIN_EMAIL


def _write(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestLoadSettings:
    def test_defaults(self) -> None:
        settings = load_settings(env={})
        assert settings.uses_memory_store
        assert settings.request_timeout == 10.0

    def test_file_values(self, tmp_path: Path) -> None:
        path = _write(tmp_path, {"store_url": "https://db.example.com", "request_timeout": 5})
        settings = load_settings(path, env={})
        assert settings.store_url == "https://db.example.com"
        assert not settings.uses_memory_store

    def test_environment_overrides_file(self, tmp_path: Path) -> None:
        path = _write(tmp_path, {"store_url": "https://file.example.com"})
        settings = load_settings(
            path,
            env={
                "PANELS_STORE_URL": "https://env.example.com",
                "PANELS_ADMIN_EMAILS": "A@example.com; b@example.com",
                "PANELS_REQUEST_TIMEOUT": "2.5",
            },
        )
        assert settings.store_url == "https://env.example.com"
        assert settings.admin_emails == ["a@example.com", "b@example.com"]
        assert settings.request_timeout == 2.5

    def test_empty_environment_value_ignored(self) -> None:
        settings = load_settings(env={"PANELS_STORE_URL": ""})
        assert settings.store_url is None

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_settings(tmp_path / "nope.json", env={})
        assert exc_info.value.error_type == "file_not_found"
        assert "Settings file not found" in str(exc_info.value)

    def test_bad_json(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError) as exc_info:
            load_settings(path, env={})
        assert exc_info.value.error_type == "json_parse"
        assert exc_info.value.details[0]["line"] == 1

    def test_non_object_json(self, tmp_path: Path) -> None:
        path = _write(tmp_path, [1, 2])
        with pytest.raises(ConfigError) as exc_info:
            load_settings(path, env={})
        assert exc_info.value.error_type == "validation"

    def test_validation_error_lists_paths(self, tmp_path: Path) -> None:
        path = _write(tmp_path, {"request_timeout": 0, "unknown_key": 1})
        with pytest.raises(ConfigError) as exc_info:
            load_settings(path, env={})
        paths = {detail["path"] for detail in exc_info.value.details}
        assert paths == {"request_timeout", "unknown_key"}
        assert exc_info.value.message.startswith("Configuration validation failed:")


class TestReadJsonDocument:
    def test_kind_in_message(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Import file not found"):
            read_json_document(tmp_path / "missing.json", kind="import file")


class TestAppSettings:
    def test_default_admin_always_allowed(self) -> None:
        settings = AppSettings(admin_emails=["boss@example.com"])
        assert settings.is_admin_email(" BOSS@example.com ")
        assert settings.is_admin_email(DEFAULT_ADMIN_EMAIL)
        assert not settings.is_admin_email("eve@example.com")
        assert not settings.is_admin_email(None)

    def test_admin_list_deduplicated(self) -> None:
        settings = AppSettings(admin_emails=[DEFAULT_ADMIN_EMAIL])
        assert settings.all_admin_emails() == [DEFAULT_ADMIN_EMAIL]


def test_format_json_path() -> None:
    assert format_json_path(("projects", 0, "designs", 2, "panel_type")) == (
        "projects[0].designs[2].panel_type"
    )
