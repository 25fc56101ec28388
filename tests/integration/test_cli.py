"""Integration tests for the panels CLI.

These tests verify the commands end-to-end, including:
- validate-import exit codes for valid, invalid and unreadable documents
- import (real and dry run) against the installed service factory
- preview of a design with rule-breaking icons
- revision naming and design/BOQ listings
"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from panels.application.factory import ServiceFactory
from panels.cli.main import app
from panels.infrastructure.store import InMemoryStore

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures"
IMPORTS_PATH = FIXTURES_PATH / "imports"


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


class TestValidateImportCommand:
    """Tests for the validate-import command."""

    def test_valid_document(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate-import", str(IMPORTS_PATH / "valid_extended.json")])

        assert result.exit_code == 0
        assert "Validation passed (Harbour Hotel)." in result.output

    def test_invalid_document(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text('{"properties": [{"region": "North"}]}', encoding="utf-8")

        result = runner.invoke(app, ["validate-import", str(path)])

        assert result.exit_code == 1
        assert "Property 0: Missing property_name" in result.output
        assert "Validation failed." in result.output

    def test_warnings_only(self, runner: CliRunner, tmp_path: Path) -> None:
        """Users without a group are importable but reported."""
        path = tmp_path / "warn.json"
        path.write_text('{"properties": [], "users": [{"email": "a@b.c"}]}', encoding="utf-8")

        result = runner.invoke(app, ["validate-import", str(path)])

        assert result.exit_code == 2
        assert "Warnings:" in result.output
        assert "Suggestion:" in result.output

    def test_file_not_found(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate-import", str(IMPORTS_PATH / "nonexistent.json")])

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_invalid_json_syntax(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate-import", str(IMPORTS_PATH / "invalid_json.json")])

        assert result.exit_code == 1
        assert "Invalid JSON syntax" in result.output


class TestImportCommand:
    """Tests for the import command."""

    def test_import_writes_records(
        self, runner: CliRunner, installed_factory: ServiceFactory, store: InMemoryStore
    ) -> None:
        result = runner.invoke(
            app,
            ["import", str(IMPORTS_PATH / "minimal.json"), "--email", "alice@example.com"],
        )

        assert result.exit_code == 0
        assert "IMPORT REPORT" in result.output
        assert "Import completed!" in result.output
        assert len(store.tables["user_designs"]) == 2

    def test_dry_run(
        self, runner: CliRunner, installed_factory: ServiceFactory, store: InMemoryStore
    ) -> None:
        result = runner.invoke(
            app, ["import", str(IMPORTS_PATH / "valid_extended.json"), "--dry-run"]
        )

        assert result.exit_code == 0
        assert "Dry run: no records were written." in result.output
        assert "user_designs" not in store.tables

    def test_invalid_document_aborts(
        self, runner: CliRunner, installed_factory: ServiceFactory, tmp_path: Path
    ) -> None:
        path = tmp_path / "bad.json"
        path.write_text('{"projects": []}', encoding="utf-8")

        result = runner.invoke(app, ["import", str(path)])

        assert result.exit_code == 1
        assert "Import aborted: document is invalid." in result.output

    def test_bad_settings_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(
            app,
            [
                "--config",
                str(tmp_path / "missing.json"),
                "import",
                str(IMPORTS_PATH / "minimal.json"),
            ],
        )

        assert result.exit_code == 1
        assert "Settings file not found" in result.output


class TestPreviewCommand:
    def test_preview_reports_dropped_icons(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["preview", str(FIXTURES_PATH / "designs" / "sp_design.json")])

        assert result.exit_code == 0
        assert "SP PANEL" in result.output
        assert "Lobby" in result.output
        assert "Icons placed: 1" in result.output
        assert "cell 3: MUR" in result.output

    def test_preview_invalid_design(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "design.json"
        path.write_text('{"type": "ZZ"}', encoding="utf-8")

        result = runner.invoke(app, ["preview", str(path)])

        assert result.exit_code == 1
        assert "Invalid panel design" in result.output


class TestRevisionCommands:
    def test_next(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["revision", "next", "Lobby (rev1)"])
        assert result.exit_code == 0
        assert result.output.strip() == "Lobby (rev2)"

    def test_allocate(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["revision", "allocate", "Lobby", "-x", "Lobby (rev0)", "-x", "Lobby (rev1)"]
        )
        assert result.output.strip() == "Lobby (rev2)"

    def test_allocate_first(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["revision", "allocate", "Foo"])
        assert result.output.strip() == "Foo (rev0)"


class TestDesignsCommands:
    def test_list_and_boq(self, runner: CliRunner, installed_factory: ServiceFactory) -> None:
        imported = runner.invoke(
            app,
            ["import", str(IMPORTS_PATH / "minimal.json"), "-e", "alice@example.com"],
        )
        assert imported.exit_code == 0
        project_id = installed_factory.store.tables["user_projects"][0]["id"]

        listing = runner.invoke(app, ["designs", "list", "--email", "alice@example.com"])
        boq = runner.invoke(app, ["designs", "boq", project_id])

        assert "Bedside" in listing.output
        assert "Thermostat" in listing.output
        assert "BILL OF QUANTITIES" in boq.output
        assert "TAG (allocated 2 of 2, remaining 0)" in boq.output

    def test_list_empty(self, runner: CliRunner, installed_factory: ServiceFactory) -> None:
        result = runner.invoke(app, ["designs", "list", "-e", "nobody@example.com"])
        assert "No designs found." in result.output
