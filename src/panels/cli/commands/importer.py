"""Import commands for loading bulk JSON documents.

This module provides the `import` command, which loads properties, user
groups, users, projects and designs from a JSON document, and the
`validate-import` command, which checks such a document without writing.
"""

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from panels.application.config import ConfigError
from panels.application.factory import get_factory
from panels.application.importer import (
    ValidationResult,
    extract_display_name,
    load_import_document,
    validate_import_data,
)
from panels.infrastructure.formatters import ImportReportFormatter


def _display_load_error(error: ConfigError) -> None:
    """Display an import file loading error."""
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            line = detail.get("line", "?")
            column = detail.get("column", "?")
            message = detail.get("message", "Unknown error")
            typer.echo(f"    Line {line}, Column {column}: {message}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)


def _display_validation_result(result: ValidationResult) -> None:
    if result.errors:
        typer.echo("Errors:", err=True)
        for error in result.errors:
            typer.echo(f"  {error.path}: {error.message}", err=True)
    if result.warnings:
        typer.echo("Warnings:")
        for warning in result.warnings:
            typer.echo(f"  {warning.path}: {warning.message}")
            if warning.suggestion:
                typer.echo(f"    Suggestion: {warning.suggestion}")


def validate_import_command(
    import_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON import document"),
    ],
) -> None:
    """Validate an import document without importing it.

    Exit codes:
        0 - Document is valid with no warnings
        1 - Document has errors (cannot be imported)
        2 - Document is valid but has warnings

    Example:
        panels validate-import hotel.json
    """
    typer.echo(f"Validating {import_file}...")
    try:
        data = load_import_document(import_file)
    except ConfigError as e:
        _display_load_error(e)
        raise typer.Exit(code=1)

    result = validate_import_data(data)
    _display_validation_result(result)
    if result.is_valid:
        name = extract_display_name(data)
        suffix = f" ({name})" if name else ""
        typer.echo(f"Validation passed{suffix}.")
    else:
        typer.echo("Validation failed.", err=True)
    raise typer.Exit(code=result.exit_code)


def import_command(
    import_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON import document"),
    ],
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Run against an empty in-memory store; nothing is written"),
    ] = False,
    email: Annotated[
        str | None,
        typer.Option("--email", "-e", help="Owner of records that name none"),
    ] = None,
) -> None:
    """Import properties, projects and designs from a JSON document.

    Example:
        panels import hotel.json --email planner@example.com
    """
    try:
        data = load_import_document(import_file)
    except ConfigError as e:
        _display_load_error(e)
        raise typer.Exit(code=1)

    validation = validate_import_data(data)
    if not validation.is_valid:
        _display_validation_result(validation)
        typer.echo("Import aborted: document is invalid.", err=True)
        raise typer.Exit(code=1)

    importer = get_factory().create_importer(dry_run=dry_run)
    report = asyncio.run(importer.run(data, owner_email=email))

    if dry_run:
        typer.echo("Dry run: no records were written.")
    typer.echo(ImportReportFormatter().format(report))
    if not report.success:
        raise typer.Exit(code=1)
