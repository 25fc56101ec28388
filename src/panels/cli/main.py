"""Typer CLI for the panel configurator."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from panels.application.config import ConfigError, load_settings
from panels.application.factory import ServiceFactory, set_factory
from panels.cli.commands import (
    designs_app,
    import_command,
    preview_command,
    revision_app,
    validate_import_command,
)

app = typer.Typer(
    name="panels",
    help="Design hotel switch panels, import projects and compute quantities.",
)

app.command(name="import")(import_command)
app.command(name="validate-import")(validate_import_command)
app.command(name="preview")(preview_command)
app.add_typer(revision_app, name="revision")
app.add_typer(designs_app, name="designs")


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log debug output")
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="JSON settings file"),
    ] = None,
) -> None:
    """Configure logging; an explicit settings file replaces the default factory.

    Without --config, settings come from PANELS_* environment variables the
    first time a command needs the store.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    if config is None:
        return
    try:
        settings = load_settings(config)
    except ConfigError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1)
    set_factory(ServiceFactory(settings=settings))


if __name__ == "__main__":
    app()
