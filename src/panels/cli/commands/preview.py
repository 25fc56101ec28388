"""Preview command: render a saved panel design as a grid diagram."""

from pathlib import Path
from typing import Annotated

import typer

from panels.application.config import ConfigError, read_json_document
from panels.application.designs import DesignDataError, parse_panel_design
from panels.infrastructure.formatters import PanelGridFormatter


def preview_command(
    design_file: Annotated[
        Path,
        typer.Argument(help="Path to a JSON panel design"),
    ],
) -> None:
    """Replay a design through the placement rules and draw the grid.

    Icons that break a placement rule are reported and left out.

    Example:
        panels preview lobby-sp.json
    """
    try:
        data = read_json_document(design_file, kind="design file")
        design = parse_panel_design(data)
    except ConfigError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1)
    except DesignDataError as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(code=1)

    grid = design.to_grid()
    typer.echo(PanelGridFormatter().format(grid, title=f"{design.type} PANEL"))

    dropped = [
        icon for icon in design.icons if icon.icon_id and grid.icon_at(icon.position) is None
    ]
    if dropped:
        typer.echo()
        typer.echo("Dropped (placement rule violated):", err=True)
        for icon in dropped:
            typer.echo(f"  cell {icon.position}: {icon.icon_id}", err=True)
