"""Revision naming commands."""

from typing import Annotated

import typer

from panels.domain.services.revisions import allocate_revision_name, next_revision_name

revision_app = typer.Typer(
    name="revision",
    help="Compute revision names for saved designs.",
)


@revision_app.command(name="next")
def next_name(
    name: Annotated[str, typer.Argument(help="Current name, e.g. 'Lobby (rev1)'")],
) -> None:
    """Print the revision that follows NAME.

    Example:
        panels revision next "Lobby (rev1)"
    """
    typer.echo(next_revision_name(name))


@revision_app.command(name="allocate")
def allocate(
    base: Annotated[str, typer.Argument(help="Base name of the design")],
    existing: Annotated[
        list[str] | None,
        typer.Option("--existing", "-x", help="Name already saved (repeatable)"),
    ] = None,
) -> None:
    """Print the next free revision name for BASE given existing names.

    Example:
        panels revision allocate Lobby -x "Lobby (rev0)" -x "Lobby (rev1)"
    """
    typer.echo(allocate_revision_name(base, existing or []))
