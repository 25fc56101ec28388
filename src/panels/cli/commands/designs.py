"""Design listing and bill of quantities commands."""

import asyncio
from typing import Annotated

import typer

from panels.application.factory import get_factory
from panels.contracts.protocols import StoreError
from panels.infrastructure.formatters import BoqFormatter, format_design_table

designs_app = typer.Typer(
    name="designs",
    help="Inspect saved designs.",
)


@designs_app.command(name="list")
def list_designs(
    email: Annotated[str, typer.Option("--email", "-e", help="Owner email")],
) -> None:
    """List the active designs of a user, newest first."""
    result = asyncio.run(get_factory().get_design_service().get_designs(email))
    if not result.success:
        typer.echo(f"Error: {result.message}", err=True)
        raise typer.Exit(code=1)
    typer.echo(format_design_table(result.data["designs"]))


@designs_app.command(name="boq")
def show_boq(
    project_ids: Annotated[
        list[str],
        typer.Argument(help="Project ids (or property codes of proposal imports)"),
    ],
) -> None:
    """Show the bill of quantities for one or more projects."""
    service = get_factory().get_boq_service()
    try:
        groups = asyncio.run(service.boq_groups(project_ids))
    except StoreError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(BoqFormatter().format(groups))
