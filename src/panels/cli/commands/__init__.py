"""CLI command implementations for the panels application.

This package contains subcommands for the panels CLI, including:
- import / validate-import: Bulk JSON import
- revision: Revision naming helpers
- preview: Render a panel design
- designs: List designs and show the bill of quantities
"""

from panels.cli.commands.designs import designs_app
from panels.cli.commands.importer import import_command, validate_import_command
from panels.cli.commands.preview import preview_command
from panels.cli.commands.revision import revision_app

__all__ = [
    "designs_app",
    "import_command",
    "preview_command",
    "revision_app",
    "validate_import_command",
]
