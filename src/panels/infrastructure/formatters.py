"""Text formatters for panel grids, import reports and BOQ tables."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from panels.domain.services.cart import BoqGroup
from panels.domain.services.placement import PanelGrid

if TYPE_CHECKING:
    from panels.application.importer.report import ImportReport


class PanelGridFormatter:
    """Renders a panel grid as an ASCII diagram.

    Each physical panel is drawn as its own block of rows; a cell shows
    the icon id, its caption, or both.
    """

    def __init__(self, cell_width: int = 14) -> None:
        self._cell_width = cell_width

    def _cell(self, grid: PanelGrid, index: int) -> str:
        placed = grid.icon_at(index)
        text = grid.text_at(index)
        if placed is not None and text:
            content = f"{placed.icon_id}:{text}"
        elif placed is not None:
            content = placed.icon_id
        else:
            content = text
        if not content and index == grid.shape.pir_cell:
            content = "(pir)"
        return content[: self._cell_width].center(self._cell_width)

    def format(self, grid: PanelGrid, title: str = "PANEL") -> str:
        shape = grid.shape
        columns = shape.columns
        border = "+" + "+".join("-" * self._cell_width for _ in range(columns)) + "+"
        lines = [title, "=" * 70]

        span = shape.panel_span
        for start in range(0, shape.cells, span):
            if shape.cells > span:
                lines.append(f"Panel {start // span + 1}")
            lines.append(border)
            for row_start in range(start, min(start + span, shape.cells), columns):
                cells = [
                    self._cell(grid, index)
                    for index in range(row_start, min(row_start + columns, shape.cells))
                ]
                lines.append("|" + "|".join(cells) + "|")
                lines.append(border)

        lines.append(f"Icons placed: {len(grid.icons)}")
        return "\n".join(lines)


class ImportReportFormatter:
    """Formats an import report for display."""

    def format(self, report: ImportReport) -> str:
        lines = [
            "IMPORT REPORT",
            "=" * 70,
            f"{'Properties created:':<28}{report.properties_created:>6}",
            f"{'User groups created:':<28}{report.user_groups_created:>6}",
            f"{'Users created:':<28}{report.users_created:>6}",
            f"{'Projects created:':<28}{report.projects_created:>6}",
            f"{'Designs created:':<28}{report.designs_created:>6}",
            f"{'Configurations created:':<28}{report.configurations_created:>6}",
            "-" * 70,
        ]
        if report.errors:
            lines.append(f"Errors ({len(report.errors)}):")
            lines.extend(f"  - {error}" for error in report.errors)
        else:
            lines.append("No errors.")
        if report.message:
            lines.append("")
            lines.append(report.message)
        return "\n".join(lines)


class BoqFormatter:
    """Formats BOQ groups as a per-panel-type allocation table."""

    def format(self, groups: list[BoqGroup]) -> str:
        if not groups:
            return "No designs in BOQ."

        lines = [
            "BILL OF QUANTITIES",
            "=" * 70,
            f"{'Design':<36} {'Project':<20} {'Qty':>5} {'Max':>5}",
            "-" * 70,
        ]
        for group in groups:
            lines.append(
                f"{group.panel_type} (allocated {group.total_quantity} of "
                f"{group.fixed_total}, remaining {group.remaining})"
            )
            for line in group.lines:
                lines.append(
                    f"  {line.design_name[:34]:<34} {line.project_name[:20]:<20} "
                    f"{line.quantity:>5} {line.max_quantity:>5}"
                )
        lines.append("=" * 70)
        total = sum(group.total_quantity for group in groups)
        fixed = sum(group.fixed_total for group in groups)
        lines.append(f"{'TOTAL':<57} {total:>5} {fixed:>5}")
        return "\n".join(lines)


def format_design_table(rows: list[dict[str, Any]]) -> str:
    """Format saved design rows as a listing."""
    if not rows:
        return "No designs found."
    lines = [
        f"{'Name':<36} {'Type':<8} {'Modified':<25}",
        "-" * 70,
    ]
    for row in rows:
        name = str(row.get("design_name") or "")[:36]
        panel_type = str(row.get("panel_type") or "")
        modified = str(row.get("last_modified") or row.get("created_at") or "")[:25]
        lines.append(f"{name:<36} {panel_type:<8} {modified:<25}")
    return "\n".join(lines)
