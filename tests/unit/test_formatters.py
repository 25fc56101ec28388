"""Unit tests for text formatters and image helpers."""

from __future__ import annotations

import pytest

from panels.application.importer.report import ImportReport
from panels.domain.services.cart import BoqGroup, BoqLine
from panels.domain.services.placement import PanelGrid
from panels.domain.value_objects import IconSpec, grid_shape_for
from panels.infrastructure.formatters import (
    BoqFormatter,
    ImportReportFormatter,
    PanelGridFormatter,
    format_design_table,
)
from panels.infrastructure.images import (
    JPEG_SIGNATURE,
    MAX_IMAGE_BYTES,
    PNG_SIGNATURE,
    UnsupportedImageError,
    detect_image_type,
    to_data_url,
)

LIGHT = IconSpec(id="MasterLight", label="Master Light", category="Room Lights")


class TestPanelGridFormatter:
    def test_standard_grid(self) -> None:
        grid = PanelGrid()
        grid.place_icon(0, LIGHT)
        grid.set_text(4, "Lobby")

        output = PanelGridFormatter().format(grid, title="SP")

        lines = output.splitlines()
        assert lines[0] == "SP"
        assert "MasterLight" in lines[3]
        assert "Lobby" in output
        assert "(pir)" in output
        assert lines[-1] == "Icons placed: 1"

    def test_double_panel_draws_two_blocks(self) -> None:
        grid = PanelGrid(shape=grid_shape_for("DPH"))
        output = PanelGridFormatter().format(grid)
        assert "Panel 1" in output
        assert "Panel 2" in output

    def test_long_content_is_cut_to_cell_width(self) -> None:
        grid = PanelGrid()
        grid.set_text(0, "A very long caption indeed")
        output = PanelGridFormatter(cell_width=8).format(grid)
        assert "A very l" in output
        assert "A very lo" not in output


class TestImportReportFormatter:
    def test_with_errors(self) -> None:
        report = ImportReport(properties_created=2, errors=["Project 0: Missing project_name"])
        report.finish()
        output = ImportReportFormatter().format(report)
        assert output.startswith("IMPORT REPORT")
        assert "Errors (1):" in output
        assert "  - Project 0: Missing project_name" in output
        assert output.endswith(report.message)
        assert report.message.startswith("Import completed with 1 error(s).")

    def test_without_errors(self) -> None:
        report = ImportReport(designs_created=3).finish()
        output = ImportReportFormatter().format(report)
        assert "No errors." in output
        assert "Import completed! " in output
        assert "3 designs" in output


class TestBoqFormatter:
    def test_empty(self) -> None:
        assert BoqFormatter().format([]) == "No designs in BOQ."

    def test_table(self) -> None:
        groups = [
            BoqGroup(
                panel_type="SP",
                lines=[BoqLine("d1", "Bedside", 2, 4, project_name="Harbour")],
            )
        ]
        output = BoqFormatter().format(groups)
        assert "BILL OF QUANTITIES" in output
        assert "SP (allocated 2 of 4, remaining 2)" in output
        assert "Bedside" in output
        assert output.splitlines()[-1].startswith("TOTAL")


def test_format_design_table() -> None:
    assert format_design_table([]) == "No designs found."
    output = format_design_table(
        [{"design_name": "Lobby (rev0)", "panel_type": "SP", "created_at": "2024-05-01"}]
    )
    assert "Lobby (rev0)" in output
    assert "2024-05-01" in output


class TestImages:
    @pytest.mark.parametrize(
        ("content", "mime"),
        [(PNG_SIGNATURE + b"rest", "image/png"), (JPEG_SIGNATURE + b"rest", "image/jpeg")],
    )
    def test_detect(self, content: bytes, mime: str) -> None:
        assert detect_image_type(content) == mime

    def test_data_url(self) -> None:
        assert to_data_url(PNG_SIGNATURE).startswith("data:image/png;base64,")

    @pytest.mark.parametrize(
        "content",
        [b"", b"GIF89a", PNG_SIGNATURE + b"\0" * MAX_IMAGE_BYTES],
    )
    def test_rejected(self, content: bytes) -> None:
        with pytest.raises(UnsupportedImageError):
            to_data_url(content)
