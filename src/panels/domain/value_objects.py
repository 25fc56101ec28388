"""Value objects for the panel configurator domain."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class PanelType(str, Enum):
    """Hardware panel families that can be configured.

    Attributes:
        SP: Single switch panel, 3x3 grid.
        TAG: Thermostat panel with an extra fourth row.
        IDPG: Door-side panel (doorbell, DND/MUR indicators).
        DPH: Double panel laid out horizontally (two 3x3 grids).
        DPV: Double panel laid out vertically.
        X1H: Extended panel with one socket, horizontal.
        X1V: Extended panel with one socket, vertical.
        X2H: Extended panel with two sockets, horizontal.
        X2V: Extended panel with two sockets, vertical.
        PROJECT: Project-level revision record, not a physical panel.
    """

    SP = "SP"
    TAG = "TAG"
    IDPG = "IDPG"
    DPH = "DPH"
    DPV = "DPV"
    X1H = "X1H"
    X1V = "X1V"
    X2H = "X2H"
    X2V = "X2V"
    PROJECT = "Project"


class PanelMode(str, Enum):
    """What a grid cell may hold.

    Attributes:
        CUSTOM: Free mix of icons and text.
        ICONS_TEXT: Icons with captions.
        TEXT_ONLY: Text labels only, icons are not accepted.
    """

    CUSTOM = "custom"
    ICONS_TEXT = "icons_text"
    TEXT_ONLY = "text_only"


class PanelDimension(str, Enum):
    """Physical size variant of a panel."""

    STANDARD = "standard"
    WIDE = "wide"
    TALL = "tall"


class FeedbackStatus(str, Enum):
    """Lifecycle of a feedback inbox entry."""

    NEW = "new"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


class Column(str, Enum):
    """Horizontal position of a grid cell within its physical panel."""

    LEFT = "left"
    MIDDLE = "middle"
    RIGHT = "right"


@dataclass(frozen=True)
class GridShape:
    """Placement grid geometry.

    Attributes:
        cells: Total number of placement cells.
        columns: Number of columns in one physical panel.
        span: Number of cells belonging to one physical panel. Double
            panels place two 9-cell panels side by side, so the column
            of a cell restarts every ``span`` cells.
        pir_cell: Fixed cell for the motion sensor, or None when the
            panel has no PIR slot.
    """

    cells: int
    columns: int = 3
    span: int | None = None
    pir_cell: int | None = 7

    def __post_init__(self) -> None:
        if self.cells <= 0:
            raise ValueError("Grid must have at least one cell")
        if self.columns <= 0:
            raise ValueError("Grid must have at least one column")

    @property
    def panel_span(self) -> int:
        return self.span or self.cells

    def contains(self, index: int) -> bool:
        """Check whether a cell index is inside the grid."""
        return 0 <= index < self.cells

    def column_of(self, index: int) -> int:
        """Return the zero-based column of a cell within its panel."""
        return (index % self.panel_span) % self.columns

    def column_kind(self, index: int) -> Column:
        """Classify a cell as left, middle, or right column."""
        column = self.column_of(index)
        if column == 0:
            return Column.LEFT
        if column == self.columns - 1:
            return Column.RIGHT
        return Column.MIDDLE

    def cells_in(self, kind: Column) -> list[int]:
        """List all cell indices in the given column kind."""
        return [i for i in range(self.cells) if self.column_kind(i) is kind]


# Standard 3x3 switch plate; PIR sits bottom-centre.
STANDARD_GRID = GridShape(cells=9, pir_cell=7)

# 4-row layouts (TAG and any tall variant); PIR moves to the fourth row.
TALL_GRID = GridShape(cells=12, pir_cell=10)


def grid_shape_for(
    panel_type: PanelType | str,
    dimension: PanelDimension | str = PanelDimension.STANDARD,
) -> GridShape:
    """Return the placement grid for a panel type and dimension variant.

    Args:
        panel_type: Panel family.
        dimension: Size variant. Tall variants get a fourth row.

    Returns:
        The GridShape used by the placement rules.
    """
    panel_type = PanelType(panel_type)
    dimension = PanelDimension(dimension)

    if panel_type in (PanelType.DPH, PanelType.DPV):
        return GridShape(cells=18, columns=3, span=9, pir_cell=7)
    if panel_type is PanelType.IDPG:
        return GridShape(cells=9, pir_cell=None)
    if panel_type is PanelType.TAG or dimension is PanelDimension.TALL:
        return TALL_GRID
    return STANDARD_GRID


@dataclass(frozen=True)
class IconSpec:
    """An icon available in the icon library."""

    id: str
    label: str
    category: str


@dataclass(frozen=True)
class PlacedIcon:
    """An icon placed into a grid cell.

    Attributes:
        id: Unique id of this placement.
        icon_id: Library icon id (e.g. "G1", "pir").
        label: Human readable label, used by the placement rules.
        category: Semantic category (e.g. "PIR", "Lights").
        position: Cell index in the grid.
    """

    id: str
    icon_id: str
    label: str
    category: str
    position: int

    def at(self, position: int) -> PlacedIcon:
        """Return a copy of this placement at another cell."""
        return PlacedIcon(
            id=self.id,
            icon_id=self.icon_id,
            label=self.label,
            category=self.category,
            position=position,
        )

    @property
    def is_pir(self) -> bool:
        return self.category == "PIR"


@dataclass
class PanelStyle:
    """Visual options of a panel design.

    Attributes:
        background_color: RAL or hex colour of the plate.
        fonts: Font family used for captions.
        icon_color: Icon tint.
        text_color: Caption colour.
        font_size: Caption size (CSS length).
        icon_size: Icon size (CSS length).
        backbox: Backbox model the plate is mounted on.
        extra_comments: Free text notes for production.
    """

    background_color: str = "#FFFFFF"
    fonts: str = ""
    icon_color: str = "#000000"
    text_color: str = "#000000"
    font_size: str = "12px"
    icon_size: str = "40px"
    backbox: str = ""
    extra_comments: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialise with the camelCase keys stored in design blobs."""
        data: dict[str, Any] = {
            "backgroundColor": self.background_color,
            "fonts": self.fonts,
            "iconColor": self.icon_color,
            "textColor": self.text_color,
            "fontSize": self.font_size,
            "iconSize": self.icon_size,
            "backbox": self.backbox,
            "extraComments": self.extra_comments,
        }
        data.update(self.extra)
        return data
