"""Icon placement rules for the panel customizers.

A panel is a grid of placement cells. Each cell holds at most one icon and
optionally a free-text caption. Whether an icon may sit in a cell depends
on its category and on the column of the cell:

- PIR (motion sensor): one per panel, fixed cell, toggled on/off.
- DND / privacy icons: never in the right column (LED wiring).
- MUR / service icons: never in the left column (LED wiring).
- G1 / G2: left two columns only. G3: right two columns only.

Illegal operations are no-ops that return a rejected PlacementResult; the
DND/MUR rejections carry an explanation meant to be shown in a dialog.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..icons import PIR_ICON
from ..value_objects import (
    STANDARD_GRID,
    Column,
    GridShape,
    IconSpec,
    PanelMode,
    PlacedIcon,
)

DND_KEYWORDS: tuple[str, ...] = ("dnd", "privacy", "do not disturb")
MUR_KEYWORDS: tuple[str, ...] = ("mur", "service", "make up")

LEFT_TWO_COLUMN_ICONS: frozenset[str] = frozenset({"G1", "G2"})
RIGHT_TWO_COLUMN_ICONS: frozenset[str] = frozenset({"G3"})

DND_EXPLANATION = (
    "Do Not Disturb icons cannot be placed in the right column. "
    "The DND indicator LED is wired on the left side of the panel, "
    "so the icon must stay in the left or middle column."
)
MUR_EXPLANATION = (
    "Make Up Room icons cannot be placed in the left column. "
    "The MUR indicator LED is wired on the right side of the panel, "
    "so the icon must stay in the middle or right column."
)


class PlacementRejection(str, Enum):
    """Reason a placement, move, or text edit was refused."""

    OUT_OF_GRID = "out_of_grid"
    OCCUPIED = "occupied"
    EMPTY_SOURCE = "empty_source"
    SAME_CELL = "same_cell"
    TEXT_ONLY_MODE = "text_only_mode"
    PIR_ALREADY_PLACED = "pir_already_placed"
    PIR_FIXED_CELL = "pir_fixed_cell"
    PIR_NOT_MOVABLE = "pir_not_movable"
    PIR_UNSUPPORTED = "pir_unsupported"
    PIR_NO_TEXT = "pir_no_text"
    DND_RIGHT_COLUMN = "dnd_right_column"
    MUR_LEFT_COLUMN = "mur_left_column"
    LEFT_COLUMNS_ONLY = "left_columns_only"
    RIGHT_COLUMNS_ONLY = "right_columns_only"


@dataclass(frozen=True)
class PlacementResult:
    """Outcome of a grid operation.

    Attributes:
        accepted: True if the grid changed as requested.
        reason: Why the operation was refused, None when accepted.
        explanation: Blocking message for the user; only set for
            rejections that must be explained (DND/MUR wiring).
    """

    accepted: bool
    reason: PlacementRejection | None = None
    explanation: str | None = None

    @classmethod
    def ok(cls) -> PlacementResult:
        return cls(accepted=True)

    @classmethod
    def rejected(
        cls, reason: PlacementRejection, explanation: str | None = None
    ) -> PlacementResult:
        return cls(accepted=False, reason=reason, explanation=explanation)

    @property
    def requires_dialog(self) -> bool:
        """Whether the caller should surface a modal instead of failing silently."""
        return self.explanation is not None


def is_dnd_label(label: str) -> bool:
    """Check whether an icon label names a Do Not Disturb function."""
    lower = label.lower()
    return any(keyword in lower for keyword in DND_KEYWORDS)


def is_mur_label(label: str) -> bool:
    """Check whether an icon label names a Make Up Room function."""
    lower = label.lower()
    return any(keyword in lower for keyword in MUR_KEYWORDS)


class PlacementRules:
    """Category and column legality checks for one grid shape."""

    def __init__(self, shape: GridShape = STANDARD_GRID) -> None:
        self.shape = shape

    def check(
        self, icon_id: str, label: str, category: str, cell: int
    ) -> PlacementResult:
        """Check whether an icon may occupy a cell, ignoring occupancy.

        Args:
            icon_id: Library id of the icon.
            label: Icon label, matched against DND/MUR synonyms.
            category: Icon category.
            cell: Target cell index.

        Returns:
            An accepted result, or the first rule that forbids the cell.
        """
        if not self.shape.contains(cell):
            return PlacementResult.rejected(PlacementRejection.OUT_OF_GRID)

        if category == "PIR":
            if self.shape.pir_cell is None:
                return PlacementResult.rejected(PlacementRejection.PIR_UNSUPPORTED)
            if cell != self.shape.pir_cell:
                return PlacementResult.rejected(PlacementRejection.PIR_FIXED_CELL)
            return PlacementResult.ok()

        column = self.shape.column_kind(cell)

        if is_dnd_label(label) and column is Column.RIGHT:
            return PlacementResult.rejected(
                PlacementRejection.DND_RIGHT_COLUMN, DND_EXPLANATION
            )
        if is_mur_label(label) and column is Column.LEFT:
            return PlacementResult.rejected(
                PlacementRejection.MUR_LEFT_COLUMN, MUR_EXPLANATION
            )
        if icon_id in LEFT_TWO_COLUMN_ICONS and column is Column.RIGHT:
            return PlacementResult.rejected(PlacementRejection.LEFT_COLUMNS_ONLY)
        if icon_id in RIGHT_TWO_COLUMN_ICONS and column is Column.LEFT:
            return PlacementResult.rejected(PlacementRejection.RIGHT_COLUMNS_ONLY)

        return PlacementResult.ok()

    def check_icon(self, icon: IconSpec | PlacedIcon, cell: int) -> PlacementResult:
        icon_id = icon.icon_id if isinstance(icon, PlacedIcon) else icon.id
        return self.check(icon_id, icon.label, icon.category, cell)

    def legal_cells(self, icon: IconSpec) -> list[int]:
        """List every cell the icon could legally occupy on an empty grid."""
        return [
            cell
            for cell in range(self.shape.cells)
            if self.check_icon(icon, cell).accepted
        ]


def _new_placement_id() -> str:
    return uuid.uuid4().hex


class PanelGrid:
    """Placed icons and captions of a single panel.

    The grid keeps at most one icon per cell and at most one PIR icon per
    panel. All mutating methods return a PlacementResult and leave the grid
    untouched when the operation is refused.

    Example:
        >>> grid = PanelGrid()
        >>> grid.place_icon(0, IconSpec(id="DND", label="DND", category="Guest Services")).accepted
        True
        >>> grid.place_icon(2, IconSpec(id="DND", label="DND", category="Guest Services")).reason
        <PlacementRejection.DND_RIGHT_COLUMN: 'dnd_right_column'>
    """

    def __init__(
        self,
        shape: GridShape = STANDARD_GRID,
        mode: PanelMode = PanelMode.ICONS_TEXT,
        id_factory: Callable[[], str] = _new_placement_id,
    ) -> None:
        self.shape = shape
        self.mode = mode
        self.rules = PlacementRules(shape)
        self._id_factory = id_factory
        self._icons: dict[int, PlacedIcon] = {}
        self._texts: dict[int, str] = {}

    @property
    def icons(self) -> list[PlacedIcon]:
        """Placed icons ordered by cell."""
        return [self._icons[cell] for cell in sorted(self._icons)]

    @property
    def texts(self) -> dict[int, str]:
        return dict(sorted(self._texts.items()))

    @property
    def has_pir(self) -> bool:
        return any(icon.is_pir for icon in self._icons.values())

    def icon_at(self, cell: int) -> PlacedIcon | None:
        return self._icons.get(cell)

    def text_at(self, cell: int) -> str:
        return self._texts.get(cell, "")

    def is_occupied(self, cell: int) -> bool:
        return cell in self._icons

    def place_icon(self, cell: int, icon: IconSpec) -> PlacementResult:
        """Place a library icon into an empty cell (click or drop).

        Args:
            cell: Target cell index.
            icon: Library icon to place.

        Returns:
            Accepted result, or the reason the placement was refused.
        """
        if not self.shape.contains(cell):
            return PlacementResult.rejected(PlacementRejection.OUT_OF_GRID)
        is_pir = icon.category == "PIR"
        if self.mode is PanelMode.TEXT_ONLY and not is_pir:
            return PlacementResult.rejected(PlacementRejection.TEXT_ONLY_MODE)
        if self.is_occupied(cell):
            return PlacementResult.rejected(PlacementRejection.OCCUPIED)
        if is_pir and self.has_pir:
            return PlacementResult.rejected(PlacementRejection.PIR_ALREADY_PLACED)

        result = self.rules.check_icon(icon, cell)
        if not result.accepted:
            return result

        self._icons[cell] = PlacedIcon(
            id=self._id_factory(),
            icon_id=icon.id,
            label=icon.label,
            category=icon.category,
            position=cell,
        )
        return result

    def drop_icon(self, cell: int, icon: IconSpec) -> PlacementResult:
        """Drop an icon dragged from the library; same checks as a click."""
        return self.place_icon(cell, icon)

    def first_free_cell(self, icon: IconSpec) -> int | None:
        """Return the first empty cell where the icon is legal, if any."""
        if icon.category == "PIR" and self.has_pir:
            return None
        for cell in range(self.shape.cells):
            if not self.is_occupied(cell) and self.rules.check_icon(icon, cell).accepted:
                return cell
        return None

    def place_first_free(self, icon: IconSpec) -> PlacementResult:
        """Place an icon in the first empty legal cell."""
        cell = self.first_free_cell(icon)
        if cell is None:
            if icon.category == "PIR" and self.has_pir:
                return PlacementResult.rejected(PlacementRejection.PIR_ALREADY_PLACED)
            return PlacementResult.rejected(PlacementRejection.OCCUPIED)
        return self.place_icon(cell, icon)

    def move_icon(self, source: int, target: int) -> PlacementResult:
        """Drag a placed icon to another cell.

        Moving onto an empty cell relocates the icon; moving onto an
        occupied cell swaps the two icons. In both cases the captions of
        the two cells are exchanged along with the icons. Both icons are
        checked against the rules in their new cells.
        """
        if not (self.shape.contains(source) and self.shape.contains(target)):
            return PlacementResult.rejected(PlacementRejection.OUT_OF_GRID)
        if source == target:
            return PlacementResult.rejected(PlacementRejection.SAME_CELL)

        moving = self._icons.get(source)
        if moving is None:
            return PlacementResult.rejected(PlacementRejection.EMPTY_SOURCE)
        displaced = self._icons.get(target)

        if moving.is_pir or (displaced is not None and displaced.is_pir):
            return PlacementResult.rejected(PlacementRejection.PIR_NOT_MOVABLE)

        result = self.rules.check_icon(moving, target)
        if not result.accepted:
            return result
        if displaced is not None:
            result = self.rules.check_icon(displaced, source)
            if not result.accepted:
                return result

        del self._icons[source]
        if displaced is not None:
            self._icons[source] = displaced.at(source)
        self._icons[target] = moving.at(target)

        source_text = self._texts.pop(source, "")
        target_text = self._texts.pop(target, "")
        if target_text:
            self._texts[source] = target_text
        if source_text:
            self._texts[target] = source_text

        return PlacementResult.ok()

    def toggle_pir(self, icon: IconSpec = PIR_ICON) -> PlacementResult:
        """Switch the motion sensor on or off at its fixed cell."""
        for cell, placed in list(self._icons.items()):
            if placed.is_pir:
                del self._icons[cell]
                return PlacementResult.ok()
        if self.shape.pir_cell is None:
            return PlacementResult.rejected(PlacementRejection.PIR_UNSUPPORTED)
        return self.place_icon(self.shape.pir_cell, icon)

    def remove_icon(self, cell: int) -> PlacementResult:
        if cell not in self._icons:
            return PlacementResult.rejected(PlacementRejection.EMPTY_SOURCE)
        del self._icons[cell]
        return PlacementResult.ok()

    def set_text(self, cell: int, text: str) -> PlacementResult:
        """Set the caption of a cell; an empty string clears it."""
        if not self.shape.contains(cell):
            return PlacementResult.rejected(PlacementRejection.OUT_OF_GRID)
        placed = self._icons.get(cell)
        if placed is not None and placed.is_pir:
            return PlacementResult.rejected(PlacementRejection.PIR_NO_TEXT)
        if text:
            self._texts[cell] = text
        else:
            self._texts.pop(cell, None)
        return PlacementResult.ok()

    def clear(self) -> None:
        self._icons.clear()
        self._texts.clear()

    def to_design_icons(self) -> list[dict[str, Any]]:
        """Serialise the grid as the ``icons`` list of a design blob.

        Cells holding neither an icon nor text are dropped.
        """
        entries: list[dict[str, Any]] = []
        for cell in range(self.shape.cells):
            placed = self._icons.get(cell)
            text = self._texts.get(cell, "")
            if placed is None and not text:
                continue
            entries.append(
                {
                    "iconId": placed.icon_id if placed else None,
                    "label": placed.label if placed else "",
                    "category": placed.category if placed else None,
                    "position": cell,
                    "text": text,
                }
            )
        return entries

    @classmethod
    def from_design_icons(
        cls,
        entries: Iterable[dict[str, Any]],
        shape: GridShape = STANDARD_GRID,
        mode: PanelMode = PanelMode.ICONS_TEXT,
        id_factory: Callable[[], str] = _new_placement_id,
    ) -> PanelGrid:
        """Rebuild a grid from a stored ``icons`` list.

        Entries are replayed through the placement rules, so stored cells
        that break a rule (or sit outside the grid) are dropped rather
        than loaded.
        """
        grid = cls(shape=shape, mode=mode, id_factory=id_factory)
        for entry in entries:
            position = entry.get("position")
            if not isinstance(position, int):
                continue
            icon_id = entry.get("iconId")
            if icon_id:
                icon = IconSpec(
                    id=icon_id,
                    label=entry.get("label") or icon_id,
                    category=entry.get("category") or "General",
                )
                if not grid.place_icon(position, icon).accepted:
                    continue
            text = entry.get("text") or ""
            if text:
                grid.set_text(position, text)
        return grid
