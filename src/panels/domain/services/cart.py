"""Project cart and bill-of-quantities allocation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..value_objects import PanelStyle


@dataclass
class CartItem:
    """One panel design held in the project cart.

    Attributes:
        type: Panel type code (e.g. "SP").
        icons: Serialised grid cells (see PanelGrid.to_design_icons).
        quantity: Number of physical units ordered.
        panel_design: Visual options of the design.
        design_id: Id of the saved design this item was loaded from, if any.
    """

    type: str
    icons: list[dict[str, Any]] = field(default_factory=list)
    quantity: int = 1
    panel_design: PanelStyle | None = None
    design_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type,
            "icons": list(self.icons),
            "quantity": self.quantity,
        }
        if self.panel_design is not None:
            data["panelDesign"] = self.panel_design.to_dict()
        if self.design_id is not None:
            data["designId"] = self.design_id
        return data


class ProjectCart:
    """Ordered list of panel designs for one project.

    Items are never merged: adding the same design twice yields two lines.
    """

    def __init__(self, items: list[CartItem] | None = None) -> None:
        self._items: list[CartItem] = list(items or [])

    @property
    def items(self) -> list[CartItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self._items)

    def add(self, item: CartItem) -> int:
        """Append an item and return its index."""
        if item.quantity < 1:
            item.quantity = 1
        self._items.append(item)
        return len(self._items) - 1

    def update_quantity(self, index: int, quantity: int) -> None:
        """Set the quantity of a line; zero or less removes it.

        Raises:
            IndexError: If the index is out of range.
        """
        self._check_index(index)
        if quantity <= 0:
            del self._items[index]
        else:
            self._items[index].quantity = quantity

    def remove(self, index: int) -> CartItem:
        self._check_index(index)
        return self._items.pop(index)

    def move(self, index: int, new_index: int) -> None:
        """Reorder: move the line at ``index`` to ``new_index``."""
        self._check_index(index)
        self._check_index(new_index)
        item = self._items.pop(index)
        self._items.insert(new_index, item)

    def clear(self) -> None:
        self._items.clear()

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._items):
            raise IndexError(f"Cart has no item at index {index}")


def _non_negative_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        number = int(float(value))
    except (TypeError, ValueError):
        return 0
    return max(0, number)


@dataclass
class BoqLine:
    """Allocation of one design within a BOQ group."""

    design_id: str
    design_name: str
    quantity: int
    max_quantity: int
    project_name: str = ""


@dataclass
class BoqGroup:
    """All designs of one panel type and their allocated quantities.

    Attributes:
        panel_type: Panel type code.
        lines: Per-design allocations.
        fixed_total: Sum of the per-design maxima (the imported quantity).
    """

    panel_type: str
    lines: list[BoqLine] = field(default_factory=list)

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def fixed_total(self) -> int:
        return sum(line.max_quantity for line in self.lines)

    @property
    def remaining(self) -> int:
        return self.fixed_total - self.total_quantity

    def allocate(self, design_id: str, quantity: int) -> BoqLine | None:
        """Set the allocated quantity of a design, clamped to ``[0, max]``.

        Returns:
            The updated line, or None if the design is not in this group.
        """
        for line in self.lines:
            if line.design_id == design_id:
                line.quantity = max(0, min(quantity, line.max_quantity))
                return line
        return None


def build_boq(design_rows: list[dict[str, Any]]) -> list[BoqGroup]:
    """Group saved designs by panel type for quantity allocation.

    The allocated quantity comes from ``design_data.allocatedQuantity``,
    falling back to ``design_data.quantity``. The cap comes from
    ``design_data.maxQuantity`` and defaults to the allocated quantity.

    Args:
        design_rows: Rows from the ``user_designs`` collection. A
            ``project_name`` key, when present, is carried onto the line.

    Returns:
        Groups sorted by panel type.
    """
    groups: dict[str, BoqGroup] = {}
    for row in design_rows:
        data = row.get("design_data") or {}
        allocated = _non_negative_int(data.get("allocatedQuantity"))
        if allocated is None:
            allocated = _non_negative_int(data.get("quantity")) or 0
        maximum = _non_negative_int(data.get("maxQuantity"))
        if maximum is None:
            maximum = allocated

        panel_type = str(row.get("panel_type") or "Unknown")
        group = groups.setdefault(panel_type, BoqGroup(panel_type=panel_type))
        group.lines.append(
            BoqLine(
                design_id=str(row.get("id")),
                design_name=str(row.get("design_name") or ""),
                quantity=min(allocated, maximum),
                max_quantity=maximum,
                project_name=str(row.get("project_name") or ""),
            )
        )
    return [groups[key] for key in sorted(groups)]
