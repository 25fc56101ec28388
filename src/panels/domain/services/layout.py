"""Room-layout placement of panels and field devices on a floor plan."""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

ROOM_TYPE_PALETTE: tuple[str, ...] = (
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#96CEB4",
    "#FFEAA7",
    "#DDA0DD",
    "#98D8C8",
    "#F7DC6F",
)

LAST_LAYOUT_MESSAGE = (
    "Cannot delete the last layout of a project. Create another layout first."
)


class LayoutError(Exception):
    """Raised when a layout operation cannot be applied."""


class ItemKind(str, Enum):
    """What a layout item represents."""

    PANEL = "panel"
    DEVICE = "device"


@dataclass
class RoomType:
    id: str
    name: str
    color: str


DEFAULT_ROOM_TYPES: tuple[RoomType, ...] = (
    RoomType(id="1", name="Bedroom", color="#FF6B6B"),
    RoomType(id="2", name="Bathroom", color="#4ECDC4"),
    RoomType(id="3", name="Kitchen", color="#45B7D1"),
    RoomType(id="4", name="Living Room", color="#96CEB4"),
    RoomType(id="5", name="Dining Room", color="#FFEAA7"),
)


@dataclass
class LayoutItem:
    """A panel or field device placed on the floor plan.

    Attributes:
        id: Unique item id.
        kind: Panel or field device.
        x: Left edge in canvas pixels.
        y: Top edge in canvas pixels.
        width: Item width in canvas pixels.
        height: Item height in canvas pixels.
        room_type: Id of the room type the item belongs to.
        label: Caption shown on the plan.
        panel_index: Cart index of the placed panel (panels only).
        panel_data: Snapshot of the panel design (panels only).
    """

    id: str
    kind: ItemKind
    x: float
    y: float
    width: float
    height: float
    room_type: str = ""
    label: str = ""
    panel_index: int | None = None
    panel_data: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LayoutItem:
        return cls(
            id=str(data["id"]),
            kind=ItemKind(data.get("kind", ItemKind.PANEL.value)),
            x=float(data.get("x", 0)),
            y=float(data.get("y", 0)),
            width=float(data.get("width", LayoutCanvas.DEFAULT_PANEL_SIZE)),
            height=float(data.get("height", LayoutCanvas.DEFAULT_PANEL_SIZE)),
            room_type=str(data.get("room_type", "")),
            label=str(data.get("label", "")),
            panel_index=data.get("panel_index"),
            panel_data=data.get("panel_data"),
        )


class LayoutCanvas:
    """Free-form 2D placement over an uploaded floor plan.

    Positions and sizes are clamped so every item stays fully on the
    canvas; sizes never drop below ``MIN_ITEM_SIZE``.
    """

    MIN_ITEM_SIZE = 20.0
    DEFAULT_PANEL_SIZE = 60.0
    DEFAULT_DEVICE_SIZE = 32.0

    def __init__(
        self,
        width: float = 1200.0,
        height: float = 800.0,
        floor_plan: str | None = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise LayoutError("Canvas dimensions must be positive")
        self.width = width
        self.height = height
        self.floor_plan = floor_plan
        self.room_types: list[RoomType] = list(DEFAULT_ROOM_TYPES)
        self._items: dict[str, LayoutItem] = {}

    @property
    def items(self) -> list[LayoutItem]:
        return list(self._items.values())

    def get(self, item_id: str) -> LayoutItem:
        try:
            return self._items[item_id]
        except KeyError:
            raise LayoutError(f"No layout item with id {item_id}") from None

    def add_room_type(self, name: str) -> RoomType:
        """Register a user-defined room type with a palette colour."""
        name = name.strip()
        if not name:
            raise LayoutError("Room type name cannot be empty")
        color = ROOM_TYPE_PALETTE[len(self.room_types) % len(ROOM_TYPE_PALETTE)]
        room_type = RoomType(id=uuid.uuid4().hex[:8], name=name, color=color)
        self.room_types.append(room_type)
        return room_type

    def place_panel(
        self,
        panel_index: int,
        panel_data: dict[str, Any],
        x: float,
        y: float,
        room_type: str = "",
    ) -> LayoutItem:
        """Drop a cart panel onto the plan at (x, y)."""
        size = self.DEFAULT_PANEL_SIZE
        item = LayoutItem(
            id=uuid.uuid4().hex,
            kind=ItemKind.PANEL,
            x=0,
            y=0,
            width=size,
            height=size,
            room_type=room_type,
            label=str(panel_data.get("type", "")),
            panel_index=panel_index,
            panel_data=panel_data,
        )
        self._items[item.id] = item
        self._clamp_position(item, x, y)
        return item

    def place_device(self, label: str, x: float, y: float, room_type: str = "") -> LayoutItem:
        """Drop a field device (sensor, keycard switch, ...) onto the plan."""
        size = self.DEFAULT_DEVICE_SIZE
        item = LayoutItem(
            id=uuid.uuid4().hex,
            kind=ItemKind.DEVICE,
            x=0,
            y=0,
            width=size,
            height=size,
            room_type=room_type,
            label=label,
        )
        self._items[item.id] = item
        self._clamp_position(item, x, y)
        return item

    def move_item(self, item_id: str, x: float, y: float) -> LayoutItem:
        item = self.get(item_id)
        self._clamp_position(item, x, y)
        return item

    def resize_item(self, item_id: str, width: float, height: float) -> LayoutItem:
        """Resize an item, keeping its top-left corner where possible."""
        item = self.get(item_id)
        item.width = min(max(width, self.MIN_ITEM_SIZE), self.width)
        item.height = min(max(height, self.MIN_ITEM_SIZE), self.height)
        self._clamp_position(item, item.x, item.y)
        return item

    def remove_item(self, item_id: str) -> LayoutItem:
        item = self.get(item_id)
        del self._items[item_id]
        return item

    def _clamp_position(self, item: LayoutItem, x: float, y: float) -> None:
        item.x = min(max(x, 0.0), self.width - item.width)
        item.y = min(max(y, 0.0), self.height - item.height)

    def to_dict(self) -> dict[str, Any]:
        return {
            "canvas": {"width": self.width, "height": self.height},
            "floorPlan": self.floor_plan,
            "roomTypes": [asdict(rt) for rt in self.room_types],
            "items": [item.to_dict() for item in self._items.values()],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LayoutCanvas:
        canvas_info = data.get("canvas") or {}
        canvas = cls(
            width=float(canvas_info.get("width", 1200.0)),
            height=float(canvas_info.get("height", 800.0)),
            floor_plan=data.get("floorPlan"),
        )
        if data.get("roomTypes"):
            canvas.room_types = [RoomType(**rt) for rt in data["roomTypes"]]
        for raw in data.get("items") or []:
            item = LayoutItem.from_dict(raw)
            canvas._items[item.id] = item
        return canvas


def ensure_layout_deletable(layout_count: int) -> None:
    """Refuse to delete the only remaining layout of a project.

    Raises:
        LayoutError: If ``layout_count`` is one or fewer.
    """
    if layout_count <= 1:
        raise LayoutError(LAST_LAYOUT_MESSAGE)
