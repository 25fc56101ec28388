"""Unit tests for the room layout canvas."""

from __future__ import annotations

import pytest

from panels.domain.services.layout import (
    DEFAULT_ROOM_TYPES,
    LAST_LAYOUT_MESSAGE,
    ItemKind,
    LayoutCanvas,
    LayoutError,
    ensure_layout_deletable,
)


@pytest.fixture
def canvas() -> LayoutCanvas:
    return LayoutCanvas(width=1200, height=800)


class TestLayoutCanvas:
    def test_default_room_types(self, canvas: LayoutCanvas) -> None:
        names = [rt.name for rt in canvas.room_types]
        assert names == ["Bedroom", "Bathroom", "Kitchen", "Living Room", "Dining Room"]
        assert len(DEFAULT_ROOM_TYPES) == 5

    def test_add_room_type_takes_palette_colour(self, canvas: LayoutCanvas) -> None:
        room_type = canvas.add_room_type("  Balcony ")
        assert room_type.name == "Balcony"
        assert room_type.color == "#DDA0DD"

    def test_empty_room_type_rejected(self, canvas: LayoutCanvas) -> None:
        with pytest.raises(LayoutError):
            canvas.add_room_type("   ")

    def test_place_panel_is_clamped(self, canvas: LayoutCanvas) -> None:
        item = canvas.place_panel(0, {"type": "SP"}, 2000, 2000, room_type="1")
        assert item.kind is ItemKind.PANEL
        assert (item.x, item.y) == (1140, 740)
        assert item.label == "SP"

    def test_place_device(self, canvas: LayoutCanvas) -> None:
        item = canvas.place_device("Keycard", -5, 10)
        assert item.kind is ItemKind.DEVICE
        assert (item.x, item.y) == (0, 10)

    def test_move_item_clamped(self, canvas: LayoutCanvas) -> None:
        item = canvas.place_device("Sensor", 0, 0)
        canvas.move_item(item.id, 5000, -20)
        assert (item.x, item.y) == (1200 - item.width, 0)

    def test_resize_respects_minimum_and_canvas(self, canvas: LayoutCanvas) -> None:
        item = canvas.place_panel(1, {"type": "TAG"}, 1100, 700)
        canvas.resize_item(item.id, 5, 5)
        assert (item.width, item.height) == (LayoutCanvas.MIN_ITEM_SIZE, LayoutCanvas.MIN_ITEM_SIZE)
        canvas.resize_item(item.id, 5000, 100)
        assert item.width == 1200
        assert item.x == 0

    def test_remove_item(self, canvas: LayoutCanvas) -> None:
        item = canvas.place_device("Sensor", 0, 0)
        canvas.remove_item(item.id)
        assert canvas.items == []
        with pytest.raises(LayoutError):
            canvas.get(item.id)

    def test_dict_round_trip(self, canvas: LayoutCanvas) -> None:
        canvas.floor_plan = "data:image/png;base64,AAAA"
        canvas.add_room_type("Balcony")
        panel = canvas.place_panel(0, {"type": "SP", "icons": []}, 100, 100)

        restored = LayoutCanvas.from_dict(canvas.to_dict())

        assert restored.floor_plan == canvas.floor_plan
        assert [rt.name for rt in restored.room_types][-1] == "Balcony"
        assert restored.get(panel.id).panel_data == {"type": "SP", "icons": []}

    def test_non_positive_canvas_rejected(self) -> None:
        with pytest.raises(LayoutError):
            LayoutCanvas(width=0, height=100)


class TestEnsureLayoutDeletable:
    @pytest.mark.parametrize("count", [0, 1])
    def test_last_layout_rejected(self, count: int) -> None:
        with pytest.raises(LayoutError, match="Cannot delete the last layout"):
            ensure_layout_deletable(count)
        assert "Create another layout first" in LAST_LAYOUT_MESSAGE

    def test_two_layouts_allowed(self) -> None:
        ensure_layout_deletable(2)
