"""Integration tests for room layout persistence."""

from __future__ import annotations

import pytest

from panels.application.factory import ServiceFactory
from panels.application.services import LayoutService, attach_floor_plan
from panels.application.session import SessionState
from panels.domain.services.layout import LAST_LAYOUT_MESSAGE, LayoutCanvas
from panels.infrastructure.images import PNG_SIGNATURE, UnsupportedImageError
from panels.infrastructure.store import InMemoryStore


@pytest.fixture
def service(factory: ServiceFactory) -> LayoutService:
    return factory.get_layout_service()


@pytest.fixture
def layout_data() -> dict:
    canvas = LayoutCanvas()
    canvas.place_panel(0, {"type": "SP"}, 100, 120, room_type="1")
    return canvas.to_dict()


class TestSaveLayout:
    @pytest.mark.asyncio
    async def test_save_creates_project_for_code(
        self,
        service: LayoutService,
        owner_session: SessionState,
        layout_data: dict,
        store: InMemoryStore,
    ) -> None:
        result = await service.save_layout(owner_session, "Ground floor", layout_data)

        assert result.success
        assert result.message == 'Layout "Ground floor" saved successfully!'
        [project] = store.tables["user_projects"]
        assert project["project_description"] == "HTL001"
        assert project["project_name"] == "Lobby Panels"
        assert store.tables["layouts"][0]["project_id"] == project["id"]

    @pytest.mark.asyncio
    async def test_second_layout_reuses_project(
        self,
        service: LayoutService,
        owner_session: SessionState,
        layout_data: dict,
        store: InMemoryStore,
    ) -> None:
        await service.save_layout(owner_session, "A", layout_data)
        await service.save_layout(owner_session, "  ", layout_data)
        assert len(store.tables["user_projects"]) == 1
        assert store.tables["layouts"][1]["layout_name"] == "Untitled Layout"

    @pytest.mark.asyncio
    async def test_project_code_required(
        self, service: LayoutService, outsider_session: SessionState, layout_data: dict
    ) -> None:
        result = await service.save_layout(outsider_session, "A", layout_data)
        assert result.error == "invalid"
        assert "prop_id" in result.message

    @pytest.mark.asyncio
    async def test_invalid_layout_data(
        self, service: LayoutService, owner_session: SessionState
    ) -> None:
        result = await service.save_layout(owner_session, "A", {"canvas": {"width": 0}})
        assert result.error == "invalid"


class TestListAndLoad:
    @pytest.mark.asyncio
    async def test_list_by_project_code(
        self, service: LayoutService, owner_session: SessionState, layout_data: dict
    ) -> None:
        await service.save_layout(owner_session, "A", layout_data)

        mine = await service.get_layouts(owner_session, "HTL001")
        other = await service.get_layouts(owner_session, "NOPE")

        assert [layout["layout_name"] for layout in mine.data["layouts"]] == ["A"]
        assert other.data["layouts"] == []

    @pytest.mark.asyncio
    async def test_load(
        self, service: LayoutService, owner_session: SessionState, layout_data: dict
    ) -> None:
        saved = await service.save_layout(owner_session, "A", layout_data)
        result = await service.load_layout(owner_session, saved.data["layout_id"])
        assert result.data["layout"]["layout_data"] == layout_data
        assert result.message == 'Layout "A" loaded successfully!'

    @pytest.mark.asyncio
    async def test_load_other_users_layout(
        self,
        service: LayoutService,
        owner_session: SessionState,
        member_session: SessionState,
        layout_data: dict,
    ) -> None:
        saved = await service.save_layout(owner_session, "A", layout_data)
        result = await service.load_layout(member_session, saved.data["layout_id"])
        assert result.error == "not_found"


class TestUpdateAndDelete:
    @pytest.mark.asyncio
    async def test_update(
        self,
        service: LayoutService,
        owner_session: SessionState,
        layout_data: dict,
        store: InMemoryStore,
    ) -> None:
        saved = await service.save_layout(owner_session, "A", layout_data)
        result = await service.update_layout(owner_session, saved.data["layout_id"], layout_name="B")
        assert result.success
        assert store.tables["layouts"][0]["layout_name"] == "B"

    @pytest.mark.asyncio
    async def test_non_owner_cannot_update(
        self,
        service: LayoutService,
        owner_session: SessionState,
        member_session: SessionState,
        layout_data: dict,
    ) -> None:
        saved = await service.save_layout(owner_session, "A", layout_data)
        result = await service.update_layout(member_session, saved.data["layout_id"], layout_name="B")
        assert result.error == "forbidden"

    @pytest.mark.asyncio
    async def test_last_layout_cannot_be_deleted(
        self,
        service: LayoutService,
        owner_session: SessionState,
        layout_data: dict,
        store: InMemoryStore,
    ) -> None:
        saved = await service.save_layout(owner_session, "A", layout_data)

        result = await service.delete_layout(owner_session, saved.data["layout_id"])

        assert result.error == "conflict"
        assert result.message == LAST_LAYOUT_MESSAGE
        assert len(store.tables["layouts"]) == 1

    @pytest.mark.asyncio
    async def test_delete_one_of_two(
        self,
        service: LayoutService,
        owner_session: SessionState,
        layout_data: dict,
        store: InMemoryStore,
    ) -> None:
        first = await service.save_layout(owner_session, "A", layout_data)
        await service.save_layout(owner_session, "B", layout_data)

        result = await service.delete_layout(owner_session, first.data["layout_id"])

        assert result.success
        assert [layout["layout_name"] for layout in store.tables["layouts"]] == ["B"]


class TestFloorPlan:
    def test_attach_png(self, layout_data: dict) -> None:
        data = attach_floor_plan(layout_data, PNG_SIGNATURE + b"pixels")
        assert data["floorPlan"].startswith("data:image/png;base64,")
        assert layout_data["floorPlan"] is None

    def test_reject_other_formats(self, layout_data: dict) -> None:
        with pytest.raises(UnsupportedImageError):
            attach_floor_plan(layout_data, b"GIF89a")
