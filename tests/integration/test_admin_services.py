"""Integration tests for properties, feedback and BOQ allocation."""

from __future__ import annotations

import pytest

from panels.application.factory import ServiceFactory
from panels.application.services import (
    MAX_SCREENSHOTS,
    BoqService,
    FeedbackService,
    PropertyService,
)
from panels.application.session import SessionState
from panels.domain.value_objects import FeedbackStatus
from panels.infrastructure.store import InMemoryStore


class TestPropertyService:
    @pytest.fixture
    def service(self, factory: ServiceFactory) -> PropertyService:
        return factory.get_property_service()

    @pytest.mark.asyncio
    async def test_accessible_properties(self, service: PropertyService) -> None:
        mine = await service.get_accessible_properties("Alice@example.com")
        none = await service.get_accessible_properties("eve@example.com")

        assert mine.data["properties"] == [
            {"prop_id": "HTL001", "property_name": "Harbour Hotel", "region": "North"}
        ]
        assert none.data["properties"] == []

    @pytest.mark.asyncio
    async def test_has_property_access(self, service: PropertyService) -> None:
        assert await service.has_property_access("bob@example.com", "HTL001")
        assert not await service.has_property_access("eve@example.com", "HTL001")
        assert not await service.has_property_access("nobody@example.com", "HTL001")

    @pytest.mark.asyncio
    async def test_hierarchy(self, service: PropertyService) -> None:
        result = await service.get_user_hierarchy("alice@example.com")
        user = result.data["user"]
        assert user["ug_ids"] == ["UG1"]
        assert user["accessible_properties"][0]["prop_id"] == "HTL001"

        missing = await service.get_user_hierarchy("nobody@example.com")
        assert missing.error == "not_found"

    @pytest.mark.asyncio
    async def test_create_property_grants_access(self, service: PropertyService) -> None:
        result = await service.create_property("alice@example.com", " HTL002 ", "Hillside", "South")

        assert result.success
        assert result.message == 'Property "Hillside" created successfully!'
        assert await service.has_property_access("bob@example.com", "HTL002")

    @pytest.mark.asyncio
    async def test_create_property_failures(self, service: PropertyService) -> None:
        duplicate = await service.create_property("alice@example.com", "HTL001", "Again", "North")
        unknown = await service.create_property("nobody@example.com", "HTL003", "New", "North")
        blank = await service.create_property("alice@example.com", "", "New", "North")

        assert duplicate.error == "conflict"
        assert unknown.error == "not_found"
        assert blank.error == "invalid"

    @pytest.mark.asyncio
    async def test_user_groups_for_property(self, service: PropertyService) -> None:
        result = await service.get_user_groups_for_property("HTL001")
        assert [g["ug"] for g in result.data["user_groups"]] == ["UG1"]

    @pytest.mark.asyncio
    async def test_delete_property(
        self,
        service: PropertyService,
        factory: ServiceFactory,
        owner_session: SessionState,
        store: InMemoryStore,
    ) -> None:
        await factory.get_design_service().save_design(owner_session, {"type": "SP"})

        denied = await service.delete_property("HTL001", "eve@example.com")
        deleted = await service.delete_property("HTL001", "alice@example.com")

        assert denied.error == "forbidden"
        assert deleted.success
        assert store.tables["property"] == []
        assert store.tables["user_designs"] == []
        assert store.tables["ug_property_access"] == []


class TestFeedbackService:
    @pytest.fixture
    def service(self, factory: ServiceFactory) -> FeedbackService:
        return factory.get_feedback_service()

    @pytest.mark.asyncio
    async def test_submit_validation(
        self, service: FeedbackService, owner_session: SessionState
    ) -> None:
        empty = await service.submit_feedback(owner_session, "   ")
        too_many = await service.submit_feedback(
            owner_session, "Hi", ["data:image/png;base64,AA"] * (MAX_SCREENSHOTS + 1)
        )
        assert empty.error == "invalid"
        assert too_many.error == "invalid"

    @pytest.mark.asyncio
    async def test_admin_triage(
        self,
        service: FeedbackService,
        owner_session: SessionState,
        admin_session: SessionState,
    ) -> None:
        submitted = await service.submit_feedback(owner_session, "Icons look blurry", url="/sp")
        await service.submit_feedback(SessionState(user_email=""), "Anonymous note")
        feedback_id = submitted.data["feedback_id"]

        denied = await service.list_feedback(owner_session)
        listing = await service.list_feedback(admin_session)
        assert denied.error == "forbidden"
        assert listing.data["new_count"] == 2

        updated = await service.update_status(admin_session, feedback_id, FeedbackStatus.RESOLVED)
        assert updated.data["feedback"]["status"] == "resolved"

        resolved = await service.list_feedback(admin_session, status=FeedbackStatus.RESOLVED)
        assert [f["id"] for f in resolved.data["feedback"]] == [feedback_id]

        deleted = await service.delete_feedback(admin_session, feedback_id)
        missing = await service.delete_feedback(admin_session, feedback_id)
        assert deleted.success
        assert missing.error == "not_found"

    @pytest.mark.asyncio
    async def test_update_missing(self, service: FeedbackService, admin_session: SessionState) -> None:
        result = await service.update_status(admin_session, "nope", FeedbackStatus.IN_PROGRESS)
        assert result.error == "not_found"


class TestBoqService:
    @pytest.fixture
    def service(self, factory: ServiceFactory) -> BoqService:
        return factory.get_boq_service()

    @pytest.mark.asyncio
    async def test_boq_for_proposal_import(
        self, service: BoqService, factory: ServiceFactory
    ) -> None:
        """Proposal imports are found by their property id."""
        proposal = {
            "Property name": "Marina Resort",
            "Property code": "MAR1",
            "Panel Designs": [
                {"Panel Name": "Entrance", "Panel Code": "GS-3", "Allocated Quantity": 3, "Max Quantity": 5},
                {"Panel Name": "Hall", "Panel Code": "GS-1", "Allocated Quantity": 1, "Max Quantity": 1},
            ],
        }
        report = await factory.create_importer().run(proposal, owner_email="alice@example.com")

        result = await service.load_boq(report.project_ids)

        [group] = result.data["groups"]
        assert group["panel_type"] == "SP"
        assert group["total_quantity"] == 4
        assert group["fixed_total"] == 6
        assert group["designs"][0]["project_name"] == "Marina Resort"

    @pytest.mark.asyncio
    async def test_allocate_clamps_to_max(
        self, service: BoqService, factory: ServiceFactory, store: InMemoryStore
    ) -> None:
        minimal = {
            "project_name": "Tower",
            "designs": [{"panel_type": "SP", "quantity": 4, "design_name": "Bedside"}],
        }
        report = await factory.create_importer().run(minimal)
        design_id = store.tables["user_designs"][0]["id"]

        over = await service.allocate(design_id, 10)
        under = await service.allocate(design_id, -1)

        assert over.data["quantity"] == 4
        assert under.data["quantity"] == 0
        data = store.tables["user_designs"][0]["design_data"]
        assert data["allocatedQuantity"] == 0
        assert data["maxQuantity"] == 4

        groups = await service.boq_groups(report.project_ids)
        assert groups[0].remaining == 4

    @pytest.mark.asyncio
    async def test_empty_selection(self, service: BoqService) -> None:
        result = await service.load_boq([])
        assert result.data["groups"] == []
        missing = await service.allocate("nope", 1)
        assert missing.error == "not_found"
