"""Integration tests for saving, editing and revising designs."""

from __future__ import annotations

import asyncio

import pytest

from panels.application.config import AppSettings
from panels.application.factory import ServiceFactory
from panels.application.services import DesignFilters, DesignService
from panels.application.session import SessionState
from panels.infrastructure.store import InMemoryStore

SP_DESIGN = {"type": "SP", "icons": [], "quantity": 1}


class YieldingStore(InMemoryStore):
    """In-memory store that yields to the event loop on every call, like a network client."""

    async def select(self, *args, **kwargs):
        await asyncio.sleep(0)
        return await super().select(*args, **kwargs)

    async def insert(self, *args, **kwargs):
        await asyncio.sleep(0)
        return await super().insert(*args, **kwargs)

    async def upsert(self, *args, **kwargs):
        await asyncio.sleep(0)
        return await super().upsert(*args, **kwargs)


@pytest.fixture
def service(factory: ServiceFactory) -> DesignService:
    return factory.get_design_service()


class TestSaveDesign:
    @pytest.mark.asyncio
    async def test_first_save_is_rev0_then_rev1(
        self, service: DesignService, owner_session: SessionState
    ) -> None:
        first = await service.save_design(owner_session, SP_DESIGN)
        second = await service.save_design(owner_session, SP_DESIGN)

        assert first.success
        assert first.data["design_name"] == "Lobby Panels (rev0)"
        assert second.data["design_name"] == "Lobby Panels (rev1)"
        assert first.data["project_id"] == second.data["project_id"]

    @pytest.mark.asyncio
    async def test_suffixed_project_name_reuses_project(
        self, service: DesignService, owner_session: SessionState, store: InMemoryStore
    ) -> None:
        await service.save_design(owner_session, SP_DESIGN)
        result = await service.save_design(owner_session, SP_DESIGN, "lobby panels (rev7)")

        assert result.data["design_name"] == "lobby panels (rev1)"
        assert len(store.tables["user_projects"]) == 1

    @pytest.mark.asyncio
    async def test_stored_row(
        self, service: DesignService, owner_session: SessionState, store: InMemoryStore
    ) -> None:
        result = await service.save_design(owner_session, SP_DESIGN, location="Floor 3")
        [row] = store.tables["user_designs"]
        assert row["id"] == result.data["design_id"]
        assert row["prop_id"] == "HTL001"
        assert row["panel_type"] == "SP"
        assert row["design_data"]["location"] == "Floor 3"
        assert row["design_data"]["projectName"] == "Lobby Panels (rev0)"

    @pytest.mark.asyncio
    async def test_concurrent_saves_get_distinct_names(
        self, settings: AppSettings, owner_session: SessionState
    ) -> None:
        """Saves racing on a new project share one project and one revision sequence."""
        store = YieldingStore()
        service = ServiceFactory(settings=settings, store=store).get_design_service()

        results = await asyncio.gather(
            *(service.save_design(owner_session, SP_DESIGN, "Atrium") for _ in range(4))
        )

        names = sorted(r.data["design_name"] for r in results)
        assert names == [f"Atrium (rev{i})" for i in range(4)]
        assert len(store.tables["user_projects"]) == 1
        assert len({r.data["project_id"] for r in results}) == 1


    @pytest.mark.asyncio
    async def test_invalid_design_rejected(
        self, service: DesignService, owner_session: SessionState
    ) -> None:
        design = {"type": "SP", "icons": [{"iconId": "G1", "position": 12}]}
        result = await service.save_design(owner_session, design)
        assert result.error == "invalid"
        assert result.data["details"]

    @pytest.mark.asyncio
    async def test_project_cart_entries_validated(
        self, service: DesignService, owner_session: SessionState
    ) -> None:
        cart = {"designs": [{"type": "SP"}, {"type": "X1H", "sockets": ["UK", "EU"]}]}
        result = await service.save_design(owner_session, cart, panel_type="Project")
        assert result.error == "invalid"
        assert result.data["details"][0]["path"].startswith("designs[1].")

    @pytest.mark.asyncio
    async def test_anonymous_save_forbidden(self, service: DesignService) -> None:
        result = await service.save_design(SessionState(user_email=""), SP_DESIGN)
        assert result.error == "forbidden"


class TestEditAndDelete:
    @pytest.mark.asyncio
    async def test_owner_updates(
        self, service: DesignService, owner_session: SessionState, store: InMemoryStore
    ) -> None:
        saved = await service.save_design(owner_session, SP_DESIGN)
        design_id = saved.data["design_id"]

        result = await service.update_design(
            owner_session, design_id, {"type": "SP", "quantity": 9}, design_name="Renamed"
        )

        assert result.success
        [row] = store.tables["user_designs"]
        assert row["design_data"]["quantity"] == 9
        assert row["design_name"] == "Renamed"

    @pytest.mark.asyncio
    async def test_non_owner_cannot_update_or_delete(
        self,
        service: DesignService,
        owner_session: SessionState,
        member_session: SessionState,
    ) -> None:
        saved = await service.save_design(owner_session, SP_DESIGN)
        design_id = saved.data["design_id"]

        update = await service.update_design(member_session, design_id, SP_DESIGN)
        delete = await service.delete_design(member_session, design_id)

        assert update.error == "forbidden"
        assert delete.error == "forbidden"

    @pytest.mark.asyncio
    async def test_delete_is_soft(
        self, service: DesignService, owner_session: SessionState, store: InMemoryStore
    ) -> None:
        saved = await service.save_design(owner_session, SP_DESIGN)
        design_id = saved.data["design_id"]

        result = await service.delete_design(owner_session, design_id)

        assert result.success
        assert store.tables["user_designs"][0]["is_active"] is False
        listing = await service.get_designs(owner_session.user_email)
        assert listing.data["designs"] == []
        again = await service.delete_design(owner_session, design_id)
        assert again.error == "not_found"


class TestPermissions:
    @pytest.mark.asyncio
    async def test_group_member_may_view_not_edit(
        self,
        service: DesignService,
        owner_session: SessionState,
        member_session: SessionState,
    ) -> None:
        saved = await service.save_design(owner_session, SP_DESIGN)

        result = await service.get_design_with_permissions(member_session, saved.data["design_id"])

        assert result.success
        assert result.data["permissions"] == {
            "can_view": True,
            "can_edit": False,
            "can_delete": False,
            "can_create_revision": True,
        }

    @pytest.mark.asyncio
    async def test_outsider_forbidden(
        self,
        service: DesignService,
        owner_session: SessionState,
        outsider_session: SessionState,
    ) -> None:
        saved = await service.save_design(owner_session, SP_DESIGN)
        result = await service.get_design_with_permissions(outsider_session, saved.data["design_id"])
        assert result.error == "forbidden"

    @pytest.mark.asyncio
    async def test_missing_design(self, service: DesignService, owner_session: SessionState) -> None:
        result = await service.get_design_with_permissions(owner_session, "nope")
        assert result.error == "not_found"


class TestAdminBrowser:
    @pytest.mark.asyncio
    async def test_requires_admin(self, service: DesignService, owner_session: SessionState) -> None:
        result = await service.list_all_designs(owner_session)
        assert result.error == "forbidden"

    @pytest.mark.asyncio
    async def test_filters(
        self,
        service: DesignService,
        owner_session: SessionState,
        admin_session: SessionState,
    ) -> None:
        await service.save_design(owner_session, SP_DESIGN, location="Floor 3")
        await service.save_design(
            owner_session, {"type": "TAG"}, "Spa Wing", location="Basement"
        )

        everything = await service.list_all_designs(admin_session)
        by_type = await service.list_all_designs(admin_session, DesignFilters(panel_type="tag"))
        by_location = await service.list_all_designs(admin_session, DesignFilters(location="floor"))
        by_search = await service.list_all_designs(admin_session, DesignFilters(search="spa"))
        limited = await service.list_all_designs(admin_session, DesignFilters(limit=1))

        assert len(everything.data["designs"]) == 2
        assert [d["design_name"] for d in by_type.data["designs"]] == ["Spa Wing (rev0)"]
        assert [d["location"] for d in by_location.data["designs"]] == ["Floor 3"]
        assert by_search.data["designs"][0]["project_name"] == "Spa Wing"
        assert len(limited.data["designs"]) == 1


class TestRevisions:
    @pytest.mark.asyncio
    async def test_revision_chain_and_lineage(
        self,
        service: DesignService,
        owner_session: SessionState,
        member_session: SessionState,
    ) -> None:
        saved = await service.save_design(
            owner_session, {"designs": [SP_DESIGN]}, panel_type="Project"
        )
        root_id = saved.data["design_id"]

        first = await service.create_revision(member_session, root_id, "HTL001")
        second = await service.create_revision(member_session, first.data["design_id"], "HTL001")

        assert first.data["design_name"] == "Lobby Panels (rev0)"
        assert second.data["design_name"] == "Lobby Panels (rev1)"

        loaded = await service.get_design_with_permissions(member_session, second.data["design_id"])
        data = loaded.data["design"]["design_data"]
        assert data["parentLayoutId"] == first.data["design_id"]
        assert data["revisionNumber"] == 1
        assert data["lastRevisedFromEmail"] == member_session.user_email

        lineage = await service.get_revision_lineage(member_session, second.data["design_id"])
        assert [d["id"] for d in lineage.data["lineage"]] == [
            root_id,
            first.data["design_id"],
            second.data["design_id"],
        ]

    @pytest.mark.asyncio
    async def test_custom_revision_name(
        self, service: DesignService, owner_session: SessionState
    ) -> None:
        saved = await service.save_design(owner_session, {"designs": []}, panel_type="Project")
        result = await service.create_revision(
            owner_session, saved.data["design_id"], "HTL001", new_name="Final"
        )
        assert result.data["design_name"] == "Final"

    @pytest.mark.asyncio
    async def test_outsider_cannot_revise(
        self,
        service: DesignService,
        owner_session: SessionState,
        outsider_session: SessionState,
    ) -> None:
        saved = await service.save_design(owner_session, {"designs": []}, panel_type="Project")
        result = await service.create_revision(outsider_session, saved.data["design_id"], "HTL001")
        assert result.error == "forbidden"

    @pytest.mark.asyncio
    async def test_list_property_revisions_only_projects(
        self, service: DesignService, owner_session: SessionState
    ) -> None:
        await service.save_design(owner_session, SP_DESIGN)
        await service.save_design(owner_session, {"designs": []}, panel_type="Project")

        result = await service.list_property_revisions(owner_session, "HTL001")

        [revision] = result.data["revisions"]
        assert revision["panel_type"] == "Project"
        assert revision["name"] == revision["design_name"]
