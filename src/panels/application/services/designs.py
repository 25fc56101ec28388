"""Saved designs: save, edit, soft delete, admin browsing and revisions."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any

from panels.application.config.schema import AppSettings
from panels.application.designs import DesignDataError, parse_panel_design
from panels.application.results import OperationResult
from panels.application.services.base import StoreService, utc_now
from panels.application.services.properties import PropertyService
from panels.application.session import SessionState
from panels.contracts.protocols import StoreClient, StoreError
from panels.domain.services.revisions import (
    RevisionAllocator,
    allocate_revision_name,
    format_revision_name,
    strip_revision,
)
from panels.domain.value_objects import PanelType

logger = logging.getLogger(__name__)

PROJECT_PANEL_TYPE = PanelType.PROJECT.value
_PHYSICAL_TYPES = frozenset(t.value for t in PanelType if t is not PanelType.PROJECT)


def validate_design_data(panel_type: str, design_data: dict[str, Any]) -> None:
    """Validate a design blob against the model for its panel type.

    Project records hold a cart under ``designs``; each entry is checked
    on its own. Unknown panel types are stored as-is.

    Raises:
        DesignDataError: If the blob does not validate.
    """
    if panel_type in _PHYSICAL_TYPES:
        parse_panel_design({**design_data, "type": panel_type})
    elif panel_type == PROJECT_PANEL_TYPE:
        for index, entry in enumerate(design_data.get("designs") or []):
            try:
                parse_panel_design(entry)
            except DesignDataError as e:
                details = [
                    {**d, "path": f"designs[{index}].{d['path']}"} for d in e.details
                ]
                raise DesignDataError(e.message, details) from e


@dataclass
class DesignFilters:
    """Admin design browser filters. String filters match substrings, case-insensitively."""

    location: str = ""
    operator: str = ""
    service_partner: str = ""
    project_name: str = ""
    panel_type: str = ""
    user_email: str = ""
    search: str = ""
    order_by: str = "last_modified"
    ascending: bool = False
    limit: int | None = None


def _design_field(row: dict[str, Any], key: str) -> Any:
    data = row.get("design_data") or {}
    nested = data.get("designData") or {}
    return data.get(key, nested.get(key))


def _contains(value: Any, needle: str) -> bool:
    return needle.lower() in str(value or "").lower()


class DesignService(StoreService):
    """Design persistence in ``user_designs`` grouped under ``user_projects``."""

    def __init__(
        self,
        store: StoreClient,
        settings: AppSettings,
        properties: PropertyService,
        allocator: RevisionAllocator | None = None,
    ) -> None:
        super().__init__(store)
        self.settings = settings
        self.properties = properties
        self.allocator = allocator or RevisionAllocator()

    async def ensure_user(self, email: str) -> None:
        """Make sure a ``users`` row exists; failures are logged and ignored."""
        try:
            await self.store.upsert("users", [{"email": email}], on_conflict="email")
        except StoreError as e:
            logger.warning(f"Could not ensure user {email}: {e.message}")

    async def _find_or_create_project(
        self, email: str, base_name: str, description: str
    ) -> str:
        projects = await self.store.select(
            "user_projects", {"user_email": email}, order_by="created_at"
        )
        for project in projects:
            if strip_revision(str(project.get("project_name") or "")).lower() == base_name.lower():
                return str(project["id"])
        created = await self.store.insert(
            "user_projects",
            [
                {
                    "user_email": email,
                    "project_name": base_name,
                    "project_description": description,
                    "is_active": True,
                }
            ],
        )
        logger.info(f"Created project {base_name!r} for {email}")
        return str(created[0]["id"])

    async def save_design(
        self,
        session: SessionState,
        design_data: dict[str, Any],
        project_name: str | None = None,
        *,
        panel_type: str | None = None,
        location: str | None = None,
        operator: str | None = None,
        project_description: str | None = None,
        project_id: str | None = None,
    ) -> OperationResult:
        """Save a new design, naming it with the next free revision.

        The project is found by its revision-stripped base name (or created).
        The design name is allocated against every design already in the
        project: a first save of "Foo" is stored as "Foo (rev0)".
        """
        email = session.user_email
        if not email:
            return OperationResult.fail("forbidden", "Sign in to save designs")

        panel_type = (
            panel_type
            or design_data.get("type")
            or design_data.get("panelType")
            or "Unknown"
        )
        try:
            validate_design_data(panel_type, design_data)
        except DesignDataError as e:
            return OperationResult(
                success=False, message=e.message, error="invalid", data={"details": e.details}
            )

        base_name = strip_revision(
            project_name or session.project_name or "Untitled Project"
        )
        await self.ensure_user(email)

        # Project lookup runs under the per-user lock, the name scan and insert
        # under the per-project lock.
        try:
            async with self.allocator.lock(f"user:{email}", base_name):
                if not project_id:
                    project_id = await self._find_or_create_project(
                        email, base_name, project_description or "Panel customizer project"
                    )
                async with self.allocator.lock(project_id, base_name):
                    existing = await self.store.select(
                        "user_designs", {"project_id": project_id}, columns="design_name"
                    )
                    design_name = allocate_revision_name(
                        base_name, [str(r.get("design_name") or "") for r in existing]
                    )
                    stored_data = {
                        **design_data, "projectName": design_name, "panelType": panel_type
                    }
                    if location is not None:
                        stored_data["location"] = location
                    if operator is not None:
                        stored_data["operator"] = operator
                    now = utc_now()
                    inserted = await self.store.insert(
                        "user_designs",
                        [
                            {
                                "project_id": project_id,
                                "user_email": email,
                                "prop_id": session.project_code,
                                "design_name": design_name,
                                "panel_type": panel_type,
                                "design_data": stored_data,
                                "is_active": True,
                                "created_at": now,
                                "last_modified": now,
                            }
                        ],
                    )
        except StoreError as e:
            return self.store_failed("Failed to save design", e)

        logger.info(f"Saved design {design_name!r} ({panel_type}) for {email}")
        return OperationResult.ok(
            "Design saved successfully!",
            design_id=inserted[0]["id"],
            project_id=project_id,
            design_name=design_name,
        )

    async def _owned_design(
        self, session: SessionState, design_id: str
    ) -> tuple[dict[str, Any] | None, OperationResult | None]:
        row = await self.first("user_designs", {"id": design_id})
        if row is None or row.get("is_active") is False:
            return None, OperationResult.fail("not_found", "Design not found")
        if row.get("user_email") != session.user_email:
            return None, OperationResult.fail(
                "forbidden", "Only the owner can change this design"
            )
        return row, None

    async def update_design(
        self,
        session: SessionState,
        design_id: str,
        design_data: dict[str, Any],
        *,
        design_name: str | None = None,
        panel_type: str | None = None,
    ) -> OperationResult:
        """Replace the blob of a design the caller owns."""
        try:
            row, failure = await self._owned_design(session, design_id)
            if failure is not None:
                return failure
            effective_type = panel_type or str(row.get("panel_type") or "Unknown")
            try:
                validate_design_data(effective_type, design_data)
            except DesignDataError as e:
                return OperationResult(
                    success=False, message=e.message, error="invalid", data={"details": e.details}
                )
            values: dict[str, Any] = {"design_data": design_data, "last_modified": utc_now()}
            if design_name:
                values["design_name"] = design_name
            if panel_type:
                values["panel_type"] = panel_type
            await self.store.update(
                "user_designs", values, {"id": design_id, "user_email": session.user_email}
            )
        except StoreError as e:
            return self.store_failed("Failed to update design", e)
        return OperationResult.ok("Design updated successfully!", design_id=design_id)

    async def delete_design(self, session: SessionState, design_id: str) -> OperationResult:
        """Soft delete: the row stays but ``is_active`` becomes false."""
        try:
            _, failure = await self._owned_design(session, design_id)
            if failure is not None:
                return failure
            await self.store.update(
                "user_designs",
                {"is_active": False, "last_modified": utc_now()},
                {"id": design_id, "user_email": session.user_email},
            )
        except StoreError as e:
            return self.store_failed("Failed to delete design", e)
        logger.info(f"Design {design_id} deleted by {session.user_email}")
        return OperationResult.ok("Design deleted successfully!")

    async def get_designs(self, email: str) -> OperationResult:
        try:
            rows = await self.store.select(
                "user_designs",
                {"user_email": email.strip().lower(), "is_active": True},
                order_by="last_modified",
                ascending=False,
            )
        except StoreError as e:
            return self.store_failed("Failed to get designs", e)
        return OperationResult.ok("Designs retrieved", designs=rows)

    async def get_design_with_permissions(
        self, session: SessionState, design_id: str
    ) -> OperationResult:
        """Load a design for viewing; group members may view, only owners may edit."""
        try:
            row = await self.first("user_designs", {"id": design_id, "is_active": True})
        except StoreError as e:
            return self.store_failed("Failed to load design", e)
        if row is None:
            return OperationResult.fail("not_found", "Design not found")
        is_owner = row.get("user_email") == session.user_email
        if not is_owner:
            prop_id = row.get("prop_id")
            if not prop_id or not await self.properties.has_property_access(
                session.user_email, prop_id
            ):
                return OperationResult.fail("forbidden", "No access to property")
        return OperationResult.ok(
            "Design loaded",
            design=row,
            permissions={
                "can_view": True,
                "can_edit": is_owner,
                "can_delete": is_owner,
                "can_create_revision": True,
            },
        )

    async def list_all_designs(
        self, session: SessionState, filters: DesignFilters | None = None
    ) -> OperationResult:
        """Admin design browser across every user."""
        if not self.settings.is_admin_email(session.user_email):
            return OperationResult.fail("forbidden", "Admin access required")
        filters = filters or DesignFilters()
        try:
            rows = await self.store.select("user_designs", {"is_active": True})
            project_ids = list({r["project_id"] for r in rows if r.get("project_id")})
            projects = (
                await self.store.select("user_projects", {"id": project_ids})
                if project_ids
                else []
            )
        except StoreError as e:
            return self.store_failed("Failed to get all designs", e)

        project_by_id = {p["id"]: p for p in projects}
        flattened = []
        for row in rows:
            project = project_by_id.get(row.get("project_id"), {})
            flattened.append(
                {
                    **row,
                    "project_name": project.get("project_name"),
                    "project_description": project.get("project_description"),
                    "location": _design_field(row, "location"),
                    "operator": _design_field(row, "operator"),
                    "service_partner": _design_field(row, "service_partner"),
                }
            )

        substring_filters = {
            "location": filters.location,
            "operator": filters.operator,
            "service_partner": filters.service_partner,
            "project_name": filters.project_name,
            "panel_type": filters.panel_type,
            "user_email": filters.user_email,
        }
        for key, needle in substring_filters.items():
            if needle and needle.strip():
                flattened = [d for d in flattened if _contains(d.get(key), needle.strip())]
        if filters.search and filters.search.strip():
            needle = filters.search.strip()
            flattened = [
                d
                for d in flattened
                if _contains(d.get("project_name"), needle)
                or _contains(d.get("design_name"), needle)
            ]

        order_key = "created_at" if filters.order_by == "created_at" else "last_modified"
        flattened.sort(key=lambda d: str(d.get(order_key) or ""), reverse=not filters.ascending)
        if filters.limit is not None and filters.limit > 0:
            flattened = flattened[: filters.limit]
        return OperationResult.ok("All designs retrieved", designs=flattened)

    async def create_revision(
        self,
        session: SessionState,
        source_id: str,
        prop_id: str,
        new_name: str | None = None,
    ) -> OperationResult:
        """Clone a design of a property as its next revision.

        The clone records ``parentLayoutId`` and ``revisionNumber + 1``
        (a source without a number counts as -1, so its first clone is 0).
        """
        if not await self.properties.has_property_access(session.user_email, prop_id):
            return OperationResult.fail("forbidden", "No access to property")
        try:
            source = await self.first("user_designs", {"id": source_id, "prop_id": prop_id})
            if source is None:
                return OperationResult.fail("not_found", "Source design not found")

            source_data = dict(source.get("design_data") or {})
            current = source_data.get("revisionNumber")
            next_revision = (current if isinstance(current, int) else -1) + 1
            base_name = str(source.get("design_name") or "Project Design")
            final_name = new_name or format_revision_name(
                strip_revision(base_name), next_revision
            )
            now = utc_now()
            inserted = await self.store.insert(
                "user_designs",
                [
                    {
                        "user_email": session.user_email,
                        "prop_id": prop_id,
                        "project_id": source.get("project_id"),
                        "design_name": final_name,
                        "panel_type": source.get("panel_type") or PROJECT_PANEL_TYPE,
                        "design_data": {
                            **source_data,
                            "parentLayoutId": source["id"],
                            "revisionNumber": next_revision,
                            "lastRevisedFromEmail": source.get("user_email"),
                            "isEdited": False,
                        },
                        "is_active": True,
                        "created_at": now,
                        "last_modified": now,
                    }
                ],
            )
        except StoreError as e:
            return self.store_failed("Failed to create revision", e)
        logger.info(f"Revision {final_name!r} created from {source_id}")
        return OperationResult.ok(
            "Revision created", design_id=inserted[0]["id"], design_name=final_name
        )

    async def list_property_revisions(
        self, session: SessionState, prop_id: str
    ) -> OperationResult:
        """Project-level revisions of a property, newest first."""
        if not await self.properties.has_property_access(session.user_email, prop_id):
            return OperationResult.fail("forbidden", "No access to property")
        try:
            rows = await self.store.select(
                "user_designs",
                {"prop_id": prop_id, "panel_type": PROJECT_PANEL_TYPE, "is_active": True},
                order_by="created_at",
                ascending=False,
            )
        except StoreError as e:
            return self.store_failed("Failed to load revisions", e)
        return OperationResult.ok(
            "Revisions loaded",
            revisions=[{**row, "name": row.get("design_name")} for row in rows],
        )

    async def get_revision_lineage(
        self, session: SessionState, design_id: str
    ) -> OperationResult:
        """Return the root of a design's revision tree and all its descendants, oldest first."""
        base = await self.get_design_with_permissions(session, design_id)
        if not base.success:
            return base
        design = base.data["design"]
        prop_id = design.get("prop_id")
        try:
            all_designs = (
                await self.store.select(
                    "user_designs", {"prop_id": prop_id, "is_active": True}
                )
                if prop_id
                else [design]
            )
        except StoreError as e:
            return self.store_failed("Failed to load lineage", e)

        by_id = {d["id"]: d for d in all_designs}
        by_id.setdefault(design["id"], design)

        def parent_of(node: dict[str, Any]) -> Any:
            return (node.get("design_data") or {}).get("parentLayoutId")

        root = design
        visited_up: set[str] = set()
        while parent_of(root) and root["id"] not in visited_up:
            visited_up.add(root["id"])
            parent = by_id.get(parent_of(root))
            if parent is None:
                break
            root = parent

        lineage: list[dict[str, Any]] = []
        queue = deque([root["id"]])
        seen: set[str] = set()
        while queue:
            current = queue.popleft()
            if current in seen:
                continue
            seen.add(current)
            lineage.append(by_id[current])
            queue.extend(d["id"] for d in by_id.values() if parent_of(d) == current)

        lineage.sort(key=lambda d: str(d.get("created_at") or ""))
        return OperationResult.ok("Lineage loaded", lineage=lineage)
