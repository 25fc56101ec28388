"""Room layouts stored per project in the ``layouts`` collection."""

from __future__ import annotations

import logging
from typing import Any

from panels.application.results import OperationResult
from panels.application.services.base import StoreService, utc_now
from panels.application.session import SessionState
from panels.contracts.protocols import StoreError
from panels.domain.services.layout import (
    LayoutCanvas,
    LayoutError,
    ensure_layout_deletable,
)
from panels.infrastructure.images import to_data_url

logger = logging.getLogger(__name__)


def attach_floor_plan(layout_data: dict[str, Any], content: bytes) -> dict[str, Any]:
    """Return a copy of the layout with an uploaded PNG/JPEG as its floor plan.

    Raises:
        UnsupportedImageError: If the bytes are not a PNG or JPEG image.
    """
    return {**layout_data, "floorPlan": to_data_url(content)}


class LayoutService(StoreService):
    """Save, list, load, update and delete room layouts.

    Layouts hang off a project found by its property code
    (``user_projects.project_description``) and require a ``prop_id``.
    """

    async def _project_for_code(self, email: str, project_code: str) -> dict[str, Any] | None:
        return await self.first(
            "user_projects", {"user_email": email, "project_description": project_code}
        )

    async def save_layout(
        self,
        session: SessionState,
        layout_name: str,
        layout_data: dict[str, Any],
        *,
        project_id: str | None = None,
    ) -> OperationResult:
        email = session.user_email
        prop_id = session.project_code
        if not prop_id:
            return OperationResult.fail(
                "invalid",
                "Project code (prop_id) is required to save layouts. Please select a property first.",
            )
        try:
            LayoutCanvas.from_dict(layout_data)
        except (LayoutError, KeyError, TypeError, ValueError) as e:
            return OperationResult.fail("invalid", f"Invalid layout data: {e}")

        try:
            await self.store.upsert("users", [{"email": email}], on_conflict="email")
        except StoreError as e:
            logger.warning(f"Could not ensure user {email}: {e.message}")

        try:
            if not project_id:
                project = await self._project_for_code(email, prop_id)
                if project is None:
                    created = await self.store.insert(
                        "user_projects",
                        [
                            {
                                "user_email": email,
                                "project_name": session.project_name or "Untitled Project",
                                "project_description": prop_id,
                                "is_active": True,
                            }
                        ],
                    )
                    project = created[0]
                project_id = str(project["id"])
            now = utc_now()
            name = layout_name.strip() or "Untitled Layout"
            inserted = await self.store.insert(
                "layouts",
                [
                    {
                        "user_email": email,
                        "project_id": project_id,
                        "prop_id": prop_id,
                        "layout_name": name,
                        "layout_data": layout_data,
                        "created_at": now,
                        "last_modified": now,
                        "is_active": True,
                    }
                ],
            )
        except StoreError as e:
            return self.store_failed("Failed to save layout", e)
        logger.info(f"Layout {name!r} saved for project {project_id}")
        return OperationResult.ok(
            f'Layout "{name}" saved successfully!',
            layout_id=inserted[0]["id"],
            project_id=project_id,
        )

    async def get_layouts(
        self, session: SessionState, project_code: str | None = None
    ) -> OperationResult:
        """List the caller's layouts, newest first, optionally for one project code."""
        email = session.user_email
        filters: dict[str, Any] = {"user_email": email, "is_active": True}
        try:
            if project_code:
                project = await self._project_for_code(email, project_code)
                if project is None:
                    return OperationResult.ok("No project found for this code", layouts=[])
                filters["project_id"] = project["id"]
            rows = await self.store.select(
                "layouts", filters, order_by="last_modified", ascending=False
            )
        except StoreError as e:
            return self.store_failed("Failed to get layouts", e)
        return OperationResult.ok("Layouts retrieved", layouts=rows)

    async def load_layout(self, session: SessionState, layout_id: str) -> OperationResult:
        try:
            row = await self.first(
                "layouts",
                {"id": layout_id, "user_email": session.user_email, "is_active": True},
            )
        except StoreError as e:
            return self.store_failed("Failed to load layout", e)
        if row is None:
            return OperationResult.fail("not_found", "Layout not found")
        return OperationResult.ok(
            f'Layout "{row.get("layout_name") or "Untitled"}" loaded successfully!',
            layout={
                "id": row["id"],
                "layout_name": row.get("layout_name"),
                "layout_data": row.get("layout_data") or {},
                "project_id": row.get("project_id"),
                "user_email": row.get("user_email"),
                "created_at": row.get("created_at"),
                "last_modified": row.get("last_modified"),
            },
        )

    async def _owned_layout(
        self, session: SessionState, layout_id: str
    ) -> tuple[dict[str, Any] | None, OperationResult | None]:
        row = await self.first("layouts", {"id": layout_id})
        if row is None or row.get("is_active") is False:
            return None, OperationResult.fail("not_found", "Layout not found")
        if row.get("user_email") != session.user_email:
            return None, OperationResult.fail(
                "forbidden", "Only the owner can change this layout"
            )
        return row, None

    async def update_layout(
        self,
        session: SessionState,
        layout_id: str,
        *,
        layout_name: str | None = None,
        layout_data: dict[str, Any] | None = None,
    ) -> OperationResult:
        values: dict[str, Any] = {"last_modified": utc_now()}
        if layout_name is not None:
            values["layout_name"] = layout_name
        if layout_data is not None:
            try:
                LayoutCanvas.from_dict(layout_data)
            except (LayoutError, KeyError, TypeError, ValueError) as e:
                return OperationResult.fail("invalid", f"Invalid layout data: {e}")
            values["layout_data"] = layout_data
        try:
            _, failure = await self._owned_layout(session, layout_id)
            if failure is not None:
                return failure
            await self.store.update(
                "layouts", values, {"id": layout_id, "user_email": session.user_email}
            )
        except StoreError as e:
            return self.store_failed("Failed to update layout", e)
        return OperationResult.ok("Layout updated successfully")

    async def delete_layout(self, session: SessionState, layout_id: str) -> OperationResult:
        """Delete a layout the caller owns, unless it is the last one of its project."""
        try:
            row, failure = await self._owned_layout(session, layout_id)
            if failure is not None:
                return failure
            siblings = await self.store.select(
                "layouts",
                {"project_id": row["project_id"], "is_active": True},
                columns="id",
            )
            try:
                ensure_layout_deletable(len(siblings))
            except LayoutError as e:
                return OperationResult.fail("conflict", str(e))
            await self.store.delete(
                "layouts", {"id": layout_id, "user_email": session.user_email}
            )
        except StoreError as e:
            return self.store_failed("Failed to delete layout", e)
        logger.info(f"Layout {layout_id} deleted by {session.user_email}")
        return OperationResult.ok("Layout deleted")


