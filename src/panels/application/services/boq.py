"""Bill of quantities over imported or saved designs."""

from __future__ import annotations

import logging
from typing import Any

from panels.application.results import OperationResult
from panels.application.services.base import StoreService, utc_now
from panels.contracts.protocols import StoreError
from panels.domain.services.cart import BoqGroup, build_boq

logger = logging.getLogger(__name__)


def _group_to_dict(group: BoqGroup) -> dict[str, Any]:
    return {
        "panel_type": group.panel_type,
        "total_quantity": group.total_quantity,
        "fixed_total": group.fixed_total,
        "remaining": group.remaining,
        "designs": [
            {
                "design_id": line.design_id,
                "design_name": line.design_name,
                "quantity": line.quantity,
                "max_quantity": line.max_quantity,
                "project_name": line.project_name,
            }
            for line in group.lines
        ],
    }


class BoqService(StoreService):
    """Loads designs for a set of projects and allocates quantities per design.

    Project ids match either ``user_designs.project_id`` or, for proposal
    imports that use the property as the container, ``prop_id``.
    """

    async def _design_rows(self, project_ids: list[str]) -> list[dict[str, Any]]:
        by_project = await self.store.select(
            "user_designs", {"project_id": project_ids, "is_active": True}
        )
        by_property = await self.store.select(
            "user_designs", {"prop_id": project_ids, "is_active": True}
        )
        rows: dict[str, dict[str, Any]] = {}
        for row in [*by_project, *by_property]:
            rows.setdefault(str(row["id"]), row)

        projects = await self.store.select("user_projects", {"id": project_ids})
        properties = await self.store.select("property", {"prop_id": project_ids})
        names = {str(p["id"]): p.get("project_name") for p in projects}
        names.update({str(p["prop_id"]): p.get("property_name") for p in properties})
        for row in rows.values():
            key = row.get("project_id") or row.get("prop_id")
            row["project_name"] = names.get(str(key), "")
        return list(rows.values())

    async def boq_groups(self, project_ids: list[str]) -> list[BoqGroup]:
        """Build BOQ groups for the selected projects.

        Raises:
            StoreError: If the designs cannot be loaded.
        """
        if not project_ids:
            return []
        return build_boq(await self._design_rows(project_ids))

    async def load_boq(self, project_ids: list[str]) -> OperationResult:
        if not project_ids:
            return OperationResult.ok("No projects selected", groups=[])
        try:
            groups = await self.boq_groups(project_ids)
        except StoreError as e:
            return self.store_failed("Failed to load designs", e)
        return OperationResult.ok(
            "BOQ loaded", groups=[_group_to_dict(g) for g in groups]
        )

    async def allocate(self, design_id: str, quantity: int) -> OperationResult:
        """Persist the allocated quantity of one design, clamped to ``[0, maxQuantity]``."""
        try:
            row = await self.first("user_designs", {"id": design_id})
            if row is None:
                return OperationResult.fail("not_found", "Design not found")
            group = build_boq([row])[0]
            line = group.allocate(str(row["id"]), quantity)
            data = {**(row.get("design_data") or {}), "allocatedQuantity": line.quantity}
            data.setdefault("maxQuantity", line.max_quantity)
            await self.store.update(
                "user_designs",
                {"design_data": data, "last_modified": utc_now()},
                {"id": design_id},
            )
        except StoreError as e:
            return self.store_failed("Failed to save allocation", e)
        logger.debug(f"Allocated {line.quantity}/{line.max_quantity} to design {design_id}")
        return OperationResult.ok(
            "Allocation saved",
            design_id=design_id,
            quantity=line.quantity,
            max_quantity=line.max_quantity,
        )
