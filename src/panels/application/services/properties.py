"""Property, user group and access queries."""

from __future__ import annotations

import logging

from panels.application.results import OperationResult
from panels.application.services.base import StoreService, utc_now
from panels.contracts.protocols import StoreError

logger = logging.getLogger(__name__)


def _property_summary(row: dict) -> dict:
    return {
        "prop_id": row.get("prop_id"),
        "property_name": row.get("property_name"),
        "region": row.get("region"),
    }


class PropertyService(StoreService):
    """Reads the property -> user group -> user hierarchy.

    A user belongs to one user group (``users.ug_id``); a user group sees
    every property linked to it through an active ``ug_property_access``
    row.
    """

    async def _user_row(self, email: str) -> dict | None:
        return await self.first("users", {"email": email.strip().lower()})

    async def _accessible_prop_ids(self, ug_id: str) -> list[str]:
        links = await self.store.select(
            "ug_property_access", {"ug_id": ug_id, "is_active": True}
        )
        return [str(link["prop_id"]) for link in links if link.get("prop_id")]

    async def get_accessible_properties(self, email: str) -> OperationResult:
        try:
            user = await self._user_row(email)
            if user is None or not user.get("ug_id"):
                return OperationResult.ok("No accessible properties", properties=[])
            prop_ids = await self._accessible_prop_ids(user["ug_id"])
            if not prop_ids:
                return OperationResult.ok("No accessible properties", properties=[])
            rows = await self.store.select(
                "property",
                {"prop_id": prop_ids, "is_active": True},
                order_by="region",
            )
        except StoreError as e:
            return self.store_failed("Failed to load properties", e)
        return OperationResult.ok(
            "Properties retrieved", properties=[_property_summary(r) for r in rows]
        )

    async def has_property_access(self, email: str, prop_id: str) -> bool:
        """Check access; store failures count as no access."""
        try:
            user = await self._user_row(email)
            if user is None or not user.get("ug_id"):
                return False
            link = await self.first(
                "ug_property_access", {"ug_id": user["ug_id"], "prop_id": prop_id}
            )
        except StoreError as e:
            logger.warning(f"Access check failed for {email} on {prop_id}: {e.message}")
            return False
        return link is not None and link.get("is_active", True) is not False

    async def get_user_hierarchy(self, email: str) -> OperationResult:
        try:
            user = await self._user_row(email)
            if user is None:
                return OperationResult.fail(
                    "not_found", "User not found in the system hierarchy"
                )
            ug_ids = [user["ug_id"]] if user.get("ug_id") else []
            groups = await self.store.select("ug", {"id": ug_ids}) if ug_ids else []
            prop_ids: list[str] = []
            for ug_id in ug_ids:
                prop_ids.extend(await self._accessible_prop_ids(ug_id))
            prop_ids = list(dict.fromkeys(prop_ids))
            props = (
                await self.store.select("property", {"prop_id": prop_ids})
                if prop_ids
                else []
            )
        except StoreError as e:
            return self.store_failed("Failed to get user hierarchy", e)

        return OperationResult.ok(
            "User hierarchy retrieved",
            user={
                "email": user["email"],
                "ug_ids": ug_ids,
                "groups": [
                    {"id": g.get("id"), "ug": g.get("ug"), "prop_id": g.get("prop_id")}
                    for g in groups
                ],
                "accessible_properties": [_property_summary(p) for p in props],
            },
        )

    async def get_all_properties(self) -> OperationResult:
        try:
            rows = await self.store.select(
                "property", {"is_active": True}, order_by="region"
            )
        except StoreError as e:
            return self.store_failed("Failed to get properties", e)
        return OperationResult.ok(
            "Properties retrieved",
            properties=[
                {**_property_summary(r), "is_active": r.get("is_active", True)}
                for r in rows
            ],
        )

    async def get_user_groups_for_property(self, prop_id: str) -> OperationResult:
        try:
            rows = await self.store.select(
                "ug", {"prop_id": prop_id, "is_active": True}, order_by="ug"
            )
        except StoreError as e:
            return self.store_failed("Failed to get user groups", e)
        return OperationResult.ok("User groups retrieved", user_groups=rows)

    async def create_property(
        self, email: str, project_code: str, property_name: str, region: str
    ) -> OperationResult:
        """Create a property keyed by its project code and grant the creator's group access."""
        project_code = project_code.strip()
        if not project_code or not property_name.strip():
            return OperationResult.fail(
                "invalid", "Project code and property name are required"
            )
        try:
            user = await self._user_row(email)
            if user is None:
                return OperationResult.fail(
                    "not_found",
                    "Please contact your administrator to set up your user account",
                )
            if await self.first("property", {"prop_id": project_code}) is not None:
                return OperationResult.fail(
                    "conflict", "A property with this project code already exists"
                )
            now = utc_now()
            row = {
                "prop_id": project_code,
                "property_name": property_name.strip(),
                "region": region.strip(),
                "created_at": now,
                "last_modified": now,
                "is_active": True,
            }
            await self.store.insert("property", [row])
        except StoreError as e:
            return self.store_failed("Failed to create property", e)

        if user.get("ug_id"):
            try:
                await self.store.insert(
                    "ug_property_access",
                    [{"ug_id": user["ug_id"], "prop_id": project_code, "is_active": True}],
                )
            except StoreError as e:
                logger.warning(f"Property {project_code} created without access link: {e.message}")

        logger.info(f"Property {project_code} created by {email}")
        return OperationResult.ok(
            f'Property "{row["property_name"]}" created successfully!', property=row
        )

    async def delete_property(self, prop_id: str, email: str) -> OperationResult:
        """Permanently remove a property with its designs and access links."""
        if not await self.has_property_access(email, prop_id):
            return OperationResult.fail(
                "forbidden", "You do not have access to this property"
            )
        try:
            designs = await self.store.select(
                "user_designs", {"prop_id": prop_id}, columns="id"
            )
            design_ids = [d["id"] for d in designs]
            if design_ids:
                await self.store.delete("panel_configurations", {"design_id": design_ids})
                await self.store.delete("user_designs", {"prop_id": prop_id})
            await self.store.delete("ug_property_access", {"prop_id": prop_id})
            await self.store.delete("property", {"prop_id": prop_id})
        except StoreError as e:
            return self.store_failed("Failed to delete property", e)
        logger.info(f"Property {prop_id} deleted by {email}")
        return OperationResult.ok("Property permanently deleted")
