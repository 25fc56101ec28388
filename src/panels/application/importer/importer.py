"""Bulk importer: fans a nested JSON document out into store inserts.

Records are inserted one at a time, in dependency order:
properties, user groups, users, projects, designs, panel configurations.
A failing record adds a line to ``ImportReport.errors`` and the run moves
on to the next record.
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Any

from panels.application.config.loader import read_json_document
from panels.application.config.schema import AppSettings
from panels.application.importer.formats import (
    is_minimal_format,
    is_proposal_format,
    proposal_design_data,
    proposal_header,
)
from panels.application.importer.report import ImportReport
from panels.application.services.base import utc_now
from panels.contracts.protocols import StoreClient, StoreError
from panels.domain.services.revisions import (
    RevisionAllocator,
    allocate_revision_name,
    strip_revision,
)

logger = logging.getLogger(__name__)

DEFAULT_USER_GROUP = "UG_DEFAULT"


def composite_ug_id(ug: str, prop_id: str) -> str:
    """User group ids are unique per property: ``<ug>_<first 8 chars of prop_id>``."""
    return f"{ug}_{prop_id[:8]}"


def load_import_document(path: Path) -> dict[str, Any]:
    """Read an import document, raising ConfigError when it cannot be used."""
    return read_json_document(path, kind="import file")


class BulkImporter:
    """Imports extended, minimal and proposal documents into a store.

    Example:
        >>> importer = BulkImporter(store, settings)
        >>> report = await importer.run(json.loads(path.read_text()))
        >>> report.properties_created
        2
    """

    def __init__(
        self,
        store: StoreClient,
        settings: AppSettings,
        allocator: RevisionAllocator | None = None,
    ) -> None:
        self.store = store
        self.settings = settings
        self.allocator = allocator or RevisionAllocator()

    async def run(self, data: Any, owner_email: str | None = None) -> ImportReport:
        """Import a document.

        Args:
            data: Parsed JSON document.
            owner_email: Importing user. Used for records that name no
                owner; falls back to ``settings.default_owner_email``.

        Returns:
            ImportReport with counters, errors and created project ids.
        """
        report = ImportReport()
        owner = (owner_email or self.settings.default_owner_email).strip().lower()
        if not isinstance(data, dict):
            report.success = False
            report.message = "Import failed: document must be a JSON object"
            return report
        try:
            if is_proposal_format(data):
                logger.info("Importing proposal document")
                await self._import_proposal(data, owner, report)
            elif is_minimal_format(data):
                logger.info("Importing minimal project document")
                await self._import_minimal(data, owner, report)
            else:
                logger.info("Importing extended document")
                await self._import_extended(data, owner, report)
        except Exception as e:
            logger.exception("Import aborted")
            report.success = False
            report.message = f"Import failed: {e}"
            return report
        report.finish()
        logger.info(report.message)
        for error in report.errors:
            logger.warning(f"  - {error}")
        return report

    async def _insert_one(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        rows = await self.store.insert(table, [row])
        return rows[0] if rows else row

    # Extended shape

    async def _import_extended(
        self, data: dict[str, Any], owner: str, report: ImportReport
    ) -> None:
        property_map = await self._import_properties(data.get("properties") or [], report)
        await self._import_user_groups(data.get("user_groups") or [], property_map, report)
        await self._import_users(data.get("users") or [], property_map, report)
        for index, project in enumerate(data.get("projects") or []):
            await self._import_project(index, project, property_map, owner, report)

    async def _import_properties(
        self, properties: list[Any], report: ImportReport
    ) -> dict[str, str]:
        property_map: dict[str, str] = {}
        for index, prop in enumerate(properties):
            prop = prop if isinstance(prop, dict) else {}
            name = prop.get("property_name")
            if not name:
                report.errors.append(f"Property {index}: Missing property_name")
                continue
            if not prop.get("region"):
                report.errors.append(f"Property {index}: Missing region")
                continue
            now = utc_now()
            row = {
                "prop_id": str(prop.get("prop_id") or uuid.uuid4()),
                "property_name": name,
                "region": prop["region"],
                "created_at": now,
                "last_modified": now,
                "is_active": True,
            }
            try:
                created = await self._insert_one("property", row)
            except StoreError as e:
                report.errors.append(
                    f'Property error: Failed to create property "{name}": {e.message}'
                )
                continue
            property_map[name] = str(created.get("prop_id") or row["prop_id"])
            report.properties_created += 1
        return property_map

    async def _create_user_group(self, ug: str, prop_id: str) -> str:
        ug_id = composite_ug_id(ug, prop_id)
        await self._insert_one(
            "ug", {"id": ug_id, "ug": ug, "prop_id": prop_id, "is_active": True}
        )
        await self._insert_one(
            "ug_property_access", {"ug_id": ug_id, "prop_id": prop_id, "is_active": True}
        )
        return ug_id

    async def _import_user_groups(
        self, user_groups: list[Any], property_map: dict[str, str], report: ImportReport
    ) -> None:
        for index, group in enumerate(user_groups):
            group = group if isinstance(group, dict) else {}
            if not group.get("ug"):
                report.errors.append(f"User Group {index}: Missing ug")
                continue
            prop_id = property_map.get(group.get("property_name") or "")
            if prop_id is None:
                report.errors.append(
                    f"User group error: Property not found: {group.get('property_name')}"
                )
                continue
            try:
                await self._create_user_group(group["ug"], prop_id)
            except StoreError as e:
                report.errors.append(
                    f'User group error: Failed to create user group "{group["ug"]}": {e.message}'
                )
                continue
            report.user_groups_created += 1

    async def _default_user_group(self, prop_id: str) -> str:
        existing = await self.store.select(
            "ug", {"prop_id": prop_id, "ug": DEFAULT_USER_GROUP}, limit=1
        )
        if existing:
            return str(existing[0]["id"])
        return await self._create_user_group(DEFAULT_USER_GROUP, prop_id)

    async def _import_users(
        self, users: list[Any], property_map: dict[str, str], report: ImportReport
    ) -> None:
        for index, user in enumerate(users):
            user = user if isinstance(user, dict) else {}
            email = str(user.get("email") or "").strip().lower()
            if not email:
                report.errors.append(f"User {index}: Missing email")
                continue
            try:
                ug_id = user.get("ug_id")
                if not ug_id and user.get("property_name"):
                    prop_id = property_map.get(user["property_name"])
                    if prop_id is None:
                        report.errors.append(
                            f"User error: User {email}: Property not found for "
                            f'property_name "{user["property_name"]}"'
                        )
                        continue
                    ug_id = await self._default_user_group(prop_id)
                row: dict[str, Any] = {"email": email}
                if ug_id:
                    row["ug_id"] = ug_id
                await self._insert_one("users", row)
            except StoreError as e:
                report.errors.append(
                    f'User error: Failed to create user "{email}": {e.message}'
                )
                continue
            report.users_created += 1

    async def _import_project(
        self,
        index: int,
        project: Any,
        property_map: dict[str, str],
        owner: str,
        report: ImportReport,
    ) -> None:
        project = project if isinstance(project, dict) else {}
        name = project.get("project_name")
        if not name:
            report.errors.append(f"Project {index}: Missing project_name")
            return
        designs = project.get("designs")
        if not isinstance(designs, list):
            report.errors.append(f"Project {index}: Missing or invalid designs array")
            return

        email = str(project.get("user_email") or owner).strip().lower()
        try:
            await self.store.upsert("users", [{"email": email}], on_conflict="email")
        except StoreError as e:
            report.errors.append(f"User ensure error: {e.message}")

        prop_id: str | None = None
        if project.get("property_name"):
            prop_id = property_map.get(project["property_name"])
            if prop_id is None:
                report.errors.append(
                    f"Project property resolve error: Property not found: {project['property_name']}"
                )

        row: dict[str, Any] = {
            "user_email": email,
            "project_name": name,
            "project_description": project.get("project_description"),
            "is_active": True,
        }
        if prop_id:
            row["prop_id"] = prop_id
        try:
            created = await self._insert_one("user_projects", row)
            project_id = str(created["id"])
            existing = await self.store.select(
                "user_designs", {"project_id": project_id}, columns="design_name"
            )
        except StoreError as e:
            report.errors.append(
                f'Project error: Failed to create project "{name}": {e.message}'
            )
            return
        report.projects_created += 1
        report.project_ids.append(project_id)
        existing_names = [str(r.get("design_name") or "") for r in existing]

        for design_index, design in enumerate(designs):
            await self._import_design(
                index, design_index, design, project_id, prop_id, email,
                existing_names, report,
            )

    async def _import_design(
        self,
        project_index: int,
        design_index: int,
        design: Any,
        project_id: str,
        prop_id: str | None,
        email: str,
        existing_names: list[str],
        report: ImportReport,
    ) -> None:
        design = design if isinstance(design, dict) else {}
        label = f"Project {project_index}, Design {design_index}"
        panel_type = design.get("panel_type")
        if not panel_type:
            report.errors.append(f"{label}: Missing panel_type")
            return
        revision_of = str(design.get("revision_of") or "").strip()
        if not design.get("design_name") and not revision_of:
            report.errors.append(f"{label}: Missing design_name or revision_of")
            return

        design_data = design.get("design_data") or {
            "panelType": panel_type,
            "features": design.get("features") or {},
            "status": "seeded",
        }
        base = strip_revision(revision_of) if revision_of else str(design["design_name"])
        try:
            async with self.allocator.lock(project_id, base):
                name = (
                    allocate_revision_name(revision_of, existing_names)
                    if revision_of
                    else str(design["design_name"])
                )
                now = utc_now()
                created = await self._insert_one(
                    "user_designs",
                    {
                        "project_id": project_id,
                        "prop_id": prop_id,
                        "user_email": email,
                        "design_name": name,
                        "panel_type": panel_type,
                        "design_data": design_data,
                        "is_active": True,
                        "created_at": now,
                        "last_modified": now,
                    },
                )
        except StoreError as e:
            report.errors.append(
                f'Design error: Failed to create design "{design.get("design_name") or revision_of}": {e.message}'
            )
            return
        report.designs_created += 1
        existing_names.append(name)

        for config in design.get("panel_configurations") or []:
            config = config if isinstance(config, dict) else {}
            try:
                await self._insert_one(
                    "panel_configurations",
                    {
                        "design_id": created["id"],
                        "panel_index": config.get("panel_index"),
                        "room_type": config.get("room_type"),
                        "panel_data": config.get("panel_data"),
                    },
                )
            except StoreError as e:
                report.errors.append(
                    f"Panel config error: Failed to create panel configuration: {e.message}"
                )
                continue
            report.configurations_created += 1

    # Minimal shape

    async def _import_minimal(
        self, data: dict[str, Any], owner: str, report: ImportReport
    ) -> None:
        code = data.get("project_code")
        try:
            created = await self._insert_one(
                "user_projects",
                {
                    "user_email": owner,
                    "project_name": data["project_name"],
                    "project_description": f"code: {code}" if code else None,
                    "is_active": True,
                },
            )
        except StoreError as e:
            report.errors.append(
                f'Project error: Failed to create project "{data["project_name"]}": {e.message}'
            )
            return
        project_id = str(created["id"])
        report.projects_created += 1
        report.project_ids.append(project_id)

        for index, design in enumerate(data.get("designs") or []):
            design = design if isinstance(design, dict) else {}
            if not design.get("panel_type"):
                report.errors.append(f"Design {index}: Missing panel_type")
                continue
            if not design.get("design_name"):
                report.errors.append(f"Design {index}: Missing design_name")
                continue
            now = utc_now()
            try:
                await self._insert_one(
                    "user_designs",
                    {
                        "project_id": project_id,
                        "user_email": owner,
                        "design_name": design["design_name"],
                        "panel_type": design["panel_type"],
                        "design_data": {
                            "panelType": design["panel_type"],
                            "quantity": design.get("quantity"),
                        },
                        "is_active": True,
                        "created_at": now,
                        "last_modified": now,
                    },
                )
            except StoreError as e:
                report.errors.append(
                    f'Design error: Failed to create design for panel_type "{design["panel_type"]}": {e.message}'
                )
                continue
            report.designs_created += 1

    # Proposal shape

    async def _import_proposal(
        self, data: dict[str, Any], owner: str, report: ImportReport
    ) -> None:
        property_name, property_code, region = proposal_header(data)
        email = str(data.get("user_email") or owner).strip().lower()
        prop_id = property_code or f"PROP_{uuid.uuid4().hex[:12].upper()}"

        try:
            existing = await self.store.select("property", {"prop_id": prop_id}, limit=1)
            now = utc_now()
            await self.store.upsert(
                "property",
                [
                    {
                        "prop_id": prop_id,
                        "property_name": property_name,
                        "region": region,
                        "created_at": now,
                        "last_modified": now,
                        "is_active": True,
                    }
                ],
                on_conflict="prop_id",
            )
        except StoreError as e:
            report.errors.append(f"Property error: {e.message}")
            return
        if not existing:
            report.properties_created += 1
        # The property is the project container for proposal imports
        report.projects_created += 1
        report.project_ids.append(prop_id)

        await self._grant_importer_access(email, prop_id, report)
        await self._clear_property_designs(prop_id)

        for row in data.get("Panel Designs") or []:
            row = row if isinstance(row, dict) else {}
            design_name, panel_type, design_data = proposal_design_data(
                row, property_name, property_code, region
            )
            try:
                latest = await self.store.select(
                    "user_designs",
                    {"prop_id": prop_id},
                    columns="revision_number",
                    order_by="revision_number",
                    ascending=False,
                    limit=1,
                )
                revision = (latest[0].get("revision_number") or 0) + 1 if latest else 1
                now = utc_now()
                await self._insert_one(
                    "user_designs",
                    {
                        "prop_id": prop_id,
                        "user_email": email,
                        "design_name": design_name,
                        "panel_type": panel_type,
                        "design_data": design_data,
                        "revision_number": revision,
                        "is_active": True,
                        "created_at": now,
                        "last_modified": now,
                    },
                )
            except StoreError as e:
                report.errors.append(f"Design error: {e.message}")
                continue
            report.designs_created += 1

    async def _grant_importer_access(
        self, email: str, prop_id: str, report: ImportReport
    ) -> None:
        try:
            users = await self.store.select("users", {"email": email}, limit=1)
            if not users or not users[0].get("ug_id"):
                report.errors.append(f"Could not find user group for {email}")
                return
            await self.store.upsert(
                "ug_property_access",
                [{"ug_id": users[0]["ug_id"], "prop_id": prop_id, "is_active": True}],
                on_conflict="ug_id,prop_id",
            )
        except StoreError as e:
            report.errors.append(f"Could not create property access: {e.message}")

    async def _clear_property_designs(self, prop_id: str) -> None:
        """Replace mode: drop designs a previous import left on the property."""
        try:
            existing = await self.store.select(
                "user_designs", {"prop_id": prop_id}, columns="id"
            )
            ids = [row["id"] for row in existing]
            if ids:
                await self.store.delete("panel_configurations", {"design_id": ids})
                await self.store.delete("user_designs", {"prop_id": prop_id})
                logger.info(f"Replaced {len(ids)} existing designs on {prop_id}")
        except StoreError as e:
            logger.warning(f"Failed to clear existing designs on {prop_id}: {e.message}")
