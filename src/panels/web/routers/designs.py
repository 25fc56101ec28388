"""Saved design and revision endpoints."""

from typing import Any

from fastapi import APIRouter, Query

from panels.application.services import DesignFilters
from panels.web.dependencies import DesignServiceDep, SessionDep
from panels.web.exceptions import unwrap
from panels.web.schemas.requests import (
    CreateRevisionRequest,
    SaveDesignRequest,
    UpdateDesignRequest,
)

router = APIRouter(prefix="/designs", tags=["designs"])


@router.post("", status_code=201)
async def save_design(
    request: SaveDesignRequest, session: SessionDep, service: DesignServiceDep
) -> dict[str, Any]:
    """Save a design under the next free revision name of its project."""
    result = await service.save_design(
        session,
        request.design_data,
        request.project_name,
        panel_type=request.panel_type,
        location=request.location,
        operator=request.operator,
        project_description=request.project_description,
        project_id=request.project_id,
    )
    return unwrap(result)


@router.get("")
async def list_my_designs(session: SessionDep, service: DesignServiceDep) -> dict[str, Any]:
    return unwrap(await service.get_designs(session.user_email))


@router.get("/all")
async def list_all_designs(
    session: SessionDep,
    service: DesignServiceDep,
    location: str = "",
    operator: str = "",
    service_partner: str = "",
    project_name: str = "",
    panel_type: str = "",
    user_email: str = "",
    search: str = "",
    order_by: str = "last_modified",
    ascending: bool = False,
    limit: int | None = Query(default=None, ge=1),
) -> dict[str, Any]:
    """Admin browser over every active design."""
    filters = DesignFilters(
        location=location,
        operator=operator,
        service_partner=service_partner,
        project_name=project_name,
        panel_type=panel_type,
        user_email=user_email,
        search=search,
        order_by=order_by,
        ascending=ascending,
        limit=limit,
    )
    return unwrap(await service.list_all_designs(session, filters))


@router.get("/revisions")
async def list_property_revisions(
    prop_id: str, session: SessionDep, service: DesignServiceDep
) -> dict[str, Any]:
    return unwrap(await service.list_property_revisions(session, prop_id))


@router.get("/{design_id}")
async def get_design(
    design_id: str, session: SessionDep, service: DesignServiceDep
) -> dict[str, Any]:
    return unwrap(await service.get_design_with_permissions(session, design_id))


@router.put("/{design_id}")
async def update_design(
    design_id: str,
    request: UpdateDesignRequest,
    session: SessionDep,
    service: DesignServiceDep,
) -> dict[str, Any]:
    result = await service.update_design(
        session,
        design_id,
        request.design_data,
        design_name=request.design_name,
        panel_type=request.panel_type,
    )
    return unwrap(result)


@router.delete("/{design_id}")
async def delete_design(
    design_id: str, session: SessionDep, service: DesignServiceDep
) -> dict[str, Any]:
    return unwrap(await service.delete_design(session, design_id))


@router.post("/{design_id}/revisions", status_code=201)
async def create_revision(
    design_id: str,
    request: CreateRevisionRequest,
    session: SessionDep,
    service: DesignServiceDep,
) -> dict[str, Any]:
    result = await service.create_revision(
        session, design_id, request.prop_id, request.new_name
    )
    return unwrap(result)


@router.get("/{design_id}/lineage")
async def get_revision_lineage(
    design_id: str, session: SessionDep, service: DesignServiceDep
) -> dict[str, Any]:
    return unwrap(await service.get_revision_lineage(session, design_id))
