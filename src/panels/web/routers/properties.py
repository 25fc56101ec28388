"""Property, user group and access endpoints."""

from typing import Any

from fastapi import APIRouter

from panels.application.results import OperationResult
from panels.web.dependencies import PropertyServiceDep, ServiceFactoryDep, SessionDep
from panels.web.exceptions import unwrap
from panels.web.schemas.requests import CreatePropertyRequest

router = APIRouter(prefix="/properties", tags=["properties"])


@router.get("")
async def list_accessible_properties(
    session: SessionDep, service: PropertyServiceDep
) -> dict[str, Any]:
    """Properties the session user's group can access."""
    return unwrap(await service.get_accessible_properties(session.user_email))


@router.get("/all")
async def list_all_properties(
    session: SessionDep, service: PropertyServiceDep, factory: ServiceFactoryDep
) -> dict[str, Any]:
    if not factory.settings.is_admin_email(session.user_email):
        return unwrap(OperationResult.fail("forbidden", "Admin access required"))
    return unwrap(await service.get_all_properties())


@router.get("/hierarchy")
async def get_user_hierarchy(
    session: SessionDep, service: PropertyServiceDep
) -> dict[str, Any]:
    return unwrap(await service.get_user_hierarchy(session.user_email))


@router.post("", status_code=201)
async def create_property(
    request: CreatePropertyRequest, session: SessionDep, service: PropertyServiceDep
) -> dict[str, Any]:
    result = await service.create_property(
        session.user_email, request.project_code, request.property_name, request.region
    )
    return unwrap(result)


@router.get("/{prop_id}/user-groups")
async def list_user_groups(prop_id: str, service: PropertyServiceDep) -> dict[str, Any]:
    return unwrap(await service.get_user_groups_for_property(prop_id))


@router.delete("/{prop_id}")
async def delete_property(
    prop_id: str, session: SessionDep, service: PropertyServiceDep
) -> dict[str, Any]:
    """Delete a property with its designs, configurations and access links."""
    return unwrap(await service.delete_property(prop_id, session.user_email))
