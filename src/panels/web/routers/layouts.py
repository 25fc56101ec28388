"""Floor-plan layout endpoints."""

import json
from typing import Annotated, Any

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from panels.application.services import attach_floor_plan
from panels.web.dependencies import LayoutServiceDep, SessionDep
from panels.web.exceptions import unwrap
from panels.web.schemas.requests import SaveLayoutRequest, UpdateLayoutRequest

router = APIRouter(prefix="/layouts", tags=["layouts"])


@router.post("", status_code=201)
async def save_layout(
    request: SaveLayoutRequest, session: SessionDep, service: LayoutServiceDep
) -> dict[str, Any]:
    """Save a layout for the session's project code."""
    result = await service.save_layout(
        session, request.layout_name, request.layout_data, project_id=request.project_id
    )
    return unwrap(result)


@router.post("/with-floor-plan", status_code=201)
async def save_layout_with_floor_plan(
    session: SessionDep,
    service: LayoutServiceDep,
    layout_name: Annotated[str, Form()],
    floor_plan: Annotated[UploadFile, File(description="PNG or JPEG floor plan")],
    layout_data: Annotated[str, Form()] = "{}",
) -> dict[str, Any]:
    """Save a layout with an uploaded floor-plan image embedded as a data URL."""
    try:
        parsed = json.loads(layout_data)
    except json.JSONDecodeError as e:
        raise HTTPException(
            status_code=422,
            detail={"error": f"Invalid layout_data JSON: {e}", "error_type": "parse_error"},
        ) from e
    if not isinstance(parsed, dict):
        raise HTTPException(
            status_code=422,
            detail={"error": "layout_data must be a JSON object", "error_type": "parse_error"},
        )
    data = attach_floor_plan(parsed, await floor_plan.read())
    return unwrap(await service.save_layout(session, layout_name, data))


@router.get("")
async def list_layouts(
    session: SessionDep, service: LayoutServiceDep, project_code: str | None = None
) -> dict[str, Any]:
    return unwrap(await service.get_layouts(session, project_code))


@router.get("/{layout_id}")
async def load_layout(
    layout_id: str, session: SessionDep, service: LayoutServiceDep
) -> dict[str, Any]:
    return unwrap(await service.load_layout(session, layout_id))


@router.put("/{layout_id}")
async def update_layout(
    layout_id: str,
    request: UpdateLayoutRequest,
    session: SessionDep,
    service: LayoutServiceDep,
) -> dict[str, Any]:
    result = await service.update_layout(
        session,
        layout_id,
        layout_name=request.layout_name,
        layout_data=request.layout_data,
    )
    return unwrap(result)


@router.delete("/{layout_id}")
async def delete_layout(
    layout_id: str, session: SessionDep, service: LayoutServiceDep
) -> dict[str, Any]:
    """Delete a layout; the last layout of a project cannot be deleted."""
    return unwrap(await service.delete_layout(session, layout_id))
