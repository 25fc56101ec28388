"""Bill of quantities endpoints."""

from typing import Any

from fastapi import APIRouter

from panels.web.dependencies import BoqServiceDep
from panels.web.exceptions import unwrap
from panels.web.schemas.requests import AllocationRequest, BoqRequest

router = APIRouter(prefix="/boq", tags=["boq"])


@router.post("")
async def load_boq(request: BoqRequest, service: BoqServiceDep) -> dict[str, Any]:
    """Group the designs of the selected projects by panel type."""
    return unwrap(await service.load_boq(request.project_ids))


@router.put("/designs/{design_id}")
async def allocate_quantity(
    design_id: str, request: AllocationRequest, service: BoqServiceDep
) -> dict[str, Any]:
    """Store an allocated quantity, clamped to the design maximum."""
    return unwrap(await service.allocate(design_id, request.quantity))
