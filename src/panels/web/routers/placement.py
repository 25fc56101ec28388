"""Icon library and placement preview endpoints."""

from fastapi import APIRouter

from panels.application.designs import parse_panel_design
from panels.domain.icons import IconLibrary
from panels.infrastructure.formatters import PanelGridFormatter
from panels.web.schemas.common import IconSchema
from panels.web.schemas.requests import PlacementPreviewRequest
from panels.web.schemas.responses import PlacedIconSchema, PlacementPreviewSchema

router = APIRouter(prefix="/placement", tags=["placement"])

_library = IconLibrary()


@router.get("/icons", response_model=list[IconSchema])
async def list_icons(panel_type: str = "SP") -> list[IconSchema]:
    """Icons offered for a panel type."""
    return [
        IconSchema(id=icon.id, label=icon.label, category=icon.category)
        for icon in _library.selectable(panel_type)
    ]


@router.post("/preview", response_model=PlacementPreviewSchema)
async def preview_design(request: PlacementPreviewRequest) -> PlacementPreviewSchema:
    """Replay a design's icons through the placement rules.

    Entries that break a rule are dropped and reported by position.
    """
    design = parse_panel_design(request.design)
    grid = design.to_grid()
    dropped = [
        icon.position
        for icon in design.icons
        if icon.icon_id and grid.icon_at(icon.position) is None
    ]
    return PlacementPreviewSchema(
        type=design.type,
        cells=grid.shape.cells,
        icons=[
            PlacedIconSchema(
                icon_id=entry["iconId"],
                label=entry["label"],
                category=entry["category"],
                position=entry["position"],
                text=entry["text"],
            )
            for entry in grid.to_design_icons()
        ],
        dropped=dropped,
        diagram=PanelGridFormatter().format(grid, title=f"{design.type} PANEL"),
    )
