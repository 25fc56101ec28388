"""Domain layer - panel grids, placement rules and revision naming."""

from .icons import DEFAULT_ICONS, ICON_CATEGORIES, PIR_ICON, IconLibrary
from .services import (
    CartItem,
    LayoutCanvas,
    PanelGrid,
    PlacementRejection,
    PlacementResult,
    ProjectCart,
    allocate_revision_name,
    next_revision_name,
)
from .value_objects import (
    Column,
    FeedbackStatus,
    GridShape,
    IconSpec,
    PanelDimension,
    PanelMode,
    PanelStyle,
    PanelType,
    PlacedIcon,
    grid_shape_for,
)

__all__ = [
    "CartItem",
    "Column",
    "DEFAULT_ICONS",
    "FeedbackStatus",
    "GridShape",
    "ICON_CATEGORIES",
    "IconLibrary",
    "IconSpec",
    "LayoutCanvas",
    "PIR_ICON",
    "PanelDimension",
    "PanelGrid",
    "PanelMode",
    "PanelStyle",
    "PanelType",
    "PlacedIcon",
    "PlacementRejection",
    "PlacementResult",
    "ProjectCart",
    "allocate_revision_name",
    "grid_shape_for",
    "next_revision_name",
]
