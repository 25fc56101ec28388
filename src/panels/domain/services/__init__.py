"""Domain services for panel placement, revisions, carts and layouts."""

from .cart import BoqGroup, BoqLine, CartItem, ProjectCart, build_boq
from .layout import (
    DEFAULT_ROOM_TYPES,
    LAST_LAYOUT_MESSAGE,
    ItemKind,
    LayoutCanvas,
    LayoutError,
    LayoutItem,
    RoomType,
    ensure_layout_deletable,
)
from .placement import (
    DND_EXPLANATION,
    MUR_EXPLANATION,
    PanelGrid,
    PlacementRejection,
    PlacementResult,
    PlacementRules,
    is_dnd_label,
    is_mur_label,
)
from .revisions import (
    RevisionAllocator,
    allocate_revision_name,
    format_revision_name,
    next_revision_name,
    parse_revision,
    strip_revision,
)

__all__ = [
    # Cart / BOQ
    "BoqGroup",
    "BoqLine",
    "CartItem",
    "ProjectCart",
    "build_boq",
    # Layout
    "DEFAULT_ROOM_TYPES",
    "LAST_LAYOUT_MESSAGE",
    "ItemKind",
    "LayoutCanvas",
    "LayoutError",
    "LayoutItem",
    "RoomType",
    "ensure_layout_deletable",
    # Placement
    "DND_EXPLANATION",
    "MUR_EXPLANATION",
    "PanelGrid",
    "PlacementRejection",
    "PlacementResult",
    "PlacementRules",
    "is_dnd_label",
    "is_mur_label",
    # Revisions
    "RevisionAllocator",
    "allocate_revision_name",
    "format_revision_name",
    "next_revision_name",
    "parse_revision",
    "strip_revision",
]
