"""Typed panel design documents.

Saved designs are JSON blobs. They are parsed into one model per panel
family at the data access boundary, discriminated on ``type``:

- ``SinglePanelDesign`` (SP)
- ``ThermostatPanelDesign`` (TAG)
- ``DoorbellPanelDesign`` (IDPG)
- ``DoublePanelDesign`` (DPH, DPV)
- ``ExtendedPanelDesign`` (X1H, X1V, X2H, X2V)

Keys are camelCase on the wire (``panelDesign``, ``iconId``) and
snake_case in Python. Unknown keys are kept so older blobs survive a
load/save round trip.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from panels.application.config.loader import (
    extract_validation_errors,
    format_validation_error_message,
)
from panels.domain.services.placement import PanelGrid
from panels.domain.value_objects import (
    GridShape,
    PanelDimension,
    PanelMode,
    PanelStyle,
    grid_shape_for,
)


class DesignDataError(Exception):
    """Raised when a stored or submitted design blob does not validate.

    Attributes:
        message: Multi-line summary of the problems.
        details: One dict per problem with ``path`` and ``message``.
    """

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None) -> None:
        self.message = message
        self.details = details or []
        super().__init__(message)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )


class DesignIcon(_CamelModel):
    """One serialised grid cell: an icon, a caption, or both."""

    icon_id: str | None = None
    label: str = ""
    category: str | None = None
    position: int = Field(..., ge=0)
    text: str = ""


class PanelStyleModel(_CamelModel):
    """Visual options (``panelDesign``) of a design."""

    background_color: str = "#FFFFFF"
    fonts: str = ""
    icon_color: str = "#000000"
    text_color: str = "#000000"
    font_size: str = "12px"
    icon_size: str = "40px"
    backbox: str = ""
    extra_comments: str = ""

    def to_style(self) -> PanelStyle:
        return PanelStyle(
            background_color=self.background_color,
            fonts=self.fonts,
            icon_color=self.icon_color,
            text_color=self.text_color,
            font_size=self.font_size,
            icon_size=self.icon_size,
            backbox=self.backbox,
            extra_comments=self.extra_comments,
            extra=dict(self.model_extra or {}),
        )


class _BasePanelDesign(_CamelModel):
    icons: list[DesignIcon] = Field(default_factory=list)
    panel_design: PanelStyleModel = Field(default_factory=PanelStyleModel)
    quantity: int = Field(default=1, ge=0)
    mode: PanelMode = PanelMode.ICONS_TEXT
    dimension: PanelDimension = PanelDimension.STANDARD
    max_quantity: int | None = Field(default=None, ge=0)
    allocated_quantity: int | None = Field(default=None, ge=0)

    @property
    def shape(self) -> GridShape:
        return grid_shape_for(self.type, self.dimension)  # type: ignore[attr-defined]

    @model_validator(mode="after")
    def _check_positions(self) -> _BasePanelDesign:
        shape = self.shape
        seen: set[int] = set()
        for index, icon in enumerate(self.icons):
            if not shape.contains(icon.position):
                raise ValueError(
                    f"icons[{index}].position {icon.position} is outside the "
                    f"{shape.cells}-cell grid"
                )
            if icon.position in seen:
                raise ValueError(f"icons[{index}].position {icon.position} is used twice")
            seen.add(icon.position)
        return self

    def to_grid(self) -> PanelGrid:
        """Rebuild the placement grid, dropping cells that break the rules."""
        return PanelGrid.from_design_icons(
            [icon.model_dump(by_alias=True) for icon in self.icons],
            shape=self.shape,
            mode=self.mode,
        )


class SinglePanelDesign(_BasePanelDesign):
    type: Literal["SP"] = "SP"


class ThermostatPanelDesign(_BasePanelDesign):
    """Thermostat panel; the display cell cycles between units."""

    type: Literal["TAG"] = "TAG"
    temperature_display: Literal["CF", "C", "F"] = "CF"


class DoorbellPanelDesign(_BasePanelDesign):
    """Corridor-side panel with doorbell and DND/MUR indicators."""

    type: Literal["IDPG"] = "IDPG"
    room_number: bool = False


class DoublePanelDesign(_BasePanelDesign):
    """Two 3x3 panels in one frame; cells 9-17 belong to the second panel."""

    type: Literal["DPH", "DPV"]
    swap_sides: bool = False


class ExtendedPanelDesign(_BasePanelDesign):
    """Switch grid plus one (X1*) or two (X2*) socket slots."""

    type: Literal["X1H", "X1V", "X2H", "X2V"]
    sockets: list[str] = Field(default_factory=list)
    swap_up_down: bool = False
    mirror_vertical: bool = False

    @model_validator(mode="after")
    def _check_socket_count(self) -> ExtendedPanelDesign:
        allowed = 1 if self.type.startswith("X1") else 2
        if len(self.sockets) > allowed:
            raise ValueError(f"{self.type} panels take at most {allowed} socket(s)")
        return self


PanelDesign = Annotated[
    Union[
        SinglePanelDesign,
        ThermostatPanelDesign,
        DoorbellPanelDesign,
        DoublePanelDesign,
        ExtendedPanelDesign,
    ],
    Field(discriminator="type"),
]

_panel_design_adapter: TypeAdapter[PanelDesign] = TypeAdapter(PanelDesign)


def parse_panel_design(data: Any) -> PanelDesign:
    """Validate a design blob into its typed model.

    Raises:
        DesignDataError: If ``type`` is missing or unknown, or any field
            fails validation. ``details`` carries the JSON paths.

    Example:
        >>> design = parse_panel_design({"type": "SP", "icons": [], "quantity": 2})
        >>> design.quantity
        2
    """
    try:
        return _panel_design_adapter.validate_python(data)
    except PydanticValidationError as e:
        details = extract_validation_errors(e)
        raise DesignDataError(
            format_validation_error_message(details, heading="Invalid panel design:"),
            details,
        ) from e


def dump_panel_design(design: PanelDesign) -> dict[str, Any]:
    """Serialise a typed design back to its camelCase blob."""
    return design.model_dump(by_alias=True, mode="json")
