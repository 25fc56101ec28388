"""Pydantic request schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field

from panels.domain.value_objects import FeedbackStatus


class SaveDesignRequest(BaseModel):
    """Request for saving a new design revision."""

    design_data: dict[str, Any] = Field(..., description="Design blob (panel or project)")
    project_name: str | None = Field(
        default=None, description="Base name; falls back to the session project"
    )
    panel_type: str | None = Field(default=None, description="Panel type code")
    location: str | None = Field(default=None, description="Installation location")
    operator: str | None = Field(default=None, description="Hotel operator")
    project_description: str | None = Field(default=None)
    project_id: str | None = Field(default=None, description="Existing project id")


class UpdateDesignRequest(BaseModel):
    """Request for replacing the blob of an owned design."""

    design_data: dict[str, Any] = Field(..., description="New design blob")
    design_name: str | None = Field(default=None)
    panel_type: str | None = Field(default=None)


class CreateRevisionRequest(BaseModel):
    """Request for deriving a revision from a saved design."""

    prop_id: str = Field(..., min_length=1, description="Property of the source design")
    new_name: str | None = Field(default=None, description="Explicit name of the revision")


class CreatePropertyRequest(BaseModel):
    """Request for creating a property."""

    project_code: str = Field(..., min_length=1, description="Unique property code")
    property_name: str = Field(..., min_length=1)
    region: str = Field(default="", description="Region of the property")


class SaveLayoutRequest(BaseModel):
    """Request for saving a floor-plan layout."""

    layout_name: str = Field(..., min_length=1)
    layout_data: dict[str, Any] = Field(..., description="Serialised layout canvas")
    project_id: str | None = Field(default=None)


class UpdateLayoutRequest(BaseModel):
    """Request for renaming or replacing a layout."""

    layout_name: str | None = Field(default=None)
    layout_data: dict[str, Any] | None = Field(default=None)


class FeedbackRequest(BaseModel):
    """Feedback submission."""

    message: str = Field(..., min_length=1)
    screenshots: list[str] = Field(default_factory=list, description="Image data URLs")
    url: str = Field(default="")
    user_agent: str = Field(default="")


class FeedbackStatusRequest(BaseModel):
    """Feedback triage."""

    status: FeedbackStatus


class BoqRequest(BaseModel):
    """Projects to include in the bill of quantities."""

    project_ids: list[str] = Field(default_factory=list)


class AllocationRequest(BaseModel):
    """Allocated quantity for one design."""

    quantity: int = Field(..., description="Requested quantity, clamped to the design maximum")


class ImportRequest(BaseModel):
    """Import document posted as JSON."""

    data: dict[str, Any] = Field(..., description="Import document")
    dry_run: bool = Field(default=False, description="Validate and simulate without writing")


class PlacementPreviewRequest(BaseModel):
    """Design blob to replay through the placement rules."""

    design: dict[str, Any] = Field(..., description="Panel design with a type discriminator")
