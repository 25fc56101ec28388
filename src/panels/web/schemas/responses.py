"""Pydantic response schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field

from panels.web.schemas.common import ErrorDetailSchema


class ValidationIssueSchema(BaseModel):
    message: str
    path: str


class ImportValidationSchema(BaseModel):
    """Result of validating an import document."""

    is_valid: bool = Field(..., description="Whether the document can be imported")
    errors: list[ValidationIssueSchema] = Field(default_factory=list)
    warnings: list[ValidationIssueSchema] = Field(default_factory=list)


class ImportReportSchema(BaseModel):
    """Counters and errors of an import run."""

    success: bool
    message: str
    dry_run: bool = False
    properties_created: int = 0
    user_groups_created: int = 0
    users_created: int = 0
    projects_created: int = 0
    designs_created: int = 0
    configurations_created: int = 0
    errors: list[str] = Field(default_factory=list)
    project_ids: list[str] = Field(default_factory=list)


class PlacedIconSchema(BaseModel):
    icon_id: str | None
    label: str
    category: str | None
    position: int
    text: str


class PlacementPreviewSchema(BaseModel):
    """Design after replaying its icons through the placement rules."""

    type: str
    cells: int
    icons: list[PlacedIconSchema] = Field(default_factory=list)
    dropped: list[int] = Field(
        default_factory=list, description="Positions whose entry broke a rule"
    )
    diagram: str = Field(default="", description="ASCII rendering of the grid")


class ErrorResponseSchema(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
    error_type: str = Field(..., description="Error type")
    details: list[ErrorDetailSchema] | dict[str, Any] | None = Field(default=None)
