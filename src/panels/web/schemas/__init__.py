"""Pydantic schemas for the REST API."""

from panels.web.schemas.common import ErrorDetailSchema, IconSchema
from panels.web.schemas.requests import (
    AllocationRequest,
    BoqRequest,
    CreatePropertyRequest,
    CreateRevisionRequest,
    FeedbackRequest,
    FeedbackStatusRequest,
    ImportRequest,
    PlacementPreviewRequest,
    SaveDesignRequest,
    SaveLayoutRequest,
    UpdateDesignRequest,
    UpdateLayoutRequest,
)
from panels.web.schemas.responses import (
    ErrorResponseSchema,
    ImportReportSchema,
    ImportValidationSchema,
    PlacedIconSchema,
    PlacementPreviewSchema,
    ValidationIssueSchema,
)

__all__ = [
    # Common
    "ErrorDetailSchema",
    "IconSchema",
    # Requests
    "AllocationRequest",
    "BoqRequest",
    "CreatePropertyRequest",
    "CreateRevisionRequest",
    "FeedbackRequest",
    "FeedbackStatusRequest",
    "ImportRequest",
    "PlacementPreviewRequest",
    "SaveDesignRequest",
    "SaveLayoutRequest",
    "UpdateDesignRequest",
    "UpdateLayoutRequest",
    # Responses
    "ErrorResponseSchema",
    "ImportReportSchema",
    "ImportValidationSchema",
    "PlacedIconSchema",
    "PlacementPreviewSchema",
    "ValidationIssueSchema",
]
