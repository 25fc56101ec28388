"""Common Pydantic schemas shared across requests and responses."""

from typing import Any

from pydantic import BaseModel, Field


class IconSchema(BaseModel):
    """Library icon."""

    id: str = Field(..., description="Icon id")
    label: str = Field(..., description="Display label")
    category: str = Field(..., description="Library category")


class ErrorDetailSchema(BaseModel):
    """One located error."""

    path: str | None = Field(default=None, description="JSON path of the offending value")
    message: str = Field(..., description="What is wrong")
    value: Any = Field(default=None, description="Offending value")
