"""Bulk import endpoints."""

import json
from typing import Annotated

from fastapi import APIRouter, File, HTTPException, UploadFile

from panels.application.factory import ServiceFactory
from panels.application.importer import validate_import_data
from panels.web.dependencies import ServiceFactoryDep, SessionDep
from panels.web.schemas.requests import ImportRequest
from panels.web.schemas.responses import (
    ImportReportSchema,
    ImportValidationSchema,
    ValidationIssueSchema,
)

router = APIRouter(prefix="/import", tags=["import"])


def _validation_schema(data: object) -> ImportValidationSchema:
    result = validate_import_data(data)
    return ImportValidationSchema(
        is_valid=result.is_valid,
        errors=[ValidationIssueSchema(message=e.message, path=e.path) for e in result.errors],
        warnings=[
            ValidationIssueSchema(message=w.message, path=w.path) for w in result.warnings
        ],
    )


async def _run_import(
    data: dict, dry_run: bool, session_email: str, factory: ServiceFactory
) -> ImportReportSchema:
    validation = validate_import_data(data)
    if not validation.is_valid:
        raise HTTPException(
            status_code=422,
            detail={
                "error": "Import document is invalid",
                "error_type": "import_validation",
                "details": [{"message": e.message, "path": e.path} for e in validation.errors],
            },
        )
    importer = factory.create_importer(dry_run=dry_run)
    report = await importer.run(data, owner_email=session_email or None)
    return ImportReportSchema(dry_run=dry_run, **report.to_dict())


@router.post("/validate", response_model=ImportValidationSchema)
async def validate_import(request: ImportRequest) -> ImportValidationSchema:
    """Validate an import document without importing it."""
    return _validation_schema(request.data)


@router.post("", response_model=ImportReportSchema)
async def import_document(
    request: ImportRequest, session: SessionDep, factory: ServiceFactoryDep
) -> ImportReportSchema:
    """Import a JSON document posted in the request body."""
    return await _run_import(request.data, request.dry_run, session.user_email, factory)


@router.post("/upload", response_model=ImportReportSchema)
async def import_upload(
    session: SessionDep,
    factory: ServiceFactoryDep,
    file: Annotated[UploadFile, File(description="JSON import document")],
    dry_run: bool = False,
) -> ImportReportSchema:
    """Import an uploaded JSON file."""
    try:
        data = json.loads(await file.read())
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise HTTPException(
            status_code=422,
            detail={"error": f"Invalid JSON: {e}", "error_type": "parse_error"},
        ) from e
    if not isinstance(data, dict):
        raise HTTPException(
            status_code=422,
            detail={"error": "Import file must contain a JSON object", "error_type": "parse_error"},
        )
    return await _run_import(data, dry_run, session.user_email, factory)
