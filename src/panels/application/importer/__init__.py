"""Bulk JSON importer: validation, shape handling and the import run."""

from .formats import (
    extract_display_name,
    is_minimal_format,
    is_proposal_format,
    map_panel_code,
    proposal_to_extended,
)
from .importer import (
    DEFAULT_USER_GROUP,
    BulkImporter,
    composite_ug_id,
    load_import_document,
)
from .report import ImportReport
from .validation import (
    ValidationError,
    ValidationResult,
    ValidationWarning,
    validate_import_data,
)

__all__ = [
    "BulkImporter",
    "DEFAULT_USER_GROUP",
    "ImportReport",
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "composite_ug_id",
    "extract_display_name",
    "load_import_document",
    "is_minimal_format",
    "is_proposal_format",
    "map_panel_code",
    "proposal_to_extended",
    "validate_import_data",
]
