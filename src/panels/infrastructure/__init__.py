"""Infrastructure layer - store clients, formatters and image handling."""

from .formatters import (
    BoqFormatter,
    ImportReportFormatter,
    PanelGridFormatter,
    format_design_table,
)
from .images import UnsupportedImageError, detect_image_type, to_data_url
from .store import InMemoryStore, RestStoreClient, build_filter_params

__all__ = [
    "BoqFormatter",
    "ImportReportFormatter",
    "InMemoryStore",
    "PanelGridFormatter",
    "RestStoreClient",
    "UnsupportedImageError",
    "build_filter_params",
    "detect_image_type",
    "format_design_table",
    "to_data_url",
]
