"""Application settings: schema and loader."""

from .loader import (
    ConfigError,
    extract_validation_errors,
    format_json_path,
    format_validation_error_message,
    load_settings,
    read_json_document,
)
from .schema import DEFAULT_ADMIN_EMAIL, AppSettings, split_emails

__all__ = [
    "AppSettings",
    "ConfigError",
    "DEFAULT_ADMIN_EMAIL",
    "extract_validation_errors",
    "format_json_path",
    "format_validation_error_message",
    "load_settings",
    "read_json_document",
    "split_emails",
]
