"""Settings loader with environment overrides and readable errors.

Settings come from an optional JSON file, then ``PANELS_*`` environment
variables override individual fields:

- ``PANELS_STORE_URL``
- ``PANELS_STORE_API_KEY``
- ``PANELS_ADMIN_EMAILS`` (comma, semicolon, or whitespace separated)
- ``PANELS_DEFAULT_ADMIN_EMAIL``
- ``PANELS_REQUEST_TIMEOUT``
- ``PANELS_DEFAULT_OWNER_EMAIL``
"""

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from panels.application.config.schema import AppSettings

ENV_PREFIX = "PANELS_"

_ENV_FIELDS = (
    "store_url",
    "store_api_key",
    "admin_emails",
    "default_admin_email",
    "request_timeout",
    "default_owner_email",
)


class ConfigError(Exception):
    """Exception raised for configuration-related errors.

    Attributes:
        message: The primary error message
        error_type: Category of error (file_not_found, json_parse, validation)
        path: Path to the settings file (if applicable)
        details: Additional error details (line/column for JSON, validation errors, etc.)
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def format_json_path(loc: tuple[str | int, ...]) -> str:
    """Format a Pydantic location tuple as a JSON path string.

    Examples:
        >>> format_json_path(("designs", 0, "quantity"))
        'designs[0].quantity'
    """
    parts: list[str] = []
    for segment in loc:
        if isinstance(segment, int):
            if parts:
                parts[-1] = f"{parts[-1]}[{segment}]"
            else:
                parts.append(f"[{segment}]")
        else:
            parts.append(str(segment))
    return ".".join(parts)


def extract_validation_errors(
    error: PydanticValidationError,
) -> list[dict[str, Any]]:
    """Flatten a Pydantic ValidationError into path/message dictionaries."""
    details: list[dict[str, Any]] = []
    for err in error.errors():
        details.append(
            {
                "path": format_json_path(err["loc"]),
                "message": err["msg"],
                "value": err.get("input"),
                "error_type": err["type"],
            }
        )
    return details


def format_validation_error_message(
    details: list[dict[str, Any]], heading: str = "Configuration validation failed:"
) -> str:
    lines = [heading]
    for detail in details:
        path = detail["path"]
        message = detail["message"]
        value = detail.get("value")
        if value is not None and not isinstance(value, (dict, list)):
            lines.append(f"  - {path}: {message} (got: {value!r})")
        else:
            lines.append(f"  - {path}: {message}")
    return "\n".join(lines)


def read_json_document(path: Path, kind: str = "settings file") -> dict[str, Any]:
    """Read a JSON object from disk, raising ConfigError with a typed category."""
    if not path.exists():
        raise ConfigError(
            message=f"{kind.capitalize()} not found: {path}",
            error_type="file_not_found",
            path=path,
        )
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(
            message=f"Error reading {kind}: {path}: {e}",
            error_type="file_read_error",
            path=path,
        )
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            message=f"Invalid JSON in {kind}: {path} (line {e.lineno}, column {e.colno}): {e.msg}",
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        )
    if not isinstance(data, dict):
        raise ConfigError(
            message=f"{kind.capitalize()} must contain a JSON object: {path}",
            error_type="validation",
            path=path,
        )
    return data


def _env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for name in _ENV_FIELDS:
        value = env.get(f"{ENV_PREFIX}{name.upper()}")
        if value is not None and value != "":
            overrides[name] = value
    return overrides


def load_settings(
    path: Path | None = None, env: Mapping[str, str] | None = None
) -> AppSettings:
    """Load settings from an optional JSON file plus environment overrides.

    Args:
        path: JSON settings file. None means environment and defaults only.
        env: Environment mapping, defaults to ``os.environ``.

    Returns:
        Validated AppSettings.

    Raises:
        ConfigError: With error_type "file_not_found", "json_parse", or
            "validation".
    """
    data = read_json_document(path) if path is not None else {}
    data.update(_env_overrides(os.environ if env is None else env))

    try:
        return AppSettings.model_validate(data)
    except PydanticValidationError as e:
        details = extract_validation_errors(e)
        raise ConfigError(
            message=format_validation_error_message(details),
            error_type="validation",
            path=path,
            details=details,
        )
