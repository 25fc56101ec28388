"""Shallow structural validation of bulk import documents.

Only presence is checked: required arrays exist and required string
fields are set. Types and references are resolved during the import
itself, where failures become per-record errors.
"""

from dataclasses import dataclass, field
from typing import Any

from panels.application.importer.formats import (
    is_minimal_format,
    is_proposal_format,
    proposal_to_extended,
)


@dataclass
class ValidationError:
    """A blocking problem in an import document.

    Attributes:
        path: JSON path of the offending field (e.g. "projects[0].project_name")
        message: Human-readable description, e.g. "Project 0: Missing project_name"
        value: The offending value, if any
    """

    path: str
    message: str
    value: Any = None


@dataclass
class ValidationWarning:
    """A non-blocking observation about an import document."""

    path: str
    message: str
    suggestion: str | None = None


@dataclass
class ValidationResult:
    """Container for validation errors and warnings."""

    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def exit_code(self) -> int:
        """CLI exit code: 0 clean, 1 errors, 2 warnings only."""
        if self.errors:
            return 1
        if self.warnings:
            return 2
        return 0

    @property
    def messages(self) -> list[str]:
        return [error.message for error in self.errors]

    def add_error(self, path: str, message: str, value: Any = None) -> "ValidationResult":
        self.errors.append(ValidationError(path=path, message=message, value=value))
        return self

    def add_warning(
        self, path: str, message: str, suggestion: str | None = None
    ) -> "ValidationResult":
        self.warnings.append(
            ValidationWarning(path=path, message=message, suggestion=suggestion)
        )
        return self

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self


def _validate_minimal(data: dict[str, Any]) -> ValidationResult:
    result = ValidationResult()
    if not data.get("project_name"):
        result.add_error("project_name", "Missing project_name")
    designs = data.get("designs")
    if not isinstance(designs, list) or not designs:
        result.add_error("designs", "Missing designs array")
        return result
    for i, design in enumerate(designs):
        if not isinstance(design, dict):
            result.add_error(f"designs[{i}]", f"Design {i}: Not an object", design)
            continue
        if not design.get("panel_type"):
            result.add_error(f"designs[{i}].panel_type", f"Design {i}: Missing panel_type")
        quantity = design.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, (int, float)) or quantity <= 0:
            result.add_error(
                f"designs[{i}].quantity", f"Design {i}: Invalid quantity", quantity
            )
        if not design.get("design_name"):
            result.add_error(
                f"designs[{i}].design_name", f"Design {i}: Missing design_name"
            )
    return result


def _check_optional_array(
    result: ValidationResult, data: dict[str, Any], key: str
) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        result.add_error(key, f'Invalid "{key}" array', value)
        return []
    return value


def _validate_extended(data: dict[str, Any]) -> ValidationResult:
    result = ValidationResult()

    properties = data.get("properties")
    if not isinstance(properties, list):
        result.add_error("properties", 'Missing or invalid "properties" array')
        properties = []
    user_groups = _check_optional_array(result, data, "user_groups")
    users = _check_optional_array(result, data, "users")
    projects = _check_optional_array(result, data, "projects")

    for i, prop in enumerate(properties):
        prop = prop if isinstance(prop, dict) else {}
        if not prop.get("region"):
            result.add_error(f"properties[{i}].region", f"Property {i}: Missing region")
        if not prop.get("property_name"):
            result.add_error(
                f"properties[{i}].property_name", f"Property {i}: Missing property_name"
            )

    for i, ug in enumerate(user_groups):
        ug = ug if isinstance(ug, dict) else {}
        if not ug.get("ug"):
            result.add_error(f"user_groups[{i}].ug", f"User Group {i}: Missing ug")
        if not ug.get("property_name"):
            result.add_error(
                f"user_groups[{i}].property_name",
                f"User Group {i}: Missing property_name",
            )

    for i, user in enumerate(users):
        user = user if isinstance(user, dict) else {}
        if not user.get("email"):
            result.add_error(f"users[{i}].email", f"User {i}: Missing email")
        elif not user.get("ug_id") and not user.get("property_name"):
            result.add_warning(
                f"users[{i}]",
                f"User {i}: No ug_id or property_name, user will have no group",
                "Add ug_id or property_name to grant property access",
            )

    for i, project in enumerate(projects):
        project = project if isinstance(project, dict) else {}
        if not project.get("project_name"):
            result.add_error(
                f"projects[{i}].project_name", f"Project {i}: Missing project_name"
            )
        designs = project.get("designs")
        if not isinstance(designs, list):
            result.add_error(
                f"projects[{i}].designs",
                f"Project {i}: Missing or invalid designs array",
            )
            continue
        for j, design in enumerate(designs):
            design = design if isinstance(design, dict) else {}
            path = f"projects[{i}].designs[{j}]"
            if not design.get("design_name") and not design.get("revision_of"):
                result.add_error(
                    path, f"Project {i}, Design {j}: Missing design_name or revision_of"
                )
            if not design.get("panel_type"):
                result.add_error(
                    f"{path}.panel_type", f"Project {i}, Design {j}: Missing panel_type"
                )
    return result


def validate_import_data(data: Any) -> ValidationResult:
    """Check the shape of an import document.

    Accepts the extended shape (``properties`` and optional
    ``user_groups``/``users``/``projects``), the minimal single-project
    shape, and the proposal shape (validated after conversion to the
    extended shape).

    Example:
        >>> result = validate_import_data({"properties": [{"region": "EU"}]})
        >>> result.messages
        ['Property 0: Missing property_name']
    """
    if not isinstance(data, dict):
        return ValidationResult().add_error("", "Import document must be a JSON object")
    if is_proposal_format(data):
        data = proposal_to_extended(data)
    if is_minimal_format(data):
        return _validate_minimal(data)
    return _validate_extended(data)
