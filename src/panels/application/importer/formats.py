"""Import document shapes and the proposal panel-code mapping.

Three shapes are accepted:

- extended: ``properties[]`` plus optional ``user_groups[]``, ``users[]``
  and ``projects[]`` (projects nest ``designs[]``, designs nest
  ``panel_configurations[]``);
- minimal: ``project_name``, optional ``project_code`` and ``designs[]``
  of ``{panel_type, quantity, design_name}``;
- proposal: ``"Property name"``, ``"Property code"``, ``"Region"`` and
  ``"Panel Designs"`` rows keyed by human-readable column names.
"""

from __future__ import annotations

from typing import Any

PROPOSAL_SOURCE_FORMAT = "colleague-proposal-1.0"

# Panel codes that need the user to pick an orientation later
AMBIGUOUS_PANEL_TYPES: dict[str, tuple[str, ...]] = {
    "X1H_X1V": ("X1H", "X1V"),
    "X2H_X2V": ("X2H", "X2V"),
}

_CODE_PREFIXES = ("IDPG", "TAG", "X1H", "X1V", "X2H", "X2V", "DPH", "DPV")

# Proposal row columns that are not carried into design features
_PROPOSAL_RESERVED_KEYS = frozenset(
    {"Panel Name", "Panel Code", "DesignId", "Allocated Quantity", "Max Quantity"}
)


def is_proposal_format(data: Any) -> bool:
    return (
        isinstance(data, dict)
        and isinstance(data.get("Property name"), str)
        and isinstance(data.get("Panel Designs"), list)
    )


def is_minimal_format(data: Any) -> bool:
    return (
        isinstance(data, dict)
        and not any(isinstance(data.get(k), list) for k in ("properties", "users", "user_groups"))
        and isinstance(data.get("designs"), list)
        and bool(data.get("project_name"))
    )


def _truthy_flag(value: Any) -> bool:
    return value is True or value == "true" or value == 1


def map_panel_code(panel_code: str | None, row: dict[str, Any] | None = None) -> str:
    """Map an external panel code to a panel type.

    ``GS`` codes become ``SP`` unless the row carries extended socket
    flags, in which case an ambiguous marker such as ``X1H_X1V`` is
    returned. Unknown codes are passed through upper-cased.

    Examples:
        >>> map_panel_code("GS-3")
        'SP'
        >>> map_panel_code("GS-3", {"Extended 1-socket": True})
        'X1H_X1V'
        >>> map_panel_code("dph-2")
        'DPH'
    """
    code = (panel_code or "").strip().upper()
    if not code:
        return "Unknown"
    if code.startswith("GS"):
        row = row or {}
        one = _truthy_flag(row.get("Extended 1-socket"))
        two = _truthy_flag(row.get("Extended 2-socket"))
        if two:
            return "X2H_X2V"
        if one:
            return "X1H_X1V"
        return "SP"
    for prefix in _CODE_PREFIXES:
        if code.startswith(prefix):
            return prefix
    return code


def resolve_panel_type(mapped: str) -> str:
    """Pick the default orientation for an ambiguous marker."""
    choices = AMBIGUOUS_PANEL_TYPES.get(mapped)
    return choices[0] if choices else mapped


def to_number(value: Any) -> int | float | None:
    """Coerce a quantity cell to a number; blanks and junk become None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    return int(number) if number.is_integer() else number


def proposal_design_data(
    row: dict[str, Any],
    property_name: str,
    property_code: str | None,
    region: str,
) -> tuple[str, str, dict[str, Any]]:
    """Build ``(design_name, panel_type, design_data)`` for one proposal row."""
    design_name = str(row.get("Panel Name") or row.get("DesignId") or "Unnamed Design")
    panel_code = row.get("Panel Code")
    mapped = map_panel_code(panel_code if isinstance(panel_code, str) else "", row)
    panel_type = resolve_panel_type(mapped)

    allocated = to_number(row.get("Allocated Quantity"))
    maximum = to_number(row.get("Max Quantity"))
    design_data: dict[str, Any] = {
        "sourceFormat": PROPOSAL_SOURCE_FORMAT,
        "panelType": panel_type,
        "originalPanelCode": panel_code,
        "originalRow": row,
        "region": region,
        "propertyName": property_name,
        "propertyCode": property_code,
        "features": {k: v for k, v in row.items() if k not in _PROPOSAL_RESERVED_KEYS},
    }
    if allocated is not None:
        design_data["allocatedQuantity"] = allocated
        design_data["quantity"] = allocated
    if maximum is not None:
        design_data["maxQuantity"] = maximum
    choices = AMBIGUOUS_PANEL_TYPES.get(mapped)
    if choices:
        design_data["requiresPanelTypeSelection"] = True
        design_data["availablePanelTypes"] = list(choices)
        design_data["defaultPanelType"] = choices[0]
    return design_name, panel_type, design_data


def proposal_header(data: dict[str, Any]) -> tuple[str, str | None, str]:
    """Return ``(property_name, property_code, region)`` of a proposal."""
    return (
        str(data.get("Property name") or "Unnamed Property"),
        data.get("Property code") or None,
        str(data.get("Region") or "UNKNOWN"),
    )


def proposal_to_extended(data: dict[str, Any]) -> dict[str, Any]:
    """Rewrite a proposal document into the extended shape."""
    property_name, property_code, region = proposal_header(data)
    designs = []
    for row in data.get("Panel Designs") or []:
        row = row if isinstance(row, dict) else {}
        design_name, panel_type, design_data = proposal_design_data(
            row, property_name, property_code, region
        )
        designs.append(
            {"design_name": design_name, "panel_type": panel_type, "design_data": design_data}
        )
    return {
        "import_metadata": {
            "version": PROPOSAL_SOURCE_FORMAT,
            "description": f"Imported from proposal for {property_name}",
            "total_properties": 1,
            "total_projects": 1,
            "total_designs": len(designs),
        },
        "properties": [{"region": region, "property_name": property_name}],
        "projects": [
            {
                "project_name": property_name,
                "project_description": property_code,
                "property_name": property_name,
                "designs": designs,
            }
        ],
    }


def extract_display_name(data: Any) -> str | None:
    """Name to show for an import document before it is imported.

    Uses ``project_name``, then the first property's name, then the
    proposal's ``"Property name"``.
    """
    if not isinstance(data, dict):
        return None
    if data.get("project_name"):
        return str(data["project_name"])
    properties = data.get("properties")
    if isinstance(properties, list) and properties:
        first = properties[0]
        if isinstance(first, dict) and first.get("property_name"):
            return str(first["property_name"])
    if data.get("Property name"):
        return str(data["Property name"])
    return None
