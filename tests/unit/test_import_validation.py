"""Unit tests for import document validation and shape detection."""

from __future__ import annotations

import pytest

from panels.application.importer import (
    extract_display_name,
    is_minimal_format,
    is_proposal_format,
    map_panel_code,
    proposal_to_extended,
    validate_import_data,
)
from panels.application.importer.formats import proposal_design_data, to_number


class TestExtendedValidation:
    def test_valid_document(self) -> None:
        data = {
            "properties": [{"region": "North", "property_name": "Harbour"}],
            "projects": [
                {
                    "project_name": "Lobby",
                    "designs": [{"design_name": "Entrance", "panel_type": "SP"}],
                }
            ],
        }
        result = validate_import_data(data)
        assert result.is_valid
        assert result.exit_code == 0

    def test_missing_properties_array(self) -> None:
        result = validate_import_data({"projects": []})
        assert result.messages == ['Missing or invalid "properties" array']

    def test_per_record_messages(self) -> None:
        data = {
            "properties": [{"region": "North"}, {"property_name": "B"}],
            "projects": [{"designs": [{"revision_of": "Lobby"}]}],
        }
        result = validate_import_data(data)
        assert result.messages == [
            "Property 0: Missing property_name",
            "Property 1: Missing region",
            "Project 0: Missing project_name",
            "Project 0, Design 0: Missing panel_type",
        ]
        assert result.exit_code == 1

    def test_project_without_designs(self) -> None:
        result = validate_import_data({"properties": [], "projects": [{"project_name": "P"}]})
        assert result.messages == ["Project 0: Missing or invalid designs array"]

    def test_user_without_group_is_warning(self) -> None:
        result = validate_import_data({"properties": [], "users": [{"email": "a@example.com"}]})
        assert result.is_valid
        assert result.has_warnings
        assert result.exit_code == 2

    def test_non_object_document(self) -> None:
        assert not validate_import_data([1, 2]).is_valid


class TestMinimalValidation:
    def test_detected(self) -> None:
        data = {"project_name": "Lobby", "designs": []}
        assert is_minimal_format(data)
        assert not is_minimal_format({"properties": [], **data})

    def test_invalid_quantities(self) -> None:
        data = {
            "project_name": "Lobby",
            "designs": [
                {"panel_type": "SP", "quantity": 0, "design_name": "A"},
                {"panel_type": "SP", "quantity": True, "design_name": "B"},
                {"panel_type": "SP", "quantity": 3, "design_name": "C"},
            ],
        }
        assert validate_import_data(data).messages == [
            "Design 0: Invalid quantity",
            "Design 1: Invalid quantity",
        ]


PROPOSAL = {
    "Property name": "Harbour Hotel",
    "Property code": "HTL9",
    "Region": "North",
    "Panel Designs": [
        {"Panel Name": "Bedside", "Panel Code": "GS-3", "Allocated Quantity": "4", "Max Quantity": 6},
        {"Panel Name": "Desk", "Panel Code": "GS-2", "Extended 2-socket": "true"},
    ],
}


class TestProposalFormat:
    def test_detected(self) -> None:
        assert is_proposal_format(PROPOSAL)
        assert validate_import_data(PROPOSAL).is_valid

    def test_converted_to_extended(self) -> None:
        extended = proposal_to_extended(PROPOSAL)
        assert extended["properties"] == [{"region": "North", "property_name": "Harbour Hotel"}]
        designs = extended["projects"][0]["designs"]
        assert [d["panel_type"] for d in designs] == ["SP", "X2H"]
        assert designs[0]["design_data"]["allocatedQuantity"] == 4
        assert designs[0]["design_data"]["maxQuantity"] == 6

    def test_ambiguous_code_needs_selection(self) -> None:
        _, panel_type, data = proposal_design_data(PROPOSAL["Panel Designs"][1], "H", None, "N")
        assert panel_type == "X2H"
        assert data["requiresPanelTypeSelection"] is True
        assert data["availablePanelTypes"] == ["X2H", "X2V"]
        assert "Panel Name" not in data["features"]


class TestMapPanelCode:
    @pytest.mark.parametrize(
        ("code", "row", "expected"),
        [
            ("GS-3", None, "SP"),
            ("GS-3", {"Extended 1-socket": True}, "X1H_X1V"),
            ("GS-3", {"Extended 1-socket": 1, "Extended 2-socket": "true"}, "X2H_X2V"),
            ("idpg-1", None, "IDPG"),
            ("TAG", None, "TAG"),
            ("dph-2", None, "DPH"),
            ("custom", None, "CUSTOM"),
            ("", None, "Unknown"),
            (None, None, "Unknown"),
        ],
    )
    def test_mapping(self, code: str | None, row: dict | None, expected: str) -> None:
        assert map_panel_code(code, row) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [(3, 3), ("4", 4), ("2.5", 2.5), (0, 0), ("", None), ("many", None), (True, None)],
)
def test_to_number(value: object, expected: object) -> None:
    assert to_number(value) == expected


class TestExtractDisplayName:
    def test_prefers_project_name(self) -> None:
        assert extract_display_name({"project_name": "P", "properties": [{"property_name": "X"}]}) == "P"

    def test_falls_back_to_property(self) -> None:
        assert extract_display_name({"properties": [{"property_name": "X"}]}) == "X"
        assert extract_display_name(PROPOSAL) == "Harbour Hotel"

    def test_none_when_unnamed(self) -> None:
        assert extract_display_name({}) is None
        assert extract_display_name("text") is None
