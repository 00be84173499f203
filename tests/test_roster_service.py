"""
Unit Tests for Roster Extraction

Tests roster extraction from images, text, CSV and PDFs, and the roster
formatting helpers.
"""

import json
from datetime import date

import pytest
from unittest.mock import patch

from config import ROSTER_EXTRACTION_SCHEMA
from services.roster_service import (
    ExtractedStudent,
    RosterExtractionResult,
    RosterService,
    extract_roster_from_csv,
    extract_roster_from_image,
    extract_roster_from_pdf,
    extract_roster_from_text,
)
from utils.roster_format import (
    calculate_age,
    csv_to_text,
    format_phone_number,
    get_belt_color,
    infer_program_from_age,
)


ROSTER_EXTRACTION = {
    "success": True,
    "students": [
        {
            "firstName": "Emma", "lastName": "Johnson", "beltRank": "Blue",
            "program": "Kids", "guardianName": "Laura Johnson", "guardianPhone": "555-123-4567",
        },
        {"firstName": "Liam", "lastName": "Ortiz", "membershipStatus": "Trial"},
    ],
    "confidence": 0.88,
    "totalFound": 2,
}


@pytest.fixture
def mock_llm(make_completion):
    with patch('services.extraction.invoke_llm') as mock_invoke:
        mock_invoke.return_value = make_completion(content=json.dumps(ROSTER_EXTRACTION))
        yield mock_invoke


class TestRosterExtraction:
    """Test roster extraction entry points."""

    def test_extract_from_text(self, mock_llm):
        text = "Emma Johnson, blue belt, kids (mom Laura 555-123-4567)\nLiam Ortiz - trial"

        result = extract_roster_from_text(text)

        assert result.success is True
        assert result.total_found == 2
        assert result.students[0] == ExtractedStudent(
            first_name="Emma", last_name="Johnson", belt_rank="Blue", program="Kids",
            guardian_name="Laura Johnson", guardian_phone="555-123-4567",
        )
        assert result.students[1].membership_status == "Trial"
        assert result.raw_text == text

        kwargs = mock_llm.call_args.kwargs
        assert kwargs["response_format"]["json_schema"] == ROSTER_EXTRACTION_SCHEMA

    def test_to_dict(self, mock_llm):
        result = extract_roster_from_image("https://example.com/signin.jpg")

        assert result.to_dict() == ROSTER_EXTRACTION

    def test_extract_from_image_with_context(self, mock_llm):
        RosterService.extract_from_image("https://example.com/signin.jpg", context="Tuesday kids class")

        prompt = mock_llm.call_args.kwargs["messages"][1]["content"][0]["text"]
        assert "Tuesday kids class" in prompt

    def test_extract_from_csv(self, mock_llm):
        result = extract_roster_from_csv("First Name,Last Name,Belt\nEmma,Johnson,Blue\nLiam,Ortiz,White")

        assert result.success is True
        prompt = mock_llm.call_args.kwargs["messages"][1]["content"]
        assert "Student 1: First Name: Emma, Last Name: Johnson, Belt: Blue" in prompt
        assert result.raw_text.startswith("Headers: First Name, Last Name, Belt")

    def test_empty_csv(self, mock_llm):
        result = extract_roster_from_csv("   ")

        assert result.success is False
        assert result.total_found == 0
        mock_llm.assert_not_called()

    @patch('services.roster_service.extract_text_from_pdf')
    def test_extract_from_pdf(self, mock_extract, mock_llm):
        mock_extract.return_value = "Emma Johnson\nLiam Ortiz"

        result = extract_roster_from_pdf("roster.pdf")

        assert result.success is True
        assert result.raw_text == "Emma Johnson\nLiam Ortiz"


class TestRosterFailSoft:
    """Test failures become success=False results."""

    def test_upstream_exception(self, mock_llm):
        mock_llm.side_effect = RuntimeError("quota exceeded")

        result = extract_roster_from_text("Emma Johnson")

        assert result == RosterExtractionResult.failed("quota exceeded")
        assert result.to_dict() == {
            "success": False, "students": [], "confidence": 0.0, "totalFound": 0, "error": "quota exceeded",
        }

    def test_invalid_belt_rank(self, mock_llm, make_completion):
        payload = json.loads(json.dumps(ROSTER_EXTRACTION))
        payload["students"][0]["beltRank"] = "Plaid"
        mock_llm.return_value = make_completion(content=json.dumps(payload))

        assert extract_roster_from_text("Emma Johnson").success is False

    def test_missing_last_name(self, mock_llm, make_completion):
        payload = {"success": True, "students": [{"firstName": "Emma"}], "confidence": 0.5, "totalFound": 1}
        mock_llm.return_value = make_completion(content=json.dumps(payload))

        assert extract_roster_from_text("Emma").success is False


class TestRosterFormatting:
    """Test roster helper functions."""

    def test_csv_to_text_tab_delimited(self):
        text = csv_to_text("Name\tBelt\nEmma\tBlue\n\tWhite")

        assert text == "Headers: Name, Belt\n\nStudent 1: Name: Emma, Belt: Blue\nStudent 2: Belt: White\n"

    def test_csv_to_text_semicolon_and_quotes(self):
        text = csv_to_text('"Name";"Belt"\n"Emma";"Blue"')

        assert "Student 1: Name: Emma, Belt: Blue" in text

    def test_csv_to_text_quoted_cells_keep_delimiters(self):
        """Test quoted names and addresses containing commas stay in one cell."""
        text = csv_to_text('Name,Address,Belt\n"Doe, John","12 Main St, Apt 4",Blue')

        assert text == (
            "Headers: Name, Address, Belt\n\n"
            "Student 1: Name: Doe, John, Address: 12 Main St, Apt 4, Belt: Blue\n"
        )

    def test_csv_to_text_skips_blank_rows(self):
        assert csv_to_text("Name,Belt\n,\nEmma,Blue") == (
            "Headers: Name, Belt\n\nStudent 2: Name: Emma, Belt: Blue\n"
        )

    @pytest.mark.parametrize("phone, expected", [
        ("5551234567", "555-123-4567"),
        ("(555) 123-4567", "555-123-4567"),
        ("+1 555 123 4567", "555-123-4567"),
        ("12345", "12345"),
    ])
    def test_format_phone_number(self, phone, expected):
        assert format_phone_number(phone) == expected

    def test_calculate_age(self):
        today = date(2024, 6, 15)

        assert calculate_age("2014-06-15", today=today) == 10
        assert calculate_age("2014-06-16", today=today) == 9
        assert calculate_age("not a date", today=today) is None
        assert calculate_age(None) is None

    @pytest.mark.parametrize("age, program", [(4, "Kids"), (12, "Kids"), (13, "Teens"), (17, "Teens"), (18, "Adults"), (3, "Adults")])
    def test_infer_program_from_age(self, age, program):
        assert infer_program_from_age(age) == program

    def test_get_belt_color(self):
        assert get_belt_color("Black") == "#000000"
        assert get_belt_color("Plaid") == "#CCCCCC"
