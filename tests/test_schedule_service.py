"""
Unit Tests for Schedule Extraction

Tests the image, text and PDF extraction paths, fail-soft error shaping,
result validation and the schedule display helpers.
"""

import json

import pytest
from unittest.mock import patch

from config import SCHEDULE_EXTRACTION_SCHEMA
from services.extraction import PARSE_FAILURE_MESSAGE, run_structured_extraction
from services.schedule_service import (
    ExtractedClass,
    ScheduleExtractionResult,
    ScheduleService,
    extract_schedule_from_image,
    extract_schedule_from_pdf,
    extract_schedule_from_text,
    format_time_12_hour,
    get_day_abbreviation,
)
from utils.schedule_format import normalize_time


BJJ_TEXT = "BJJ Mon-Wed-Fri 6pm-7pm"

BJJ_EXTRACTION = {
    "success": True,
    "classes": [
        {"name": "BJJ", "dayOfWeek": day, "startTime": "18:00", "endTime": "19:00"}
        for day in ("Monday", "Wednesday", "Friday")
    ],
    "confidence": 0.92,
}


@pytest.fixture
def mock_llm(make_completion):
    with patch('services.extraction.invoke_llm') as mock_invoke:
        mock_invoke.completion = make_completion
        yield mock_invoke


def respond_with(mock_llm, payload):
    content = payload if isinstance(payload, str) else json.dumps(payload)
    mock_llm.return_value = mock_llm.completion(content=content)


class TestExtractFromText:
    """Test schedule extraction from text."""

    def test_multi_day_class_is_flattened(self, mock_llm):
        """Test a Mon-Wed-Fri class comes back as one record per day."""
        respond_with(mock_llm, BJJ_EXTRACTION)

        result = extract_schedule_from_text(BJJ_TEXT)

        assert result.success is True
        assert [(c.day_of_week, c.start_time, c.end_time) for c in result.classes] == [
            ("Monday", "18:00", "19:00"),
            ("Wednesday", "18:00", "19:00"),
            ("Friday", "18:00", "19:00"),
        ]
        assert result.confidence == 0.92
        assert result.raw_text == BJJ_TEXT

    def test_request_is_schema_constrained(self, mock_llm):
        respond_with(mock_llm, BJJ_EXTRACTION)

        extract_schedule_from_text(BJJ_TEXT)

        kwargs = mock_llm.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_schema", "json_schema": SCHEDULE_EXTRACTION_SCHEMA}
        assert kwargs["temperature"] == 0.2
        assert [m["role"] for m in kwargs["messages"]] == ["system", "user"]
        assert BJJ_TEXT in kwargs["messages"][1]["content"]
        assert mock_llm.call_count == 1

    def test_context_is_included(self, mock_llm):
        respond_with(mock_llm, BJJ_EXTRACTION)

        extract_schedule_from_text(BJJ_TEXT, context="Summer session")

        assert "Summer session" in mock_llm.call_args.kwargs["messages"][1]["content"]

    def test_to_dict_uses_camel_case(self, mock_llm):
        respond_with(mock_llm, {
            "success": True,
            "classes": [{
                "name": "Kids Karate", "dayOfWeek": "Tuesday", "startTime": "16:00",
                "endTime": "16:45", "instructor": "Sensei Ito", "maxCapacity": 20,
            }],
            "confidence": 0.8,
            "warnings": ["Room not specified"],
        })

        result = extract_schedule_from_text("Kids Karate Tue 4-4:45pm, Sensei Ito, max 20")

        assert result.to_dict() == {
            "success": True,
            "classes": [{
                "name": "Kids Karate", "dayOfWeek": "Tuesday", "startTime": "16:00",
                "endTime": "16:45", "instructor": "Sensei Ito", "maxCapacity": 20,
            }],
            "confidence": 0.8,
            "warnings": ["Room not specified"],
            "rawText": "Kids Karate Tue 4-4:45pm, Sensei Ito, max 20",
        }

    def test_twelve_hour_times_are_normalized(self, mock_llm):
        respond_with(mock_llm, {
            "success": True,
            "classes": [{"name": "Adults", "dayOfWeek": "Saturday", "startTime": "9:00 AM", "endTime": "10:30am"}],
            "confidence": 0.7,
        })

        result = extract_schedule_from_text("Adults Sat 9-10:30am")

        assert (result.classes[0].start_time, result.classes[0].end_time) == ("09:00", "10:30")


class TestExtractFromImage:
    """Test schedule extraction from images."""

    def test_image_message_shape(self, mock_llm):
        respond_with(mock_llm, BJJ_EXTRACTION)

        result = extract_schedule_from_image("https://example.com/schedule.jpg")

        user_message = mock_llm.call_args.kwargs["messages"][1]
        assert user_message["content"][1] == {
            "type": "image_url",
            "image_url": {"url": "https://example.com/schedule.jpg", "detail": "high"},
        }
        assert result.success is True
        assert result.raw_text is None

    def test_image_context(self, mock_llm):
        respond_with(mock_llm, BJJ_EXTRACTION)

        ScheduleService.extract_from_image("data:image/png;base64,AAAA", context="Winter term")

        prompt = mock_llm.call_args.kwargs["messages"][1]["content"][0]["text"]
        assert prompt.endswith("Additional context: Winter term")


class TestFailSoft:
    """Test every failure becomes a success=False result."""

    def test_non_string_content(self, mock_llm):
        mock_llm.return_value = mock_llm.completion(content=None)

        result = extract_schedule_from_text(BJJ_TEXT)

        assert result == ScheduleExtractionResult.failed(PARSE_FAILURE_MESSAGE)
        assert result.to_dict() == {
            "success": False, "classes": [], "confidence": 0.0, "error": "Failed to parse LLM response",
        }

    def test_no_choices(self, mock_llm):
        mock_llm.return_value = {"id": "x", "model": "m", "choices": [], "usage": None}

        result = extract_schedule_from_image("https://example.com/s.png")

        assert result.error == PARSE_FAILURE_MESSAGE

    def test_upstream_exception(self, mock_llm):
        mock_llm.side_effect = RuntimeError("Network unreachable")

        result = extract_schedule_from_text(BJJ_TEXT)

        assert result.success is False
        assert result.classes == []
        assert result.confidence == 0.0
        assert result.error == "Network unreachable"

    def test_exception_without_message(self, mock_llm):
        mock_llm.side_effect = TimeoutError()

        assert extract_schedule_from_text(BJJ_TEXT).error == "TimeoutError"

    def test_invalid_json(self, mock_llm):
        respond_with(mock_llm, "{not json")

        result = extract_schedule_from_text(BJJ_TEXT)

        assert result.success is False
        assert result.error

    def test_unknown_day_fails_validation(self, mock_llm):
        respond_with(mock_llm, {
            "success": True,
            "classes": [{"name": "BJJ", "dayOfWeek": "Funday", "startTime": "18:00", "endTime": "19:00"}],
            "confidence": 0.9,
        })

        assert extract_schedule_from_text(BJJ_TEXT).success is False

    def test_unlisted_field_fails_validation(self, mock_llm):
        payload = json.loads(json.dumps(BJJ_EXTRACTION))
        payload["classes"][0]["color"] = "red"
        respond_with(mock_llm, payload)

        assert extract_schedule_from_text(BJJ_TEXT).success is False

    def test_confidence_out_of_range(self, mock_llm):
        respond_with(mock_llm, dict(BJJ_EXTRACTION, confidence=1.5))

        assert extract_schedule_from_text(BJJ_TEXT).success is False

    def test_model_reported_failure_is_passed_through(self, mock_llm):
        respond_with(mock_llm, {"success": False, "classes": [], "confidence": 0.1, "warnings": ["Image is blurry"]})

        result = extract_schedule_from_image("https://example.com/blurry.jpg")

        assert result.success is False
        assert result.warnings == ["Image is blurry"]
        assert result.error is None


class TestExtractFromPdf:
    """Test the PDF path."""

    @patch('services.schedule_service.extract_text_from_pdf')
    def test_pdf_text_goes_through_text_path(self, mock_extract, mock_llm):
        mock_extract.return_value = BJJ_TEXT
        respond_with(mock_llm, BJJ_EXTRACTION)

        result = extract_schedule_from_pdf("schedule.pdf")

        assert result.success is True
        assert result.raw_text == BJJ_TEXT
        assert len(result.classes) == 3

    @patch('services.schedule_service.extract_text_from_pdf')
    def test_scanned_pdf(self, mock_extract, mock_llm):
        mock_extract.return_value = ""

        result = extract_schedule_from_pdf("scan.pdf")

        assert result.success is False
        assert "No extractable text" in result.error
        mock_llm.assert_not_called()

    def test_missing_pdf(self, mock_llm, tmp_path):
        result = extract_schedule_from_pdf(tmp_path / "missing.pdf")

        assert result.success is False
        assert "not found" in result.error


class TestRunner:
    """Test the shared structured-extraction runner directly."""

    def test_injected_llm(self, make_completion):
        llm = lambda **kwargs: make_completion(content=json.dumps(BJJ_EXTRACTION))

        result = run_structured_extraction(
            [{"role": "user", "content": BJJ_TEXT}],
            SCHEDULE_EXTRACTION_SCHEMA,
            ScheduleExtractionResult,
            ScheduleExtractionResult.failed,
            raw_text=BJJ_TEXT,
            llm=llm,
        )

        assert result.success is True
        assert result.raw_text == BJJ_TEXT

    def test_results_are_frozen(self):
        extracted = ExtractedClass(name="BJJ", day_of_week="Monday", start_time="18:00", end_time="19:00")

        with pytest.raises(Exception):
            extracted.name = "Judo"


class TestScheduleFormatting:
    """Test time and day display helpers."""

    @pytest.mark.parametrize("time_24, expected", [
        ("09:00", "9:00 AM"),
        ("13:00", "1:00 PM"),
        ("00:00", "12:00 AM"),
        ("12:00", "12:00 PM"),
        ("18:30", "6:30 PM"),
    ])
    def test_format_time_12_hour(self, time_24, expected):
        assert format_time_12_hour(time_24) == expected

    @pytest.mark.parametrize("day, expected", [
        ("Monday", "Mon"),
        ("Wednesday", "Wed"),
        ("Sunday", "Sun"),
        ("Funday", "Fun"),
    ])
    def test_get_day_abbreviation(self, day, expected):
        assert get_day_abbreviation(day) == expected

    @pytest.mark.parametrize("value, expected", [
        ("18:00", "18:00"),
        ("6:00", "06:00"),
        ("6pm", "18:00"),
        ("6:30 PM", "18:30"),
        ("12 a.m.", "00:00"),
        ("12:15pm", "12:15"),
        ("0630", "06:30"),
    ])
    def test_normalize_time(self, value, expected):
        assert normalize_time(value) == expected

    @pytest.mark.parametrize("value", ["25:00", "13pm", "6:75", "evening", ""])
    def test_normalize_time_rejects(self, value):
        with pytest.raises(ValueError):
            normalize_time(value)


@pytest.mark.integration
class TestLiveExtraction:
    """Live model tests; skipped without GOOGLE_API_KEY."""

    def test_bjj_schedule_from_text(self, live_model):
        result = ScheduleService.extract_from_text(BJJ_TEXT)

        assert result.success is True
        assert {c.day_of_week for c in result.classes} == {"Monday", "Wednesday", "Friday"}
        assert all((c.start_time, c.end_time) == ("18:00", "19:00") for c in result.classes)
