"""
Schedule Extraction Service

Turns photos, PDFs or pasted text of a class schedule into validated class
records for the "apply to calendar" workflow:
- One ExtractedClass per class per day, times in 24-hour HH:MM
- A confidence score (0-1) and warnings for inferred or ambiguous values
- `rawText` echoes the source text on text-based inputs

Every entry point returns a ScheduleExtractionResult and never raises.
"""

import logging
from pathlib import Path
from typing import List, Literal, Optional, Union

from pydantic import Field, field_validator

from clients.pdf_client import extract_text_from_pdf
from config import (
    SCHEDULE_EXTRACTION_SCHEMA,
    SCHEDULE_IMAGE_PROMPT,
    SCHEDULE_TEXT_PROMPT,
    SCHEDULE_TEXT_WITH_CONTEXT_PROMPT,
    SCHOOL_SYSTEM_NAME,
    build_schedule_system_prompt,
    format_prompt,
)
from utils.schedule_format import normalize_time, to_12_hour, day_abbreviation
from .extraction import ExtractionModel, image_message, run_structured_extraction

logger = logging.getLogger(__name__)

DayOfWeek = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


# ============================================================================
# DATA STRUCTURES
# ============================================================================

class ExtractedClass(ExtractionModel):
    """
    One class meeting on one day of the week.

    Attributes:
        name: Class name (e.g., "Kids Karate")
        day_of_week: Full English day name
        start_time: 24-hour HH:MM
        end_time: 24-hour HH:MM
        instructor, location, level, max_capacity, notes: Optional details
    """
    name: str
    day_of_week: DayOfWeek
    start_time: str
    end_time: str
    instructor: Optional[str] = None
    location: Optional[str] = None
    level: Optional[str] = None
    max_capacity: Optional[int] = None
    notes: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _to_24_hour(cls, value: str) -> str:
        return normalize_time(value)


class ScheduleExtractionResult(ExtractionModel):
    """
    Outcome of one schedule extraction.

    Attributes:
        success: Whether a schedule was extracted
        classes: Extracted classes, one per class per day
        confidence: 0.0 - 1.0
        warnings: Inferred or ambiguous values
        raw_text: Source text (text inputs only)
        error: Failure description when success is False
    """
    success: bool
    classes: List[ExtractedClass]
    confidence: float = Field(ge=0.0, le=1.0)
    warnings: Optional[List[str]] = None
    raw_text: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def failed(cls, error: str) -> "ScheduleExtractionResult":
        return cls(success=False, classes=[], confidence=0.0, error=error)


# ============================================================================
# SCHEDULE SERVICE
# ============================================================================

class ScheduleService:
    """Schedule extraction from images, text and PDFs."""

    @staticmethod
    def extract_from_image(image_url: str, context: Optional[str] = None) -> ScheduleExtractionResult:
        """
        Extract a class schedule from an image.

        Args:
            image_url: http(s) URL or data: URL of the schedule image
            context: Extra hints from the user (e.g., "summer session")

        Returns:
            ScheduleExtractionResult
        """
        logger.info("🖼️  Extracting schedule from image")

        prompt = SCHEDULE_IMAGE_PROMPT
        if context:
            prompt = f"{prompt} Additional context: {context}"

        messages = [
            {"role": "system", "content": build_schedule_system_prompt("images", SCHOOL_SYSTEM_NAME)},
            image_message(prompt, image_url),
        ]
        return run_structured_extraction(
            messages,
            SCHEDULE_EXTRACTION_SCHEMA,
            ScheduleExtractionResult,
            ScheduleExtractionResult.failed,
        )

    @staticmethod
    def extract_from_text(text_content: str, context: Optional[str] = None) -> ScheduleExtractionResult:
        """
        Extract a class schedule from text (pasted, or taken from a PDF).

        Args:
            text_content: Schedule text
            context: Extra hints from the user

        Returns:
            ScheduleExtractionResult with raw_text set to `text_content`

        Example:
            >>> result = ScheduleService.extract_from_text("BJJ Mon-Wed-Fri 6pm-7pm")
            >>> [(c.day_of_week, c.start_time, c.end_time) for c in result.classes]
            [('Monday', '18:00', '19:00'), ('Wednesday', '18:00', '19:00'), ('Friday', '18:00', '19:00')]
        """
        logger.info(f"📝 Extracting schedule from {len(text_content)} characters of text")

        if context:
            prompt = format_prompt(SCHEDULE_TEXT_WITH_CONTEXT_PROMPT, context=context, text=text_content)
        else:
            prompt = format_prompt(SCHEDULE_TEXT_PROMPT, text=text_content)

        messages = [
            {"role": "system", "content": build_schedule_system_prompt("text content", SCHOOL_SYSTEM_NAME)},
            {"role": "user", "content": prompt},
        ]
        return run_structured_extraction(
            messages,
            SCHEDULE_EXTRACTION_SCHEMA,
            ScheduleExtractionResult,
            ScheduleExtractionResult.failed,
            raw_text=text_content,
        )

    @staticmethod
    def extract_from_pdf(file_path: Union[str, Path], context: Optional[str] = None) -> ScheduleExtractionResult:
        """
        Extract a class schedule from a text-based PDF.

        Scanned PDFs without a text layer yield a failure result; send those
        through extract_from_image instead.
        """
        try:
            text = extract_text_from_pdf(file_path)
        except Exception as e:
            logger.error(f"❌ Could not read schedule PDF {file_path}: {e}")
            return ScheduleExtractionResult.failed(str(e) or type(e).__name__)

        if not text.strip():
            return ScheduleExtractionResult.failed("No extractable text found in PDF")

        return ScheduleService.extract_from_text(text, context)


# ============================================================================
# CONVENIENCE FUNCTIONS
# ============================================================================

def extract_schedule_from_image(image_url: str, context: Optional[str] = None) -> ScheduleExtractionResult:
    """Extract a class schedule from an image."""
    return ScheduleService.extract_from_image(image_url, context)


def extract_schedule_from_text(text_content: str, context: Optional[str] = None) -> ScheduleExtractionResult:
    """Extract a class schedule from text."""
    return ScheduleService.extract_from_text(text_content, context)


def extract_schedule_from_pdf(file_path: Union[str, Path], context: Optional[str] = None) -> ScheduleExtractionResult:
    """Extract a class schedule from a PDF file."""
    return ScheduleService.extract_from_pdf(file_path, context)


def format_time_12_hour(time_24: str) -> str:
    """Display form of a 24-hour time ("13:00" -> "1:00 PM")."""
    return to_12_hour(time_24)


def get_day_abbreviation(day: str) -> str:
    """Three-letter day code ("Wednesday" -> "Wed")."""
    return day_abbreviation(day)
