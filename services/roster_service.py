"""
Roster Extraction Service

Turns photos of sign-in sheets, PDFs, CSV exports or pasted text of a student
roster into validated student records for import:
- Names are required; contact, belt, program and guardian details optional
- A confidence score (0-1), warnings, and the number of students found
- `rawText` echoes the source text on text-based inputs

Every entry point returns a RosterExtractionResult and never raises.
"""

import logging
from pathlib import Path
from typing import List, Literal, Optional, Union

from pydantic import Field

from clients.pdf_client import extract_text_from_pdf
from config import (
    ROSTER_EXTRACTION_SCHEMA,
    ROSTER_IMAGE_PROMPT,
    ROSTER_TEXT_PROMPT,
    ROSTER_TEXT_WITH_CONTEXT_PROMPT,
    SCHOOL_SYSTEM_NAME,
    build_roster_system_prompt,
    format_prompt,
)
from utils.roster_format import csv_to_text
from .extraction import ExtractionModel, image_message, run_structured_extraction

logger = logging.getLogger(__name__)

BeltRank = Literal["White", "Yellow", "Orange", "Green", "Blue", "Purple", "Brown", "Red", "Black", "None"]
Program = Literal["Kids", "Teens", "Adults", "Family", "Competition"]
MembershipStatus = Literal["Active", "Trial", "Inactive", "Pending"]


# ============================================================================
# DATA STRUCTURES
# ============================================================================

class ExtractedStudent(ExtractionModel):
    """One student found in a roster."""
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[str] = None
    belt_rank: Optional[BeltRank] = None
    program: Optional[Program] = None
    guardian_name: Optional[str] = None
    guardian_phone: Optional[str] = None
    guardian_email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    notes: Optional[str] = None
    membership_status: Optional[MembershipStatus] = None


class RosterExtractionResult(ExtractionModel):
    """
    Outcome of one roster extraction.

    Attributes:
        success: Whether student data was extracted
        students: Extracted students in document order
        confidence: 0.0 - 1.0
        total_found: Number of students the model counted in the document
        warnings: Inferred or ambiguous values
        raw_text: Source text (text inputs only)
        error: Failure description when success is False
    """
    success: bool
    students: List[ExtractedStudent]
    confidence: float = Field(ge=0.0, le=1.0)
    total_found: int = Field(ge=0)
    warnings: Optional[List[str]] = None
    raw_text: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def failed(cls, error: str) -> "RosterExtractionResult":
        return cls(success=False, students=[], confidence=0.0, total_found=0, error=error)


# ============================================================================
# ROSTER SERVICE
# ============================================================================

class RosterService:
    """Roster extraction from images, text, CSV and PDFs."""

    @staticmethod
    def extract_from_image(image_url: str, context: Optional[str] = None) -> RosterExtractionResult:
        """
        Extract a student roster from an image of a roster or sign-in sheet.

        Args:
            image_url: http(s) URL or data: URL of the image
            context: Extra hints from the user

        Returns:
            RosterExtractionResult
        """
        logger.info("🖼️  Extracting roster from image")

        if context:
            prompt = f"Please extract the student roster from this image. Additional context: {context}"
        else:
            prompt = ROSTER_IMAGE_PROMPT

        messages = [
            {"role": "system", "content": build_roster_system_prompt("images", SCHOOL_SYSTEM_NAME)},
            image_message(prompt, image_url),
        ]
        return run_structured_extraction(
            messages,
            ROSTER_EXTRACTION_SCHEMA,
            RosterExtractionResult,
            RosterExtractionResult.failed,
        )

    @staticmethod
    def extract_from_text(text_content: str, context: Optional[str] = None) -> RosterExtractionResult:
        """
        Extract a student roster from text (plain, CSV-flattened, or from a PDF).

        Returns:
            RosterExtractionResult with raw_text set to `text_content`
        """
        logger.info(f"📝 Extracting roster from {len(text_content)} characters of text")

        if context:
            prompt = format_prompt(ROSTER_TEXT_WITH_CONTEXT_PROMPT, context=context, text=text_content)
        else:
            prompt = format_prompt(ROSTER_TEXT_PROMPT, text=text_content)

        messages = [
            {"role": "system", "content": build_roster_system_prompt("text content", SCHOOL_SYSTEM_NAME)},
            {"role": "user", "content": prompt},
        ]
        return run_structured_extraction(
            messages,
            ROSTER_EXTRACTION_SCHEMA,
            RosterExtractionResult,
            RosterExtractionResult.failed,
            raw_text=text_content,
        )

    @staticmethod
    def extract_from_csv(csv_content: str, context: Optional[str] = None) -> RosterExtractionResult:
        """Flatten CSV / TSV content into labelled rows, then extract from the text."""
        text = csv_to_text(csv_content)
        if not text:
            return RosterExtractionResult.failed("CSV content is empty")
        return RosterService.extract_from_text(text, context)

    @staticmethod
    def extract_from_pdf(file_path: Union[str, Path], context: Optional[str] = None) -> RosterExtractionResult:
        """Extract a student roster from a text-based PDF."""
        try:
            text = extract_text_from_pdf(file_path)
        except Exception as e:
            logger.error(f"❌ Could not read roster PDF {file_path}: {e}")
            return RosterExtractionResult.failed(str(e) or type(e).__name__)

        if not text.strip():
            return RosterExtractionResult.failed("No extractable text found in PDF")

        return RosterService.extract_from_text(text, context)


# ============================================================================
# CONVENIENCE FUNCTIONS
# ============================================================================

def extract_roster_from_image(image_url: str, context: Optional[str] = None) -> RosterExtractionResult:
    """Extract a student roster from an image."""
    return RosterService.extract_from_image(image_url, context)


def extract_roster_from_text(text_content: str, context: Optional[str] = None) -> RosterExtractionResult:
    """Extract a student roster from text."""
    return RosterService.extract_from_text(text_content, context)


def extract_roster_from_csv(csv_content: str, context: Optional[str] = None) -> RosterExtractionResult:
    """Extract a student roster from CSV / TSV content."""
    return RosterService.extract_from_csv(csv_content, context)


def extract_roster_from_pdf(file_path: Union[str, Path], context: Optional[str] = None) -> RosterExtractionResult:
    """Extract a student roster from a PDF file."""
    return RosterService.extract_from_pdf(file_path, context)
