"""
Business Logic Services Module

This module contains the business logic around the assistant:
- Kai service: runs one chat turn and executes the caller's CRM tools
- Schedule service: class schedule extraction from images, text and PDFs
- Roster service: student roster extraction from images, text, CSV and PDFs

Extraction entry points never raise; they return `success=False` results.
"""

from .kai_service import (
    KaiService,
    KaiTurn,
    ToolResult,
    process_user_message,
)

from .extraction import (
    ExtractionModel,
    PARSE_FAILURE_MESSAGE,
    run_structured_extraction,
)

from .schedule_service import (
    ScheduleService,
    ExtractedClass,
    ScheduleExtractionResult,
    extract_schedule_from_image,
    extract_schedule_from_text,
    extract_schedule_from_pdf,
    format_time_12_hour,
    get_day_abbreviation,
)

from .roster_service import (
    RosterService,
    ExtractedStudent,
    RosterExtractionResult,
    extract_roster_from_image,
    extract_roster_from_text,
    extract_roster_from_csv,
    extract_roster_from_pdf,
)

__all__ = [
    # Kai Service
    "KaiService",
    "KaiTurn",
    "ToolResult",
    "process_user_message",

    # Extraction runner
    "ExtractionModel",
    "PARSE_FAILURE_MESSAGE",
    "run_structured_extraction",

    # Schedule Service
    "ScheduleService",
    "ExtractedClass",
    "ScheduleExtractionResult",
    "extract_schedule_from_image",
    "extract_schedule_from_text",
    "extract_schedule_from_pdf",
    "format_time_12_hour",
    "get_day_abbreviation",

    # Roster Service
    "RosterService",
    "ExtractedStudent",
    "RosterExtractionResult",
    "extract_roster_from_image",
    "extract_roster_from_text",
    "extract_roster_from_csv",
    "extract_roster_from_pdf",
]
