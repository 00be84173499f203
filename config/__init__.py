"""
Configuration module for Kai.

This module provides centralized configuration management including:
- Application settings (models, API keys, limits)
- Prompt templates and system instructions
- Tool definitions and output schemas

All configurable values should be imported from this module to ensure
consistency across the application.
"""

from .settings import (
    # API Keys
    GOOGLE_API_KEY,

    # LLM Settings
    GEMINI_MODEL,
    EXTRACTION_MODEL,
    TEMPERATURE,
    EXTRACTION_TEMPERATURE,
    MAX_TOKENS,
    TOP_P,
    TOP_K,
    MAX_RETRIES,
    RETRY_DELAY,
    TIMEOUT,

    # Langfuse Settings
    LANGFUSE_PUBLIC_KEY,
    LANGFUSE_SECRET_KEY,
    LANGFUSE_HOST,
    LANGFUSE_ENABLED,

    # Application Settings
    ASSISTANT_NAME,
    SCHOOL_SYSTEM_NAME,
    MAX_UPLOAD_SIZE_MB,
    SUPPORTED_DOCUMENT_EXTENSIONS,
    DAYS_OF_WEEK,

    # Debug
    DEBUG,
    LOG_LEVEL,
)

from .prompts import (
    # System Prompts
    KAI_SYSTEM_PROMPT,
    build_schedule_system_prompt,
    build_roster_system_prompt,

    # Extraction user prompts
    SCHEDULE_IMAGE_PROMPT,
    SCHEDULE_TEXT_PROMPT,
    SCHEDULE_TEXT_WITH_CONTEXT_PROMPT,
    ROSTER_IMAGE_PROMPT,
    ROSTER_TEXT_PROMPT,
    ROSTER_TEXT_WITH_CONTEXT_PROMPT,

    # Tool Definitions
    TOOL_DEFINITIONS,

    # Output Schemas
    SCHEDULE_EXTRACTION_SCHEMA,
    ROSTER_EXTRACTION_SCHEMA,
    BELT_RANKS,
    PROGRAMS,
    MEMBERSHIP_STATUSES,

    # Utilities
    format_prompt,
    get_tool_by_name,
)

__all__ = [
    # Settings
    "GOOGLE_API_KEY",
    "GEMINI_MODEL",
    "EXTRACTION_MODEL",
    "TEMPERATURE",
    "EXTRACTION_TEMPERATURE",
    "MAX_TOKENS",
    "TOP_P",
    "TOP_K",
    "MAX_RETRIES",
    "RETRY_DELAY",
    "TIMEOUT",
    "LANGFUSE_PUBLIC_KEY",
    "LANGFUSE_SECRET_KEY",
    "LANGFUSE_HOST",
    "LANGFUSE_ENABLED",
    "ASSISTANT_NAME",
    "SCHOOL_SYSTEM_NAME",
    "MAX_UPLOAD_SIZE_MB",
    "SUPPORTED_DOCUMENT_EXTENSIONS",
    "DAYS_OF_WEEK",
    "DEBUG",
    "LOG_LEVEL",

    # Prompts
    "KAI_SYSTEM_PROMPT",
    "build_schedule_system_prompt",
    "build_roster_system_prompt",
    "SCHEDULE_IMAGE_PROMPT",
    "SCHEDULE_TEXT_PROMPT",
    "SCHEDULE_TEXT_WITH_CONTEXT_PROMPT",
    "ROSTER_IMAGE_PROMPT",
    "ROSTER_TEXT_PROMPT",
    "ROSTER_TEXT_WITH_CONTEXT_PROMPT",
    "TOOL_DEFINITIONS",
    "SCHEDULE_EXTRACTION_SCHEMA",
    "ROSTER_EXTRACTION_SCHEMA",
    "BELT_RANKS",
    "PROGRAMS",
    "MEMBERSHIP_STATUSES",
    "format_prompt",
    "get_tool_by_name",
]
