"""
Utility Clients Module

This module contains low-level utility clients for file processing.
These are pure utility functions that don't contain business logic.

Clients:
- PDF Client: Extract text from uploaded schedule and roster PDFs using pdfplumber
"""

from .pdf_client import (
    PDFExtractionError,
    extract_text_from_pdf,
    validate_pdf_file,
    clean_extracted_text,
)

__all__ = [
    "PDFExtractionError",
    "extract_text_from_pdf",
    "validate_pdf_file",
    "clean_extracted_text",
]
