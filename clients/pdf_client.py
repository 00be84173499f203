"""
PDF Client - PDF Text Extraction Utility

Handles uploaded schedule and roster PDFs using pdfplumber.
Provides text extraction, upload validation, and text cleanup.
"""

import logging
import re
from pathlib import Path
from typing import Optional, Tuple, Union

import pdfplumber

from config import MAX_UPLOAD_SIZE_MB, SUPPORTED_DOCUMENT_EXTENSIONS

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

MIN_PDF_SIZE_BYTES = 100


class PDFExtractionError(Exception):
    """Raised when a PDF exists but its text cannot be read."""


def _check_document_path(file_path: Path) -> Optional[str]:
    if not file_path.exists():
        return f"File not found: {file_path}"
    if file_path.suffix.lower() not in SUPPORTED_DOCUMENT_EXTENSIONS:
        return f"File is not a PDF (extension: {file_path.suffix})"
    return None


# ============================================================================
# PDF TEXT EXTRACTION
# ============================================================================

def extract_text_from_pdf(file_path: PathLike) -> str:
    """
    Extract all text content from a PDF file.

    Pages are joined with "--- Page N ---" separators and the result is
    passed through clean_extracted_text.

    Args:
        file_path: Path to the PDF file (string or Path object)

    Returns:
        Extracted text, or "" for PDFs without a text layer (scanned images)

    Raises:
        FileNotFoundError: If the PDF file doesn't exist
        ValueError: If the file is not a PDF
        PDFExtractionError: If pdfplumber cannot read the file

    Example:
        >>> text = extract_text_from_pdf("uploads/fall_schedule.pdf")
        >>> print(text[:40])
        Kids Karate Mon/Wed 4:00-4:45pm
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"PDF file not found: {file_path}")

    if file_path.suffix.lower() not in SUPPORTED_DOCUMENT_EXTENSIONS:
        raise ValueError(f"File is not a PDF: {file_path.suffix}")

    logger.info(f"📄 Extracting text from PDF: {file_path.name}")

    try:
        all_text = []

        with pdfplumber.open(file_path) as pdf:
            if len(pdf.pages) == 0:
                logger.warning("⚠️  PDF has no pages")
                return ""

            logger.debug(f"PDF has {len(pdf.pages)} page(s)")

            for page_num, page in enumerate(pdf.pages, start=1):
                page_text = page.extract_text()

                if page_text:
                    if page_num > 1:
                        all_text.append(f"\n--- Page {page_num} ---\n")
                    all_text.append(page_text)
                else:
                    logger.debug(f"Page {page_num} has no extractable text")

    except Exception as e:
        logger.error(f"❌ PDF extraction failed: {e}", exc_info=True)
        raise PDFExtractionError(f"Failed to extract text from PDF: {e}") from e

    full_text = clean_extracted_text("\n".join(all_text))

    if not full_text:
        logger.warning("⚠️  No text extracted from PDF (might be scanned images)")
        return ""

    logger.info(f"✅ Extracted {len(full_text)} characters from PDF")
    return full_text


# ============================================================================
# PDF VALIDATION
# ============================================================================

def validate_pdf_file(file_path: PathLike) -> Tuple[bool, Optional[str]]:
    """
    Validate an uploaded PDF before extraction.

    Checks:
    - File exists and has a supported extension
    - File size is within MAX_UPLOAD_SIZE_MB
    - PDF has at least one page with extractable text

    Args:
        file_path: Path to the PDF file

    Returns:
        (True, None) if valid, (False, error_message) otherwise
    """
    file_path = Path(file_path)

    path_error = _check_document_path(file_path)
    if path_error:
        return False, path_error

    file_size = file_path.stat().st_size
    if file_size < MIN_PDF_SIZE_BYTES:
        return False, "PDF file is too small (might be corrupted)"

    if file_size > MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        return False, f"PDF file is too large (max {MAX_UPLOAD_SIZE_MB}MB)"

    try:
        with pdfplumber.open(file_path) as pdf:
            if len(pdf.pages) == 0:
                return False, "PDF has no pages"

            first_page_text = pdf.pages[0].extract_text()
            if not first_page_text or len(first_page_text.strip()) < 10:
                return False, "PDF appears to be empty or contains only images (upload it as an image instead)"

        return True, None

    except Exception as e:
        logger.warning(f"⚠️  PDF validation failed for {file_path.name}: {e}")
        return False, f"Failed to read PDF: {e}"


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def clean_extracted_text(text: Optional[str]) -> str:
    """
    Clean up extracted PDF text by removing extra whitespace and artifacts.

    Args:
        text: Raw extracted text

    Returns:
        Cleaned text
    """
    if not text:
        return ""

    # Collapse runs of blank lines
    text = re.sub(r"\n{3,}", "\n\n", text)

    text = re.sub(r" {2,}", " ", text)

    # Page numbers alone on a line
    text = re.sub(r"^[ \t]*\d+[ \t]*$", "", text, flags=re.MULTILINE)

    return text.strip()
