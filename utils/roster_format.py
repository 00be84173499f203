"""
Roster formatting utilities.

Flattens pasted CSV / spreadsheet text into the line-per-student layout used
for roster extraction, and normalizes student fields for display.
"""

import csv
import io
import re
from datetime import date, datetime
from typing import Dict, Optional


BELT_COLORS: Dict[str, str] = {
    "White": "#FFFFFF",
    "Yellow": "#FFD700",
    "Orange": "#FFA500",
    "Green": "#228B22",
    "Blue": "#0000FF",
    "Purple": "#800080",
    "Brown": "#8B4513",
    "Red": "#FF0000",
    "Black": "#000000",
    "None": "#CCCCCC",
}
DEFAULT_BELT_COLOR = "#CCCCCC"

DATE_FORMAT = "%Y-%m-%d"
def _detect_delimiter(header_line: str) -> str:
    if "\t" in header_line:
        return "\t"
    if ";" in header_line:
        return ";"
    return ","


def csv_to_text(csv_content: str) -> str:
    """
    Flatten delimited text (comma, tab or semicolon) into labelled rows.

    Quoted cells may contain the delimiter ("Doe, John").

    Example:
        >>> print(csv_to_text("Name,Belt\\nEmma,Blue"))
        Headers: Name, Belt
        <BLANKLINE>
        Student 1: Name: Emma, Belt: Blue
        <BLANKLINE>
    """
    trimmed = csv_content.strip()
    if not trimmed:
        return ""

    delimiter = _detect_delimiter(trimmed.splitlines()[0])
    rows = csv.reader(io.StringIO(trimmed), delimiter=delimiter)
    headers = [h.strip() for h in next(rows)]

    result = f"Headers: {', '.join(headers)}\n\n"
    for row_number, row in enumerate(rows, start=1):
        values = [v.strip() for v in row]
        fields = [
            f"{header}: {values[idx]}"
            for idx, header in enumerate(headers)
            if idx < len(values) and values[idx]
        ]
        if fields:
            result += f"Student {row_number}: {', '.join(fields)}\n"

    return result


def format_phone_number(phone: str) -> str:
    """Format US numbers as XXX-XXX-XXXX; anything else is returned unchanged."""
    digits = re.sub(r"\D", "", phone)
    if len(digits) == 11 and digits[0] == "1":
        digits = digits[1:]
    if len(digits) == 10:
        return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"
    return phone


def calculate_age(date_of_birth: str, today: Optional[date] = None) -> Optional[int]:
    """Age in whole years from a YYYY-MM-DD date, or None when it cannot be parsed."""
    try:
        dob = datetime.strptime(date_of_birth.strip(), DATE_FORMAT).date()
    except (ValueError, AttributeError):
        return None

    today = today or date.today()
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age


def infer_program_from_age(age: int) -> str:
    if 4 <= age <= 12:
        return "Kids"
    if 13 <= age <= 17:
        return "Teens"
    return "Adults"


def get_belt_color(belt: str) -> str:
    return BELT_COLORS.get(belt, DEFAULT_BELT_COLOR)
