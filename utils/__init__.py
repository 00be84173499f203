"""
Utilities package for shared helper functions.
"""

from utils.schedule_format import to_12_hour, day_abbreviation, normalize_time
from utils.roster_format import (
    csv_to_text,
    format_phone_number,
    calculate_age,
    infer_program_from_age,
    get_belt_color,
)

__all__ = [
    'to_12_hour',
    'day_abbreviation',
    'normalize_time',
    'csv_to_text',
    'format_phone_number',
    'calculate_age',
    'infer_program_from_age',
    'get_belt_color',
]
