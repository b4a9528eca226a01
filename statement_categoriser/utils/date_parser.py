"""Date parsing for bank statement exports."""
import logging
import re
from datetime import date
from typing import Optional

logger = logging.getLogger(__name__)

MONTH_NAMES = {
    'jan': 1, 'feb': 2, 'mar': 3, 'apr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'aug': 8, 'sep': 9, 'oct': 10, 'nov': 11, 'dec': 12,
}

# Two-digit years above this belong to the 1900s
TWO_DIGIT_YEAR_PIVOT = 50

ISO_PATTERN = re.compile(r'^(\d{4})-(\d{1,2})-(\d{1,2})$')
DMY_PATTERN = re.compile(r'^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})$')
DMY_SHORT_PATTERN = re.compile(r'^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{2})$')
D_MON_Y_PATTERN = re.compile(r'^(\d{1,2})[\s\-]([A-Za-z]{3})[\s\-](\d{4})$')


def parse_date(date_string: str) -> Optional[date]:
    """
    Parse a statement date using the UK formats banks export.

    Formats are tried in order and the first match wins:
    - 2024-12-01 (ISO)
    - 01/12/2024, 01-12-2024, 01.12.2024
    - 01/12/24 (two-digit year, > 50 means 19xx)
    - 01 Dec 2024, 01-Dec-2024

    Args:
        date_string: Raw date field

    Returns:
        date object or None if no format matches or the date doesn't exist
    """
    if not date_string or not isinstance(date_string, str):
        return None

    date_string = date_string.strip()

    if not date_string:
        return None

    match = ISO_PATTERN.match(date_string)
    if match:
        return _build_date(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    match = DMY_PATTERN.match(date_string)
    if match:
        return _build_date(int(match.group(3)), int(match.group(2)), int(match.group(1)))

    match = DMY_SHORT_PATTERN.match(date_string)
    if match:
        short_year = int(match.group(3))
        year = 1900 + short_year if short_year > TWO_DIGIT_YEAR_PIVOT else 2000 + short_year
        return _build_date(year, int(match.group(2)), int(match.group(1)))

    match = D_MON_Y_PATTERN.match(date_string)
    if match:
        month = MONTH_NAMES.get(match.group(2).lower())
        if month:
            return _build_date(int(match.group(3)), month, int(match.group(1)))

    logger.debug(f"Could not parse date: {date_string}")
    return None


def to_iso_date(date_string: str) -> Optional[str]:
    """Parse a date string and return it as YYYY-MM-DD."""
    parsed = parse_date(date_string)
    return parsed.isoformat() if parsed else None


def _build_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        # e.g. 31/02/2024
        logger.debug(f"Invalid calendar date: {year}-{month}-{day}")
        return None
