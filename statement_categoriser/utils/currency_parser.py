"""Parse currency amounts from statement fields."""
import re
import logging
from typing import Optional

from ..config.settings import CURRENCY_SYMBOLS, DEFAULT_CURRENCY

logger = logging.getLogger(__name__)

NUMBER_PATTERN = re.compile(r'^[+-]?(?:\d+\.?\d*|\.\d+)$')
PARENTHESES_PATTERN = re.compile(r'^\(([0-9.]+)\)$')


def parse_currency(amount_string: str) -> Optional[float]:
    """
    Parse currency amount from string.

    Handles various formats:
    - £1,234.56
    - -45.50
    - (45.50) - negative amount (accounting convention)
    - 45.50 GBP - currency codes are dropped

    Args:
        amount_string: String containing currency amount

    Returns:
        Float amount or None if parsing fails
    """
    if not amount_string or not isinstance(amount_string, str):
        return None

    # Remove whitespace
    cleaned = amount_string.strip()

    # Placeholder dashes mean "no value"
    if not cleaned or cleaned in ('-', '--'):
        return None

    # Remove currency symbols, letters and thousands separators
    cleaned = re.sub(r'[£$€¥₹A-Za-z]', '', cleaned)
    cleaned = cleaned.replace(',', '').strip()

    if not cleaned:
        return None

    # Detect parentheses notation for negative
    paren_match = PARENTHESES_PATTERN.match(cleaned)
    if paren_match:
        cleaned = paren_match.group(1)
        if not NUMBER_PATTERN.match(cleaned):
            return None
        return -abs(float(cleaned))

    if not NUMBER_PATTERN.match(cleaned):
        logger.debug(f"Could not parse currency amount: {amount_string}")
        return None

    return float(cleaned)


def format_currency(amount: float, currency: str = DEFAULT_CURRENCY) -> str:
    """
    Format amount as currency string.

    Args:
        amount: Numeric amount
        currency: Currency code (GBP, USD, EUR)

    Returns:
        Formatted currency string
    """
    symbol = CURRENCY_SYMBOLS.get(currency, "£")

    # Format with thousands separator and 2 decimal places
    formatted = f"{abs(amount):,.2f}"

    if amount < 0:
        return f"-{symbol}{formatted}"
    else:
        return f"{symbol}{formatted}"
