"""
Header-row detection for CSV statement exports.

Each bank labels its columns differently (Monzo, Barclays, HSBC, Nationwide,
Starling, ...). Header cells are matched case-insensitively against a
vocabulary per column role, by exact match or substring.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..models import DetectedColumns

logger = logging.getLogger(__name__)

DATE_HEADERS = (
    "date",
    "transaction date",
    "trans date",
    "booking date",
    "value date",
    "posted date",
    "trans. date",
)

DESCRIPTION_HEADERS = (
    "description",
    "narrative",
    "details",
    "reference",
    "counter party",
    "counterparty",
    "merchant",
    "memo",
    "payee",
    "transaction description",
    "trans. description",
    "name",
    "type & description",
)

AMOUNT_HEADERS = ("amount", "value", "transaction amount")

DEBIT_HEADERS = (
    "debit",
    "money out",
    "paid out",
    "debit amount",
    "withdrawal",
    "out",
)

CREDIT_HEADERS = (
    "credit",
    "money in",
    "paid in",
    "credit amount",
    "deposit",
    "in",
)

# Recognised so they are never mistaken for description or amount columns
BALANCE_HEADERS = (
    "balance",
    "running balance",
    "available balance",
    "ledger balance",
)


@dataclass(frozen=True)
class ColumnMapping:
    """Column indices (and their header text) for each role."""
    date_index: int
    description_index: int
    amount_index: Optional[int]
    debit_index: Optional[int]
    credit_index: Optional[int]
    headers: Tuple[str, ...]

    def header_at(self, index: Optional[int]) -> Optional[str]:
        """Get the header text for a column index."""
        return self.headers[index] if index is not None else None

    def to_detected_columns(self) -> DetectedColumns:
        """Convert to the public detected-columns record."""
        return DetectedColumns(
            date=self.headers[self.date_index],
            description=self.headers[self.description_index],
            amount=self.header_at(self.amount_index),
            debit=self.header_at(self.debit_index),
            credit=self.header_at(self.credit_index),
        )


def matches_any(header: str, vocabulary: Sequence[str]) -> bool:
    """Check whether a header cell matches any term exactly or as a substring."""
    normalised = header.lower().strip()
    return any(normalised == term or term in normalised for term in vocabulary)


def match_length(header: str, vocabulary: Sequence[str]) -> int:
    """Length of the longest term found in a header cell (0 if none)."""
    normalised = header.lower().strip()
    return max((len(term) for term in vocabulary if term in normalised), default=0)


def detect_columns(headers: Sequence[str]) -> Optional[ColumnMapping]:
    """
    Assign column roles from a candidate header row.

    Each cell goes to the first unfilled role it matches, checked in the
    order date, description, amount, debit, credit. Balance cells are
    skipped, and a cell matching a date term never takes another role
    ("Value Date" next to "Date"). A cell matching both amount
    and debit/credit terms takes the role whose term is longer
    ("Debit Amount" is a debit column, "Billing Amount" an amount column).

    Args:
        headers: Cells of the candidate row

    Returns:
        ColumnMapping, or None unless the row has date + description and
        either an amount column or both debit and credit columns
    """
    date_index = None
    description_index = None
    amount_index = None
    debit_index = None
    credit_index = None

    for i, header in enumerate(headers):
        if matches_any(header, BALANCE_HEADERS):
            continue

        if matches_any(header, DATE_HEADERS):
            if date_index is None:
                date_index = i
            continue

        is_debit = matches_any(header, DEBIT_HEADERS)
        is_credit = matches_any(header, CREDIT_HEADERS)
        split_length = max(match_length(header, DEBIT_HEADERS), match_length(header, CREDIT_HEADERS))

        if description_index is None and matches_any(header, DESCRIPTION_HEADERS):
            description_index = i
        elif amount_index is None and match_length(header, AMOUNT_HEADERS) > split_length:
            amount_index = i
        elif debit_index is None and is_debit:
            debit_index = i
        elif credit_index is None and is_credit:
            credit_index = i

    if date_index is None or description_index is None:
        return None

    if amount_index is None and (debit_index is None or credit_index is None):
        return None

    return ColumnMapping(
        date_index=date_index,
        description_index=description_index,
        amount_index=amount_index,
        debit_index=debit_index,
        credit_index=credit_index,
        headers=tuple(headers),
    )


def find_header_row(
    rows: List[List[str]],
    scan_limit: int = 10
) -> Tuple[Optional[int], Optional[ColumnMapping]]:
    """
    Find the header row within the first ``scan_limit`` rows.

    Some banks put account summary lines above the header, so the header
    is not always the first line.

    Args:
        rows: Split rows (blank lines already removed)
        scan_limit: Maximum number of rows to inspect

    Returns:
        Tuple of (row index, mapping), or (None, None) if no row qualifies
    """
    for index, cells in enumerate(rows[:scan_limit]):
        mapping = detect_columns(cells)
        if mapping:
            logger.debug(f"Header row found at line {index + 1}: {cells}")
            return index, mapping

    return None, None
