"""Statement parse result models."""
from dataclasses import dataclass, field
from typing import List, Optional, Union

from .transaction import ParsedTransaction


@dataclass(frozen=True)
class DetectedColumns:
    """
    Source header text for each column role found in the header row.

    Either ``amount`` is set, or both ``debit`` and ``credit`` are.
    """
    date: str
    description: str
    amount: Optional[str] = None
    debit: Optional[str] = None
    credit: Optional[str] = None

    @property
    def has_split_amounts(self) -> bool:
        """Whether money in/out live in separate debit and credit columns."""
        return self.amount is None and self.debit is not None and self.credit is not None

    def to_dict(self) -> dict:
        """Convert detected columns to dictionary."""
        return {
            'date': self.date,
            'description': self.description,
            'amount': self.amount,
            'debit': self.debit,
            'credit': self.credit,
        }


@dataclass(frozen=True)
class ParseResult:
    """
    Successful outcome of parsing one statement export.

    Attributes:
        transactions: Parsed transactions in file order
        detected_columns: Header text mapped to each role
        skipped_rows: Data rows dropped for a bad date, description or amount
    """
    transactions: List[ParsedTransaction]
    detected_columns: DetectedColumns
    skipped_rows: int = 0

    @property
    def transaction_count(self) -> int:
        """Get number of transactions."""
        return len(self.transactions)

    def to_dict(self) -> dict:
        """Convert parse result to dictionary."""
        return {
            'transactions': [t.to_dict() for t in self.transactions],
            'detected_columns': self.detected_columns.to_dict(),
            'skipped_rows': self.skipped_rows,
        }


@dataclass(frozen=True)
class ParseError:
    """
    Terminal failure of a parse call.

    Attributes:
        message: Human-readable diagnostic
        row: 1-based line number the message refers to, if any
    """
    message: str
    row: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert parse error to dictionary."""
        result = {'message': self.message}
        if self.row is not None:
            result['row'] = self.row
        return result


def is_parse_error(result: Union[ParseResult, ParseError]) -> bool:
    """Check whether a parse call failed."""
    return isinstance(result, ParseError)
