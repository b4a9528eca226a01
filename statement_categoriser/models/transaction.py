"""Transaction data model."""
from dataclasses import dataclass


@dataclass(frozen=True)
class ParsedTransaction:
    """
    A single normalised row from a bank statement export.

    Attributes:
        date: Transaction date as ISO string (YYYY-MM-DD)
        description: Trimmed free-text description from the bank
        amount: Signed amount (positive = money in, negative = money out)
    """
    date: str
    description: str
    amount: float

    @property
    def key(self) -> str:
        """Composite key used for batch results (not unique for duplicate rows)."""
        return f"{self.date}-{self.description}"

    def to_dict(self) -> dict:
        """Convert transaction to dictionary."""
        return {
            'date': self.date,
            'description': self.description,
            'amount': round(self.amount, 2),
        }
