"""
CSV statement parser for UK bank exports.

Auto-detects the column layout (date, description, and either a signed
amount column or separate debit/credit columns) and normalises every row
to a ParsedTransaction with the sign convention money in = positive.

Header detection is all-or-nothing. Data rows are tolerant: a row with a
bad date, empty description or unparseable amount is skipped and counted.
"""
import csv
import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from ..config.settings import HEADER_SCAN_LIMIT
from ..models import ParsedTransaction, ParseResult, ParseError
from ..utils import parse_currency, to_iso_date
from ..utils.column_detection import ColumnMapping, find_header_row

logger = logging.getLogger(__name__)

LINE_SPLIT = re.compile(r'\r?\n')


def split_csv_line(line: str) -> List[str]:
    """
    Split one line into fields using RFC 4180 quoting.

    Quoted fields keep embedded commas and "" becomes a literal quote.
    Fields are trimmed.
    """
    try:
        fields = next(csv.reader([line], skipinitialspace=True), [])
    except csv.Error:
        # Malformed quoting; the row will almost certainly be skipped
        fields = line.split(',')
    return [field.strip() for field in fields]


class CSVStatementParser:
    """Parse a bank CSV export into normalised transactions."""

    def __init__(self, scan_limit: int = HEADER_SCAN_LIMIT):
        """
        Initialize parser.

        Args:
            scan_limit: Number of non-blank lines searched for the header row
        """
        self.scan_limit = scan_limit

    def parse(self, text: str) -> Union[ParseResult, ParseError]:
        """
        Parse raw statement text.

        Args:
            text: Full CSV export (CRLF or LF line endings)

        Returns:
            ParseResult on success, ParseError if no header row was found
            or no data row could be used
        """
        lines = [line for line in LINE_SPLIT.split(text or '') if line.strip()]

        if len(lines) < 2:
            return ParseError("File appears empty or has no data rows.")

        rows = [split_csv_line(line) for line in lines]

        header_index, columns = find_header_row(rows, self.scan_limit)
        if columns is None:
            logger.warning(f"No header row found in the first {self.scan_limit} lines")
            return ParseError(
                "Could not detect column headers. Expected columns like "
                "Date, Description, and Amount (or Debit/Credit)."
            )

        detected = columns.to_detected_columns()
        logger.info(f"Detected columns: {detected.to_dict()}")

        transactions: List[ParsedTransaction] = []
        skipped_rows = 0

        for line_number, fields in enumerate(rows[header_index + 1:], start=header_index + 2):
            transaction = self._parse_row(fields, columns)
            if transaction is None:
                logger.debug(f"Skipping line {line_number}: {lines[line_number - 1]}")
                skipped_rows += 1
                continue
            transactions.append(transaction)

        if not transactions:
            return ParseError(
                f"Headers detected ({detected.date}, {detected.description}) "
                f"but no valid data rows found.",
                row=header_index + 1,
            )

        logger.info(f"Parsed {len(transactions)} transactions ({skipped_rows} rows skipped)")

        return ParseResult(
            transactions=transactions,
            detected_columns=detected,
            skipped_rows=skipped_rows,
        )

    def parse_file(self, file_path: Path) -> Union[ParseResult, ParseError]:
        """
        Read and parse a CSV export from disk.

        Args:
            file_path: Path to the CSV file

        Returns:
            ParseResult or ParseError
        """
        # utf-8-sig drops the byte-order mark some banks prepend
        text = Path(file_path).read_text(encoding='utf-8-sig')
        return self.parse(text)

    def _parse_row(
        self,
        fields: List[str],
        columns: ColumnMapping
    ) -> Optional[ParsedTransaction]:
        """Convert one data row, or return None if it must be skipped."""
        date = to_iso_date(_field(fields, columns.date_index))
        description = _field(fields, columns.description_index).strip()

        if not date or not description:
            return None

        amount = self._resolve_amount(fields, columns)
        if amount is None:
            return None

        return ParsedTransaction(date=date, description=description, amount=amount)

    def _resolve_amount(
        self,
        fields: List[str],
        columns: ColumnMapping
    ) -> Optional[float]:
        """
        Resolve the signed amount for a row.

        Single amount columns are already signed. With split columns a
        non-zero credit wins, then a non-zero debit; a row with neither is
        a zero-amount transaction, not a bad row.
        """
        if columns.amount_index is not None:
            return parse_currency(_field(fields, columns.amount_index))

        debit = parse_currency(_field(fields, columns.debit_index))
        credit = parse_currency(_field(fields, columns.credit_index))

        if credit:
            return abs(credit)
        if debit:
            return -abs(debit)
        return 0.0


def _field(fields: List[str], index: Optional[int]) -> str:
    if index is None or index >= len(fields):
        return ''
    return fields[index]


def parse_csv(text: str) -> Union[ParseResult, ParseError]:
    """Parse CSV statement text with the default parser."""
    return CSVStatementParser().parse(text)


def parse_csv_file(file_path: Path) -> Union[ParseResult, ParseError]:
    """Parse a CSV statement file with the default parser."""
    return CSVStatementParser().parse_file(file_path)
