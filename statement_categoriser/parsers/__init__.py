"""Statement parsing modules."""
from .csv_parser import CSVStatementParser, parse_csv, parse_csv_file, split_csv_line

__all__ = [
    'CSVStatementParser',
    'parse_csv',
    'parse_csv_file',
    'split_csv_line',
]
