"""Utility functions."""
from .logger import setup_logger, log_categorisation_audit
from .currency_parser import parse_currency, format_currency
from .date_parser import parse_date, to_iso_date
from .column_detection import ColumnMapping, detect_columns, find_header_row
from .merchant_pattern import extract_merchant_pattern

__all__ = [
    'setup_logger',
    'log_categorisation_audit',
    'parse_currency',
    'format_currency',
    'parse_date',
    'to_iso_date',
    'ColumnMapping',
    'detect_columns',
    'find_header_row',
    'extract_merchant_pattern',
]
