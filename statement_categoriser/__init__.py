"""Parse UK bank statement exports and categorise their transactions."""
from .models import ParsedTransaction, ParseResult, ParseError, CategoryMapping, CategorizationResult
from .parsers import parse_csv, parse_csv_file
from .categorization import CategorizationEngine, categorize_transaction, categorize_transactions

__version__ = "0.1.0"

__all__ = [
    'ParsedTransaction',
    'ParseResult',
    'ParseError',
    'CategoryMapping',
    'CategorizationResult',
    'parse_csv',
    'parse_csv_file',
    'CategorizationEngine',
    'categorize_transaction',
    'categorize_transactions',
]
