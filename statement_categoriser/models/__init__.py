"""Data models for statement categorisation."""
from .transaction import ParsedTransaction
from .parse_result import DetectedColumns, ParseResult, ParseError, is_parse_error
from .categorization import MerchantRule, CategoryMapping, CategorizationResult

__all__ = [
    'ParsedTransaction',
    'DetectedColumns',
    'ParseResult',
    'ParseError',
    'is_parse_error',
    'MerchantRule',
    'CategoryMapping',
    'CategorizationResult',
]
