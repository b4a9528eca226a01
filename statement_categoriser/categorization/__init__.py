"""Transaction categorisation: taxonomy, merchant rules and the three-tier engine."""
from .taxonomy import (
    CATEGORY_TAXONOMY,
    ALL_PARENT_VALUES,
    ALL_SUBCATEGORY_VALUES,
    normalise,
    parent_of,
    colour_of,
    is_subcategory,
    is_parent,
)
from .merchant_rules import MERCHANT_RULES, match_merchant
from .ai_client import AnthropicCompleter, AIResponseError
from .engine import (
    CategorizationEngine,
    TextCompleter,
    categorize_transaction,
    categorize_transactions,
    get_categorization_engine,
)

__all__ = [
    'CATEGORY_TAXONOMY',
    'ALL_PARENT_VALUES',
    'ALL_SUBCATEGORY_VALUES',
    'normalise',
    'parent_of',
    'colour_of',
    'is_subcategory',
    'is_parent',
    'MERCHANT_RULES',
    'match_merchant',
    'AnthropicCompleter',
    'AIResponseError',
    'CategorizationEngine',
    'TextCompleter',
    'categorize_transaction',
    'categorize_transactions',
    'get_categorization_engine',
]
