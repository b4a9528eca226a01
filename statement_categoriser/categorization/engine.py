"""
Three-tier transaction categorisation.

Priority order:
  1. The user's learned mappings (previous manual corrections)
  2. Built-in merchant dictionary (deterministic, no API call)
  3. AI text completion (for genuinely ambiguous transactions)

The first tier that matches decides. The AI tier never raises: a missing
API key or a failed call degrades to a low-confidence default so callers
can flag the transaction for review.
"""
import logging
from typing import Callable, Dict, Iterable, Optional, Sequence

from ..models import ParsedTransaction, CategoryMapping, CategorizationResult, MerchantRule
from .ai_client import AIResponseError, build_prompt, extract_json, get_default_completer
from .merchant_rules import MERCHANT_RULES, match_merchant
from .taxonomy import normalise, parent_of, is_subcategory

logger = logging.getLogger(__name__)

# Takes a prompt, returns the model's raw reply text
TextCompleter = Callable[[str], str]

LEARNED_MAPPING_CONFIDENCE = 0.95
NO_AI_CONFIDENCE = 0.3
AI_ERROR_CONFIDENCE = 0.2
DEFAULT_CATEGORY = "Discretionary"
DEFAULT_SUBCATEGORY = "Shopping"


class CategorizationEngine:
    """Assign a category, subcategory and confidence to transactions."""

    def __init__(
        self,
        completer: Optional[TextCompleter] = None,
        rules: Sequence[MerchantRule] = MERCHANT_RULES
    ):
        """
        Initialize engine.

        Args:
            completer: Text-completion backend for the AI tier (None disables it)
            rules: Ordered merchant rules for the dictionary tier
        """
        self.completer = completer
        self.rules = tuple(rules)

    @classmethod
    def from_settings(cls) -> 'CategorizationEngine':
        """Create an engine using the configured AI backend, if any."""
        completer = get_default_completer()
        if completer is None:
            logger.warning("ANTHROPIC_API_KEY not set, AI categorisation disabled")
        return cls(completer=completer)

    @property
    def ai_enabled(self) -> bool:
        """Whether the AI tier is available."""
        return self.completer is not None

    def categorize(
        self,
        transaction: ParsedTransaction,
        mappings: Sequence[CategoryMapping] = ()
    ) -> CategorizationResult:
        """
        Categorise a single transaction.

        Args:
            transaction: Transaction to categorise
            mappings: Learned mappings for the current user, in priority order

        Returns:
            CategorizationResult (always; never raises for AI problems)
        """
        result = self._match_learned(transaction, mappings)
        if result:
            return result

        result = self._match_rule(transaction)
        if result:
            return result

        return self._categorize_with_ai(transaction)

    def categorize_batch(
        self,
        transactions: Iterable[ParsedTransaction],
        mappings: Sequence[CategoryMapping] = ()
    ) -> Dict[str, CategorizationResult]:
        """
        Categorise transactions one at a time.

        Processing is sequential to keep the AI tier under its rate limits.
        Results are keyed by ``transaction.key`` (date-description); when two
        transactions share a key the later result overwrites the earlier.

        Args:
            transactions: Transactions to categorise
            mappings: Learned mappings for the current user

        Returns:
            Dictionary of key -> CategorizationResult
        """
        results: Dict[str, CategorizationResult] = {}

        for transaction in transactions:
            results[transaction.key] = self.categorize(transaction, mappings)

        return results

    def _match_learned(
        self,
        transaction: ParsedTransaction,
        mappings: Sequence[CategoryMapping]
    ) -> Optional[CategorizationResult]:
        """Tier 1: first learned mapping whose pattern is in the description."""
        normalized_desc = transaction.description.strip().lower()

        for mapping in mappings:
            pattern = mapping.merchant_pattern.strip().lower()
            if not pattern or pattern not in normalized_desc:
                continue

            category = normalise(mapping.category)
            subcategory = normalise(mapping.subcategory) if mapping.subcategory else category
            logger.debug(f"Learned mapping '{mapping.merchant_pattern}' matched: {transaction.description}")

            return CategorizationResult(
                category=category,
                subcategory=subcategory,
                confidence=LEARNED_MAPPING_CONFIDENCE,
                reasoning=f'Matched saved mapping: "{mapping.merchant_pattern}"',
            )

        return None

    def _match_rule(self, transaction: ParsedTransaction) -> Optional[CategorizationResult]:
        """Tier 2: built-in merchant dictionary."""
        rule = match_merchant(transaction.description, self.rules)
        if rule is None:
            return None

        category = parent_of(rule.subcategory)
        logger.debug(f"Merchant rule '{rule.pattern}' matched: {transaction.description}")

        return CategorizationResult(
            category=category,
            subcategory=rule.subcategory,
            confidence=rule.confidence,
            reasoning=f'Known merchant rule: "{rule.pattern}" -> {category}/{rule.subcategory}',
        )

    def _categorize_with_ai(self, transaction: ParsedTransaction) -> CategorizationResult:
        """Tier 3: ask the model, degrading to a low-confidence default."""
        if self.completer is None:
            return CategorizationResult(
                category=DEFAULT_CATEGORY,
                subcategory=DEFAULT_SUBCATEGORY,
                confidence=NO_AI_CONFIDENCE,
                reasoning="No AI categorization available (API key missing)",
            )

        try:
            response_text = self.completer(build_prompt(transaction))
            return parse_ai_response(response_text)
        except Exception as e:
            logger.error(f"AI categorization failed for '{transaction.description}': {e}")
            return CategorizationResult(
                category=DEFAULT_CATEGORY,
                subcategory=DEFAULT_SUBCATEGORY,
                confidence=AI_ERROR_CONFIDENCE,
                reasoning=f"AI error: {str(e) or type(e).__name__}",
            )


def parse_ai_response(text: str) -> CategorizationResult:
    """
    Turn a model reply into a canonical CategorizationResult.

    A recognised subcategory decides the parent, since the model sometimes
    pairs a valid subcategory with the wrong parent.

    Raises:
        AIResponseError: If the reply has no usable JSON, category or confidence
    """
    data = extract_json(text)

    raw_category = data.get('category')
    raw_subcategory = data.get('subcategory')

    if not isinstance(raw_subcategory, str) or not raw_subcategory.strip():
        raw_subcategory = None

    if not isinstance(raw_category, str) or not raw_category.strip():
        if raw_subcategory is None:
            raise AIResponseError("No category in AI response")
        raw_category = parent_of(raw_subcategory)

    category = normalise(raw_category)

    if raw_subcategory is not None:
        subcategory = normalise(raw_subcategory)
        if is_subcategory(subcategory):
            category = parent_of(subcategory)
    else:
        subcategory = category

    reasoning = data.get('reasoning')

    return CategorizationResult(
        category=category,
        subcategory=subcategory,
        confidence=_coerce_confidence(data.get('confidence')),
        reasoning=str(reasoning) if reasoning else None,
    )


def _coerce_confidence(value) -> float:
    if isinstance(value, bool):
        raise AIResponseError(f"Invalid confidence in AI response: {value!r}")
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        raise AIResponseError(f"Invalid confidence in AI response: {value!r}")
    if confidence != confidence:
        raise AIResponseError("Invalid confidence in AI response: NaN")
    return min(max(confidence, 0.0), 1.0)


# Singleton instance
_engine: Optional[CategorizationEngine] = None


def get_categorization_engine() -> CategorizationEngine:
    """Get singleton instance of CategorizationEngine configured from settings."""
    global _engine
    if _engine is None:
        _engine = CategorizationEngine.from_settings()
    return _engine


def categorize_transaction(
    transaction: ParsedTransaction,
    mappings: Sequence[CategoryMapping] = ()
) -> CategorizationResult:
    """Categorise one transaction with the configured engine."""
    return get_categorization_engine().categorize(transaction, mappings)


def categorize_transactions(
    transactions: Iterable[ParsedTransaction],
    mappings: Sequence[CategoryMapping] = ()
) -> Dict[str, CategorizationResult]:
    """Categorise transactions sequentially with the configured engine."""
    return get_categorization_engine().categorize_batch(transactions, mappings)
