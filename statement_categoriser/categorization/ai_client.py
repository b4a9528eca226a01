"""Text-completion backend for the AI categorisation tier."""
import json
import logging
from typing import Any, Dict, Optional

import anthropic

from ..config.settings import (
    ANTHROPIC_API_KEY,
    CATEGORISATION_MODEL,
    AI_TEMPERATURE,
    AI_MAX_TOKENS,
    AI_TIMEOUT_SECONDS,
)
from ..models import ParsedTransaction
from ..utils import format_currency
from .taxonomy import taxonomy_prompt_lines

logger = logging.getLogger(__name__)


class AIResponseError(Exception):
    """Raised when the model returns nothing usable."""
    pass


CATEGORY_PROMPT = f"""You are a UK financial categorization assistant. Categorize the transaction using this two-level taxonomy.

PARENT CATEGORIES and their SUBCATEGORIES:
{taxonomy_prompt_lines()}

CRITICAL RULES:
- Every transaction must have BOTH a parent category and a subcategory.
- Use the subcategory value exactly as listed above (Title Case).
- UK supermarkets (Sainsbury's, Tesco, Co-op, Morrisons, Aldi, Lidl, Asda, Waitrose, M&S Food, Iceland, Ocado) are ALWAYS Essential/Groceries.
- UK fast food and restaurants (McDonald's, Nando's, Pret, Costa, Starbucks, Greggs, KFC, Burger King, Five Guys, Wagamama, Pizza Express) are ALWAYS Discretionary/Eating Out.
- Subscription services (Netflix, Spotify, YouTube, Disney+, DAZN, Apple subscriptions, Amazon Prime) are Discretionary/Subscriptions.
- Fuel stations (Shell, BP, Esso, MFG) are Essential/Transport.
- Train/travel (TfL, Trainline, GWR, National Rail) are Essential/Transport.
- Airlines (EasyJet, Ryanair, British Airways, Jet2) are Discretionary/Travel/Holidays.
- Large positive amounts with "salary", "payroll", "wages" are Income/Salary.
- Positive amounts with "refund" or "payment received" are Income/Refund.
- Amazon purchases (not Prime) are Discretionary/Shopping.

Respond with JSON only:
{{
  "category": "ParentCategory",
  "subcategory": "Subcategory",
  "confidence": 0.0-1.0,
  "reasoning": "brief explanation"
}}

High confidence (>0.7): Clear merchant or pattern.
Medium confidence (0.4-0.7): Ambiguous description.
Low confidence (<0.4): Cannot determine from description alone."""


def build_prompt(transaction: ParsedTransaction) -> str:
    """
    Build the full categorisation prompt for one transaction.

    Args:
        transaction: Transaction to categorise

    Returns:
        Prompt text (instructions + transaction details)
    """
    return (
        f"{CATEGORY_PROMPT}\n\n"
        f"Transaction to categorize:\n"
        f"Description: {transaction.description}\n"
        f"Amount: {format_currency(transaction.amount)}\n"
        f"Date: {transaction.date}"
    )


def extract_json(text: str) -> Dict[str, Any]:
    """
    Extract the first JSON object from a model response.

    The object may be wrapped in prose or markdown code fences; decoding
    starts at the first "{" and stops at its matching "}".

    Args:
        text: Raw response text

    Returns:
        Decoded JSON object

    Raises:
        AIResponseError: If no JSON object can be decoded
    """
    start = text.find('{') if text else -1
    if start == -1:
        raise AIResponseError("No JSON found in AI response")

    try:
        data, _ = json.JSONDecoder().raw_decode(text, start)
    except json.JSONDecodeError as e:
        raise AIResponseError(f"Invalid JSON in AI response: {e}")

    return data


class AnthropicCompleter:
    """
    Send a prompt to the Anthropic Messages API and return the reply text.

    Any API, network or timeout error propagates to the caller; the
    categorisation engine decides how to degrade.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = CATEGORISATION_MODEL,
        temperature: float = AI_TEMPERATURE,
        max_tokens: int = AI_MAX_TOKENS,
        timeout: float = AI_TIMEOUT_SECONDS,
        client: Optional[anthropic.Anthropic] = None
    ):
        """
        Initialize completer.

        Args:
            api_key: Anthropic API key (defaults to ANTHROPIC_API_KEY)
            model: Model name
            temperature: Sampling temperature
            max_tokens: Maximum tokens in the reply
            timeout: Request timeout in seconds
            client: Pre-built client (mainly for tests)
        """
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

        if client is not None:
            self.client = client
        else:
            api_key = api_key or ANTHROPIC_API_KEY
            if not api_key:
                raise ValueError(
                    "Anthropic API key required. Set ANTHROPIC_API_KEY environment variable "
                    "or pass api_key parameter"
                )
            # Retries are left to the caller's batching policy
            self.client = anthropic.Anthropic(api_key=api_key, timeout=timeout, max_retries=0)

    def __call__(self, prompt: str) -> str:
        """
        Complete a prompt.

        Args:
            prompt: Prompt text

        Returns:
            Text of the first content block

        Raises:
            AIResponseError: If the reply has no text
        """
        message = self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            messages=[{"role": "user", "content": prompt}],
        )

        text = next(
            (block.text for block in message.content if getattr(block, 'type', None) == 'text'),
            None
        )
        if not text:
            raise AIResponseError("No response from model")

        return text


def get_default_completer() -> Optional[AnthropicCompleter]:
    """Build the configured completer, or None when no API key is set."""
    if not ANTHROPIC_API_KEY:
        return None
    return AnthropicCompleter(api_key=ANTHROPIC_API_KEY)
