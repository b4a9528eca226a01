"""Derive a reusable merchant pattern from a transaction description."""
import re

# Payment-rail words that say nothing about the merchant
NOISE_WORDS = frozenset({
    "payment", "transfer", "card",
    "pos", "purchase", "contactless", "debit", "credit", "ref",
    "to", "from", "gbp", "usd", "eur",
})

# Multi-word rails are removed from the text before it is split into words
NOISE_PHRASES = ("direct debit", "standing order")

NOISE_PHRASE_PATTERN = re.compile(
    r"\b(?:" + "|".join(phrase.replace(" ", r"\s+") for phrase in NOISE_PHRASES) + r")\b",
    re.IGNORECASE,
)


def extract_merchant_pattern(description: str) -> str:
    """
    Extract the merchant part of a description for a learned mapping.

    A long first word ("NETFLIX.COM") is distinctive on its own; otherwise
    the first three meaningful words are kept.

    Example:
        >>> extract_merchant_pattern("CARD PAYMENT TO TESCO STORES 2341")
        'tesco stores 2341'
    """
    text = NOISE_PHRASE_PATTERN.sub(" ", description)
    words = [
        word
        for word in re.sub(r"[^a-zA-Z0-9\s&'.-]", " ", text).split()
        if len(word) > 1 and word.lower() not in NOISE_WORDS
    ]

    if not words:
        return description.strip()[:30].lower()

    if len(words[0]) >= 6:
        return words[0].lower()

    return " ".join(words[:3]).lower()
