"""
Known UK merchant patterns -> subcategory.

These run before the AI tier, so common merchants are categorised
instantly and without an API call. Patterns are matched case-insensitively
as substrings of the description.

Rules are checked in order and the first match wins: a specific pattern
must come before any shorter pattern it contains ("uber eats" before
"uber", "amazon prime" before "amazon").
"""
from typing import Optional, Sequence, Tuple

from ..models import MerchantRule


def _rules(subcategory: str, *entries: Tuple[str, float]) -> Tuple[MerchantRule, ...]:
    return tuple(MerchantRule(pattern, subcategory, confidence) for pattern, confidence in entries)


MERCHANT_RULES: Tuple[MerchantRule, ...] = (
    # Groceries (Essential)
    *_rules(
        "Groceries",
        ("sainsbury", 0.95), ("tesco", 0.95), ("co-op", 0.95), ("morrisons", 0.95),
        ("aldi", 0.95), ("lidl", 0.95), ("asda", 0.95), ("waitrose", 0.95),
        ("m&s food", 0.95), ("iceland", 0.90), ("ocado", 0.95), ("farmfoods", 0.95),
    ),

    # Eating out (Discretionary)
    *_rules(
        "Eating Out",
        ("mcdonalds", 0.95), ("nandos", 0.95), ("nando", 0.95), ("pret a manger", 0.95),
        ("costa", 0.90), ("starbucks", 0.95), ("caffe nero", 0.95), ("greggs", 0.95),
        ("subway", 0.95), ("kfc", 0.95), ("burger king", 0.95), ("five guys", 0.95),
        ("pizza", 0.85), ("wetherspoon", 0.90), ("wagamama", 0.95), ("tortilla", 0.95),
        ("itsu", 0.95), ("uber eats", 0.95), ("deliveroo", 0.95), ("just eat", 0.95),
        ("leon ", 0.85), ("prezzo", 0.95), ("slim chicken", 0.95),
    ),

    # Subscriptions (Discretionary)
    *_rules(
        "Subscriptions",
        ("netflix", 0.95), ("spotify", 0.95), ("youtube", 0.95), ("disney", 0.95),
        ("apple.com/bill", 0.95), ("dazn", 0.95), ("amazon prime", 0.95),
        ("prime video", 0.90), ("now tv", 0.95),
    ),

    # Shopping (Discretionary)
    *_rules(
        "Shopping",
        ("amazon", 0.80), ("h&m", 0.95), ("primark", 0.95), ("zara", 0.95),
        ("hollister", 0.95), ("nike", 0.95), ("john lewis", 0.90), ("tk maxx", 0.95),
        ("argos", 0.90), ("ebay", 0.85), ("asos", 0.95), ("new balance", 0.95),
        ("card factory", 0.90), ("waterstones", 0.90),
    ),

    # Transport (Essential)
    *_rules(
        "Transport",
        ("tfl", 0.95), ("trainline", 0.95), ("uber trip", 0.90), ("uber *", 0.85),
        ("uber", 0.80), ("gwr ", 0.90), ("national rail", 0.95), ("shell", 0.85),
        ("bp ", 0.85), ("esso", 0.85), ("mfg ", 0.85),
    ),

    # Personal care (Discretionary)
    *_rules("Personal Care", ("boots", 0.85), ("superdrug", 0.90)),

    # Travel / holidays (Discretionary)
    *_rules(
        "Travel/Holidays",
        ("easyjet", 0.95), ("ryanair", 0.95), ("booking.com", 0.95), ("airbnb", 0.95),
        ("expedia", 0.95), ("jet2", 0.95), ("british airways", 0.95),
    ),

    # Utilities (Essential)
    *_rules(
        "Utilities",
        ("british gas", 0.95), ("octopus energy", 0.95), ("edf energy", 0.95),
        ("thames water", 0.95), ("severn trent", 0.95), ("wessex water", 0.95),
        ("scottish power", 0.95), ("bulb", 0.90),
    ),

    # Phone / internet (Essential)
    *_rules(
        "Phone/Internet",
        ("vodafone", 0.95), ("three.co.uk", 0.95), ("ee limited", 0.95), ("o2", 0.85),
        ("bt group", 0.90), ("sky", 0.80), ("virgin media", 0.95),
    ),

    # Insurance (Essential)
    *_rules("Insurance", ("insurance", 0.85), ("aviva", 0.90), ("admiral", 0.90)),

    # Entertainment (Discretionary)
    *_rules(
        "Entertainment",
        ("cinema", 0.90), ("cineworld", 0.95), ("odeon", 0.95), ("vue cinema", 0.95),
        ("ticketmaster", 0.90),
    ),

    # Income
    *_rules("Salary", ("salary", 0.95), ("payroll", 0.95), ("wages", 0.90)),
    *_rules("Refund", ("refund", 0.85)),

    # Transfers and credit card payments (Transfer)
    *_rules(
        "Internal Transfer",
        ("payment received", 0.90), ("thank you for your payment", 0.95),
        ("payment - thank you", 0.95), ("direct debit payment", 0.90),
        ("internet payment", 0.85), ("mobile app payment", 0.85),
    ),

    # Council tax (Essential)
    *_rules("Council Tax", ("council tax", 0.95)),

    # Rent / mortgage (Essential)
    *_rules("Rent/Mortgage", ("rent", 0.80), ("mortgage", 0.95), ("nationwide", 0.70)),

    # Gifts (Discretionary)
    *_rules("Gifts", ("moonpig", 0.90), ("funky pigeon", 0.90)),
)


def match_merchant(
    description: str,
    rules: Sequence[MerchantRule] = MERCHANT_RULES
) -> Optional[MerchantRule]:
    """
    Match a transaction description against the merchant rules.

    Args:
        description: Raw transaction description
        rules: Ordered rules to scan

    Returns:
        The first matching rule, or None
    """
    for rule in rules:
        if rule.matches(description):
            return rule
    return None
