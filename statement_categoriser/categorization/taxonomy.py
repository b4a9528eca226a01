"""
Shared two-level category taxonomy.

Parent categories group subcategories for high-level reporting.
Subcategories provide the detail users actually assign.

Parent and subcategory values are Title Case everywhere: stored mappings,
AI prompts and results. Legacy lowercase / snake_case values and free-text
AI output are coerced with ``normalise()``.

The taxonomy is built once at import time and is immutable.
"""
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Tuple


@dataclass(frozen=True)
class Subcategory:
    """Subcategory value and display label."""
    value: str
    label: str


@dataclass(frozen=True)
class ParentCategory:
    """Parent category with its colour and subcategories."""
    value: str
    label: str
    colour: str
    subcategories: Tuple[Subcategory, ...]


CATEGORY_TAXONOMY: Tuple[ParentCategory, ...] = (
    ParentCategory("Income", "Income", "#34d399", (
        Subcategory("Salary", "Salary"),
        Subcategory("Freelance", "Freelance"),
        Subcategory("Benefits", "Benefits"),
        Subcategory("Refund", "Refund"),
        Subcategory("Investment Income", "Investment Income"),
        Subcategory("Other Income", "Other Income"),
    )),
    ParentCategory("Essential", "Essential", "#60a5fa", (
        Subcategory("Rent/Mortgage", "Rent / Mortgage"),
        Subcategory("Utilities", "Utilities"),
        Subcategory("Groceries", "Groceries"),
        Subcategory("Insurance", "Insurance"),
        Subcategory("Medical", "Medical / Health"),
        Subcategory("Childcare", "Childcare"),
        Subcategory("Council Tax", "Council Tax"),
        Subcategory("Phone/Internet", "Phone / Internet"),
        Subcategory("Transport", "Transport / Fuel"),
    )),
    ParentCategory("Discretionary", "Discretionary", "#fb923c", (
        Subcategory("Eating Out", "Eating Out"),
        Subcategory("Entertainment", "Entertainment"),
        Subcategory("Shopping", "Shopping"),
        Subcategory("Subscriptions", "Subscriptions"),
        Subcategory("Hobbies", "Hobbies"),
        Subcategory("Travel/Holidays", "Travel / Holidays"),
        Subcategory("Personal Care", "Personal Care"),
        Subcategory("Gifts", "Gifts"),
    )),
    ParentCategory("Business", "Business", "#a78bfa", (
        Subcategory("Office/Equipment", "Office / Equipment"),
        Subcategory("Software/Tools", "Software / Tools"),
        Subcategory("Professional Services", "Professional Services"),
        Subcategory("Business Travel", "Business Travel"),
        Subcategory("Marketing", "Marketing"),
    )),
    ParentCategory("Debt Repayment", "Debt Repayment", "#f87171", (
        Subcategory("Credit Card", "Credit Card"),
        Subcategory("Loan", "Loan"),
        Subcategory("Student Loan", "Student Loan"),
    )),
    ParentCategory("Savings", "Savings", "#a3e635", (
        Subcategory("Emergency Fund", "Emergency Fund"),
        Subcategory("Pension", "Pension"),
        Subcategory("Investments", "Investments"),
        Subcategory("General Savings", "General Savings"),
    )),
    ParentCategory("Transfer", "Transfer", "#94a3b8", (
        Subcategory("Internal Transfer", "Internal Transfer"),
        Subcategory("Person-to-Person", "Person-to-Person"),
    )),
)

FALLBACK_PARENT = "Discretionary"
FALLBACK_COLOUR = "#64748b"
UNCATEGORISED = "Uncategorised"


def _build_lookups():
    parent_colours: Dict[str, str] = {}
    subcategory_parents: Dict[str, str] = {}
    subcategory_colours: Dict[str, str] = {}

    for parent in CATEGORY_TAXONOMY:
        parent_colours[parent.value] = parent.colour
        for sub in parent.subcategories:
            if sub.value in subcategory_parents:
                raise ValueError(f"Subcategory {sub.value!r} listed under two parents")
            subcategory_parents[sub.value] = parent.value
            subcategory_colours[sub.value] = parent.colour

    # Legacy values stored before the Title Case migration
    aliases: Dict[str, str] = {
        "income": "Income",
        "essential": "Essential",
        "discretionary": "Discretionary",
        "business": "Business",
        "debt_repayment": "Debt Repayment",
        "savings": "Savings",
        "transfer": "Transfer",
    }
    # Any casing or snake_case spelling of a known value
    for value in list(parent_colours) + list(subcategory_parents):
        aliases.setdefault(value.lower(), value)
        aliases.setdefault(value.lower().replace(" ", "_"), value)

    return (
        MappingProxyType(parent_colours),
        MappingProxyType(subcategory_parents),
        MappingProxyType(subcategory_colours),
        MappingProxyType(aliases),
    )


_PARENT_COLOURS, _SUBCATEGORY_PARENTS, _SUBCATEGORY_COLOURS, _ALIASES = _build_lookups()

ALL_PARENT_VALUES: Tuple[str, ...] = tuple(_PARENT_COLOURS)
ALL_SUBCATEGORY_VALUES: Tuple[str, ...] = tuple(_SUBCATEGORY_PARENTS)


def normalise(raw: Any) -> str:
    """
    Normalise a raw category value into canonical Title Case.

    Handles:
    - lowercase values:   "discretionary" -> "Discretionary"
    - snake_case values:  "debt_repayment" -> "Debt Repayment"
    - already correct:    "Essential" -> "Essential"
    - unknown values:     Title Cased ("pet care" -> "Pet Care")

    Never raises. Empty input gives "Uncategorised"; non-string values
    from hand-edited files (``2024``) are read as their text.
    """
    if raw is None:
        return UNCATEGORISED

    stripped = str(raw).strip()
    if not stripped:
        return UNCATEGORISED

    if stripped in _PARENT_COLOURS or stripped in _SUBCATEGORY_PARENTS:
        return stripped

    alias = _ALIASES.get(stripped.lower())
    if alias:
        return alias

    return " ".join(word[:1].upper() + word[1:].lower() for word in re.split(r'[\s_]+', stripped) if word)


def parent_of(value: str) -> str:
    """
    Get the parent category for a category or subcategory value.

    A parent returns itself; unknown subcategories fall back to
    Discretionary.
    """
    normalised = normalise(value)
    if normalised in _PARENT_COLOURS:
        return normalised
    return _SUBCATEGORY_PARENTS.get(normalised, FALLBACK_PARENT)


def colour_of(value: str) -> str:
    """Get the display colour for a category or subcategory."""
    normalised = normalise(value)
    return (
        _PARENT_COLOURS.get(normalised)
        or _SUBCATEGORY_COLOURS.get(normalised)
        or FALLBACK_COLOUR
    )


def is_subcategory(value: str) -> bool:
    """Check whether a value is a known subcategory."""
    return normalise(value) in _SUBCATEGORY_PARENTS


def is_parent(value: str) -> bool:
    """Check whether a value is a known parent category."""
    return normalise(value) in _PARENT_COLOURS


def subcategories_of(parent: str) -> List[str]:
    """Get the subcategory values under a parent (empty if unknown)."""
    normalised = normalise(parent)
    for category in CATEGORY_TAXONOMY:
        if category.value == normalised:
            return [sub.value for sub in category.subcategories]
    return []


def taxonomy_prompt_lines() -> str:
    """Render the taxonomy as "- Parent: [Sub, Sub]" lines for prompts."""
    return "\n".join(
        f"- {parent.value}: [{', '.join(sub.value for sub in parent.subcategories)}]"
        for parent in CATEGORY_TAXONOMY
    )
