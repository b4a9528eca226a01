"""Categorisation data models."""
from dataclasses import dataclass
from typing import Optional

from ..config.settings import CONFIDENCE_THRESHOLD


@dataclass(frozen=True)
class MerchantRule:
    """
    Static merchant pattern mapped to a subcategory.

    Attributes:
        pattern: Lowercase substring matched against the description
        subcategory: Canonical subcategory value
        confidence: Confidence reported when the rule matches, in (0, 1]
    """
    pattern: str
    subcategory: str
    confidence: float

    def __post_init__(self):
        """Validate rule data."""
        if self.pattern != self.pattern.lower():
            raise ValueError(f"pattern must be lowercase: {self.pattern!r}")
        if not 0 < self.confidence <= 1:
            raise ValueError("confidence must be in (0, 1]")

    def matches(self, description: str) -> bool:
        """Check whether the rule applies to a description."""
        return self.pattern in description.lower()


@dataclass(frozen=True)
class CategoryMapping:
    """
    Merchant mapping learned from a user's manual corrections.

    Attributes:
        merchant_pattern: Substring matched case-insensitively
        category: Parent category (may be a legacy value)
        subcategory: Subcategory, or None when only a parent was chosen
        confidence: Confidence stored alongside the mapping
    """
    merchant_pattern: str
    category: str
    subcategory: Optional[str] = None
    confidence: float = 0.95

    def to_dict(self) -> dict:
        """Convert mapping to dictionary."""
        return {
            'merchant_pattern': self.merchant_pattern,
            'category': self.category,
            'subcategory': self.subcategory,
            'confidence': self.confidence,
        }


@dataclass(frozen=True)
class CategorizationResult:
    """
    Category assigned to a single transaction.

    Attributes:
        category: Canonical parent category
        subcategory: Canonical subcategory
        confidence: Confidence score (0-1)
        reasoning: Short explanation of how the category was chosen
    """
    category: str
    subcategory: str
    confidence: float
    reasoning: Optional[str] = None

    @property
    def needs_homework(self) -> bool:
        """Whether a human should confirm this categorisation."""
        return self.confidence < CONFIDENCE_THRESHOLD

    def to_dict(self) -> dict:
        """Convert result to dictionary."""
        return {
            'category': self.category,
            'subcategory': self.subcategory,
            'confidence': round(self.confidence, 2),
            'reasoning': self.reasoning,
            'needsHomework': self.needs_homework,
        }
