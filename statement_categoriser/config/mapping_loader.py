"""Load and save learned merchant -> category mappings."""
import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from ..models import CategoryMapping
from .settings import MAPPINGS_FILE

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.95


def _read_confidence(entry: dict) -> float:
    """Confidence stored with a mapping entry, 0.95 when missing or unreadable."""
    value = entry.get('confidence')
    if value is None:
        return DEFAULT_CONFIDENCE

    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid confidence {value!r} for '{entry['merchant_pattern']}', using {DEFAULT_CONFIDENCE}")
        return DEFAULT_CONFIDENCE


class MappingStore:
    """
    YAML-backed store of one user's learned category mappings.

    File layout::

        mappings:
          - merchant_pattern: tesco
            category: Essential
            subcategory: Groceries
            confidence: 0.95

    Mappings keep file order, which is the order the engine scans them in.
    """

    def __init__(self, path: Path = MAPPINGS_FILE):
        """
        Initialize mapping store.

        Args:
            path: YAML file holding the mappings
        """
        self.path = Path(path)
        self._mappings: List[CategoryMapping] = []
        self._load()

    def _load(self) -> None:
        """Load mappings from disk."""
        if not self.path.exists():
            logger.warning(f"Mappings file not found: {self.path}")
            return

        with open(self.path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring mappings file without a 'mappings' section: {self.path}")
            return

        entries = data.get('mappings') or []
        if not isinstance(entries, list):
            logger.warning(f"Ignoring 'mappings' section that is not a list: {self.path}")
            return

        for entry in entries:
            if not isinstance(entry, dict) or not entry.get('merchant_pattern'):
                logger.warning(f"Ignoring invalid mapping entry: {entry}")
                continue

            subcategory = entry.get('subcategory')
            self._mappings.append(CategoryMapping(
                merchant_pattern=str(entry['merchant_pattern']),
                category=str(entry.get('category') or ''),
                subcategory=str(subcategory) if subcategory is not None else None,
                confidence=_read_confidence(entry),
            ))

        logger.info(f"Loaded {len(self._mappings)} learned mappings from {self.path}")

    @property
    def mappings(self) -> List[CategoryMapping]:
        """Snapshot of the current mappings."""
        return list(self._mappings)

    def get(self, merchant_pattern: str) -> Optional[CategoryMapping]:
        """Get the mapping for a merchant pattern (case-insensitive)."""
        key = merchant_pattern.strip().lower()
        for mapping in self._mappings:
            if mapping.merchant_pattern.lower() == key:
                return mapping
        return None

    def upsert(
        self,
        merchant_pattern: str,
        category: str,
        subcategory: Optional[str] = None,
        confidence: float = DEFAULT_CONFIDENCE
    ) -> CategoryMapping:
        """
        Insert a mapping or replace the one with the same merchant pattern.

        Args:
            merchant_pattern: Pattern to match (stored lowercase)
            category: Parent category
            subcategory: Subcategory, if known
            confidence: Confidence to store with the mapping

        Returns:
            The stored mapping
        """
        pattern = merchant_pattern.strip().lower()
        if not pattern:
            raise ValueError("merchant_pattern cannot be empty")

        mapping = CategoryMapping(
            merchant_pattern=pattern,
            category=category,
            subcategory=subcategory,
            confidence=confidence,
        )

        for i, existing in enumerate(self._mappings):
            if existing.merchant_pattern.lower() == pattern:
                self._mappings[i] = mapping
                logger.debug(f"Updated mapping: {pattern}")
                return mapping

        self._mappings.append(mapping)
        logger.debug(f"Added mapping: {pattern}")
        return mapping

    def save(self) -> Path:
        """Write mappings back to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload: Dict[str, list] = {'mappings': [m.to_dict() for m in self._mappings]}

        with open(self.path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(payload, f, sort_keys=False, allow_unicode=True)

        logger.info(f"Saved {len(self._mappings)} mappings to {self.path}")
        return self.path

    def __len__(self) -> int:
        return len(self._mappings)


# Singleton instance
_store: Optional[MappingStore] = None


def get_mapping_store() -> MappingStore:
    """Get singleton instance of MappingStore."""
    global _store
    if _store is None:
        _store = MappingStore()
    return _store
