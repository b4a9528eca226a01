"""
Main categorisation pipeline.

Coordinates parsing, categorisation and the write-back of learned
mappings. This is the calling layer: it owns batch size and delay policy
and the mapping store, neither of which the engine knows about.
"""
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from .config.mapping_loader import MappingStore, get_mapping_store
from .config.settings import RECATEGORISE_BATCH_SIZE, RECATEGORISE_BATCH_DELAY
from .categorization import CategorizationEngine, get_categorization_engine, normalise, parent_of, is_subcategory
from .models import CategorizationResult, CategoryMapping, ParsedTransaction, ParseResult, is_parse_error
from .parsers import CSVStatementParser
from .utils import extract_merchant_pattern, log_categorisation_audit

logger = logging.getLogger(__name__)


@dataclass
class CategorisationRun:
    """
    Result of parsing and categorising one statement.

    Attributes:
        parse_result: Parser output (None if parsing failed)
        results: Categorisations keyed by transaction key
        success: Whether the statement could be parsed
        error_message: Parse error message if failed
        error_row: Line the parse error refers to, if any
        processing_time: Time taken (seconds)
        processed_at: Timestamp of the run
    """
    parse_result: Optional[ParseResult]
    results: Dict[str, CategorizationResult] = field(default_factory=dict)
    success: bool = True
    error_message: Optional[str] = None
    error_row: Optional[int] = None
    processing_time: float = 0.0
    processed_at: datetime = field(default_factory=datetime.now)

    @property
    def transactions(self) -> List[ParsedTransaction]:
        """Get parsed transactions."""
        return self.parse_result.transactions if self.parse_result else []

    @property
    def needs_homework(self) -> List[ParsedTransaction]:
        """Get transactions whose categorisation should be reviewed."""
        return [
            t for t in self.transactions
            if t.key not in self.results or self.results[t.key].needs_homework
        ]

    @property
    def totals(self) -> dict:
        """Money in/out and categorisation counts."""
        total_in = sum(t.amount for t in self.transactions if t.amount >= 0)
        total_out = sum(abs(t.amount) for t in self.transactions if t.amount < 0)
        homework = len(self.needs_homework)
        return {
            'transactions': len(self.transactions),
            'total_in': round(total_in, 2),
            'total_out': round(total_out, 2),
            'categorised': len(self.transactions) - homework,
            'needs_homework': homework,
        }

    def rows(self) -> List[dict]:
        """Flatten transactions and their categorisation into one row each."""
        rows = []
        for transaction in self.transactions:
            result = self.results.get(transaction.key)
            row = transaction.to_dict()
            if result:
                row.update(result.to_dict())
            else:
                row.update({
                    'category': None,
                    'subcategory': None,
                    'confidence': None,
                    'reasoning': None,
                    'needsHomework': True,
                })
            rows.append(row)
        return rows

    def to_dict(self) -> dict:
        """Convert run to dictionary."""
        return {
            'success': self.success,
            'error_message': self.error_message,
            'error_row': self.error_row,
            'processing_time': round(self.processing_time, 2),
            'processed_at': self.processed_at.isoformat(),
            'detected_columns': self.parse_result.detected_columns.to_dict() if self.parse_result else None,
            'skipped_rows': self.parse_result.skipped_rows if self.parse_result else 0,
            'totals': self.totals,
            'transactions': self.rows(),
        }


@dataclass
class RecategoriseSummary:
    """Outcome of re-running categorisation over stored transactions."""
    updated: int
    errors: int
    total: int
    results: Dict[str, CategorizationResult] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert summary to dictionary."""
        return {
            'message': f"Re-categorised {self.updated} transactions with subcategories.",
            'updated': self.updated,
            'errors': self.errors,
            'total': self.total,
        }


class CategorisationPipeline:
    """
    Parse a statement, categorise it and learn from corrections.

    Phases:
    1. Parse - detect columns and normalise rows
    2. Categorise - learned mappings, merchant rules, then AI
    3. Learn - upsert confirmed merchant patterns into the mapping store
    """

    def __init__(
        self,
        engine: Optional[CategorizationEngine] = None,
        mapping_store: Optional[MappingStore] = None,
        parser: Optional[CSVStatementParser] = None
    ):
        """Initialize pipeline with parser, engine and mapping store."""
        self.engine = engine or get_categorization_engine()
        self._mapping_store = mapping_store
        self.parser = parser or CSVStatementParser()

    @property
    def mapping_store(self) -> MappingStore:
        """Mapping store (loaded on first use)."""
        if self._mapping_store is None:
            self._mapping_store = get_mapping_store()
        return self._mapping_store

    def process(
        self,
        file_path: Path,
        mappings: Optional[Sequence[CategoryMapping]] = None
    ) -> CategorisationRun:
        """
        Parse and categorise a CSV statement file.

        Args:
            file_path: Path to the CSV export
            mappings: Learned mappings (defaults to the mapping store)

        Returns:
            CategorisationRun
        """
        file_path = Path(file_path)
        logger.info(f"Processing statement: {file_path.name}")
        text = file_path.read_text(encoding='utf-8-sig')
        return self.process_text(text, mappings, source=file_path.name)

    def process_text(
        self,
        text: str,
        mappings: Optional[Sequence[CategoryMapping]] = None,
        source: str = "<text>"
    ) -> CategorisationRun:
        """
        Parse and categorise raw statement text.

        Args:
            text: CSV export contents
            mappings: Learned mappings (defaults to the mapping store)
            source: Name used in logs

        Returns:
            CategorisationRun
        """
        start_time = time.time()

        parsed = self.parser.parse(text)
        if is_parse_error(parsed):
            logger.error(f"Could not parse {source}: {parsed.message}")
            log_categorisation_audit(source, success=False, error=parsed.message)
            return CategorisationRun(
                parse_result=None,
                success=False,
                error_message=parsed.message,
                error_row=parsed.row,
                processing_time=time.time() - start_time,
            )

        if mappings is None:
            mappings = self.mapping_store.mappings

        logger.info(
            f"Categorising {parsed.transaction_count} transactions "
            f"({len(mappings)} learned mappings, AI {'on' if self.engine.ai_enabled else 'off'})"
        )
        results = self.engine.categorize_batch(parsed.transactions, mappings)

        run = CategorisationRun(
            parse_result=parsed,
            results=results,
            processing_time=time.time() - start_time,
        )

        log_categorisation_audit(
            source,
            success=True,
            transaction_count=parsed.transaction_count,
            skipped_rows=parsed.skipped_rows,
            needs_homework=run.totals['needs_homework'],
        )
        return run

    def recategorise(
        self,
        transactions: Sequence[ParsedTransaction],
        mappings: Optional[Sequence[CategoryMapping]] = None,
        batch_size: int = RECATEGORISE_BATCH_SIZE,
        delay: float = RECATEGORISE_BATCH_DELAY,
        sleep: Callable[[float], None] = time.sleep
    ) -> RecategoriseSummary:
        """
        Re-run categorisation over a backlog in small, spaced-out batches.

        Transactions are still categorised one at a time; ``delay`` seconds
        are waited between batches (not after the last one).

        Args:
            transactions: Transactions to categorise again
            mappings: Learned mappings (defaults to the mapping store)
            batch_size: Transactions per batch
            delay: Pause between batches in seconds
            sleep: Sleep function

        Returns:
            RecategoriseSummary
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        if mappings is None:
            mappings = self.mapping_store.mappings

        results: Dict[str, CategorizationResult] = {}
        updated = 0
        errors = 0
        total = len(transactions)

        for start in range(0, total, batch_size):
            batch = transactions[start:start + batch_size]

            for transaction in batch:
                try:
                    results[transaction.key] = self.engine.categorize(transaction, mappings)
                    updated += 1
                except Exception as e:
                    logger.error(f"Recategorisation failed for '{transaction.description}': {e}")
                    errors += 1

            if start + batch_size < total:
                sleep(delay)

        logger.info(f"Re-categorised {updated}/{total} transactions ({errors} errors)")
        return RecategoriseSummary(updated=updated, errors=errors, total=total, results=results)

    def learn(
        self,
        description: str,
        category: str,
        subcategory: Optional[str] = None,
        save: bool = True
    ) -> CategoryMapping:
        """
        Record a user's correction as a learned mapping.

        ``category`` may itself be a subcategory; the parent is then derived.

        Args:
            description: Description of the corrected transaction
            category: Chosen parent category or subcategory
            subcategory: Chosen subcategory, if given separately
            save: Write the store to disk afterwards

        Returns:
            The stored mapping
        """
        if subcategory is None and is_subcategory(category):
            subcategory = category

        if subcategory is not None:
            subcategory = normalise(subcategory)
            parent = parent_of(subcategory) if is_subcategory(subcategory) else normalise(category)
        else:
            parent = normalise(category)

        pattern = extract_merchant_pattern(description)
        mapping = self.mapping_store.upsert(pattern, parent, subcategory)
        logger.info(f"Learned mapping: '{pattern}' -> {parent}/{subcategory or parent}")

        if save:
            self.mapping_store.save()

        return mapping
