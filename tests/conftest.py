"""Pytest configuration and fixtures."""
import pytest
from pathlib import Path

from statement_categoriser.categorization import CategorizationEngine
from statement_categoriser.config.mapping_loader import MappingStore
from statement_categoriser.models import ParsedTransaction, CategoryMapping


@pytest.fixture
def sample_transaction():
    """Create a sample transaction for testing."""
    return ParsedTransaction(
        date="2024-12-01",
        description="TESCO STORES 2341",
        amount=-45.67,
    )


@pytest.fixture
def sample_transactions():
    """Create a list of sample transactions."""
    return [
        ParsedTransaction(date="2024-12-01", description="TESCO STORES 2341", amount=-45.67),
        ParsedTransaction(date="2024-12-02", description="SALARY PAYMENT", amount=2500.00),
        ParsedTransaction(date="2024-12-03", description="MYSTERY SHOP LTD", amount=-12.00),
    ]


@pytest.fixture
def sample_mappings():
    """Create learned mappings for testing."""
    return [
        CategoryMapping(merchant_pattern="mystery shop", category="Discretionary", subcategory="Hobbies"),
        CategoryMapping(merchant_pattern="tesco", category="essential", subcategory=None),
    ]


@pytest.fixture
def monzo_csv():
    """Monzo-style export with a signed amount column."""
    return (
        "Date,Description,Amount\r\n"
        "01/12/2024,TESCO STORES 2341,-45.67\r\n"
        "02/12/2024,SALARY PAYMENT,2500.00\r\n"
    )


@pytest.fixture
def barclays_csv():
    """Export with separate money in / money out columns and a balance."""
    return (
        "Transaction Date,Narrative,Money Out,Money In,Balance\n"
        "01 Dec 2024,NETFLIX.COM,15.99,,1234.01\n"
        "02 Dec 2024,REFUND AMAZON,,20.00,1254.01\n"
        "03 Dec 2024,BANK INTEREST,,,1254.01\n"
    )


class FakeCompleter:
    """Completer that records prompts and replays a canned reply."""

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fake_completer():
    """Factory for fake completers."""
    return FakeCompleter


@pytest.fixture
def offline_engine():
    """Engine with the AI tier disabled."""
    return CategorizationEngine(completer=None)


@pytest.fixture
def mappings_file(tmp_path) -> Path:
    """YAML mappings file with two entries."""
    path = tmp_path / "category_mappings.yaml"
    path.write_text(
        "mappings:\n"
        "  - merchant_pattern: gymbox\n"
        "    category: Discretionary\n"
        "    subcategory: Hobbies\n"
        "    confidence: 0.95\n"
        "  - merchant_pattern: landlord\n"
        "    category: essential\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def mapping_store(mappings_file):
    """Mapping store backed by a temporary file."""
    return MappingStore(mappings_file)
