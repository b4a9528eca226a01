"""Tests for the command-line interface."""
import json

import pytest
from click.testing import CliRunner

from statement_categoriser.categorization import ai_client
from statement_categoriser.cli import cli
from statement_categoriser.config.mapping_loader import MappingStore


@pytest.fixture
def runner():
    """Click test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def no_api_key(monkeypatch):
    """Keep the AI tier offline."""
    monkeypatch.setattr(ai_client, "ANTHROPIC_API_KEY", "")


class TestCategoriseCommand:
    """Test the categorise command."""

    def test_categorise_csv(self, runner, tmp_path, monzo_csv, mappings_file):
        """Test categorising a statement and exporting CSV and JSON."""
        statement = tmp_path / "statement.csv"
        statement.write_text(monzo_csv, encoding="utf-8")
        json_path = tmp_path / "result.json"

        result = runner.invoke(cli, [
            "categorise", str(statement),
            "--mappings", str(mappings_file),
            "--format", "csv",
            "--json", str(json_path),
        ])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "statement_categorised.csv").exists()
        data = json.loads(json_path.read_text(encoding="utf-8"))
        assert data["totals"]["transactions"] == 2

    def test_categorise_unparseable(self, runner, tmp_path, mappings_file):
        """Test parse failures exit with status 1."""
        statement = tmp_path / "bad.csv"
        statement.write_text("foo,bar\n1,2\n", encoding="utf-8")

        result = runner.invoke(cli, ["categorise", str(statement), "--mappings", str(mappings_file)])

        assert result.exit_code == 1
        assert "Could not detect column headers" in result.output


class TestLearnCommand:
    """Test the learn command."""

    def test_learn(self, runner, mappings_file):
        """Test a correction is written to the mappings file."""
        result = runner.invoke(cli, ["learn", "CARD PAYMENT TO NETFLIX.COM", "Subscriptions",
                                     "--mappings", str(mappings_file)])

        assert result.exit_code == 0, result.output
        mapping = MappingStore(mappings_file).get("netflix.com")
        assert mapping.category == "Discretionary"
        assert mapping.subcategory == "Subscriptions"


class TestCategoriesCommand:
    """Test the categories command."""

    def test_lists_taxonomy(self, runner):
        """Test every parent is listed."""
        result = runner.invoke(cli, ["categories"])

        assert result.exit_code == 0
        for parent in ("Income", "Essential", "Discretionary", "Savings", "Transfer"):
            assert parent in result.output


class TestCheckCommand:
    """Test the check command."""

    def test_reports_missing_key(self, runner, monkeypatch):
        """Test the check runs and flags a missing API key."""
        monkeypatch.setattr("statement_categoriser.cli.ANTHROPIC_API_KEY", "")

        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 0
        assert "ANTHROPIC_API_KEY not set" in result.output
