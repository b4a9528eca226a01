"""Tests for the built-in merchant dictionary."""
import pytest

from statement_categoriser.categorization.merchant_rules import MERCHANT_RULES, match_merchant
from statement_categoriser.categorization.taxonomy import ALL_SUBCATEGORY_VALUES
from statement_categoriser.models import MerchantRule


class TestMerchantRuleModel:
    """Test rule validation."""

    def test_pattern_must_be_lowercase(self):
        """Test uppercase patterns are rejected."""
        with pytest.raises(ValueError):
            MerchantRule("Tesco", "Groceries", 0.95)

    @pytest.mark.parametrize("confidence", [0, -0.1, 1.5])
    def test_confidence_range(self, confidence):
        """Test confidence must be in (0, 1]."""
        with pytest.raises(ValueError):
            MerchantRule("tesco", "Groceries", confidence)

    def test_matches_case_insensitive(self):
        """Test rules match regardless of description case."""
        assert MerchantRule("tesco", "Groceries", 0.95).matches("TESCO EXPRESS")


class TestMerchantRules:
    """Test the rule table."""

    def test_rules_use_known_subcategories(self):
        """Test every rule points at a taxonomy subcategory."""
        for rule in MERCHANT_RULES:
            assert rule.subcategory in ALL_SUBCATEGORY_VALUES, rule.pattern

    def test_specific_patterns_precede_general_ones(self):
        """Test longer patterns come before patterns they contain."""
        patterns = [rule.pattern for rule in MERCHANT_RULES]

        assert patterns.index("uber eats") < patterns.index("uber")
        assert patterns.index("amazon prime") < patterns.index("amazon")


class TestMatchMerchant:
    """Test description matching."""

    @pytest.mark.parametrize("description, subcategory, confidence", [
        ("TESCO EXPRESS", "Groceries", 0.95),
        ("UBER EATS LONDON", "Eating Out", 0.95),
        ("UBER TRIP HELP.UBER.COM", "Transport", 0.90),
        ("AMAZON PRIME*AB12", "Subscriptions", 0.95),
        ("AMAZON.CO.UK", "Shopping", 0.80),
        ("SALARY PAYMENT", "Salary", 0.95),
        ("Netflix.com", "Subscriptions", 0.95),
    ])
    def test_known_merchants(self, description, subcategory, confidence):
        """Test common UK merchants."""
        rule = match_merchant(description)

        assert rule is not None
        assert rule.subcategory == subcategory
        assert rule.confidence == confidence

    def test_no_match(self):
        """Test unknown merchants return None."""
        assert match_merchant("ACME WIDGETS LTD") is None

    def test_custom_rules(self):
        """Test a custom rule table replaces the default."""
        rules = [MerchantRule("climb", "Hobbies", 0.9)]

        assert match_merchant("THE CLIMBING HANGAR", rules).subcategory == "Hobbies"
        assert match_merchant("TESCO", rules) is None

    def test_result_agrees_with_rule_matches(self):
        """Test the returned rule is the first whose own check accepts the description."""
        description = "Uber Eats London"

        rule = match_merchant(description)

        assert rule.matches(description)
        assert not any(earlier.matches(description) for earlier in MERCHANT_RULES[:MERCHANT_RULES.index(rule)])
