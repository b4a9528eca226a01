"""Tests for the Anthropic completion backend."""
from types import SimpleNamespace

import anthropic
import pytest

from statement_categoriser.categorization import ai_client
from statement_categoriser.categorization.ai_client import (
    AIResponseError,
    AnthropicCompleter,
    build_prompt,
    extract_json,
    get_default_completer,
)
from statement_categoriser.models import ParsedTransaction


class FakeMessages:
    """Stand-in for ``client.messages`` recording create() calls."""

    def __init__(self, content):
        self.content = content
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        return SimpleNamespace(content=self.content)


def fake_client(*blocks):
    return SimpleNamespace(messages=FakeMessages(list(blocks)))


def text_block(text):
    return SimpleNamespace(type="text", text=text)


class TestAnthropicCompleter:
    """Test the completer wrapper."""

    def test_returns_first_text_block(self):
        """Test the reply text is returned."""
        client = fake_client(SimpleNamespace(type="thinking"), text_block('{"category": "Income"}'))
        completer = AnthropicCompleter(client=client)

        assert completer("prompt") == '{"category": "Income"}'

    def test_request_parameters(self):
        """Test model, limits and the user message are sent."""
        client = fake_client(text_block("ok"))
        completer = AnthropicCompleter(model="test-model", temperature=0.0, max_tokens=50, client=client)

        completer("categorise this")

        call = client.messages.calls[0]
        assert call["model"] == "test-model"
        assert call["max_tokens"] == 50
        assert call["temperature"] == 0.0
        assert call["messages"] == [{"role": "user", "content": "categorise this"}]

    def test_empty_reply(self):
        """Test a reply without text raises AIResponseError."""
        completer = AnthropicCompleter(client=fake_client())

        with pytest.raises(AIResponseError, match="No response from model"):
            completer("prompt")

    def test_missing_api_key(self, monkeypatch):
        """Test a key is required when no client is given."""
        monkeypatch.setattr(ai_client, "ANTHROPIC_API_KEY", "")

        with pytest.raises(ValueError, match="API key required"):
            AnthropicCompleter()

    def test_builds_client_from_key(self):
        """Test an SDK client is created from an explicit key."""
        completer = AnthropicCompleter(api_key="sk-test", timeout=5)

        assert isinstance(completer.client, anthropic.Anthropic)

    def test_default_completer_without_key(self, monkeypatch):
        """Test no completer is built when the key is unset."""
        monkeypatch.setattr(ai_client, "ANTHROPIC_API_KEY", "")

        assert get_default_completer() is None

    def test_default_completer_with_key(self, monkeypatch):
        """Test the completer is built when the key is set."""
        monkeypatch.setattr(ai_client, "ANTHROPIC_API_KEY", "sk-test")

        assert isinstance(get_default_completer(), AnthropicCompleter)


class TestExtractJson:
    """Test JSON extraction from model replies."""

    def test_plain_object(self):
        """Test a bare JSON object."""
        assert extract_json('{"a": 1}') == {"a": 1}

    def test_surrounding_text(self):
        """Test prose and trailing text around the object."""
        assert extract_json('Sure! {"a": {"b": 2}} Hope that helps {x}') == {"a": {"b": 2}}

    def test_no_object(self):
        """Test replies without a brace."""
        with pytest.raises(AIResponseError, match="No JSON found"):
            extract_json("nothing to see")

    def test_empty_reply(self):
        """Test empty replies."""
        with pytest.raises(AIResponseError):
            extract_json("")

    def test_invalid_json(self):
        """Test a brace that does not start valid JSON."""
        with pytest.raises(AIResponseError, match="Invalid JSON"):
            extract_json("{category: Income}")


class TestBuildPrompt:
    """Test prompt construction."""

    def test_prompt_has_heuristics_and_transaction(self):
        """Test the prompt includes UK heuristics and the transaction."""
        prompt = build_prompt(ParsedTransaction("2024-12-02", "SALARY ACME LTD", 2500.0))

        assert "UK supermarkets" in prompt
        assert prompt.endswith(
            "Transaction to categorize:\n"
            "Description: SALARY ACME LTD\n"
            "Amount: £2,500.00\n"
            "Date: 2024-12-02"
        )
