"""
Tests for the OpenAI chat layer. The OpenAI client is mocked; no network.
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from app.tutor import llm
from app.tutor.llm import LLMResult, OpenAIChat


def _response(content, total_tokens=42):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=30, completion_tokens=12, total_tokens=total_tokens),
    )


class TestOpenAIChat:
    def test_generate_async_returns_text(self):
        """Model output is stripped and usage is reported."""
        with patch("app.tutor.llm.AsyncOpenAI") as client_cls:
            create = AsyncMock(return_value=_response("  AgI is yellow.  "))
            client_cls.return_value.chat.completions.create = create
            result = asyncio.run(OpenAIChat().generate_async([{"role": "user", "content": "hi"}]))

        assert isinstance(result, LLMResult)
        assert result.text == "AgI is yellow."
        assert result.usage["total_tokens"] == 42
        kwargs = create.call_args.kwargs
        assert kwargs["messages"] == [{"role": "user", "content": "hi"}]
        assert kwargs["model"] == llm.LLM_MODEL

    def test_empty_content(self):
        """A None message body becomes an empty string."""
        with patch("app.tutor.llm.AsyncOpenAI") as client_cls:
            client_cls.return_value.chat.completions.create = AsyncMock(return_value=_response(None))
            result = asyncio.run(OpenAIChat().generate_async([]))
        assert result.text == ""

    def test_errors_propagate(self):
        """Client errors are logged and re-raised to the router."""
        with patch("app.tutor.llm.AsyncOpenAI") as client_cls:
            client_cls.return_value.chat.completions.create = AsyncMock(side_effect=RuntimeError("boom"))
            with pytest.raises(RuntimeError, match="boom"):
                asyncio.run(OpenAIChat().generate_async([]))


class TestProviderFactory:
    def test_unknown_provider(self, monkeypatch):
        """An unconfigured provider name is rejected."""
        monkeypatch.setattr(llm, "_instance", None)
        monkeypatch.setattr(llm, "LLM_PROVIDER", "nope")
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            llm.get_llm()

    def test_singleton(self, monkeypatch):
        """get_llm builds the provider once and reuses it."""
        monkeypatch.setattr(llm, "_instance", None)
        with patch("app.tutor.llm.AsyncOpenAI"):
            assert llm.get_llm() is llm.get_llm()
