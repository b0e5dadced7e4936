"""Tests for the per-slide summarizer.

Mocking strategy
----------------
* LLM calls: ``deckdigest.summarizer._get_llm`` returns a ``MagicMock``
  whose ``.ainvoke()`` is an ``AsyncMock`` returning a fake
  ``AIMessage``-like object.  No provider is contacted.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from deckdigest.errors import ConfigurationError, SummarizerError
from deckdigest.summarizer import build_messages, summarize_slide


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _fake_ai_message(content) -> SimpleNamespace:
    """Minimal stand-in for a LangChain ``AIMessage``."""
    return SimpleNamespace(content=content)


def _fake_llm(reply=None, exc: Exception | None = None) -> MagicMock:
    llm = MagicMock()
    llm.ainvoke = AsyncMock(return_value=reply, side_effect=exc)
    return llm


# ---------------------------------------------------------------------------
# build_messages
# ---------------------------------------------------------------------------

class TestBuildMessages:
    def test_prompt_uses_one_based_slide_number(self) -> None:
        system, human = build_messages("Revenue grew 12%", 0)
        assert "120 characters" in system.content
        assert human.content == "Summarize slide 1:\nRevenue grew 12%"

    def test_long_text_is_truncated(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("deckdigest.config.settings.max_slide_chars", 8000)
        text = "x" * 9000
        _, human = build_messages(text, 4)
        body = human.content.split("\n", 1)[1]
        assert len(body) == 8000
        assert human.content.startswith("Summarize slide 5:\n")

    def test_empty_text_gets_placeholder(self) -> None:
        _, human = build_messages("", 2)
        assert human.content == "Summarize slide 3:\n(This slide has no parseable text.)"


# ---------------------------------------------------------------------------
# summarize_slide
# ---------------------------------------------------------------------------

class TestSummarizeSlide:
    async def test_returns_stripped_reply(self, llm_configured) -> None:
        llm = _fake_llm(_fake_ai_message("  A short summary.\n"))
        with patch("deckdigest.summarizer._get_llm", return_value=llm):
            result = await summarize_slide("Slide body", 0)

        assert result == "A short summary."
        messages = llm.ainvoke.await_args.args[0]
        assert messages[1].content == "Summarize slide 1:\nSlide body"

    async def test_non_text_reply_becomes_empty(self, llm_configured) -> None:
        llm = _fake_llm(_fake_ai_message([{"type": "image"}]))
        with patch("deckdigest.summarizer._get_llm", return_value=llm):
            assert await summarize_slide("x", 0) == ""

    async def test_provider_failure_is_wrapped(self, llm_configured) -> None:
        llm = _fake_llm(exc=RuntimeError("401 invalid api key"))
        with patch("deckdigest.summarizer._get_llm", return_value=llm):
            with pytest.raises(SummarizerError, match="openai API error: 401 invalid api key"):
                await summarize_slide("x", 3)

    async def test_configuration_checked_before_model_is_built(
        self, llm_configured, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("deckdigest.config.settings.llm_api_key", "")
        with patch("deckdigest.summarizer._get_llm") as get_llm:
            with pytest.raises(ConfigurationError, match="Missing LLM_API_KEY"):
                await summarize_slide("x", 0)
        get_llm.assert_not_called()

    async def test_ollama_needs_no_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("deckdigest.config.settings.llm_provider", "ollama")
        monkeypatch.setattr("deckdigest.config.settings.llm_api_key", "")
        llm = _fake_llm(_fake_ai_message("ok"))
        with patch("deckdigest.summarizer._get_llm", return_value=llm):
            assert await summarize_slide("x", 0) == "ok"
