"""Tests for settings resolution and provider validation."""

from __future__ import annotations

import pytest

from deckdigest.config import Settings
from deckdigest.errors import ConfigurationError


def _openai(**overrides) -> Settings:
    values = {
        "llm_provider": "openai",
        "llm_api_key": "sk-abc123",
        "llm_base_url": "https://llm.example.com/v1",
    }
    values.update(overrides)
    return Settings(**values)


class TestValidateLlmSettings:
    def test_valid_openai_settings(self) -> None:
        _openai().validate_llm_settings()

    def test_missing_key(self) -> None:
        with pytest.raises(ConfigurationError, match="Missing LLM_API_KEY in environment."):
            _openai(llm_api_key="").validate_llm_settings()

    def test_non_ascii_key(self) -> None:
        with pytest.raises(ConfigurationError, match="non-ASCII"):
            _openai(llm_api_key="sk-密钥").validate_llm_settings()

    def test_missing_base_url(self) -> None:
        with pytest.raises(ConfigurationError, match="LLM_BASE_URL"):
            _openai(llm_base_url="").validate_llm_settings()

    def test_unknown_provider(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown LLM_PROVIDER"):
            _openai(llm_provider="anthropic").validate_llm_settings()

    def test_ollama_skips_key_checks(self) -> None:
        Settings(llm_provider="ollama", llm_api_key="").validate_llm_settings()


class TestEnvironment:
    def test_values_read_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LLM_MODEL", "qwen-plus")
        monkeypatch.setenv("MAX_SLIDES", "20")
        monkeypatch.setenv("DECKDIGEST_API_URL", "http://summaries.internal:9000")
        s = Settings()
        assert s.llm_model == "qwen-plus"
        assert s.max_slides == 20
        assert s.api_base_url == "http://summaries.internal:9000"

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("LLM_PROVIDER", "LLM_MODEL", "MAX_SLIDES", "MAX_SLIDE_CHARS", "LLM_TEMPERATURE"):
            monkeypatch.delenv(name, raising=False)
        s = Settings()
        assert s.llm_provider == "openai"
        assert s.llm_model == "qwen-flash"
        assert s.max_slides == 50
        assert s.max_slide_chars == 8000
        assert s.llm_temperature == 0.2
