"""Centralised settings for the Deck Digest service and client.

Every setting has a default and can be overridden by an environment
variable.  A `.env` file at the project root is read on import and never
wins over variables that are already set.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from deckdigest.errors import ConfigurationError

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_DEFAULT_LLM_BASE_URL = "https://dashscope-intl.aliyuncs.com/compatible-mode/v1"


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Summarization model
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "openai")
    )
    llm_base_url: str = field(
        default_factory=lambda: os.environ.get("LLM_BASE_URL", _DEFAULT_LLM_BASE_URL)
    )
    llm_api_key: str = field(
        default_factory=lambda: os.environ.get("LLM_API_KEY", "")
    )
    llm_model: str = field(
        default_factory=lambda: os.environ.get("LLM_MODEL", "qwen-flash")
    )
    ollama_base_url: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "ministral-3:8b")
    )
    llm_temperature: float = field(
        default_factory=lambda: float(os.environ.get("LLM_TEMPERATURE", "0.2"))
    )
    llm_timeout: float = field(
        default_factory=lambda: float(os.environ.get("LLM_TIMEOUT", "60.0"))
    )

    # ------------------------------------------------------------------
    # Input limits
    # ------------------------------------------------------------------
    max_slides: int = field(
        default_factory=lambda: int(os.environ.get("MAX_SLIDES", "50"))
    )
    max_slide_chars: int = field(
        default_factory=lambda: int(os.environ.get("MAX_SLIDE_CHARS", "8000"))
    )

    # ------------------------------------------------------------------
    # Client
    # ------------------------------------------------------------------
    api_base_url: str = field(
        default_factory=lambda: os.environ.get("DECKDIGEST_API_URL", "http://localhost:8000")
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )

    def validate_llm_settings(self) -> None:
        """Check that the summarization backend can be reached with these settings.

        The OpenAI-compatible provider needs an API key made of ASCII
        characters only; a pasted placeholder or a key with smart quotes is
        rejected here rather than failing deep inside the HTTP client.

        Raises:
            ConfigurationError: If the key is missing or malformed, or the
                provider name is unknown.
        """
        if self.llm_provider == "ollama":
            return
        if self.llm_provider != "openai":
            raise ConfigurationError(
                f"Unknown LLM_PROVIDER {self.llm_provider!r}. Use: openai | ollama"
            )
        if not self.llm_api_key:
            raise ConfigurationError("Missing LLM_API_KEY in environment.")
        if not self.llm_api_key.isascii():
            raise ConfigurationError(
                "LLM_API_KEY contains non-ASCII characters. Please paste the real key."
            )
        if not self.llm_base_url:
            raise ConfigurationError("Missing LLM_BASE_URL in environment.")


# Module-level singleton: import this everywhere:
#   from deckdigest.config import settings
settings = Settings()
