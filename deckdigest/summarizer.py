"""Per-slide summarization through a LangChain chat model.

Providers
---------
``openai`` (default)
    Any OpenAI-compatible chat-completions endpoint.  The default base URL
    points at DashScope's compatible mode with ``qwen-flash``.  Configure via
    ``LLM_BASE_URL``, ``LLM_API_KEY`` and ``LLM_MODEL``.

``ollama``
    A local Ollama model.  Configure via ``OLLAMA_BASE_URL`` and
    ``OLLAMA_CHAT_MODEL``.

Timeouts and retries belong to the chat model client; a failed call is
raised as :class:`~deckdigest.errors.SummarizerError` and never retried here.
"""

from __future__ import annotations

import logging
from typing import Any

from deckdigest.config import settings
from deckdigest.errors import SummarizerError

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = (
    "You are a careful summarization assistant. "
    "Reply with one concise paragraph of at most 120 characters."
)
_EMPTY_SLIDE_PLACEHOLDER = "(This slide has no parseable text.)"


def _get_llm() -> Any:
    """Return a LangChain chat model from ``settings``."""
    if settings.llm_provider == "ollama":
        from langchain_ollama import ChatOllama

        return ChatOllama(
            model=settings.ollama_chat_model,
            base_url=settings.ollama_base_url,
            temperature=settings.llm_temperature,
        )

    from langchain_openai import ChatOpenAI

    return ChatOpenAI(
        model=settings.llm_model,
        base_url=settings.llm_base_url,
        api_key=settings.llm_api_key,
        temperature=settings.llm_temperature,
        timeout=settings.llm_timeout,
    )


def build_messages(text: str, slide_index: int) -> list[Any]:
    """Build the chat messages for slide *slide_index* (zero-based)."""
    from langchain_core.messages import HumanMessage, SystemMessage

    content = text[: settings.max_slide_chars] if text else _EMPTY_SLIDE_PLACEHOLDER
    return [
        SystemMessage(content=_SYSTEM_PROMPT),
        HumanMessage(content=f"Summarize slide {slide_index + 1}:\n{content}"),
    ]


async def summarize_slide(text: str, slide_index: int) -> str:
    """Return a short summary of one slide's text.

    Args:
        text: Cleaned slide text; longer than ``settings.max_slide_chars`` is
            truncated, empty is replaced by a placeholder.
        slide_index: Zero-based slide position, used in the prompt as a
            one-based slide number.

    Returns:
        The model's reply, stripped; ``""`` if the model sent no content.

    Raises:
        ConfigurationError: If the provider settings are missing or malformed.
        SummarizerError: If the provider call fails.
    """
    settings.validate_llm_settings()
    messages = build_messages(text, slide_index)
    llm = _get_llm()

    try:
        reply = await llm.ainvoke(messages)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Summarizer call failed for slide %d: %s", slide_index + 1, exc)
        raise SummarizerError(f"{settings.llm_provider} API error: {exc}") from exc

    content = getattr(reply, "content", reply)
    if not isinstance(content, str):
        return ""
    return content.strip()
