"""Deck Digest: per-slide summaries of .pptx decks, streamed as they finish."""

__version__ = "0.1.0"
