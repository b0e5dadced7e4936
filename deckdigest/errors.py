"""Exception hierarchy shared by the extractor, the stream and the client.

The API layer maps these onto HTTP responses or terminal ``error`` events;
the CLI maps them onto exit codes.
"""

from __future__ import annotations


class DeckDigestError(Exception):
    """Base class for every error raised on purpose by this package."""


class InputValidationError(DeckDigestError):
    """The caller's input (file type, slide count, payload shape) is unusable."""


class ArchiveFormatError(DeckDigestError):
    """The uploaded bytes are not a readable presentation container."""


class ConfigurationError(DeckDigestError):
    """Required settings for the summarization backend are missing or malformed."""


class SummarizerError(DeckDigestError):
    """The summarization provider failed or returned an unusable response."""


class SummaryStreamError(DeckDigestError):
    """The summary stream reported a failure or ended prematurely."""


class SummaryCancelled(DeckDigestError):
    """The local caller cancelled the in-flight summary session."""


__all__ = [
    "DeckDigestError",
    "InputValidationError",
    "ArchiveFormatError",
    "ConfigurationError",
    "SummarizerError",
    "SummaryStreamError",
    "SummaryCancelled",
]
