"""Logging configuration for the API process and the CLI.

Modules log through ``logging.getLogger(__name__)``; this module only
installs the root handler once.
"""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Install a single stderr handler on the root logger.

    Calling this more than once only adjusts the level, so the FastAPI
    lifespan and the CLI can both call it.
    """
    root = logging.getLogger()
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)
    # httpx logs every request at INFO; never let it go below WARNING.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

    if any(getattr(h, "_deckdigest", False) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._deckdigest = True  # type: ignore[attr-defined]
    root.addHandler(handler)
