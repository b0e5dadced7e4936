"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from deckdigest.api import app

    uvicorn deckdigest.api:app --reload
"""

from deckdigest.api.app import app

__all__ = ["app"]
