"""Slide summary endpoints.

Routes
------
POST /summaries            Body: {"slides": ["...", ...]}    → SSE summary stream
POST /summaries/extract    Multipart ``.pptx`` upload        → {"slides": [...], "count": n}

SSE event format
----------------
Each event is a named block with one JSON ``data:`` line::

    event: summary
    data: {"index": 0, "summary": "...", "total": 3}

    event: done
    data: {"total": 3}

    event: error
    data: {"message": "..."}

Validation and configuration failures are reported before the stream opens
as a plain JSON ``{"error": "..."}`` body with a 4xx/5xx status.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, UploadFile
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from deckdigest.config import settings
from deckdigest.deck import extract_page_texts
from deckdigest.errors import InputValidationError
from deckdigest.orchestrator import stream_summaries, validate_page_texts
from deckdigest.summarizer import summarize_slide

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class SummariesRequest(BaseModel):
    # Shape is checked by validate_page_texts so every rejection is a 400.
    slides: Any = None


class ExtractResponse(BaseModel):
    slides: list[str]
    count: int


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("")
async def summarize_slides(body: SummariesRequest) -> StreamingResponse:
    """Summarize each slide in order and stream the results as SSE.

    - ``summary``: one per slide, in ascending ``index`` order.
    - ``done``: after the last slide.
    - ``error``: the first summarizer failure; ends the stream.
    """
    slides = validate_page_texts(body.slides)
    settings.validate_llm_settings()

    return StreamingResponse(
        stream_summaries(slides, summarize=summarize_slide),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache, no-transform",
            "X-Accel-Buffering": "no",   # disable nginx proxy buffering
        },
    )


@router.post("/extract", response_model=ExtractResponse)
async def extract_slides(file: UploadFile) -> dict[str, Any]:
    """Upload a ``.pptx`` file and return the text of each slide."""
    if not file.filename or not file.filename.lower().endswith(".pptx"):
        raise InputValidationError("Only .pptx files are supported.")

    content = await file.read()
    slides = extract_page_texts(content)
    return {"slides": slides, "count": len(slides)}
