"""Client side of the summary stream.

``SummaryConsumer.submit`` drives one submission end to end:

    validate file → extract slides locally → POST /summaries → read events

Results are recorded per slide index as ``summary`` events arrive, so the
caller can render progress while the stream is still open.  ``cancel()``
stops the session at its next suspension point; a new ``submit`` cancels the
previous one first, so at most one session is ever active.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

import httpx

from deckdigest.client.cancellation import CancellationToken
from deckdigest.config import settings
from deckdigest.deck import extract_page_texts
from deckdigest.errors import (
    InputValidationError,
    SummaryCancelled,
    SummaryStreamError,
)
from deckdigest.events.codec import EventDecoder
from deckdigest.events.models import SlideSummary, StreamDone, StreamError, SummaryEvent

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "cancelled"
_GENERIC_FAILURE = "Processing failed, please try again later."


class SessionPhase(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class SessionState:
    """Progress of one submission.

    ``results`` is keyed by slide index and may be sparse while the stream
    is open; use :meth:`ordered_results` for a positional view.
    """

    results: dict[int, str] = field(default_factory=dict)
    completed_count: int = 0
    expected_total: Optional[int] = None
    phase: SessionPhase = SessionPhase.IDLE
    error: Optional[str] = None

    @property
    def progress(self) -> float:
        """Fraction of slides summarized, ``0.0`` while the total is unknown."""
        if not self.expected_total:
            return 0.0
        return min(self.completed_count / self.expected_total, 1.0)

    def ordered_results(self) -> list[Optional[str]]:
        """Summaries by position, ``None`` where a slide has no summary yet."""
        size = self.expected_total
        if size is None:
            size = max(self.results, default=-1) + 1
        return [self.results.get(i) for i in range(size)]


UpdateCallback = Callable[[SessionState], Any]


def _error_message(response: httpx.Response) -> str:
    """Pull the ``error`` (or FastAPI ``detail``) message out of an error body."""
    try:
        data = response.json()
    except ValueError:
        return _GENERIC_FAILURE
    if isinstance(data, dict):
        message = data.get("error") or data.get("detail")
        if isinstance(message, str) and message:
            return message
    return _GENERIC_FAILURE


async def _next_chunk(chunks: Any) -> Optional[bytes]:
    try:
        return await chunks.__anext__()
    except StopAsyncIteration:
        return None


class SummaryConsumer:
    """Submit a deck to the summary API and follow its event stream."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        max_pages: int | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        on_update: UpdateCallback | None = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.max_pages = settings.max_slides if max_pages is None else max_pages
        self._timeout = httpx.Timeout(
            settings.request_timeout if timeout is None else timeout,
            read=None,
        )
        self._transport = transport
        self._on_update = on_update

        self.state = SessionState()
        self._token: CancellationToken | None = None
        self._active: asyncio.Task[SessionState] | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def submit(self, file_bytes: bytes, filename: str) -> SessionState:
        """Summarize the deck in *file_bytes* and return the final state.

        Any session still running is cancelled and awaited first.

        Returns:
            The session state; ``phase`` is ``DONE`` or ``CANCELLED``.

        Raises:
            InputValidationError: Wrong extension or slide count; raised
                before any network I/O.
            ArchiveFormatError: The file is not a readable archive.
            SummaryStreamError: The server rejected the request, reported an
                ``error`` event, or the stream broke off.
        """
        previous = self._active
        if previous is not None and not previous.done():
            self.cancel()
            await asyncio.wait({previous})

        token = CancellationToken()
        state = SessionState()
        self._token = token
        self.state = state

        task = asyncio.create_task(self._run_session(file_bytes, filename, token, state))
        self._active = task
        return await task

    async def submit_path(self, path: str | Path) -> SessionState:
        """Read *path* from disk and :meth:`submit` it."""
        deck_path = Path(path)
        if not deck_path.exists():
            raise InputValidationError(f"File not found: {deck_path}")
        return await self.submit(deck_path.read_bytes(), deck_path.name)

    def cancel(self) -> None:
        """Signal the in-flight session, if any, to stop."""
        if self._token is not None:
            self._token.cancel()

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def _notify(self, state: SessionState) -> None:
        if self._on_update is not None:
            self._on_update(state)

    def _prepare(self, file_bytes: bytes, filename: str) -> list[str]:
        """Validate and extract the deck locally; runs in a worker thread."""
        if not filename:
            raise InputValidationError("Please choose a .pptx file first.")
        if not filename.lower().endswith(".pptx"):
            raise InputValidationError("Only .pptx files are supported.")

        slides = extract_page_texts(file_bytes)
        if not slides:
            raise InputValidationError("No slide content found in the file.")
        if len(slides) > self.max_pages:
            raise InputValidationError(
                f"More than {self.max_pages} slides. Please upload a smaller file."
            )
        return slides

    async def _run_session(
        self,
        file_bytes: bytes,
        filename: str,
        token: CancellationToken,
        state: SessionState,
    ) -> SessionState:
        try:
            slides = await token.guard(
                asyncio.to_thread(self._prepare, file_bytes, filename)
            )
            state.phase = SessionPhase.RUNNING
            self._notify(state)
            await self._stream(slides, token, state)
            return state

        except SummaryCancelled:
            return self._mark_cancelled(state)

        except asyncio.CancelledError:
            self._mark_cancelled(state)
            raise

        except httpx.HTTPError as exc:
            if token.cancelled:
                return self._mark_cancelled(state)
            self._mark_failed(state, f"Request failed: {exc}")
            raise SummaryStreamError(state.error) from exc

        except Exception as exc:
            if state.phase != SessionPhase.FAILED:
                self._mark_failed(state, str(exc) or _GENERIC_FAILURE)
            raise

    async def _stream(
        self,
        slides: list[str],
        token: CancellationToken,
        state: SessionState,
    ) -> None:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            request = client.build_request("POST", "/summaries", json={"slides": slides})
            response = await token.guard(client.send(request, stream=True))
            try:
                if response.is_error:
                    await token.guard(response.aread())
                    message = _error_message(response)
                    self._mark_failed(state, message)
                    raise SummaryStreamError(message)

                decoder = EventDecoder()
                chunks = response.aiter_bytes()
                while True:
                    chunk = await token.guard(_next_chunk(chunks))
                    if chunk is None:
                        break
                    for decoded in decoder.feed(chunk):
                        event = decoded.to_summary_event()
                        if event is not None and self._apply(event, state):
                            return
                decoder.close()

                self._mark_failed(state, "Stream ended before completion.")
                raise SummaryStreamError(state.error)
            finally:
                await response.aclose()

    def _apply(self, event: SummaryEvent, state: SessionState) -> bool:
        """Record *event* in *state*; return ``True`` once the stream is done.

        Raises:
            SummaryStreamError: On an ``error`` event.
        """
        if isinstance(event, SlideSummary):
            if event.index not in state.results:
                state.completed_count += 1
            state.results[event.index] = event.summary
            if event.total:
                state.expected_total = event.total
            self._notify(state)
            return False

        if isinstance(event, StreamDone):
            if event.total:
                state.expected_total = event.total
            state.phase = SessionPhase.DONE
            self._notify(state)
            logger.info("Summary stream completed: %d slide(s)", state.completed_count)
            return True

        if isinstance(event, StreamError):
            message = event.message or _GENERIC_FAILURE
            self._mark_failed(state, message)
            raise SummaryStreamError(message)

        return False

    def _mark_cancelled(self, state: SessionState) -> SessionState:
        state.phase = SessionPhase.CANCELLED
        state.error = CANCELLED_MESSAGE
        self._notify(state)
        logger.info("Summary session cancelled after %d slide(s)", state.completed_count)
        return state

    def _mark_failed(self, state: SessionState, message: str | None) -> None:
        state.phase = SessionPhase.FAILED
        state.error = message
        self._notify(state)
