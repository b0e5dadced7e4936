"""Server-side coordinator that turns slide texts into a summary event stream.

``SummaryOrchestrator.run`` summarizes slides strictly one after another and
writes one event per finished slide into an :class:`EventChannel`:

    summary(index=0) … summary(index=n-1)  done(total=n)

or, if the summarizer fails on slide ``k``:

    summary(index=0) … summary(index=k-1)  error(message)

The batch is fail-fast: the first failure ends the run.  Whatever the exit
path, the channel is closed exactly once.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

from deckdigest.config import settings
from deckdigest.errors import InputValidationError
from deckdigest.events.codec import encode
from deckdigest.events.models import SlideSummary, StreamDone, StreamError, SummaryEvent
from deckdigest.summarizer import summarize_slide

logger = logging.getLogger(__name__)

SummarizeFn = Callable[[str, int], Awaitable[str]]


def validate_page_texts(page_texts: Any, max_pages: int | None = None) -> list[str]:
    """Check a submitted slide list before any streaming starts.

    Raises:
        InputValidationError: If *page_texts* is not a list of strings, is
            empty, or holds more than *max_pages* entries.
    """
    limit = settings.max_slides if max_pages is None else max_pages
    if not isinstance(page_texts, list) or not page_texts:
        raise InputValidationError("No slides provided.")
    if not all(isinstance(text, str) for text in page_texts):
        raise InputValidationError("Every slide must be a string.")
    if len(page_texts) > limit:
        raise InputValidationError(
            f"Slides exceed {limit}. Please upload a smaller file."
        )
    return page_texts


# ---------------------------------------------------------------------------
# Channel
# ---------------------------------------------------------------------------

_CLOSED = None


class EventChannel:
    """Single-writer queue of encoded event frames.

    The writer calls :meth:`send` and finally :meth:`close`; the reader
    iterates :meth:`frames` until the channel is closed.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[Optional[str]] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, event: SummaryEvent) -> None:
        if self._closed:
            raise RuntimeError("Cannot send on a closed event channel.")
        await self._queue.put(encode(event))

    def close(self) -> None:
        if self._closed:
            raise RuntimeError("Event channel already closed.")
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    async def frames(self) -> AsyncIterator[str]:
        while True:
            frame = await self._queue.get()
            if frame is _CLOSED:
                return
            yield frame


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

class RunState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class SummaryOrchestrator:
    """Summarize an ordered list of slide texts into an event channel."""

    def __init__(
        self,
        summarize: SummarizeFn = summarize_slide,
        max_pages: int | None = None,
    ) -> None:
        self._summarize = summarize
        self._max_pages = max_pages
        self.state = RunState.IDLE

    async def run(self, page_texts: list[str], channel: EventChannel) -> None:
        """Summarize *page_texts* in order, emitting into *channel*.

        Validation errors are raised before the run starts and leave the
        channel untouched.  Every other failure becomes one terminal
        ``error`` event.

        Raises:
            InputValidationError: If *page_texts* is empty or too long.
        """
        validate_page_texts(page_texts, self._max_pages)

        total = len(page_texts)
        self.state = RunState.RUNNING
        logger.info("Summarizing %d slide(s)", total)
        try:
            for index, text in enumerate(page_texts):
                summary = await self._summarize(text, index)
                await channel.send(SlideSummary(index=index, summary=summary, total=total))
            await channel.send(StreamDone(total=total))
            self.state = RunState.COMPLETED
            logger.info("Summarized %d slide(s)", total)
        except Exception as exc:  # noqa: BLE001
            self.state = RunState.FAILED
            message = str(exc) or type(exc).__name__
            logger.warning("Summary run failed: %s", message)
            await channel.send(StreamError(message=message))
        finally:
            if self.state == RunState.RUNNING:
                # Cancelled mid-run (client went away).
                self.state = RunState.FAILED
            channel.close()


async def stream_summaries(
    page_texts: list[str],
    summarize: SummarizeFn = summarize_slide,
) -> AsyncIterator[str]:
    """Yield encoded event frames for one summary run.

    The run executes as a background task writing into an
    :class:`EventChannel`.  If the consumer stops iterating early (the HTTP
    client disconnected), the task is cancelled so no further slides are
    submitted to the summarizer.
    """
    orchestrator = SummaryOrchestrator(summarize=summarize)
    validate_page_texts(page_texts)

    channel = EventChannel()
    task = asyncio.create_task(orchestrator.run(page_texts, channel))
    try:
        async for frame in channel.frames():
            yield frame
    finally:
        if not task.done():
            task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise
            logger.info("Summary run cancelled after client disconnect")
