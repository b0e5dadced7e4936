"""Line-oriented framing for the summary event stream.

Wire format
-----------
Each event is one block terminated by a blank line::

    event: summary
    data: {"index": 0, "summary": "...", "total": 12}

The ``event:`` line names the event; one or more ``data:`` lines carry a
single JSON object, concatenated in order when split over several lines.

Decoding is incremental: bytes arrive in arbitrary chunks, so complete
blocks are decoded as soon as their terminator is seen and the remainder is
buffered.  A malformed block is dropped without stopping the stream, and a
partial block left over at end-of-stream is discarded.
"""

from __future__ import annotations

import codecs
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from deckdigest.events.models import SummaryEvent, event_from_payload

logger = logging.getLogger(__name__)

DEFAULT_EVENT_NAME = "message"
_BLOCK_TERMINATOR = "\n\n"


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def encode_event(name: str, payload: dict[str, Any]) -> str:
    """Encode *payload* as one ``event:``/``data:`` block."""
    data = json.dumps(payload, ensure_ascii=False)
    return f"event: {name}\ndata: {data}\n\n"


def encode(event: SummaryEvent) -> str:
    """Encode a typed :data:`SummaryEvent`."""
    return encode_event(event.name, event.payload())


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

@dataclass
class DecodedEvent:
    """A framed block whose data line parsed to a JSON object."""

    name: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_summary_event(self) -> SummaryEvent | None:
        return event_from_payload(self.name, self.data)


def parse_block(block: str) -> DecodedEvent | None:
    """Decode one block (without its terminator).

    Returns ``None`` when the block has no ``data:`` line or its data is not
    a JSON object.
    """
    name = DEFAULT_EVENT_NAME
    data_parts: list[str] = []
    for line in block.split("\n"):
        if line.startswith("event:"):
            name = line[len("event:"):].strip()
        elif line.startswith("data:"):
            data_parts.append(line[len("data:"):].strip())

    if not data_parts:
        return None

    raw = "".join(data_parts)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.debug("Dropping malformed %r event block: %.80r", name, raw)
        return None
    if not isinstance(data, dict):
        logger.debug("Dropping %r event block with non-object data", name)
        return None
    return DecodedEvent(name=name, data=data)


class EventDecoder:
    """Incremental decoder for a chunked event stream.

    Feed it bytes (or already-decoded text) as they arrive; each call returns
    the events completed by that chunk.
    """

    def __init__(self) -> None:
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Text received but not yet terminated by a blank line."""
        return self._buffer

    def feed(self, chunk: bytes | str) -> list[DecodedEvent]:
        if isinstance(chunk, bytes):
            chunk = self._utf8.decode(chunk)
        self._buffer = (self._buffer + chunk).replace("\r\n", "\n")

        parts = self._buffer.split(_BLOCK_TERMINATOR)
        self._buffer = parts.pop()

        events: list[DecodedEvent] = []
        for part in parts:
            if not part.strip():
                continue
            decoded = parse_block(part)
            if decoded is not None:
                events.append(decoded)
        return events

    def close(self) -> list[DecodedEvent]:
        """Signal end-of-stream; an unterminated trailing block is discarded."""
        self._utf8.decode(b"", final=True)
        if self._buffer.strip():
            logger.debug("Discarding %d byte(s) of unterminated event data", len(self._buffer))
        self._buffer = ""
        return []


def decode_stream(chunks: Iterable[bytes | str]) -> list[DecodedEvent]:
    """Decode a complete stream given as an iterable of chunks."""
    decoder = EventDecoder()
    events: list[DecodedEvent] = []
    for chunk in chunks:
        events.extend(decoder.feed(chunk))
    events.extend(decoder.close())
    return events
