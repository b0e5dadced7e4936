"""Events package: typed summary events and their stream framing."""

from deckdigest.events.codec import (
    DecodedEvent,
    EventDecoder,
    decode_stream,
    encode,
    encode_event,
)
from deckdigest.events.models import SlideSummary, StreamDone, StreamError, SummaryEvent

__all__ = [
    "DecodedEvent",
    "EventDecoder",
    "decode_stream",
    "encode",
    "encode_event",
    "SlideSummary",
    "StreamDone",
    "StreamError",
    "SummaryEvent",
]
