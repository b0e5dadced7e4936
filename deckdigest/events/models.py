"""Typed events carried by the summary stream."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Union


@dataclass(frozen=True)
class SlideSummary:
    """One finished slide summary; ``index`` is zero-based."""

    index: int
    summary: str
    total: int

    name: ClassVar[str] = "summary"

    def payload(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class StreamError:
    """Terminal failure; no further events follow."""

    message: str

    name: ClassVar[str] = "error"

    def payload(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class StreamDone:
    """Terminal success after ``total`` summaries."""

    total: int

    name: ClassVar[str] = "done"

    def payload(self) -> dict[str, Any]:
        return asdict(self)


SummaryEvent = Union[SlideSummary, StreamError, StreamDone]


def event_from_payload(name: str, data: dict[str, Any]) -> SummaryEvent | None:
    """Build the typed event for *name* from a decoded JSON object.

    Returns ``None`` for unknown event names or payloads missing a required
    field.  ``total`` is optional on ``summary`` events and defaults to ``0``
    (unknown).
    """
    if name == SlideSummary.name:
        index = data.get("index")
        if not isinstance(index, int) or isinstance(index, bool):
            return None
        total = data.get("total")
        return SlideSummary(
            index=index,
            summary=str(data.get("summary") or ""),
            total=total if isinstance(total, int) else 0,
        )
    if name == StreamError.name:
        return StreamError(message=str(data.get("message") or ""))
    if name == StreamDone.name:
        total = data.get("total")
        return StreamDone(total=total if isinstance(total, int) else 0)
    return None
