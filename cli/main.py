"""Deck Digest CLI: entry-point for extraction and streamed summaries.

Usage:
    python cli/main.py --help

Commands:
    extract    → print the text of every slide in a .pptx file
    summarize  → stream one summary per slide from the API (Ctrl-C cancels)
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from deckdigest.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import signal
from typing import Optional

import typer

from deckdigest.client.consumer import SessionPhase, SessionState, SummaryConsumer
from deckdigest.config import settings
from deckdigest.deck import extract_page_texts_from_path
from deckdigest.errors import DeckDigestError
from deckdigest.logging_setup import configure_logging

app = typer.Typer(
    name="deckdigest",
    help="Deck Digest CLI.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Summarize presentation decks slide by slide."""
    configure_logging("DEBUG" if verbose else "WARNING")


# ---------------------------------------------------------------------------
# extract
# ---------------------------------------------------------------------------
@app.command("extract")
def extract(
    path: Path = typer.Argument(..., help="Path to a .pptx file."),
) -> None:
    """Print the extracted text of each slide."""
    try:
        slides = extract_page_texts_from_path(path)
    except (FileNotFoundError, DeckDigestError) as exc:
        typer.echo(f"[extract] Error: {exc}")
        raise typer.Exit(1)

    if not slides:
        typer.echo("[extract] No slides found.")
        return
    typer.echo(f"[extract] {len(slides)} slide(s)")
    for index, text in enumerate(slides, start=1):
        typer.echo(f"\n--- Slide {index} ---")
        typer.echo(text or "(no text)")


# ---------------------------------------------------------------------------
# summarize
# ---------------------------------------------------------------------------
class _ProgressPrinter:
    """Print each summary once, as soon as it arrives."""

    def __init__(self) -> None:
        self._printed: set[int] = set()

    def __call__(self, state: SessionState) -> None:
        for index in sorted(state.results):
            if index in self._printed:
                continue
            self._printed.add(index)
            total = state.expected_total or "?"
            typer.echo(f"[{state.completed_count}/{total}] Slide {index + 1}: {state.results[index]}")


async def _summarize(path: Path, server: str) -> SessionState:
    consumer = SummaryConsumer(server, on_update=_ProgressPrinter())

    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, consumer.cancel)
    except (NotImplementedError, RuntimeError):
        # Windows event loops: Ctrl-C falls back to KeyboardInterrupt.
        pass

    try:
        return await consumer.submit_path(path)
    finally:
        try:
            loop.remove_signal_handler(signal.SIGINT)
        except (NotImplementedError, RuntimeError):
            pass


@app.command("summarize")
def summarize(
    path: Path = typer.Argument(..., help="Path to a .pptx file."),
    server: Optional[str] = typer.Option(
        None, "--server", help="API base URL (defaults to DECKDIGEST_API_URL)."
    ),
) -> None:
    """Stream one short summary per slide from the Deck Digest API."""
    base_url = server or settings.api_base_url
    typer.echo(f"[summarize] {path.name} → {base_url}")

    try:
        state = asyncio.run(_summarize(path, base_url))
    except DeckDigestError as exc:
        typer.echo(f"[summarize] Error: {exc}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        typer.echo("[summarize] cancelled")
        raise typer.Exit(130)

    if state.phase == SessionPhase.CANCELLED:
        typer.echo(f"[summarize] cancelled after {state.completed_count} slide(s)")
        raise typer.Exit(130)
    typer.echo(f"[summarize] Done: {state.completed_count} slide(s) summarized.")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
