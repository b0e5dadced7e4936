"""Slide-text extraction: turns ``.pptx`` bytes into one string per slide."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
import zipfile
import zlib
from pathlib import Path

from deckdigest.deck.archive import open_archive, select_slide_entries
from deckdigest.deck.markup import page_text

logger = logging.getLogger(__name__)


def _read_page(archive: zipfile.ZipFile, name: str) -> str:
    """Return the cleaned text of entry *name*, or ``""`` if it is unreadable."""
    try:
        xml = archive.read(name)
    except (
        KeyError,
        zipfile.BadZipFile,
        zlib.error,
        OSError,
        RuntimeError,
        NotImplementedError,
    ) as exc:
        logger.warning("Could not read slide entry %s: %s", name, exc)
        return ""
    if not xml:
        return ""
    try:
        return page_text(xml)
    except ET.ParseError as exc:
        logger.warning("Could not parse slide entry %s: %s", name, exc)
        return ""


def extract_page_texts(data: bytes) -> list[str]:
    """Extract the text of every slide in a presentation archive.

    The result has one entry per ``ppt/slides/slideN.xml`` entry, in
    ascending ``N`` order.  A slide that cannot be read or parsed contributes
    an empty string rather than failing the whole deck.

    Args:
        data: Raw bytes of the ``.pptx`` file.

    Returns:
        The cleaned text of each slide, possibly empty strings.

    Raises:
        ArchiveFormatError: If *data* is not a zip container.
    """
    with open_archive(data) as archive:
        names = select_slide_entries(archive.namelist())
        pages = [_read_page(archive, name) for name in names]

    logger.debug("Extracted %d slide(s)", len(pages))
    return pages


def extract_page_texts_from_path(path: str | Path) -> list[str]:
    """Read *path* from disk and return :func:`extract_page_texts` of it.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ArchiveFormatError: If the file is not a zip container.
    """
    deck_path = Path(path)
    if not deck_path.exists():
        raise FileNotFoundError(f"Presentation not found: {deck_path}")
    return extract_page_texts(deck_path.read_bytes())
