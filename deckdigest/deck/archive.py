"""Access to the slide entries of a ``.pptx`` container."""

from __future__ import annotations

import io
import re
import zipfile
from typing import Iterable

from deckdigest.errors import ArchiveFormatError

SLIDE_PREFIX = "ppt/slides/slide"
SLIDE_SUFFIX = ".xml"

_SLIDE_NUMBER_RE = re.compile(r"slide(\d+)\.xml$")


def slide_number(name: str) -> int:
    """Return the trailing slide number of *name*, or ``0`` if it has none."""
    match = _SLIDE_NUMBER_RE.search(name)
    if match:
        return int(match.group(1))
    return 0


def select_slide_entries(names: Iterable[str]) -> list[str]:
    """Return the slide-content entry names in presentation order.

    ``slide10.xml`` sorts after ``slide9.xml``: ordering is by the integer in
    the file name, not by string comparison.  The sort is stable, so entries
    sharing a number keep their archive order.
    """
    slides = [
        name
        for name in names
        if name.startswith(SLIDE_PREFIX) and name.endswith(SLIDE_SUFFIX)
    ]
    return sorted(slides, key=slide_number)


def open_archive(data: bytes) -> zipfile.ZipFile:
    """Open *data* as a zip container.

    Raises:
        ArchiveFormatError: If *data* is not a valid zip file.
    """
    try:
        return zipfile.ZipFile(io.BytesIO(data))
    except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError) as exc:
        raise ArchiveFormatError(f"Not a valid presentation archive: {exc}") from exc
