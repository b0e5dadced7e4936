"""Shared fixtures: in-memory .pptx decks and summarizer settings."""

from __future__ import annotations

import io
import logging
import zipfile
from typing import Callable
from xml.sax.saxutils import escape

import pytest

_SLIDE_TEMPLATE = """\
<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<p:sld xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main"
       xmlns:p="http://schemas.openxmlformats.org/presentationml/2006/main">
  <p:cSld>
    <p:spTree>
      <p:sp>
        <p:txBody>
          <a:p>{runs}</a:p>
        </p:txBody>
      </p:sp>
    </p:spTree>
  </p:cSld>
</p:sld>
"""


def slide_xml(*runs: str) -> str:
    """Return slide markup with one ``a:r``/``a:t`` run per argument."""
    body = "".join(
        f'<a:r><a:rPr lang="en-US"/><a:t>{escape(run)}</a:t></a:r>' for run in runs
    )
    return _SLIDE_TEMPLATE.format(runs=body)


def build_pptx(entries: dict[str, str | bytes]) -> bytes:
    """Zip *entries* (archive name → content) into .pptx-shaped bytes."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("[Content_Types].xml", "<Types/>")
        archive.writestr("ppt/presentation.xml", "<presentation/>")
        for name, content in entries.items():
            archive.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture()
def slide_markup() -> Callable[..., str]:
    return slide_xml


@pytest.fixture()
def pptx_builder() -> Callable[[dict[str, str | bytes]], bytes]:
    return build_pptx


@pytest.fixture()
def make_deck() -> Callable[..., bytes]:
    """Factory building a deck whose slide N has the text ``texts[N-1]``."""

    def _make(*texts: str) -> bytes:
        return build_pptx(
            {f"ppt/slides/slide{i}.xml": slide_xml(text) for i, text in enumerate(texts, start=1)}
        )

    return _make


@pytest.fixture()
def llm_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    """Valid OpenAI-compatible settings so configuration checks pass."""
    monkeypatch.setattr("deckdigest.config.settings.llm_provider", "openai")
    monkeypatch.setattr("deckdigest.config.settings.llm_api_key", "sk-test-key")
    monkeypatch.setattr("deckdigest.config.settings.max_slides", 50)


@pytest.fixture(autouse=True)
def _isolated_root_logger():
    """Drop the handler ``configure_logging`` installs, after each test.

    The handler is bound to the ``sys.stderr`` of the moment, which for CLI
    tests is a CliRunner buffer that is closed once ``invoke`` returns.
    """
    root = logging.getLogger()
    httpx_logger = logging.getLogger("httpx")
    level, httpx_level = root.level, httpx_logger.level
    yield
    for handler in list(root.handlers):
        if getattr(handler, "_deckdigest", False):
            root.removeHandler(handler)
    root.setLevel(level)
    httpx_logger.setLevel(httpx_level)
