"""Deck package: slide-text extraction from ``.pptx`` archives."""

from deckdigest.deck.archive import select_slide_entries, slide_number
from deckdigest.deck.extractor import extract_page_texts, extract_page_texts_from_path
from deckdigest.deck.markup import collect_texts, parse_markup

__all__ = [
    "extract_page_texts",
    "extract_page_texts_from_path",
    "select_slide_entries",
    "slide_number",
    "parse_markup",
    "collect_texts",
]
