"""Slide markup parsing and text harvesting.

A slide entry is parsed into a plain Python tree made of four shapes:

    None | str | list | dict

Element names lose their namespace (``{uri}t`` and ``a:t`` both become
``t``) and attributes are dropped.  A text-only element becomes a ``str``;
an element with children becomes a ``list`` of single-key ``dict``s, one per
child in document order, led by ``{"#text": ...}`` when the element also
carries text of its own.  Producers disagree on namespace prefixes, so
matching on local names keeps the text harvest independent of them.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Union

# None | str | list[Tree] | dict[str, Tree]
Tree = Union[None, str, list, dict]

TEXT_FIELD = "t"
TEXT_KEY = "#text"

_WHITESPACE_RE = re.compile(r"\s+")


def local_name(name: str) -> str:
    """Strip a ``{namespace}`` or ``prefix:`` qualifier from *name*."""
    if name.startswith("{"):
        name = name.rsplit("}", 1)[-1]
    return name.rsplit(":", 1)[-1]


def _element_to_tree(elem: ET.Element) -> Tree:
    children = [child for child in elem if isinstance(child.tag, str)]
    if not children:
        return elem.text or ""

    # One single-key dict per child, in document order
    node: list[dict[str, Tree]] = []
    if elem.text and elem.text.strip():
        node.append({TEXT_KEY: elem.text})
    for child in children:
        node.append({local_name(child.tag): _element_to_tree(child)})
    return node


def parse_markup(xml: bytes | str) -> dict[str, Tree]:
    """Parse one slide entry into a namespace-free tree.

    Raises:
        xml.etree.ElementTree.ParseError: If *xml* is not well-formed.
    """
    root = ET.fromstring(xml)
    return {local_name(root.tag): _element_to_tree(root)}


def collect_texts(node: Tree, out: list[str]) -> None:
    """Append every text-run value found under *node* to *out*, depth first.

    Only values held by a ``t`` field are text runs; other strings (numbers,
    ids, stray element text) are structure and are skipped.
    """
    if node is None or isinstance(node, str):
        return
    if isinstance(node, list):
        for item in node:
            collect_texts(item, out)
        return
    if isinstance(node, dict):
        for key, value in node.items():
            if key == TEXT_FIELD and isinstance(value, str):
                out.append(value)
            elif key == TEXT_FIELD and isinstance(value, list):
                for item in value:
                    if isinstance(item, str):
                        out.append(item)
                    else:
                        collect_texts(item, out)
            else:
                collect_texts(value, out)


def clean_text(fragments: list[str]) -> str:
    """Join harvested fragments into one single-spaced, trimmed string."""
    return _WHITESPACE_RE.sub(" ", " ".join(fragments)).strip()


def page_text(xml: bytes | str) -> str:
    """Parse *xml* and return its cleaned page text."""
    texts: list[str] = []
    collect_texts(parse_markup(xml), texts)
    return clean_text(texts)
