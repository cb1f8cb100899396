"""Markup stripping for free-form text.

Text is parsed with bleach's html5lib parser and only the character data of
the resulting tree is kept, so block-level tags leave nothing behind.
"""

from __future__ import annotations

from typing import Any

from bleach import html5lib_shim

_TEXT_TOKENS = frozenset({"Characters", "SpaceCharacters"})


def _text_nodes(value: str):
    parser = html5lib_shim.BleachHTMLParser(
        tags=None,
        strip=False,
        consume_entities=True,
        namespaceHTMLElements=False,
    )
    walker = html5lib_shim.getTreeWalker("etree")
    for token in walker(parser.parseFragment(value)):
        if token["type"] in _TEXT_TOKENS:
            yield token["data"]


def sanitize(value: Any) -> str:
    """Strip every tag, attribute and comment from *value*, keeping the text content.

    Non-string or empty input yields ``""``. Stray ``<``, ``>`` and ``&``
    characters come back entity-escaped, so the result is safe to render
    as HTML. ``sanitize(sanitize(x)) == sanitize(x)``.
    """
    if not isinstance(value, str) or not value:
        return ""
    return html5lib_shim.escape("".join(_text_nodes(value)))
