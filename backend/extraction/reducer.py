"""Rendered markup → visible text."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

from backend.extraction.models import ReducedText

# Elements whose contents never render as text
_INVISIBLE_TAGS = ["script", "style", "noscript", "template", "svg", "iframe", "head"]

_WHITESPACE = re.compile(r"\s+")


def reduce_html(html: str) -> ReducedText:
    """Return the visible text of *html*'s ``<body>``.

    ``html.parser`` is lenient: unclosed or stray tags yield best-effort
    text instead of an exception.  When the document has no ``<body>`` the
    whole tree is used.  Runs of whitespace collapse to a single space so
    the output is stable for identical markup.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    for tag in soup(_INVISIBLE_TAGS):
        tag.decompose()

    container = soup.body or soup
    text = container.get_text(separator=" ", strip=True)
    return ReducedText(text=_WHITESPACE.sub(" ", text).strip())
