"""
Splitting of raw part XML into fragments, and plain-text extraction.

Neither function parses XML: both work on the ``<`` and ``>`` characters
only, which is enough to keep markup intact while editing text runs.
"""

from __future__ import annotations

from typing import List

from .document_model import Fragment


def tokenize_xml(xml: str) -> List[Fragment]:
    """
    Split raw XML on every ``<`` into an ordered list of fragments.

    For each piece the text before the first ``>`` is the tag and the rest
    is the content. A piece without ``>`` (the leading text before the
    first element, possibly empty) becomes an untagged fragment.
    """
    if not xml:
        return []

    fragments = []
    for piece in xml.split("<"):
        tag, sep, content = piece.partition(">")
        if sep:
            fragments.append(Fragment(tag=tag, content=content))
        else:
            fragments.append(Fragment(tag="", content=piece, has_tag=False))
    return fragments


def strip_markup(xml: str) -> str:
    """Return the text found after each ``>``, with all markup dropped."""
    output = []
    for piece in xml.split("<"):
        pos = piece.find(">")
        if pos != -1:
            output.append(piece[pos + 1:])
    return "".join(output)
