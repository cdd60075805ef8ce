"""
Recompilation of a part's fragments back into XML text.
"""

from __future__ import annotations

from typing import Iterable

from ..core.document_model import Fragment, Part


def compile_fragments(fragments: Iterable[Fragment], preserve_leading_text: bool = False) -> str:
    """
    Concatenate ``<tag>content`` for every tagged fragment.

    Untagged fragments are dropped unless ``preserve_leading_text`` is set,
    in which case their content is emitted verbatim.
    """
    output = []
    for fragment in fragments:
        if fragment.has_tag:
            output.append(f"<{fragment.tag}>{fragment.content}")
        elif preserve_leading_text:
            output.append(fragment.content)
    return "".join(output)


class FragmentCompiler:
    """Turns parts back into encoded XML ready for the archive."""

    def __init__(self, encoding: str = "utf-8", preserve_leading_text: bool = False):
        self.encoding = encoding
        self.preserve_leading_text = preserve_leading_text

    def compile(self, part: Part) -> str:
        return compile_fragments(part.fragments, self.preserve_leading_text)

    def compile_bytes(self, part: Part) -> bytes:
        return self.compile(part).encode(self.encoding)
