"""
Core document model for placeholder editing.

A .docx archive is represented as a set of XML parts (document body,
headers, footers). Each part is held as an ordered list of fragments,
which is the live editable state; everything else is kept for reference.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional


class PartRole(Enum):
    """Logical role of an XML part inside the archive."""
    DOCUMENT = "document"
    HEADER = "header"
    FOOTER = "footer"

    @property
    def base_name(self) -> str:
        return f"word/{self.value}"

    def local_name_for(self, suffix: object = "") -> str:
        """Build the archive-internal name, e.g. ``word/footer2.xml``."""
        return f"{self.base_name}{suffix}.xml"


@dataclass
class Fragment:
    """
    A tag marker and the text that follows it, up to the next ``<``.

    ``has_tag`` is False for a piece that had no ``>`` at all (leading text
    before the first element). ``original`` is captured once and is never
    reassigned.
    """

    tag: str = ""
    content: str = ""
    has_tag: bool = True
    original: Optional[str] = None

    def __post_init__(self):
        if self.original is None:
            self.original = self.content

    @property
    def is_modified(self) -> bool:
        return self.content != self.original


@dataclass
class Part:
    """One XML resource of the archive."""

    local_name: str
    role: PartRole
    content: str = ""
    text: str = ""
    fragments: List[Fragment] = field(default_factory=list)

    @classmethod
    def from_xml(cls, local_name: str, role: PartRole, xml: str) -> Part:
        """Tokenize raw XML into a new part."""
        from .fragment_tokenizer import strip_markup, tokenize_xml

        return cls(
            local_name=local_name,
            role=role,
            content=xml,
            text=strip_markup(xml),
            fragments=tokenize_xml(xml),
        )

    @property
    def current_text(self) -> str:
        """Plain text of the fragments as they are now."""
        return "".join(f.content for f in self.fragments if f.has_tag)

    def refresh_text(self) -> str:
        """Replace the load-time text preview with the current text."""
        self.text = self.current_text
        return self.text

    @property
    def is_modified(self) -> bool:
        return any(f.is_modified for f in self.fragments)


class PartRepository:
    """
    Holds the tokenized parts of one archive in three ordered collections.

    Parts never move between collections; order is discovery order.
    """

    def __init__(self):
        self._collections: Dict[PartRole, List[Part]] = {
            PartRole.DOCUMENT: [],
            PartRole.FOOTER: [],
            PartRole.HEADER: [],
        }

    @property
    def documents(self) -> List[Part]:
        return self._collections[PartRole.DOCUMENT]

    @property
    def footers(self) -> List[Part]:
        return self._collections[PartRole.FOOTER]

    @property
    def headers(self) -> List[Part]:
        return self._collections[PartRole.HEADER]

    def collection(self, role: PartRole) -> List[Part]:
        return self._collections[role]

    def add(self, role: PartRole, part: Part) -> None:
        if part.role is not role:
            raise ValueError(f"{part.local_name} is a {part.role.value} part, not a {role.value} part")
        self._collections[role].append(part)

    def all_parts(self) -> List[Part]:
        """Documents, then footers, then headers."""
        return self.documents + self.footers + self.headers

    def find(self, local_name: str) -> Optional[Part]:
        for part in self.all_parts():
            if part.local_name == local_name:
                return part
        return None

    def clear(self) -> None:
        for parts in self._collections.values():
            parts.clear()

    def is_empty(self) -> bool:
        return len(self) == 0

    def __len__(self) -> int:
        return sum(len(parts) for parts in self._collections.values())

    def __iter__(self) -> Iterator[Part]:
        return iter(self.all_parts())
