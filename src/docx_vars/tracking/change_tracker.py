"""
Change tracking for edited parts.

Every fragment keeps the content it was loaded with, so the edits of a
session can be reported or rolled back without re-reading the archive.
"""

from __future__ import annotations

import difflib
from typing import Iterable, List

from pydantic import BaseModel

from ..core.document_model import Part


class ChangeRecord(BaseModel):
    """A single fragment whose content differs from the loaded content."""

    local_name: str
    index: int
    tag: str = ""
    before: str = ""
    after: str = ""

    def inline_diff(self) -> str:
        """Render the change as ``[-removed-]{+added+}`` markers."""
        matcher = difflib.SequenceMatcher(None, self.before, self.after, autojunk=False)
        output = []
        for opcode, i1, i2, j1, j2 in matcher.get_opcodes():
            if opcode == "equal":
                output.append(self.before[i1:i2])
                continue
            if opcode in ("replace", "delete"):
                output.append(f"[-{self.before[i1:i2]}-]")
            if opcode in ("replace", "insert"):
                output.append(f"{{+{self.after[j1:j2]}+}}")
        return "".join(output)

    def summary(self) -> str:
        return f"{self.local_name}#{self.index}: {self.inline_diff()}"


def collect_changes(parts: Iterable[Part]) -> List[ChangeRecord]:
    """List every modified fragment, in part and fragment order."""
    changes = []
    for part in parts:
        for index, fragment in enumerate(part.fragments):
            if fragment.is_modified:
                changes.append(ChangeRecord(
                    local_name=part.local_name,
                    index=index,
                    tag=fragment.tag,
                    before=fragment.original,
                    after=fragment.content,
                ))
    return changes


def restore_original(parts: Iterable[Part]) -> int:
    """Reset every fragment to its loaded content; returns how many changed."""
    restored = 0
    for part in parts:
        for fragment in part.fragments:
            if fragment.is_modified:
                fragment.content = fragment.original
                restored += 1
    return restored
