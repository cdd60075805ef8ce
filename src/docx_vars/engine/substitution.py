"""
Placeholder substitution over part fragments.

Placeholders look like ``${NAME}``. Word often splits a placeholder over
several runs while it is being typed, leaving a fragment whose whole
content is the bare ``NAME``; the bare-name fallback handles that case.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping

from ..core.document_model import Part

logger = logging.getLogger(__name__)

OPEN_DELIMITER = "${"
CLOSE_DELIMITER = "}"

PLACEHOLDER_PATTERN = re.compile(r"\$\{([^{}]+)\}")


@dataclass(frozen=True)
class SearchTag:
    """The two forms a search token is matched in."""

    tagged: str
    clean: str

    @classmethod
    def from_token(cls, token: str) -> SearchTag:
        """
        Normalize a search token.

        ``${NAME}`` (longer than two characters, delimited on both ends) is
        kept as the tagged form and ``NAME`` derived from it; anything else
        is a bare name and gets wrapped.
        """
        if (
            len(token) > 2
            and token.startswith(OPEN_DELIMITER)
            and token.endswith(CLOSE_DELIMITER)
        ):
            return cls(tagged=token, clean=token[2:-1])
        return cls(tagged=f"{OPEN_DELIMITER}{token}{CLOSE_DELIMITER}", clean=token)


class SubstitutionEngine:
    """
    Applies search/replace rules to the fragments of a set of parts.

    Per fragment, at most one rule fires:
    1. content contains the tagged form: every occurrence is replaced;
    2. content equals the bare name exactly: the whole content is replaced.

    All methods return the number of fragments they changed.
    """

    def __init__(self, strict_arguments: bool = False):
        self.strict_arguments = strict_arguments

    def substitute(self, parts: Iterable[Part], search: Any, replace: Any) -> int:
        """Replace the placeholder ``search`` with ``replace`` in ``parts``."""
        if not self._accepts(search, replace):
            return 0
        if not search:
            logger.debug("Ignoring substitution with an empty search token")
            return 0

        search_tag = SearchTag.from_token(search)
        return self._apply(parts, search_tag.tagged, search_tag.clean, replace)

    def substitute_many(self, parts: Iterable[Part], values: Any) -> int:
        """Apply every token/value pair of ``values`` in turn."""
        if not isinstance(values, Mapping):
            if self.strict_arguments:
                raise TypeError(f"values must be a mapping, got {type(values).__name__}")
            logger.debug(f"Ignoring batch substitution with {type(values).__name__} values")
            return 0

        parts = list(parts)
        return sum(self.substitute(parts, search, replace) for search, replace in values.items())

    def replace_literal(self, parts: Iterable[Part], search: str, replace: str) -> int:
        """Replace ``search`` as a plain substring, with no placeholder handling."""
        if not self._accepts(search, replace) or not search:
            return 0
        return self._apply(parts, search, search, replace)

    def clean_tag_vars(self, parts: Iterable[Part]) -> int:
        """Remove every ``${`` and every ``}`` left in the fragments."""
        parts = list(parts)
        changed = self.replace_literal(parts, OPEN_DELIMITER, "")
        changed += self.replace_literal(parts, CLOSE_DELIMITER, "")
        return changed

    @staticmethod
    def find_placeholders(parts: Iterable[Part]) -> List[str]:
        """Distinct placeholder names present in fragment contents, first seen first."""
        names = {}
        for part in parts:
            for fragment in part.fragments:
                for name in PLACEHOLDER_PATTERN.findall(fragment.content):
                    names.setdefault(name, None)
        return list(names)

    def _accepts(self, search: Any, replace: Any) -> bool:
        if isinstance(search, str) and isinstance(replace, str):
            return True
        if self.strict_arguments:
            raise TypeError(
                f"search and replace must be str, got "
                f"{type(search).__name__} and {type(replace).__name__}"
            )
        logger.debug(
            f"Ignoring substitution of {search!r}: expected str arguments, got "
            f"{type(search).__name__} and {type(replace).__name__}"
        )
        return False

    def _apply(self, parts: Iterable[Part], tagged: str, clean: str, replace: str) -> int:
        changed = 0
        for part in parts:
            for fragment in part.fragments:
                if tagged in fragment.content:
                    fragment.content = fragment.content.replace(tagged, replace)
                elif clean and fragment.content == clean:
                    fragment.content = replace
                else:
                    continue
                changed += 1

        logger.debug(f"Replaced {tagged!r} in {changed} fragment(s)")
        return changed
