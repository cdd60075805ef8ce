"""
Placeholder substitution engine.
"""

from .substitution import (
    CLOSE_DELIMITER,
    OPEN_DELIMITER,
    SearchTag,
    SubstitutionEngine,
)

__all__ = ["CLOSE_DELIMITER", "OPEN_DELIMITER", "SearchTag", "SubstitutionEngine"]
