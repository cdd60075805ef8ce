"""
Core document handling: the part/fragment model and the tokenizer.
"""

from .document_model import Fragment, Part, PartRepository, PartRole
from .fragment_tokenizer import strip_markup, tokenize_xml

__all__ = [
    "Fragment",
    "Part",
    "PartRepository",
    "PartRole",
    "strip_markup",
    "tokenize_xml",
]
