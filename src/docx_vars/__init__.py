"""
docx-vars: fill ${NAME} placeholders in .docx documents, headers and footers
without an XML parser.
"""

from .config import DocxVarsConfig, load_config
from .core.document_model import Fragment, Part, PartRepository, PartRole
from .session.archive_session import DocxSession, SessionStateError

__version__ = "0.1.0"

__all__ = [
    "DocxSession",
    "DocxVarsConfig",
    "Fragment",
    "Part",
    "PartRepository",
    "PartRole",
    "SessionStateError",
    "load_config",
]
