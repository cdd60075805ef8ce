"""
Archive session: load, edit and save a .docx file.
"""

from .archive_session import DocxSession, SessionState, SessionStateError

__all__ = ["DocxSession", "SessionState", "SessionStateError"]
