"""
Tracking of fragment edits against their loaded content.
"""

from .change_tracker import ChangeRecord, collect_changes, restore_original

__all__ = ["ChangeRecord", "collect_changes", "restore_original"]
