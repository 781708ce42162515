"""
Data management infrastructure for interview session records.
"""

from .sessions import SessionRecord, SessionStore

__all__ = [
    'SessionRecord',
    'SessionStore'
]
