"""Editing core: edit operations, history, playback and the session"""

from ..common.exceptions import ValidationError, TransportError
from . import edits
from .history import HistoryEntry, HistoryManager
from .playback import PlaybackScheduler, PlaybackState

# Import session last; it depends on everything above
from .session import EditorSession

__all__ = [
    "ValidationError",
    "TransportError",
    "edits",
    "HistoryEntry",
    "HistoryManager",
    "PlaybackScheduler",
    "PlaybackState",
    "EditorSession",
]
