"""Linear undo/redo history of whole-sequence snapshots."""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import List, Optional

from ..common.exceptions import ValidationError
from ..config import StudioDefaults
from ..model.frames import FrameSequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    """Snapshot of the frame sequence after a committed edit

    Sequences are immutable, so holding one is a full snapshot.
    """

    sequence: FrameSequence
    label: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: float = field(default_factory=time.time)


class HistoryManager:
    """Manages the undo/redo stack

    The stack is a gap-free log: committing while positioned before the
    tail discards the entries after the position, and the oldest entry is
    evicted once ``max_entries`` is exceeded.
    """

    def __init__(
        self,
        initial: FrameSequence,
        max_entries: int = StudioDefaults.DEFAULT_HISTORY_CAP,
    ):
        if max_entries < 1:
            raise ValidationError("History must hold at least one entry")
        self.max_entries = max_entries
        self.entries: List[HistoryEntry] = []
        self.position: int = 0
        self.reset(initial)

    def reset(self, sequence: FrameSequence, label: str = "initial") -> None:
        """Start a fresh history holding only ``sequence``"""
        self.entries = [HistoryEntry(sequence, label)]
        self.position = 0

    def commit(self, sequence: FrameSequence, label: str = "") -> HistoryEntry:
        """Record a new state after the current position"""
        del self.entries[self.position + 1 :]

        entry = HistoryEntry(sequence, label)
        self.entries.append(entry)
        if len(self.entries) > self.max_entries:
            evicted = self.entries.pop(0)
            logger.debug(f"History full, evicted entry {evicted.label or evicted.id}")

        self.position = len(self.entries) - 1
        logger.debug(f"Committed '{label}' at history position {self.position}")
        return entry

    def undo(self) -> Optional[FrameSequence]:
        """Step back; None when already at the oldest state"""
        if not self.can_undo:
            return None
        self.position -= 1
        return self.entries[self.position].sequence

    def redo(self) -> Optional[FrameSequence]:
        """Step forward; None when already at the newest state"""
        if not self.can_redo:
            return None
        self.position += 1
        return self.entries[self.position].sequence

    @property
    def can_undo(self) -> bool:
        return self.position > 0

    @property
    def can_redo(self) -> bool:
        return self.position < len(self.entries) - 1

    @property
    def current(self) -> FrameSequence:
        return self.entries[self.position].sequence

    def __len__(self) -> int:
        return len(self.entries)

    def get_recent_entries(self, count: int = 5) -> List[HistoryEntry]:
        """Get most recent entries up to the current position"""
        return self.entries[: self.position + 1][-count:]

    def get_state(self) -> dict:
        return {
            "length": len(self.entries),
            "position": self.position,
            "can_undo": self.can_undo,
            "can_redo": self.can_redo,
            "max_entries": self.max_entries,
        }
