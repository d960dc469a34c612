"""Byte/line link to a cube controller."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging
import time

logger = logging.getLogger(__name__)


@dataclass
class LinkState:
    """Current state of a cube link"""

    connected: bool = False
    lines_sent: int = 0
    lines_received: int = 0
    last_activity: float = field(default_factory=time.time)
    error_count: int = 0
    last_error: str = ""

    def record_error(self, message: str) -> None:
        self.error_count += 1
        self.last_error = message

    def touch(self) -> None:
        self.last_activity = time.time()


class LineAssembler:
    """Reassembles text chunks into complete lines

    Sources may deliver partial lines; the remainder after the last newline
    is held until the next chunk arrives.
    """

    def __init__(self, max_pending: int = 4096):
        self._pending = ""
        self.max_pending = max_pending

    def feed(self, chunk: str) -> List[str]:
        """Add a chunk and return every line it completes"""
        self._pending += chunk
        *lines, self._pending = self._pending.split("\n")
        if len(self._pending) > self.max_pending:
            logger.warning(f"Dropping {len(self._pending)} chars without a newline")
            self._pending = ""
        return [line.rstrip("\r") for line in lines if line.strip()]

    @property
    def pending(self) -> str:
        return self._pending

    def reset(self) -> None:
        self._pending = ""


class CubeLink(ABC):
    """Abstract base class for cube links

    Failures are raised as ``TransportError`` naming the operation.
    """

    def __init__(self):
        self._state = LinkState()
        self._assembler = LineAssembler()

    @property
    def is_connected(self) -> bool:
        return self._state.connected

    @abstractmethod
    async def connect(self) -> None:
        """Open the link"""
        pass

    @abstractmethod
    async def send_line(self, line: str) -> None:
        """Write one text line; a trailing newline is added if missing"""
        pass

    @abstractmethod
    async def read_lines(self, timeout: Optional[float] = 0.0) -> List[str]:
        """Complete lines received so far"""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the link"""
        pass

    def get_state(self) -> Dict[str, Any]:
        """Get current link state"""
        return {
            "connected": self._state.connected,
            "lines_sent": self._state.lines_sent,
            "lines_received": self._state.lines_received,
            "last_activity": self._state.last_activity,
            "error_count": self._state.error_count,
            "last_error": self._state.last_error,
        }

    @staticmethod
    def _terminate(line: str) -> str:
        return line if line.endswith("\n") else line + "\n"
