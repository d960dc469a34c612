from typing import Any, Dict, List, Optional
import logging

from ..common.exceptions import TransportError
from .base import CubeLink

logger = logging.getLogger(__name__)


class MockCubeLink(CubeLink):
    """In-memory link for development without hardware

    Sent lines are recorded in ``sent``. Inbound chunks queued with
    ``push_chunk`` are returned by ``read_lines``. Setting ``fail_on`` to an
    operation name makes that operation raise ``TransportError``.
    """

    def __init__(self, fail_on: Optional[str] = None):
        super().__init__()
        self.sent: List[str] = []
        self._inbound: List[str] = []
        self.fail_on = fail_on
        logger.info("Initialized mock cube link")

    def _check(self, operation: str) -> None:
        if self.fail_on == operation:
            error = TransportError(operation, ConnectionError("simulated failure"))
            self._state.record_error(str(error))
            logger.error(f"Mock link {operation} failed")
            raise error

    async def connect(self) -> None:
        self._check("connect")
        self._state.connected = True
        self._state.touch()
        logger.info("Mock cube link connected")

    async def send_line(self, line: str) -> None:
        if not self._state.connected:
            raise TransportError("send", ConnectionError("link is not connected"))
        self._check("send")
        self.sent.append(self._terminate(line))
        self._state.lines_sent += 1
        self._state.touch()
        logger.debug(f"Mock link sent: {line.strip()}")

    def push_chunk(self, chunk: str) -> None:
        """Queue inbound text as the device would deliver it"""
        self._inbound.append(chunk)

    async def read_lines(self, timeout: Optional[float] = 0.0) -> List[str]:
        if not self._state.connected:
            raise TransportError("read", ConnectionError("link is not connected"))
        self._check("read")

        lines: List[str] = []
        while self._inbound:
            lines.extend(self._assembler.feed(self._inbound.pop(0)))
        self._state.lines_received += len(lines)
        if lines:
            self._state.touch()
        return lines

    async def close(self) -> None:
        self._state.connected = False
        self._assembler.reset()
        logger.info("Mock cube link closed")

    def get_state(self) -> Dict[str, Any]:
        state = super().get_state()
        state["is_mock"] = True
        return state
