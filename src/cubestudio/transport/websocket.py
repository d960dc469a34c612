import asyncio
import logging
from typing import Any, Dict, List, Optional

import websockets

from ..common.exceptions import TransportError
from ..config import TransportConfig
from .base import CubeLink

logger = logging.getLogger(__name__)


class WebSocketCubeLink(CubeLink):
    """Cube link over a WebSocket bridge to the serial controller

    Each text message carries one or more payload lines. Reconnection is
    left to the caller.
    """

    def __init__(self, config: Optional[TransportConfig] = None):
        super().__init__()
        self.config = config or TransportConfig()
        self._websocket = None

    async def connect(self) -> None:
        if self._websocket is not None:
            return
        try:
            self._websocket = await websockets.connect(
                self.config.uri, open_timeout=self.config.connect_timeout_s
            )
        except (OSError, asyncio.TimeoutError, websockets.WebSocketException) as e:
            self._state.record_error(str(e))
            logger.error(f"Connection to {self.config.uri} failed: {e}")
            raise TransportError("connect", e) from e

        self._state.connected = True
        self._state.touch()
        logger.info(f"Connected to {self.config.uri}")

    async def send_line(self, line: str) -> None:
        if self._websocket is None:
            raise TransportError("send", ConnectionError("link is not connected"))
        try:
            await self._websocket.send(self._terminate(line))
        except (OSError, websockets.ConnectionClosed) as e:
            await self._drop(e)
            raise TransportError("send", e) from e

        self._state.lines_sent += 1
        self._state.touch()
        logger.debug(f"Sent: {line.strip()}")

    async def read_lines(self, timeout: Optional[float] = 0.05) -> List[str]:
        """Drain messages arriving within ``timeout`` seconds of each other"""
        if self._websocket is None:
            raise TransportError("read", ConnectionError("link is not connected"))

        lines: List[str] = []
        while True:
            try:
                message = await asyncio.wait_for(self._websocket.recv(), timeout)
            except asyncio.TimeoutError:
                break
            except (OSError, websockets.ConnectionClosed) as e:
                await self._drop(e)
                raise TransportError("read", e) from e

            if isinstance(message, bytes):
                message = message.decode("utf-8", errors="replace")
            lines.extend(self._assembler.feed(message))

        self._state.lines_received += len(lines)
        if lines:
            self._state.touch()
        return lines

    async def close(self) -> None:
        websocket, self._websocket = self._websocket, None
        self._state.connected = False
        self._assembler.reset()
        if websocket is not None:
            try:
                await websocket.close()
            except (OSError, websockets.WebSocketException) as e:
                logger.warning(f"Error closing link: {e}")
            logger.info(f"Disconnected from {self.config.uri}")

    async def _drop(self, error: Exception) -> None:
        logger.error(f"Link to {self.config.uri} lost: {error}")
        self._state.record_error(str(error))
        await self.close()

    def get_state(self) -> Dict[str, Any]:
        state = super().get_state()
        state["uri"] = self.config.uri
        return state
