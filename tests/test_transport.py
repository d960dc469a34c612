"""Tests for cube links."""

import socket

import pytest
import websockets

from cubestudio.common.exceptions import TransportError
from cubestudio.config import TransportConfig
from cubestudio.transport import (
    LineAssembler,
    MockCubeLink,
    WebSocketCubeLink,
    create_link,
)


def _unused_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestLineAssembler:
    """Test line reassembly"""

    def test_partial_lines(self):
        assembler = LineAssembler()
        assert assembler.feed("CUBE:01") == []
        assert assembler.pending == "CUBE:01"
        assert assembler.feed("000000\nOK\r\n") == ["CUBE:01000000", "OK"]
        assert assembler.pending == ""

    def test_blank_lines_dropped(self):
        assert LineAssembler().feed("\n\r\nready\n") == ["ready"]

    def test_overflow_discarded(self):
        assembler = LineAssembler(max_pending=8)
        assembler.feed("x" * 20)
        assert assembler.pending == ""


class TestMockLink:
    """Test the in-memory link"""

    async def test_send_and_state(self):
        link = MockCubeLink()
        await link.connect()
        await link.send_line("CUBE:00000000")

        state = link.get_state()
        assert link.sent == ["CUBE:00000000\n"]
        assert state["connected"]
        assert state["lines_sent"] == 1
        assert state["is_mock"]

    async def test_send_requires_connection(self):
        with pytest.raises(TransportError) as exc_info:
            await MockCubeLink().send_line("CUBE:00000000")
        assert exc_info.value.operation == "send"

    async def test_simulated_connect_failure(self):
        link = MockCubeLink(fail_on="connect")
        with pytest.raises(TransportError):
            await link.connect()
        assert not link.is_connected
        assert link.get_state()["error_count"] == 1

    async def test_close(self):
        link = MockCubeLink()
        await link.connect()
        await link.close()
        assert not link.is_connected

    def test_create_link(self):
        assert isinstance(create_link("mock"), MockCubeLink)
        assert isinstance(create_link("websocket"), WebSocketCubeLink)
        with pytest.raises(ValueError):
            create_link("serial")


class TestWebSocketLink:
    """Test the WebSocket link against a local server"""

    async def test_connect_refused(self):
        config = TransportConfig(host="127.0.0.1", port=_unused_port(), connect_timeout_s=1.0)
        link = WebSocketCubeLink(config)

        with pytest.raises(TransportError) as exc_info:
            await link.connect()
        assert exc_info.value.operation == "connect"
        assert not link.is_connected

    async def test_send_without_connect(self):
        with pytest.raises(TransportError):
            await WebSocketCubeLink().send_line("CUBE:00000000")

    async def test_send_and_receive(self):
        async def handler(websocket, *args):
            async for message in websocket:
                await websocket.send(f"ACK {message.strip()}\n")

        async with websockets.serve(handler, "127.0.0.1", 0) as server:
            port = server.sockets[0].getsockname()[1]
            link = WebSocketCubeLink(TransportConfig(host="127.0.0.1", port=port))
            await link.connect()
            try:
                await link.send_line("CUBE:01000000")
                lines = await link.read_lines(timeout=0.5)
            finally:
                await link.close()

        assert lines == ["ACK CUBE:01000000"]
        assert link.get_state()["lines_sent"] == 1
        assert not link.is_connected
