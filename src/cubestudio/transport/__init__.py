"""Links that carry payload lines to and from a cube controller."""

from typing import Optional

from ..config import TransportConfig
from .base import CubeLink, LineAssembler, LinkState
from .mock import MockCubeLink
from .websocket import WebSocketCubeLink


def create_link(kind: str = "websocket", config: Optional[TransportConfig] = None) -> CubeLink:
    """Create a link of the requested kind"""
    if kind == "mock":
        return MockCubeLink()
    if kind == "websocket":
        return WebSocketCubeLink(config)
    raise ValueError(f"Unknown link type: {kind}")


__all__ = [
    "CubeLink",
    "LineAssembler",
    "LinkState",
    "MockCubeLink",
    "WebSocketCubeLink",
    "create_link",
]
