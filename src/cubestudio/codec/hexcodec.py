"""Hex codec for live cube transmission.

The 27 cells are linearized as ``index = z*9 + y*3 + x`` and packed eight
to a byte, least significant bit first. Each byte is rendered as two
lowercase hex digits, so every grid encodes to exactly 8 characters. The
top five bits of the last byte are always zero.

Decoding is permissive by default: bytes that fail to parse contribute no
bits and missing bytes leave their cells off. ``strict=True`` rejects
anything that is not exactly 8 hex digits.
"""

import logging
import re
import string

import numpy as np

from ..common.exceptions import CodecError
from ..config import StudioDefaults
from ..model import cube

logger = logging.getLogger(__name__)

HEX_LENGTH = StudioDefaults.PAYLOAD_BYTES * 2
PAYLOAD_PREFIX = StudioDefaults.PAYLOAD_PREFIX

_HEX_DIGITS = set(string.hexdigits)
_STRICT_RE = re.compile(r"[0-9a-fA-F]{%d}" % HEX_LENGTH)


def encode(grid: np.ndarray) -> str:
    """Pack a grid into an 8-character lowercase hex string"""
    bits = np.zeros(StudioDefaults.PAYLOAD_BYTES * 8, dtype=np.uint8)
    # C-order flattening of [z][y][x] gives z*9 + y*3 + x
    bits[: StudioDefaults.CELL_COUNT] = np.asarray(grid, dtype=np.uint8).reshape(-1)
    packed = np.packbits(bits, bitorder="little")
    return packed.tobytes().hex()


def _parse_token(token: str) -> int:
    """Value of the leading hex digits of a byte token, 0 if there are none"""
    digits = ""
    for char in token:
        if char not in _HEX_DIGITS:
            break
        digits += char
    return int(digits, 16) if digits else 0


def decode(text: str, strict: bool = False) -> np.ndarray:
    """Unpack a hex string into a grid"""
    if strict and not _STRICT_RE.fullmatch(text or ""):
        raise CodecError(f"Expected {HEX_LENGTH} hex digits, got {text!r}")

    text = text or ""
    tokens = [text[i : i + 2] for i in range(0, len(text), 2)]
    if len(text) % 2 or any(not set(token) <= _HEX_DIGITS for token in tokens):
        logger.warning(f"Malformed cube hex {text!r}, decoding what is parseable")

    bits = np.zeros(StudioDefaults.CELL_COUNT, dtype=np.uint8)
    for byte_index, token in enumerate(tokens[: StudioDefaults.PAYLOAD_BYTES]):
        value = _parse_token(token) & 0xFF
        for bit in range(8):
            index = byte_index * 8 + bit
            if index < StudioDefaults.CELL_COUNT and value & (1 << bit):
                bits[index] = 1

    return cube.freeze(bits.reshape(cube.SHAPE))


def frame_payload(grid: np.ndarray) -> str:
    """Transport line for a grid: ``CUBE:<hex>\\n``"""
    return f"{PAYLOAD_PREFIX}{encode(grid)}\n"


def parse_payload(line: str, strict: bool = False) -> np.ndarray:
    """Grid carried by a ``CUBE:<hex>`` line"""
    stripped = (line or "").strip()
    if not stripped.startswith(PAYLOAD_PREFIX):
        raise CodecError(f"Not a cube payload: {stripped!r}")
    return decode(stripped[len(PAYLOAD_PREFIX) :], strict=strict)
