"""Wire format for live cube updates."""

from .hexcodec import HEX_LENGTH, PAYLOAD_PREFIX, decode, encode, frame_payload, parse_payload

__all__ = [
    "HEX_LENGTH",
    "PAYLOAD_PREFIX",
    "decode",
    "encode",
    "frame_payload",
    "parse_payload",
]
