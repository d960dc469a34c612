"""Cube grid and frame sequence data model."""

from . import cube
from .frames import Frame, FrameSequence, blank_frame, sequence_from_raw

__all__ = [
    "cube",
    "Frame",
    "FrameSequence",
    "blank_frame",
    "sequence_from_raw",
]
