"""Edit operations over frame sequences.

Each operation takes a sequence and returns a new one. Invalid frame
indexes, unknown pattern ids and clearing a blank frame leave the sequence
unchanged; delays are clamped into the configured range.
"""

from typing import Optional, Tuple
import logging

import numpy as np

from .. import patterns
from ..config import DelayConfig
from ..model import cube
from ..model.frames import Frame, FrameSequence, blank_frame

logger = logging.getLogger(__name__)

_DEFAULT_DELAYS = DelayConfig()


def toggle_cell(
    seq: FrameSequence,
    frame_index: int,
    x: int,
    y: int,
    z: int,
    force_value: Optional[int] = None,
) -> FrameSequence:
    """Flip one cell, or set it to ``force_value`` when painting"""
    if not seq.has_index(frame_index):
        logger.debug(f"Ignoring toggle on missing frame {frame_index}")
        return seq

    frame = seq[frame_index]
    if force_value is None:
        value = 0 if cube.get_cell(frame.cube, x, y, z) else 1
    else:
        value = 1 if force_value else 0
    return seq.replace_frame(
        frame_index, frame.replace(grid=cube.set_cell(frame.cube, x, y, z, value))
    )


def apply_pattern(
    seq: FrameSequence,
    frame_index: int,
    pattern_id: str,
    rng: Optional[np.random.Generator] = None,
) -> FrameSequence:
    """Replace one frame's grid with a generated pattern"""
    if not seq.has_index(frame_index):
        logger.debug(f"Ignoring pattern on missing frame {frame_index}")
        return seq

    grid = patterns.generate(pattern_id, rng=rng)
    if grid is None:
        logger.warning(f"Unknown pattern: {pattern_id}")
        return seq
    return seq.replace_frame(frame_index, seq[frame_index].replace(grid=grid))


def set_delay(
    seq: FrameSequence,
    frame_index: int,
    delay_ms: int,
    delay_config: Optional[DelayConfig] = None,
) -> FrameSequence:
    if not seq.has_index(frame_index):
        return seq
    delay = (delay_config or _DEFAULT_DELAYS).clamp(delay_ms)
    return seq.replace_frame(frame_index, seq[frame_index].replace(delay_ms=delay))


def add_frame(
    seq: FrameSequence, delay_config: Optional[DelayConfig] = None
) -> Tuple[FrameSequence, int]:
    """Append a blank frame; returns the sequence and the new frame's index"""
    delay = (delay_config or _DEFAULT_DELAYS).default_delay_ms
    frames = list(seq) + [blank_frame(delay)]
    return FrameSequence(frames), len(frames) - 1


def duplicate_frame(seq: FrameSequence, frame_index: int) -> Tuple[FrameSequence, int]:
    """Append a copy of a frame; returns the sequence and the copy's index"""
    if not seq.has_index(frame_index):
        return seq, max(0, min(frame_index, len(seq) - 1))

    source = seq[frame_index]
    copy = Frame(cube=cube.clone(source.cube), delay_ms=source.delay_ms)
    frames = list(seq) + [copy]
    return FrameSequence(frames), len(frames) - 1


def clear_frame(seq: FrameSequence, frame_index: int) -> FrameSequence:
    """Blank a frame's grid, keeping its delay"""
    if not seq.has_index(frame_index) or seq[frame_index].is_blank():
        return seq
    return seq.replace_frame(frame_index, seq[frame_index].replace(grid=cube.empty()))


def delete_frame(
    seq: FrameSequence, frame_index: int, delay_config: Optional[DelayConfig] = None
) -> FrameSequence:
    """Remove a frame; the last remaining frame becomes a blank one"""
    if not seq.has_index(frame_index):
        return seq

    if len(seq) == 1:
        delay = (delay_config or _DEFAULT_DELAYS).default_delay_ms
        return FrameSequence([blank_frame(delay)])

    frames = [frame for index, frame in enumerate(seq) if index != frame_index]
    return FrameSequence(frames)
