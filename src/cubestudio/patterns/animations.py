"""Example animations that generate whole frame sequences."""

from typing import List, Optional

import numpy as np

from ..config import StudioDefaults
from ..model import cube
from ..model.frames import Frame, FrameSequence
from .base import register_animation


@register_animation(
    "rain",
    "Digital Rain Pattern",
    "Random drops falling through the cube layers",
    deterministic=False,
)
def rain(
    drops: int = StudioDefaults.RAIN_DROPS,
    rng: Optional[np.random.Generator] = None,
    delay_ms: int = StudioDefaults.RAIN_DELAY_MS,
) -> FrameSequence:
    """Three single-cell frames per drop: top, middle, bottom layer"""
    rng = rng or np.random.default_rng()
    frames: List[Frame] = []
    for _ in range(max(1, drops)):
        column = int(rng.integers(0, cube.SIZE * cube.SIZE))
        row, col = divmod(column, cube.SIZE)
        for layer in reversed(range(cube.SIZE)):
            grid = cube.set_cell(cube.empty(), col, row, layer, 1)
            frames.append(Frame(cube=grid, delay_ms=delay_ms))
    return FrameSequence(frames)


def _plane(axis: int, index: int) -> np.ndarray:
    grid = np.zeros(cube.SHAPE, dtype=np.uint8)
    selector = [slice(None)] * 3
    selector[axis] = index
    grid[tuple(selector)] = 1
    return cube.freeze(grid)


@register_animation("scan", "Axis Scan Pattern", "Sweeping light across X, Y, and Z axes")
def scan(delay_ms: int = StudioDefaults.SCAN_DELAY_MS) -> FrameSequence:
    """Whole-plane sweeps along Z, then Y, then X"""
    frames: List[Frame] = []
    # Array axes are [z][y][x]
    for axis in (0, 1, 2):
        for index in range(cube.SIZE):
            frames.append(Frame(cube=_plane(axis, index), delay_ms=delay_ms))
    return FrameSequence(frames)
