"""Single-grid fills: all, edges, corners, cross, random."""

from typing import Optional

import numpy as np

from ..model import cube
from .base import register_pattern

_LAST = cube.SIZE - 1
_MID = cube.SIZE // 2


@register_pattern("all", "Every LED on")
def all_on() -> np.ndarray:
    return cube.full()


@register_pattern("edges", "Outer shell of the cube")
def edges() -> np.ndarray:
    z, y, x = np.indices(cube.SHAPE)
    boundary = (
        (x == 0) | (x == _LAST) | (y == 0) | (y == _LAST) | (z == 0) | (z == _LAST)
    )
    return cube.freeze(boundary)


@register_pattern("corners", "Four column corners on the top and bottom layers")
def corners() -> np.ndarray:
    grid = np.zeros(cube.SHAPE, dtype=np.uint8)
    for layer in (0, _LAST):
        for row, col in ((0, 0), (0, _LAST), (_LAST, 0), (_LAST, _LAST)):
            grid[layer, row, col] = 1
    return cube.freeze(grid)


@register_pattern("cross", "Plus shape through every layer")
def cross() -> np.ndarray:
    grid = np.zeros(cube.SHAPE, dtype=np.uint8)
    grid[:, _MID, :] = 1
    grid[:, :, _MID] = 1
    return cube.freeze(grid)


@register_pattern("random", "Each LED on with probability 0.5", deterministic=False)
def random_fill(rng: Optional[np.random.Generator] = None) -> np.ndarray:
    rng = rng or np.random.default_rng()
    return cube.freeze(rng.random(cube.SHAPE) > 0.5)
