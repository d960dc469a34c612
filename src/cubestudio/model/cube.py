"""Cube grid: the on/off state of a 3x3x3 LED cube.

Grids are numpy ``uint8`` arrays of shape ``(3, 3, 3)`` indexed ``[z][y][x]``
(layer, row, column). Grids handed out by this module are read-only, so a
grid referenced by a frame or a history entry can never change underneath
it. Build a new grid with :func:`clone` and :func:`freeze`, or use
:func:`set_cell`.
"""

from typing import Any, List

import numpy as np

from ..common.exceptions import ValidationError
from ..config import StudioDefaults

SIZE = StudioDefaults.CUBE_SIZE
SHAPE = (SIZE, SIZE, SIZE)


def freeze(grid: Any) -> np.ndarray:
    """Validate a grid and return a read-only copy"""
    array = np.array(grid, dtype=np.uint8)
    if array.shape != SHAPE:
        raise ValidationError(f"Cube grid must have shape {SHAPE}, got {array.shape}")
    if np.any(array > 1):
        raise ValidationError("Cube cells must be 0 or 1")
    array.flags.writeable = False
    return array


def empty() -> np.ndarray:
    """All-off grid"""
    grid = np.zeros(SHAPE, dtype=np.uint8)
    grid.flags.writeable = False
    return grid


def full() -> np.ndarray:
    """All-on grid"""
    grid = np.ones(SHAPE, dtype=np.uint8)
    grid.flags.writeable = False
    return grid


def clone(grid: np.ndarray) -> np.ndarray:
    """Deep, writable copy of a grid"""
    return np.array(grid, dtype=np.uint8, copy=True)


def get_cell(grid: np.ndarray, x: int, y: int, z: int) -> int:
    return int(grid[z, y, x])


def set_cell(grid: np.ndarray, x: int, y: int, z: int, value: int) -> np.ndarray:
    """New grid with a single cell changed; the source is untouched"""
    updated = clone(grid)
    updated[z, y, x] = 1 if value else 0
    updated.flags.writeable = False
    return updated


def count_on(grid: np.ndarray) -> int:
    """Number of lit cells, in [0, 27]"""
    return int(np.count_nonzero(grid))


def grids_equal(a: np.ndarray, b: np.ndarray) -> bool:
    return bool(np.array_equal(a, b))


def from_nested(data: Any) -> np.ndarray:
    """Build a grid from nested ``[z][y][x]`` lists"""
    try:
        array = np.array(data, dtype=np.int64)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Cube grid is ragged or non-numeric: {e}") from e

    if array.shape != SHAPE:
        raise ValidationError(f"Cube grid must have shape {SHAPE}, got {array.shape}")
    if np.any((array != 0) & (array != 1)):
        raise ValidationError("Cube cells must be 0 or 1")
    return freeze(array)


def to_nested(grid: np.ndarray) -> List[List[List[int]]]:
    """Nested ``[z][y][x]`` lists of plain ints"""
    return np.asarray(grid, dtype=np.uint8).tolist()
