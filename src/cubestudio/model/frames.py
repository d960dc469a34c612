"""Frames and frame sequences."""

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, List, Optional, Tuple
import logging

import numpy as np

from ..common.exceptions import ValidationError
from ..config import DelayConfig, StudioDefaults
from . import cube

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Frame:
    """A cube grid and how long it stays on display"""

    cube: np.ndarray = field(default_factory=cube.empty)
    delay_ms: int = StudioDefaults.DEFAULT_DELAY_MS

    def __post_init__(self):
        object.__setattr__(self, "cube", cube.freeze(self.cube))
        object.__setattr__(self, "delay_ms", int(self.delay_ms))
        if self.delay_ms < 1:
            raise ValidationError(f"Frame delay must be positive, got {self.delay_ms}ms")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Frame):
            return NotImplemented
        return self.delay_ms == other.delay_ms and cube.grids_equal(
            self.cube, other.cube
        )

    def __hash__(self) -> int:
        return hash((self.cube.tobytes(), self.delay_ms))

    def replace(
        self, grid: Optional[np.ndarray] = None, delay_ms: Optional[int] = None
    ) -> "Frame":
        return Frame(
            cube=self.cube if grid is None else grid,
            delay_ms=self.delay_ms if delay_ms is None else delay_ms,
        )

    def is_blank(self) -> bool:
        return cube.count_on(self.cube) == 0


def blank_frame(delay_ms: int = StudioDefaults.DEFAULT_DELAY_MS) -> Frame:
    return Frame(cube=cube.empty(), delay_ms=delay_ms)


class FrameSequence:
    """Ordered, non-empty, immutable list of frames

    Every edit produces a new sequence, so a sequence held by a history
    entry or by a running playback is never modified.
    """

    __slots__ = ("_frames",)

    def __init__(self, frames: Iterable[Frame] = ()):
        frames = tuple(frames)
        if not frames:
            frames = (blank_frame(),)
        for frame in frames:
            if not isinstance(frame, Frame):
                raise TypeError(f"Expected Frame, got {type(frame).__name__}")
        self._frames: Tuple[Frame, ...] = frames

    @property
    def frames(self) -> Tuple[Frame, ...]:
        return self._frames

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[Frame]:
        return iter(self._frames)

    def __getitem__(self, index: int) -> Frame:
        return self._frames[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FrameSequence):
            return NotImplemented
        return self._frames == other._frames

    def __hash__(self) -> int:
        return hash(self._frames)

    def __repr__(self) -> str:
        delays = [frame.delay_ms for frame in self._frames]
        return f"FrameSequence(frames={len(self._frames)}, delays={delays})"

    def has_index(self, index: int) -> bool:
        return 0 <= index < len(self._frames)

    def replace_frame(self, index: int, frame: Frame) -> "FrameSequence":
        frames = list(self._frames)
        frames[index] = frame
        return FrameSequence(frames)

    def total_duration_ms(self) -> int:
        return sum(frame.delay_ms for frame in self._frames)


def _as_grid(raw: Any) -> Optional[np.ndarray]:
    """Interpret one host-supplied frame, or None if unusable"""
    try:
        array = np.array(raw, dtype=np.int64)
    except (TypeError, ValueError):
        return None

    if np.any((array != 0) & (array != 1)):
        return None
    if array.shape == cube.SHAPE:
        return cube.freeze(array)
    # Legacy single-layer frames are replicated through every layer
    if array.shape == cube.SHAPE[1:]:
        return cube.freeze(np.stack([array] * cube.SIZE))
    return None


def sequence_from_raw(
    raw_frames: Optional[List[Any]], delay_config: Optional[DelayConfig] = None
) -> FrameSequence:
    """Build a sequence from nested lists supplied by a host page

    Accepts ``[z][y][x]`` grids and legacy ``[y][x]`` layers. Frames that
    cannot be interpreted become blank frames.
    """
    delay_config = delay_config or DelayConfig()
    frames = []
    for index, raw in enumerate(raw_frames or []):
        grid = _as_grid(raw)
        if grid is None:
            logger.warning(f"Initial frame {index} is not a 3x3x3 grid, using blank")
            grid = cube.empty()
        frames.append(Frame(cube=grid, delay_ms=delay_config.default_delay_ms))

    if not frames:
        return FrameSequence([blank_frame(delay_config.default_delay_ms)])
    return FrameSequence(frames)
