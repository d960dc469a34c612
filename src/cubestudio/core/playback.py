"""Timed playback of a frame sequence.

A single timer is armed per tick with the delay of the frame on display,
then re-armed from the tick itself. The sequence is read fresh on every
tick, so delay and frame-count changes made during playback take effect at
the next tick. Stopping cancels the pending timer and bumps a generation
counter, so a tick armed before the stop can never change state.
"""

import asyncio
import inspect
import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional, Set

from ..common.timing import TimeState
from ..model.frames import Frame, FrameSequence

logger = logging.getLogger(__name__)

FrameCallback = Callable[[int, Frame], Any]


class PlaybackState(Enum):
    """Playback states"""

    STOPPED = "stopped"
    PLAYING = "playing"


class PlaybackScheduler:
    """Advances a play head through a sequence at per-frame delays"""

    def __init__(
        self,
        sequence_provider: Callable[[], FrameSequence],
        on_frame: Optional[FrameCallback] = None,
    ):
        self._provider = sequence_provider
        self.on_frame = on_frame

        self.state = PlaybackState.STOPPED
        self._head: Optional[int] = None
        self._handle: Optional[asyncio.TimerHandle] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._generation = 0
        self._pending: Set[asyncio.Task] = set()

        self.loops_completed = 0
        self.time_state = TimeState()

    @property
    def is_playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    @property
    def play_head(self) -> Optional[int]:
        """Index of the frame on display, None while stopped"""
        if not self.is_playing:
            return None
        self.clamp()
        return self._head

    def current_frame(self) -> Optional[Frame]:
        head = self.play_head
        if head is None:
            return None
        return self._provider()[head]

    def start(self) -> None:
        """Start playback from the first frame

        Starting while already playing restarts from the first frame.
        Must be called from a running event loop.
        """
        loop = asyncio.get_running_loop()
        if self.is_playing:
            logger.info("Playback already running, restarting from first frame")
            self._cancel_timer()

        self._generation += 1
        self._loop = loop
        self.state = PlaybackState.PLAYING
        self._head = 0
        self.loops_completed = 0
        self.time_state.reset()

        logger.info(f"Playback started with {len(self._provider())} frames")
        generation = self._generation
        self._notify()
        if generation == self._generation and self.is_playing:
            self._arm()

    def stop(self) -> None:
        """Stop playback and cancel any pending tick"""
        if not self.is_playing:
            return
        self._cancel_timer()
        self._generation += 1
        self.state = PlaybackState.STOPPED
        self._head = None
        for task in list(self._pending):
            task.cancel()
        logger.info(f"Playback stopped after {self.time_state.tick_count} ticks")

    def close(self) -> None:
        """Tear down the scheduler"""
        self.stop()
        self._loop = None

    def clamp(self) -> None:
        """Keep the play head inside a sequence that may have shrunk"""
        if self._head is None:
            return
        last = len(self._provider()) - 1
        if self._head > last:
            logger.debug(f"Clamping play head {self._head} to {last}")
            self._head = last

    def _arm(self) -> None:
        frame = self._provider()[self._head]
        generation = self._generation
        self._handle = self._loop.call_later(
            frame.delay_ms / 1000, self._tick, generation
        )

    def _tick(self, generation: int) -> None:
        if generation != self._generation or not self.is_playing:
            return
        self._handle = None

        length = len(self._provider())
        self.clamp()
        self._head = (self._head + 1) % length
        if self._head == 0:
            self.loops_completed += 1
        self.time_state.update()

        self._notify()
        # The callback may have stopped playback
        if generation == self._generation and self.is_playing:
            self._arm()

    def _notify(self) -> None:
        if self.on_frame is None:
            return
        frame = self._provider()[self._head]
        try:
            result = self.on_frame(self._head, frame)
        except Exception as e:
            logger.error(f"Playback frame callback failed: {e}")
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._pending.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Playback frame callback failed: {task.exception()}")

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def get_metrics(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "play_head": self.play_head,
            "loops_completed": self.loops_completed,
            **self.time_state.get_metrics(),
        }
