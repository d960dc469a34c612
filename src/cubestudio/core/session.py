"""Editing session owning the sequence, edit cursor, history and playback."""

import logging
from collections import deque
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional

import numpy as np

from .. import patterns
from ..codec import hexcodec
from ..common.exceptions import TransportError
from ..config import StudioConfig
from ..export import firmware, scene
from ..model import cube
from ..model.frames import Frame, FrameSequence, sequence_from_raw
from ..transport.base import CubeLink
from . import edits
from .history import HistoryManager
from .playback import FrameCallback, PlaybackScheduler

logger = logging.getLogger(__name__)

DEFAULT_SCENE_NAME = "My Scene"
MAX_LOG_LINES = 200


class EditorSession:
    """One user's editing session

    Every mutating edit replaces the whole sequence and commits it to the
    history exactly once. Cursor moves, pending delay changes and playback
    never touch the history.
    """

    def __init__(
        self,
        initial_frames: Optional[List[Any]] = None,
        config: Optional[StudioConfig] = None,
        sequence: Optional[FrameSequence] = None,
        name: str = DEFAULT_SCENE_NAME,
        description: str = "",
        on_frame: Optional[FrameCallback] = None,
    ):
        self.config = config or StudioConfig.create_default()
        if sequence is None:
            sequence = sequence_from_raw(initial_frames, self.config.delay)

        self.name = name
        self.description = description
        self._sequence = sequence
        self._cursor = 0

        self.history = HistoryManager(sequence, self.config.history.max_entries)
        self.playback = PlaybackScheduler(lambda: self._sequence, on_frame)

        self.last_transport_error: Optional[str] = None
        self.received: Deque[str] = deque(maxlen=MAX_LOG_LINES)
        self.acks: Dict[str, int] = {"ok": 0, "err": 0}

    # State

    @property
    def sequence(self) -> FrameSequence:
        return self._sequence

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def active_frame(self) -> Frame:
        return self._sequence[self._cursor]

    def select_frame(self, index: int) -> int:
        """Move the edit cursor, clamped to the sequence"""
        self._cursor = max(0, min(int(index), len(self._sequence) - 1))
        return self._cursor

    def _replace(self, sequence: FrameSequence) -> None:
        self._sequence = sequence
        self._cursor = max(0, min(self._cursor, len(sequence) - 1))
        self.playback.clamp()

    def _commit(self, sequence: FrameSequence, label: str) -> bool:
        if sequence is self._sequence:
            return False
        self._replace(sequence)
        self.history.commit(sequence, label)
        return True

    # Edits

    def toggle(self, x: int, y: int, z: int, force_value: Optional[int] = None) -> bool:
        """Flip or paint a cell of the active frame"""
        updated = edits.toggle_cell(self._sequence, self._cursor, x, y, z, force_value)
        return self._commit(updated, "toggle")

    def apply_pattern(
        self, pattern_id: str, rng: Optional[np.random.Generator] = None
    ) -> bool:
        updated = edits.apply_pattern(self._sequence, self._cursor, pattern_id, rng)
        return self._commit(updated, f"pattern:{pattern_id}")

    def set_delay(self, delay_ms: int) -> int:
        """Change the active frame's delay without recording history

        Call ``confirm_delay`` to record the change.
        """
        updated = edits.set_delay(
            self._sequence, self._cursor, delay_ms, self.config.delay
        )
        self._replace(updated)
        return self.active_frame.delay_ms

    def confirm_delay(self) -> bool:
        """Record pending delay changes as one history entry"""
        if self._sequence == self.history.current:
            return False
        self.history.commit(self._sequence, "delay")
        return True

    def add_frame(self) -> int:
        updated, index = edits.add_frame(self._sequence, self.config.delay)
        self._commit(updated, "add-frame")
        return self.select_frame(index)

    def duplicate_frame(self) -> int:
        updated, index = edits.duplicate_frame(self._sequence, self._cursor)
        self._commit(updated, "duplicate-frame")
        return self.select_frame(index)

    def clear_frame(self) -> bool:
        updated = edits.clear_frame(self._sequence, self._cursor)
        return self._commit(updated, "clear-frame")

    def delete_frame(self) -> int:
        deleted = self._cursor
        updated = edits.delete_frame(self._sequence, deleted, self.config.delay)
        self._commit(updated, "delete-frame")
        return self.select_frame(max(0, deleted - 1))

    def import_hex(self, text: str) -> bool:
        """Replace the active frame's grid with a decoded hex payload"""
        if text.strip().startswith(hexcodec.PAYLOAD_PREFIX):
            grid = hexcodec.parse_payload(text)
        else:
            grid = hexcodec.decode(text.strip())
        updated = self._sequence.replace_frame(
            self._cursor, self.active_frame.replace(grid=grid)
        )
        return self._commit(updated, "import-hex")

    # History

    def undo(self) -> bool:
        sequence = self.history.undo()
        if sequence is None:
            return False
        self._replace(sequence)
        return True

    def redo(self) -> bool:
        sequence = self.history.redo()
        if sequence is None:
            return False
        self._replace(sequence)
        return True

    def _load(self, sequence: FrameSequence, name: str, description: str, label: str):
        self._sequence = sequence
        self._cursor = 0
        self.name = name
        self.description = description
        self.history.reset(sequence, label)
        self.playback.clamp()

    def load_animation(
        self, animation_id: str, rng: Optional[np.random.Generator] = None
    ) -> bool:
        """Replace the scene with an example animation, starting a fresh history"""
        spec = patterns.get_animation(animation_id)
        if spec is None:
            logger.warning(f"Unknown animation: {animation_id}")
            return False

        sequence = spec.build(rng=rng)
        self._load(sequence, spec.scene_name, spec.description, f"animation:{spec.name}")
        logger.info(f"Loaded animation '{spec.name}' with {len(sequence)} frames")
        return True

    # Artifacts

    def export_scene(self, created_at: Optional[datetime] = None) -> str:
        return scene.export_scene(
            self.name, self.description, self._sequence, created_at
        )

    def import_scene(self, text: str) -> scene.SceneDocument:
        """Load a scene document

        Raises ParseError and keeps the current scene when the document is
        malformed.
        """
        document = scene.import_scene(text, delay_config=self.config.delay)
        self._load(
            document.to_sequence(self.config.delay),
            document.name,
            document.description,
            "import",
        )
        return document

    def firmware_source(self, variant: str = "multiplexed") -> str:
        return firmware.emit_firmware_source(
            self._sequence, variant, self.config.firmware
        )

    def payload(self, frame_index: Optional[int] = None) -> str:
        """Transport line for a frame, the active one by default"""
        index = self._cursor if frame_index is None else frame_index
        if not self._sequence.has_index(index):
            index = self._cursor
        return hexcodec.frame_payload(self._sequence[index].cube)

    # Live link

    async def send_frame(self, link: CubeLink, frame_index: Optional[int] = None) -> str:
        """Send a frame over ``link``; editing state is unaffected by failures"""
        line = self.payload(frame_index)
        try:
            await link.send_line(line)
        except TransportError as e:
            self.last_transport_error = str(e)
            logger.error(f"Failed to send frame: {e}")
            raise
        self.last_transport_error = None
        return line.strip()

    async def receive_lines(self, link: CubeLink) -> List[str]:
        try:
            lines = await link.read_lines()
        except TransportError as e:
            self.last_transport_error = str(e)
            logger.error(f"Failed to read from link: {e}")
            raise
        self.received.extend(lines)
        for line in lines:
            self._record_ack(line)
        return lines

    def _record_ack(self, line: str) -> None:
        """Count the device's OK/ERR replies to payload lines"""
        reply = line.strip().upper()
        if reply == "OK":
            self.acks["ok"] += 1
        elif reply == "ERR":
            self.acks["err"] += 1
            logger.warning("Cube rejected a payload line")

    # Playback

    def start_playback(self) -> None:
        self.playback.start()

    def stop_playback(self) -> None:
        self.playback.stop()

    def close(self) -> None:
        """Tear down the session, cancelling any scheduled playback tick"""
        self.playback.close()

    def get_state(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "cursor": self._cursor,
            "frames": [
                {"cube": cube.to_nested(frame.cube), "delayMs": frame.delay_ms}
                for frame in self._sequence
            ],
            "active_count": cube.count_on(self.active_frame.cube),
            "history": self.history.get_state(),
            "playback": self.playback.get_metrics(),
            "last_transport_error": self.last_transport_error,
            "acks": dict(self.acks),
        }
