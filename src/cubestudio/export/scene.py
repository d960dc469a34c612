"""Scene documents: JSON export and import of a frame sequence."""

from datetime import datetime, timezone
from typing import List, Optional
import logging

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..common.exceptions import EmptySequenceError, ParseError, ValidationError
from ..config import DelayConfig, StudioDefaults
from ..model import cube
from ..model.frames import Frame, FrameSequence, blank_frame

logger = logging.getLogger(__name__)

DEFAULT_SCENE_NAME = "Untitled Scene"
IMPORTED_SCENE_NAME = "Imported Scene"


class FrameModel(BaseModel):
    """One frame as stored in a scene file"""

    model_config = ConfigDict(populate_by_name=True)

    cube: List[List[List[int]]]
    delay_ms: int = Field(StudioDefaults.DEFAULT_DELAY_MS, alias="delayMs")

    @field_validator("cube")
    @classmethod
    def validate_cube(cls, v):
        try:
            cube.from_nested(v)
        except ValidationError as e:
            raise ValueError(str(e)) from e
        return v

    @classmethod
    def from_frame(cls, frame: Frame) -> "FrameModel":
        return cls(cube=cube.to_nested(frame.cube), delay_ms=frame.delay_ms)

    def to_frame(self, delay_config: Optional[DelayConfig] = None) -> Frame:
        delay = (delay_config or DelayConfig()).clamp(self.delay_ms)
        return Frame(cube=cube.from_nested(self.cube), delay_ms=delay)


class SceneDocument(BaseModel):
    """Exportable bundle of scene metadata and frames"""

    model_config = ConfigDict(populate_by_name=True)

    name: str = IMPORTED_SCENE_NAME
    description: str = ""
    frames: List[FrameModel]
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="createdAt"
    )

    @field_validator("name")
    @classmethod
    def default_name(cls, v):
        return v or IMPORTED_SCENE_NAME

    @classmethod
    def from_sequence(
        cls,
        name: str,
        description: str,
        sequence: FrameSequence,
        created_at: Optional[datetime] = None,
    ) -> "SceneDocument":
        return cls(
            name=name or DEFAULT_SCENE_NAME,
            description=description or "",
            frames=[FrameModel.from_frame(frame) for frame in sequence],
            created_at=created_at or datetime.now(timezone.utc),
        )

    def to_sequence(self, delay_config: Optional[DelayConfig] = None) -> FrameSequence:
        return FrameSequence(frame.to_frame(delay_config) for frame in self.frames)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


def export_scene(
    name: str,
    description: str,
    sequence: FrameSequence,
    created_at: Optional[datetime] = None,
) -> str:
    """Serialize a sequence and its metadata as a JSON document

    Output depends only on the inputs; ``created_at`` defaults to now.
    """
    document = SceneDocument.from_sequence(name, description, sequence, created_at)
    return document.to_json()


def import_scene(
    text: str, strict: bool = False, delay_config: Optional[DelayConfig] = None
) -> SceneDocument:
    """Parse a scene document

    Raises ParseError on malformed JSON or structure. Frame delays are
    clamped into ``delay_config``'s range. A document whose frame list is
    empty is recovered with a single blank frame; with ``strict=True`` an
    EmptySequenceError carrying that recovered document is raised instead.
    """
    delay_config = delay_config or DelayConfig()
    try:
        document = SceneDocument.model_validate_json(text)
    except pydantic.ValidationError as e:
        raise ParseError(f"Invalid scene document: {e.error_count()} error(s): {e}") from e

    if not document.frames:
        blank = blank_frame(delay_config.default_delay_ms)
        recovered = document.model_copy(update={"frames": [FrameModel.from_frame(blank)]})
        if strict:
            raise EmptySequenceError("Scene has no frames", document=recovered)
        logger.warning(f"Scene '{document.name}' has no frames, using a blank frame")
        return recovered

    frames = [
        frame.model_copy(update={"delay_ms": delay_config.clamp(frame.delay_ms)})
        for frame in document.frames
    ]
    logger.info(f"Imported scene '{document.name}' with {len(frames)} frames")
    return document.model_copy(update={"frames": frames})
