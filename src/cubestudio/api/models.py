from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..config import StudioDefaults

_MAX_COORD = StudioDefaults.CUBE_SIZE - 1


# Base Models
class BaseResponse(BaseModel):
    """Base response model with status and message"""

    status: str
    message: str


class ErrorResponse(BaseResponse):
    """Error response model"""

    detail: str


# Requests
class ToggleRequest(BaseModel):
    """Toggle or paint one cell of the active frame"""

    x: int = Field(..., ge=0, le=_MAX_COORD)
    y: int = Field(..., ge=0, le=_MAX_COORD)
    z: int = Field(..., ge=0, le=_MAX_COORD)
    value: Optional[int] = Field(None, ge=0, le=1)


class CursorRequest(BaseModel):
    index: int


class DelayRequest(BaseModel):
    """Change the active frame's delay; ``confirm`` records it in history"""

    delay_ms: int
    confirm: bool = False


class HexImportRequest(BaseModel):
    hex: str


# Responses
class EditResponse(BaseResponse):
    """Result of an edit with the resulting cursor"""

    changed: bool
    cursor: int
    frame_count: int


class FrameState(BaseModel):
    cube: List[List[List[int]]]
    delayMs: int


class HistoryState(BaseModel):
    length: int
    position: int
    can_undo: bool
    can_redo: bool
    max_entries: int


class StudioState(BaseModel):
    """Complete editor state"""

    name: str
    description: str
    cursor: int
    frames: List[FrameState]
    active_count: int
    history: HistoryState
    playback: Dict[str, Any]
    last_transport_error: Optional[str] = None
    acks: Dict[str, int] = {}


class PayloadResponse(BaseModel):
    frame_index: int
    hex: str
    payload: str


class PatternDefinition(BaseModel):
    name: str
    description: str
    deterministic: bool = True


class PatternList(BaseModel):
    patterns: List[PatternDefinition]
    animations: List[str]
