import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse, Response

from .. import patterns
from ..codec import hexcodec
from ..common.exceptions import ParseError
from ..core.session import EditorSession
from ..export.firmware import VARIANTS
from ..transport.base import CubeLink
from .models import (
    BaseResponse,
    CursorRequest,
    DelayRequest,
    EditResponse,
    HexImportRequest,
    PatternDefinition,
    PatternList,
    PayloadResponse,
    StudioState,
    ToggleRequest,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["studio"])


def get_session(request: Request) -> EditorSession:
    """Dependency injection for the editing session"""
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(status_code=503, detail="Editor session not initialized")
    return session


def get_link(request: Request) -> CubeLink:
    link = getattr(request.app.state, "link", None)
    if link is None:
        raise HTTPException(status_code=503, detail="No cube link configured")
    return link


def _edit_response(session: EditorSession, changed: bool, message: str) -> EditResponse:
    return EditResponse(
        status="success" if changed else "unchanged",
        message=message,
        changed=changed,
        cursor=session.cursor,
        frame_count=len(session.sequence),
    )


@router.get("/patterns", response_model=PatternList)
async def list_patterns():
    """List pattern fills and example animations"""
    return PatternList(
        patterns=[
            PatternDefinition(**entry) for entry in patterns.pattern_registry.describe()
        ],
        animations=patterns.list_animations(),
    )


@router.get("/studio", response_model=StudioState)
async def get_state(session: EditorSession = Depends(get_session)):
    return session.get_state()


@router.post("/studio/toggle", response_model=EditResponse)
async def toggle(request: ToggleRequest, session: EditorSession = Depends(get_session)):
    changed = session.toggle(request.x, request.y, request.z, request.value)
    return _edit_response(session, changed, f"Toggled ({request.x}, {request.y}, {request.z})")


@router.post("/studio/pattern/{pattern_id}", response_model=EditResponse)
async def apply_pattern(pattern_id: str, session: EditorSession = Depends(get_session)):
    if pattern_id not in patterns.pattern_registry:
        raise HTTPException(status_code=404, detail=f"Unknown pattern: {pattern_id}")
    changed = session.apply_pattern(pattern_id)
    return _edit_response(session, changed, f"Applied pattern {pattern_id}")


@router.post("/studio/frames", response_model=EditResponse)
async def add_frame(session: EditorSession = Depends(get_session)):
    session.add_frame()
    return _edit_response(session, True, "Added frame")


@router.post("/studio/frames/duplicate", response_model=EditResponse)
async def duplicate_frame(session: EditorSession = Depends(get_session)):
    session.duplicate_frame()
    return _edit_response(session, True, "Duplicated frame")


@router.post("/studio/frames/clear", response_model=EditResponse)
async def clear_frame(session: EditorSession = Depends(get_session)):
    changed = session.clear_frame()
    return _edit_response(session, changed, "Cleared frame")


@router.delete("/studio/frames", response_model=EditResponse)
async def delete_frame(session: EditorSession = Depends(get_session)):
    session.delete_frame()
    return _edit_response(session, True, "Deleted frame")


@router.put("/studio/cursor", response_model=EditResponse)
async def select_frame(request: CursorRequest, session: EditorSession = Depends(get_session)):
    session.select_frame(request.index)
    return _edit_response(session, False, f"Selected frame {session.cursor}")


@router.put("/studio/delay", response_model=EditResponse)
async def set_delay(request: DelayRequest, session: EditorSession = Depends(get_session)):
    delay = session.set_delay(request.delay_ms)
    changed = session.confirm_delay() if request.confirm else False
    return _edit_response(session, changed, f"Frame delay set to {delay}ms")


@router.post("/studio/undo", response_model=EditResponse)
async def undo(session: EditorSession = Depends(get_session)):
    return _edit_response(session, session.undo(), "Undo")


@router.post("/studio/redo", response_model=EditResponse)
async def redo(session: EditorSession = Depends(get_session)):
    return _edit_response(session, session.redo(), "Redo")


@router.post("/studio/animations/{animation_id}", response_model=EditResponse)
async def load_animation(animation_id: str, session: EditorSession = Depends(get_session)):
    if not session.load_animation(animation_id):
        raise HTTPException(status_code=404, detail=f"Unknown animation: {animation_id}")
    return _edit_response(session, True, f"Loaded {session.name}")


@router.post("/studio/hex", response_model=EditResponse)
async def import_hex(request: HexImportRequest, session: EditorSession = Depends(get_session)):
    changed = session.import_hex(request.hex)
    return _edit_response(session, changed, "Imported cube pattern from hex")


@router.get("/studio/payload", response_model=PayloadResponse)
async def get_payload(
    frame: Optional[int] = Query(None, ge=0),
    session: EditorSession = Depends(get_session),
):
    index = frame if frame is not None and session.sequence.has_index(frame) else session.cursor
    payload = session.payload(index)
    return PayloadResponse(
        frame_index=index,
        hex=hexcodec.encode(session.sequence[index].cube),
        payload=payload.strip(),
    )


@router.get("/studio/firmware", response_class=PlainTextResponse)
async def get_firmware(
    variant: str = Query("multiplexed"),
    session: EditorSession = Depends(get_session),
):
    if variant not in VARIANTS:
        raise HTTPException(status_code=400, detail=f"Unknown firmware variant: {variant}")
    return PlainTextResponse(session.firmware_source(variant))


@router.get("/studio/scene")
async def export_scene(session: EditorSession = Depends(get_session)):
    return Response(content=session.export_scene(), media_type="application/json")


@router.post("/studio/scene", response_model=EditResponse)
async def import_scene(request: Request, session: EditorSession = Depends(get_session)):
    """Import a scene document; a malformed one leaves the current scene loaded"""
    body = await request.body()
    try:
        document = session.import_scene(body.decode("utf-8", errors="replace"))
    except ParseError as e:
        logger.warning(f"Rejected scene import: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    return _edit_response(session, True, f"Imported scene '{document.name}'")


@router.post("/studio/send", response_model=BaseResponse)
async def send_frame(
    session: EditorSession = Depends(get_session), link: CubeLink = Depends(get_link)
):
    if not link.is_connected:
        await link.connect()
    line = await session.send_frame(link)
    return BaseResponse(status="success", message=line)


@router.post("/studio/playback/start", response_model=BaseResponse)
async def start_playback(session: EditorSession = Depends(get_session)):
    session.start_playback()
    return BaseResponse(status="success", message="Playback started")


@router.post("/studio/playback/stop", response_model=BaseResponse)
async def stop_playback(session: EditorSession = Depends(get_session)):
    session.stop_playback()
    return BaseResponse(status="success", message="Playback stopped")
