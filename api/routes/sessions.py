from __future__ import annotations

from fastapi import APIRouter, Response

from api.schemas import FrameRequest, FrameResponse, SessionCreate, SessionResponse
from api.services.sessions import describe, registry

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(payload: SessionCreate | None = None) -> SessionResponse:
    return registry.create(payload or SessionCreate())


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str) -> SessionResponse:
    handle = registry.get(session_id)
    return describe(session_id, handle.session)


@router.post("/{session_id}/frames", response_model=FrameResponse)
async def post_frame(session_id: str, payload: FrameRequest) -> FrameResponse:
    """
    Process one frame of detections. Frames for the same session are applied strictly in
    arrival order.
    """
    return await registry.process(session_id, payload.detections)


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str) -> Response:
    registry.remove(session_id)
    return Response(status_code=204)
