"""
Session registry backing the HTTP surface.

Each session owns a RepSession and an asyncio.Lock; every frame for a session is processed
under that lock so concurrent requests are funnelled into one ordered stream.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List
from uuid import uuid4

from fastapi import HTTPException

from api.schemas import DetectionIn, EventOut, FrameResponse, PointOut, SessionCreate, SessionResponse
from repcore.config import CounterConfig, DetectionConfig
from repcore.io.counter_store import InMemoryCounterStore
from repcore.io.normalization import ViewTransform
from repcore.repdetect.machine import Event, RepIncremented, StateChanged
from repcore.repdetect.session import FrameResult, RepSession
from repcore.vision.detections import Detection

logger = logging.getLogger(__name__)


@dataclass
class SessionHandle:
    session: RepSession
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class SessionRegistry:
    def __init__(self) -> None:
        self._sessions: Dict[str, SessionHandle] = {}

    def create(self, payload: SessionCreate) -> SessionResponse:
        detection_config = DetectionConfig()
        session = RepSession(
            InMemoryCounterStore(),
            counter_config=CounterConfig(direction=payload.direction),
            detection_config=detection_config,
            transform=ViewTransform.from_config(detection_config, payload.view_width, payload.view_height),
        )
        session_id = uuid4().hex
        self._sessions[session_id] = SessionHandle(session=session)
        logger.info("Created session %s", session_id)
        return describe(session_id, session)

    def get(self, session_id: str) -> SessionHandle:
        handle = self._sessions.get(session_id)
        if handle is None:
            raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
        return handle

    def remove(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
        logger.info("Removed session %s", session_id)

    async def process(self, session_id: str, detections: List[DetectionIn]) -> FrameResponse:
        handle = self.get(session_id)
        frame = [Detection(score=d.score, x=d.x, y=d.y) for d in detections]
        async with handle.lock:
            if self._sessions.get(session_id) is not handle:
                raise HTTPException(status_code=404, detail=f"Session was removed: {session_id}")
            result = handle.session.process_frame(frame)
            count = handle.session.count
        return _frame_response(result, count)


def describe(session_id: str, session: RepSession) -> SessionResponse:
    return SessionResponse(
        session_id=session_id,
        state=session.state.value,
        count=session.count,
        history=len(session.context.history),
    )


def _event_out(event: Event) -> EventOut:
    if isinstance(event, StateChanged):
        return EventOut(type="state_changed", state=event.state.value, previous=event.previous.value)
    if isinstance(event, RepIncremented):
        return EventOut(type="rep_incremented", count=event.count)
    raise TypeError(f"Unsupported event: {event!r}")


def _frame_response(result: FrameResult, count: int) -> FrameResponse:
    point = result.point
    return FrameResponse(
        state=result.state.value,
        count=count,
        events=[_event_out(event) for event in result.events],
        clusters=[DetectionIn(score=c.score, x=c.x, y=c.y) for c in result.clusters],
        point=PointOut(x=point.x, y=point.y, ydiff=point.ydiff) if point is not None else None,
    )


registry = SessionRegistry()
