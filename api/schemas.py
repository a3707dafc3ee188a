import math
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from repcore.config import Direction


class DetectionIn(BaseModel):
    score: float = Field(..., ge=0.0, le=1.0, description="Detection confidence in [0, 1].")
    x: float = Field(..., description="Centre x in model space.")
    y: float = Field(..., description="Centre y in model space.")

    @field_validator("x", "y")
    @classmethod
    def coordinates_are_finite(cls, v: float) -> float:
        if math.isnan(v) or math.isinf(v):
            raise ValueError("coordinates must be finite numbers")
        return v


class SessionCreate(BaseModel):
    direction: Direction = Field(Direction.RISING, description="Reversal direction that closes a repetition.")
    view_width: Optional[float] = Field(None, gt=0, description="Optional view width for model-to-view scaling.")
    view_height: Optional[float] = Field(None, gt=0, description="Optional view height for model-to-view scaling.")


class FrameRequest(BaseModel):
    """
    Detections for one processed frame, already confidence- and class-filtered upstream.
    An empty list is a valid frame and counts towards detection loss.
    """
    detections: List[DetectionIn] = Field(default_factory=list)


class PointOut(BaseModel):
    x: int
    y: int
    ydiff: int


class EventOut(BaseModel):
    type: str = Field(..., description="'state_changed' or 'rep_incremented'.")
    state: Optional[str] = None
    previous: Optional[str] = None
    count: Optional[int] = None


class FrameResponse(BaseModel):
    state: str
    count: int
    events: List[EventOut] = Field(default_factory=list)
    clusters: List[DetectionIn] = Field(default_factory=list)
    point: Optional[PointOut] = None


class SessionResponse(BaseModel):
    session_id: str
    state: str
    count: int
    history: int = Field(0, description="Number of points currently buffered.")
