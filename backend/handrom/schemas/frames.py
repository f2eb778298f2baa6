"""
Frame Input Schemas

Pydantic models for the landmark frames produced by the external
tracker. Keys are accepted in camelCase (as the tracker emits them) or
snake_case.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from ..domain.landmarks import HandFrame, HandType, Landmark, PoseFrame, TrackingFrame


class HandTypeEnum(str, Enum):
    """Hand laterality for the wire format."""
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    UNKNOWN = "UNKNOWN"

    def to_domain(self) -> HandType:
        return HandType(self.value)


class LandmarkSchema(BaseModel):
    """
    Single tracked landmark.

    Coordinates are normalized image coordinates; hand landmarks may sit
    slightly outside 0-1 near the frame edges, so they are not bounded.
    """
    x: float = Field(..., description="Horizontal position (0=left, 1=right)")
    y: float = Field(..., description="Vertical position (0=top, 1=bottom)")
    z: float = Field(0.0, description="Relative depth (negative=closer to camera)")
    visibility: float = Field(1.0, ge=0.0, le=1.0, description="Tracker confidence")

    class Config:
        json_schema_extra = {
            "example": {
                "x": 0.45,
                "y": 0.32,
                "z": -0.05,
                "visibility": 0.95
            }
        }

    def to_domain(self) -> Landmark:
        return Landmark(x=self.x, y=self.y, z=self.z, visibility=self.visibility)


class TrackingFrameSchema(BaseModel):
    """
    One frame of tracker output.

    Empty landmark lists mean nothing was detected in that frame.
    """
    hand_landmarks: List[LandmarkSchema] = Field(default_factory=list, description="21 hand landmarks")
    pose_landmarks: List[LandmarkSchema] = Field(default_factory=list, description="33 pose landmarks")
    handedness: HandTypeEnum = Field(HandTypeEnum.UNKNOWN, description="Tracker handedness label")
    tracking_quality: float = Field(1.0, ge=0.0, le=1.0, description="Overall tracking quality")
    timestamp_ms: int = Field(..., ge=0, description="Capture timestamp in milliseconds")
    frame_number: int = Field(0, ge=0, description="Sequential frame number")

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "handLandmarks": [{"x": 0.5, "y": 0.6, "z": 0.0}],
                "poseLandmarks": [{"x": 0.4, "y": 0.3, "z": -0.2, "visibility": 0.98}],
                "handedness": "RIGHT",
                "trackingQuality": 0.93,
                "timestampMs": 1500,
                "frameNumber": 45
            }
        }

    def to_domain(self) -> TrackingFrame:
        return TrackingFrame(
            hand=HandFrame(tuple(lm.to_domain() for lm in self.hand_landmarks)),
            pose=PoseFrame(tuple(lm.to_domain() for lm in self.pose_landmarks)),
            handedness=self.handedness.to_domain(),
            tracking_quality=self.tracking_quality,
            timestamp_ms=self.timestamp_ms,
            frame_number=self.frame_number,
        )


class FrameLogSchema(BaseModel):
    """
    A stored recording, as replayed by the re-scoring command.

    hand_type is the hand the exercise was recorded for, when known; it
    locks laterality before the first frame.
    """
    frames: List[TrackingFrameSchema] = Field(..., description="Frames in recording order")
    hand_type: HandTypeEnum = Field(HandTypeEnum.UNKNOWN, description="Recorded hand, if known")

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def to_domain(self) -> List[TrackingFrame]:
        return [frame.to_domain() for frame in self.frames]
