"""
Schemas

Pydantic models for the engine's JSON input (tracker frames, frame
logs) and output (frame results, session reports).
"""

from .frames import (
    HandTypeEnum,
    LandmarkSchema,
    TrackingFrameSchema,
    FrameLogSchema,
)

from .report import (
    JointAnglesSchema,
    WristAnglesSchema,
    WristROMSchema,
    SessionROMReportSchema,
    FrameResultSchema,
    convert_report,
    convert_frame_result,
)

__all__ = [
    # Input schemas
    "HandTypeEnum",
    "LandmarkSchema",
    "TrackingFrameSchema",
    "FrameLogSchema",
    # Output schemas
    "JointAnglesSchema",
    "WristAnglesSchema",
    "WristROMSchema",
    "SessionROMReportSchema",
    "FrameResultSchema",
    "convert_report",
    "convert_frame_result",
]
