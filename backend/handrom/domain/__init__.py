"""
Domain Models

Pure data structures for hand/wrist range-of-motion assessment.
No external dependencies - just Python dataclasses and enums.
"""

from .landmarks import (
    HAND_LANDMARK_COUNT,
    BodyPart,
    HandFrame,
    HandPoint,
    HandType,
    Landmark,
    PoseFrame,
    TrackingFrame,
)
from .angles import (
    FINGER_JOINTS,
    Finger,
    FingerJoint,
    FrameResult,
    JointAngles,
    KapandjiScore,
    WristAngles,
    WristDirection,
)
from .session import ArmSelection, JointHistory, LateralityLock, LateralityState, Session
from .report import SessionROMReport, WristROM

__all__ = [
    "HAND_LANDMARK_COUNT",
    "BodyPart",
    "HandFrame",
    "HandPoint",
    "HandType",
    "Landmark",
    "PoseFrame",
    "TrackingFrame",
    "FINGER_JOINTS",
    "Finger",
    "FingerJoint",
    "FrameResult",
    "JointAngles",
    "KapandjiScore",
    "WristAngles",
    "WristDirection",
    "ArmSelection",
    "JointHistory",
    "LateralityLock",
    "LateralityState",
    "Session",
    "SessionROMReport",
    "WristROM",
]
