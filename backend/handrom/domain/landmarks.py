"""
Landmark Domain Models

Data structures for the per-frame landmark arrays supplied by the
external tracker (MediaPipe Hands + Pose topology).

MediaPipe Hands returns 21 landmarks per hand, MediaPipe Pose returns 33:
https://developers.google.com/mediapipe/solutions/vision/hand_landmarker
https://developers.google.com/mediapipe/solutions/vision/pose_landmarker
"""
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional


HAND_LANDMARK_COUNT = 21


class HandPoint(IntEnum):
    """MediaPipe Hands landmark indices."""
    WRIST = 0

    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4

    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8

    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12

    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16

    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


class BodyPart(IntEnum):
    """
    MediaPipe Pose landmark indices.

    Only the upper-limb points are used by the wrist calculator.
    """
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16


class HandType(str, Enum):
    """Laterality of the tracked hand/arm."""
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    UNKNOWN = "UNKNOWN"

    @property
    def mirrored(self) -> "HandType":
        """The opposite side (UNKNOWN stays UNKNOWN)."""
        if self is HandType.LEFT:
            return HandType.RIGHT
        if self is HandType.RIGHT:
            return HandType.LEFT
        return HandType.UNKNOWN


@dataclass(frozen=True)
class Landmark:
    """
    A single tracked point.

    Attributes:
        x: Horizontal position (0.0 = left edge, 1.0 = right edge)
        y: Vertical position (0.0 = top edge, 1.0 = bottom edge)
        z: Relative depth (no fixed unit)
        visibility: Tracker confidence (0.0 to 1.0). Hand landmarks
            carry none, so it defaults to 1.0.
    """
    x: float
    y: float
    z: float = 0.0
    visibility: float = 1.0

    def is_visible(self, threshold: float = 0.5) -> bool:
        """Check if landmark is visible above confidence threshold."""
        return self.visibility > threshold

    def distance_to(self, other: "Landmark") -> float:
        """Calculate 3D Euclidean distance to another landmark."""
        return (
            (self.x - other.x) ** 2 +
            (self.y - other.y) ** 2 +
            (self.z - other.z) ** 2
        ) ** 0.5

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class HandFrame:
    """
    The 21 hand landmarks of one frame.

    An empty landmark list means no hand was detected.
    """
    landmarks: tuple[Landmark, ...] = ()

    @property
    def is_complete(self) -> bool:
        """True when the full 21-point topology is present."""
        return len(self.landmarks) >= HAND_LANDMARK_COUNT

    def get_landmark(self, point: HandPoint) -> Optional[Landmark]:
        """Get a specific landmark by hand point."""
        index = int(point)
        if 0 <= index < len(self.landmarks):
            return self.landmarks[index]
        return None


@dataclass(frozen=True)
class PoseFrame:
    """
    Sparse body pose for one frame.

    Attributes:
        landmarks: Up to 33 pose landmarks in MediaPipe order
    """
    landmarks: tuple[Landmark, ...] = ()

    def get_landmark(self, body_part: BodyPart) -> Optional[Landmark]:
        """Get a specific landmark by body part."""
        index = int(body_part)
        if 0 <= index < len(self.landmarks):
            return self.landmarks[index]
        return None

    @property
    def has_arms(self) -> bool:
        """True when both shoulders, elbows and wrists are present."""
        return len(self.landmarks) > int(BodyPart.RIGHT_WRIST)

    # -------------------------------------------------------------------------
    # Convenience methods for landmark groups
    # -------------------------------------------------------------------------

    @property
    def left_arm(self) -> tuple[Optional[Landmark], ...]:
        """Get left arm landmarks (shoulder, elbow, wrist)."""
        return (
            self.get_landmark(BodyPart.LEFT_SHOULDER),
            self.get_landmark(BodyPart.LEFT_ELBOW),
            self.get_landmark(BodyPart.LEFT_WRIST),
        )

    @property
    def right_arm(self) -> tuple[Optional[Landmark], ...]:
        """Get right arm landmarks (shoulder, elbow, wrist)."""
        return (
            self.get_landmark(BodyPart.RIGHT_SHOULDER),
            self.get_landmark(BodyPart.RIGHT_ELBOW),
            self.get_landmark(BodyPart.RIGHT_WRIST),
        )


@dataclass(frozen=True)
class TrackingFrame:
    """
    One emission of the external tracker.

    Attributes:
        hand: Hand landmarks (empty if no hand this frame)
        pose: Pose landmarks (empty if no body this frame)
        handedness: Tracker-reported handedness label
        tracking_quality: Overall tracking quality (0.0 to 1.0)
        timestamp_ms: Capture timestamp in milliseconds
        frame_number: Sequential frame number
    """
    hand: HandFrame = field(default_factory=HandFrame)
    pose: PoseFrame = field(default_factory=PoseFrame)
    handedness: HandType = HandType.UNKNOWN
    tracking_quality: float = 1.0
    timestamp_ms: int = 0
    frame_number: int = 0
